"""
service_portal.db.validation

Field checks applied by repositories before anything is persisted.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from service_portal.errors import ValidationError


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, list | tuple | set | frozenset):
        return not value
    return False


def require_fields(**fields: Any) -> None:
    missing = [name for name, value in fields.items() if _is_blank(value)]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


def clean_groups(values: Iterable[str] | None) -> list[str]:
    """
    Trim, drop blanks and de-duplicate while keeping first-seen order.
    """

    seen: dict[str, None] = {}
    for value in values or ():
        group = str(value).strip()
        if group:
            seen.setdefault(group, None)
    return list(seen)
