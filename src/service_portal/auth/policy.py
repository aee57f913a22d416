"""
service_portal.auth.policy

Authorization policy. Pure functions over a resolved `Identity`; no I/O.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from service_portal.auth.models import Identity
from service_portal.errors import Forbidden

ADMIN_GROUP = "admin"


def is_admin(identity: Identity) -> bool:
    return ADMIN_GROUP in identity.groups


def can_view(identity: Identity, entry: Any) -> bool:
    # Any shared group grants visibility; no groups on either side means no access.
    allowed: Iterable[str] = getattr(entry, "allowed_groups", None) or ()
    return not identity.groups.isdisjoint(allowed)


def owns_resource(identity: Identity, record: Any) -> bool:
    owner = getattr(record, "owner_key", None)
    if owner is None:
        owner = getattr(record, "recipient_key", None)
    return owner is not None and owner == identity.key


def visible_to(identity: Identity) -> Callable[[Any], bool]:
    return lambda entry: can_view(identity, entry)


def owned_by(identity: Identity) -> Callable[[Any], bool]:
    return lambda record: owns_resource(identity, record)


def require_admin(identity: Identity) -> Identity:
    if not is_admin(identity):
        raise Forbidden("Administrator access required")
    return identity
