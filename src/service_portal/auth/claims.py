"""
service_portal.auth.claims

Normalization of provider claims into an `Identity`.

Providers disagree on the shape of the groups claim (comma-delimited header vs
native list); everything past this module only sees a `frozenset[str]`.
"""

from __future__ import annotations

import hashlib

from service_portal.auth.models import Identity, ProviderClaims
from service_portal.db.validation import clean_groups

GRAVATAR_URL = "https://www.gravatar.com/avatar/{digest}?d=identicon&s=200"


def parse_groups(raw: str | list[str] | tuple[str, ...] | None) -> frozenset[str]:
    if raw is None:
        return frozenset()
    if isinstance(raw, str):
        return frozenset(clean_groups(raw.split(",")))
    return frozenset(clean_groups(str(g) for g in raw))


def avatar_url_for(email: str | None) -> str | None:
    if not email or not email.strip():
        return None
    digest = hashlib.md5(email.strip().lower().encode("utf-8")).hexdigest()
    return GRAVATAR_URL.format(digest=digest)


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def identity_from_claims(claims: ProviderClaims) -> Identity:
    email = _blank_to_none(claims.email)
    return Identity(
        key=claims.principal,
        email=email,
        display_name=_blank_to_none(claims.display_name),
        avatar_url=avatar_url_for(email),
        groups=parse_groups(claims.groups),
    )
