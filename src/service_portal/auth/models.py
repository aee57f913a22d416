"""
service_portal.auth.models

Auth domain models.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SessionCredential:
    """
    Raw credential material lifted off an incoming request.
    """

    cookie: str | None = None
    authorization: str | None = None
    session_token: str | None = None

    @property
    def is_empty(self) -> bool:
        return not (self.cookie or self.authorization or self.session_token)


@dataclass(frozen=True, slots=True)
class ProviderClaims:
    # What the identity provider reported, before normalization.
    principal: str
    email: str | None = None
    display_name: str | None = None
    groups: str | list[str] | None = None


@dataclass(frozen=True, slots=True)
class Identity:
    """
    Authenticated caller identity, threaded explicitly into every handler.
    """

    key: str
    email: str | None
    display_name: str | None
    avatar_url: str | None
    groups: frozenset[str]
