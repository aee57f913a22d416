"""
service_portal.auth.providers

Identity provider boundary.

Responsibilities:
- `ForwardAuthProvider`: ask the provider's verification endpoint who owns the
  forwarded credential (forward-auth style, principal reported in headers).
- `SessionTokenProvider`: validate a signed session token locally.
- Map provider outcomes onto the auth failure kinds (rejection vs outage).
"""

from __future__ import annotations

from typing import Protocol

import httpx

from service_portal.auth.jwt import SessionTokenConfig, SessionTokenError, decode_session_token
from service_portal.auth.models import ProviderClaims, SessionCredential
from service_portal.errors import Unauthenticated, Unavailable
from service_portal.observability.logging import get_logger
from service_portal.settings import Settings

log = get_logger(__name__)


class IdentityProvider(Protocol):
    async def verify(self, credential: SessionCredential) -> ProviderClaims: ...


class ForwardAuthProvider:
    """
    The verification endpoint answers 2xx plus `remote-*` headers for a valid
    session and any other status for an invalid one.
    """

    def __init__(self, *, settings: Settings, http: httpx.AsyncClient) -> None:
        self._settings = settings
        self._http = http

    def _forward_headers(self, credential: SessionCredential) -> dict[str, str]:
        headers: dict[str, str] = {}
        if credential.cookie:
            headers["Cookie"] = credential.cookie
        if credential.authorization:
            headers["Authorization"] = credential.authorization
        return headers

    async def verify(self, credential: SessionCredential) -> ProviderClaims:
        s = self._settings
        try:
            r = await self._http.post(
                s.identity_verify_url,
                headers=self._forward_headers(credential),
                timeout=s.identity_timeout_seconds,
            )
        except httpx.TimeoutException as e:
            log.warning("identity_provider_timeout", timeout_s=s.identity_timeout_seconds)
            raise Unavailable("Identity provider did not respond in time") from e
        except httpx.TransportError as e:
            log.warning("identity_provider_unreachable", error=str(e))
            raise Unavailable("Identity provider is unreachable") from e

        if not r.is_success:
            log.info("identity_provider_rejected", status=r.status_code)
            raise Unauthenticated("Rejected by identity provider")

        principal = (r.headers.get(s.identity_user_header) or "").strip()
        if not principal:
            raise Unauthenticated("Identity provider returned no principal")

        groups = next(
            (r.headers[h] for h in s.identity_groups_headers if r.headers.get(h)),
            "",
        )
        return ProviderClaims(
            principal=principal,
            email=r.headers.get(s.identity_email_header),
            display_name=r.headers.get(s.identity_name_header),
            groups=groups,
        )


class SessionTokenProvider:
    """
    Validates the session token carried in the session cookie or as a bearer
    token. The principal key is the email claim, falling back to `sub`.
    """

    def __init__(self, *, settings: Settings) -> None:
        self._cfg = SessionTokenConfig.from_settings(settings)

    @staticmethod
    def _token(credential: SessionCredential) -> str | None:
        if credential.session_token:
            return credential.session_token
        scheme, _, value = (credential.authorization or "").partition(" ")
        if scheme.lower() == "bearer" and value.strip():
            return value.strip()
        return None

    async def verify(self, credential: SessionCredential) -> ProviderClaims:
        token = self._token(credential)
        if token is None:
            raise Unauthenticated("Missing session token")
        try:
            claims = decode_session_token(cfg=self._cfg, token=token)
        except SessionTokenError as e:
            log.info("session_token_rejected", reason=str(e))
            raise Unauthenticated(f"Invalid session: {e}") from e

        email = claims.get("email") or None
        principal = str(email or claims.get("sub") or "").strip()
        if not principal:
            raise Unauthenticated("Session carries no principal")

        groups = claims.get("groups")
        if groups is not None and not isinstance(groups, str | list):
            raise Unauthenticated("Invalid groups claim")
        return ProviderClaims(
            principal=principal,
            email=email,
            display_name=claims.get("name") or claims.get("preferred_username"),
            groups=groups,
        )


def build_identity_provider(
    settings: Settings, *, http: httpx.AsyncClient | None
) -> IdentityProvider:
    if settings.auth_mode == "session_token":
        return SessionTokenProvider(settings=settings)
    if http is None:
        raise ValueError("forward_auth mode needs an HTTP client")
    return ForwardAuthProvider(settings=settings, http=http)
