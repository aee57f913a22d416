"""
service_portal.auth.jwt

Session token issuing and validation helpers.

Responsibilities:
- Issue signed session tokens for local/dev logins and tests.
- Decode and validate session tokens with strict claim requirements.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import InvalidTokenError

from service_portal.settings import Settings


@dataclass(frozen=True, slots=True)
class SessionTokenConfig:
    alg: str
    issuer: str
    audience: str
    secret: str
    # Tolerated clock skew between the issuer and this process.
    leeway_seconds: int = 30

    @classmethod
    def from_settings(cls, settings: Settings) -> SessionTokenConfig:
        return cls(
            alg=settings.session_alg,
            issuer=settings.session_issuer,
            audience=settings.session_audience,
            secret=settings.session_secret,
            leeway_seconds=settings.session_leeway_seconds,
        )


class SessionTokenError(Exception):
    pass


def issue_session_token(
    *,
    cfg: SessionTokenConfig,
    subject: str,
    email: str | None = None,
    name: str | None = None,
    groups: list[str] | None = None,
    ttl: timedelta = timedelta(hours=24),
) -> str:
    now = datetime.now(tz=UTC)
    payload: dict[str, Any] = {
        "iss": cfg.issuer,
        "aud": cfg.audience,
        "sub": subject,
        "groups": groups or [],
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
    }
    if email:
        payload["email"] = email
    if name:
        payload["name"] = name
    return jwt.encode(payload, cfg.secret, algorithm=cfg.alg)


def decode_session_token(*, cfg: SessionTokenConfig, token: str) -> dict[str, Any]:
    try:
        return jwt.decode(
            token,
            cfg.secret,
            algorithms=[cfg.alg],
            issuer=cfg.issuer,
            audience=cfg.audience,
            leeway=cfg.leeway_seconds,
            options={"require": ["exp", "iat", "iss", "aud", "sub"]},
        )
    except InvalidTokenError as e:
        raise SessionTokenError(str(e)) from e
