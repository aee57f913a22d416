"""
service_portal.auth.deps

FastAPI dependency functions for authentication.

Responsibilities:
- Lift the session credential off the request and resolve it through the gate.
"""

from __future__ import annotations

from fastapi import Depends, Request

from service_portal.auth.gate import AuthenticationGate
from service_portal.auth.models import Identity, SessionCredential


def credential_from_request(request: Request) -> SessionCredential:
    cookie_name = request.app.state.settings.session_cookie_name
    return SessionCredential(
        cookie=request.headers.get("cookie") or None,
        authorization=request.headers.get("authorization") or None,
        session_token=request.cookies.get(cookie_name) or None,
    )


def gate_from_app(request: Request) -> AuthenticationGate:
    # Built on app startup in `service_portal.api.app.create_app`.
    return request.app.state.gate  # type: ignore[attr-defined]


async def get_identity(
    credential: SessionCredential = Depends(credential_from_request),
    gate: AuthenticationGate = Depends(gate_from_app),
) -> Identity:
    return await gate.resolve(credential)
