from __future__ import annotations

from datetime import timedelta

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field

from service_portal.api.deps import settings_dep
from service_portal.auth.jwt import SessionTokenConfig, issue_session_token
from service_portal.errors import RouteNotFound
from service_portal.settings import Settings

router = APIRouter(prefix="/v1/dev", tags=["dev"])


class DevSessionRequest(BaseModel):
    subject: str = Field(min_length=1, max_length=320)
    email: str | None = Field(default=None, max_length=320)
    name: str | None = Field(default=None, max_length=256)
    groups: list[str] = Field(default_factory=list)
    ttl_minutes: int = Field(default=60, ge=1, le=24 * 60)


class DevSessionResponse(BaseModel):
    session_token: str
    cookie_name: str


@router.post("/session", response_model=DevSessionResponse)
async def mint_dev_session(
    body: DevSessionRequest,
    response: Response,
    settings: Settings = Depends(settings_dep),
) -> DevSessionResponse:
    # Local stand-in for the provider's login flow; absent in prod.
    if settings.env == "prod":
        raise RouteNotFound("No route for POST /v1/dev/session")

    token = issue_session_token(
        cfg=SessionTokenConfig.from_settings(settings),
        subject=body.subject,
        email=body.email,
        name=body.name,
        groups=body.groups,
        ttl=timedelta(minutes=body.ttl_minutes),
    )
    response.set_cookie(settings.session_cookie_name, token, httponly=True, samesite="lax")
    return DevSessionResponse(session_token=token, cookie_name=settings.session_cookie_name)
