"""
service_portal.api.routers.notices

Notice endpoints: admin publishing/moderation and the caller's own inbox.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from starlette.status import HTTP_201_CREATED

from service_portal.api.deps import notice_service
from service_portal.api.schemas import (
    DeletedResponse,
    NoticeCreateRequest,
    NoticeResponse,
    NoticesCreatedResponse,
    NoticeUpdateRequest,
)
from service_portal.auth.deps import get_identity
from service_portal.auth.models import Identity
from service_portal.services.notices import NoticeService

router = APIRouter(tags=["messages"])


@router.post("/add-message", response_model=NoticesCreatedResponse, status_code=HTTP_201_CREATED)
async def add_message(
    body: NoticeCreateRequest,
    identity: Identity = Depends(get_identity),
    notices: NoticeService = Depends(notice_service),
) -> NoticesCreatedResponse:
    created = await notices.publish(
        identity,
        recipients=body.user_id,
        severity=body.type,
        title=body.title,
        body=body.content,
    )
    return NoticesCreatedResponse(message_ids=[n.id for n in created])


@router.get("/messages", response_model=list[NoticeResponse])
async def my_messages(
    identity: Identity = Depends(get_identity),
    notices: NoticeService = Depends(notice_service),
) -> list[NoticeResponse]:
    return [NoticeResponse.from_notice(n) for n in await notices.inbox(identity)]


@router.get("/all-messages", response_model=list[NoticeResponse])
async def all_messages(
    identity: Identity = Depends(get_identity),
    notices: NoticeService = Depends(notice_service),
) -> list[NoticeResponse]:
    return [NoticeResponse.from_notice(n) for n in await notices.list_all_active(identity)]


@router.api_route(
    "/update-message/{notice_id}", methods=["POST", "PUT"], response_model=NoticeResponse
)
async def update_message(
    notice_id: str,
    body: NoticeUpdateRequest,
    identity: Identity = Depends(get_identity),
    notices: NoticeService = Depends(notice_service),
) -> NoticeResponse:
    notice = await notices.patch(
        identity,
        notice_id,
        severity=body.type,
        title=body.title,
        body=body.content,
        dismissed=body.dismissed,
    )
    return NoticeResponse.from_notice(notice)


@router.delete(
    "/delete-message/{notice_id}",
    response_model=DeletedResponse,
    response_model_exclude_none=True,
)
async def delete_message(
    notice_id: str,
    identity: Identity = Depends(get_identity),
    notices: NoticeService = Depends(notice_service),
) -> DeletedResponse:
    removed = await notices.delete(identity, notice_id)
    return DeletedResponse(id=removed.id)
