"""
service_portal.api.routers.bookmarks

Bookmark ("favorite") endpoints, always scoped to the caller.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from starlette.status import HTTP_201_CREATED

from service_portal.api.deps import bookmark_service
from service_portal.api.schemas import BookmarkCreateRequest, BookmarkResponse, DeletedResponse
from service_portal.auth.deps import get_identity
from service_portal.auth.models import Identity
from service_portal.services.bookmarks import BookmarkService

router = APIRouter(tags=["favorites"])


@router.post("/add-favorite", status_code=HTTP_201_CREATED)
async def add_favorite(
    body: BookmarkCreateRequest,
    identity: Identity = Depends(get_identity),
    bookmarks: BookmarkService = Depends(bookmark_service),
) -> dict[str, str]:
    created = await bookmarks.add(identity, url=body.url, title=body.title)
    return {"url": created.url}


@router.get("/favorites", response_model=list[BookmarkResponse])
async def my_favorites(
    identity: Identity = Depends(get_identity),
    bookmarks: BookmarkService = Depends(bookmark_service),
) -> list[BookmarkResponse]:
    return [BookmarkResponse.from_bookmark(b) for b in await bookmarks.list_own(identity)]


# `{url:path}`: the percent-decoded url contains slashes.
@router.delete(
    "/delete-favorite/{url:path}",
    response_model=DeletedResponse,
    response_model_exclude_none=True,
)
async def delete_favorite(
    url: str,
    identity: Identity = Depends(get_identity),
    bookmarks: BookmarkService = Depends(bookmark_service),
) -> DeletedResponse:
    removed = await bookmarks.remove(identity, url)
    return DeletedResponse(url=removed.url)
