"""
service_portal.api.schemas

Request/response models. Wire names are camelCase; Python attributes are not.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from service_portal.db.models import Bookmark, CachedIdentity, CatalogEntry, Notice


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WhoAmIResponse(CamelModel):
    username: str
    display_name: str
    email: str | None
    avatar_url: str | None
    groups: list[str]
    is_admin: bool


class DirectoryEntry(CamelModel):
    id: str
    email: str
    display_name: str
    groups: list[str]

    @classmethod
    def from_row(cls, row: CachedIdentity) -> DirectoryEntry:
        return cls(
            id=row.key,
            email=row.email or row.key,
            display_name=row.display_name or row.key,
            groups=list(row.groups or []),
        )


class ServiceResponse(CamelModel):
    id: str
    name: str
    redirect_url: str
    allowed_groups: list[str]
    image_url: str | None
    original_width: int | None
    original_height: int | None
    resized_height: int | None
    resized_width: int | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entry(cls, entry: CatalogEntry) -> ServiceResponse:
        return cls(
            id=entry.id,
            name=entry.name,
            redirect_url=entry.redirect_url,
            allowed_groups=list(entry.allowed_groups),
            image_url=f"/images/{entry.image_ref}" if entry.image_ref else None,
            original_width=entry.original_width,
            original_height=entry.original_height,
            resized_height=entry.display_height,
            resized_width=entry.display_width,
            created_at=entry.created_at,
            updated_at=entry.updated_at,
        )


class ServiceCreatedResponse(BaseModel):
    service_id: str


class NoticeCreateRequest(CamelModel):
    # `userId` is a single recipient key or a list of them.
    user_id: str | list[str] | None = None
    type: str | None = None
    title: str | None = None
    content: str | None = None


class NoticeUpdateRequest(CamelModel):
    type: str | None = None
    title: str | None = None
    content: str | None = None
    dismissed: bool | None = None


class NoticeResponse(CamelModel):
    id: str
    user_id: str
    type: str
    title: str
    content: str
    created_at: datetime
    dismissed: bool

    @classmethod
    def from_notice(cls, notice: Notice) -> NoticeResponse:
        return cls(
            id=notice.id,
            user_id=notice.recipient_key,
            type=str(notice.severity),
            title=notice.title,
            content=notice.body,
            created_at=notice.created_at,
            dismissed=notice.dismissed,
        )


class NoticesCreatedResponse(BaseModel):
    message_ids: list[str] = Field(default_factory=list)


class BookmarkCreateRequest(CamelModel):
    url: str | None = None
    title: str | None = None


class BookmarkResponse(CamelModel):
    url: str
    title: str
    user_id: str
    created_at: datetime

    @classmethod
    def from_bookmark(cls, bookmark: Bookmark) -> BookmarkResponse:
        return cls(
            url=bookmark.url,
            title=bookmark.title,
            user_id=bookmark.owner_key,
            created_at=bookmark.created_at,
        )


class DeletedResponse(BaseModel):
    status: str = "deleted"
    id: str | None = None
    url: str | None = None
