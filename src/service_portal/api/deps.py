"""
service_portal.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Hand out the services and settings built once at startup (app.state).
"""

from __future__ import annotations

from fastapi import Request

from service_portal.services.bookmarks import BookmarkService
from service_portal.services.catalog import CatalogService
from service_portal.services.directory import IdentityDirectory
from service_portal.services.notices import NoticeService
from service_portal.settings import Settings
from service_portal.storage.blobs import BlobStore


def settings_dep(request: Request) -> Settings:
    return request.app.state.settings  # type: ignore[attr-defined]


def catalog_service(request: Request) -> CatalogService:
    return request.app.state.catalog  # type: ignore[attr-defined]


def notice_service(request: Request) -> NoticeService:
    return request.app.state.notices  # type: ignore[attr-defined]


def bookmark_service(request: Request) -> BookmarkService:
    return request.app.state.bookmarks  # type: ignore[attr-defined]


def identity_directory(request: Request) -> IdentityDirectory:
    return request.app.state.directory  # type: ignore[attr-defined]


def blob_store(request: Request) -> BlobStore:
    return request.app.state.blobs  # type: ignore[attr-defined]
