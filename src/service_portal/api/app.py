"""
service_portal.api.app

FastAPI app factory for the Service Portal.

Responsibilities:
- Build the FastAPI application and register routers/middleware/error handlers.
- Initialize and dispose shared infrastructure (DB engine, record store, blob
  store, identity-provider HTTP client) in the app lifespan.
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from service_portal import __version__
from service_portal.api.errors import register_error_handlers
from service_portal.api.routers.bookmarks import router as bookmarks_router
from service_portal.api.routers.catalog import router as catalog_router
from service_portal.api.routers.dev_auth import router as dev_auth_router
from service_portal.api.routers.health import router as health_router
from service_portal.api.routers.identity import router as identity_router
from service_portal.api.routers.notices import router as notices_router
from service_portal.auth.gate import AuthenticationGate
from service_portal.auth.providers import IdentityProvider, build_identity_provider
from service_portal.db.session import create_engine, create_sessionmaker, init_db
from service_portal.db.store import RecordStore
from service_portal.observability.logging import configure_logging, get_logger
from service_portal.observability.middleware import RequestContextMiddleware
from service_portal.services.bookmarks import BookmarkService
from service_portal.services.catalog import CatalogService
from service_portal.services.directory import IdentityDirectory
from service_portal.services.notices import NoticeService
from service_portal.settings import Settings
from service_portal.storage.blobs import BlobStore, build_blob_store
from service_portal.storage.images import ImagePipeline

log = get_logger(__name__)


def create_app(
    *,
    settings: Settings,
    identity_provider: IdentityProvider | None = None,
    blobs: BlobStore | None = None,
) -> FastAPI:
    """
    `identity_provider` and `blobs` override the settings-driven backends
    (tests and embedding use these).
    """

    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env, auth_mode=settings.auth_mode)
        engine = create_engine(settings)
        if settings.env in ("dev", "test"):
            # Dev/test convenience: create tables automatically. Prod runs Alembic.
            await init_db(engine)

        store = RecordStore(
            create_sessionmaker(engine), timeout_seconds=settings.store_timeout_seconds
        )
        blob_store = blobs or build_blob_store(settings)
        images = ImagePipeline(
            blobs=blob_store,
            display_height=settings.image_display_height,
            resize_enabled=settings.image_resize_enabled,
            blob_timeout_seconds=settings.blob_timeout_seconds,
        )

        http: httpx.AsyncClient | None = None
        provider = identity_provider
        if provider is None:
            if settings.auth_mode == "forward_auth":
                http = httpx.AsyncClient(timeout=settings.identity_timeout_seconds)
            provider = build_identity_provider(settings, http=http)

        app.state.store = store
        app.state.blobs = blob_store
        app.state.gate = AuthenticationGate(provider=provider, store=store)
        app.state.catalog = CatalogService(store=store, images=images)
        app.state.notices = NoticeService(store=store)
        app.state.bookmarks = BookmarkService(store=store)
        app.state.directory = IdentityDirectory(store=store)
        try:
            yield
        finally:
            if http is not None:
                await http.aclose()
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Service Portal API",
        version=__version__,
        docs_url="/docs" if settings.env != "prod" else None,
        openapi_url="/openapi.json" if settings.env != "prod" else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(RequestContextMiddleware)
    register_error_handlers(app)

    app.include_router(health_router, tags=["health"])
    app.include_router(dev_auth_router)
    app.include_router(identity_router)
    app.include_router(catalog_router)
    app.include_router(notices_router)
    app.include_router(bookmarks_router)

    return app


# --- Module Notes -----------------------------------------------------------
# Every request-path collaborator hangs off app.state and is reached through the
# dependencies in `api.deps` / `auth.deps`; routers never construct them.
