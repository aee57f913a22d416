"""
tests.conftest

Shared fixtures: an app wired to a temporary SQLite file, an in-memory blob
store and session-token auth, plus helpers to act as a given user.
"""

from __future__ import annotations

import io
from collections.abc import AsyncIterator, Callable
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from PIL import Image

from service_portal.api.app import create_app
from service_portal.auth.jwt import SessionTokenConfig, issue_session_token
from service_portal.db.session import create_engine, create_sessionmaker, init_db
from service_portal.db.store import RecordStore
from service_portal.settings import Settings
from service_portal.storage.blobs import InMemoryBlobStore


def png_bytes(width: int, height: int, color: tuple[int, int, int] = (200, 30, 30)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'portal.db'}",
        auth_mode="session_token",
        session_secret="test-session-secret-0123456789abcdef",
        blob_backend="memory",
        log_level="WARNING",
    )


@pytest.fixture
def blobs() -> InMemoryBlobStore:
    return InMemoryBlobStore()


@pytest_asyncio.fixture
async def app(settings: Settings, blobs: InMemoryBlobStore) -> AsyncIterator[FastAPI]:
    application = create_app(settings=settings, blobs=blobs)
    # httpx ASGITransport does not run the lifespan; enter it explicitly.
    async with application.router.lifespan_context(application):
        yield application


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def auth_headers(settings: Settings) -> Callable[..., dict[str, str]]:
    cfg = SessionTokenConfig.from_settings(settings)

    def _headers(
        key: str, groups: list[str] | None = None, *, name: str | None = None
    ) -> dict[str, str]:
        email = key if "@" in key else None
        token = issue_session_token(cfg=cfg, subject=key, email=email, name=name, groups=groups)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def admin(auth_headers) -> dict[str, str]:
    return auth_headers("root@example.com", ["admin", "staff"], name="Root")


@pytest_asyncio.fixture
async def store(settings: Settings) -> AsyncIterator[RecordStore]:
    engine = create_engine(settings)
    await init_db(engine)
    try:
        yield RecordStore(create_sessionmaker(engine), timeout_seconds=5.0)
    finally:
        await engine.dispose()
