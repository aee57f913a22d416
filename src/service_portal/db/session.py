"""
service_portal.db.session

Engine/session construction for the record store.

Responsibilities:
- Build the async engine from `database_url`, with SQLite-specific tuning.
- Build the session factory the `RecordStore` opens its transactions from.
- Create tables directly for dev/test (prod runs Alembic instead).
"""

from __future__ import annotations

from pathlib import Path

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from service_portal.db import models  # noqa: F401  # register tables on Base.metadata
from service_portal.db.base import Base
from service_portal.settings import Settings


def create_engine(settings: Settings) -> AsyncEngine:
    url = make_url(settings.database_url)
    if url.get_backend_name() != "sqlite":
        # pool_pre_ping helps detect stale connections in long-lived processes.
        return create_async_engine(url, pool_pre_ping=True)

    if url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    # Writers queue on SQLite's file lock for at most the store's own budget.
    return create_async_engine(url, connect_args={"timeout": settings.store_timeout_seconds})


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False keeps records readable after the store commits them.
    return async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)


async def init_db(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
