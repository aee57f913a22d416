"""
service_portal.db.store

Transaction owner for the record families.

Responsibilities:
- Serialize writers per record family so read-modify-write cycles never lose
  updates.
- Commit atomically on success, roll back on any failure.
- Bound every store operation by a time budget and report overruns as a
  retryable `Unavailable`.
"""

from __future__ import annotations

import asyncio
import enum
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from service_portal.errors import InternalError, PortalError, Unavailable
from service_portal.observability.logging import get_logger

log = get_logger(__name__)


class RecordFamily(enum.StrEnum):
    identities = "identities"
    catalog = "catalog"
    notices = "notices"
    bookmarks = "bookmarks"


class RecordStore:
    """
    Every write goes through `transaction(family)`; reads use `snapshot()`.

    The per-family lock covers one process. Repositories additionally load rows
    with `SELECT ... FOR UPDATE` so backends with row locking also serialize
    writers across worker processes.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        timeout_seconds: float,
    ) -> None:
        self._session_factory = session_factory
        self._timeout = timeout_seconds
        self._locks = {family: asyncio.Lock() for family in RecordFamily}

    @asynccontextmanager
    async def transaction(self, family: RecordFamily) -> AsyncIterator[AsyncSession]:
        try:
            async with asyncio.timeout(self._timeout):
                async with self._locks[family]:
                    async with self._session_factory() as session:
                        try:
                            yield session
                            await session.commit()
                        except BaseException:
                            await session.rollback()
                            raise
        except TimeoutError as e:
            log.warning("store_timeout", family=str(family), budget_s=self._timeout)
            raise Unavailable(f"{family} store did not respond in time") from e
        except PortalError:
            raise
        except SQLAlchemyError as e:
            log.exception("store_failure", family=str(family))
            raise InternalError(f"{family} store failure") from e

    @asynccontextmanager
    async def snapshot(self) -> AsyncIterator[AsyncSession]:
        # Single read transaction: callers see one consistent point in time.
        try:
            async with asyncio.timeout(self._timeout):
                async with self._session_factory() as session:
                    yield session
        except TimeoutError as e:
            log.warning("store_timeout", family="read", budget_s=self._timeout)
            raise Unavailable("record store did not respond in time") from e
        except PortalError:
            raise
        except SQLAlchemyError as e:
            log.exception("store_failure", family="read")
            raise InternalError("record store failure") from e


# --- Module Notes -----------------------------------------------------------
# Services never hold a session outside these context managers; repositories
# only flush, so the commit point is always here.
