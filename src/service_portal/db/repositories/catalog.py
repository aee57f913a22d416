"""
service_portal.db.repositories.catalog

Repository for `CatalogEntry` records.

Responsibilities:
- Validate and create entries (name, redirect target and a non-empty group set).
- Partial-merge updates that never clear `allowed_groups`.
- Predicate-filtered listing so callers only ever receive visible entries.
"""

from __future__ import annotations

from collections.abc import Callable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from service_portal.db.base import utcnow
from service_portal.db.models import CatalogEntry
from service_portal.db.validation import clean_groups, require_fields
from service_portal.errors import NotFound


class CatalogRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        name: str | None,
        redirect_url: str | None,
        allowed_groups: list[str] | None,
        image_ref: str | None = None,
        original_width: int | None = None,
        original_height: int | None = None,
        display_height: int | None = None,
        display_width: int | None = None,
    ) -> CatalogEntry:
        groups = clean_groups(allowed_groups)
        # An entry nobody can see is rejected up front.
        require_fields(name=name, redirectUrl=redirect_url, groups=groups)

        entry = CatalogEntry(
            name=name.strip(),
            redirect_url=redirect_url.strip(),
            allowed_groups=groups,
            image_ref=image_ref,
            original_width=original_width,
            original_height=original_height,
            display_height=display_height,
            display_width=display_width,
        )
        self._session.add(entry)
        await self._session.flush()
        return entry

    async def get(self, entry_id: str, *, for_update: bool = False) -> CatalogEntry:
        entry = await self._session.get(CatalogEntry, entry_id, with_for_update=for_update)
        if entry is None:
            raise NotFound(f"Service {entry_id} not found")
        return entry

    async def list_entries(
        self, predicate: Callable[[CatalogEntry], bool] | None = None
    ) -> list[CatalogEntry]:
        stmt = select(CatalogEntry).order_by(CatalogEntry.created_at, CatalogEntry.id)
        entries = (await self._session.execute(stmt)).scalars().all()
        if predicate is None:
            return list(entries)
        return [e for e in entries if predicate(e)]

    async def update(
        self,
        entry_id: str,
        *,
        name: str | None = None,
        redirect_url: str | None = None,
        allowed_groups: list[str] | None = None,
        image_ref: str | None = None,
        original_width: int | None = None,
        original_height: int | None = None,
        display_height: int | None = None,
        display_width: int | None = None,
    ) -> CatalogEntry:
        entry = await self.get(entry_id, for_update=True)
        if name and name.strip():
            entry.name = name.strip()
        if redirect_url and redirect_url.strip():
            entry.redirect_url = redirect_url.strip()
        groups = clean_groups(allowed_groups)
        # Empty/absent groups keep the current set; there is no "clear groups" update.
        if groups:
            entry.allowed_groups = groups
        if image_ref is not None:
            entry.image_ref = image_ref
            entry.original_width = original_width
            entry.original_height = original_height
            entry.display_height = display_height
            entry.display_width = display_width
        entry.updated_at = utcnow()
        await self._session.flush()
        return entry

    async def delete(self, entry_id: str) -> CatalogEntry:
        entry = await self.get(entry_id, for_update=True)
        await self._session.delete(entry)
        await self._session.flush()
        return entry


# --- Module Notes -----------------------------------------------------------
# `delete` hands back the removed row so the caller can release its image blob.
