"""
service_portal.services.catalog

Catalog lifecycle service (transaction + blob ordering owner).

Responsibilities:
- Admin-only create/update/delete of catalog entries with their images.
- Caller-visible listing filtered by group intersection inside the store layer.
- Keep the record store and the blob store consistent by ordering alone:
  blob before record on create and new blob before old release on replace
  (both via `ImagePipeline.stage`), record delete before blob release on delete.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from service_portal.auth.models import Identity
from service_portal.auth.policy import require_admin, visible_to
from service_portal.db.models import CatalogEntry
from service_portal.db.repositories.catalog import CatalogRepo
from service_portal.db.store import RecordFamily, RecordStore
from service_portal.db.validation import clean_groups, require_fields
from service_portal.observability.logging import get_logger
from service_portal.storage.images import ImagePipeline, StagedImage

log = get_logger(__name__)


def _image_fields(staged: StagedImage | None) -> dict[str, int | str | None]:
    if staged is None:
        return {}
    stored = staged.stored
    return {
        "image_ref": stored.blob_ref,
        "original_width": stored.original_width,
        "original_height": stored.original_height,
        "display_height": stored.display_height,
        "display_width": stored.display_width,
    }


class CatalogService:
    def __init__(self, *, store: RecordStore, images: ImagePipeline) -> None:
        self._store = store
        self._images = images

    async def list_visible(self, identity: Identity) -> list[CatalogEntry]:
        async with self._store.snapshot() as session:
            entries = await CatalogRepo(session).list_entries(predicate=visible_to(identity))
        log.info("catalog_listed", visible=len(entries))
        return entries

    async def create(
        self,
        identity: Identity,
        *,
        name: str | None,
        redirect_url: str | None,
        groups: list[str] | None,
        image: bytes | None = None,
    ) -> CatalogEntry:
        require_admin(identity)
        # Reject malformed requests before any blob is written.
        require_fields(name=name, redirectUrl=redirect_url, groups=clean_groups(groups))

        async with self._staged(image, name) as staged:
            async with self._store.transaction(RecordFamily.catalog) as session:
                entry = await CatalogRepo(session).create(
                    name=name,
                    redirect_url=redirect_url,
                    allowed_groups=groups,
                    **_image_fields(staged),
                )

        log.info("catalog_entry_created", entry_id=entry.id, groups=entry.allowed_groups)
        return entry

    async def update(
        self,
        identity: Identity,
        entry_id: str,
        *,
        name: str | None = None,
        redirect_url: str | None = None,
        groups: list[str] | None = None,
        image: bytes | None = None,
    ) -> CatalogEntry:
        require_admin(identity)

        base_name = name
        if image:
            # An unknown id is rejected before any blob is written.
            async with self._store.snapshot() as session:
                current = await CatalogRepo(session).get(entry_id)
            base_name = name or current.name

        async with self._staged(image, base_name) as staged:
            async with self._store.transaction(RecordFamily.catalog) as session:
                repo = CatalogRepo(session)
                current = await repo.get(entry_id, for_update=True)
                if staged is not None:
                    staged.previous_ref = current.image_ref
                entry = await repo.update(
                    entry_id,
                    name=name,
                    redirect_url=redirect_url,
                    allowed_groups=groups,
                    **_image_fields(staged),
                )

        log.info("catalog_entry_updated", entry_id=entry_id, image_replaced=staged is not None)
        return entry

    @asynccontextmanager
    async def _staged(
        self, image: bytes | None, base_name: str | None
    ) -> AsyncIterator[StagedImage | None]:
        if not image:
            yield None
            return
        async with self._images.stage(image, base_name or "image") as staged:
            yield staged

    async def delete(self, identity: Identity, entry_id: str) -> CatalogEntry:
        require_admin(identity)
        async with self._store.transaction(RecordFamily.catalog) as session:
            removed = await CatalogRepo(session).delete(entry_id)

        released = await self._images.release(removed.image_ref)
        log.info("catalog_entry_deleted", entry_id=entry_id, image_released=released)
        return removed


# --- Module Notes -----------------------------------------------------------
# Release failures are logged inside ImagePipeline.release and never raised, so
# a stale blob can outlive its record but a record never loses its blob.
