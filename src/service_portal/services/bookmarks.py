"""
service_portal.services.bookmarks

Bookmark service. Always scoped to the caller; admins get no cross-user view.
"""

from __future__ import annotations

from service_portal.auth.models import Identity
from service_portal.auth.policy import owned_by
from service_portal.db.models import Bookmark
from service_portal.db.repositories.bookmarks import BookmarkRepo
from service_portal.db.store import RecordFamily, RecordStore
from service_portal.observability.logging import get_logger

log = get_logger(__name__)


class BookmarkService:
    def __init__(self, *, store: RecordStore) -> None:
        self._store = store

    async def add(self, identity: Identity, *, url: str | None, title: str | None) -> Bookmark:
        async with self._store.transaction(RecordFamily.bookmarks) as session:
            bookmark = await BookmarkRepo(session).create(
                owner_key=identity.key, url=url, title=title
            )
        log.info("bookmark_added", url=bookmark.url)
        return bookmark

    async def list_own(self, identity: Identity) -> list[Bookmark]:
        async with self._store.snapshot() as session:
            return await BookmarkRepo(session).list_entries(predicate=owned_by(identity))

    async def remove(self, identity: Identity, url: str) -> Bookmark:
        async with self._store.transaction(RecordFamily.bookmarks) as session:
            removed = await BookmarkRepo(session).delete(owner_key=identity.key, url=url)
        log.info("bookmark_removed", url=url)
        return removed
