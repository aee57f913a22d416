"""
service_portal.db.repositories.bookmarks

Repository for `Bookmark` records. Writes are keyed by (owner, url); listing
takes the caller-visibility predicate.
"""

from __future__ import annotations

from collections.abc import Callable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from service_portal.db.models import Bookmark
from service_portal.db.validation import require_fields
from service_portal.errors import NotFound, ValidationError


class BookmarkRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, *, owner_key: str, url: str | None, title: str | None) -> Bookmark:
        require_fields(url=url, title=title)
        existing = await self._session.get(Bookmark, (owner_key, url), with_for_update=True)
        if existing is not None:
            raise ValidationError("This link is already bookmarked")

        bookmark = Bookmark(owner_key=owner_key, url=url, title=title)
        self._session.add(bookmark)
        try:
            await self._session.flush()
        except IntegrityError as e:
            # Lost a race with another worker process inserting the same pair.
            raise ValidationError("This link is already bookmarked") from e
        return bookmark

    async def list_entries(
        self, *, predicate: Callable[[Bookmark], bool] | None = None
    ) -> list[Bookmark]:
        stmt = select(Bookmark).order_by(Bookmark.created_at, Bookmark.url)
        bookmarks = (await self._session.execute(stmt)).scalars().all()
        if predicate is None:
            return list(bookmarks)
        return [b for b in bookmarks if predicate(b)]

    async def delete(self, *, owner_key: str, url: str) -> Bookmark:
        bookmark = await self._session.get(Bookmark, (owner_key, url), with_for_update=True)
        if bookmark is None:
            raise NotFound("Bookmark not found")
        await self._session.delete(bookmark)
        await self._session.flush()
        return bookmark

