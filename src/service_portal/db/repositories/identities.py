"""
service_portal.db.repositories.identities

Repository for the identity cache.

Responsibilities:
- Upsert the last-known profile of a principal on every authentication.
- List cached identities for the admin directory.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from service_portal.db.base import utcnow
from service_portal.db.models import CachedIdentity


class IdentityRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def upsert(
        self,
        *,
        key: str,
        email: str | None,
        display_name: str | None,
        avatar_url: str | None,
        groups: list[str],
    ) -> CachedIdentity:
        existing = await self._session.get(CachedIdentity, key, with_for_update=True)
        if existing is not None:
            # Mutable profile fields follow the provider; `key` never changes.
            existing.email = email
            existing.display_name = display_name
            existing.avatar_url = avatar_url
            existing.groups = groups
            existing.updated_at = utcnow()
            await self._session.flush()
            return existing

        row = CachedIdentity(
            key=key,
            email=email,
            display_name=display_name,
            avatar_url=avatar_url,
            groups=groups,
        )
        self._session.add(row)
        await self._session.flush()
        return row

    async def list_all(self) -> list[CachedIdentity]:
        stmt = select(CachedIdentity).order_by(CachedIdentity.key)
        return list((await self._session.execute(stmt)).scalars().all())
