"""
service_portal.services.directory

Admin view over the identity cache (who has signed in, with which groups).
"""

from __future__ import annotations

from service_portal.auth.models import Identity
from service_portal.auth.policy import require_admin
from service_portal.db.models import CachedIdentity
from service_portal.db.repositories.identities import IdentityRepo
from service_portal.db.store import RecordStore


class IdentityDirectory:
    def __init__(self, *, store: RecordStore) -> None:
        self._store = store

    async def list_identities(self, identity: Identity) -> list[CachedIdentity]:
        require_admin(identity)
        async with self._store.snapshot() as session:
            return await IdentityRepo(session).list_all()
