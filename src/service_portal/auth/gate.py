"""
service_portal.auth.gate

Authentication gate.

Responsibilities:
- Turn a request credential into a resolved `Identity` via the identity provider.
- Upsert the identity cache on every successful resolution, read-only requests
  included, so the cache tracks the provider's latest groups without a
  separate sync job.
- Fail closed: no `Identity` is returned unless the provider vouched for it.
"""

from __future__ import annotations

from service_portal.auth.claims import identity_from_claims
from service_portal.auth.models import Identity, SessionCredential
from service_portal.auth.providers import IdentityProvider
from service_portal.db.repositories.identities import IdentityRepo
from service_portal.db.store import RecordFamily, RecordStore
from service_portal.errors import Unauthenticated
from service_portal.observability.logging import bind_user, get_logger

log = get_logger(__name__)


class AuthenticationGate:
    def __init__(self, *, provider: IdentityProvider, store: RecordStore) -> None:
        self._provider = provider
        self._store = store

    async def resolve(self, credential: SessionCredential) -> Identity:
        if credential.is_empty:
            raise Unauthenticated("Not authenticated (no session credential)")

        claims = await self._provider.verify(credential)
        identity = identity_from_claims(claims)

        async with self._store.transaction(RecordFamily.identities) as session:
            await IdentityRepo(session).upsert(
                key=identity.key,
                email=identity.email,
                display_name=identity.display_name,
                avatar_url=identity.avatar_url,
                groups=sorted(identity.groups),
            )

        bind_user(identity.key)
        log.debug("identity_resolved", groups=sorted(identity.groups))
        # The provider's view wins; the cache row is a copy of it, never a source.
        return identity
