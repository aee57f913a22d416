"""
service_portal.services.notices

Notice service: admin-authored, per-recipient messages.
"""

from __future__ import annotations

from service_portal.auth.models import Identity
from service_portal.auth.policy import owned_by, require_admin
from service_portal.db.models import Notice
from service_portal.db.repositories.notices import NoticeRepo
from service_portal.db.store import RecordFamily, RecordStore
from service_portal.observability.logging import get_logger

log = get_logger(__name__)


class NoticeService:
    def __init__(self, *, store: RecordStore) -> None:
        self._store = store

    async def publish(
        self,
        identity: Identity,
        *,
        recipients: str | list[str] | None,
        severity: str | None,
        title: str | None,
        body: str | None,
    ) -> list[Notice]:
        require_admin(identity)
        if isinstance(recipients, str):
            recipients = [recipients]
        # One record per recipient, all written in a single transaction.
        async with self._store.transaction(RecordFamily.notices) as session:
            notices = await NoticeRepo(session).create_many(
                recipient_keys=recipients or [],
                severity=severity,
                title=title,
                body=body,
            )
        log.info("notices_published", count=len(notices), severity=severity)
        return notices

    async def inbox(self, identity: Identity) -> list[Notice]:
        async with self._store.snapshot() as session:
            return await NoticeRepo(session).list_active(predicate=owned_by(identity))

    async def list_all_active(self, identity: Identity) -> list[Notice]:
        # Includes notices addressed to the admin themselves.
        require_admin(identity)
        async with self._store.snapshot() as session:
            return await NoticeRepo(session).list_active()

    async def patch(
        self,
        identity: Identity,
        notice_id: str,
        *,
        severity: str | None = None,
        title: str | None = None,
        body: str | None = None,
        dismissed: bool | None = None,
    ) -> Notice:
        require_admin(identity)
        async with self._store.transaction(RecordFamily.notices) as session:
            notice = await NoticeRepo(session).update(
                notice_id, severity=severity, title=title, body=body, dismissed=dismissed
            )
        log.info("notice_updated", notice_id=notice_id, dismissed=notice.dismissed)
        return notice

    async def delete(self, identity: Identity, notice_id: str) -> Notice:
        require_admin(identity)
        async with self._store.transaction(RecordFamily.notices) as session:
            removed = await NoticeRepo(session).delete(notice_id)
        log.info("notice_deleted", notice_id=notice_id)
        return removed
