"""
service_portal.db.repositories.notices

Repository for `Notice` records.

Responsibilities:
- Fan a notice out into one record per recipient.
- Patch fields (including dismissal) in place.
- List active notices, filtered by a caller-visibility predicate.
"""

from __future__ import annotations

from collections.abc import Callable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from service_portal.db.models import Notice, NoticeSeverity
from service_portal.db.validation import require_fields
from service_portal.errors import NotFound, ValidationError


def parse_severity(value: str) -> NoticeSeverity:
    try:
        return NoticeSeverity(value)
    except ValueError as e:
        allowed = ", ".join(s.value for s in NoticeSeverity)
        raise ValidationError(f"Invalid type {value!r}; expected one of: {allowed}") from e


class NoticeRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create_many(
        self,
        *,
        recipient_keys: list[str],
        severity: str | None,
        title: str | None,
        body: str | None,
    ) -> list[Notice]:
        recipients = [k.strip() for k in recipient_keys if k and k.strip()]
        require_fields(userId=recipients, type=severity, title=title, content=body)
        level = parse_severity(severity)

        notices = [
            Notice(recipient_key=key, severity=level, title=title, body=body, dismissed=False)
            for key in recipients
        ]
        self._session.add_all(notices)
        await self._session.flush()
        return notices

    async def get(self, notice_id: str, *, for_update: bool = False) -> Notice:
        notice = await self._session.get(Notice, notice_id, with_for_update=for_update)
        if notice is None:
            raise NotFound(f"Message {notice_id} not found")
        return notice

    async def list_active(
        self, *, predicate: Callable[[Notice], bool] | None = None
    ) -> list[Notice]:
        stmt = (
            select(Notice)
            .where(Notice.dismissed.is_(False))
            .order_by(Notice.created_at, Notice.id)
        )
        notices = (await self._session.execute(stmt)).scalars().all()
        if predicate is None:
            return list(notices)
        return [n for n in notices if predicate(n)]

    async def update(
        self,
        notice_id: str,
        *,
        severity: str | None = None,
        title: str | None = None,
        body: str | None = None,
        dismissed: bool | None = None,
    ) -> Notice:
        notice = await self.get(notice_id, for_update=True)
        if severity:
            notice.severity = parse_severity(severity)
        if title:
            notice.title = title
        if body:
            notice.body = body
        if dismissed is not None:
            notice.dismissed = dismissed
        await self._session.flush()
        return notice

    async def delete(self, notice_id: str) -> Notice:
        notice = await self.get(notice_id, for_update=True)
        await self._session.delete(notice)
        await self._session.flush()
        return notice
