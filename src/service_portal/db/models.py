"""
service_portal.db.models

Persistence schema for the portal.

Responsibilities:
- Define ORM models for the four record families:
  - CachedIdentity: last-known profile of each authenticated principal
  - CatalogEntry: published service link gated by group membership
  - Notice: admin-authored message addressed to exactly one recipient
  - Bookmark: user-private saved link, unique per (owner, url)
- Assign collision-free record ids.
"""

from __future__ import annotations

import enum
import secrets
import time

from sqlalchemy import JSON, Boolean, Enum, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from service_portal.db.base import Base, CreatedAtMixin, TimestampMixin


def new_record_id() -> str:
    """
    Millisecond timestamp followed by 8 hex chars of entropy.

    The timestamp keeps ids roughly creation-ordered; the suffix disambiguates
    records created within the same millisecond (e.g. notice fan-out).
    """

    return f"{time.time_ns() // 1_000_000}{secrets.token_hex(4)}"


class NoticeSeverity(enum.StrEnum):
    information = "information"
    warning = "warning"
    error = "error"


class CachedIdentity(TimestampMixin, Base):
    __tablename__ = "identities"

    key: Mapped[str] = mapped_column(String(320), primary_key=True)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    display_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    groups: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)


class CatalogEntry(TimestampMixin, Base):
    __tablename__ = "catalog_entries"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_record_id)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    redirect_url: Mapped[str] = mapped_column(Text, nullable=False)
    allowed_groups: Mapped[list[str]] = mapped_column(JSON, nullable=False)

    image_ref: Mapped[str | None] = mapped_column(String(512), nullable=True)
    original_width: Mapped[int | None] = mapped_column(Integer, nullable=True)
    original_height: Mapped[int | None] = mapped_column(Integer, nullable=True)
    display_height: Mapped[int | None] = mapped_column(Integer, nullable=True)
    display_width: Mapped[int | None] = mapped_column(Integer, nullable=True)


class Notice(CreatedAtMixin, Base):
    __tablename__ = "notices"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_record_id)
    recipient_key: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    severity: Mapped[NoticeSeverity] = mapped_column(Enum(NoticeSeverity), nullable=False)
    title: Mapped[str] = mapped_column(String(512), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    dismissed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (Index("ix_notices_recipient_dismissed", "recipient_key", "dismissed"),)


class Bookmark(CreatedAtMixin, Base):
    __tablename__ = "bookmarks"

    # (owner_key, url) is the natural key: one bookmark per url per user.
    owner_key: Mapped[str] = mapped_column(String(320), primary_key=True)
    url: Mapped[str] = mapped_column(String(2048), primary_key=True)
    title: Mapped[str] = mapped_column(String(512), nullable=False)


# --- Module Notes -----------------------------------------------------------
# Group sets are stored as JSON lists; intersection filtering happens in the
# repositories so the schema stays portable across SQLite and Postgres.
