"""SQLAlchemy models for persisted client state."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from story_search.db.base import Base


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class StoredValue(Base):
    """One string value of a namespaced key/value store."""

    __tablename__ = "stored_values"
    __table_args__ = (UniqueConstraint("namespace", "key", name="uq_stored_values_namespace_key"),)

    namespace: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    key: Mapped[str] = mapped_column(String(128), nullable=False)
    value: Mapped[str] = mapped_column(Text, nullable=False, default="")
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now, onupdate=_utc_now
    )


__all__ = ["StoredValue"]
