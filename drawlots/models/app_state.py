"""Database model holding the persisted application state blob."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Integer, String, Text, UniqueConstraint, select
from sqlalchemy.orm import Mapped, Session, mapped_column

from .base import Base


class StoredAppState(Base):
    """Opaque JSON snapshot of :class:`~drawlots.state.AppState` under a fixed key."""

    __tablename__ = "app_state_blobs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    """Primary key."""

    storage_key: Mapped[str] = mapped_column(String(100), nullable=False)
    """Key the blob is stored under; one row per key."""

    payload: Mapped[str] = mapped_column(Text, nullable=False)
    """JSON text produced by ``AppState.to_json_str``."""

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
    """Timestamp of the last save."""

    __table_args__ = (
        UniqueConstraint("storage_key", name="app_state_blobs_storage_key_key"),
    )

    def __init__(
        self,
        *,
        storage_key: str,
        payload: str,
        updated_at: Optional[datetime] = None,
    ) -> None:
        self.storage_key = storage_key
        self.payload = payload
        if updated_at is not None:
            self.updated_at = updated_at

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return "<StoredAppState(id={id}, storage_key={key}, updated_at={updated})>".format(
            id=self.id,
            key=self.storage_key,
            updated=self.updated_at,
        )

    @classmethod
    def get_by_key(cls, session: Session, storage_key: str) -> Optional["StoredAppState"]:
        """Return the blob stored under ``storage_key`` if it exists."""

        return session.scalar(select(cls).where(cls.storage_key == storage_key))


__all__ = ["StoredAppState"]
