"""Key-value snapshot table."""
from datetime import datetime

from sqlalchemy import String, Text, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from fitcore.models.base import Base


class SnapshotRecord(Base):
    """JSON payload of one entity collection, keyed by storage key."""

    __tablename__ = "snapshots"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    payload: Mapped[str] = mapped_column(Text)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
