"""Snapshot storage collaborators."""
import logging
from typing import Optional, Protocol

from sqlalchemy import select
from sqlalchemy.engine import Engine

from fitcore.models.base import build_sessionmaker, init_db
from fitcore.models.snapshot import SnapshotRecord

logger = logging.getLogger(__name__)


class SnapshotStorage(Protocol):
    """Key-value blob store: load at start, save on every change."""

    def load(self, key: str) -> Optional[str]:
        ...

    def save(self, key: str, payload: str) -> None:
        ...


class InMemoryStorage:
    """Dictionary-backed storage, used for tests and embedding."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.data: dict[str, str] = dict(initial or {})

    def load(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def save(self, key: str, payload: str) -> None:
        self.data[key] = payload


class SqlSnapshotStorage:
    """Stores each snapshot as one row of the ``snapshots`` table."""

    def __init__(self, engine: Engine, create_tables: bool = True):
        """
        Initialize the storage.

        Args:
            engine: SQLAlchemy engine to write to
            create_tables: Create the snapshot table if missing
        """
        self.engine = engine
        self.session_factory = build_sessionmaker(engine)
        if create_tables:
            init_db(engine)

    def load(self, key: str) -> Optional[str]:
        with self.session_factory() as session:
            result = session.execute(
                select(SnapshotRecord.payload).where(SnapshotRecord.key == key)
            )
            return result.scalar_one_or_none()

    def save(self, key: str, payload: str) -> None:
        with self.session_factory() as session:
            try:
                record = session.get(SnapshotRecord, key)
                if record is None:
                    session.add(SnapshotRecord(key=key, payload=payload))
                else:
                    record.payload = payload
                session.commit()
            except Exception:
                session.rollback()
                logger.error(f"Failed to save snapshot {key}", exc_info=True)
                raise
