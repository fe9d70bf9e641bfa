"""Database models."""
from fitcore.models.base import Base, build_engine, build_sessionmaker, init_db
from fitcore.models.snapshot import SnapshotRecord

__all__ = [
    "Base",
    "build_engine",
    "build_sessionmaker",
    "init_db",
    "SnapshotRecord",
]
