"""Base model and database setup for snapshot storage."""
from sqlalchemy import MetaData, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy.pool import StaticPool

# Naming convention for constraints
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for all models."""

    metadata = MetaData(naming_convention=convention)


def build_engine(storage_url: str, echo: bool = False) -> Engine:
    """Create an engine; in-memory SQLite shares one connection."""
    if storage_url in ("sqlite://", "sqlite:///:memory:"):
        return create_engine(
            storage_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(storage_url, echo=echo, pool_pre_ping=True)


def build_sessionmaker(engine: Engine) -> sessionmaker:
    """Session factory bound to the engine."""
    return sessionmaker(
        engine,
        expire_on_commit=False,
        autoflush=False,
    )


def init_db(engine: Engine) -> None:
    """Initialize database tables."""
    Base.metadata.create_all(engine)
