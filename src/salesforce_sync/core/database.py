"""SQLAlchemy engine, declarative base and session factory for the local store.

Provides:
- Base: Declarative base for local tables (the salesforce_mappings side table
  and any application entity mapped alongside it)
- get_engine(): Lazily created engine singleton
- get_session(): Session context manager
- init_db() / close_db(): table creation and engine disposal
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, Session

from src.salesforce_sync.config import get_settings

# ── Module-level engine (lazy init) ────────────────────────────────────────

_engine: Engine | None = None


def get_engine() -> Engine:
    """Get or create the engine singleton."""
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = create_engine(settings.DATABASE_URL, echo=False)
    return _engine


# ── Declarative Base ────────────────────────────────────────────────────────


class Base(DeclarativeBase):
    """Base class for local models."""


# ── Session Factory ─────────────────────────────────────────────────────────


@contextmanager
def get_session() -> Iterator[Session]:
    """Session bound to the module engine, closed on exit."""
    engine = get_engine()
    with Session(engine, expire_on_commit=False) as session:
        yield session


# ── Database Initialization ─────────────────────────────────────────────────


def init_db(engine: Engine | None = None) -> None:
    """Create all tables registered on Base if they don't exist."""
    # Register the side table on Base.metadata
    import src.salesforce_sync.orm.models  # noqa: F401

    Base.metadata.create_all(engine or get_engine())


def close_db() -> None:
    """Dispose of the engine and close all connections."""
    global _engine
    if _engine:
        _engine.dispose()
        _engine = None
