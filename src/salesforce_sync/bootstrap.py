"""Wiring of drivers and mappers from Settings."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from sqlalchemy.orm import Session

from src.salesforce_sync.config import Settings, get_settings
from src.salesforce_sync.mapping.driver import CachedDriver, MappingDriver, XmlDriver
from src.salesforce_sync.mapping.mapper import Mapper
from src.salesforce_sync.mapping.persistence import Persistence
from src.salesforce_sync.orm.adapter import SqlAlchemyMappingStore, SqlAlchemyPersistence


def build_driver(
    settings: Settings | None = None,
    persistence: Persistence | None = None,
    paths: Sequence[str | Path] | None = None,
) -> MappingDriver:
    """XmlDriver over the configured search roots, cached if CACHE_METADATA is set."""
    settings = settings or get_settings()
    driver: MappingDriver = XmlDriver(
        paths if paths is not None else settings.get_mapping_paths(),
        persistence=persistence,
    )
    if settings.CACHE_METADATA:
        driver = CachedDriver(driver)
    return driver


def build_mapper(
    session: Session,
    settings: Settings | None = None,
    paths: Sequence[str | Path] | None = None,
) -> Mapper:
    """Mapper backed by SQLAlchemy for both the entities and the side table."""
    persistence = SqlAlchemyPersistence(session)
    driver = build_driver(settings, persistence=persistence, paths=paths)
    return Mapper(driver, persistence, SqlAlchemyMappingStore(session))
