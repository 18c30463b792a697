"""SQLAlchemy-backed Persistence, FieldAccessor and MappingStore.

Local classes are addressed by fully-qualified name (``module.QualName``),
the same names used in ``entity class="..."`` of mapping files.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import structlog
from sqlalchemy import inspect, select
from sqlalchemy.orm import Mapper as OrmMapper
from sqlalchemy.orm import Session

from src.salesforce_sync.core.database import Base
from src.salesforce_sync.mapping.exceptions import InvalidMappingDefinitionError
from src.salesforce_sync.orm.models import SalesforceMappingModel

logger = structlog.get_logger(__name__)


def qualified_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


class SqlAlchemyFieldAccessor:
    """Field table of one mapped class, built from its ORM attributes."""

    def __init__(self, class_name: str, orm_mapper: OrmMapper) -> None:
        self._class_name = class_name
        self._fields = tuple(orm_mapper.attrs.keys())

    @property
    def field_names(self) -> tuple[str, ...]:
        return self._fields

    def has_field(self, name: str) -> bool:
        return name in self._fields

    def get(self, entity: Any, name: str) -> Any:
        self._check(name)
        return getattr(entity, name)

    def set(self, entity: Any, name: str, value: Any) -> None:
        self._check(name)
        setattr(entity, name, value)

    def _check(self, name: str) -> None:
        if name not in self._fields:
            raise InvalidMappingDefinitionError(self._class_name, f"Field '{name}' does not exist")


class SqlAlchemyPersistence:
    """Persistence layer over a SQLAlchemy Session.

    Args:
        session: Session used for lookups.
        models: Mapped classes addressable by name. Defaults to every class
            registered on ``Base``.
    """

    def __init__(self, session: Session, models: Iterable[type] | None = None) -> None:
        self._session = session
        if models is None:
            models = [orm_mapper.class_ for orm_mapper in Base.registry.mappers]
        self._models: dict[str, type] = {qualified_name(model): model for model in models}

    @property
    def session(self) -> Session:
        return self._session

    def _model_for(self, class_name: str) -> type:
        model = self._models.get(class_name)
        if model is None:
            raise InvalidMappingDefinitionError(class_name, "Unknown local class")
        return model

    def get_schema_for(self, class_name: str) -> SqlAlchemyFieldAccessor:
        return SqlAlchemyFieldAccessor(class_name, inspect(self._model_for(class_name)))

    def resolve_concrete_type(self, entity: Any) -> str:
        return qualified_name(inspect(entity).mapper.class_)

    def get_identifier(self, entity: Any) -> Any:
        orm_mapper = inspect(entity).mapper
        values = orm_mapper.primary_key_from_instance(entity)
        if all(value is None for value in values):
            return None
        return values[0] if len(values) == 1 else tuple(values)

    def find(self, class_name: str, entity_id: Any) -> Any | None:
        model = self._model_for(class_name)
        return self._session.get(model, self._coerce_identifier(model, entity_id))

    def find_one_by(self, class_name: str, criteria: dict[str, Any]) -> Any | None:
        model = self._model_for(class_name)
        return self._session.scalars(select(model).filter_by(**criteria)).first()

    @staticmethod
    def _coerce_identifier(model: type, entity_id: Any) -> Any:
        """Convert a stored text id back to the primary key's Python type."""
        primary_key = inspect(model).primary_key
        if len(primary_key) != 1:
            return entity_id
        try:
            python_type = primary_key[0].type.python_type
        except NotImplementedError:
            return entity_id
        if isinstance(entity_id, python_type):
            return entity_id
        try:
            return python_type(entity_id)
        except (TypeError, ValueError):
            return entity_id


class SqlAlchemyMappingStore:
    """salesforce_mappings side table accessed through a Session."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def find_by_local_key(self, class_name: str, local_id: Any) -> SalesforceMappingModel | None:
        stmt = select(SalesforceMappingModel).where(
            SalesforceMappingModel.entity_type == class_name,
            SalesforceMappingModel.entity_id == str(local_id),
        )
        return self._session.scalars(stmt).first()

    def find_by_remote_key(
        self, salesforce_id: str, class_name: str
    ) -> SalesforceMappingModel | None:
        stmt = select(SalesforceMappingModel).where(
            SalesforceMappingModel.salesforce_id == salesforce_id,
            SalesforceMappingModel.entity_type == class_name,
        )
        return self._session.scalars(stmt).first()

    def save(self, class_name: str, local_id: Any, salesforce_id: str) -> SalesforceMappingModel:
        """Record (or replace) the Salesforce id of a local entity."""
        record = self.find_by_local_key(class_name, local_id)
        if record is None:
            record = SalesforceMappingModel(
                entity_type=class_name,
                entity_id=str(local_id),
                salesforce_id=salesforce_id,
            )
            self._session.add(record)
        else:
            record.salesforce_id = salesforce_id
        self._session.flush()

        logger.info(
            "mapping_store.saved",
            class_name=class_name,
            local_id=str(local_id),
            salesforce_id=salesforce_id,
        )
        return record

    def remove(self, class_name: str, local_id: Any) -> bool:
        """Forget the Salesforce id of a local entity. Returns False if none was stored."""
        record = self.find_by_local_key(class_name, local_id)
        if record is None:
            return False
        self._session.delete(record)
        self._session.flush()

        logger.info("mapping_store.removed", class_name=class_name, local_id=str(local_id))
        return True
