"""Interfaces of the local collaborators the mapper depends on.

The mapper never talks to an ORM directly. It needs:
- Persistence: schema access, lookups and the concrete type of an entity
- FieldAccessor: read/write of named fields on one class of entity
- MappingStore: the (class, local id) <-> Salesforce id side table

orm.adapter provides SQLAlchemy implementations; tests use mocks.
"""

from __future__ import annotations

from typing import Any, Protocol


class FieldAccessor(Protocol):
    """Field table of one local class."""

    def has_field(self, name: str) -> bool: ...

    def get(self, entity: Any, name: str) -> Any: ...

    def set(self, entity: Any, name: str, value: Any) -> None: ...


class Persistence(Protocol):
    """Local persistence layer."""

    def get_schema_for(self, class_name: str) -> FieldAccessor: ...

    def resolve_concrete_type(self, entity: Any) -> str:
        """Fully-qualified name of the entity's mapped class, proxies unwrapped."""
        ...

    def get_identifier(self, entity: Any) -> Any:
        """Local id of the entity, or None if it was never persisted."""
        ...

    def find(self, class_name: str, entity_id: Any) -> Any | None: ...

    def find_one_by(self, class_name: str, criteria: dict[str, Any]) -> Any | None: ...


class MappingRecord(Protocol):
    entity_type: str
    entity_id: str
    salesforce_id: str


class MappingStore(Protocol):
    """Side table associating local entities with Salesforce ids."""

    def find_by_local_key(self, class_name: str, local_id: Any) -> MappingRecord | None: ...

    def find_by_remote_key(self, salesforce_id: str, class_name: str) -> MappingRecord | None: ...
