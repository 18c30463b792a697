"""Mapper facade -- local entities <-> Salesforce objects.

Combines a MappingDriver (what maps to what), a Persistence layer (how to
read, write and find local entities) and a MappingStore (the side table of
Salesforce ids) to:
- turn an entity into a SyncEvent for a create/update/delete
- copy a Salesforce object's fields back onto an entity
- resolve the Salesforce id of an entity, or the entity of a Salesforce id
- check a mapping against the local schema

Empty values (None or "") are never sent as values. On an update or delete
of a persisted entity they are listed in ``fields_to_null``; on a create
they are left out entirely since there is nothing remote to clear yet.
"""

from __future__ import annotations

from typing import Any

import structlog

from src.salesforce_sync.core.monitoring import identity_lookups_total, mapping_events_total
from src.salesforce_sync.mapping.driver import MappingDriver
from src.salesforce_sync.mapping.exceptions import (
    InvalidMappingDefinitionError,
    InvalidMappingStateError,
)
from src.salesforce_sync.mapping.metadata import ClassMetadata
from src.salesforce_sync.mapping.persistence import MappingStore, Persistence
from src.salesforce_sync.mapping.schemas import (
    Action,
    LocalIdentity,
    LocalIdentityKind,
    LocalReference,
    SalesforcePayload,
    SObject,
    SyncEvent,
)

logger = structlog.get_logger(__name__)


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


class Mapper:
    """Metadata-driven mapping between local entities and Salesforce objects.

    Args:
        mapping_driver: Source of ClassMetadata.
        persistence: Local persistence layer.
        mapping_store: Side table used by mapping-table identification.
    """

    def __init__(
        self,
        mapping_driver: MappingDriver,
        persistence: Persistence,
        mapping_store: MappingStore,
    ) -> None:
        self._driver = mapping_driver
        self._persistence = persistence
        self._mapping_store = mapping_store

    # ── Local -> Salesforce ────────────────────────────────────────────────

    def map_to_salesforce_object(self, entity: Any, action: Action | str) -> SyncEvent:
        """Build the SyncEvent for applying ``action`` to ``entity`` remotely.

        Raises:
            InvalidMappingStateError: Update/delete of an entity whose
                Salesforce id cannot be resolved.
        """
        action = Action(action)
        model_class = self._persistence.resolve_concrete_type(entity)
        entity_mapping = self._driver.load_metadata_for_class(model_class)
        schema = self._persistence.get_schema_for(model_class)
        local_id = self._persistence.get_identifier(entity)

        values: dict[str, Any] = {}
        clears: list[str] = []

        for field_name in entity_mapping.get_field_names():
            mapping = entity_mapping.get_field_mapping(field_name)
            value = schema.get(entity, field_name)

            if _is_empty(value):
                if action is not Action.CREATE and local_id is not None:
                    values.pop(mapping.salesforce_name, None)
                    clears.append(mapping.salesforce_name)
            else:
                if mapping.salesforce_name in clears:
                    clears.remove(mapping.salesforce_name)
                values[mapping.salesforce_name] = value

        salesforce_id = None
        if action in (Action.UPDATE, Action.DELETE):
            salesforce_id = self._get_salesforce_id(entity, model_class, entity_mapping)
            if salesforce_id is None:
                logger.warning(
                    "mapper.missing_salesforce_id",
                    class_name=model_class,
                    local_id=local_id,
                    action=action.value,
                )
                raise InvalidMappingStateError(
                    model_class,
                    f"no Salesforce id resolvable for {action.value} of entity {local_id!r}",
                )

        s_object = SObject(id=salesforce_id, fields=values, fields_to_null=clears)

        mapping_events_total.labels(
            remote_type=entity_mapping.salesforce_type, action=action.value
        ).inc()
        logger.debug(
            "mapper.sync_event_built",
            class_name=model_class,
            local_id=local_id,
            action=action.value,
            fields=len(s_object.fields),
            fields_to_null=len(s_object.fields_to_null),
        )

        return SyncEvent(
            salesforce=SalesforcePayload(
                s_object=s_object,
                type=entity_mapping.salesforce_type,
            ),
            local=LocalReference(id=local_id, type=model_class),
            action=action,
        )

    # ── Salesforce -> Local ────────────────────────────────────────────────

    def map_from_salesforce_object(self, s_object: SObject | dict[str, Any], entity: Any) -> Any:
        """Copy every mapped field of ``s_object`` onto ``entity`` and return it.

        Fields missing from the remote object are set to None.
        """
        mapped_class = self._persistence.resolve_concrete_type(entity)
        entity_mapping = self._driver.load_metadata_for_class(mapped_class)
        schema = self._persistence.get_schema_for(mapped_class)

        for field_name in entity_mapping.get_field_names():
            mapping = entity_mapping.get_field_mapping(field_name)
            schema.set(entity, field_name, s_object.get(mapping.salesforce_name))

        return entity

    # ── Identity ───────────────────────────────────────────────────────────

    def get_salesforce_id(self, entity: Any) -> str | None:
        """Salesforce id of ``entity``, or None if it has none locally."""
        class_name = self._persistence.resolve_concrete_type(entity)
        metadata = self._driver.load_metadata_for_class(class_name)
        return self._get_salesforce_id(entity, class_name, metadata)

    def _get_salesforce_id(
        self, entity: Any, class_name: str, metadata: ClassMetadata
    ) -> str | None:
        local_mapping = metadata.get_local_identity()
        if local_mapping is None:
            return None

        if local_mapping.kind == LocalIdentityKind.MAPPING_TABLE:
            local_id = self._persistence.get_identifier(entity)
            record = (
                self._mapping_store.find_by_local_key(class_name, local_id)
                if local_id is not None
                else None
            )
            salesforce_id = record.salesforce_id if record is not None else None

        elif local_mapping.kind == LocalIdentityKind.PROPERTY:
            schema = self._persistence.get_schema_for(class_name)
            value = schema.get(entity, local_mapping.property)
            salesforce_id = None if _is_empty(value) else value

        else:
            raise InvalidMappingDefinitionError(class_name, "Invalid local mapping type")

        identity_lookups_total.labels(
            kind=local_mapping.kind.value,
            outcome="found" if salesforce_id is not None else "missing",
        ).inc()
        return salesforce_id

    def get_entity(self, entity_type: str, salesforce_id: str) -> Any | None:
        """Local entity of class ``entity_type`` mapped to ``salesforce_id``, or None.

        Raises:
            InvalidMappingDefinitionError: The class has an unusable identity
                definition.
        """
        metadata = self._driver.load_metadata_for_class(entity_type)

        local_mapping = metadata.get_local_identity()
        if local_mapping is None:
            return None

        if local_mapping.kind == LocalIdentityKind.MAPPING_TABLE:
            record = self._mapping_store.find_by_remote_key(salesforce_id, entity_type)
            entity = (
                self._persistence.find(entity_type, record.entity_id)
                if record is not None
                else None
            )

        elif local_mapping.kind == LocalIdentityKind.PROPERTY:
            entity = self._persistence.find_one_by(
                entity_type, {local_mapping.property: salesforce_id}
            )

        else:
            raise InvalidMappingDefinitionError(entity_type, "Invalid local mapping type")

        identity_lookups_total.labels(
            kind=local_mapping.kind.value,
            outcome="found" if entity is not None else "missing",
        ).inc()
        return entity

    def get_local_identity(self, class_name: str) -> LocalIdentity | None:
        return self._driver.load_metadata_for_class(class_name).get_local_identity()

    # ── Metadata ───────────────────────────────────────────────────────────

    def load_metadata_for_class(self, class_name: str) -> ClassMetadata:
        return self._driver.load_metadata_for_class(class_name)

    def get_all_class_names(self) -> list[str]:
        """Declared class names, duplicates removed."""
        return list(dict.fromkeys(self._driver.get_all_class_names()))

    def validate_mapping(self, class_name: str) -> None:
        """Check every mapped field (and identity property) exists locally.

        Raises:
            InvalidMappingDefinitionError: On the first field that does not exist.
        """
        schema = self._persistence.get_schema_for(class_name)
        metadata = self._driver.load_metadata_for_class(class_name)

        for field_name in metadata.get_field_names():
            if not schema.has_field(field_name):
                raise InvalidMappingDefinitionError(
                    class_name, f"Field '{field_name}' does not exist"
                )

        local_mapping = metadata.get_local_identity()
        if (
            local_mapping is not None
            and local_mapping.kind == LocalIdentityKind.PROPERTY
            and not schema.has_field(local_mapping.property)
        ):
            raise InvalidMappingDefinitionError(
                class_name, f"Identification property '{local_mapping.property}' does not exist"
            )

    def validate_all(self) -> list[str]:
        """Validate every class the driver knows and return their names."""
        class_names = self.get_all_class_names()
        for class_name in class_names:
            self.validate_mapping(class_name)
        logger.info("mapper.mappings_validated", classes=len(class_names))
        return class_names
