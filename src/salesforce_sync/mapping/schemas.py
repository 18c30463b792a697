"""Pydantic schemas for the remote side of a mapping and the sync unit of work.

Defines:
- Action: create / update / delete
- LocalIdentityKind, LocalIdentity: where a remote id is kept locally
- SObject: field bag sent to or read from Salesforce, with explicit clears
- SalesforcePayload, LocalReference, SyncEvent: one pending sync action
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)


# ── Enums ───────────────────────────────────────────────────────────────────


class Action(str, Enum):
    """Kind of change a SyncEvent asks the remote system to apply."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"

    @classmethod
    def _missing_(cls, value: object) -> Action | None:
        # Case-insensitive, "Create" -> CREATE
        if isinstance(value, str):
            return cls.__members__.get(value.upper())
        return None


class LocalIdentityKind(str, Enum):
    """Storage used for a remote id on the local side."""

    MAPPING_TABLE = "mappingTable"
    PROPERTY = "property"


# ── Identity ────────────────────────────────────────────────────────────────


class LocalIdentity(BaseModel):
    """Resolved local identity descriptor of a mapped class.

    A class with no descriptor at all (None) is full-remote: its remote id
    is never stored locally.
    """

    model_config = ConfigDict(frozen=True)

    kind: LocalIdentityKind
    property: str | None = None


# ── Remote Object ───────────────────────────────────────────────────────────


class SObject(BaseModel):
    """Salesforce object payload.

    ``fields`` holds the values to send; ``fields_to_null`` lists fields
    that must be cleared remotely. A field is in at most one of the two.
    A field in neither is simply left untouched by the remote system.

    Instances are read-only, ``fields`` included.
    """

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    fields: Mapping[str, Any] = Field(default_factory=dict)
    fields_to_null: tuple[str, ...] = ()

    @field_validator("fields", mode="after")
    @classmethod
    def _freeze_fields(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    @field_validator("fields_to_null", mode="after")
    @classmethod
    def _dedupe_fields_to_null(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(dict.fromkeys(value))

    @model_validator(mode="after")
    def _check_exclusive(self) -> SObject:
        both = [name for name in self.fields_to_null if name in self.fields]
        if both:
            raise ValueError(f"fields both set and cleared: {', '.join(both)}")
        return self

    @field_serializer("fields")
    def _serialize_fields(self, value: Mapping[str, Any]) -> dict[str, Any]:
        return dict(value)

    def is_null(self, name: str) -> bool:
        return name in self.fields_to_null

    def get(self, name: str, default: Any = None) -> Any:
        return self.fields.get(name, default)

    def to_payload(self) -> dict[str, Any]:
        """Render the wire format expected by the Salesforce REST/SOAP APIs."""
        payload: dict[str, Any] = {}
        if self.id is not None:
            payload["Id"] = self.id
        payload.update(self.fields)
        if self.fields_to_null:
            payload["fieldsToNull"] = list(self.fields_to_null)
        return payload

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> SObject:
        """Build an SObject from an API record, dropping the ``attributes`` envelope."""
        fields_to_null = tuple(payload.get("fieldsToNull") or ())
        fields = {
            key: value
            for key, value in payload.items()
            if key not in ("attributes", "Id", "fieldsToNull") and key not in fields_to_null
        }
        return cls(id=payload.get("Id"), fields=fields, fields_to_null=fields_to_null)


# ── Sync Event ──────────────────────────────────────────────────────────────


class SalesforcePayload(BaseModel):
    """Remote half of a SyncEvent."""

    model_config = ConfigDict(frozen=True)

    s_object: SObject
    type: str


class LocalReference(BaseModel):
    """Local half of a SyncEvent: which entity the change came from."""

    model_config = ConfigDict(frozen=True)

    id: Any = None
    type: str


class SyncEvent(BaseModel):
    """Immutable record of one pending create/update/delete against Salesforce."""

    model_config = ConfigDict(frozen=True)

    salesforce: SalesforcePayload
    local: LocalReference
    action: Action
