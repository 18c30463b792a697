"""In-memory model of one mapped class.

ClassMetadata is assembled by a driver from a single definition and is
read-only once built: ``field_mappings`` is a read-only mapping and
``identification_strategies`` a tuple.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from src.salesforce_sync.mapping.identification import IdentificationStrategy
from src.salesforce_sync.mapping.schemas import LocalIdentity


@dataclass(frozen=True)
class FieldMapping:
    """Correspondence between a local field and its Salesforce field."""

    local_name: str
    remote_name: str | None = None

    @property
    def salesforce_name(self) -> str:
        return self.remote_name or self.local_name


@dataclass(frozen=True)
class ClassMetadata:
    """Salesforce mapping of a local class.

    Attributes:
        class_name: Fully-qualified local class name.
        salesforce_type: Remote object type, e.g. ``Account``.
        field_mappings: Local field name -> FieldMapping, in declaration order.
        identification_strategies: Strategies in declaration order.
    """

    class_name: str = ""
    salesforce_type: str = ""
    field_mappings: Mapping[str, FieldMapping] = field(default_factory=dict)
    identification_strategies: tuple[IdentificationStrategy, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "field_mappings", MappingProxyType(dict(self.field_mappings)))
        object.__setattr__(
            self, "identification_strategies", tuple(self.identification_strategies)
        )

    @classmethod
    def build(
        cls,
        class_name: str,
        salesforce_type: str,
        fields: Mapping[str, str | None],
        strategies: tuple[IdentificationStrategy, ...] | list[IdentificationStrategy] = (),
    ) -> ClassMetadata:
        """Build from ``{local field: Salesforce field or None}``."""
        return cls(
            class_name=class_name,
            salesforce_type=salesforce_type,
            field_mappings={
                local_name: FieldMapping(local_name, remote_name)
                for local_name, remote_name in fields.items()
            },
            identification_strategies=tuple(strategies),
        )

    def get_field_mapping(self, local_name: str) -> FieldMapping:
        return self.field_mappings[local_name]

    def get_field_names(self) -> list[str]:
        return list(self.field_mappings)

    def get_local_identity(self) -> LocalIdentity | None:
        """Descriptor of the first strategy that keeps the remote id locally.

        Returns None when no strategy does, i.e. the class is full-remote.
        """
        for strategy in self.identification_strategies:
            identity = strategy.local_identity()
            if identity is not None:
                return identity
        return None

    def get_matching_field(self) -> str | None:
        """Matching field of the first full-remote strategy that declares one."""
        for strategy in self.identification_strategies:
            matching_field = getattr(strategy, "matching_field", None)
            if strategy.accepts_matching_field and matching_field:
                return matching_field
        return None
