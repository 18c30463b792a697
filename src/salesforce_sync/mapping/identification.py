"""Identification strategies -- where a local entity's Salesforce id lives.

Three variants:
- MappingTableStrategy: id kept in the salesforce_mappings side table,
  keyed by (local class name, local id)
- PropertyStrategy: id kept on a named property of the entity itself
- FullRemoteStrategy: id never kept locally; an optional matching field
  correlates records by value instead

Strategies are declared by string identifier in mapping files and built
through STRATEGY_REGISTRY. Each variant states its capabilities as class
attributes; the driver reads them instead of inspecting types.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING

from src.salesforce_sync.mapping.exceptions import MissingDriverConfigurationError
from src.salesforce_sync.mapping.schemas import LocalIdentity, LocalIdentityKind

if TYPE_CHECKING:
    from src.salesforce_sync.mapping.persistence import Persistence


class UnknownStrategyError(KeyError):
    """Raised when an identifier resolves to no registered strategy."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(identifier)


class IdentificationStrategy(ABC):
    """Base class for identification strategies.

    Class attributes:
        requires_persistence: The driver must inject a persistence handle.
        is_property_based: The definition must declare ``property``.
        accepts_matching_field: The definition may declare ``matchingField``.
    """

    identifier: str = ""
    requires_persistence: bool = False
    is_property_based: bool = False
    accepts_matching_field: bool = False

    def __init__(self) -> None:
        self._persistence: Persistence | None = None

    @property
    def persistence(self) -> Persistence:
        if self._persistence is None:
            raise MissingDriverConfigurationError(type(self).__name__, ["persistence"])
        return self._persistence

    def set_persistence(self, persistence: Persistence) -> None:
        self._persistence = persistence

    @abstractmethod
    def local_identity(self) -> LocalIdentity | None:
        """Return the descriptor this strategy contributes, or None if full-remote."""
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class MappingTableStrategy(IdentificationStrategy):
    identifier = "mappingTable"
    requires_persistence = True

    def local_identity(self) -> LocalIdentity:
        return LocalIdentity(kind=LocalIdentityKind.MAPPING_TABLE)


class PropertyStrategy(IdentificationStrategy):
    identifier = "property"
    requires_persistence = True
    is_property_based = True

    def __init__(self, property_name: str | None = None) -> None:
        super().__init__()
        self.property_name = property_name

    def set_property(self, property_name: str) -> None:
        self.property_name = property_name

    def local_identity(self) -> LocalIdentity:
        return LocalIdentity(kind=LocalIdentityKind.PROPERTY, property=self.property_name)

    def __repr__(self) -> str:
        return f"PropertyStrategy(property_name={self.property_name!r})"


class FullRemoteStrategy(IdentificationStrategy):
    identifier = "fullRemote"
    accepts_matching_field = True

    def __init__(self, matching_field: str | None = None) -> None:
        super().__init__()
        self.matching_field = matching_field

    def set_matching_field(self, matching_field: str) -> None:
        self.matching_field = matching_field

    def local_identity(self) -> None:
        return None

    def __repr__(self) -> str:
        return f"FullRemoteStrategy(matching_field={self.matching_field!r})"


# ── Registry ────────────────────────────────────────────────────────────────

StrategyFactory = Callable[[], IdentificationStrategy]

STRATEGY_REGISTRY: dict[str, StrategyFactory] = {}

_NAMESPACE_SEPARATORS = re.compile(r"[.\\]")


def register_strategy(identifier: str, factory: StrategyFactory) -> None:
    """Register a strategy factory under an identifier.

    Raises:
        ValueError: If the identifier is already bound to another factory.
    """
    existing = STRATEGY_REGISTRY.get(identifier)
    if existing is not None and existing is not factory:
        raise ValueError(f"Identification strategy '{identifier}' is already registered")
    STRATEGY_REGISTRY[identifier] = factory


def resolve_strategy(identifier: str) -> IdentificationStrategy:
    """Build a fresh strategy instance for an identifier.

    Namespaced identifiers (``pkg.module.PropertyStrategy`` or
    ``Vendor\\Bundle\\PropertyStrategy``) fall back to their short name.

    Raises:
        UnknownStrategyError: If nothing is registered under the identifier.
    """
    factory = STRATEGY_REGISTRY.get(identifier)
    if factory is None:
        short_name = _NAMESPACE_SEPARATORS.split(identifier)[-1]
        factory = STRATEGY_REGISTRY.get(short_name) if short_name else None
    if factory is None:
        raise UnknownStrategyError(identifier)
    return factory()


for _strategy_cls in (MappingTableStrategy, PropertyStrategy, FullRemoteStrategy):
    register_strategy(_strategy_cls.identifier, _strategy_cls)
    register_strategy(_strategy_cls.__name__, _strategy_cls)
