"""Metadata-driven mapping between local entities and Salesforce objects.

Provides:
- XmlDriver / CachedDriver: load ClassMetadata from *.mapping.xml definitions
- Identification strategies: mapping table, property, full remote
- Mapper: entity <-> SObject conversion, identity resolution, validation
- SyncEvent: the unit of work handed to the Salesforce client

The local persistence layer and the Salesforce transport are collaborators;
see mapping.persistence for the interfaces and orm.adapter for SQLAlchemy.
"""

from src.salesforce_sync.mapping.driver import CachedDriver, MappingDriver, XmlDriver
from src.salesforce_sync.mapping.exceptions import (
    InvalidMappingDefinitionError,
    InvalidMappingStateError,
    MappingException,
    MappingNotFoundError,
    MissingDriverConfigurationError,
    XmlParseError,
)
from src.salesforce_sync.mapping.identification import (
    FullRemoteStrategy,
    IdentificationStrategy,
    MappingTableStrategy,
    PropertyStrategy,
    register_strategy,
    resolve_strategy,
)
from src.salesforce_sync.mapping.mapper import Mapper
from src.salesforce_sync.mapping.metadata import ClassMetadata, FieldMapping
from src.salesforce_sync.mapping.schemas import (
    Action,
    LocalIdentity,
    LocalIdentityKind,
    SObject,
    SyncEvent,
)

__all__ = [
    "Action",
    "CachedDriver",
    "ClassMetadata",
    "FieldMapping",
    "FullRemoteStrategy",
    "IdentificationStrategy",
    "InvalidMappingDefinitionError",
    "InvalidMappingStateError",
    "LocalIdentity",
    "LocalIdentityKind",
    "Mapper",
    "MappingDriver",
    "MappingException",
    "MappingNotFoundError",
    "MappingTableStrategy",
    "MissingDriverConfigurationError",
    "PropertyStrategy",
    "SObject",
    "SyncEvent",
    "XmlDriver",
    "XmlParseError",
    "register_strategy",
    "resolve_strategy",
]
