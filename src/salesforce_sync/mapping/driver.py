"""Mapping drivers -- load ClassMetadata from declarative definitions.

MappingDriver is the interface the mapper depends on. XmlDriver reads
``<ShortClassName>.mapping.xml`` files from an ordered list of search roots:

    <mapping>
      <entity class="app.models.Customer" object="Account">
        <property field="name" name="Name"/>
        <identification-strategies>
          <strategy class="mappingTable"/>
          <strategy class="property" property="salesforce_id"/>
          <strategy class="fullRemote" matchingField="Email"/>
        </identification-strategies>
      </entity>
    </mapping>

CachedDriver memoizes another driver per class name.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import structlog
from lxml import etree

from src.salesforce_sync.core.monitoring import track_metadata_load
from src.salesforce_sync.mapping.exceptions import (
    InvalidMappingDefinitionError,
    MappingNotFoundError,
    MissingDriverConfigurationError,
    XmlParseError,
)
from src.salesforce_sync.mapping.identification import (
    IdentificationStrategy,
    UnknownStrategyError,
    resolve_strategy,
)
from src.salesforce_sync.mapping.locator import FileLocator
from src.salesforce_sync.mapping.metadata import ClassMetadata
from src.salesforce_sync.mapping.persistence import Persistence

logger = structlog.get_logger(__name__)

MAPPING_FILE_SUFFIX = ".mapping.xml"

_NAMESPACE_SEPARATORS = re.compile(r"[.\\]")


def short_class_name(class_name: str) -> str:
    """``app.models.Customer`` -> ``Customer``; PHP-style backslashes work too."""
    return _NAMESPACE_SEPARATORS.split(class_name)[-1]


class MappingDriver(ABC):
    """Source of ClassMetadata."""

    @abstractmethod
    def load_metadata_for_class(self, class_name: str) -> ClassMetadata:
        """Load the mapping of one class.

        Raises:
            MappingNotFoundError: No definition exists for the class.
        """
        ...

    @abstractmethod
    def get_all_class_names(self) -> list[str]:
        """Names of every class with a definition. Order is not significant."""
        ...


class XmlDriver(MappingDriver):
    """Driver reading ``*.mapping.xml`` definitions.

    Args:
        paths: Search roots, first match wins. Fixed for the driver's lifetime.
        persistence: Handle injected into strategies that require one. May
            also be supplied later, once, via ``set_persistence``.
    """

    def __init__(self, paths: Sequence[str | Path], persistence: Persistence | None = None) -> None:
        self._paths = tuple(Path(p) for p in paths)
        self._locator = FileLocator(self._paths)
        self._persistence = persistence

    @property
    def paths(self) -> tuple[Path, ...]:
        return self._paths

    @property
    def persistence(self) -> Persistence | None:
        return self._persistence

    def set_persistence(self, persistence: Persistence) -> None:
        if self._persistence is not None and self._persistence is not persistence:
            raise RuntimeError("A persistence handle is already configured on this driver")
        self._persistence = persistence

    # ── Loading ────────────────────────────────────────────────────────────

    def load_metadata_for_class(self, class_name: str) -> ClassMetadata:
        with track_metadata_load():
            file_name = self._locator.locate(short_class_name(class_name) + MAPPING_FILE_SUFFIX)
            if file_name is None:
                logger.warning("mapping_driver.file_not_found", class_name=class_name)
                raise MappingNotFoundError(class_name)

            return self._load_class_from_mapping_file(class_name, file_name)

    def _load_class_from_mapping_file(self, class_name: str, file_name: Path) -> ClassMetadata:
        classes = self._load_classes_from_mapping_file(file_name, class_name)

        if class_name not in classes:
            logger.warning(
                "mapping_driver.class_not_declared",
                class_name=class_name,
                path=str(file_name),
            )
            raise MappingNotFoundError(class_name)

        entity_element = classes[class_name]

        metadata = ClassMetadata.build(
            class_name,
            entity_element.get("object", ""),
            self._read_field_mappings(class_name, entity_element),
            self._read_identification_strategies(class_name, entity_element),
        )

        logger.debug(
            "mapping_driver.metadata_loaded",
            class_name=class_name,
            salesforce_type=metadata.salesforce_type,
            fields=len(metadata.field_mappings),
            strategies=len(metadata.identification_strategies),
        )
        return metadata

    def _load_classes_from_mapping_file(
        self, file_name: Path, class_name: str = "all"
    ) -> dict[str, Any]:
        """Parse a file into ``{declared class name: entity element}``."""
        try:
            tree = etree.parse(str(file_name), _make_parser())
        except (etree.XMLSyntaxError, OSError) as exc:
            logger.warning(
                "mapping_driver.xml_parse_failure",
                class_name=class_name,
                path=str(file_name),
                error=str(exc),
            )
            raise XmlParseError(class_name, str(exc), str(file_name)) from exc

        classes: dict[str, Any] = {}
        for entity_element in _children(tree.getroot(), "entity"):
            entity_class = entity_element.get("class")
            if entity_class:
                classes[entity_class] = entity_element
        return classes

    def _read_field_mappings(self, class_name: str, element: Any) -> dict[str, str | None]:
        fields: dict[str, str | None] = {}
        for property_element in _children(element, "property"):
            field = property_element.get("field")
            if not field:
                raise InvalidMappingDefinitionError(
                    class_name, "property element without a 'field' attribute"
                )
            fields[field] = property_element.get("name") or None
        return fields

    def _read_identification_strategies(
        self, class_name: str, element: Any
    ) -> list[IdentificationStrategy]:
        return [
            self._build_strategy(class_name, strategy_element)
            for container in _children(element, "identification-strategies")
            for strategy_element in _children(container, "strategy")
        ]

    def _build_strategy(self, class_name: str, strategy_element: Any) -> IdentificationStrategy:
        identifier = strategy_element.get("class", "")

        try:
            strategy = resolve_strategy(identifier)
        except UnknownStrategyError:
            logger.warning(
                "mapping_driver.invalid_strategy",
                class_name=class_name,
                strategy=identifier,
            )
            raise InvalidMappingDefinitionError(
                class_name, f"Invalid identification strategy '{identifier}'"
            ) from None

        if strategy.requires_persistence:
            if self._persistence is None:
                raise MissingDriverConfigurationError(class_name, ["persistence"])
            strategy.set_persistence(self._persistence)

        if strategy.is_property_based:
            property_name = strategy_element.get("property")
            if not property_name:
                raise InvalidMappingDefinitionError(
                    class_name, f"Identification strategy '{identifier}' requires a 'property'"
                )
            strategy.set_property(property_name)

        if strategy.accepts_matching_field:
            matching_field = strategy_element.get("matchingField")
            if matching_field:
                strategy.set_matching_field(matching_field)

        return strategy

    # ── Enumeration ────────────────────────────────────────────────────────

    def get_all_class_names(self) -> list[str]:
        classes: list[str] = []

        for path in self._paths:
            if not path.is_dir():
                raise InvalidMappingDefinitionError("all", f"invalid directory {path}")

            for file_name in FileLocator.iter_files(path, MAPPING_FILE_SUFFIX):
                classes.extend(self._load_classes_from_mapping_file(file_name))

        return classes


class CachedDriver(MappingDriver):
    """Memoize ``load_metadata_for_class`` of another driver by class name.

    Failures are not cached.
    """

    def __init__(self, driver: MappingDriver) -> None:
        self._driver = driver
        self._cache: dict[str, ClassMetadata] = {}

    def load_metadata_for_class(self, class_name: str) -> ClassMetadata:
        metadata = self._cache.get(class_name)
        if metadata is None:
            metadata = self._driver.load_metadata_for_class(class_name)
            self._cache[class_name] = metadata
        return metadata

    def get_all_class_names(self) -> list[str]:
        return self._driver.get_all_class_names()

    def clear(self) -> None:
        self._cache.clear()


def _make_parser() -> etree.XMLParser:
    # Parsers are not shared between threads
    return etree.XMLParser(resolve_entities=False, no_network=True, remove_comments=True)


def _children(element: Any, name: str) -> list[Any]:
    """Direct children with the given local name, namespace ignored."""
    return [
        child
        for child in element
        if isinstance(child.tag, str) and etree.QName(child).localname == name
    ]
