"""Mapping error taxonomy.

Every error carries the offending class name and a human-readable cause so
operators can fix either the mapping definition or the deployment
configuration. Nothing in the mapping layer catches these; they propagate to
whoever drives the sync.
"""

from __future__ import annotations


class MappingException(Exception):
    """Base class for all mapping errors.

    Attributes:
        class_name: Fully-qualified local class the error is about.
    """

    def __init__(self, class_name: str, message: str) -> None:
        self.class_name = class_name
        super().__init__(message)


class MappingNotFoundError(MappingException):
    """No definition resolves for a class."""

    def __init__(self, class_name: str) -> None:
        super().__init__(class_name, f"Could not find a mapping for class '{class_name}'")


class XmlParseError(MappingException):
    """A definition file is malformed. Chained to the parser diagnostic."""

    def __init__(self, class_name: str, diagnostic: str, file_name: str | None = None) -> None:
        self.diagnostic = diagnostic
        self.file_name = file_name
        location = f" in {file_name}" if file_name else ""
        super().__init__(class_name, f"XML parse failure{location}: {diagnostic}")


class InvalidMappingDefinitionError(MappingException):
    """A definition is semantically invalid."""

    def __init__(self, class_name: str, cause: str) -> None:
        self.cause = cause
        super().__init__(
            class_name, f"Invalid mapping definition for class {class_name}: {cause}"
        )


class MissingDriverConfigurationError(MappingException):
    """A strategy needs a collaborator that was never supplied to the driver.

    Attributes:
        missing: Names of every missing dependency.
    """

    def __init__(self, class_name: str, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(
            class_name,
            f"The following configurations are missing for class {class_name}: "
            + ", ".join(self.missing),
        )


class InvalidMappingStateError(MappingException):
    """A runtime invariant does not hold, e.g. an update without a remote id."""

    def __init__(self, class_name: str, cause: str) -> None:
        self.cause = cause
        super().__init__(class_name, f"Invalid mapping state for class {class_name}: {cause}")
