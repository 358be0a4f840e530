from __future__ import annotations

from typing import Any, Iterable, List


class ConfigurationError(Exception):
    """Base class for every error raised by envmanifest."""


class ManifestFormatError(ConfigurationError):
    """Raised when a manifest fragment is not well-formed."""


class DeclarationConflictError(ManifestFormatError):
    """Raised when one declaration mixes 'default' and 'const'."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"Invalid mix of 'const' and 'default' in parameter definition '{name}'"
        )


class ManifestLoadError(ConfigurationError):
    """Raised when a manifest document cannot be read or parsed."""


class InvalidValueError(ConfigurationError):
    """Raised when a raw environment value cannot be coerced to its declared type."""

    def __init__(self, name: str | None, raw: Any, type_name: str):
        self.name = name
        self.raw = raw
        self.type_name = type_name
        subject = f"parameter '{name}'" if name else "value"
        super().__init__(f"Invalid {type_name} value for {subject}: {raw!r}")


class MissingParametersError(ConfigurationError):
    """Raised when required parameters have no value after a load."""

    def __init__(self, names: Iterable[str]):
        self.names: List[str] = list(names)
        super().__init__(
            "Missing required configurable parameters: " + ", ".join(self.names)
        )


class UndefinedParameterError(ConfigurationError, KeyError):
    """Raised on lookup of a name that the manifest does not declare."""

    def __init__(self, name: Any):
        super().__init__(f"Undefined parameter '{name}'")
        self.name = name

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0])


class UndefinedAccessorError(UndefinedParameterError, AttributeError):
    """Raised on attribute-style access to an undeclared parameter."""

    def __init__(self, name: str):
        super().__init__(name)
        self.args = (f"No accessor for undeclared parameter '{name}'",)
