from __future__ import annotations

"""
envmanifest - Declare configuration parameters once, read them from the environment.

This package provides:
- Config: loads manifest fragments and resolves parameter values from ENV.
- Manifest: ordered, mergeable parameter declarations.
- resolve / coerce: the resolution engine and type coercion.
- Built-in manifest sources: dict and file, plus an environment snapshot.
"""

from .coercion import coerce, register_type
from .config import Config
from .exceptions import (
    ConfigurationError,
    DeclarationConflictError,
    InvalidValueError,
    ManifestFormatError,
    ManifestLoadError,
    MissingParametersError,
    UndefinedAccessorError,
    UndefinedParameterError,
)
from .manifest import (
    Const,
    Default,
    Manifest,
    ParameterDeclaration,
    ParameterKind,
    Required,
)
from .resolver import Resolution, resolve
from .sources import DictSource, EnvSource, FileSource, ManifestSource

__version__ = "0.1.0"

__all__ = [
    "Config",
    "Manifest",
    "ParameterDeclaration",
    "ParameterKind",
    "Required",
    "Default",
    "Const",
    "Resolution",
    "resolve",
    "coerce",
    "register_type",
    "ManifestSource",
    "DictSource",
    "FileSource",
    "EnvSource",
    "ConfigurationError",
    "ManifestFormatError",
    "DeclarationConflictError",
    "ManifestLoadError",
    "InvalidValueError",
    "MissingParametersError",
    "UndefinedParameterError",
    "UndefinedAccessorError",
]
