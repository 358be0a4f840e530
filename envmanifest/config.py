from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from typing import Any, ClassVar, Dict, Iterator, List, Tuple

from .exceptions import (
    ManifestFormatError,
    MissingParametersError,
    UndefinedAccessorError,
    UndefinedParameterError,
)
from .manifest import Manifest, ParameterDeclaration
from .resolver import resolve
from .sources import DictSource, EnvSource, FileSource, ManifestSource

logger = logging.getLogger(__name__)


class Config(Mapping[str, Any]):
    """
    Declared configuration parameters and their values.

    Parameters are declared in manifest fragments and read from the
    environment on every `load()`:

        config = Config("manifest.yml")
        config["db_url"]
        config.db_url

    Provides mapping access (config["name"]) and attribute-style access
    (config.name) for every declared parameter. Names that clash with
    Config methods are only reachable via mapping access.
    """

    default_options: ClassVar[Dict[str, Any]] = {
        "raise_on_missing_params": True,
        "use_dotenv": True,
        "dotenv_path": ".env",
        "environ": None,
    }

    def __init__(self, source: Any = None, **options: Any):
        self._manifest = Manifest()
        self._values: Dict[str, Any] = {}
        self._missing: List[str] = []
        self._loaded = False
        if source is not None:
            self.load(source, **options)

    def load(self, source: Any = None, **options: Any) -> "Config":
        """
        Merge a manifest fragment and re-read every parameter from the environment.

        `source` may be a ManifestSource, a mapping, a path to a manifest
        file, or None to re-resolve the current manifest. A malformed
        fragment or an invalid value leaves the Config unchanged; missing
        required parameters are recorded before MissingParametersError is
        raised, so missing_params() reports them.

        :raises ManifestLoadError: if the manifest file cannot be read.
        :raises ManifestFormatError: if the fragment is malformed.
        :raises InvalidValueError: if an environment value does not match its type.
        :raises MissingParametersError: if required parameters are unset and
            `raise_on_missing_params` is enabled.
        """
        opts = self._merge_options(options)

        manifest = self._manifest.copy()
        fragment = _as_source(source).load() if source is not None else None
        if fragment is not None:
            manifest.merge(fragment)

        env = EnvSource(opts["environ"], dotenv_path=opts["dotenv_path"])
        values, missing = resolve(manifest, env.snapshot(opts["use_dotenv"]))

        self._manifest = manifest
        self._values = values
        self._missing = missing

        if opts["raise_on_missing_params"] and missing:
            raise MissingParametersError(missing)

        self._loaded = True
        logger.debug("Loaded %d parameter(s), %d missing", len(manifest), len(missing))
        return self

    def _merge_options(self, options: Mapping[str, Any]) -> Dict[str, Any]:
        unknown = set(options) - set(self.default_options)
        if unknown:
            raise TypeError(f"Unknown load option(s): {', '.join(sorted(unknown))}")
        return {**self.default_options, **options}

    def missing_params(self) -> List[str]:
        """Return required parameters that had no value at the last load."""
        return list(self._missing)

    def manifest(self) -> Tuple[ParameterDeclaration, ...]:
        """Return the declared parameters in declaration order."""
        return self._manifest.entries()

    def contains(self, name: str) -> bool:
        """
        Return True if the manifest declares `name`.

        Declared parameters are safe to read via config[name] and config.name.
        """
        return isinstance(name, str) and name in self._manifest

    def get(self, name: str) -> Any:  # type: ignore[override]
        """
        Return the value of a declared parameter.

        Unlike Mapping.get, there is no fallback: an undeclared name
        raises UndefinedParameterError. A required parameter left unset
        by a non-raising load reads as None.
        """
        return self[name]

    def to_mapping(self) -> Dict[str, Any]:
        """Return a snapshot of every declared parameter and its value."""
        return {name: self._values.get(name) for name in self._manifest.names()}

    @property
    def loaded(self) -> bool:
        return self._loaded

    def __getitem__(self, name: str) -> Any:
        if not isinstance(name, str):
            raise TypeError(f"Parameter names are strings, got {type(name).__name__}")
        if name not in self._manifest:
            raise UndefinedParameterError(name)
        return self._values.get(name)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.contains(name)

    def __iter__(self) -> Iterator[str]:
        return iter(self._manifest.names())

    def __len__(self) -> int:
        return len(self._manifest)

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails
        if name.startswith("_"):
            raise AttributeError(name)
        if name not in self._manifest:
            raise UndefinedAccessorError(name)
        return self._values.get(name)

    def __dir__(self) -> List[str]:
        return sorted(set(super().__dir__()) | set(self._manifest.names()))

    def __repr__(self) -> str:
        # Values may be secrets, show names only
        names = self._manifest.names()
        keys_preview = ", ".join(names[:5])
        more = "..." if len(names) > 5 else ""
        return f"<Config params=[{keys_preview}{more}]>"


def _as_source(source: Any) -> ManifestSource:
    if isinstance(source, ManifestSource):
        return source
    if isinstance(source, Mapping):
        return DictSource(source)
    if isinstance(source, (str, os.PathLike)):
        return FileSource(source)
    raise ManifestFormatError(
        f"Unsupported manifest source {source!r}; "
        "expected a ManifestSource, a mapping or a file path."
    )
