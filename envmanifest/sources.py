from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict

import json
import logging
import os
import tomllib

import yaml
from dotenv import dotenv_values

from .exceptions import ManifestFormatError, ManifestLoadError

logger = logging.getLogger(__name__)

YAML_SUFFIXES = {".yml", ".yaml"}


class ManifestSource(ABC):
    """Abstract base class for manifest fragment sources."""

    @abstractmethod
    def load(self) -> Mapping[str, Any] | None:
        """Return a manifest fragment or None if nothing was loaded."""
        raise NotImplementedError


class DictSource(ManifestSource):
    """Manifest fragment held in memory."""

    def __init__(self, data: Mapping[str, Any]):
        self._data = dict(data)

    def load(self) -> Mapping[str, Any] | None:
        return dict(self._data)

    def __repr__(self) -> str:
        return f"DictSource({list(self._data)!r})"


class FileSource(ManifestSource):
    """
    Load a manifest fragment from a single file.

    Supported formats (by extension):
      - .yml, .yaml
      - .json
      - .toml  (read only)

    The top level of the document must be a mapping of parameter names.
    An empty YAML document is an empty fragment.
    """

    def __init__(self, path: str | os.PathLike[str], *, optional: bool = False):
        self._path = Path(path).expanduser()
        self._optional = optional

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Mapping[str, Any] | None:
        if not self._path.exists():
            if self._optional:
                logger.debug("Optional manifest %s not found, skipping", self._path)
                return None
            raise ManifestLoadError(f"Manifest file not found: {self._path}")

        suffix = self._path.suffix.lower()
        if suffix in YAML_SUFFIXES:
            data = self._load_yaml()
        elif suffix == ".json":
            data = self._load_json()
        elif suffix == ".toml":
            data = self._load_toml()
        else:
            raise ManifestLoadError(
                f"Unsupported manifest file format: {self._path} "
                f"(extension '{suffix}')"
            )

        if data is None:
            return {}
        if not isinstance(data, Mapping):
            raise ManifestFormatError(
                f"Top-level structure in {self._path} must be a mapping."
            )
        logger.debug("Loaded manifest %s (%d entries)", self._path, len(data))
        return data

    def dump(self, fragment: Mapping[str, Any]) -> None:
        """
        Write a manifest fragment to this file.

        YAML and JSON are supported. The write goes to a temporary file
        next to the target which then replaces it.
        """
        self._path.parent.mkdir(parents=True, exist_ok=True)

        suffix = self._path.suffix.lower()
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")

        if suffix not in YAML_SUFFIXES and suffix != ".json":
            raise ManifestLoadError(
                f"Unsupported manifest file format for writing: {self._path} "
                f"(extension '{suffix}')"
            )

        try:
            if suffix == ".json":
                text = json.dumps(dict(fragment), indent=2) + "\n"
            else:
                text = yaml.safe_dump(dict(fragment), sort_keys=False, default_flow_style=False)
            tmp_path.write_text(text, encoding="utf-8")
            tmp_path.replace(self._path)
        except (OSError, TypeError, ValueError, yaml.YAMLError) as exc:
            tmp_path.unlink(missing_ok=True)
            raise ManifestLoadError(
                f"Could not write manifest file {self._path!r}: {exc}"
            ) from exc

    def _read_text(self) -> str:
        try:
            return self._path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ManifestLoadError(
                f"Failed to load manifest file {self._path}: {exc}"
            ) from exc

    def _load_yaml(self) -> Any:
        text = self._read_text()
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ManifestLoadError(f"Invalid YAML in {self._path}: {exc}") from exc

    def _load_json(self) -> Any:
        text = self._read_text()
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise ManifestLoadError(f"Invalid JSON in {self._path}: {exc}") from exc

    def _load_toml(self) -> Any:
        text = self._read_text()
        try:
            return tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise ManifestLoadError(f"Invalid TOML in {self._path}: {exc}") from exc

    def __repr__(self) -> str:
        return f"FileSource({str(self._path)!r}, optional={self._optional})"


class EnvSource:
    """
    Snapshot of environment variables, optionally seeded from a .env file.

    Precedence (low -> high): .env file, environment. The process
    environment itself is never modified, and ${VAR} references in the
    .env file are kept literally.
    """

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        *,
        dotenv_path: str | os.PathLike[str] | None = ".env",
    ):
        self._environ = environ
        self._dotenv_path = Path(dotenv_path) if dotenv_path else None

    def snapshot(self, use_dotenv: bool = True) -> Dict[str, str]:
        """Return a single consistent copy of the variables."""
        data: Dict[str, str] = {}

        if use_dotenv and self._dotenv_path is not None:
            if self._dotenv_path.is_file():
                file_values = dotenv_values(self._dotenv_path, interpolate=False)
                data.update({k: v for k, v in file_values.items() if v is not None})
                logger.debug("Loaded %d variable(s) from %s", len(data), self._dotenv_path)
            else:
                logger.debug("%s not found, skipping", self._dotenv_path)

        data.update(os.environ if self._environ is None else self._environ)
        return data
