from __future__ import annotations

from typing import Any, Dict, Mapping

import jsonschema

from .coercion import is_known_type
from .exceptions import DeclarationConflictError, ManifestFormatError

# Shape of one manifest fragment as it appears in a source document.
FRAGMENT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "additionalProperties": {
        "anyOf": [
            {"type": "null"},
            {"type": "string"},
            {
                "type": "object",
                "properties": {
                    "desc": {"type": ["string", "null"]},
                    "type": {"type": "string"},
                    "hidden": {"type": "boolean"},
                    "default": {},
                    "const": {},
                },
                "additionalProperties": False,
            },
        ]
    },
}


def validate_fragment(fragment: Any) -> None:
    """
    Validate a raw manifest fragment before it is merged.

    :param fragment: Mapping of parameter name to raw declaration.
    :raises DeclarationConflictError: if a record sets both 'default' and 'const'.
    :raises ManifestFormatError: on any other structural problem.
    """
    if not isinstance(fragment, Mapping):
        raise ManifestFormatError(
            f"Manifest must be a mapping of parameter names, got {type(fragment).__name__}"
        )

    for name, decl in fragment.items():
        if not isinstance(name, str):
            raise ManifestFormatError(f"Parameter name must be a string, got {name!r}")
        if isinstance(decl, Mapping):
            if "default" in decl and "const" in decl:
                raise DeclarationConflictError(name)
            type_name = decl.get("type")
            if isinstance(type_name, str) and not is_known_type(type_name):
                raise ManifestFormatError(
                    f"Unknown type {type_name!r} in parameter definition '{name}'"
                )

    try:
        jsonschema.validate(instance=_plain(fragment), schema=FRAGMENT_SCHEMA)
    except jsonschema.ValidationError as exc:
        path = ".".join(str(p) for p in exc.path) if exc.path else "<root>"
        raise ManifestFormatError(
            f"Invalid parameter definition at '{path}': {exc.message}"
        ) from exc


def _plain(fragment: Mapping[str, Any]) -> Dict[str, Any]:
    # jsonschema only treats dicts as objects
    return {
        name: dict(decl) if isinstance(decl, Mapping) else decl
        for name, decl in fragment.items()
    }
