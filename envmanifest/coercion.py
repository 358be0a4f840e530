from __future__ import annotations

import re
from typing import Any, Callable, Dict

from .exceptions import InvalidValueError

Coercer = Callable[[str], Any]

_INTEGER_RE = re.compile(r"[-+]?\d+")
_FLOAT_RE = re.compile(r"[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?")

_TRUE_VALUES = {"true", "yes", "on", "1"}
_FALSE_VALUES = {"false", "no", "off", "0"}

DEFAULT_TYPE = "string"


def _to_string(raw: str) -> str:
    return raw


def _to_integer(raw: str) -> int:
    # int() alone would accept surrounding whitespace and underscores
    if not _INTEGER_RE.fullmatch(raw):
        raise ValueError(raw)
    return int(raw)


def _to_float(raw: str) -> float:
    if not _FLOAT_RE.fullmatch(raw):
        raise ValueError(raw)
    return float(raw)


def _to_boolean(raw: str) -> bool:
    lowered = raw.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(raw)


_COERCERS: Dict[str, Coercer] = {}
_CANONICAL: Dict[str, str] = {}


def register_type(type_name: str, coercer: Coercer, *aliases: str) -> None:
    """
    Register a type tag usable in manifest declarations.

    `coercer` receives the raw environment string and returns the typed
    value; it signals a malformed input by raising ValueError. Aliases
    resolve to `type_name`, which is the tag reported in errors.
    """
    _COERCERS[type_name] = coercer
    _CANONICAL[type_name] = type_name
    for alias in aliases:
        _CANONICAL[alias] = type_name


def canonical_type(type_name: str) -> str:
    """Return the registered tag for `type_name` or its alias."""
    try:
        return _CANONICAL[type_name]
    except KeyError:
        raise ValueError(f"Unknown parameter type: {type_name!r}") from None


def is_known_type(type_name: str) -> bool:
    return type_name in _CANONICAL


def coerce(raw: str, type_name: str = DEFAULT_TYPE, name: str | None = None) -> Any:
    """
    Convert a raw environment string to the type declared by `type_name`.

    :raises InvalidValueError: if `raw` is not a valid literal of that type.
    """
    canonical = canonical_type(type_name)
    try:
        return _COERCERS[canonical](raw)
    except (TypeError, ValueError) as exc:
        raise InvalidValueError(name, raw, canonical) from exc


register_type("string", _to_string, "str")
register_type("integer", _to_integer, "int")
register_type("float", _to_float)
register_type("boolean", _to_boolean, "bool")
