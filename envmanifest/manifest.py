from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, List, Mapping, Set, Tuple, Union

from .coercion import DEFAULT_TYPE, canonical_type
from .validation import validate_fragment

logger = logging.getLogger(__name__)


class ParameterKind(enum.Enum):
    REQUIRED = "required"
    OPTIONAL = "optional"
    CONST = "const"


@dataclass(frozen=True)
class Required:
    """Value must come from the environment."""


@dataclass(frozen=True)
class Default:
    """Value comes from the environment, falling back to `value`."""

    value: Any


@dataclass(frozen=True)
class Const:
    """Value is fixed to `value`; the environment is never consulted."""

    value: Any


Policy = Union[Required, Default, Const]


@dataclass(frozen=True)
class ParameterDeclaration:
    """A single declared parameter."""

    name: str
    description: str = ""
    policy: Policy = field(default_factory=Required)
    type: str = DEFAULT_TYPE
    hidden: bool = False

    @property
    def kind(self) -> ParameterKind:
        if isinstance(self.policy, Const):
            return ParameterKind.CONST
        if isinstance(self.policy, Default):
            return ParameterKind.OPTIONAL
        return ParameterKind.REQUIRED

    @property
    def required(self) -> bool:
        return isinstance(self.policy, Required)

    @property
    def default_value(self) -> Any:
        """Declared default or const value, None for required parameters."""
        if isinstance(self.policy, (Default, Const)):
            return self.policy.value
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Return the annotated form used in documentation listings."""
        return {
            "name": self.name,
            "desc": self.description,
            "required": self.required,
            "const": self.kind is ParameterKind.CONST,
            "default": self.default_value,
            "type": self.type,
            "hidden": self.hidden,
        }

    def to_source(self) -> Any:
        """Return the declaration in manifest source format."""
        plain = self.type == DEFAULT_TYPE and not self.hidden
        if self.required and plain:
            return self.description or None

        record: Dict[str, Any] = {}
        if self.description:
            record["desc"] = self.description
        if isinstance(self.policy, Default):
            record["default"] = self.policy.value
        elif isinstance(self.policy, Const):
            record["const"] = self.policy.value
        if self.type != DEFAULT_TYPE:
            record["type"] = self.type
        if self.hidden:
            record["hidden"] = True
        return record


class Manifest:
    """
    Ordered collection of parameter declarations.

    Declarations are built up by merging fragments, typically one per
    module or manifest file:

        manifest = Manifest()
        manifest.merge({"db_url": "Database connection URL"})
        manifest.merge({"pool_size": {"default": 5, "type": "integer"}})

    Merging is right-biased and field-wise: fields present in a later
    fragment replace earlier ones, absent fields are kept.
    """

    def __init__(self, fragment: Mapping[str, Any] | None = None):
        self._decls: Dict[str, ParameterDeclaration] = {}
        if fragment is not None:
            self.merge(fragment)

    def merge(self, fragment: Mapping[str, Any]) -> "Manifest":
        """
        Merge a raw manifest fragment into this manifest.

        The fragment is validated as a whole first, so a rejected fragment
        leaves the manifest untouched.

        :raises DeclarationConflictError: if a record sets both 'default' and 'const'.
        :raises ManifestFormatError: if the fragment is malformed.
        """
        validate_fragment(fragment)
        for name, raw in fragment.items():
            current = self._decls.get(name) or ParameterDeclaration(name)
            self._decls[name] = _merge_declaration(current, raw)
        logger.debug("Merged %d parameter(s) into manifest", len(fragment))
        return self

    def contains(self, name: str) -> bool:
        return name in self._decls

    __contains__ = contains

    def entries(self) -> Tuple[ParameterDeclaration, ...]:
        return tuple(self._decls.values())

    def names(self) -> List[str]:
        return list(self._decls)

    def required_names(self) -> Set[str]:
        return {name for name, decl in self._decls.items() if decl.required}

    def copy(self) -> "Manifest":
        clone = Manifest()
        clone._decls = dict(self._decls)
        return clone

    def to_source(self) -> Dict[str, Any]:
        """Serialize back to a fragment that merges into an equal manifest."""
        return {name: decl.to_source() for name, decl in self._decls.items()}

    def __getitem__(self, name: str) -> ParameterDeclaration:
        return self._decls[name]

    def __iter__(self) -> Iterator[ParameterDeclaration]:
        return iter(self._decls.values())

    def __len__(self) -> int:
        return len(self._decls)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Manifest):
            return NotImplemented
        return self._decls == other._decls

    def __repr__(self) -> str:
        return f"<Manifest params=[{', '.join(self._decls)}]>"


def _merge_declaration(current: ParameterDeclaration, raw: Any) -> ParameterDeclaration:
    if raw is None:
        # name:
        return current
    if isinstance(raw, str):
        # name: A description
        return replace(current, description=raw)

    changes: Dict[str, Any] = {}
    if "desc" in raw:
        changes["description"] = raw["desc"] or ""
    if "default" in raw:
        changes["policy"] = Default(raw["default"])
    elif "const" in raw:
        changes["policy"] = Const(raw["const"])
    if "type" in raw:
        changes["type"] = canonical_type(raw["type"])
    if "hidden" in raw:
        changes["hidden"] = raw["hidden"]
    return replace(current, **changes)
