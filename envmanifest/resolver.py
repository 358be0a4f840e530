from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, NamedTuple

from .coercion import coerce
from .manifest import Const, Default, Manifest

logger = logging.getLogger(__name__)


class Resolution(NamedTuple):
    """Outcome of resolving a manifest against an environment snapshot."""

    values: Dict[str, Any]
    missing: List[str]


def resolve(manifest: Manifest, environ: Mapping[str, str]) -> Resolution:
    """
    Compute the value of every declared parameter.

    Const parameters take their declared value, optional ones fall back to
    their declared default (returned as-is, never coerced), and required
    parameters without an environment value are left out of `values` and
    listed in `missing`, in manifest order.

    :param environ: Snapshot of environment variables keyed by parameter name.
    :raises InvalidValueError: on the first environment value that does not
        coerce to its declared type.
    """
    values: Dict[str, Any] = {}
    missing: List[str] = []

    for decl in manifest:
        policy = decl.policy
        if isinstance(policy, Const):
            values[decl.name] = policy.value
        elif decl.name in environ:
            values[decl.name] = coerce(environ[decl.name], decl.type, name=decl.name)
        elif isinstance(policy, Default):
            values[decl.name] = policy.value
        else:
            missing.append(decl.name)

    if missing:
        logger.debug("Required parameters not set: %s", ", ".join(missing))
    return Resolution(values, missing)
