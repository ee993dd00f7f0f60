"""Dependency record normalizer.

Maps raw dependency objects from an index record into
``DependencyDescriptor`` values, honoring the schema gate's capabilities.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants
from versioning.models import VersionError
from versioning.parser import parse_requirement

from .errors import DecodeError, DependencyErrors, InvalidRequirement, MissingField, TypeMismatch
from .models import DependencyDescriptor, DependencyKind
from .schema_gate import SchemaGate
from .validation import ARTIFACT_DEPENDENCY_PROPERTIES, check_shape

logger = logging.getLogger(__name__)


def _field_path(index: Optional[int], name: str) -> str:
    if index is None:
        return name
    return f"deps[{index}].{name}"


def _flag(raw: Mapping[str, Any], key: str, default: bool) -> bool:
    value = raw.get(key)
    return default if value is None else bool(value)


def normalize_dependency(
    raw: Any, gate: SchemaGate, *, index: Optional[int] = None
) -> DependencyDescriptor:
    """Normalize one raw dependency entry.

    Args:
        raw: Raw dependency object from the record's ``deps`` array.
        gate: Capability set of the enclosing record.
        index: Position within ``deps``, used for error field paths.

    Returns:
        The normalized dependency descriptor.

    Raises:
        MissingField: ``name`` or ``req`` absent.
        TypeMismatch: A field has the wrong JSON type.
        InvalidRequirement: ``req`` does not parse.
    """
    prefix = f"deps[{index}]" if index is not None else None
    if not isinstance(raw, Mapping):
        raise TypeMismatch("Dependency must be an object", field=prefix, value=raw)

    for key in Constants.MANDATORY_DEPENDENCY_FIELDS:
        if raw.get(key) is None:
            raise MissingField(f"Missing required dependency field '{key}'", field=_field_path(index, key))

    artifacts_allowed = gate.allow_artifact_dependencies
    check_shape("artifact_dependency" if artifacts_allowed else "dependency", raw, prefix=prefix)

    try:
        requirement = parse_requirement(raw["req"])
    except VersionError as e:
        raise InvalidRequirement(
            f"Invalid version requirement ({e.reason})",
            field=_field_path(index, "req"),
            value=raw["req"],
        ) from e

    artifact: Optional[Tuple[str, ...]] = None
    bindep_target: Optional[str] = None
    lib = False
    if artifacts_allowed:
        if raw.get("artifact") is not None:
            artifact = tuple(raw["artifact"])
        bindep_target = raw.get("bindep_target")
        lib = _flag(raw, "lib", False)
    elif is_debug_enabled(logger):
        dropped = [k for k in ARTIFACT_DEPENDENCY_PROPERTIES if k in raw]
        if dropped:
            logger.debug(
                "Dropping artifact dependency fields below schema v3",
                extra=extra_context(
                    event="degrade",
                    component="dependency",
                    action="drop_fields",
                    dependency=raw.get("name"),
                    fields=dropped,
                ),
            )

    return DependencyDescriptor(
        name=raw["name"],
        requirement=requirement,
        features=tuple(raw.get("features") or ()),
        optional=_flag(raw, "optional", False),
        default_features=_flag(raw, "default_features", True),
        target=raw.get("target"),
        kind=DependencyKind.from_raw(raw.get("kind")),
        registry=raw.get("registry"),
        package=raw.get("package"),
        public=raw.get("public"),
        artifact=artifact,
        bindep_target=bindep_target,
        lib=lib,
    )


def normalize_dependencies(raw_deps: Sequence[Any], gate: SchemaGate) -> Tuple[DependencyDescriptor, ...]:
    """Normalize every dependency, reporting all failures at once.

    Raises:
        DependencyErrors: When one or more entries failed; ``errors`` holds
            each failure in record order.
    """
    descriptors: List[DependencyDescriptor] = []
    errors: List[DecodeError] = []
    for i, raw in enumerate(raw_deps):
        try:
            descriptors.append(normalize_dependency(raw, gate, index=i))
        except DecodeError as e:
            errors.append(e)
    if errors:
        raise DependencyErrors(errors)
    return tuple(descriptors)
