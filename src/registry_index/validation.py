"""JSON Schema shape checks for raw index records.

Wraps jsonschema Draft7 validation: the first error (sorted by path) is
turned into a ``TypeMismatch`` carrying the offending field path and value.
Schemas never list ``required`` fields (mandatory-field checks run earlier
and report ``MissingField``) and never forbid additional properties, so
fields added by future schema versions pass through untouched.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from jsonschema import Draft7Validator

from .errors import TypeMismatch

_STRING_LIST = {"type": "array", "items": {"type": "string"}}
_OPTIONAL_STRING = {"type": ["string", "null"]}
_OPTIONAL_BOOL = {"type": ["boolean", "null"]}

FEATURE_MAP_SCHEMA: Dict[str, Any] = {
    "type": ["object", "null"],
    "additionalProperties": _STRING_LIST,
}

RECORD_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "vers": {"type": "string"},
        "deps": {"type": "array"},
        "cksum": {"type": "string"},
        "features": FEATURE_MAP_SCHEMA,
        "yanked": _OPTIONAL_BOOL,
        "links": _OPTIONAL_STRING,
        "rust_version": _OPTIONAL_STRING,
        "v": {"type": ["integer", "null"], "minimum": 0},
    },
}

DEPENDENCY_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "req": {"type": "string"},
        "features": {"type": ["array", "null"], "items": {"type": "string"}},
        "optional": _OPTIONAL_BOOL,
        "default_features": _OPTIONAL_BOOL,
        "target": _OPTIONAL_STRING,
        "kind": _OPTIONAL_STRING,
        "registry": _OPTIONAL_STRING,
        "package": _OPTIONAL_STRING,
        "public": _OPTIONAL_BOOL,
    },
}

ARTIFACT_DEPENDENCY_PROPERTIES: Dict[str, Any] = {
    "artifact": {"type": ["array", "null"], "items": {"type": "string"}},
    "bindep_target": _OPTIONAL_STRING,
    "lib": _OPTIONAL_BOOL,
}

ARTIFACT_DEPENDENCY_SCHEMA: Dict[str, Any] = {
    **DEPENDENCY_SCHEMA,
    "properties": {**DEPENDENCY_SCHEMA["properties"], **ARTIFACT_DEPENDENCY_PROPERTIES},
}

_VALIDATORS = {
    "record": Draft7Validator(RECORD_SCHEMA),
    "dependency": Draft7Validator(DEPENDENCY_SCHEMA),
    "artifact_dependency": Draft7Validator(ARTIFACT_DEPENDENCY_SCHEMA),
    "feature_map": Draft7Validator(FEATURE_MAP_SCHEMA),
}


def _join_path(prefix: Optional[str], path) -> Optional[str]:
    parts = [prefix] if prefix else []
    for p in path:
        if isinstance(p, int):
            parts[-1:] = [f"{parts[-1]}[{p}]" if parts else f"[{p}]"]
        else:
            parts.append(str(p))
    return ".".join(parts) if parts else prefix


def check_shape(schema_name: str, data: Any, *, prefix: Optional[str] = None) -> None:
    """Validate ``data`` against a named schema and raise on the first error.

    Args:
        schema_name: One of ``record``, ``dependency``,
            ``artifact_dependency`` or ``feature_map``.
        data: Raw value to validate.
        prefix: Field path of ``data`` within the record (e.g. ``deps[2]``).

    Raises:
        TypeMismatch: On the first validation error.
    """
    validator = _VALIDATORS[schema_name]
    errs = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.path])
    if errs:
        first = errs[0]
        raise TypeMismatch(
            f"Invalid value: {first.message}",
            field=_join_path(prefix, first.path),
            value=first.instance,
        )
