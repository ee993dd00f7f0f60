"""Index entry decoder.

Turns one raw index record (a decoded JSON object) into a validated
``PackageVersionDescriptor``. The pipeline runs in a fixed order:

1. mandatory fields (``name``, ``vers``, ``deps``, ``cksum``)
2. top-level shape
3. version parse, checksum format, then schema gate (strict mode may
   reject here)
4. every dependency normalized, failures aggregated
5. features merged against the final dependency name set

Decoding performs no I/O and keeps no state between calls, so one decoder
may be shared freely across threads.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Mapping, Optional

from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants
from versioning.models import VersionError
from versioning.parser import parse_tool_version, parse_version

from .dependency import normalize_dependencies
from .errors import (
    DecodeError,
    InvalidChecksum,
    MalformedVersion,
    MissingField,
    TypeMismatch,
    UnsupportedSchema,
)
from .features import merge_features
from .models import PackageVersionDescriptor
from .options import DecodeOptions
from .schema_gate import gate_schema
from .validation import check_shape

logger = logging.getLogger(__name__)

_CHECKSUM_RE = re.compile(Constants.CHECKSUM_PATTERN)


def is_valid_checksum(value: Any) -> bool:
    """Return True when ``value`` looks like a hex-encoded SHA-256 digest."""
    return isinstance(value, str) and _CHECKSUM_RE.fullmatch(value) is not None


def _identity(raw: Mapping[str, Any]) -> Optional[str]:
    name = raw.get("name")
    vers = raw.get("vers")
    if isinstance(name, str) and isinstance(vers, str):
        return f"{name}@{vers}"
    if isinstance(name, str):
        return name
    return None


class IndexEntryDecoder:
    """Decoder for raw registry index records."""

    def __init__(self, options: Optional[DecodeOptions] = None):
        self.options = options or DecodeOptions()

    def decode(self, raw: Any) -> PackageVersionDescriptor:
        """Decode one raw record.

        Args:
            raw: Mapping parsed from one index line.

        Returns:
            The immutable descriptor.

        Raises:
            DecodeError: A subclass describing the first top-level problem,
                or ``DependencyErrors`` listing every failed dependency.
        """
        if not isinstance(raw, Mapping):
            raise TypeMismatch("Index record must be an object", value=type(raw).__name__)
        record = _identity(raw)
        try:
            return self._decode(raw)
        except DecodeError as e:
            e.with_record(record)
            if is_debug_enabled(logger):
                logger.debug(
                    "Record rejected",
                    extra=extra_context(
                        event="decode_error",
                        component="decoder",
                        action="decode",
                        outcome=e.kind,
                        record=record,
                        target=e.field,
                    ),
                )
            raise

    def _decode(self, raw: Mapping[str, Any]) -> PackageVersionDescriptor:
        for key in Constants.MANDATORY_FIELDS:
            if raw.get(key) is None:
                raise MissingField(f"Missing required field '{key}'", field=key)

        check_shape("record", raw)

        try:
            version = parse_version(raw["vers"])
        except VersionError as e:
            raise MalformedVersion(e.reason, field="vers", value=raw["vers"]) from e

        rust_version = raw.get("rust_version")
        if rust_version is not None:
            try:
                parse_tool_version(rust_version)
            except VersionError as e:
                raise MalformedVersion(e.reason, field="rust_version", value=rust_version) from e

        if not is_valid_checksum(raw["cksum"]):
            raise InvalidChecksum(
                f"Checksum must be {Constants.CHECKSUM_LENGTH} lowercase hex characters",
                field="cksum",
                value=raw["cksum"],
            )

        gate = gate_schema(raw.get("v"))
        if gate.is_unknown:
            if self.options.reject_unknown_schema:
                raise UnsupportedSchema(
                    f"Schema version {gate.declared} is newer than {Constants.HIGHEST_KNOWN_SCHEMA}",
                    field="v",
                    value=gate.declared,
                )
            if is_debug_enabled(logger):
                logger.debug(
                    "Unknown schema version, using highest known capabilities",
                    extra=extra_context(
                        event="degrade",
                        component="decoder",
                        action="gate_schema",
                        record=_identity(raw),
                        schema=gate.declared,
                    ),
                )

        dependencies = normalize_dependencies(raw["deps"], gate)
        features = merge_features(
            raw.get("features"),
            raw.get("features2"),
            gate,
            frozenset(dep.name for dep in dependencies),
        )

        return PackageVersionDescriptor(
            name=raw["name"],
            version=version,
            dependencies=dependencies,
            features=features,
            checksum=raw["cksum"],
            yanked=bool(raw.get("yanked") or False),
            links=raw.get("links"),
            rust_version=rust_version,
            schema_version=gate.declared,
        )


def decode(raw: Any, options: Optional[DecodeOptions] = None) -> PackageVersionDescriptor:
    """Decode one raw record with the given options (strict mode off by default)."""
    return IndexEntryDecoder(options).decode(raw)
