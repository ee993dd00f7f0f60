"""Typed decode errors for registry index records.

Every error carries enough structured context (field path, record identity,
offending value) for a caller to render a precise diagnostic. Message
formatting beyond ``str()`` is left to the caller.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence


class DecodeError(Exception):
    """Base class for all record decode failures."""

    kind = "decode_error"

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        record: Optional[str] = None,
        value: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.field = field
        self.record = record
        self.value = value

    def with_record(self, record: Optional[str]) -> "DecodeError":
        """Attach the record identity if none is set yet; returns self."""
        if self.record is None and record:
            self.record = record
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Structured representation for diagnostics and exports."""
        return {
            "kind": self.kind,
            "message": self.message,
            "field": self.field,
            "record": self.record,
            "value": self.value,
        }

    def __str__(self) -> str:
        parts = []
        if self.record:
            parts.append(self.record)
        if self.field:
            parts.append(self.field)
        prefix = ": ".join(parts)
        return f"{prefix}: {self.message}" if prefix else self.message


class MissingField(DecodeError):
    """A mandatory field is absent or null."""

    kind = "missing_field"


class TypeMismatch(DecodeError):
    """A field holds a value of the wrong JSON type or shape."""

    kind = "type_mismatch"


class InvalidRequirement(DecodeError):
    """A dependency version requirement does not parse."""

    kind = "invalid_requirement"


class MalformedVersion(DecodeError):
    """A semantic version (or toolchain version) does not parse."""

    kind = "malformed"


class InvalidChecksum(DecodeError):
    """The checksum is not a well-formed hex digest."""

    kind = "invalid_checksum"


class InvalidFeatureValue(DecodeError):
    """A feature value has a structurally invalid activator shape."""

    kind = "invalid_feature_value"


class DanglingFeatureDependency(DecodeError):
    """A feature activator names a dependency the record does not declare."""

    kind = "dangling_feature_dependency"

    def __init__(self, message: str, *, feature: str, dependency: str, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.feature = feature
        self.dependency = dependency

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["feature"] = self.feature
        data["dependency"] = self.dependency
        return data


class UnsupportedSchema(DecodeError):
    """Strict mode rejected a schema version newer than the decoder knows."""

    kind = "unsupported_schema"


class RecordSyntaxError(DecodeError):
    """An index line is not a JSON object."""

    kind = "record_syntax"


class DependencyErrors(DecodeError):
    """Aggregate of every dependency that failed to normalize in one record."""

    kind = "dependency_errors"

    def __init__(self, errors: Sequence[DecodeError], **kwargs: Any):
        self.errors: List[DecodeError] = list(errors)
        summary = "; ".join(str(e) for e in self.errors)
        super().__init__(
            f"{len(self.errors)} dependency error(s): {summary}", field="deps", **kwargs
        )

    def with_record(self, record: Optional[str]) -> "DecodeError":
        super().with_record(record)
        for error in self.errors:
            error.with_record(record)
        return self

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["errors"] = [e.to_dict() for e in self.errors]
        return data
