"""Registry index entry decoding package.

This package turns raw registry index records into validated descriptors:
- schema_gate.py: schema version to capability mapping
- dependency.py: raw dependency normalization
- features.py: features/features2 merge and activator checks
- decoder.py: the record decoder orchestrating the above
- batch.py: per-line batch decoding with failure isolation
- encoder.py, checksum.py, query.py: re-encoding, artifact verification, candidate filtering
"""

from .batch import BatchSummary, IndexLineResult, decode_lines, decode_records, summarize  # noqa: F401
from .checksum import ChecksumMismatch, verify_checksum  # noqa: F401
from .decoder import IndexEntryDecoder, decode, is_valid_checksum  # noqa: F401
from .encoder import encode_line, to_raw  # noqa: F401
from .errors import (  # noqa: F401
    DanglingFeatureDependency,
    DecodeError,
    DependencyErrors,
    InvalidChecksum,
    InvalidFeatureValue,
    InvalidRequirement,
    MalformedVersion,
    MissingField,
    RecordSyntaxError,
    TypeMismatch,
    UnsupportedSchema,
)
from .models import (  # noqa: F401
    DependencyDescriptor,
    DependencyKind,
    FeatureTable,
    PackageVersionDescriptor,
)
from .options import DecodeOptions  # noqa: F401
from .query import is_tool_compatible, pick_latest, select_candidates  # noqa: F401
from .schema_gate import SchemaGate, SchemaLevel, gate_schema  # noqa: F401

__all__ = [
    # Decoding
    "decode",
    "IndexEntryDecoder",
    "DecodeOptions",
    "decode_lines",
    "decode_records",
    "summarize",
    "IndexLineResult",
    "BatchSummary",
    # Models
    "PackageVersionDescriptor",
    "DependencyDescriptor",
    "DependencyKind",
    "FeatureTable",
    "SchemaGate",
    "SchemaLevel",
    "gate_schema",
    # Errors
    "DecodeError",
    "MissingField",
    "TypeMismatch",
    "InvalidRequirement",
    "MalformedVersion",
    "InvalidChecksum",
    "InvalidFeatureValue",
    "DanglingFeatureDependency",
    "UnsupportedSchema",
    "DependencyErrors",
    "RecordSyntaxError",
    # Helpers
    "to_raw",
    "encode_line",
    "verify_checksum",
    "ChecksumMismatch",
    "is_valid_checksum",
    "is_tool_compatible",
    "select_candidates",
    "pick_latest",
]
