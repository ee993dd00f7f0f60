"""Schema version gate.

Maps a record's ``v`` tag to a capability set. All forward-compatibility
policy lives here; the normalizer and merger only consult capabilities.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from constants import Constants, SchemaVersions


class SchemaLevel(Enum):
    """Recognized schema levels; UNKNOWN covers any newer version."""
    V1 = "v1"
    V2 = "v2"
    V3 = "v3"
    UNKNOWN = "unknown"


_KNOWN_LEVELS = {
    SchemaVersions.V1.value: SchemaLevel.V1,
    SchemaVersions.V2.value: SchemaLevel.V2,
    SchemaVersions.V3.value: SchemaLevel.V3,
}


@dataclass(frozen=True)
class SchemaGate:
    """Outcome of gating one record's schema version."""
    declared: int
    level: SchemaLevel
    allow_namespaced_features: bool
    allow_artifact_dependencies: bool

    @property
    def is_unknown(self) -> bool:
        return self.level is SchemaLevel.UNKNOWN


def gate_schema(version: Optional[int]) -> SchemaGate:
    """Return the capability set for a (type-checked) ``v`` value.

    Absent, null and ``0`` map to V1. Versions above the highest known one
    map to UNKNOWN but keep the highest-known capabilities.
    """
    declared = Constants.DEFAULT_SCHEMA if not version else int(version)
    if declared > Constants.HIGHEST_KNOWN_SCHEMA:
        level = SchemaLevel.UNKNOWN
        effective = Constants.HIGHEST_KNOWN_SCHEMA
    else:
        level = _KNOWN_LEVELS.get(declared, SchemaLevel.V1)
        effective = declared
    return SchemaGate(
        declared=declared,
        level=level,
        allow_namespaced_features=effective >= SchemaVersions.V2.value,
        allow_artifact_dependencies=effective >= SchemaVersions.V3.value,
    )
