"""Re-encode descriptors into the raw index record shape."""

from __future__ import annotations

import json
from typing import Any, Dict

from constants import Constants

from .models import DependencyDescriptor, PackageVersionDescriptor


def dependency_to_raw(dep: DependencyDescriptor) -> Dict[str, Any]:
    """Raw dependency object; unset optional fields are omitted."""
    raw: Dict[str, Any] = {
        "name": dep.name,
        "req": dep.requirement.raw,
        "features": list(dep.features),
        "optional": dep.optional,
        "default_features": dep.default_features,
        "target": dep.target,
        "kind": dep.kind.value,
    }
    for key in ("registry", "package", "public", "bindep_target"):
        value = getattr(dep, key)
        if value is not None:
            raw[key] = value
    if dep.artifact is not None:
        raw["artifact"] = list(dep.artifact)
    if dep.lib:
        raw["lib"] = True
    return raw


def to_raw(descriptor: PackageVersionDescriptor) -> Dict[str, Any]:
    """Raw record for ``descriptor``.

    The whole feature table is written to ``features`` in table order, so
    re-decoding yields an equal descriptor at any schema version.
    """
    raw: Dict[str, Any] = {
        "name": descriptor.name,
        "vers": str(descriptor.version),
        "deps": [dependency_to_raw(dep) for dep in descriptor.dependencies],
        "cksum": descriptor.checksum,
        "features": descriptor.features.to_dict(),
        "yanked": descriptor.yanked,
    }
    if descriptor.links is not None:
        raw["links"] = descriptor.links
    if descriptor.rust_version is not None:
        raw["rust_version"] = descriptor.rust_version
    if descriptor.schema_version != Constants.DEFAULT_SCHEMA:
        raw["v"] = descriptor.schema_version
    return raw


def encode_line(descriptor: PackageVersionDescriptor) -> str:
    """Compact single-line JSON for an index file."""
    return json.dumps(to_raw(descriptor), separators=(",", ":"))
