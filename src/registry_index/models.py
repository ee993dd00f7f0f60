"""Immutable descriptors produced by the index entry decoder."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, Optional, Sequence, Tuple, Union

from constants import DependencyKinds
from versioning.models import Requirement, Version


class DependencyKind(Enum):
    """Dependency kind; unknown raw kinds degrade to NORMAL."""
    NORMAL = DependencyKinds.NORMAL.value
    DEV = DependencyKinds.DEV.value
    BUILD = DependencyKinds.BUILD.value

    @classmethod
    def from_raw(cls, raw: Optional[str]) -> "DependencyKind":
        if raw is None:
            return cls.NORMAL
        try:
            return cls(raw)
        except ValueError:
            return cls.NORMAL


@dataclass(frozen=True)
class DependencyDescriptor:
    """One normalized dependency of a package version.

    ``name`` is the name the record declares (the alias when renamed);
    ``package`` is the real package name when the dependency is renamed.
    """
    name: str
    requirement: Requirement
    features: Tuple[str, ...] = ()
    optional: bool = False
    default_features: bool = True
    target: Optional[str] = None
    kind: DependencyKind = DependencyKind.NORMAL
    registry: Optional[str] = None
    package: Optional[str] = None
    public: Optional[bool] = None
    artifact: Optional[Tuple[str, ...]] = None
    bindep_target: Optional[str] = None
    lib: bool = False

    @property
    def package_name(self) -> str:
        """Name of the package this dependency resolves to."""
        return self.package or self.name

    @property
    def is_renamed(self) -> bool:
        return self.package is not None and self.package != self.name


@dataclass(frozen=True)
class FeatureRef:
    """Plain reference to another feature of the same package."""
    feature: str


@dataclass(frozen=True)
class DependencyActivator:
    """``dep:<name>``: enables an optional dependency only."""
    dependency: str


@dataclass(frozen=True)
class DependencyFeature:
    """``<name>/<feature>`` or weak ``<name>?/<feature>``."""
    dependency: str
    feature: str
    weak: bool = False


FeatureValue = Union[FeatureRef, DependencyActivator, DependencyFeature]


class FeatureTable(Mapping):
    """Read-only, insertion-ordered mapping of feature name to values."""

    __slots__ = ("_entries",)

    def __init__(self, entries: Optional[Mapping] = None):
        data: Dict[str, Tuple[str, ...]] = {}
        for key, values in (entries or {}).items():
            data[key] = tuple(values)
        self._entries = data

    def __getitem__(self, key: str) -> Tuple[str, ...]:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FeatureTable):
            return list(self._entries.items()) == list(other._entries.items())
        if isinstance(other, Mapping):
            return dict(self._entries) == {k: tuple(v) for k, v in other.items()}
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(self._entries.items()))

    def __repr__(self) -> str:
        return f"FeatureTable({self._entries!r})"

    def to_dict(self) -> Dict[str, list]:
        return {key: list(values) for key, values in self._entries.items()}


@dataclass(frozen=True)
class PackageVersionDescriptor:
    """Validated, immutable description of one published package version."""
    name: str
    version: Version
    dependencies: Tuple[DependencyDescriptor, ...]
    features: FeatureTable
    checksum: str
    yanked: bool = False
    links: Optional[str] = None
    rust_version: Optional[str] = None
    schema_version: int = 1

    @property
    def package_id(self) -> str:
        return f"{self.name}@{self.version}"

    @property
    def dependency_names(self) -> Sequence[str]:
        """Declared dependency names in record order (may repeat)."""
        return tuple(dep.name for dep in self.dependencies)
