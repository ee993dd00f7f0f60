"""Data models for versions and version requirements."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple

import semantic_version


class VersionErrorKind(Enum):
    """Failure categories raised by the version parser."""
    MALFORMED = "malformed"
    INVALID_REQUIREMENT = "invalid_requirement"


class VersionError(ValueError):
    """Raised when a version or requirement string fails validation."""

    def __init__(self, kind: VersionErrorKind, value: Any, reason: str):
        super().__init__(f"{reason}: {value!r}")
        self.kind = kind
        self.value = value
        self.reason = reason


def _identifier_key(identifier: str) -> Tuple[int, Any]:
    """Sort key for one pre-release identifier (numeric before alphanumeric)."""
    if identifier.isdigit():
        return (0, int(identifier))
    return (1, identifier)


@dataclass(frozen=True)
class Version:
    """Parsed semantic version.

    Equality covers every component including build metadata; ordering
    follows SemVer precedence, which ignores build metadata.
    """
    major: int
    minor: int
    patch: int
    prerelease: Tuple[str, ...] = ()
    build: Tuple[str, ...] = ()

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    @property
    def precedence_key(self) -> Tuple[Any, ...]:
        if self.prerelease:
            # A longer identifier list wins once the shared prefix is equal
            pre = (0, tuple(_identifier_key(p) for p in self.prerelease))
        else:
            pre = (1, ())
        return (self.major, self.minor, self.patch, pre)

    def to_semver(self) -> semantic_version.Version:
        """Return the equivalent ``semantic_version.Version``."""
        return semantic_version.Version(str(self))

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += "-" + ".".join(self.prerelease)
        if self.build:
            text += "+" + ".".join(self.build)
        return text

    def __lt__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.precedence_key < other.precedence_key

    def __le__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.precedence_key <= other.precedence_key

    def __gt__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.precedence_key > other.precedence_key

    def __ge__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.precedence_key >= other.precedence_key


@dataclass(frozen=True)
class Requirement:
    """Syntax-checked version requirement expression.

    ``raw`` is kept verbatim for re-encoding; ``spec`` is the compiled
    matcher and does not take part in equality.
    """
    raw: str
    spec: Optional[semantic_version.SimpleSpec] = field(
        default=None, compare=False, hash=False, repr=False
    )

    def matches(self, version: Version) -> bool:
        """Return True when ``version`` satisfies this requirement."""
        if self.spec is None:
            return False
        return self.spec.match(version.to_semver())

    def __str__(self) -> str:
        return self.raw
