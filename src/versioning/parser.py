"""Version, requirement and toolchain-version parsing utilities."""

import re
from typing import Any, List, Tuple

import semantic_version

from .models import Requirement, Version, VersionError, VersionErrorKind

# Full SemVer 2.0 grammar; leading-zero rules are enforced by semantic_version.
_SEMVER_RE = re.compile(
    r"(0|[1-9][0-9]*)\.(0|[1-9][0-9]*)\.(0|[1-9][0-9]*)"
    r"(?:-([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
)
_TOOL_VERSION_RE = re.compile(r"(0|[1-9][0-9]*)(?:\.(0|[1-9][0-9]*))?(?:\.(0|[1-9][0-9]*))?")
_OPERATOR_RE = re.compile(r"^(<=|>=|==|=|<|>|\^|~)\s*")
_SUFFIX_RE = re.compile(r"([-+])")
_WILDCARDS = ("*", "x", "X")


def _malformed(value: Any, reason: str) -> VersionError:
    return VersionError(VersionErrorKind.MALFORMED, value, reason)


def parse_version(s: Any) -> Version:
    """Parse a ``MAJOR.MINOR.PATCH[-PRERELEASE][+BUILD]`` string.

    Raises:
        VersionError: kind MALFORMED on any grammar violation, including
            non-string input.
    """
    if not isinstance(s, str):
        raise _malformed(s, "Version must be a string")
    if not _SEMVER_RE.fullmatch(s):
        raise _malformed(s, "Invalid semantic version")
    try:
        parsed = semantic_version.Version(s)
    except ValueError as e:
        raise _malformed(s, str(e)) from e
    return Version(
        major=parsed.major,
        minor=parsed.minor,
        patch=parsed.patch,
        prerelease=tuple(parsed.prerelease),
        build=tuple(parsed.build),
    )


def parse_tool_version(s: Any) -> Version:
    """Parse a minimum toolchain version such as ``1.70`` or ``1.70.0``.

    Missing minor/patch components default to zero. Pre-release and build
    suffixes are not accepted.
    """
    if not isinstance(s, str):
        raise _malformed(s, "Toolchain version must be a string")
    m = _TOOL_VERSION_RE.fullmatch(s.strip())
    if not m:
        raise _malformed(s, "Invalid toolchain version")
    major, minor, patch = (int(g) if g is not None else 0 for g in m.groups())
    return Version(major=major, minor=minor, patch=patch)


def _rewrite_wildcards(version: str) -> Tuple[str, bool]:
    """Spell ``x``/``X`` core components as ``*``; report whether any occur."""
    core, *suffix = _SUFFIX_RE.split(version, maxsplit=1)
    parts = ["*" if p in _WILDCARDS else p for p in core.split(".")]
    return ".".join(parts) + "".join(suffix), "*" in parts


def _normalize_clause(clause: str) -> str:
    """Rewrite one comparator into SimpleSpec syntax.

    Whitespace after the operator is dropped, ``=`` becomes ``==`` and a bare
    version means caret compatibility unless it holds a wildcard.
    """
    m = _OPERATOR_RE.match(clause)
    op = m.group(1) if m else None
    version, wildcard = _rewrite_wildcards(clause[m.end():] if m else clause)
    if op is None:
        return version if wildcard else "^" + version
    if op == "=":
        op = "=="
    return op + version


def parse_requirement(s: Any) -> Requirement:
    """Syntax-check a comma-separated version requirement.

    Semantic matching beyond ``Requirement.matches`` belongs to the resolver.

    Raises:
        VersionError: kind INVALID_REQUIREMENT when the expression is empty
            or any clause does not parse.
    """
    if not isinstance(s, str):
        raise VersionError(VersionErrorKind.INVALID_REQUIREMENT, s, "Requirement must be a string")
    if not s.isascii():
        raise VersionError(VersionErrorKind.INVALID_REQUIREMENT, s, "Requirement must be ASCII")
    clauses: List[str] = [c.strip() for c in s.split(",")]
    if not clauses or any(not c for c in clauses):
        raise VersionError(VersionErrorKind.INVALID_REQUIREMENT, s, "Empty requirement clause")
    normalized = ",".join(_normalize_clause(c) for c in clauses)
    try:
        spec = semantic_version.SimpleSpec(normalized)
    except ValueError as e:
        raise VersionError(VersionErrorKind.INVALID_REQUIREMENT, s, str(e)) from e
    return Requirement(raw=s, spec=spec)
