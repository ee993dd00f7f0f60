"""Candidate filtering over decoded descriptors.

Default selection excludes yanked versions and, when a toolchain version is
given, versions whose minimum toolchain is newer than it.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Union

from versioning.models import Requirement, Version
from versioning.parser import parse_requirement, parse_tool_version

from .models import PackageVersionDescriptor


def is_tool_compatible(descriptor: PackageVersionDescriptor, tool_version: Union[str, Version]) -> bool:
    """Return True when ``tool_version`` meets the descriptor's minimum toolchain."""
    if descriptor.rust_version is None:
        return True
    if isinstance(tool_version, str):
        tool_version = parse_tool_version(tool_version)
    return parse_tool_version(descriptor.rust_version) <= tool_version


def select_candidates(
    descriptors: Iterable[PackageVersionDescriptor],
    requirement: Optional[Union[str, Requirement]] = None,
    tool_version: Optional[Union[str, Version]] = None,
    include_yanked: bool = False,
) -> List[PackageVersionDescriptor]:
    """Filter descriptors, preserving input order.

    Raises:
        VersionError: ``requirement`` or ``tool_version`` does not parse.
    """
    if isinstance(requirement, str):
        requirement = parse_requirement(requirement)
    if isinstance(tool_version, str):
        tool_version = parse_tool_version(tool_version)

    selected = []
    for descriptor in descriptors:
        if descriptor.yanked and not include_yanked:
            continue
        if requirement is not None and not requirement.matches(descriptor.version):
            continue
        if tool_version is not None and not is_tool_compatible(descriptor, tool_version):
            continue
        selected.append(descriptor)
    return selected


def pick_latest(
    descriptors: Iterable[PackageVersionDescriptor],
    requirement: Optional[Union[str, Requirement]] = None,
    tool_version: Optional[Union[str, Version]] = None,
    include_yanked: bool = False,
) -> Optional[PackageVersionDescriptor]:
    """Highest-precedence descriptor passing ``select_candidates``, or None."""
    candidates = select_candidates(descriptors, requirement, tool_version, include_yanked)
    if not candidates:
        return None
    return max(candidates, key=lambda d: d.version.precedence_key)
