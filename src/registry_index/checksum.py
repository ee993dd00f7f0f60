"""Artifact checksum verification against a decoded record."""

from __future__ import annotations

import hashlib
import hmac
from typing import Union

from constants import Constants

from .decoder import is_valid_checksum
from .models import PackageVersionDescriptor


class ChecksumMismatch(ValueError):
    """Downloaded artifact bytes do not match the record's checksum."""

    def __init__(self, expected: str, actual: str, package_id: str = ""):
        target = f" for {package_id}" if package_id else ""
        super().__init__(f"Checksum mismatch{target}: expected {expected}, got {actual}")
        self.expected = expected
        self.actual = actual
        self.package_id = package_id


def artifact_digest(data: bytes) -> str:
    """Hex digest of ``data`` using the index checksum algorithm."""
    return hashlib.new(Constants.CHECKSUM_ALGORITHM, data).hexdigest()


def verify_checksum(expected: Union[PackageVersionDescriptor, str], data: bytes) -> None:
    """Verify artifact bytes against an expected checksum.

    Args:
        expected: A decoded descriptor or a hex digest string.
        data: The downloaded artifact bytes.

    Raises:
        ValueError: ``expected`` is not a well-formed digest.
        ChecksumMismatch: The digests differ.
    """
    package_id = ""
    if isinstance(expected, PackageVersionDescriptor):
        package_id = expected.package_id
        expected = expected.checksum
    if not is_valid_checksum(expected):
        raise ValueError(f"Malformed checksum: {expected!r}")
    actual = artifact_digest(data)
    if not hmac.compare_digest(actual, expected):
        raise ChecksumMismatch(expected, actual, package_id)
