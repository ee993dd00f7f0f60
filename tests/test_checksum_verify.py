"""Tests for artifact checksum verification."""

import hashlib

import pytest

from registry_index import ChecksumMismatch, decode, is_valid_checksum, verify_checksum
from registry_index.checksum import artifact_digest

DATA = b"\x1f\x8b crate archive bytes"
CKSUM = hashlib.sha256(DATA).hexdigest()


def make_descriptor():
    return decode({"name": "foo", "vers": "0.1.0", "deps": [], "cksum": CKSUM})


def test_artifact_digest():
    assert artifact_digest(DATA) == CKSUM


def test_verify_against_descriptor():
    verify_checksum(make_descriptor(), DATA)


def test_verify_against_hex_string():
    verify_checksum(CKSUM, DATA)


def test_mismatch_raises():
    with pytest.raises(ChecksumMismatch) as exc:
        verify_checksum(make_descriptor(), DATA + b"tampered")
    assert exc.value.expected == CKSUM
    assert exc.value.actual == hashlib.sha256(DATA + b"tampered").hexdigest()
    assert "foo@0.1.0" in str(exc.value)


def test_malformed_expected_checksum():
    with pytest.raises(ValueError, match="Malformed checksum"):
        verify_checksum("abc123", DATA)


def test_is_valid_checksum():
    assert is_valid_checksum(CKSUM)
    assert not is_valid_checksum(CKSUM.upper())
    assert not is_valid_checksum(CKSUM[:-1])
    assert not is_valid_checksum(None)
