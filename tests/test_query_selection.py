"""Tests for candidate selection over decoded descriptors."""

import hashlib

import pytest

from registry_index import decode, is_tool_compatible, pick_latest, select_candidates
from versioning.models import VersionError

CKSUM = hashlib.sha256(b"my-package").hexdigest()


def make_descriptor(vers, **fields):
    record = {"name": "my-package", "vers": vers, "deps": [], "cksum": CKSUM}
    record.update(fields)
    return decode(record)


@pytest.fixture
def versions():
    return [
        make_descriptor("1.0.0"),
        make_descriptor("1.1.0", yanked=True),
        make_descriptor("1.2.0", rust_version="1.80"),
        make_descriptor("2.0.0", rust_version="1.60.0"),
        make_descriptor("2.1.0-beta.1"),
    ]


class TestToolCompatibility:
    """Minimum toolchain checks."""

    def test_no_minimum_is_always_compatible(self):
        assert is_tool_compatible(make_descriptor("1.0.0"), "1.0")

    def test_minimum_compared_by_precedence(self):
        d = make_descriptor("1.2.0", rust_version="1.80")
        assert is_tool_compatible(d, "1.80")
        assert is_tool_compatible(d, "1.80.1")
        assert not is_tool_compatible(d, "1.79.9")


class TestSelection:
    """Filtering and picking."""

    def test_yanked_excluded_by_default(self, versions):
        names = [str(d.version) for d in select_candidates(versions)]
        assert "1.1.0" not in names
        assert len(names) == 4

    def test_include_yanked(self, versions):
        assert len(select_candidates(versions, include_yanked=True)) == 5

    def test_pick_latest(self, versions):
        assert str(pick_latest(versions).version) == "2.1.0-beta.1"

    def test_pick_latest_with_requirement(self, versions):
        assert str(pick_latest(versions, "^1").version) == "1.2.0"

    def test_pick_latest_with_tool_version(self, versions):
        """A toolchain older than 1.80 falls back past 1.2.0 and yanked 1.1.0."""
        assert str(pick_latest(versions, "^1", tool_version="1.70").version) == "1.0.0"

    def test_pick_latest_including_yanked(self, versions):
        picked = pick_latest(versions, "^1", tool_version="1.70", include_yanked=True)
        assert str(picked.version) == "1.1.0"

    def test_nothing_matches(self, versions):
        assert pick_latest(versions, "^3") is None
        assert pick_latest([]) is None

    def test_invalid_requirement(self, versions):
        with pytest.raises(VersionError):
            select_candidates(versions, "^^")
