"""Tests for batch decoding of index lines and records."""

import hashlib
import json
import logging

from registry_index import DecodeOptions, decode_lines, decode_records, summarize
from registry_index.errors import MissingField, RecordSyntaxError, UnsupportedSchema

CKSUM = hashlib.sha256(b"crate").hexdigest()


def make_line(name="foo", vers="1.0.0", **fields):
    record = {"name": name, "vers": vers, "deps": [], "cksum": CKSUM, "features": {}}
    record.update(fields)
    return json.dumps(record)


class TestDecodeLines:
    """Line-oriented decoding keeps going past bad lines."""

    def test_mixed_lines(self):
        lines = [
            make_line(vers="1.0.0"),
            "",
            "{not json",
            json.dumps({"name": "foo", "vers": "1.1.0"}),
            make_line(vers="1.2.0"),
        ]
        results = decode_lines(lines)
        assert [r.line for r in results] == [1, 3, 4, 5]
        assert [r.ok for r in results] == [True, False, False, True]
        assert isinstance(results[1].error, RecordSyntaxError)
        assert isinstance(results[2].error, MissingField)
        assert results[2].error.record == "foo@1.1.0"
        assert str(results[3].descriptor.version) == "1.2.0"

    def test_json_array_line_is_type_mismatch(self):
        results = decode_lines(["[1, 2]"])
        assert results[0].error.kind == "type_mismatch"

    def test_options_applied(self):
        results = decode_lines([make_line(v=7)], DecodeOptions(reject_unknown_schema=True))
        assert isinstance(results[0].error, UnsupportedSchema)

    def test_failures_logged(self, caplog):
        with caplog.at_level(logging.WARNING):
            decode_lines([make_line(), "oops"])
        assert "Line 2 is not valid JSON" in caplog.text

    def test_rejections_logged(self, caplog):
        with caplog.at_level(logging.WARNING):
            decode_lines([make_line(cksum="short")])
        assert "Line 1 rejected" in caplog.text
        assert "foo@1.0.0" in caplog.text

    def test_empty_input(self):
        assert decode_lines([]) == []


class TestDecodeRecords:
    """Parallel decoding of parsed records."""

    def test_parallel_results_keep_input_order(self):
        records = [json.loads(make_line(vers=f"1.{i}.0")) for i in range(50)]
        records[10]["cksum"] = "bad"
        results = decode_records(records, max_workers=8)
        assert [r.line for r in results] == list(range(1, 51))
        assert results[10].error.kind == "invalid_checksum"
        assert str(results[49].descriptor.version) == "1.49.0"

    def test_parallel_matches_serial(self):
        records = [json.loads(make_line(vers=f"0.{i}.1")) for i in range(20)]
        assert decode_records(records, max_workers=1) == decode_records(records, max_workers=4)

    def test_workers_default_from_options(self):
        records = [json.loads(make_line())]
        results = decode_records(records, DecodeOptions(max_workers=2))
        assert results[0].ok


class TestSummarize:
    """Batch summaries."""

    def test_counts_by_kind(self):
        results = decode_lines(
            [make_line(), "nope", make_line(cksum="x"), make_line(cksum="y"), make_line(vers="2.0.0")]
        )
        summary = summarize(results)
        assert summary.total == 5
        assert summary.decoded == 2
        assert summary.failed == 3
        assert summary.errors_by_kind == {"record_syntax": 1, "invalid_checksum": 2}

    def test_counts_dependency_errors_by_kind(self):
        bad_deps = [{"name": "a", "req": "???"}, {"req": "^1"}]
        results = decode_lines(
            [
                make_line(deps=bad_deps),
                make_line(vers="2.0.0", deps=[{"name": "b", "req": "nope"}]),
                make_line(vers="3.0.0"),
            ]
        )
        summary = summarize(results)
        assert summary.errors_by_kind == {"dependency_errors": 2}
        assert summary.dependency_errors_by_kind == {"invalid_requirement": 2, "missing_field": 1}

    def test_empty(self):
        summary = summarize([])
        assert (summary.total, summary.decoded, summary.failed) == (0, 0, 0)
        assert summary.errors_by_kind == {}
        assert summary.dependency_errors_by_kind == {}
