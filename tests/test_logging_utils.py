"""Unit tests for shared logging helpers."""

import logging

from common.logging_utils import Timer, configure_logging, extra_context, is_debug_enabled
from constants import Constants


def test_extra_context_drops_none_and_renames_reserved():
    ctx = extra_context(event="decode", name="foo", message="x", record=None)
    assert ctx == {"event": "decode", "ctx_name": "foo", "ctx_message": "x"}


def test_extra_context_is_accepted_by_logging(caplog):
    logger = logging.getLogger("tests.logging_utils")
    with caplog.at_level(logging.INFO, logger="tests.logging_utils"):
        logger.info("hello", extra=extra_context(name="foo", component="test"))
    assert caplog.records[-1].ctx_name == "foo"
    assert caplog.records[-1].component == "test"


def test_is_debug_enabled():
    logger = logging.getLogger("tests.debug_check")
    logger.setLevel(logging.DEBUG)
    assert is_debug_enabled(logger)
    logger.setLevel(logging.INFO)
    assert not is_debug_enabled(logger)


def test_configure_logging_reads_env(monkeypatch):
    root = logging.getLogger()
    previous = root.level
    try:
        monkeypatch.setenv(Constants.ENV_LOG_LEVEL, "debug")
        configure_logging()
        assert root.level == logging.DEBUG
        configure_logging("warning")
        assert root.level == logging.WARNING
        configure_logging("not-a-level")
        assert root.level == logging.INFO
    finally:
        root.setLevel(previous)


def test_timer_measures_duration():
    with Timer() as t:
        sum(range(1000))
    assert t.duration_ms() >= 0.0
