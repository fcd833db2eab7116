"""Tests for log sanitizing"""
import logging

from resuelve.logging import (
    NOISY_LOGGERS,
    get_logger,
    sanitize_id_for_logging,
    sanitize_string_for_logging,
)


def test_id_truncated():
    assert sanitize_id_for_logging("a1b2c3d4-e5f6-0000") == "a1b2c3d4"
    assert sanitize_id_for_logging(None) == "N/A"


def test_newlines_escaped():
    value = sanitize_string_for_logging("ana@example.com\nINFO fake entry")
    assert "\n" not in value
    assert value.startswith("ana@example.com\\n")


def test_long_text_truncated():
    assert sanitize_string_for_logging("x" * 60, max_length=10) == "x" * 10 + "..."


def test_logger_cached_and_noisy_libraries_quiet():
    assert get_logger("resuelve.test") is get_logger("resuelve.test")
    for name in NOISY_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING
