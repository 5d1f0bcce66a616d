"""Tests for logging configuration."""

import io
import logging

import pytest

from khata import logging_setup


@pytest.fixture
def fresh_logging(clean_logging):
    """The package logger, unconfigured and without handlers."""
    return clean_logging


def test_get_logger_is_silent_until_configured(fresh_logging):
    logger = logging_setup.get_logger("khata.domain.gst")

    assert logger.name == "khata.domain.gst"
    assert any(isinstance(h, logging.NullHandler) for h in fresh_logging.handlers)


def test_configure_logging_once(fresh_logging):
    stream = io.StringIO()

    logging_setup.configure_logging("INFO", stream=stream)
    logging_setup.configure_logging("DEBUG", stream=io.StringIO())
    logging_setup.get_logger("khata.test").info("hello %s", "world")

    assert fresh_logging.level == logging.INFO
    assert len(fresh_logging.handlers) == 1
    assert "khata.test INFO hello world" in stream.getvalue()


@pytest.mark.parametrize(
    "value, expected",
    [("debug", logging.DEBUG), ("20", 20), (logging.ERROR, logging.ERROR), ("bogus", logging.WARNING)],
)
def test_parse_level(value, expected):
    assert logging_setup._parse_level(value) == expected


def test_parse_level_from_environment(monkeypatch):
    monkeypatch.setenv("KHATA_LOG_LEVEL", "ERROR")
    assert logging_setup._parse_level(None) == logging.ERROR

    monkeypatch.delenv("KHATA_LOG_LEVEL")
    assert logging_setup._parse_level(None) == logging.WARNING
