"""Tests for idiolect.core.logging."""

import json
import logging
import sys

import pytest

from idiolect.core.config import Config
from idiolect.core.logging import StructuredFormatter, configure_from, configure_logging


@pytest.fixture
def scratch_logger():
    """A throwaway logger restored after the test."""
    name = "idiolect.tests.scratch"
    logger = logging.getLogger(name)
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield name
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]


def _record(msg="Learned %d rule(s)", args=(3,), exc_info=None):
    return logging.LogRecord(
        name="idiolect.learn",
        level=logging.INFO,
        pathname=__file__,
        lineno=42,
        msg=msg,
        args=args,
        exc_info=exc_info,
        func="learn_from_sources",
    )


class TestStructuredFormatter:
    """JSON log line formatting."""

    def test_fields(self):
        entry = json.loads(StructuredFormatter().format(_record()))
        assert entry["level"] == "INFO"
        assert entry["logger"] == "idiolect.learn"
        assert entry["msg"] == "Learned 3 rule(s)"
        assert entry["func"] == "learn_from_sources"
        assert entry["line"] == 42
        assert entry["ts"].endswith("Z")
        assert "exception" not in entry

    def test_single_line(self):
        output = StructuredFormatter().format(_record(msg="two\nlines", args=()))
        assert "\n" not in output
        assert json.loads(output)["msg"] == "two\nlines"

    def test_exception(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = _record(exc_info=sys.exc_info())
        entry = json.loads(StructuredFormatter().format(record))
        assert "ValueError: boom" in entry["exception"]


class TestConfigureLogging:
    """Logger setup from arguments and Config."""

    def test_structured(self, scratch_logger):
        configure_logging(structured=True, level="DEBUG", logger_name=scratch_logger)
        logger = logging.getLogger(scratch_logger)
        assert logger.level == logging.DEBUG
        assert logger.propagate is False
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, StructuredFormatter)

    def test_repeat_does_not_stack_handlers(self, scratch_logger):
        configure_logging(structured=True, logger_name=scratch_logger)
        configure_logging(structured=True, logger_name=scratch_logger)
        assert len(logging.getLogger(scratch_logger).handlers) == 1

    def test_plain_only_sets_level(self, scratch_logger):
        configure_logging(level="warning", logger_name=scratch_logger)
        logger = logging.getLogger(scratch_logger)
        assert logger.level == logging.WARNING
        assert logger.handlers == []

    def test_unknown_level_falls_back(self, scratch_logger):
        configure_logging(level="chatty", logger_name=scratch_logger)
        assert logging.getLogger(scratch_logger).level == logging.INFO

    def test_configure_from(self):
        logger = logging.getLogger("idiolect")
        saved = (list(logger.handlers), logger.level, logger.propagate)
        try:
            configure_from(Config(structured_logging=True, log_level="ERROR"))
            assert logger.level == logging.ERROR
            assert isinstance(logger.handlers[0].formatter, StructuredFormatter)
        finally:
            logger.handlers[:] = saved[0]
            logger.setLevel(saved[1])
            logger.propagate = saved[2]
