"""Unit tests for logging configuration."""

import logging
from io import StringIO

import pytest

from difflens.logging import HANDLER_NAME, get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_logger():
    logger = logging.getLogger("difflens")
    handlers = list(logger.handlers)
    level, propagate = logger.level, logger.propagate
    yield
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_logging_creates_handler(self):
        """setup_logging attaches a named handler to the difflens logger."""
        logger = setup_logging()
        assert any(h.get_name() == HANDLER_NAME for h in logger.handlers)

    def test_repeated_setup_replaces_handler(self):
        setup_logging()
        logger = setup_logging()
        assert sum(1 for h in logger.handlers if h.get_name() == HANDLER_NAME) == 1

    def test_setup_logging_with_custom_level(self):
        logger = setup_logging(level=logging.DEBUG)
        assert logger.level == logging.DEBUG

    def test_logger_propagate_is_false(self):
        """Logger propagation is disabled to avoid duplicate logs."""
        assert setup_logging().propagate is False

    def test_child_loggers_write_to_stream(self):
        stream = StringIO()
        setup_logging(level=logging.INFO, stream=stream)

        get_logger("difflens.diff.render").info("rendered %d files", 3)

        output = stream.getvalue()
        assert "INFO" in output
        assert "difflens.diff.render: rendered 3 files" in output


class TestGetLogger:
    """Tests for get_logger function."""

    def test_returns_named_logger(self):
        assert get_logger("difflens.test").name == "difflens.test"
