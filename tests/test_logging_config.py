"""
test_logging_config.py — Tests for app/logging_config.py

Verifies Loguru setup, stdlib logging interception, and request
context binding. Uses loguru's sink capture for assertions.

Called by: pytest
Depends on: app/logging_config.py
"""

import logging
import os
from unittest.mock import patch

import pytest
from loguru import logger

from app.logging_config import _is_production, setup_logging


@pytest.fixture(autouse=True)
def _clean_loguru():
    """Remove all handlers before/after each test for isolation."""
    logger.remove()
    yield
    logger.remove()


def test_setup_logging_adds_handler():
    """setup_logging() should add at least one Loguru handler."""
    with patch.dict(os.environ, {"APP_URL": "http://localhost:8000"}):
        setup_logging()
    assert len(logger._core.handlers) > 0


def test_stdlib_logging_intercepted():
    """After setup, stdlib logging.getLogger() messages go through Loguru."""
    with patch.dict(os.environ, {"APP_URL": "http://localhost:8000"}):
        setup_logging()

    # Add test sink AFTER setup (setup calls logger.remove() internally)
    messages = []
    logger.add(lambda m: messages.append(str(m)), format="{message}")

    logging.getLogger("test.intercept").warning("intercepted message")

    assert any("intercepted message" in m for m in messages)


def test_log_level_from_env():
    """LOG_LEVEL env var controls minimum log level."""
    with patch.dict(os.environ, {"APP_URL": "http://localhost:8000", "LOG_LEVEL": "WARNING"}):
        setup_logging()

    messages = []
    logger.add(lambda m: messages.append(str(m)), level="WARNING", format="{message}")

    logger.debug("should be filtered")
    logger.warning("should appear")

    assert any("should appear" in m for m in messages)
    assert not any("should be filtered" in m for m in messages)


def test_context_binding():
    """logger.contextualize() adds the request id to log records."""
    records = []
    logger.add(lambda m: records.append(m.record), format="{message}")

    with logger.contextualize(request_id="abc123"):
        logger.info("request log")

    assert records[-1]["extra"].get("request_id") == "abc123"


def test_context_not_leaked():
    """Context fields should not persist after contextualize block exits."""
    records = []
    logger.add(lambda m: records.append(m.record), format="{message}")

    with logger.contextualize(request_id="abc123"):
        logger.info("inside")
    logger.info("outside")

    assert records[-1]["extra"].get("request_id") != "abc123"


def test_default_request_id_outside_requests():
    with patch.dict(os.environ, {"APP_URL": "http://localhost:8000"}):
        setup_logging()
    records = []
    logger.add(lambda m: records.append(m.record), format="{message}")
    logger.info("startup")
    assert records[-1]["extra"]["request_id"] == "-"


def test_production_mode_uses_serialize():
    """A non-local APP_URL switches to JSON output."""
    with patch.dict(os.environ, {"APP_URL": "https://api.example.com"}):
        # Mock the sink registration since /var/log/general may not exist in test
        with patch("loguru.logger.add") as mock_add:
            setup_logging()
    serialize_calls = [c for c in mock_add.call_args_list if c.kwargs.get("serialize") is True]
    assert len(serialize_calls) >= 1


@pytest.mark.parametrize("url,expected", [
    ("http://localhost:8000", False),
    ("http://127.0.0.1:8000", False),
    ("", False),
    ("https://api.example.com", True),
])
def test_is_production(url, expected):
    assert _is_production(url) is expected
