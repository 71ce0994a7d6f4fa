"""
Test suite for logging setup.
"""

import json
import logging

import pytest
import structlog

from solcontrib.config import ContribConfig
from solcontrib.log import setup_logging


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


def test_json_output_from_config(caplog):
    """Test that log_json renders each event as one JSON object."""
    setup_logging(config=ContribConfig(_env_file=None, log_level="WARNING", log_json=True))
    assert structlog.is_configured()

    with caplog.at_level(logging.INFO):
        structlog.get_logger("solcontrib.test").warning("logging_configured", ok=True)

    event = json.loads(caplog.records[-1].getMessage())
    assert event["event"] == "logging_configured"
    assert event["ok"] is True
    assert event["level"] == "warning"
    assert event["logger"] == "solcontrib.test"
    assert "timestamp" in event


def test_console_output_when_json_disabled(caplog):
    """Test that an explicit json_format=False wins over the configuration."""
    setup_logging(
        level="DEBUG",
        json_format=False,
        config=ContribConfig(_env_file=None, log_json=True),
    )

    with caplog.at_level(logging.DEBUG):
        structlog.get_logger("solcontrib.test").debug("debug_event", attempt=2)

    message = caplog.records[-1].getMessage()
    assert "debug_event" in message
    with pytest.raises(ValueError):
        json.loads(message)
