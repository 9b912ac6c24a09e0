"""Pytest configuration and fixtures for levelog tests.

The package keeps process-wide state (the shared LevelLogger and the
LoggerManager). Every test starts and ends with both released so that
configuration never leaks between tests.
"""

from unittest.mock import MagicMock

import pytest

from levelog.capture import CaptureBuffer
from levelog.formatters import message_only_formatter
from levelog.logger import LevelLogger, reset_singleton
from levelog.manager import reset_manager


@pytest.fixture(autouse=True)
def reset_singletons():
    """Release the shared logger and manager around each test.

    Yields:
        None. Teardown runs the same reset as setup.
    """
    reset_manager()
    reset_singleton()
    yield
    reset_manager()
    reset_singleton()


@pytest.fixture
def sink():
    """MagicMock usable as a sink; records every formatted string."""
    return MagicMock(name="sink")


@pytest.fixture
def capture():
    """Empty CaptureBuffer."""
    return CaptureBuffer()


@pytest.fixture
def logger(sink):
    """Standalone LevelLogger writing message text to the sink mock.

    Threshold TRACE so every standard level passes; individual tests
    lower it as needed.
    """
    instance = LevelLogger()
    instance.apply_config(
        default_logger=sink,
        formatter=message_only_formatter,
        log_level=6,
    )
    return instance
