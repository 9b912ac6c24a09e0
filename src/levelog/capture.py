"""Capture buffers: sinks that record output for test assertions.

CaptureBuffer keeps, per level, the raw inputs it received (formatted
strings or LogMessage objects) in insertion order. KeyedCaptureBuffer adds
per-test isolation: each logical test gets its own CaptureBuffer, keyed by
a test id, so parallel or interleaved tests never see each other's output.

Example:
    buffer = CaptureBuffer()
    logger = create_logger(formatter=message_only_formatter,
                           logger_map=buffer.create_sink_map(),
                           log_level=LogLevel.INFO)
    logger.info("a")
    logger.info("b")
    assert buffer.get_messages(LogLevel.INFO) == ["a", "b"]

    keyed = KeyedCaptureBuffer("test_orders.py")
    test_id = keyed.start_test()
    keyed.error("boom")
    assert keyed.get_last_message(LogLevel.ERROR) == "boom"
    keyed.end_test(test_id)
"""

from __future__ import annotations

import logging
import os
import re
import time
import uuid
from typing import Any

from levelog.errors import (
    ERROR_MESSAGES,
    RESOURCE,
    STATE,
    VALIDATION,
    ResourceError,
    StateError,
    ValidationError,
)
from levelog.levels import ALL_LEVELS, LogLevel, validate_log_level, value_to_string
from levelog.message import LogMessage
from levelog.sinks import SinkFunction, null_sink

logger = logging.getLogger(__name__)

#: Default cap on messages held by one buffer, across all levels.
DEFAULT_MAX_MESSAGES = 10_000

MAX_TEST_ID_LENGTH = 255

_UNIQ_DEFAULT_LENGTH = 8
_UNIQ_MAX_LENGTH = 32

CapturedMessage = str | LogMessage


# =============================================================================
# Test ids
# =============================================================================


def _normalized_basename(identifier: str) -> str:
    """Lowercase an identifier; path-like values keep only the stem.

    'tests/Test_Orders.py' -> 'test_orders', 'MyTest' -> 'mytest'.
    """
    lowered = identifier.lower()
    if any(ch in lowered for ch in ("/", "\\", ".")):
        base = os.path.basename(lowered.replace("\\", "/"))
        return re.sub(r"\.[a-z0-9.]*$", "", base)
    return lowered


def create_test_id(identifier: str = "test", length: int = 8) -> str:
    """Build a unique test id from a caller-supplied identifier.

    Format: '<normalized identifier>-<epoch milliseconds>-<random hex>'.

    Args:
        identifier: Test name or file path. Paths are reduced to their
            lowercase stem.
        length: Number of random hex characters. Values <= 0 fall back to
            8; values above 32 are clamped to 32.

    Returns:
        Test id string, e.g. 'test_orders-1736937000000-3f9a1c2e'.
    """
    if length <= 0:
        length = _UNIQ_DEFAULT_LENGTH
    length = min(length, _UNIQ_MAX_LENGTH)
    timestamp = int(time.time() * 1000)
    uniq = uuid.uuid4().hex[:length]
    return f"{_normalized_basename(identifier)}-{timestamp}-{uniq}"


# =============================================================================
# CaptureBuffer
# =============================================================================


class CaptureBuffer:
    """Per-level recorder of log output.

    Every query validates its level argument; returned lists are copies,
    so mutating them never changes the buffer.

    Attributes:
        max_messages: Total messages the buffer accepts before raising
            ResourceError. Guards long test runs against unbounded growth.
    """

    def __init__(self, max_messages: int = DEFAULT_MAX_MESSAGES) -> None:
        """Create an empty buffer.

        Args:
            max_messages: Size guard across all levels. Must be positive.

        Raises:
            ValidationError: If max_messages is not a positive int.
        """
        if isinstance(max_messages, bool) or not isinstance(max_messages, int) or max_messages <= 0:
            raise ValidationError(
                f"max_messages must be a positive integer (got {value_to_string(max_messages)})"
            )
        self.max_messages = max_messages
        self._messages: dict[LogLevel, list[CapturedMessage]] = {
            level: [] for level in ALL_LEVELS
        }
        self._total = 0

    # -------------------------------------------------------------------------
    # Recording
    # -------------------------------------------------------------------------

    def record(self, level: Any, message: CapturedMessage) -> None:
        """Append a message at a level.

        Raises:
            ValidationError: If level is invalid or message is neither a
                str nor a LogMessage.
            ResourceError: If the buffer is full.
        """
        member = validate_log_level(level)
        if not isinstance(message, str | LogMessage):
            base = ERROR_MESSAGES[VALIDATION]["INVALID_MESSAGE_TYPE"]
            raise ValidationError(
                f"{base} (got {value_to_string(message)})",
                {"value": value_to_string(message)},
            )
        if self._total >= self.max_messages:
            raise ResourceError(
                ERROR_MESSAGES[RESOURCE]["BUFFER_OVERFLOW"],
                {"max_messages": self.max_messages},
            )
        self._messages[member].append(message)
        self._total += 1

    def fatal(self, message: CapturedMessage) -> None:
        """Record a message at FATAL."""
        self.record(LogLevel.FATAL, message)

    def error(self, message: CapturedMessage) -> None:
        """Record a message at ERROR."""
        self.record(LogLevel.ERROR, message)

    def warn(self, message: CapturedMessage) -> None:
        """Record a message at WARN."""
        self.record(LogLevel.WARN, message)

    def info(self, message: CapturedMessage) -> None:
        """Record a message at INFO."""
        self.record(LogLevel.INFO, message)

    def debug(self, message: CapturedMessage) -> None:
        """Record a message at DEBUG."""
        self.record(LogLevel.DEBUG, message)

    def trace(self, message: CapturedMessage) -> None:
        """Record a message at TRACE."""
        self.record(LogLevel.TRACE, message)

    def verbose(self, message: CapturedMessage) -> None:
        """Record a message at VERBOSE."""
        self.record(LogLevel.VERBOSE, message)

    def log(self, message: CapturedMessage) -> None:
        """Record a message at LOG."""
        self.record(LogLevel.LOG, message)

    def default(self, message: CapturedMessage) -> None:
        """Record a message at DEFAULT."""
        self.record(LogLevel.DEFAULT, message)

    def force_output(self, message: CapturedMessage) -> None:
        """Record a message at FORCE_OUTPUT."""
        self.record(LogLevel.FORCE_OUTPUT, message)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_messages(self, level: Any) -> list[CapturedMessage]:
        """Messages recorded at a level, oldest first (a copy)."""
        return list(self._messages[validate_log_level(level)])

    def get_last_message(self, level: Any) -> CapturedMessage | None:
        """Most recent message at a level, or None if there is none."""
        messages = self._messages[validate_log_level(level)]
        return messages[-1] if messages else None

    def get_all_messages(self) -> dict[str, list[CapturedMessage]]:
        """Copies of every level's messages, keyed by level name."""
        return {level.name: list(messages) for level, messages in self._messages.items()}

    def clear_messages(self, level: Any) -> None:
        """Empty one level; other levels are untouched."""
        member = validate_log_level(level)
        self._total -= len(self._messages[member])
        self._messages[member] = []

    def clear_all_messages(self) -> None:
        """Empty every level."""
        for level in ALL_LEVELS:
            self._messages[level] = []
        self._total = 0

    def has_messages(self, level: Any) -> bool:
        """True if anything was recorded at the level."""
        return bool(self._messages[validate_log_level(level)])

    def has_any_messages(self) -> bool:
        """True if anything was recorded at any level."""
        return self._total > 0

    def get_message_count(self, level: Any) -> int:
        """Number of messages recorded at the level."""
        return len(self._messages[validate_log_level(level)])

    def get_total_message_count(self) -> int:
        """Number of messages recorded across all levels."""
        return self._total

    # -------------------------------------------------------------------------
    # Sink adapters
    # -------------------------------------------------------------------------

    def create_sink(self) -> SinkFunction:
        """Sink that records everything it receives at INFO."""

        def _sink(text: str) -> None:
            self.record(LogLevel.INFO, text)

        return _sink

    def create_sink_map(self) -> dict[LogLevel, SinkFunction]:
        """Sink per level, each recording at its own level; OFF is a no-op."""
        sinks: dict[LogLevel, SinkFunction] = {
            level: self._level_sink(level) for level in ALL_LEVELS
        }
        sinks[LogLevel.OFF] = null_sink
        return sinks

    def _level_sink(self, level: LogLevel) -> SinkFunction:
        def _sink(text: str) -> None:
            self.record(level, text)

        return _sink


# =============================================================================
# KeyedCaptureBuffer
# =============================================================================


class KeyedCaptureBuffer:
    """CaptureBuffer per logical test, selected by test id.

    Logging and query methods act on the current test unless a test_id is
    given. Logging with no current test raises StateError("No active
    test..."); using an id whose buffer was ended (or never started)
    raises StateError("Buffer not found...").

    Usage:
        keyed = KeyedCaptureBuffer("orders")
        first = keyed.start_test("orders-1")
        keyed.info("one")
        sink = keyed.sink_for(first)
        keyed.end_test(first)
        sink("late")  # StateError: Buffer not found...
    """

    def __init__(
        self,
        identifier: str = "test",
        max_messages: int = DEFAULT_MAX_MESSAGES,
    ) -> None:
        """Create a keyed buffer with no active test.

        Args:
            identifier: Base name for generated test ids.
            max_messages: Size guard for each per-test buffer.
        """
        self.identifier = identifier
        self.max_messages = max_messages
        self._buffers: dict[str, CaptureBuffer] = {}
        self._current_test_id: str | None = None

    @property
    def current_test_id(self) -> str | None:
        """Id of the active test, or None."""
        return self._current_test_id

    @property
    def active_test_ids(self) -> list[str]:
        """Ids of every test whose buffer is still open."""
        return list(self._buffers)

    def start_test(self, test_id: str | None = None) -> str:
        """Open a fresh buffer and make it current.

        Starting an id that is already open replaces its buffer with an
        empty one.

        Args:
            test_id: Id to use. Generated from the identifier when omitted.

        Returns:
            The test id.

        Raises:
            ValidationError: If test_id is empty, not a string, or longer
                than 255 characters.
        """
        if test_id is None:
            test_id = create_test_id(self.identifier)
        self._validate_test_id(test_id)
        self._buffers[test_id] = CaptureBuffer(self.max_messages)
        self._current_test_id = test_id
        logger.debug("Started capture for test %s", test_id)
        return test_id

    def end_test(self, test_id: str | None = None) -> None:
        """Discard a test's buffer (the current test by default).

        Ending an unknown id, or ending with no current test, does nothing.
        """
        target = test_id if test_id is not None else self._current_test_id
        if target is None:
            return
        self._buffers.pop(target, None)
        if target == self._current_test_id:
            self._current_test_id = None
        logger.debug("Ended capture for test %s", target)

    @staticmethod
    def _validate_test_id(test_id: Any) -> None:
        if not isinstance(test_id, str) or not test_id.strip():
            base = ERROR_MESSAGES[VALIDATION]["INVALID_TESTID_TYPE"]
            raise ValidationError(f"{base} (got {value_to_string(test_id)})")
        if len(test_id) > MAX_TEST_ID_LENGTH:
            raise ValidationError(
                ERROR_MESSAGES[VALIDATION]["INVALID_TESTID_LENGTH"],
                {"length": len(test_id)},
            )

    def _buffer(self, test_id: str | None = None) -> CaptureBuffer:
        if test_id is None:
            test_id = self._current_test_id
            if test_id is None:
                raise StateError(ERROR_MESSAGES[STATE]["NO_ACTIVE_TEST"])
        try:
            return self._buffers[test_id]
        except KeyError:
            raise StateError(
                ERROR_MESSAGES[STATE]["BUFFER_NOT_FOUND"], {"test_id": test_id}
            ) from None

    # -------------------------------------------------------------------------
    # Recording (current test)
    # -------------------------------------------------------------------------

    def record(self, level: Any, message: CapturedMessage) -> None:
        """Record into the current test's buffer.

        Raises:
            StateError: If no test is active.
        """
        self._buffer().record(level, message)

    def fatal(self, message: CapturedMessage) -> None:
        """Record a message at FATAL."""
        self.record(LogLevel.FATAL, message)

    def error(self, message: CapturedMessage) -> None:
        """Record a message at ERROR."""
        self.record(LogLevel.ERROR, message)

    def warn(self, message: CapturedMessage) -> None:
        """Record a message at WARN."""
        self.record(LogLevel.WARN, message)

    def info(self, message: CapturedMessage) -> None:
        """Record a message at INFO."""
        self.record(LogLevel.INFO, message)

    def debug(self, message: CapturedMessage) -> None:
        """Record a message at DEBUG."""
        self.record(LogLevel.DEBUG, message)

    def trace(self, message: CapturedMessage) -> None:
        """Record a message at TRACE."""
        self.record(LogLevel.TRACE, message)

    def verbose(self, message: CapturedMessage) -> None:
        """Record a message at VERBOSE."""
        self.record(LogLevel.VERBOSE, message)

    def log(self, message: CapturedMessage) -> None:
        """Record a message at LOG."""
        self.record(LogLevel.LOG, message)

    def default(self, message: CapturedMessage) -> None:
        """Record a message at DEFAULT."""
        self.record(LogLevel.DEFAULT, message)

    def force_output(self, message: CapturedMessage) -> None:
        """Record a message at FORCE_OUTPUT."""
        self.record(LogLevel.FORCE_OUTPUT, message)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_messages(self, level: Any, test_id: str | None = None) -> list[CapturedMessage]:
        """Messages at a level for a test (current by default)."""
        return self._buffer(test_id).get_messages(level)

    def get_last_message(
        self, level: Any, test_id: str | None = None
    ) -> CapturedMessage | None:
        """Most recent message at a level for a test, or None."""
        return self._buffer(test_id).get_last_message(level)

    def get_all_messages(self, test_id: str | None = None) -> dict[str, list[CapturedMessage]]:
        """Copies of every level's messages for a test."""
        return self._buffer(test_id).get_all_messages()

    def clear_messages(self, level: Any, test_id: str | None = None) -> None:
        """Empty one level of a test's buffer."""
        self._buffer(test_id).clear_messages(level)

    def clear_all_messages(self, test_id: str | None = None) -> None:
        """Empty every level of a test's buffer."""
        self._buffer(test_id).clear_all_messages()

    def has_messages(self, level: Any, test_id: str | None = None) -> bool:
        """True if the test recorded anything at the level."""
        return self._buffer(test_id).has_messages(level)

    def get_message_count(self, level: Any, test_id: str | None = None) -> int:
        """Number of messages at a level for a test."""
        return self._buffer(test_id).get_message_count(level)

    def get_total_message_count(self, test_id: str | None = None) -> int:
        """Number of messages across all levels for a test."""
        return self._buffer(test_id).get_total_message_count()

    # -------------------------------------------------------------------------
    # Sink adapters
    # -------------------------------------------------------------------------

    def sink_for(self, test_id: str) -> SinkFunction:
        """Sink recording at INFO into one test's buffer.

        The buffer is looked up on every call, so the sink starts failing
        with StateError once the test has ended.
        """

        def _sink(text: str) -> None:
            self._buffer(test_id).record(LogLevel.INFO, text)

        return _sink

    def sink_map_for(self, test_id: str) -> dict[LogLevel, SinkFunction]:
        """Per-level sinks into one test's buffer; OFF is a no-op."""

        def _level_sink(level: LogLevel) -> SinkFunction:
            def _sink(text: str) -> None:
                self._buffer(test_id).record(level, text)

            return _sink

        sinks = {level: _level_sink(level) for level in ALL_LEVELS}
        sinks[LogLevel.OFF] = null_sink
        return sinks
