"""Test helper functions for levelog.

Provides protocol-compliance assertions and small builders shared by the
test modules.

Example:
    from tests.helpers import assert_implements_protocol
    from levelog.sinks import Sink

    def test_capture_sink_is_a_sink():
        assert_implements_protocol(CaptureBuffer().create_sink(), Sink)
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Protocol

from levelog.levels import LogLevel
from levelog.message import LogMessage

#: Fixed timestamp for deterministic formatter output.
FIXED_TIMESTAMP = datetime(2025, 1, 15, 10, 30, 0, 123000, tzinfo=UTC)


def make_message(
    level: LogLevel = LogLevel.INFO,
    message: str = "Test message",
    args: tuple[Any, ...] = (),
    timestamp: datetime = FIXED_TIMESTAMP,
) -> LogMessage:
    """Build a LogMessage with a fixed timestamp.

    Args:
        level: Message level. Default INFO.
        message: Message text.
        args: Structured arguments.
        timestamp: Message time. Default FIXED_TIMESTAMP.

    Returns:
        LogMessage ready to pass to a formatter.

    Example:
        >>> make_message(LogLevel.ERROR, "boom").label
        'ERROR'
    """
    return LogMessage(level=level, timestamp=timestamp, message=message, args=args)


def assert_implements_protocol(instance: object, protocol: type[Protocol]) -> None:
    """Assert that an instance implements a Protocol interface.

    Verifies that the given instance satisfies the Protocol contract using
    isinstance() checks (requires @runtime_checkable on the Protocol).

    Args:
        instance: Object to check for protocol compliance.
        protocol: Protocol class decorated with @runtime_checkable.

    Raises:
        AssertionError: If instance doesn't implement protocol, listing the
            missing members.

    Example:
        >>> from levelog.formatters import Formatter
        >>> assert_implements_protocol(plain_formatter, Formatter)
    """
    if isinstance(instance, protocol):
        return

    instance_attrs = set(dir(instance))
    object_attrs = set(dir(object))
    protocol_methods = {
        attr
        for attr in set(dir(protocol)) - object_attrs
        if not attr.startswith("_") or attr == "__call__"
    }
    missing = sorted(method for method in protocol_methods if method not in instance_attrs)
    missing_str = ", ".join(missing) if missing else "unknown"
    raise AssertionError(
        f"{type(instance).__name__} does not implement {protocol.__name__}. "
        f"Missing: {missing_str}"
    )


def assert_all_implement_protocol(instances: list[Any], protocol: type[Protocol]) -> None:
    """Assert that all instances in a list implement a Protocol.

    Raises:
        AssertionError: If any instance doesn't implement protocol; the
            message names the failing index.
    """
    for i, instance in enumerate(instances):
        try:
            assert_implements_protocol(instance, protocol)
        except AssertionError as e:
            raise AssertionError(f"Instance at index {i}: {e}") from e
