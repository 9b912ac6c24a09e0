"""Formatters: LogMessage -> str.

A formatter is any callable taking a LogMessage and returning the text a
sink will receive. Formatting is pure; the only failure mode is the
underlying serialization error (for example a cyclic structure passed to
json_formatter), which propagates to the log call.

Provided formatters:
- plain_formatter: '2025-01-15T10:30:00Z [INFO] Camera ready {"id": 0}'
- json_formatter: one JSON object per line for log aggregation
- message_only_formatter: just the message text
- null_formatter: always '' (the default; suppresses sink calls)
- RecordingFormatter: wraps another formatter and records calls (tests)

Example:
    logger = create_logger(formatter=json_formatter, default_logger=console_sink)
    logger.info("Frame captured", {"width": 1920})
    # {"timestamp": "2025-01-15T10:30:00.000Z", "level": "INFO", ...}
"""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any, Protocol, runtime_checkable

from levelog.errors import CONFIG, ERROR_MESSAGES, ConfigError
from levelog.levels import value_to_string
from levelog.message import LogMessage


@runtime_checkable
class Formatter(Protocol):  # pragma: no cover
    """Protocol for formatter callables."""

    def __call__(self, message: LogMessage) -> str:
        """Render a log message as text."""
        ...


FormatFunction = Callable[[LogMessage], str]


def _as_utc(timestamp: datetime) -> datetime:
    """Normalize a timestamp to UTC; naive values are taken as UTC."""
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=UTC)
    return timestamp.astimezone(UTC)


def _json_default(value: Any) -> str:
    """Fallback for values json cannot encode: callables by name, else str()."""
    if callable(value):
        return value_to_string(value)
    return str(value)


def _args_to_string(args: tuple[Any, ...]) -> str:
    """Render structured args as space-separated JSON."""
    return " ".join(json.dumps(arg, default=_json_default) for arg in args)


def plain_formatter(message: LogMessage) -> str:
    """Format a message as a single human-readable line.

    Layout: '<ISO8601 seconds>Z [<LABEL>] <message> <json args...>'. The
    label segment is dropped for unlabeled levels (LOG, DEFAULT,
    FORCE_OUTPUT), and the result is whitespace-trimmed so an empty
    message or empty args leave no trailing spaces.

    Args:
        message: LogMessage to render.

    Returns:
        Formatted line without trailing newline.

    Raises:
        ValueError: If an argument contains a reference cycle.

    Example:
        >>> plain_formatter(LogMessage(LogLevel.WARN, ts, "Low disk", ({"free": 3},)))
        '2025-01-15T10:30:00Z [WARN] Low disk {"free": 3}'
    """
    timestamp = _as_utc(message.timestamp).strftime("%Y-%m-%dT%H:%M:%S") + "Z"
    parts = [timestamp]
    if message.label:
        parts.append(f"[{message.label}]")
    parts.append(message.message)
    parts.append(_args_to_string(message.args))
    return " ".join(part for part in parts if part).strip()


def json_formatter(message: LogMessage) -> str:
    """Format a message as a single-line JSON object.

    Produces machine-parseable output (NDJSON) with keys:
    - timestamp: ISO 8601 UTC with milliseconds, e.g. '2025-01-15T10:30:00.123Z'
    - level: level label, omitted for unlabeled levels
    - message: message text
    - args: list of structured args, omitted when there are none

    Non-serializable values fall back to str() (callables render as
    'function <name>'); cyclic structures still raise, since json
    cannot represent them.

    Args:
        message: LogMessage to render.

    Returns:
        JSON string with no trailing newline.

    Raises:
        ValueError: If an argument contains a reference cycle.

    Example:
        >>> json.loads(json_formatter(msg))["level"]
        'ERROR'
    """
    timestamp = _as_utc(message.timestamp).isoformat(timespec="milliseconds")
    entry: dict[str, Any] = {"timestamp": timestamp.replace("+00:00", "Z")}
    if message.label:
        entry["level"] = message.label
    entry["message"] = message.message
    if message.args:
        entry["args"] = list(message.args)
    return json.dumps(entry, default=_json_default)


def message_only_formatter(message: LogMessage) -> str:
    """Return only the message text."""
    return message.message


def null_formatter(message: LogMessage) -> str:
    """Return an empty string for every message."""
    return ""


FORMATTERS: dict[str, FormatFunction] = {
    "plain": plain_formatter,
    "json": json_formatter,
    "message": message_only_formatter,
    "null": null_formatter,
}


def formatter_by_name(name: str) -> FormatFunction:
    """Look up a built-in formatter by name ('plain', 'json', ...).

    Raises:
        ConfigError: If the name is not a built-in formatter.
    """
    try:
        return FORMATTERS[name.strip().lower()]
    except (KeyError, AttributeError):
        base = ERROR_MESSAGES[CONFIG]["INVALID_FORMAT_NAME"]
        raise ConfigError(
            f"{base}: {value_to_string(name)}", {"available": sorted(FORMATTERS)}
        ) from None


def validate_formatter(formatter: Any) -> FormatFunction:
    """Ensure a formatter is callable.

    Raises:
        ConfigError: For None, UNSET or non-callable values.
    """
    if formatter is None or not callable(formatter):
        base = ERROR_MESSAGES[CONFIG]["INVALID_FORMATTER"]
        raise ConfigError(
            f"{base} (got {value_to_string(formatter)})",
            {"value": value_to_string(formatter)},
        )
    return formatter


class RecordingFormatter:
    """Formatter wrapper that counts calls and keeps the last message.

    Lets tests assert how often the dispatch path reached the formatter,
    which is exactly how often a level passed the threshold check.

    Usage:
        fmt = RecordingFormatter(plain_formatter)
        logger = create_logger(formatter=fmt, log_level=LogLevel.WARN)
        logger.debug("hidden")
        logger.error("shown")
        assert fmt.call_count == 1
        assert fmt.last_message.message == "shown"
    """

    def __init__(self, routine: FormatFunction | None = None) -> None:
        """Wrap a formatter routine.

        Args:
            routine: Formatter to delegate to. Defaults to
                message_only_formatter so recorded output is easy to assert.

        Raises:
            ConfigError: If routine is given but not callable.
        """
        if routine is not None:
            validate_formatter(routine)
        self._routine = routine or message_only_formatter
        self.call_count = 0
        self.last_message: LogMessage | None = None

    def __call__(self, message: LogMessage) -> str:
        self.call_count += 1
        self.last_message = message
        return self._routine(message)

    def reset(self) -> None:
        """Clear call statistics."""
        self.call_count = 0
        self.last_message = None
