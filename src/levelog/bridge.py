"""Sinks that forward into the standard library logging module.

Lets an application that already configures ``logging`` (handlers, files,
log aggregation) receive levelog output without a second output path.
Level filtering still happens in levelog; the stdlib level is chosen only
so handlers and filters downstream see a sensible severity.

Example:
    import logging
    logging.basicConfig(level=logging.DEBUG)

    create_logger(
        formatter=message_only_formatter,
        logger_map=logging_sink_map("myapp"),
        log_level=LogLevel.DEBUG,
    )
    get_logger().warn("Disk almost full")   # -> WARNING:myapp:Disk almost full
"""

from __future__ import annotations

import logging

from levelog.levels import ALL_LEVELS, LogLevel, validate_log_level
from levelog.sinks import SinkFunction, null_sink

#: levelog level -> stdlib logging level
STDLIB_LEVELS: dict[LogLevel, int] = {
    LogLevel.FATAL: logging.CRITICAL,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.WARN: logging.WARNING,
    LogLevel.INFO: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.TRACE: logging.DEBUG,
    LogLevel.VERBOSE: logging.DEBUG,
    LogLevel.LOG: logging.INFO,
    LogLevel.DEFAULT: logging.INFO,
    LogLevel.FORCE_OUTPUT: logging.INFO,
}


def logging_sink(level: LogLevel, logger_name: str = "levelog.output") -> SinkFunction:
    """Create a sink that logs formatted text on a stdlib logger.

    Args:
        level: levelog level whose stdlib counterpart is used. OFF yields
            null_sink.
        logger_name: Name passed to logging.getLogger().

    Returns:
        Sink function.

    Raises:
        ValidationError: If level is invalid.

    Example:
        >>> sink = logging_sink(LogLevel.ERROR, "myapp")
        >>> sink("Connection lost")   # logging.getLogger("myapp").error(...)
    """
    level = validate_log_level(level)
    if level == LogLevel.OFF:
        return null_sink
    target = logging.getLogger(logger_name)
    stdlib_level = STDLIB_LEVELS[level]

    def _sink(text: str) -> None:
        target.log(stdlib_level, text)

    return _sink


def logging_sink_map(logger_name: str = "levelog.output") -> dict[LogLevel, SinkFunction]:
    """Per-level stdlib sinks for every level; OFF is a no-op."""
    return {level: logging_sink(level, logger_name) for level in ALL_LEVELS}
