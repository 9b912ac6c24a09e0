"""Leveled logger and process-wide singleton access.

LevelLogger decides, for every call, whether a message is emitted, how it
is formatted and which sink receives it:

    call -> should_output(level) -> build LogMessage -> formatter -> sink

Dispatch rules by level:
- FORCE_OUTPUT: always emitted
- VERBOSE: emitted iff the verbose flag is on, whatever the threshold
- LOG / DEFAULT: always emitted, without a level label
- standard levels: emitted iff level <= threshold

Suppression is silent. Nothing is raised for a message above threshold.

Example:
    from levelog import create_logger, LogLevel, plain_formatter, console_sink

    logger = create_logger(
        default_logger=console_sink,
        formatter=plain_formatter,
        log_level=LogLevel.INFO,
    )
    logger.info("Server started", {"port": 8080})
    logger.debug("not shown at INFO")

    # Elsewhere: same instance, configuration untouched
    get_logger().warn("Disk almost full")
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from typing import Any

from levelog.config import LoggerConfig
from levelog.formatters import FormatFunction
from levelog.levels import LogLevel, validate_log_level
from levelog.message import build_log_message
from levelog.sinks import SinkFunction

logger = logging.getLogger(__name__)


class LevelLogger:
    """Threshold-filtered logger with pluggable formatter and sinks.

    A fresh instance is silent: threshold OFF, verbose off, null formatter
    and null sinks. Production code normally obtains the shared instance
    through create_logger()/get_logger() or LoggerManager rather than
    constructing one directly; tests construct instances freely.

    Thread Safety:
        Dispatch takes no locks. Configuration changes apply to every
        subsequent call.
    """

    def __init__(self, config: LoggerConfig | None = None) -> None:
        """Create a logger around a configuration.

        Args:
            config: State to use. Defaults to a new silent LoggerConfig.
        """
        self._config = config or LoggerConfig()

    @property
    def config(self) -> LoggerConfig:
        """Underlying configuration state."""
        return self._config

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    def apply_config(self, **options: Any) -> None:
        """Merge configuration options (see LoggerConfig.apply).

        Raises:
            ConfigError: For unknown keys or invalid formatter/sinks.
            ValidationError: For invalid levels.
        """
        self._config.apply(**options)

    # Name kept for callers coming from the manager API
    set_logger_config = apply_config

    def bind_level_sink(self, level: Any, sink: SinkFunction | None) -> None:
        """Bind a sink to one level; None restores the default sink.

        Raises:
            ValidationError: If level is invalid.
            ConfigError: If sink is not callable.
        """
        self._config.bind_sink(level, sink)

    def update_logger_map(self, mapping: Mapping[Any, SinkFunction]) -> None:
        """Override sinks for the named levels only."""
        self._config.update_sink_map(mapping)

    def set_log_level(self, level: Any) -> LogLevel:
        """Set the threshold and return it.

        Raises:
            ValidationError: If level is not a standard level.
        """
        return self._config.set_log_level(level)

    @property
    def log_level(self) -> LogLevel:
        """Current threshold."""
        return self._config.log_level

    def set_verbose(self, value: bool | None = None) -> bool:
        """Set the verbose flag, or just read it when value is None."""
        if value is not None:
            self._config.set_verbose(value)
        return self._config.verbose

    @property
    def is_verbose(self) -> bool:
        """Whether VERBOSE-level calls are emitted."""
        return self._config.verbose

    def get_formatter(self) -> FormatFunction:
        """Current formatter, for callers that format their own text."""
        return self._config.formatter

    def get_sink(self, level: Any) -> SinkFunction:
        """Resolved sink for a level; always callable."""
        return self._config.get_sink(level)

    def get_sink_map(self) -> dict[LogLevel, SinkFunction]:
        """Resolved copy of the per-level sink table."""
        return self._config.get_sink_map()

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def should_output(self, level: Any) -> bool:
        """Decide whether a call at the given level produces output.

        Args:
            level: Candidate level, standard or sentinel.

        Returns:
            True if the message would be emitted.

        Raises:
            ValidationError: If level is invalid.

        Example:
            >>> logger.set_log_level(LogLevel.WARN)
            >>> logger.should_output(LogLevel.ERROR), logger.should_output(LogLevel.INFO)
            (True, False)
            >>> logger.should_output(LogLevel.OFF)
            True
        """
        level = validate_log_level(level)
        if level == LogLevel.FORCE_OUTPUT:
            return True
        if level == LogLevel.VERBOSE:
            return self._config.verbose
        if level in (LogLevel.LOG, LogLevel.DEFAULT):
            return True
        return level <= self._config.log_level

    def _dispatch(self, level: LogLevel, args: tuple[Any, ...]) -> None:
        if not self.should_output(level):
            return
        message = build_log_message(level, *args)
        text = self._config.formatter(message)
        # A formatter that blanks real content is filtering it out
        if text == "" and message.message != "":
            return
        self._config.get_sink(level)(text)

    def emit(self, level: Any, *args: Any) -> None:
        """Log at an explicit level.

        Raises:
            ValidationError: If level is invalid.
        """
        self._dispatch(validate_log_level(level), args)

    def fatal(self, *args: Any) -> None:
        """Log at FATAL."""
        self._dispatch(LogLevel.FATAL, args)

    def error(self, *args: Any) -> None:
        """Log at ERROR."""
        self._dispatch(LogLevel.ERROR, args)

    def warn(self, *args: Any) -> None:
        """Log at WARN."""
        self._dispatch(LogLevel.WARN, args)

    warning = warn

    def info(self, *args: Any) -> None:
        """Log at INFO."""
        self._dispatch(LogLevel.INFO, args)

    def debug(self, *args: Any) -> None:
        """Log at DEBUG."""
        self._dispatch(LogLevel.DEBUG, args)

    def trace(self, *args: Any) -> None:
        """Log at TRACE."""
        self._dispatch(LogLevel.TRACE, args)

    def verbose(self, *args: Any) -> None:
        """Log only while the verbose flag is on."""
        self._dispatch(LogLevel.VERBOSE, args)

    def log(self, *args: Any) -> None:
        """Log unconditionally, without a level label."""
        self._dispatch(LogLevel.LOG, args)

    def default(self, *args: Any) -> None:
        """Log unconditionally, without a level label."""
        self._dispatch(LogLevel.DEFAULT, args)

    def force_output(self, *args: Any) -> None:
        """Log unconditionally, even at threshold OFF."""
        self._dispatch(LogLevel.FORCE_OUTPUT, args)


# =============================================================================
# Module-level singleton
# =============================================================================

_logger: LevelLogger | None = None
_logger_lock = threading.Lock()


def create_logger(**options: Any) -> LevelLogger:
    """Get the process-wide LevelLogger, creating it on first use.

    Options are merged into the shared instance's configuration on every
    call; calling with no options returns the instance unchanged, so any
    module can use this as a create-or-fetch accessor.

    Args:
        **options: LoggerConfig.apply() options (default_logger, formatter,
            logger_map, log_level, verbose).

    Returns:
        The shared LevelLogger.

    Raises:
        ConfigError: For unknown keys or invalid formatter/sinks.
        ValidationError: For invalid levels.

    Example:
        >>> a = create_logger(log_level=LogLevel.DEBUG)
        >>> b = create_logger()
        >>> a is b, b.log_level
        (True, <LogLevel.DEBUG: 5>)
    """
    global _logger

    with _logger_lock:
        if _logger is None:
            _logger = LevelLogger()
            logger.debug("Created process-wide LevelLogger")
        instance = _logger
    instance.apply_config(**options)
    return instance


def get_logger() -> LevelLogger:
    """Get the process-wide LevelLogger, creating a silent one if needed."""
    return create_logger()


def reset_singleton() -> None:
    """Discard the process-wide LevelLogger (for testing).

    The next create_logger()/get_logger() builds a fresh, silent instance.
    Loggers already handed out keep working but are no longer shared.
    """
    global _logger

    with _logger_lock:
        _logger = None
    logger.debug("Reset process-wide LevelLogger")
