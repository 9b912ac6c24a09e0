"""Process-wide logger manager.

LoggerManager owns the single LevelLogger used by production code and
guards its lifecycle:

    Uninitialized --create_manager()--> Created --reset_manager()--> Uninitialized

- create_manager() while Created raises StateError("...already created")
- get_manager() while Uninitialized raises StateError("...not created")
- set_logger() on a manager that already holds a logger raises
  StateError("...already initialized")

Configuration calls on the manager are forwarded to the held logger.
Tests inject their own LevelLogger by constructing a bare LoggerManager and
calling set_logger().

Example:
    from levelog.manager import create_manager, get_manager

    create_manager(default_logger=console_sink, formatter=plain_formatter,
                   log_level=LogLevel.INFO)

    # Anywhere else
    log = get_manager().get_logger()
    log.info("ready")
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from typing import Any

from levelog import logger as logger_module
from levelog.errors import ERROR_MESSAGES, STATE, StateError
from levelog.formatters import FormatFunction
from levelog.logger import LevelLogger
from levelog.sinks import SinkFunction, null_sink, validate_sink

logger = logging.getLogger(__name__)

_manager: LoggerManager | None = None
_manager_lock = threading.Lock()


def _state_error(key: str) -> StateError:
    return StateError(ERROR_MESSAGES[STATE][key])


class LoggerManager:
    """Holder of the process-wide LevelLogger.

    A manager holds at most one logger. Managers created through
    create_manager() are bound to the shared LevelLogger at creation; a
    manager constructed directly starts empty and accepts exactly one
    set_logger() call.
    """

    def __init__(self) -> None:
        """Create an empty manager with no bound logger."""
        self._logger: LevelLogger | None = None

    # -------------------------------------------------------------------------
    # Singleton lifecycle
    # -------------------------------------------------------------------------

    @classmethod
    def create_manager(cls, **options: Any) -> LoggerManager:
        """Create the process-wide manager and bind the shared logger.

        Args:
            **options: Applied to the shared LevelLogger (see
                LoggerConfig.apply).

        Returns:
            The new manager.

        Raises:
            StateError: If a manager already exists. Call reset_manager()
                first (tests only).
            ConfigError, ValidationError: If options are invalid. The
                manager is not created in that case.
        """
        global _manager

        with _manager_lock:
            if _manager is not None:
                raise _state_error("ALREADY_CREATED")
            instance = cls()
            instance._logger = logger_module.create_logger(**options)
            _manager = instance
        logger.debug("Created LoggerManager")
        return instance

    @classmethod
    def get_manager(cls) -> LoggerManager:
        """Return the process-wide manager.

        Raises:
            StateError: If create_manager() has not been called.
        """
        if _manager is None:
            raise _state_error("NOT_CREATED")
        return _manager

    @classmethod
    def reset_singleton(cls) -> None:
        """Discard the manager and its logger (for testing).

        Both the manager and the shared LevelLogger are released together,
        so the next create_manager() starts from a silent logger.
        """
        global _manager

        with _manager_lock:
            if _manager is not None and _manager._logger is not None:
                logger_module.reset_singleton()
            _manager = None
        logger.debug("Reset LoggerManager")

    # -------------------------------------------------------------------------
    # Logger binding
    # -------------------------------------------------------------------------

    def get_logger(self) -> LevelLogger:
        """Return the bound logger.

        Raises:
            StateError: If no logger has been bound.
        """
        if self._logger is None:
            raise _state_error("NOT_CREATED")
        return self._logger

    def set_logger(self, instance: LevelLogger) -> None:
        """Bind a logger once (dependency injection).

        Raises:
            StateError: If a logger is already bound.
        """
        if self._logger is not None:
            raise _state_error("ALREADY_INITIALIZED")
        self._logger = instance

    def get_formatter(self) -> FormatFunction:
        """Formatter of the bound logger."""
        return self.get_logger().get_formatter()

    def get_sink(self, level: Any) -> SinkFunction:
        """Resolved sink of the bound logger for a level."""
        return self.get_logger().get_sink(level)

    # -------------------------------------------------------------------------
    # Delegated configuration
    # -------------------------------------------------------------------------

    def set_logger_config(self, **options: Any) -> None:
        """Merge options into the bound logger's configuration."""
        self.get_logger().apply_config(**options)

    def bind_logger_function(self, level: Any, fn: SinkFunction) -> bool:
        """Bind a sink to one level of the bound logger.

        Returns:
            True once the sink is bound.

        Raises:
            StateError: If no logger is bound.
            ValidationError: If level is invalid.
            ConfigError: If fn is not callable.
        """
        self.get_logger().bind_level_sink(level, validate_sink(fn))
        return True

    def update_logger_map(self, mapping: Mapping[Any, SinkFunction]) -> None:
        """Override sinks for the named levels of the bound logger."""
        self.get_logger().update_logger_map(mapping)

    def remove_logger_function(self, level: Any) -> None:
        """Silence one level by binding it to null_sink.

        The level keeps a callable sink; it never becomes unset.
        """
        self.get_logger().bind_level_sink(level, null_sink)


def create_manager(**options: Any) -> LoggerManager:
    """Create the process-wide manager (see LoggerManager.create_manager)."""
    return LoggerManager.create_manager(**options)


def get_manager() -> LoggerManager:
    """Return the process-wide manager (see LoggerManager.get_manager)."""
    return LoggerManager.get_manager()


def reset_manager() -> None:
    """Discard the manager and shared logger (for testing)."""
    LoggerManager.reset_singleton()
