"""levelog: leveled logging with pluggable formatters and sinks.

Provides:
- Standard levels OFF..TRACE with threshold filtering
- Sentinel levels VERBOSE, LOG, DEFAULT and FORCE_OUTPUT
- Plain-text and JSON formatters
- Console, stream and stdlib-logging sinks, per-level routing
- A process-wide logger with create-or-fetch access and a guarded manager
- Capture buffers for asserting on log output in tests

Example:
    from levelog import LogLevel, console_sink, create_logger, plain_formatter

    logger = create_logger(
        default_logger=console_sink,
        formatter=plain_formatter,
        log_level=LogLevel.INFO,
    )
    logger.info("Server started", {"port": 8080})
    # 2025-01-15T10:30:00Z [INFO] Server started {"port": 8080}
"""

import logging

from levelog.bridge import STDLIB_LEVELS, logging_sink, logging_sink_map
from levelog.capture import CaptureBuffer, KeyedCaptureBuffer, create_test_id
from levelog.config import LoggerConfig
from levelog.errors import (
    ConfigError,
    LoggerError,
    ResourceError,
    StateError,
    ValidationError,
)
from levelog.formatters import (
    RecordingFormatter,
    json_formatter,
    message_only_formatter,
    null_formatter,
    plain_formatter,
)
from levelog.levels import (
    SENTINEL_LEVELS,
    STANDARD_LEVELS,
    UNSET,
    LogLevel,
    is_standard_log_level,
    is_valid_log_level,
    label_for_level,
    level_from_label,
    validate_log_level,
    value_to_string,
)
from levelog.logger import LevelLogger, create_logger, get_logger, reset_singleton
from levelog.manager import LoggerManager, create_manager, get_manager, reset_manager
from levelog.message import LogMessage, build_log_message
from levelog.sinks import (
    SinkMap,
    console_sink,
    console_sink_map,
    null_sink,
    stream_sink,
)

# Library convention: stay silent unless the application configures logging
logging.getLogger("levelog").addHandler(logging.NullHandler())

__all__ = [
    # Levels
    "LogLevel",
    "STANDARD_LEVELS",
    "SENTINEL_LEVELS",
    "UNSET",
    "is_valid_log_level",
    "is_standard_log_level",
    "validate_log_level",
    "value_to_string",
    "label_for_level",
    "level_from_label",
    # Errors
    "LoggerError",
    "ValidationError",
    "ConfigError",
    "StateError",
    "ResourceError",
    # Messages and formatters
    "LogMessage",
    "build_log_message",
    "plain_formatter",
    "json_formatter",
    "message_only_formatter",
    "null_formatter",
    "RecordingFormatter",
    # Sinks
    "SinkMap",
    "null_sink",
    "console_sink",
    "console_sink_map",
    "stream_sink",
    "logging_sink",
    "logging_sink_map",
    "STDLIB_LEVELS",
    # Logger and manager
    "LoggerConfig",
    "LevelLogger",
    "create_logger",
    "get_logger",
    "reset_singleton",
    "LoggerManager",
    "create_manager",
    "get_manager",
    "reset_manager",
    # Capture
    "CaptureBuffer",
    "KeyedCaptureBuffer",
    "create_test_id",
]
