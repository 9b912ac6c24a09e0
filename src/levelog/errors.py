"""Exception hierarchy for levelog.

Every error raised by the package derives from LoggerError and carries an
``error_type`` category plus optional structured ``context``. Categories:

- VALIDATION: a level value or capture argument failed validation
- CONFIG: a formatter, sink or option was missing or not callable
- STATE: singleton or capture-buffer lifecycle was used out of order
- RESOURCE: a capture buffer exceeded its size guard

Errors are always raised synchronously at the call site. Suppressed
output (level above threshold) is not an error and raises nothing.

Example:
    from levelog.errors import ValidationError

    try:
        validate_log_level(7)
    except ValidationError as e:
        print(e.error_type, e)  # VALIDATION Invalid log level (7 - out of valid range)
"""

from __future__ import annotations

from typing import Any

# =============================================================================
# Error categories and messages
# =============================================================================

VALIDATION = "VALIDATION"
CONFIG = "CONFIG"
STATE = "STATE"
RESOURCE = "RESOURCE"

ERROR_MESSAGES: dict[str, dict[str, str]] = {
    VALIDATION: {
        "INVALID_LOG_LEVEL": "Invalid log level",
        "NOT_STANDARD_LEVEL": "Log level threshold must be a standard level (0-6)",
        "INVALID_MESSAGE_TYPE": "Message must be a string or LogMessage",
        "INVALID_TESTID_TYPE": "test_id must be a non-empty string",
        "INVALID_TESTID_LENGTH": "test_id must be 255 characters or less",
    },
    CONFIG: {
        "INVALID_FORMATTER": "formatter must be a callable",
        "INVALID_DEFAULT_LOGGER": "default_logger must be a callable",
        "INVALID_LOGGER": "logger function must be a callable",
        "UNKNOWN_OPTION": "Unknown logger option",
        "INVALID_FORMAT_NAME": "Unknown output format",
    },
    STATE: {
        "ALREADY_CREATED": "Logger manager already created",
        "NOT_CREATED": "Logger manager not created. Call create_manager() first.",
        "ALREADY_INITIALIZED": "Logger already initialized on this manager",
        "NO_ACTIVE_TEST": "No active test. Call start_test() before logging.",
        "BUFFER_NOT_FOUND": (
            "Buffer not found for test_id. The buffer may have been ended "
            "or never started."
        ),
    },
    RESOURCE: {
        "BUFFER_OVERFLOW": (
            "Buffer overflow: maximum buffer size exceeded. This may "
            "indicate a test design issue with excessive logging."
        ),
    },
}


# =============================================================================
# Exceptions
# =============================================================================


class LoggerError(Exception):
    """Base exception for levelog.

    Attributes:
        error_type: Category string (VALIDATION, CONFIG, STATE, RESOURCE).
        context: Optional structured details about the failure, e.g. the
            offending value or the test id that was not found.
    """

    error_type: str = "LOGGER"

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        """Initialize with a human-readable message and optional context.

        The message is what str(error) returns, so callers and pytest
        ``match=`` patterns see exactly the text passed here. Context is
        kept separate so the message stays stable while details vary.

        Args:
            message: Human-readable error description.
            context: Structured details for programmatic handling. Stored
                as an empty dict when omitted.

        Returns:
            None. Exception instance ready to be raised.

        Example:
            >>> err = StateError("Buffer not found", {"test_id": "abc"})
            >>> err.context["test_id"]
            'abc'
        """
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = dict(context or {})

    def __repr__(self) -> str:
        """Return constructor-style representation including category."""
        return f"{type(self).__name__}({self.error_type}: {self.message!r})"


class ValidationError(LoggerError):
    """Raised when a level value or capture argument is invalid."""

    error_type = VALIDATION


class ConfigError(LoggerError):
    """Raised when a formatter, sink or configuration option is invalid."""

    error_type = CONFIG


class StateError(LoggerError):
    """Raised when singleton or capture-buffer lifecycle is violated."""

    error_type = STATE


class ResourceError(LoggerError):
    """Raised when a capture buffer exceeds its maximum size."""

    error_type = RESOURCE
