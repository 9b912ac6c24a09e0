"""Log level registry and validation.

Levels are plain integers. The standard range is closed and totally
ordered; larger values are more verbose:

    OFF=0  FATAL=1  ERROR=2  WARN=3  INFO=4  DEBUG=5  TRACE=6

Four sentinel levels sit outside that range. They are never compared
against the threshold; each has its own dispatch rule:

    VERBOSE=-11        shown only while the verbose flag is on
    LOG=-12            always shown, no level label
    FORCE_OUTPUT=-98   always shown, even at threshold OFF
    DEFAULT=-99        always shown, no level label

Example:
    >>> validate_log_level(4)
    <LogLevel.INFO: 4>
    >>> level_from_label(" warn ")
    <LogLevel.WARN: 3>
    >>> label_for_level(LogLevel.LOG)
    ''
"""

from __future__ import annotations

import math
from enum import IntEnum
from typing import Any

from levelog.errors import ERROR_MESSAGES, VALIDATION, ValidationError


class _Unset:
    """Marker for "argument or option not supplied"."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


#: Distinct from None: None is a value, UNSET means nothing was passed.
UNSET: Any = _Unset()


class LogLevel(IntEnum):
    """Numeric log levels, standard and sentinel."""

    OFF = 0
    FATAL = 1
    ERROR = 2
    WARN = 3
    INFO = 4
    DEBUG = 5
    TRACE = 6

    # Sentinels: dispatched by rule, not by threshold
    VERBOSE = -11
    LOG = -12
    FORCE_OUTPUT = -98
    DEFAULT = -99


STANDARD_LEVELS: tuple[LogLevel, ...] = (
    LogLevel.OFF,
    LogLevel.FATAL,
    LogLevel.ERROR,
    LogLevel.WARN,
    LogLevel.INFO,
    LogLevel.DEBUG,
    LogLevel.TRACE,
)

SENTINEL_LEVELS: tuple[LogLevel, ...] = (
    LogLevel.VERBOSE,
    LogLevel.LOG,
    LogLevel.FORCE_OUTPUT,
    LogLevel.DEFAULT,
)

ALL_LEVELS: tuple[LogLevel, ...] = STANDARD_LEVELS + SENTINEL_LEVELS

#: Levels written without a "[LABEL]" segment.
UNLABELED_LEVELS: frozenset[LogLevel] = frozenset(
    {LogLevel.LOG, LogLevel.DEFAULT, LogLevel.FORCE_OUTPUT}
)

_VALID_VALUES: frozenset[int] = frozenset(int(level) for level in ALL_LEVELS)


# =============================================================================
# Validation
# =============================================================================


def _is_integral_number(value: Any) -> bool:
    """Return True for int/float values with no fractional part.

    bool is rejected even though it subclasses int: True is not a level.
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return math.isfinite(value) and value.is_integer()
    return False


def is_valid_log_level(value: Any) -> bool:
    """Check whether a value is a standard or sentinel log level.

    A value is valid iff it is a number with no fractional part (not NaN,
    not infinite, not bool) that equals one of the eleven declared levels.

    Args:
        value: Anything. Typically an int or LogLevel member.

    Returns:
        True if the value names a level, False otherwise. Never raises.

    Example:
        >>> is_valid_log_level(3), is_valid_log_level(7), is_valid_log_level(4.5)
        (True, False, False)
        >>> is_valid_log_level(LogLevel.VERBOSE)
        True
    """
    return _is_integral_number(value) and int(value) in _VALID_VALUES


def is_standard_log_level(value: Any) -> bool:
    """Check whether a value is in the closed standard range OFF..TRACE.

    Sentinels and invalid values both return False.
    """
    if not is_valid_log_level(value):
        return False
    return LogLevel.OFF <= int(value) <= LogLevel.TRACE


def value_to_string(value: Any) -> str:
    """Render any value in the canonical form used by error messages.

    Keeps validation errors unambiguous about what was passed in: strings
    are quoted so "4" is distinguishable from 4, containers are summarized,
    and objects collapse to their kind rather than a repr that may be huge.

    Rules:
    - None: 'null'
    - UNSET: 'undefined'
    - str: double-quoted
    - list/tuple: '[a,b,c]' (elements via str, comma-joined)
    - callables: 'function' or 'function <name>' (lambdas are anonymous)
    - dicts and other objects: 'object'
    - numbers and bools: str(value)

    Args:
        value: Any Python value.

    Returns:
        Canonical string form. Never raises.

    Example:
        >>> value_to_string("INFO")
        '"INFO"'
        >>> value_to_string([1, 2])
        '[1,2]'
        >>> value_to_string(None)
        'null'
    """
    if value is None:
        return "null"
    if value is UNSET:
        return "undefined"
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, list | tuple):
        return "[" + ",".join(str(item) for item in value) + "]"
    if isinstance(value, bool | int | float):
        return str(value)
    if callable(value):
        name = getattr(value, "__name__", "")
        if not name or name == "<lambda>":
            return "function"
        return f"function {name}"
    return "object"


def _describe_invalid(value: Any) -> str:
    """Build the parenthesized detail for an invalid level value."""
    rendered = value_to_string(value)
    if value is None or value is UNSET:
        return rendered
    if isinstance(value, bool) or not isinstance(value, int | float):
        return f"{rendered} - expected number"
    if isinstance(value, float) and not math.isfinite(value):
        return f"{rendered} - must be finite number"
    if isinstance(value, float) and not value.is_integer():
        return f"{rendered} - must be integer"
    return f"{rendered} - out of valid range"


def validate_log_level(value: Any) -> LogLevel:
    """Validate a level value and return it as a LogLevel member.

    Args:
        value: Candidate level. Integral floats (4.0) are accepted and
            normalized; the returned member compares equal to the input.

    Returns:
        The LogLevel member equal to value.

    Raises:
        ValidationError: If value is not a valid level. The message always
            embeds value_to_string(value), so repeated calls with the same
            input produce identical messages.

    Example:
        >>> validate_log_level(2)
        <LogLevel.ERROR: 2>
        >>> validate_log_level(7)
        Traceback (most recent call last):
        ...
        levelog.errors.ValidationError: Invalid log level (7 - out of valid range)
    """
    if not is_valid_log_level(value):
        base = ERROR_MESSAGES[VALIDATION]["INVALID_LOG_LEVEL"]
        raise ValidationError(
            f"{base} ({_describe_invalid(value)})",
            {"value": value_to_string(value)},
        )
    return LogLevel(int(value))


def validate_standard_log_level(value: Any) -> LogLevel:
    """Validate a value usable as a threshold (OFF..TRACE only).

    Raises:
        ValidationError: For invalid values and for sentinel levels.
    """
    level = validate_log_level(value)
    if level not in STANDARD_LEVELS:
        base = ERROR_MESSAGES[VALIDATION]["NOT_STANDARD_LEVEL"]
        raise ValidationError(
            f"{base} ({value_to_string(value)})",
            {"value": value_to_string(value)},
        )
    return level


# =============================================================================
# Labels
# =============================================================================


def label_for_level(level: Any) -> str:
    """Return the canonical uppercase label for a level.

    Unlabeled sentinels (LOG, DEFAULT, FORCE_OUTPUT) and invalid values
    return an empty string so formatters can simply skip the segment.

    Example:
        >>> label_for_level(4)
        'INFO'
        >>> label_for_level(LogLevel.DEFAULT)
        ''
    """
    if not is_valid_log_level(level):
        return ""
    member = LogLevel(int(level))
    if member in UNLABELED_LEVELS:
        return ""
    return member.name


def level_from_label(label: Any) -> LogLevel | None:
    """Look up a level by its name, ignoring case and surrounding spaces.

    Args:
        label: Level name such as 'info', ' WARN ', 'force_output'.

    Returns:
        Matching LogLevel, or None for unknown names and non-strings.
        Never raises.

    Example:
        >>> level_from_label("debug")
        <LogLevel.DEBUG: 5>
        >>> level_from_label("loud") is None
        True
    """
    if not isinstance(label, str) or not label.strip():
        return None
    return LogLevel.__members__.get(label.strip().upper())
