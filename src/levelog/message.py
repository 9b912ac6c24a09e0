"""Log message construction.

A log call such as ``logger.info("Camera", 0, "ready", {"gain": 50}, 3)``
is split into a text part and a structured part:

- leading primitives (str, int, float, bool, None) become ``message``:
  'Camera 0 ready'
- the first structured value and everything after it stay verbatim in
  ``args``: ({'gain': 50}, 3)

Primitives after the first structured value are not folded back into the
message, so argument order is preserved for formatters that render args.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from levelog.levels import LogLevel, label_for_level

_PRIMITIVE_TYPES = (str, int, float, bool, type(None))


@dataclass(frozen=True)
class LogMessage:
    """One log call, ready for a formatter.

    Attributes:
        level: Level of the call (standard or sentinel).
        timestamp: UTC time the message was built.
        message: Space-joined text of the leading primitive arguments.
        args: Remaining arguments, starting at the first structured value.
    """

    level: LogLevel
    timestamp: datetime
    message: str
    args: tuple[Any, ...] = field(default_factory=tuple)

    @property
    def label(self) -> str:
        """Uppercase level label, empty for unlabeled levels."""
        return label_for_level(self.level)


def _is_primitive(value: Any) -> bool:
    return isinstance(value, _PRIMITIVE_TYPES)


def _primitive_text(value: Any) -> str:
    if value is None:
        return "null"
    return str(value)


def split_args(args: tuple[Any, ...]) -> tuple[str, tuple[Any, ...]]:
    """Split call arguments into message text and structured remainder.

    Args:
        args: Positional arguments of a log call.

    Returns:
        (message, rest) where message joins the leading primitives with
        single spaces (stripped) and rest starts at the first structured
        value.

    Example:
        >>> split_args(("a", 1, [2], "b"))
        ('a 1', ([2], 'b'))
    """
    boundary = len(args)
    for index, arg in enumerate(args):
        if not _is_primitive(arg):
            boundary = index
            break
    text = " ".join(_primitive_text(arg) for arg in args[:boundary]).strip()
    return text, tuple(args[boundary:])


def build_log_message(
    level: LogLevel,
    *args: Any,
    timestamp: datetime | None = None,
) -> LogMessage:
    """Build a LogMessage from the arguments of a log call.

    Args:
        level: Level the call was made at.
        *args: Call arguments, primitives first then structured values.
        timestamp: Override for the message time; defaults to now in UTC.
            Tests inject a fixed value to get deterministic output.

    Returns:
        Frozen LogMessage.

    Example:
        >>> msg = build_log_message(LogLevel.INFO, "Loaded", 3, "items", {"k": 1})
        >>> msg.message, msg.args
        ('Loaded 3 items', ({'k': 1},))
    """
    text, rest = split_args(args)
    return LogMessage(
        level=level,
        timestamp=timestamp if timestamp is not None else datetime.now(UTC),
        message=text,
        args=rest,
    )
