"""Sinks and per-level sink resolution.

A sink is the terminal callable that receives a fully formatted string:
console, stream, stdlib logging (see levelog.bridge) or a capture buffer
(see levelog.capture).

SinkMap keeps one slot per level. A slot is either bound to a sink or
explicitly unbound; unbound slots fall back to the map's default sink, and
the default itself falls back to null_sink, so resolve() always returns a
callable.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Mapping
from typing import Any, Protocol, TextIO, runtime_checkable

from levelog.errors import CONFIG, ERROR_MESSAGES, ConfigError
from levelog.levels import ALL_LEVELS, LogLevel, validate_log_level, value_to_string

SinkFunction = Callable[[str], None]


@runtime_checkable
class Sink(Protocol):  # pragma: no cover
    """Protocol for sink callables."""

    def __call__(self, text: str) -> None:
        """Consume one formatted log line."""
        ...


def null_sink(text: str) -> None:
    """Discard the text."""


def console_sink(text: str) -> None:
    """Print the text to stdout."""
    print(text, file=sys.stdout)


def _stderr_sink(text: str) -> None:
    print(text, file=sys.stderr)


def stream_sink(stream: TextIO) -> SinkFunction:
    """Create a sink that writes one line per call to a file-like object.

    Args:
        stream: Object with write() (sys.stderr, open file, StringIO).

    Returns:
        Sink function bound to the stream.

    Example:
        >>> buf = io.StringIO()
        >>> sink = stream_sink(buf)
        >>> sink("hello")
        >>> buf.getvalue()
        'hello\\n'
    """

    def _write(text: str) -> None:
        stream.write(text + "\n")

    _write.__name__ = "stream_sink"
    return _write


def console_sink_map() -> dict[LogLevel, SinkFunction]:
    """Per-level console routing: problems to stderr, the rest to stdout.

    FATAL, ERROR and WARN go to stderr. OFF is a no-op. Every other level,
    sentinels included, goes to stdout.
    """
    routing: dict[LogLevel, SinkFunction] = {level: console_sink for level in ALL_LEVELS}
    routing[LogLevel.OFF] = null_sink
    for level in (LogLevel.FATAL, LogLevel.ERROR, LogLevel.WARN):
        routing[level] = _stderr_sink
    return routing


def validate_sink(sink: Any, *, key: str = "INVALID_LOGGER") -> SinkFunction:
    """Ensure a sink is callable.

    Args:
        sink: Candidate sink.
        key: ERROR_MESSAGES[CONFIG] entry used for the message, so callers
            can report which option was wrong (default_logger vs map entry).

    Raises:
        ConfigError: For None, UNSET or non-callable values.
    """
    if sink is None or not callable(sink):
        base = ERROR_MESSAGES[CONFIG][key]
        raise ConfigError(
            f"{base} (got {value_to_string(sink)})",
            {"value": value_to_string(sink)},
        )
    return sink


class _Unbound:
    """Slot marker: no per-level override, use the default sink."""

    def __repr__(self) -> str:
        return "<unbound>"


_UNBOUND = _Unbound()


class SinkMap:
    """Fixed table of sinks keyed by every valid LogLevel.

    Thread Safety:
        Not thread-safe. Mutated only through configuration calls, which
        are expected to happen at startup or between test cases.
    """

    def __init__(self, default: SinkFunction = null_sink) -> None:
        """Create a map with every level unbound and the given default.

        Args:
            default: Fallback sink for unbound levels.

        Raises:
            ConfigError: If default is not callable.
        """
        self._default: SinkFunction = validate_sink(default, key="INVALID_DEFAULT_LOGGER")
        self._slots: dict[LogLevel, SinkFunction | _Unbound] = {
            level: _UNBOUND for level in ALL_LEVELS
        }

    @property
    def default(self) -> SinkFunction:
        """Current fallback sink."""
        return self._default

    def reset(self, default: SinkFunction) -> None:
        """Re-home every level to a new default sink.

        All per-level overrides are dropped. OFF is bound to null_sink so
        that the resolved map never emits anything at OFF.
        """
        self._default = validate_sink(default, key="INVALID_DEFAULT_LOGGER")
        for level in ALL_LEVELS:
            self._slots[level] = _UNBOUND
        self._slots[LogLevel.OFF] = null_sink

    def bind(self, level: Any, sink: SinkFunction) -> None:
        """Bind a sink to one level.

        Raises:
            ValidationError: If level is invalid.
            ConfigError: If sink is not callable.
        """
        member = validate_log_level(level)
        self._slots[member] = validate_sink(sink)

    def unbind(self, level: Any) -> None:
        """Remove a level's override so it resolves to the default."""
        member = validate_log_level(level)
        self._slots[member] = _UNBOUND

    def update(self, mapping: Mapping[Any, SinkFunction]) -> None:
        """Bind several levels at once; levels not named are untouched.

        All entries are validated before any is applied, so a bad entry
        leaves the map unchanged.
        """
        validated = {
            validate_log_level(level): validate_sink(sink)
            for level, sink in mapping.items()
        }
        self._slots.update(validated)

    def is_bound(self, level: Any) -> bool:
        """True if the level has an explicit override."""
        return self._slots[validate_log_level(level)] is not _UNBOUND

    def resolve(self, level: Any) -> SinkFunction:
        """Return the sink for a level: override, else default.

        Raises:
            ValidationError: If level is invalid.
        """
        slot = self._slots[validate_log_level(level)]
        if isinstance(slot, _Unbound):
            return self._default
        return slot

    def as_dict(self) -> dict[LogLevel, SinkFunction]:
        """Resolved copy of the table; mutating it does not affect the map."""
        return {level: self.resolve(level) for level in ALL_LEVELS}

    def __repr__(self) -> str:
        bound = [level.name for level in ALL_LEVELS if self._slots[level] is not _UNBOUND]
        return f"SinkMap(default={getattr(self._default, '__name__', self._default)!r}, bound={bound})"
