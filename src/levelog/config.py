"""Logger configuration state and merge rules.

LoggerConfig is the mutable state behind a LevelLogger: threshold,
verbose flag, formatter and sink table. It starts fully silent (threshold
OFF, null_formatter, every level on null_sink) and changes only through
apply() and the explicit setters.

Option keys accepted by apply():

    default_logger  sink that every level is re-homed to (console_sink also
                    routes FATAL, ERROR and WARN to stderr unless a
                    logger_map is given)
    formatter       LogMessage -> str
    logger_map      {level: sink} overrides for the named levels only
    log_level       standard threshold OFF..TRACE
    verbose         bool flag gating VERBOSE output

Omitting a key leaves that setting alone; passing a key with None (or
UNSET) is an error rather than "omitted". Calling apply() with no keys
changes nothing, which is what makes create-or-fetch access safe.

Example:
    config = LoggerConfig()
    config.apply(default_logger=console_sink, formatter=plain_formatter,
                 log_level=LogLevel.INFO)
    config.apply(logger_map={LogLevel.ERROR: stream_sink(sys.stderr)})
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from typing import Any

from levelog.errors import CONFIG, ERROR_MESSAGES, ConfigError
from levelog.formatters import (
    FormatFunction,
    formatter_by_name,
    null_formatter,
    validate_formatter,
)
from levelog.levels import (
    LogLevel,
    level_from_label,
    validate_standard_log_level,
    value_to_string,
)
from levelog.sinks import (
    SinkFunction,
    SinkMap,
    console_sink,
    console_sink_map,
    null_sink,
    validate_sink,
)

logger = logging.getLogger(__name__)

OPTION_KEYS: frozenset[str] = frozenset(
    {"default_logger", "formatter", "logger_map", "log_level", "verbose"}
)

# Environment variables read by LoggerConfig.from_env()
ENV_LEVEL = "LEVELOG_LEVEL"
ENV_VERBOSE = "LEVELOG_VERBOSE"
ENV_FORMAT = "LEVELOG_FORMAT"

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off", ""})


class LoggerConfig:
    """Threshold, verbose flag, formatter and sink table for one logger.

    Thread Safety:
        Not thread-safe. Configuration takes effect for every subsequent
        dispatch; nothing in the dispatch path suspends, so there are no
        in-flight calls to update.
    """

    def __init__(self) -> None:
        """Create a silent configuration.

        Defaults: threshold OFF, verbose False, null_formatter, all levels
        resolving to null_sink.
        """
        self._log_level: LogLevel = LogLevel.OFF
        self._verbose: bool = False
        self._formatter: FormatFunction = null_formatter
        self._sinks = SinkMap(null_sink)

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def log_level(self) -> LogLevel:
        """Current threshold."""
        return self._log_level

    @property
    def verbose(self) -> bool:
        """Whether VERBOSE-level calls are emitted."""
        return self._verbose

    @property
    def formatter(self) -> FormatFunction:
        """Current formatter."""
        return self._formatter

    @property
    def default_sink(self) -> SinkFunction:
        """Fallback sink for levels without an override."""
        return self._sinks.default

    @property
    def sinks(self) -> SinkMap:
        """The underlying sink table."""
        return self._sinks

    def get_sink(self, level: Any) -> SinkFunction:
        """Resolve the sink for a level; never returns None.

        Raises:
            ValidationError: If level is invalid.
        """
        return self._sinks.resolve(level)

    def get_sink_map(self) -> dict[LogLevel, SinkFunction]:
        """Resolved copy of the per-level sink table."""
        return self._sinks.as_dict()

    # -------------------------------------------------------------------------
    # Mutators
    # -------------------------------------------------------------------------

    def set_log_level(self, level: Any) -> LogLevel:
        """Set the threshold.

        Raises:
            ValidationError: If level is not a standard level.
        """
        self._log_level = validate_standard_log_level(level)
        return self._log_level

    def set_verbose(self, value: bool) -> bool:
        """Set the verbose flag."""
        self._verbose = bool(value)
        return self._verbose

    def set_formatter(self, formatter: FormatFunction) -> None:
        """Replace the formatter.

        Raises:
            ConfigError: If formatter is not callable.
        """
        self._formatter = validate_formatter(formatter)

    def bind_sink(self, level: Any, sink: SinkFunction | None) -> None:
        """Bind a sink to one level; None restores the default sink."""
        if sink is None:
            self._sinks.unbind(level)
        else:
            self._sinks.bind(level, sink)

    def update_sink_map(self, mapping: Mapping[Any, SinkFunction]) -> None:
        """Override the sinks of the named levels only."""
        self._sinks.update(mapping)

    def apply(self, **options: Any) -> None:
        """Merge configuration options.

        Everything is validated before anything changes, so a rejected
        call leaves the configuration untouched.

        Application order:
        1. default_logger re-homes every level (dropping prior overrides)
        2. formatter
        3. log_level
        4. verbose
        5. logger_map overrides the levels it names. When default_logger is
           console_sink and no logger_map is given, console_sink_map() is
           used so FATAL, ERROR and WARN go to stderr

        Args:
            **options: Any subset of OPTION_KEYS.

        Raises:
            ConfigError: For unknown keys, or when default_logger,
                formatter or a logger_map entry is None/UNSET/not callable.
            ValidationError: For an invalid log_level or logger_map key.

        Example:
            >>> config.apply(default_logger=console_sink)   # problems -> stderr, rest -> stdout
            >>> config.apply(logger_map={LogLevel.ERROR: err_sink})  # only ERROR
            >>> config.apply()  # no-op
        """
        unknown = set(options) - OPTION_KEYS
        if unknown:
            base = ERROR_MESSAGES[CONFIG]["UNKNOWN_OPTION"]
            raise ConfigError(
                f"{base}: {', '.join(sorted(unknown))}", {"keys": sorted(unknown)}
            )
        if not options:
            return

        default_logger = None
        if "default_logger" in options:
            default_logger = validate_sink(
                options["default_logger"], key="INVALID_DEFAULT_LOGGER"
            )
        formatter = None
        if "formatter" in options:
            formatter = validate_formatter(options["formatter"])
        log_level = None
        if "log_level" in options:
            log_level = validate_standard_log_level(options["log_level"])
        logger_map = None
        if "logger_map" in options:
            logger_map = self._validated_map(options["logger_map"])
        elif default_logger is console_sink:
            logger_map = console_sink_map()

        if default_logger is not None:
            self._sinks.reset(default_logger)
        if formatter is not None:
            self._formatter = formatter
        if log_level is not None:
            self._log_level = log_level
        if "verbose" in options:
            self._verbose = bool(options["verbose"])
        if logger_map is not None:
            self._sinks.update(logger_map)

        logger.debug("Logger configuration updated: %s", ", ".join(sorted(options)))

    @staticmethod
    def _validated_map(mapping: Any) -> dict[Any, SinkFunction]:
        if not isinstance(mapping, Mapping):
            base = ERROR_MESSAGES[CONFIG]["INVALID_LOGGER"]
            raise ConfigError(
                f"{base}: logger_map must be a mapping (got {value_to_string(mapping)})"
            )
        probe = SinkMap(null_sink)
        probe.update(mapping)
        return dict(mapping)

    # -------------------------------------------------------------------------
    # Environment
    # -------------------------------------------------------------------------

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
        """Read logger options from environment variables.

        Recognized variables:
        - LEVELOG_LEVEL: level label ('info') or integer ('4')
        - LEVELOG_VERBOSE: 1/true/yes/on or 0/false/no/off
        - LEVELOG_FORMAT: built-in formatter name ('plain', 'json')

        Unset variables are simply absent from the result, so the returned
        dict can be passed straight to apply() without clobbering anything.

        Args:
            environ: Mapping to read from. Defaults to os.environ.

        Returns:
            Options dict suitable for apply(**options).

        Raises:
            ValidationError: If LEVELOG_LEVEL is not a standard level.
            ConfigError: If LEVELOG_VERBOSE or LEVELOG_FORMAT is unrecognized.

        Example:
            >>> LoggerConfig.from_env({"LEVELOG_LEVEL": "warn"})
            {'log_level': <LogLevel.WARN: 3>}
        """
        env = os.environ if environ is None else environ
        options: dict[str, Any] = {}

        raw_level = env.get(ENV_LEVEL)
        if raw_level is not None:
            level: Any = level_from_label(raw_level)
            if level is None:
                try:
                    level = int(raw_level.strip())
                except ValueError:
                    level = raw_level
            options["log_level"] = validate_standard_log_level(level)

        raw_verbose = env.get(ENV_VERBOSE)
        if raw_verbose is not None:
            flag = raw_verbose.strip().lower()
            if flag in _TRUTHY:
                options["verbose"] = True
            elif flag in _FALSY:
                options["verbose"] = False
            else:
                raise ConfigError(
                    f"{ENV_VERBOSE} must be a boolean flag (got {value_to_string(raw_verbose)})"
                )

        raw_format = env.get(ENV_FORMAT)
        if raw_format is not None:
            options["formatter"] = formatter_by_name(raw_format)

        return options
