"""Tests for levelog.config.LoggerConfig."""

import logging
from unittest.mock import MagicMock

import pytest

from levelog.config import ENV_FORMAT, ENV_LEVEL, ENV_VERBOSE, LoggerConfig
from levelog.errors import ConfigError, ValidationError
from levelog.formatters import json_formatter, message_only_formatter, null_formatter, plain_formatter
from levelog.levels import ALL_LEVELS, UNSET, LogLevel
from levelog.sinks import console_sink, console_sink_map, null_sink


class TestDefaults:
    """Test the silent initial configuration."""

    def test_initial_state(self):
        """Verifies a new configuration produces no output.

        Arrangement:
        1. Freshly constructed LoggerConfig.

        Action:
        Reads every accessor.

        Assertion Strategy:
        Validates silence by confirming:
        - Threshold is OFF and verbose is off.
        - Formatter is null_formatter.
        - Every level resolves to null_sink.

        Testing Principle:
        Validates that an unconfigured logger never writes anywhere.
        """
        config = LoggerConfig()
        assert config.log_level is LogLevel.OFF
        assert config.verbose is False
        assert config.formatter is null_formatter
        assert config.default_sink is null_sink
        assert all(config.get_sink(level) is null_sink for level in ALL_LEVELS)


class TestApply:
    """Test LoggerConfig.apply merge rules."""

    def test_empty_apply_changes_nothing(self, sink):
        config = LoggerConfig()
        config.apply(default_logger=sink, formatter=plain_formatter, log_level=LogLevel.INFO)
        before = (config.log_level, config.verbose, config.formatter, config.get_sink_map())

        config.apply()

        after = (config.log_level, config.verbose, config.formatter, config.get_sink_map())
        assert before == after

    def test_default_logger_rehomes_every_level(self, sink):
        config = LoggerConfig()
        config.apply(logger_map={LogLevel.ERROR: MagicMock(name="error_sink")})

        config.apply(default_logger=sink)

        assert config.get_sink(LogLevel.ERROR) is sink
        assert config.get_sink(LogLevel.FORCE_OUTPUT) is sink
        assert config.get_sink(LogLevel.OFF) is null_sink

    def test_logger_map_applied_after_default_logger(self, sink):
        """Verifies overrides given alongside default_logger survive.

        Arrangement:
        1. default_logger and logger_map passed in the same call.

        Action:
        Applies both at once.

        Assertion Strategy:
        Validates ordering by confirming:
        - The mapped level keeps its override.
        - Other levels use the new default.

        Testing Principle:
        Validates the documented application order.
        """
        error_sink = MagicMock(name="error_sink")
        config = LoggerConfig()

        config.apply(default_logger=sink, logger_map={LogLevel.ERROR: error_sink})

        assert config.get_sink(LogLevel.ERROR) is error_sink
        assert config.get_sink(LogLevel.WARN) is sink

    def test_console_default_routes_problems_to_stderr(self):
        """Verifies console_sink as default brings in the console routing.

        Arrangement:
        1. Fresh LoggerConfig.

        Action:
        Applies default_logger=console_sink with no logger_map.

        Assertion Strategy:
        Validates routing by confirming:
        - The resolved map equals console_sink_map().
        - INFO stays on console_sink while ERROR does not.

        Testing Principle:
        Validates that console output separates problems from normal
        output without extra configuration.
        """
        config = LoggerConfig()

        config.apply(default_logger=console_sink)

        assert config.get_sink_map() == console_sink_map()
        assert config.get_sink(LogLevel.INFO) is console_sink
        assert config.get_sink(LogLevel.ERROR) is not console_sink

    def test_console_default_with_explicit_map_uses_map_only(self, sink):
        config = LoggerConfig()
        config.apply(default_logger=console_sink, logger_map={LogLevel.ERROR: sink})
        assert config.get_sink(LogLevel.ERROR) is sink
        assert config.get_sink(LogLevel.WARN) is console_sink

    def test_logger_map_leaves_other_levels(self, sink):
        error_sink = MagicMock(name="error_sink")
        config = LoggerConfig()
        config.apply(default_logger=sink)

        config.apply(logger_map={LogLevel.ERROR: error_sink})

        assert config.get_sink(LogLevel.ERROR) is error_sink
        assert config.get_sink(LogLevel.INFO) is sink

    def test_sets_formatter_level_and_verbose(self):
        config = LoggerConfig()
        config.apply(formatter=json_formatter, log_level=5, verbose=True)
        assert config.formatter is json_formatter
        assert config.log_level is LogLevel.DEBUG
        assert config.verbose is True

    def test_log_level_off_is_applied(self):
        config = LoggerConfig()
        config.apply(log_level=LogLevel.TRACE)
        config.apply(log_level=0)
        assert config.log_level is LogLevel.OFF

    @pytest.mark.parametrize("key", ["default_logger", "formatter"])
    @pytest.mark.parametrize("value", [None, UNSET, "console", 1])
    def test_missing_or_non_callable_raises(self, key, value):
        with pytest.raises(ConfigError, match="must be a callable"):
            LoggerConfig().apply(**{key: value})

    def test_logger_map_entry_must_be_callable(self):
        with pytest.raises(ConfigError, match="logger function must be a callable"):
            LoggerConfig().apply(logger_map={LogLevel.INFO: None})

    def test_logger_map_must_be_mapping(self):
        with pytest.raises(ConfigError, match="logger_map must be a mapping"):
            LoggerConfig().apply(logger_map=[null_sink])

    def test_unknown_option_raises(self):
        with pytest.raises(ConfigError, match="Unknown logger option: colour"):
            LoggerConfig().apply(colour=True)

    @pytest.mark.parametrize("value", [7, -1, LogLevel.VERBOSE, LogLevel.FORCE_OUTPUT, "info", None])
    def test_threshold_must_be_standard(self, value):
        with pytest.raises(ValidationError):
            LoggerConfig().apply(log_level=value)

    def test_rejected_apply_changes_nothing(self, sink):
        """Verifies a call with one bad option applies none of the others.

        Arrangement:
        1. Configured LoggerConfig.
        2. Options with valid default_logger and formatter but a bad level.

        Action:
        Calls apply() and catches the ValidationError.

        Assertion Strategy:
        Validates atomicity by confirming:
        - Sinks and formatter are unchanged.

        Testing Principle:
        Validates all-or-nothing configuration.
        """
        config = LoggerConfig()
        config.apply(default_logger=sink, formatter=message_only_formatter, log_level=3)

        with pytest.raises(ValidationError):
            config.apply(default_logger=null_sink, formatter=plain_formatter, log_level=9)

        assert config.default_sink is sink
        assert config.formatter is message_only_formatter
        assert config.log_level is LogLevel.WARN

    def test_apply_logs_changed_keys(self, caplog):
        caplog.set_level(logging.DEBUG, logger="levelog.config")
        LoggerConfig().apply(log_level=4, verbose=False)
        assert "log_level, verbose" in caplog.text


class TestSetters:
    """Test single-setting mutators."""

    def test_bind_sink_and_unbind(self, sink):
        config = LoggerConfig()
        config.apply(default_logger=sink)
        other = MagicMock(name="other")

        config.bind_sink(LogLevel.DEBUG, other)
        assert config.get_sink(LogLevel.DEBUG) is other

        config.bind_sink(LogLevel.DEBUG, None)
        assert config.get_sink(LogLevel.DEBUG) is sink

    def test_set_log_level_rejects_sentinel(self):
        with pytest.raises(ValidationError):
            LoggerConfig().set_log_level(LogLevel.LOG)

    def test_set_formatter_rejects_none(self):
        with pytest.raises(ConfigError):
            LoggerConfig().set_formatter(None)

    def test_get_sink_map_is_a_copy(self, sink):
        config = LoggerConfig()
        config.apply(default_logger=sink)
        snapshot = config.get_sink_map()
        snapshot[LogLevel.INFO] = null_sink
        assert config.get_sink(LogLevel.INFO) is sink


class TestFromEnv:
    """Test reading options from environment variables."""

    def test_empty_environment(self):
        assert LoggerConfig.from_env({}) == {}

    @pytest.mark.parametrize(
        "raw,expected",
        [("warn", LogLevel.WARN), (" DEBUG ", LogLevel.DEBUG), ("2", LogLevel.ERROR), ("0", LogLevel.OFF)],
    )
    def test_level(self, raw, expected):
        assert LoggerConfig.from_env({ENV_LEVEL: raw}) == {"log_level": expected}

    @pytest.mark.parametrize("raw", ["loud", "9", "verbose"])
    def test_bad_level_raises(self, raw):
        with pytest.raises(ValidationError):
            LoggerConfig.from_env({ENV_LEVEL: raw})

    @pytest.mark.parametrize("raw,expected", [("1", True), ("Yes", True), ("off", False), ("", False)])
    def test_verbose(self, raw, expected):
        assert LoggerConfig.from_env({ENV_VERBOSE: raw}) == {"verbose": expected}

    def test_bad_verbose_raises(self):
        with pytest.raises(ConfigError, match=ENV_VERBOSE):
            LoggerConfig.from_env({ENV_VERBOSE: "maybe"})

    def test_format(self):
        assert LoggerConfig.from_env({ENV_FORMAT: "json"}) == {"formatter": json_formatter}

    def test_reads_os_environ_by_default(self, monkeypatch):
        monkeypatch.setenv(ENV_LEVEL, "info")
        monkeypatch.delenv(ENV_VERBOSE, raising=False)
        monkeypatch.delenv(ENV_FORMAT, raising=False)
        assert LoggerConfig.from_env() == {"log_level": LogLevel.INFO}

    def test_result_feeds_apply(self):
        config = LoggerConfig()
        config.apply(**LoggerConfig.from_env({ENV_LEVEL: "trace", ENV_FORMAT: "plain"}))
        assert config.log_level is LogLevel.TRACE
        assert config.formatter is plain_formatter
