"""Tests for levelog.levels: registry, validation, labels, stringification."""

import math

import pytest

from levelog.errors import LoggerError, ValidationError
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
    validate_standard_log_level,
    value_to_string,
)


def named_function():
    pass


class TestLevelRegistry:
    """Test the closed set of level values."""

    def test_standard_levels_are_ordered_zero_to_six(self):
        """Verifies the standard range is OFF=0 through TRACE=6 in order.

        Arrangement:
        1. STANDARD_LEVELS lists the seven standard members.
        2. Larger values mean more verbose output.

        Action:
        Converts the tuple to plain ints.

        Assertion Strategy:
        Validates ordering by confirming:
        - Values are exactly 0..6 ascending.
        - OFF and TRACE sit at the ends.

        Testing Principle:
        Validates the threshold comparison contract, which relies on
        the numeric ordering of standard levels.
        """
        assert [int(level) for level in STANDARD_LEVELS] == list(range(7))
        assert STANDARD_LEVELS[0] is LogLevel.OFF
        assert STANDARD_LEVELS[-1] is LogLevel.TRACE

    def test_sentinels_lie_outside_standard_range(self):
        """Verifies every sentinel value is negative and distinct."""
        values = [int(level) for level in SENTINEL_LEVELS]
        assert all(value < 0 for value in values)
        assert len(set(values)) == len(values)
        assert set(SENTINEL_LEVELS) == {
            LogLevel.VERBOSE,
            LogLevel.LOG,
            LogLevel.FORCE_OUTPUT,
            LogLevel.DEFAULT,
        }


class TestIsValidLogLevel:
    """Test is_valid_log_level and is_standard_log_level."""

    @pytest.mark.parametrize("value", [0, 1, 2, 3, 4, 5, 6])
    def test_standard_values_valid(self, value):
        assert is_valid_log_level(value) is True
        assert is_standard_log_level(value) is True

    @pytest.mark.parametrize("level", list(SENTINEL_LEVELS))
    def test_sentinels_valid_but_not_standard(self, level):
        """Verifies sentinels pass validity but fail the standard check.

        Arrangement:
        1. Sentinels are valid levels with their own dispatch rules.
        2. They must never be used as thresholds.

        Action:
        Checks each sentinel with both predicates.

        Assertion Strategy:
        Validates separation by confirming:
        - is_valid_log_level() is True.
        - is_standard_log_level() is False.

        Testing Principle:
        Validates that the registry distinguishes "exists" from
        "comparable against a threshold".
        """
        assert is_valid_log_level(level) is True
        assert is_valid_log_level(int(level)) is True
        assert is_standard_log_level(level) is False

    @pytest.mark.parametrize(
        "value",
        [-1, 7, 100, -100, 4.5, math.nan, math.inf, -math.inf, "4", None, [], {}, True, False],
        ids=[
            "minus_one", "seven", "hundred", "minus_hundred", "fraction",
            "nan", "inf", "neg_inf", "string", "none", "list", "dict",
            "bool_true", "bool_false",
        ],
    )
    def test_invalid_values(self, value):
        assert is_valid_log_level(value) is False
        assert is_standard_log_level(value) is False

    def test_integral_float_is_valid(self):
        assert is_valid_log_level(4.0) is True
        assert validate_log_level(4.0) is LogLevel.INFO


class TestValidateLogLevel:
    """Test validate_log_level error behavior."""

    def test_returns_member_equal_to_input(self):
        for value in range(7):
            result = validate_log_level(value)
            assert result == value
            assert isinstance(result, LogLevel)

    def test_out_of_range_message_contains_value(self):
        with pytest.raises(ValidationError, match="7"):
            validate_log_level(7)

    def test_fraction_message_contains_value(self):
        with pytest.raises(ValidationError, match=r"4\.5"):
            validate_log_level(4.5)

    def test_unset_message_says_undefined(self):
        with pytest.raises(ValidationError, match="undefined"):
            validate_log_level(UNSET)

    def test_none_message_says_null(self):
        with pytest.raises(ValidationError, match="null"):
            validate_log_level(None)

    def test_string_is_quoted_in_message(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_log_level("INFO")
        assert '"INFO"' in str(exc_info.value)
        assert "expected number" in str(exc_info.value)

    def test_error_is_logger_error_with_category(self):
        with pytest.raises(LoggerError) as exc_info:
            validate_log_level(-1)
        assert exc_info.value.error_type == "VALIDATION"
        assert exc_info.value.context == {"value": "-1"}

    @pytest.mark.parametrize("value", [7, 4.5, None, "x", [1, 2], {"a": 1}, UNSET, math.nan])
    def test_validation_is_deterministic(self, value):
        """Verifies repeated validation of the same bad value gives equal messages.

        Arrangement:
        1. A mix of wrong-type and out-of-range inputs.
        2. validate_log_level() raises on each.

        Action:
        Validates each value twice, capturing both messages.

        Assertion Strategy:
        Validates determinism by confirming:
        - Both str(error) values are identical.

        Testing Principle:
        Validates that error text depends only on the input, so tests
        and log searches can match on it reliably.
        """
        messages = []
        for _ in range(2):
            with pytest.raises(ValidationError) as exc_info:
                validate_log_level(value)
            messages.append(str(exc_info.value))
        assert messages[0] == messages[1]

    @pytest.mark.parametrize(
        "value", [0, 3, 6, -11, -12, -98, -99, -1, 7, 4.5, None, "3", UNSET]
    )
    def test_is_valid_agrees_with_validate(self, value):
        try:
            validate_log_level(value)
            raised = False
        except ValidationError:
            raised = True
        assert is_valid_log_level(value) is (not raised)

    def test_standard_validation_rejects_sentinels(self):
        assert validate_standard_log_level(3) is LogLevel.WARN
        with pytest.raises(ValidationError, match="standard level"):
            validate_standard_log_level(LogLevel.VERBOSE)


class TestValueToString:
    """Test canonical stringification used in error messages."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, "null"),
            (UNSET, "undefined"),
            ("abc", '"abc"'),
            ([1, 2, 3], "[1,2,3]"),
            ((), "[]"),
            ({"a": 1}, "object"),
            (object(), "object"),
            (named_function, "function named_function"),
            (lambda: None, "function"),
            (42, "42"),
            (4.5, "4.5"),
            (True, "True"),
        ],
        ids=[
            "none", "unset", "string", "list", "empty_tuple", "dict", "object",
            "named_function", "lambda", "int", "float", "bool",
        ],
    )
    def test_rendering(self, value, expected):
        assert value_to_string(value) == expected


class TestLabels:
    """Test label_for_level and level_from_label."""

    @pytest.mark.parametrize("level", list(STANDARD_LEVELS))
    def test_label_round_trip(self, level):
        assert level_from_label(label_for_level(level)) == level

    def test_labels_are_uppercase_names(self):
        assert label_for_level(LogLevel.INFO) == "INFO"
        assert label_for_level(2) == "ERROR"
        assert label_for_level(LogLevel.VERBOSE) == "VERBOSE"

    @pytest.mark.parametrize("level", [LogLevel.LOG, LogLevel.DEFAULT, LogLevel.FORCE_OUTPUT])
    def test_unlabeled_sentinels(self, level):
        assert label_for_level(level) == ""

    def test_invalid_level_has_empty_label(self):
        assert label_for_level(99) == ""
        assert label_for_level("INFO") == ""

    @pytest.mark.parametrize("label", ["info", "INFO", " Info ", "iNfO"])
    def test_lookup_is_case_insensitive(self, label):
        assert level_from_label(label) is LogLevel.INFO

    def test_sentinel_labels_resolve(self):
        assert level_from_label("verbose") is LogLevel.VERBOSE
        assert level_from_label("force_output") is LogLevel.FORCE_OUTPUT

    @pytest.mark.parametrize("label", ["LOUD", "", "   ", None, 4, ["INFO"]])
    def test_unknown_labels_return_none(self, label):
        assert level_from_label(label) is None
