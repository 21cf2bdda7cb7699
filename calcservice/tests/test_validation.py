"""
Tests for query-string operand validation.
"""

import math

import pytest

from calcservice.evaluator.validation import parse_number, parse_operands
from calcservice.shared.errors import ValidationError


class TestParseNumber:
    @pytest.mark.parametrize("raw,expected", [
        ("2", 2.0), ("-3.5", -3.5), (" 7 ", 7.0), ("1e3", 1000.0), ("0", 0.0),
    ])
    def test_valid(self, raw, expected):
        assert parse_number(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "   ", "abc", "1,5", "NaN", "1_000", "2x"])
    def test_invalid(self, raw):
        assert parse_number(raw) is None

    def test_infinity_parses(self):
        assert parse_number("Infinity") == math.inf
        assert parse_number("-Infinity") == -math.inf
        assert parse_number("+Infinity") == math.inf

    @pytest.mark.parametrize("raw", ["inf", "-inf", "+inf", "infinity", "INFINITY", "-infinity", "INF"])
    def test_float_infinity_aliases_rejected(self, raw):
        assert parse_number(raw) is None

    def test_overflowing_literal_is_infinity(self):
        assert parse_number("1e400") == math.inf


class TestParseOperands:
    def test_both_present(self):
        ops = parse_operands("2", "3")
        assert ops.num1 == 2.0
        assert ops.num2 == 3.0

    def test_num2_absent(self):
        ops = parse_operands("2")
        assert ops.num2 is None

    def test_literal_zero_is_not_absent(self):
        ops = parse_operands("5", "0")
        assert ops.num2 == 0.0
        assert ops.num2 is not None

    @pytest.mark.parametrize("num1", [None, "", "abc", "nan"])
    def test_missing_or_invalid_num1(self, num1):
        with pytest.raises(ValidationError) as exc:
            parse_operands(num1, "3")
        assert exc.value.message == "Invalid input for num1"
        assert exc.value.status_code == 400

    def test_invalid_num2(self):
        with pytest.raises(ValidationError) as exc:
            parse_operands("1", "xyz")
        assert exc.value.message == "Invalid input for num2"

    def test_empty_num2_is_invalid(self):
        with pytest.raises(ValidationError):
            parse_operands("1", "")

    def test_required_num2_missing(self):
        with pytest.raises(ValidationError) as exc:
            parse_operands("1", None, require_num2=True)
        assert exc.value.message == "Invalid input for num2"

    def test_num1_checked_first(self):
        with pytest.raises(ValidationError) as exc:
            parse_operands("bad", "also-bad")
        assert exc.value.message == "Invalid input for num1"
