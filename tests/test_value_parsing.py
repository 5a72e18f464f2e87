"""Tests for cell value parsing."""

import math

import pytest

from csv_visualizer.value_parsing import (
    coerce_cell, format_cell, is_missing, numeric_values, parse_numeric,
)


class TestParseNumeric:
    @pytest.mark.parametrize("raw, expected", [
        ("3.14", 3.14),
        (" 42 ", 42.0),
        ("-7", -7.0),
        ("1e3", 1000.0),
        (".5", 0.5),
        ("$1,234.50", 1234.5),
        ("€5", 5.0),
        ("1 000", 1000.0),
        (7, 7.0),
        (2.5, 2.5),
    ])
    def test_numbers(self, raw, expected):
        assert parse_numeric(raw) == pytest.approx(expected)

    @pytest.mark.parametrize("raw", [
        None, "", "   ", "abc", "true", "No", True, False,
        "nan", "inf", "1_000", "0x1f", "12abc", float("nan"), float("inf"),
    ])
    def test_not_numbers(self, raw):
        assert parse_numeric(raw) is None

    def test_zero_is_a_value(self):
        assert parse_numeric("0") == 0.0
        assert parse_numeric(0) == 0.0


class TestMissing:
    @pytest.mark.parametrize("raw", [None, "", float("nan")])
    def test_missing(self, raw):
        assert is_missing(raw)

    @pytest.mark.parametrize("raw", [0, "0", " ", "x", 0.0])
    def test_present(self, raw):
        assert not is_missing(raw)


class TestNumericValues:
    def test_filters_and_keeps_order(self):
        assert numeric_values([3, "2", "", None, "x", "1.5"]) == [3.0, 2.0, 1.5]

    def test_empty(self):
        assert numeric_values([]) == []


class TestCoerceCell:
    def test_int(self):
        value = coerce_cell("42")
        assert value == 42 and isinstance(value, int)

    def test_float(self):
        assert coerce_cell(" 3.5 ") == 3.5

    def test_scientific(self):
        assert coerce_cell("1e3") == 1000.0

    def test_blank(self):
        assert coerce_cell("   ") is None

    def test_text_kept(self):
        assert coerce_cell("$5") == "$5"
        assert coerce_cell("nan") == "nan"
        assert coerce_cell("North") == "North"


class TestFormatCell:
    @pytest.mark.parametrize("value, text", [
        (None, ""),
        (3.0, "3.0"),
        (0.1234567, "0.123457"),
        (5, "5"),
        ("x", "x"),
    ])
    def test_format(self, value, text):
        assert format_cell(value) == text

    def test_large_float(self):
        assert format_cell(1e20) == "1e+20"
        assert not math.isnan(float(format_cell(2.5)))


class TestSeparators:
    @pytest.mark.parametrize("raw, expected", [
        ("1,234", 1234.0),
        ("1,234,567.5", 1234567.5),
        ("-$5", -5.0),
        ("1 000", 1000.0),
        ("12 345,5", None),
    ])
    def test_point_decimal(self, raw, expected):
        assert parse_numeric(raw) == (
            pytest.approx(expected) if expected is not None else None
        )

    @pytest.mark.parametrize("raw", ["1,5", "12,34", "1,2345", "1 2", "1,,234"])
    def test_broken_grouping_rejected(self, raw):
        assert parse_numeric(raw) is None

    @pytest.mark.parametrize("raw, expected", [
        ("1,5", 1.5),
        ("-0,25", -0.25),
        ("1.234,5", 1234.5),
        ("1 234,5", 1234.5),
        ("1.234", 1.234),
        ("2,5e3", 2500.0),
    ])
    def test_comma_decimal(self, raw, expected):
        assert parse_numeric(raw, decimal=",") == pytest.approx(expected)

    def test_coerce_comma_decimal(self):
        assert coerce_cell("1,5", ",") == 1.5
        assert coerce_cell("7", ",") == 7

    def test_coerce_keeps_comma_text_by_default(self):
        assert coerce_cell("1,5") == "1,5"
        assert coerce_cell("1,234") == "1,234"
