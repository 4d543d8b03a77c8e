"""Tests for precision-preserving float formats.

Validates that:
    - Precision counts digits after the first decimal point
    - Precision is never below MIN_FLOAT_PRECISION
    - Pair formats reuse the first number's precision for both fields
"""

from __future__ import annotations

import pytest

from motion_control.formatting.precision import (
    MIN_FLOAT_PRECISION,
    format_float,
    format_float_pair,
    format_value,
    format_value_pair,
    infer_precision,
)


class TestInferPrecision:
    @pytest.mark.parametrize(
        ("literal", "expected"),
        [
            ("1.2345", 4),
            ("7", 3),
            ("0.12", 3),
            ("", 3),
            ("-0.0000125", 7),
            ("3.", 3),
            ("1.23456e-3", 5),
            ("  10.50000  ", 5),
        ],
    )
    def test_examples(self, literal: str, expected: int) -> None:
        assert infer_precision(literal) == expected

    def test_minimum_is_three(self) -> None:
        assert MIN_FLOAT_PRECISION == 3

    def test_counting_stops_at_first_non_digit(self) -> None:
        assert infer_precision("2.12345mm") == 5

    def test_only_first_point_is_measured(self) -> None:
        assert infer_precision("1.2 3.456789") == 3


class TestFormats:
    def test_format_float(self) -> None:
        assert format_float("FOO", "1.2345") == "FOO = %.4f\n"

    def test_format_float_integer_literal(self) -> None:
        assert format_float("AXES", "3") == "AXES = %.3f\n"

    def test_format_float_pair_floored(self) -> None:
        assert format_float_pair("BAR", "1.23 9.1") == "BAR = %.3f %.3f\n"

    def test_format_float_pair_uses_first_number(self) -> None:
        assert format_float_pair("SCALE", "1.00000 0.5") == "SCALE = %.5f %.5f\n"

    def test_format_value_keeps_literal_precision(self) -> None:
        assert format_value("FERROR", "1.2700", 1.5) == "FERROR = 1.5000\n"

    def test_format_value_pair(self) -> None:
        line = format_value_pair("OUTPUT_SCALE", "4000.0 0.0", 4096.0, 1.25)
        assert line == "OUTPUT_SCALE = 4096.000 1.250\n"
