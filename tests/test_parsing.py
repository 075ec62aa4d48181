"""Tests for parsing.py: strict and lenient Integer / Float literals."""

from __future__ import annotations

from decimal import Decimal
from fractions import Fraction

import pytest
from hypothesis import given
from hypothesis import strategies as st

from errors import ErrorCode, NumericError
from parsing import (ParseError, create_complex, parse_float, parse_float_strict, parse_int,
                     parse_int_strict, parse_number)
from values import INFINITY, NEG_INFINITY, Float, FloatKind, Integer


class TestIntegers:

    @pytest.mark.parametrize("text, expected", [
        ("42", 42),
        ("  42 ", 42),
        ("+7", 7),
        ("-15", -15),
        ("0x1F", 31),
        ("0b1010", 10),
        ("0o17", 15),
        ("-0x_ff", -255),
    ])
    def test_valid(self, text: str, expected: int) -> None:
        assert parse_int_strict(text) == expected

    @pytest.mark.parametrize("text", ["", "12.5", "nan", "inf", "-", "12a", "0x", "0b102"])
    def test_strict_rejects(self, text: str) -> None:
        with pytest.raises(ParseError):
            parse_int_strict(text)

    def test_lenient_falls_back_to_zero(self) -> None:
        assert parse_int("12.5") == Integer(0)
        assert parse_int("nan") == Integer(0)
        assert parse_int("17") == 17

    def test_parse_error_is_numeric_and_value_error(self) -> None:
        with pytest.raises(ParseError) as exc:
            parse_int_strict("x")
        assert isinstance(exc.value, ValueError)
        assert isinstance(exc.value, NumericError)
        assert exc.value.code is ErrorCode.INVALID_FORMAT

    def test_very_long_literal(self) -> None:
        assert parse_int("9" * 5000) == Integer(10 ** 5000 - 1)

    @given(n=st.integers())
    def test_decimal_text(self, n: int) -> None:
        assert parse_int_strict(str(n)).value == n


class TestReals:

    def test_plain_and_exponent(self) -> None:
        assert parse_float("1.5e3") == 1500
        assert parse_float("-2.5E-2") == parse_float("-0.025")
        assert parse_float(".5") == Fraction(1, 2)
        assert parse_float("5.") == 5

    def test_exact_decimal(self) -> None:
        x = parse_float("0.1")
        assert x.kind is FloatKind.BIG
        assert x.decimal == Decimal("0.1")

    @pytest.mark.parametrize("text", ["NaN", "nan", "-nan"])
    def test_nan(self, text: str) -> None:
        assert parse_float_strict(text).is_nan

    def test_infinities(self) -> None:
        assert parse_float("inf") is INFINITY
        assert parse_float("Infinity") is INFINITY
        assert parse_float("-inf") is NEG_INFINITY

    def test_repeating(self) -> None:
        assert parse_float("0.(3)") == Fraction(1, 3)
        assert parse_float("0.1(6)") == Fraction(1, 6)
        assert parse_float("-1.(142857)") == Fraction(-8, 7)
        assert parse_float("0.(3)").is_recurring

    def test_repeating_with_exponent(self) -> None:
        assert parse_float("1.(3)e1") == Fraction(40, 3)

    def test_repeating_nines_are_exact(self) -> None:
        one = parse_float("0.(9)")
        assert one == 1
        assert not one.is_recurring
        assert parse_float("0.4(9)") == parse_float("0.5")

    def test_irrational_marker(self) -> None:
        x = parse_float("1.414...")
        assert x.is_irrational
        assert x.decimal == Decimal("1.414")

    @pytest.mark.parametrize("text", ["", "abc", "1.2.3", "1e", "0.()", "0.(3", "1.(3)...", "--1", "1 2"])
    def test_strict_rejects(self, text: str) -> None:
        with pytest.raises(NumericError):
            parse_float_strict(text)

    def test_lenient_falls_back_to_nan(self) -> None:
        assert parse_float("abc").is_nan

    def test_huge_repeating_exponent(self) -> None:
        with pytest.raises(NumericError) as exc:
            parse_float_strict("0.(3)e100000")
        assert exc.value.code is ErrorCode.NUMBER_TOO_LARGE


class TestComplex:

    def test_forms(self) -> None:
        assert parse_float("3+4i") == Float.complex(Float.of(3), Float.of(4))
        assert parse_float("3-4i") == Float.complex(Float.of(3), Float.of(-4))
        assert parse_float("3 + 4i") == Float.complex(Float.of(3), Float.of(4))
        assert parse_float("1e-5+2i") == Float.complex(parse_float("0.00001"), Float.of(2))

    def test_pure_imaginary(self) -> None:
        z = parse_float("2i")
        assert z.is_complex
        assert z.real.is_zero
        assert z.imag == 2
        assert parse_float("-i").imag == -1
        assert parse_float("i").imag == 1

    def test_unit_coefficients(self) -> None:
        assert parse_float("1+i").imag == 1
        assert parse_float("1-i").imag == -1

    def test_infinity_is_not_imaginary(self) -> None:
        assert parse_float("-Infinity") is NEG_INFINITY

    def test_create_complex_stays_complex(self) -> None:
        z = create_complex("7", "0")
        assert z.is_complex
        assert z == 7

    def test_create_complex_is_strict(self) -> None:
        with pytest.raises(ParseError):
            create_complex("7", "x")


class TestParseNumber:

    def test_integer_text(self) -> None:
        assert isinstance(parse_number("42"), Integer)

    def test_float_text(self) -> None:
        assert isinstance(parse_number("4.2"), Float)
        assert parse_number("0x10") == 16
