"""Tests for real Float arithmetic: exact rationals, repeating values, infinities."""

from __future__ import annotations

from decimal import Decimal
from fractions import Fraction

import numpy as np
import pytest

from errors import ErrorCode, NumericError
from parsing import parse_float
from values import FLOAT_ZERO, INFINITY, NAN, NEG_INFINITY, Float, FloatKind
import transcendental


def _code(fn, *args) -> ErrorCode:
    with pytest.raises(NumericError) as exc:
        fn(*args)
    return exc.value.code


def third() -> Float:
    return Float.of(1) / Float.of(3)


# ============================================================================
# CONSTRUCTION
# ============================================================================


class TestConstruction:

    def test_small_specials(self) -> None:
        assert Float.small(float("nan")) is NAN
        assert Float.small(float("-inf")) is NEG_INFINITY

    def test_small_keeps_native(self) -> None:
        x = Float.small(np.float32(1.5))
        assert x.kind is FloatKind.SMALL
        assert isinstance(x.value, np.float32)

    def test_payload_checked(self) -> None:
        with pytest.raises(TypeError):
            Float(FloatKind.BIG, 1.5)
        with pytest.raises(TypeError):
            Float(FloatKind.NAN, Decimal(1))
        with pytest.raises(TypeError):
            Float.complex(Float.of(1), Float.complex(Float.of(1), Float.of(1)))

    def test_of(self) -> None:
        assert Float.of(Fraction(1, 3)).is_recurring
        assert Float.of(Decimal("NaN")).is_nan
        assert Float.of(Decimal("-Infinity")) is NEG_INFINITY
        assert Float.of(7).kind is FloatKind.BIG
        with pytest.raises(TypeError):
            Float.of("7")

    def test_predicates(self) -> None:
        assert parse_float("3.000").is_integer_like()
        assert not third().is_integer_like()
        assert parse_float("-0.5").is_negative
        assert parse_float("1.5").make_irrational().is_irrational
        assert not FLOAT_ZERO
        assert NAN.is_nan and not NAN.is_real


# ============================================================================
# EXACT ARITHMETIC
# ============================================================================


class TestExactArithmetic:

    def test_division_is_exact(self) -> None:
        assert Float.of(7) / Float.of(2) == Fraction(7, 2)
        assert Float.of(137) / (Float.of(7) / Float.of(2)) == Float.of(137) / parse_float("3.5")

    def test_repeating_results(self) -> None:
        assert third().is_recurring
        assert str(third()) == "0.(3)"
        assert str(third() + Float.of(1)) == "1.(3)"
        assert str(Float.of(1) / Float.of(8)) == "0.125"

    def test_repeating_values_recombine_exactly(self) -> None:
        one = third() * Float.of(3)
        assert one == 1
        assert one.kind is FloatKind.BIG
        assert third() + Float.of(1) / Float.of(6) == Fraction(1, 2)

    def test_native_floats_use_shortest_decimal(self) -> None:
        assert Float.small(0.1) + Float.small(0.2) == parse_float("0.3")

    def test_mixed_kinds(self) -> None:
        assert Float.small(0.5) + 1 == Fraction(3, 2)
        assert 1 - parse_float("0.25") == Fraction(3, 4)

    def test_remainder(self) -> None:
        assert parse_float("7.5") % Float.of(2) == Fraction(3, 2)
        assert parse_float("-7.5") % Float.of(2) == Fraction(-3, 2)

    def test_negate_and_abs(self) -> None:
        assert -third() == Fraction(-1, 3)
        assert abs(-third()) == Fraction(1, 3)
        assert (-third()).is_recurring

    def test_division_by_zero(self) -> None:
        assert _code(lambda: Float.of(5) / Float.of(0)) is ErrorCode.DIV_BY_ZERO
        assert _code(lambda: Float.of(5) % Float.of(0)) is ErrorCode.DIV_BY_ZERO
        assert _code(lambda: INFINITY / Float.of(0)) is ErrorCode.DIV_BY_ZERO

    def test_nan_operand(self) -> None:
        assert _code(lambda: NAN + Float.of(1)) is ErrorCode.INVALID_FORMAT
        assert _code(lambda: Float.of(1) * NAN) is ErrorCode.INVALID_FORMAT


class TestApproximations:

    def test_irrational_operand_taints(self) -> None:
        sqrt2 = transcendental.constant("sqrt2")
        assert (third() + sqrt2).is_irrational
        assert (sqrt2 * Float.of(2)).is_irrational

    def test_irrational_cancelling_to_an_integer(self) -> None:
        sqrt2 = transcendental.constant("sqrt2")
        assert (sqrt2 - sqrt2).kind is FloatKind.BIG
        assert (sqrt2 - sqrt2) == 0

    def test_repeating_without_visible_cycle_stays_repeating(self) -> None:
        x = Float.recurring(Decimal("0.1234567891234")) + Float.of(1)
        assert x.is_recurring
        assert x.decimal == Decimal("1.1234567891234")


# ============================================================================
# EXTENDED REALS
# ============================================================================


class TestInfinities:

    def test_addition(self) -> None:
        assert INFINITY + INFINITY is INFINITY
        assert INFINITY + Float.of(-10 ** 30) is INFINITY
        assert Float.of(1) - INFINITY is NEG_INFINITY
        assert _code(lambda: INFINITY + NEG_INFINITY) is ErrorCode.INFINITE_RESULT
        assert _code(lambda: INFINITY - INFINITY) is ErrorCode.INFINITE_RESULT

    def test_multiplication_signs(self) -> None:
        assert INFINITY * INFINITY is INFINITY
        assert INFINITY * NEG_INFINITY is NEG_INFINITY
        assert INFINITY * Float.of(-2) is NEG_INFINITY
        assert NEG_INFINITY * Float.of(-2) is INFINITY

    def test_division(self) -> None:
        assert (INFINITY / INFINITY).is_nan
        zero = INFINITY / NEG_INFINITY
        assert zero.is_zero and zero.is_negative
        assert INFINITY / Float.of(2) is INFINITY
        assert NEG_INFINITY / Float.of(2) is NEG_INFINITY
        assert (Float.of(5) / INFINITY).is_zero

    def test_remainder(self) -> None:
        assert Float.of(5) % INFINITY == 5
        assert (INFINITY % Float.of(3)).is_nan

    def test_negate_and_abs(self) -> None:
        assert -INFINITY is NEG_INFINITY
        assert abs(NEG_INFINITY) is INFINITY
        assert (-NAN).is_nan
