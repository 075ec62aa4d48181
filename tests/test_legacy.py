"""Tests for legacy.py: the (digits, exponent, sign, kind) view of values."""

from __future__ import annotations

import pytest

from errors import ErrorCode, NumericError
from legacy import (NumberKind, Parts, complex_parts, from_complex_parts, from_parts, int_from_parts,
                    int_to_parts, kind_of, to_parts)
from parsing import parse_float
from values import INFINITY, NAN, NEG_INFINITY, Float, Integer
import transcendental


def third() -> Float:
    return Float.of(1) / Float.of(3)


class TestToParts:

    def test_finite(self) -> None:
        assert to_parts(parse_float("-12.50")) == Parts("125", -1, True, NumberKind.FINITE)
        assert to_parts(parse_float("1200")) == Parts("12", 2, False, NumberKind.FINITE)
        assert to_parts(Float.of(0)) == Parts("0", 0, False, NumberKind.FINITE)

    def test_specials(self) -> None:
        assert to_parts(NAN) == Parts("", 0, False, NumberKind.NAN)
        assert to_parts(NEG_INFINITY) == Parts("", 0, True, NumberKind.NEG_INFINITY)

    def test_recurring_keeps_stored_cycles(self) -> None:
        assert to_parts(third()) == Parts("3333", -4, False, NumberKind.RECURRING)

    def test_irrational(self) -> None:
        assert to_parts(transcendental.constant("pi")).kind is NumberKind.IRRATIONAL

    def test_imaginary(self) -> None:
        z = Float.complex(Float.of(0), Float.of(5))
        assert kind_of(z) is NumberKind.IMAGINARY
        assert to_parts(z) == Parts("5", 0, False, NumberKind.IMAGINARY)

    def test_complex_needs_two_mantissas(self) -> None:
        z = Float.complex(Float.of(3), Float.of(4))
        assert kind_of(z) is NumberKind.COMPLEX
        with pytest.raises(NumericError) as exc:
            to_parts(z)
        assert exc.value.code is ErrorCode.INVALID_FORMAT
        assert complex_parts(z) == (Parts("3", 0, False, NumberKind.FINITE),
                                    Parts("4", 0, False, NumberKind.FINITE))


class TestFromParts:

    @pytest.mark.parametrize("value", [
        parse_float("-12.50"),
        parse_float("1e60"),
        Float.of(0),
        third(),
        transcendental.constant("e"),
        Float.complex(Float.of(0), Float.of(-2)),
    ])
    def test_round_trip(self, value: Float) -> None:
        rebuilt = from_parts(to_parts(value))
        assert rebuilt == value
        assert rebuilt.kind is value.kind

    @pytest.mark.parametrize("imag", [
        Integer(2).sqrt(),
        Float.of(1) / Float.of(3),
        parse_float("-2.5"),
    ])
    def test_imaginary_keeps_coefficient_kind(self, imag: Float) -> None:
        z = Float.complex(Float.of(0), imag)
        parts = to_parts(z)
        assert parts.kind is NumberKind.IMAGINARY
        rebuilt = from_parts(parts)
        assert rebuilt.imag.kind is imag.kind
        assert rebuilt == z
        assert str(rebuilt) == str(z)

    def test_imaginary_root(self) -> None:
        z = Integer(-2).sqrt()
        assert to_parts(z).coefficient is NumberKind.IRRATIONAL
        assert str(from_parts(to_parts(z))) == "1.4142135623730951...i"

    def test_specials(self) -> None:
        assert from_parts(to_parts(INFINITY)) is INFINITY
        assert from_parts(to_parts(NAN)).is_nan

    def test_complex(self) -> None:
        z = Float.complex(Float.of(3), third())
        assert from_complex_parts(*complex_parts(z)) == z

    def test_complex_parts_rejected(self) -> None:
        with pytest.raises(NumericError):
            from_parts(Parts("1", 0, False, NumberKind.COMPLEX))


class TestIntegerParts:

    def test_round_trip(self) -> None:
        assert int_to_parts(Integer(-42)) == ("42", True, NumberKind.FINITE)
        assert int_from_parts("42", True) == -42

    @pytest.mark.parametrize("digits", ["", "4a", "-4"])
    def test_bad_digits(self, digits: str) -> None:
        with pytest.raises(NumericError):
            int_from_parts(digits, False)
