"""Tests for rendering.py: display text, canonical text and scientific notation."""

from __future__ import annotations

from decimal import Decimal
from fractions import Fraction

import pytest
from hypothesis import given
from hypothesis import strategies as st

from parsing import parse_float, parse_float_strict
from rendering import canonical, positional, render
from values import INFINITY, NAN, NEG_INFINITY, Float, Integer
import transcendental


def frac(n: int, d: int) -> Float:
    return Float.of(Fraction(n, d))


class TestRender:

    @pytest.mark.parametrize("x, text", [
        (frac(1, 3), "0.(3)"),
        (frac(-1, 3), "-0.(3)"),
        (frac(1, 6), "0.1(6)"),
        (frac(1, 7), "0.(142857)"),
        (frac(22, 7), "3.(142857)"),
        (frac(1, 12), "0.08(3)"),
        (frac(1, 8), "0.125"),
        (frac(4, 3), "1.(3)"),
    ])
    def test_fractions(self, x: Float, text: str) -> None:
        assert render(x) == text

    def test_integers_and_whole_floats(self) -> None:
        assert render(Integer(-12)) == "-12"
        assert render(Float.of(2)) == "2.0"
        assert render(parse_float("-0.0")) == "0.0"
        assert render(parse_float("2.50")) == "2.5"

    def test_specials(self) -> None:
        assert render(NAN) == "NaN"
        assert render(INFINITY) == "Infinity"
        assert render(NEG_INFINITY) == "-Infinity"

    def test_irrational(self) -> None:
        assert render(Integer(2).sqrt()) == "1.4142135623730951..."

    def test_nines_collapse(self) -> None:
        assert render(Float.recurring(Decimal("0.49999"))) == "0.5"
        assert render(Float.recurring(Decimal("0.9999"))) == "1.0"

    def test_no_visible_cycle(self) -> None:
        assert render(Float.recurring(Decimal("0.1234567891234"))) == "0.1234567891"

    def test_cycle_longer_than_a_quarter_of_the_window(self) -> None:
        text = render(frac(1, 131))
        assert text.startswith("0.(0076335877")
        assert text.endswith("870229)")
        assert len(text) == len("0.()") + 130

    def test_cycle_past_the_scan_window(self) -> None:
        # 1/257 repeats every 256 digits; two copies do not fit in 500
        assert render(frac(1, 257)) == "0.0038910505"

    def test_native_float(self) -> None:
        assert render(Float.small(0.1)) == "0.1"


class TestPositional:

    def test_large_exponent_goes_scientific(self) -> None:
        assert render(parse_float("1e60")) == "1.0e60"
        assert render(parse_float("-1.25e60")) == "-1.25e60"
        assert canonical(parse_float("1e60")) == "1e60"

    def test_small_exponent_goes_scientific(self) -> None:
        assert render(parse_float("1e-60")) == "1.0e-60"
        assert render(parse_float("1.5e-60")) == "1.5e-60"

    def test_threshold(self) -> None:
        assert render(parse_float("1e50")) == "1" + "0" * 50 + ".0"
        assert render(parse_float("1e-50")) == "0." + "0" * 49 + "1"

    def test_plain(self) -> None:
        assert positional(Decimal("123.4500")) == "123.45"
        assert positional(Decimal("0.001")) == "0.001"
        assert positional(Decimal("12"), force_point=False) == "12"


class TestCanonical:

    def test_values(self) -> None:
        assert canonical(Integer(-12)) == "-12"
        assert canonical(parse_float("2.50")) == "2.5"
        assert canonical(Float.of(2)) == "2"
        assert canonical(frac(1, 3)) == "0.(3)"
        assert canonical(NEG_INFINITY) == "-Infinity"

    def test_irrational_marker(self) -> None:
        pi = transcendental.constant("pi")
        text = canonical(pi)
        assert text.endswith("...")
        assert parse_float_strict(text) == pi

    def test_long_cycles_keep_their_notation(self) -> None:
        assert canonical(frac(1, 131)).endswith("870229)")
        text = canonical(frac(1, 257))
        assert text.startswith("0.(00389105")
        assert len(text) == len("0.()") + 256
        assert parse_float_strict(text) == Fraction(1, 257)

    @given(num=st.integers(-10 ** 9, 10 ** 9), den=st.integers(1, 300))
    def test_fractions_round_trip(self, num: int, den: int) -> None:
        x = frac(num, den)
        assert parse_float_strict(canonical(x)) == Fraction(num, den)

    @given(d=st.decimals(allow_nan=False, allow_infinity=False, places=8, min_value=-10 ** 12, max_value=10 ** 12))
    def test_decimals_round_trip(self, d: Decimal) -> None:
        assert parse_float_strict(canonical(Float.big(d))) == Float.big(d)

    @given(n=st.integers())
    def test_integers_round_trip(self, n: int) -> None:
        assert parse_float_strict(canonical(Integer(n))) == n
