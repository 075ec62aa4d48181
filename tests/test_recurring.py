"""Tests for recurring.py: repeating decimals stored as prefix + cycle copies."""

from __future__ import annotations

from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st

from arithmetic import Q, fraction_digits
from recurring import exact_value, find_cycle, materialize, normalize, split
from values import Float, FloatKind

ONE_131ST = ("0076335877862595419847328244274809160305343511450381679389312977099236641221374045801526717557"
             "251908396946564885496183206106870229")


class TestMaterialize:

    def test_terminating_is_exact(self) -> None:
        x = materialize(Q(1, 4))
        assert x.kind is FloatKind.BIG
        assert x.decimal == Decimal("0.25")

    def test_cycle_stored_four_times(self) -> None:
        assert materialize(Q(1, 3)).decimal == Decimal("0.3333")
        assert materialize(Q(-1, 6)).decimal == Decimal("-0.16666")
        assert fraction_digits(materialize(Q(1, 7)).decimal) == "142857" * 4

    def test_integer_part_kept(self) -> None:
        assert materialize(Q(22, 7)).decimal == Decimal("3." + "142857" * 4)

    def test_digit_budget(self) -> None:
        x = materialize(Q(1, 10007), max_digits=50)
        assert x.is_recurring
        assert len(fraction_digits(x.decimal)) == 50


class TestFindCycle:

    @pytest.mark.parametrize("digits, expected", [
        ("3333", ("", "3")),
        ("16666", ("1", "6")),
        ("083333", ("08", "3")),
        ("142857" * 4, ("", "142857")),
        ("142857" * 4 + "1", ("", "142857")),
    ])
    def test_found(self, digits: str, expected: tuple) -> None:
        assert find_cycle(digits) == expected

    @pytest.mark.parametrize("digits", ["12345", "333", "1234567891234", ""])
    def test_not_found(self, digits: str) -> None:
        assert find_cycle(digits) is None

    def test_trailing_run_inside_a_long_cycle(self) -> None:
        # 1/10001 = 0.(00009999): the run of 9s repeats too, but starts later
        assert find_cycle("00009999" * 4) == ("", "00009999")

    def test_scan_limit(self) -> None:
        assert find_cycle("1" * 10 + "3333", limit=None) == ("1" * 10, "3")
        assert find_cycle("1" * 10 + "3333", limit=12) == ("1" * 10, "3")
        assert find_cycle("1" * 10 + "3333", limit=11) is None

    def test_cycle_longer_than_a_quarter_of_the_window(self) -> None:
        # 1/131 has a 130-digit cycle: its four stored copies run past 500 digits
        assert find_cycle(ONE_131ST * 4) == ("", ONE_131ST)
        assert find_cycle("7" + ONE_131ST * 4) == ("7", ONE_131ST)

    def test_prefix_and_two_cycles_must_fit_the_limit(self) -> None:
        assert find_cycle(ONE_131ST * 4, limit=260) == ("", ONE_131ST)
        assert find_cycle(ONE_131ST * 4, limit=259) is None

    def test_unbounded_scan(self) -> None:
        # 1/257 repeats every 256 digits, past the display window
        digits = fraction_digits(materialize(Q(1, 257)).decimal)
        assert find_cycle(digits) is None
        prefix, cycle = find_cycle(digits, limit=None)
        assert (prefix, len(cycle)) == ("", 256)

    @given(num=st.integers(-10 ** 6, 10 ** 6), den=st.integers(1, 300))
    def test_recovers_materialized_fractions(self, num: int, den: int) -> None:
        q = Q(num, den)
        x = materialize(q)
        if x.is_recurring:
            assert exact_value(x.decimal) == q


class TestNormalize:

    def test_split(self) -> None:
        assert split(Decimal("-2.53333")) == (True, "2", "5", "3")
        assert split(Decimal("1.2")) is None

    def test_exact_value(self) -> None:
        assert exact_value(Decimal("0.3333")) == Q(1, 3)
        assert exact_value(Decimal("0.9999")) == 1

    def test_nines_collapse_upward(self) -> None:
        x = normalize(Float.recurring(Decimal("0.9999")))
        assert x.kind is FloatKind.BIG
        assert x == 1
        assert normalize(Float.recurring(Decimal("0.49999"))).decimal == Decimal("0.5")

    def test_leaves_other_kinds(self) -> None:
        x = Float.big(Decimal("0.9999"))
        assert normalize(x) is x

    def test_no_cycle_kept(self) -> None:
        x = Float.recurring(Decimal("0.1234567891234"))
        assert normalize(x) is x

    def test_long_cycle_recovered_from_all_stored_digits(self) -> None:
        x = materialize(Q(3, 257))
        assert split(x.decimal) is None
        assert exact_value(x.decimal) == Q(3, 257)
        assert normalize(x) == Q(3, 257)
