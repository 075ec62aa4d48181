from __future__ import annotations
from decimal import Decimal
from typing import Optional, Tuple
import logging

from arithmetic import (CYCLE_REPEATS, MAX_DIVISION_DIGITS, SCAN_LIMIT, Q,
                        decimal_from_scaled, digits_of, expansion_to_q, fraction_digits,
                        integer_digits, int_from_digits, long_divide, pure_denominator)
from values import Float

logger = logging.getLogger(__name__)


def materialize(q: Q, max_digits: int = MAX_DIVISION_DIGITS) -> Float:
    """
    Turn an exact rational into a Float.
    - Terminating expansions (denominator 2^a * 5^b) become exact BIG values.
    - Repeating expansions become RECURRING: the non-repeating prefix followed
      by the cycle CYCLE_REPEATS times, so the stored digits always end on a
      whole cycle.
    - If no cycle shows up within `max_digits`, the digits found so far are
      kept, still tagged RECURRING.
    """
    num, den = q.numerator, q.denominator
    places = pure_denominator(den)
    if places >= 0:
        return Float.big(decimal_from_scaled(num * (10 ** places // den), -places))

    e = long_divide(num, den, max_digits)
    frac = e.prefix + e.cycle * CYCLE_REPEATS
    sign = "-" if e.negative else ""
    return Float.recurring(Decimal(f"{sign}{digits_of(e.int_part)}.{frac}"))


def find_cycle(digits: str, limit: Optional[int] = SCAN_LIMIT) -> Optional[Tuple[str, str]]:
    """
    Split a digit string into prefix + cycle repeated. The cycle has to
    appear CYCLE_REPEATS times in full after the prefix, as it does in
    everything `materialize` stores; trailing digits past the last whole
    copy may cut it short.

    For each cycle length the shortest prefix is the position just after the
    last digit that disagrees with the digit one cycle later. The split with
    the shortest prefix wins, then the shortest cycle: a run at the end of a
    long cycle (the 9999 in 0.(00009999)) repeats too, but never reaches
    further back than the true cycle does.

    With a `limit`, the split is only reported when the prefix and two copies
    of the cycle fit in the first `limit` digits. None means no bound.
    """
    n = len(digits)
    best = None
    for length in range(1, n // CYCLE_REPEATS + 1):
        start = 0
        for k in range(n - length - 1, -1, -1):
            if digits[k] != digits[k + length]:
                start = k + 1
                break
        if n - start >= length * CYCLE_REPEATS and (best is None or start < best[0]):
            best = (start, length)
            if start == 0:
                break
    if best is None:
        return None
    start, length = best
    if limit is not None and start + 2 * length > limit:
        return None
    return digits[:start], digits[start:start + length]


def split(d: Decimal, limit: Optional[int] = SCAN_LIMIT) -> Optional[Tuple[bool, str, str, str]]:
    """(negative, integer digits, prefix, cycle) of a stored repeating value, or None."""
    found = find_cycle(fraction_digits(d), limit)
    if found is None:
        return None
    prefix, cycle = found
    return d.is_signed(), integer_digits(d), prefix, cycle


def exact_value(d: Decimal) -> Optional[Q]:
    """
    The rational a stored repeating value stands for, e.g. 0.3333 -> 1/3 and
    0.9999 -> 1. Scans every stored digit. None when they show no cycle.
    """
    found = split(d, limit=None)
    if found is None:
        return None
    negative, int_part, prefix, cycle = found
    return expansion_to_q(negative, int_from_digits(int_part), prefix, cycle)


def normalize(x: Float) -> Float:
    """
    Re-materialize a repeating value from its recovered rational, so an
    all-9s cycle collapses upward (0.(9) -> 1, 0.4(9) -> 0.5).
    """
    if not x.is_recurring:
        return x
    q = exact_value(x.decimal)
    if q is None:
        logger.debug("normalize: no cycle found in %d fractional digits", len(fraction_digits(x.decimal)))
        return x
    return materialize(q)
