from __future__ import annotations
from dataclasses import dataclass
from decimal import (Context, Decimal, DivisionByZero, Inexact, InvalidOperation,
                     MAX_EMAX, MAX_PREC, MIN_EMIN, Overflow, ROUND_DOWN, ROUND_HALF_UP)
from fractions import Fraction
import logging

logger = logging.getLogger(__name__)

Q = Fraction  # rational type alias

# Fractional digits kept for irrational (approximated) results.
IRRATIONAL_PRECISION = 137
# Safety bound on long division before giving up on finding a cycle.
MAX_DIVISION_DIGITS = 10_000
# A repeating result stores its cycle this many times after the prefix.
CYCLE_REPEATS = 4
# Rendering scans at most this many fractional digits for a cycle.
SCAN_LIMIT = 500
# Fixed fractional digits shown when no cycle is found.
FALLBACK_DIGITS = 10
# Positional rendering switches to scientific past this many padding zeros.
SCIENTIFIC_THRESHOLD = 50
# Largest accepted shift distance for Integer << and >> (u32 max).
MAX_SHIFT = 2 ** 32 - 1

# Every Decimal add/sub/mul in the engine runs in this context: unbounded
# precision, and Inexact traps so nothing is rounded silently. Division never
# runs here; it goes through Q or `truncate_q`.
EXACT = Context(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN,
                traps=[InvalidOperation, DivisionByZero, Overflow, Inexact])
# Same range, for quantize and normalize where dropping digits is the point.
ROUNDING = Context(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN,
                   traps=[InvalidOperation, DivisionByZero, Overflow])

ONE = Decimal(1)


def to_q(x: int | float | str | Decimal | Fraction) -> Q:
    """Convert to rational Q safely (floats go through string to avoid binary artifacts)."""
    if isinstance(x, Fraction):
        return x
    if isinstance(x, float):
        return Q(repr(x))
    return Q(x)


def digits_of(n: int) -> str:
    """Decimal digits of |n|; not subject to the interpreter's int/str digit limit."""
    return str(Decimal(abs(n)))


def int_from_digits(s: str) -> int:
    """Inverse of `digits_of` for an unsigned digit string of any length."""
    return int(Decimal(s))


def dadd(a: Decimal, b: Decimal) -> Decimal:
    return EXACT.add(a, b)


def dsub(a: Decimal, b: Decimal) -> Decimal:
    return EXACT.subtract(a, b)


def dmul(a: Decimal, b: Decimal) -> Decimal:
    return EXACT.multiply(a, b)


def dpow(a: Decimal, n: int) -> Decimal:
    """Exact a**n for n >= 0 by squaring."""
    if n < 0:
        raise ValueError("dpow: negative exponent")
    result = ONE
    while n:
        if n & 1:
            result = dmul(result, a)
        n >>= 1
        if n:
            a = dmul(a, a)
    return result


def decimal_from_scaled(n: int, exponent: int) -> Decimal:
    """The exact decimal n * 10**exponent."""
    sign = 1 if n < 0 else 0
    return Decimal((sign, tuple(int(c) for c in digits_of(n)), exponent))


def truncate_q(x: Q, places: int) -> Decimal:
    """
    Truncate a rational towards zero to `places` fractional digits
    (negative `places` truncates to tens, hundreds, ...).
    """
    scaled = abs(x) * Q(10) ** places
    n = scaled.numerator // scaled.denominator
    return decimal_from_scaled(-n if x < 0 else n, -places)


def round_q(x: Q, places: int) -> Decimal:
    """Round a rational half away from zero to `places` fractional digits."""
    scaled = abs(x) * Q(10) ** places + Q(1, 2)
    n = scaled.numerator // scaled.denominator
    return decimal_from_scaled(-n if x < 0 else n, -places)


def truncate_decimal(d: Decimal, places: int) -> Decimal:
    if not d.is_finite() or d.as_tuple().exponent >= -places:
        return d
    return d.quantize(Decimal((0, (1,), -places)), rounding=ROUND_DOWN, context=ROUNDING)


def round_decimal(d: Decimal, places: int) -> Decimal:
    """Round half away from zero to `places` fractional digits."""
    if d.as_tuple().exponent >= -places:
        return d
    return d.quantize(Decimal((0, (1,), -places)), rounding=ROUND_HALF_UP, context=ROUNDING)


def strip(d: Decimal) -> Decimal:
    """Drop trailing fractional zeros without ever rounding."""
    sign, digits, exponent = d.as_tuple()
    if d.is_zero():
        return Decimal((sign, (0,), 0))
    if exponent >= 0:
        return d
    text = "".join(map(str, digits))
    drop = min(len(text) - len(text.rstrip("0")), -exponent)
    if drop == 0:
        return d
    return Decimal((sign, tuple(map(int, text[:-drop])), exponent + drop))


def has_fraction(d: Decimal) -> bool:
    return strip(d).as_tuple().exponent < 0


def fraction_digits(d: Decimal) -> str:
    """Fractional digits of d as stored (trailing zeros kept)."""
    _, digits, exponent = d.as_tuple()
    if exponent >= 0:
        return ""
    text = "".join(map(str, digits)).rjust(-exponent, "0")
    return text[len(text) + exponent:]


def integer_digits(d: Decimal) -> str:
    _, digits, exponent = d.as_tuple()
    text = "".join(map(str, digits))
    if exponent >= 0:
        return (text + "0" * exponent).lstrip("0") or "0"
    return text[:exponent].lstrip("0") or "0"


def decimal_from_float(x) -> Decimal:
    """Shortest round-tripping decimal of a finite native float (Python or numpy)."""
    return Decimal(str(x))


def pure_denominator(d: int) -> int:
    """
    Return k when d == 2^a * 5^b (so 1/d terminates after k = max(a, b) digits),
    else -1.
    """
    twos = fives = 0
    while d % 2 == 0:
        d //= 2
        twos += 1
    while d % 5 == 0:
        d //= 5
        fives += 1
    return max(twos, fives) if d == 1 else -1


@dataclass(frozen=True)
class Expansion:
    negative: bool
    int_part: int
    prefix: str         # non-repeating fractional digits
    cycle: str          # repeating block, "" when the expansion terminates
    complete: bool      # False if the digit budget ran out before a cycle appeared


def long_divide(num: int, den: int, max_digits: int = MAX_DIVISION_DIGITS) -> Expansion:
    """
    Exact decimal expansion of num/den without float rounding.
    - If it terminates, prefix holds all digits and cycle is empty.
    - If it repeats, the repeating block is split off, e.g. 1/6 -> ("1", "6").
    """
    if den == 0:
        raise ZeroDivisionError("long_divide: zero denominator")
    negative = (num < 0) != (den < 0) and num != 0
    n, d = abs(num), abs(den)

    int_part = n // d
    rem = n % d

    # Long division for fractional part with cycle detection
    digits = []
    seen = {}  # remainder -> index in digits
    while rem != 0 and rem not in seen and len(digits) < max_digits:
        seen[rem] = len(digits)
        rem *= 10
        digits.append(str(rem // d))
        rem = rem % d

    if rem == 0:
        return Expansion(negative, int_part, "".join(digits), "", True)
    if rem in seen:
        start = seen[rem]
        return Expansion(negative, int_part, "".join(digits[:start]), "".join(digits[start:]), True)
    logger.debug("long_divide: no cycle within %d digits (denominator of %d digits)",
                 max_digits, len(digits_of(den)))
    return Expansion(negative, int_part, "".join(digits), "", False)


def expansion_to_q(negative: bool, int_part: int, prefix: str, cycle: str) -> Q:
    """
    The rational int_part.prefix(cycle):
      denom = 10^p * (10^r - 1)
      numer = int_part*denom + prefix*(10^r - 1) + cycle
    with p = len(prefix), r = len(cycle). An empty cycle is a terminating value.
    """
    p, r = len(prefix), len(cycle)
    nonrep = int_from_digits(prefix) if prefix else 0
    if r == 0:
        q = Q(int_part * 10 ** p + nonrep, 10 ** p)
    else:
        nines = 10 ** r - 1
        denom = 10 ** p * nines
        q = Q(int_part * denom + nonrep * nines + int_from_digits(cycle), denom)
    return -q if negative else q
