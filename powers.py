from __future__ import annotations
from decimal import Context, Decimal
from math import gcd, isfinite
from typing import Optional, Tuple
import logging

from arithmetic import (IRRATIONAL_PRECISION, Q, ROUNDING, decimal_from_scaled, digits_of, dpow,
                        pure_denominator, round_decimal, truncate_decimal)
from errors import ErrorCode, NumericError

logger = logging.getLogger(__name__)

# Exponents are approximated by fractions with at most this denominator ...
MAX_RATIONAL_DENOMINATOR = 200
# ... and a numerator small enough that base^p stays tractable.
MAX_RATIONAL_NUMERATOR = 10_000
CF_MAX_TERMS = 64
CF_TOLERANCE = 1e-15
# Newton runs for at most precision + this many iterations.
NEWTON_EXTRA_ITERATIONS = 20
# Digits carried beyond the target precision while iterating.
GUARD_DIGITS = 10


def rational_approximation(x: float,
                           max_denominator: int = MAX_RATIONAL_DENOMINATOR,
                           max_terms: int = CF_MAX_TERMS,
                           tolerance: float = CF_TOLERANCE) -> Optional[Tuple[int, int]]:
    """
    Continued-fraction convergent p/q of x with q <= max_denominator.

    Walks the expansion x = a0 + 1/(a1 + 1/(a2 + ...)):
      h_n = a_n h_{n-1} + h_{n-2},  k_n = a_n k_{n-1} + k_{n-2}
    and returns the first convergent within `tolerance` of x, or None if the
    denominator bound or term budget runs out first.
    """
    if not isfinite(x):
        return None
    h_prev, h = 1, int(x // 1)
    k_prev, k = 0, 1
    frac = x - h
    for _ in range(max_terms):
        if abs(x - h / k) <= tolerance * max(1.0, abs(x)):
            return h, k
        if frac == 0:
            break
        inv = 1.0 / frac
        a = int(inv // 1)
        frac = inv - a
        h_prev, h = h, a * h + h_prev
        k_prev, k = k, a * k + k_prev
        if k > max_denominator:
            break
    return None


def _initial_guess(a: Decimal, n: int) -> Decimal:
    approx = float(a)
    if 0.0 < approx < float("inf"):
        guess = approx ** (1.0 / n)
        if 0.0 < guess < float("inf"):
            return Decimal(repr(guess))
    # out of float range: 10^(adjusted/n) is within a factor of 10
    return Decimal((0, (1,), a.adjusted() // n))


def nth_root(a: Decimal, n: int, precision: int = IRRATIONAL_PRECISION,
             max_iterations: Optional[int] = None) -> Tuple[Decimal, bool]:
    """
    Newton's method for the n-th root of a:
      x <- ((n-1) x + a / x^(n-1)) / n
    starting from the float estimate, for at most `max_iterations` iterations
    (default precision + NEWTON_EXTRA_ITERATIONS), stopping once successive
    iterates agree to 10^-precision. An iterate that has not converged is
    truncated to `precision` digits and reported inexact unless it rounds to
    the root.

    Returns (root, exact) where exact means root**n == a with no rounding.
    Raises:
        NumericError(INVALID_FORMAT): n < 1
        NumericError(NEGATIVE_SQRT): even root of a negative number
    """
    if n < 1:
        raise NumericError(ErrorCode.INVALID_FORMAT, f"root index {n} must be positive")
    if a.is_zero():
        return Decimal(0), True
    if a.is_signed():
        if n % 2 == 0:
            raise NumericError(ErrorCode.NEGATIVE_SQRT, f"even root ({n}) of a negative number")
        root, exact = nth_root(a.copy_negate(), n, precision, max_iterations)
        return root.copy_negate(), exact
    if n == 1:
        return a, True

    ctx = Context(prec=max(a.adjusted() // n, 0) + precision + GUARD_DIGITS,
                  Emax=ROUNDING.Emax, Emin=ROUNDING.Emin)
    x = _initial_guess(a, n)
    tolerance = Decimal((0, (1,), -precision))
    if max_iterations is None:
        max_iterations = precision + NEWTON_EXTRA_ITERATIONS
    for _ in range(max_iterations):
        nxt = ctx.divide(ctx.add(ctx.multiply(n - 1, x), ctx.divide(a, ctx.power(x, n - 1))), n)
        done = ctx.subtract(nxt, x).copy_abs() < tolerance
        x = nxt
        if done:
            break
    else:
        logger.debug("nth_root: %d-th root not converged after %d iterations", n, max_iterations)

    # A clean root shows up as a long run of 0s or 9s; round it off and check.
    candidate = round_decimal(x, max(precision - GUARD_DIGITS, 0)).normalize(ROUNDING)
    if dpow(candidate, n) == a:
        return candidate, True
    return truncate_decimal(x, precision), False


def _root_q(a: Q, q: int, precision: int) -> Tuple[Q, bool]:
    num, den = a.numerator, a.denominator
    places = pure_denominator(den)
    if places >= 0:
        # a terminating decimal is its own radicand
        root, exact = nth_root(decimal_from_scaled(num * (10 ** places // den), -places), q, precision)
        return Q(root), exact
    # (num/den)^(1/q) = (num * den^(q-1))^(1/q) / den
    root, exact = nth_root(Decimal(num * den ** (q - 1)), q, precision + len(digits_of(den)))
    return Q(root) / den, exact


def pow_rational(base: Q, p: int, q: int, precision: int = IRRATIONAL_PRECISION) -> Tuple[Q, bool]:
    """
    base^(p/q) as (value, exact).

    If q=1 this is an integer power by squaring. Otherwise base^|p| is
    computed exactly and its q-th root taken with `nth_root`. Negative p
    inverts the final result. When exact is False the value is the root
    truncated to `precision` digits (before inversion).

    Raises:
        NumericError(DIV_BY_ZERO): q == 0, or a zero base with negative p
        NumericError(NEGATIVE_SQRT): even root of a negative base
    """
    if q == 0:
        raise NumericError(ErrorCode.DIV_BY_ZERO, "exponent denominator is zero")
    if q < 0:
        p, q = -p, -q
    g = gcd(p, q)
    if g > 1:
        p, q = p // g, q // g
    invert = p < 0
    if invert and base == 0:
        raise NumericError(ErrorCode.DIV_BY_ZERO, "zero raised to a negative power")

    powered = base ** abs(p)
    if q == 1:
        value, exact = powered, True
    else:
        value, exact = _root_q(powered, q, precision)
    if invert:
        if value == 0:
            raise NumericError(ErrorCode.DIV_BY_ZERO, "root underflowed to zero")
        value = 1 / value
    return value, exact
