"""
Random Integers and Floats, drawn with a numpy Generator.

Every function takes an optional `rng`; without one a module-level
generator is used. Results go through the ordinary constructors, so they
are indistinguishable from parsed values.
"""
from __future__ import annotations
from decimal import Decimal
from math import ceil, floor
from typing import Optional

import numpy as np

from arithmetic import Q, dadd, decimal_from_float, dmul, dsub, truncate_decimal
from values import Float, Integer
import recurring

PRECISION_MEAN = 12.0
PRECISION_SD = 6.0
MAX_RANDOM_PRECISION = 42
# randfloat keeps twice the machine word size in fractional digits
RANDFLOAT_PRECISION = 2 * np.dtype(np.uintp).itemsize
RECURRING_DENOMINATORS = (3, 6, 7, 9, 11, 12, 13)

_default_rng = np.random.default_rng()


def _rng(rng: Optional[np.random.Generator]) -> np.random.Generator:
    return rng if rng is not None else _default_rng


def _unit(rng: np.random.Generator) -> Decimal:
    return decimal_from_float(rng.random())


def _bound(x) -> Decimal:
    x = Float.of(x)
    if not x.is_real:
        raise ValueError(f"random range bounds must be finite reals, got {x}")
    return x.decimal


def _scale(lo: Decimal, hi: Decimal, frac: Decimal) -> Decimal:
    return dadd(lo, dmul(dsub(hi, lo), frac))


def random_precision(rng: Optional[np.random.Generator] = None) -> int:
    """Digits for `rand`: normal(12, 6), redrawn until it lands in 0..42."""
    rng = _rng(rng)
    while True:
        p = rng.normal(PRECISION_MEAN, PRECISION_SD)
        if 0.0 <= p <= MAX_RANDOM_PRECISION:
            return int(round(p))


def rand(rng: Optional[np.random.Generator] = None) -> Float:
    """A Float in [0, 1) with a random number of fractional digits."""
    rng = _rng(rng)
    frac = _unit(rng)
    return Float.big(truncate_decimal(frac, random_precision(rng)))


def randint(lo, hi, rng: Optional[np.random.Generator] = None) -> Integer:
    """Uniform Integer in [lo, hi], any size."""
    rng = _rng(rng)
    lo, hi = int(lo), int(hi)
    if hi < lo:
        raise ValueError(f"randint: empty range [{lo}, {hi}]")
    span = hi - lo + 1
    bits = span.bit_length()
    nbytes = (bits + 7) // 8
    while True:
        r = int.from_bytes(rng.bytes(nbytes), "little") & ((1 << bits) - 1)
        if r < span:
            return Integer(lo + r)


def randdecimal(lo, hi, precision: int, rng: Optional[np.random.Generator] = None) -> Float:
    """Uniform-ish Float in [lo, hi] cut to `precision` fractional digits."""
    rng = _rng(rng)
    value = _scale(_bound(lo), _bound(hi), _unit(rng))
    return Float.big(truncate_decimal(value, precision))


def randfloat(lo, hi, rng: Optional[np.random.Generator] = None) -> Float:
    return randdecimal(lo, hi, RANDFLOAT_PRECISION, rng)


def randcomplex(lo, hi, rng: Optional[np.random.Generator] = None) -> Float:
    """Complex value with both parts from `randfloat(lo, hi)`."""
    rng = _rng(rng)
    return Float.complex(randfloat(lo, hi, rng), randfloat(lo, hi, rng))


def randreal(lo, hi, rng: Optional[np.random.Generator] = None) -> Float:
    """
    A real in [lo, hi]: 80% exact decimals, 10% repeating values (a nearby
    fraction with a small non-terminating denominator), 10% irrational.
    """
    rng = _rng(rng)
    a, b = _bound(lo), _bound(hi)
    value = _scale(a, b, _unit(rng))
    choice = int(rng.integers(0, 100))
    if choice < 80:
        return Float.big(value)
    if choice < 90:
        d = int(rng.choice(RECURRING_DENOMINATORS))
        n = floor(Q(value) * d)
        if Q(n, d) < Q(a):
            n = ceil(Q(value) * d)
        q = Q(n, d)
        if Q(a) <= q <= Q(b):
            return recurring.materialize(q)
        return Float.big(value)
    return Float.irrational(value)
