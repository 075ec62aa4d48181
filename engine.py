"""
Public operations on Integer and Float values.

Every operation accepts Integers, Floats and plain Python/numpy numbers.
Two Integers combine as unbounded integers and give an Integer; anything
else is promoted to Float. A Float operation first rules out NaN, then sends
complex operands to complex_algebra and real ones to real_ops or
transcendental.

Failures raise NumericError; wrap a call in errors.checked() to get the
error code back as a value instead.
"""
from __future__ import annotations
from decimal import Decimal
from fractions import Fraction
from math import ceil as _ceil, floor as _floor, isqrt
from typing import Callable
import logging

import numpy as np

from arithmetic import (IRRATIONAL_PRECISION, MAX_SHIFT, Q, decimal_from_float, dpow, round_decimal, round_q,
                        strip, to_q, truncate_decimal, truncate_q)
from errors import ErrorCode, NumericError
from formats import get_float_format
from powers import MAX_RATIONAL_DENOMINATOR, MAX_RATIONAL_NUMERATOR, pow_rational, rational_approximation
from values import FLOAT_ONE, FLOAT_ZERO, NAN, Float, FloatKind, Integer
import complex_algebra
import real_ops
import recurring
import transcendental

logger = logging.getLogger(__name__)

# Exact powers whose result would need more bits than this are done in floating point.
MAX_POWER_BITS = 1 << 24

_NATIVE = (int, float, Decimal, Fraction, np.integer, np.floating)


def is_number(x) -> bool:
    return isinstance(x, (Integer, Float) + _NATIVE)


def _coerce(x):
    if isinstance(x, (Integer, Float)):
        return x
    if isinstance(x, (int, np.integer)):
        return Integer(int(x))
    if isinstance(x, _NATIVE):
        return Float.of(x)
    raise TypeError(f"unsupported operand type {type(x).__name__}")


def _check_nan(*values: Float):
    for v in values:
        if v.is_nan:
            raise NumericError(ErrorCode.INVALID_FORMAT, "NaN operand")


def _binary(a, b, int_op: Callable[[int, int], Integer],
            real_op: Callable[[Float, Float], Float],
            complex_op: Callable[[Float, Float], Float]):
    a, b = _coerce(a), _coerce(b)
    if isinstance(a, Integer) and isinstance(b, Integer):
        return int_op(a.value, b.value)
    a, b = Float.of(a), Float.of(b)
    _check_nan(a, b)
    if a.is_complex or b.is_complex:
        return complex_op(a, b)
    return real_op(a, b)


def _unary(x, real_op: Callable[[Float], Float], complex_op: Callable[[Float], Float]) -> Float:
    x = Float.of(_coerce(x))
    _check_nan(x)
    if x.is_complex:
        return complex_op(x)
    return real_op(x)


# -- integer kernels ---------------------------------------------------------

def _int_div(x: int, y: int) -> Integer:
    """Quotient rounded half away from zero: 7/2 = 4, -7/2 = -4, 5/3 = 2."""
    if y == 0:
        raise NumericError(ErrorCode.DIV_BY_ZERO)
    q, r = divmod(abs(x), abs(y))
    if 2 * r >= abs(y):
        q += 1
    return Integer(-q if (x < 0) != (y < 0) else q)


def _int_mod(x: int, y: int) -> Integer:
    """Truncated remainder; the sign follows the dividend."""
    if y == 0:
        raise NumericError(ErrorCode.DIV_BY_ZERO)
    r = abs(x) % abs(y)
    return Integer(-r if x < 0 else r)


def _int_pow(x: int, y: int) -> Integer:
    if y < 0:
        raise NumericError(ErrorCode.INVALID_FORMAT, "negative integer exponent")
    if abs(x) > 1 and y * abs(x).bit_length() > MAX_POWER_BITS:
        raise NumericError(ErrorCode.NUMBER_TOO_LARGE, f"exponent {y} is too large")
    return Integer(x ** y)


# -- binary operations -------------------------------------------------------

def add(a, b):
    return _binary(a, b, lambda x, y: Integer(x + y), real_ops.add, complex_algebra.add)


def sub(a, b):
    return _binary(a, b, lambda x, y: Integer(x - y), real_ops.sub, complex_algebra.sub)


def mul(a, b):
    return _binary(a, b, lambda x, y: Integer(x * y), real_ops.mul, complex_algebra.mul)


def div(a, b):
    return _binary(a, b, _int_div, real_ops.div, complex_algebra.div)


def _complex_mod(a: Float, b: Float) -> Float:
    raise NumericError(ErrorCode.INVALID_FORMAT, "modulo of a complex number")


def mod(a, b):
    return _binary(a, b, _int_mod, real_ops.mod, _complex_mod)


def power(a, b):
    """
    a ** b.

    Integer ** Integer needs a non-negative exponent. Otherwise, in order:
    a zero exponent gives 1, complex operands go through exp(b ln a), an
    infinite base gives a signed infinity, integer exponents are exact,
    rational exponents with a small denominator use pow_rational (directly,
    or after a continued-fraction approximation of the exponent), and
    everything else falls back to a floating-point pow.
    """
    a, b = _coerce(a), _coerce(b)
    if isinstance(a, Integer) and isinstance(b, Integer):
        return _int_pow(a.value, b.value)
    return _float_pow(Float.of(a), Float.of(b))


def _float_pow(base: Float, exponent: Float) -> Float:
    _check_nan(base, exponent)
    if exponent.is_zero:
        return FLOAT_ONE
    if base.is_complex or exponent.is_complex:
        return complex_algebra.power(base, exponent)
    if base.is_infinite:
        return real_ops.signed_infinity(base.is_negative != exponent.is_negative)
    if exponent.is_infinite:
        return _lossy_pow(base, exponent)
    if base.is_zero:
        if exponent.is_negative:
            raise NumericError(ErrorCode.DIV_BY_ZERO, "zero raised to a negative power")
        return FLOAT_ZERO

    qe = real_ops.exact_value(exponent)
    if exponent.is_integer_like():
        return _integer_power(base, int(real_ops.value_q(exponent)))
    if qe is not None and qe.denominator <= MAX_RATIONAL_DENOMINATOR and abs(qe.numerator) <= MAX_RATIONAL_NUMERATOR:
        try:
            return _rational_power(base, qe.numerator, qe.denominator)
        except NumericError as e:
            logger.debug("power: exact rational exponent %s failed (%s)", qe, e)

    approx = rational_approximation(float(transcendental.project(exponent)))
    if approx is not None and abs(approx[0]) <= MAX_RATIONAL_NUMERATOR:
        try:
            return _rational_power(base, *approx)
        except NumericError as e:
            logger.debug("power: approximated exponent %d/%d failed (%s)", approx[0], approx[1], e)
    return _lossy_pow(base, exponent)


def _integer_power(base: Float, n: int) -> Float:
    qb = real_ops.exact_value(base)
    if qb is not None:
        bits = abs(n) * max(qb.numerator.bit_length(), qb.denominator.bit_length())
        if bits <= MAX_POWER_BITS:
            return recurring.materialize(qb ** n)
    else:
        d = truncate_decimal(base.decimal, IRRATIONAL_PRECISION)
        # a decimal digit is a little over 3 bits
        if abs(n) * len(d.as_tuple().digits) * 4 <= MAX_POWER_BITS:
            powered = dpow(d, abs(n))
            if n < 0:
                powered = truncate_q(1 / Q(powered), IRRATIONAL_PRECISION)
            return real_ops.approximate(powered, True)
    logger.debug("power: exponent %d too large for an exact power", n)
    return _lossy_pow(base, Float.of(n))


def _rational_power(base: Float, p: int, q: int) -> Float:
    value, exact = pow_rational(real_ops.value_q(base), p, q)
    if exact and not base.is_irrational:
        return recurring.materialize(value)
    return real_ops.approximate(truncate_q(value, IRRATIONAL_PRECISION), True)


def _lossy_pow(base: Float, exponent: Float) -> Float:
    logger.debug("power: falling back to floating point")
    with np.errstate(all="ignore"):
        y = np.power(transcendental.project(base), transcendental.project(exponent))
    if np.isnan(y):
        raise NumericError(ErrorCode.INVALID_FORMAT, "power is not a real number")
    if np.isinf(y):
        return real_ops.signed_infinity(y < 0)
    return transcendental.tag(decimal_from_float(y))


# -- unary operations --------------------------------------------------------

def negate(x):
    x = _coerce(x)
    if isinstance(x, Integer):
        return Integer(-x.value)
    if x.is_nan:
        return NAN
    if x.is_complex:
        return Float.complex(real_ops.negate(x.real), real_ops.negate(x.imag))
    return real_ops.negate(x)


def absolute(x):
    x = _coerce(x)
    if isinstance(x, Integer):
        return Integer(abs(x.value))
    if x.is_nan:
        return NAN
    if x.is_complex:
        return complex_algebra.modulus(x)
    return real_ops.absolute(x)


def _int_sqrt(n: int) -> Float:
    if n in (0, 1):
        return Float.big(Decimal(n))
    r = isqrt(n)
    if r * r == n:
        return Float.big(Decimal(r))
    return transcendental.sqrt(Float.big(Decimal(n)))


def sqrt(x):
    """
    Square root. A negative Integer gives an imaginary value; a negative
    real Float raises NumericError(NEGATIVE_SQRT).
    """
    x = _coerce(x)
    if isinstance(x, Integer):
        if x.value < 0:
            return Float.complex(FLOAT_ZERO, _int_sqrt(-x.value))
        return _int_sqrt(x.value)
    return _unary(x, transcendental.sqrt, complex_algebra.sqrt)


def sin(x):
    return _unary(x, transcendental.sin, complex_algebra.sin)


def cos(x):
    return _unary(x, transcendental.cos, complex_algebra.cos)


def tan(x):
    return _unary(x, transcendental.tan, complex_algebra.tan)


def ln(x):
    return _unary(x, transcendental.ln, complex_algebra.ln)


def exp(x):
    return _unary(x, transcendental.exp, complex_algebra.exp)


def log10(x):
    return _unary(x, transcendental.log10, complex_algebra.log10)


def log(x, base):
    x, base = Float.of(_coerce(x)), Float.of(_coerce(base))
    _check_nan(x, base)
    if x.is_complex or base.is_complex:
        return complex_algebra.log(x, base)
    return transcendental.log(x, base)


def _real_rounding(x: Float, exact: Callable[[Q], Decimal], approx: Callable[[Decimal], Decimal]) -> Float:
    if x.is_nan or x.is_infinite:
        return x
    if x.is_complex:
        return complex_algebra.componentwise(x, lambda part: _real_rounding(part, exact, approx))
    q = real_ops.exact_value(x)
    return Float.big(strip(exact(q) if q is not None else approx(x.decimal)))


def floor(x):
    x = _coerce(x)
    if isinstance(x, Integer):
        return x
    if x.is_nan or x.is_complex:
        raise NumericError(ErrorCode.INVALID_FORMAT, f"floor of {x.kind.value}")
    if x.is_infinite:
        return x
    return Float.big(Decimal(_floor(real_ops.value_q(x))))


def ceil(x):
    x = _coerce(x)
    if isinstance(x, Integer):
        return x
    if x.is_nan or x.is_complex:
        raise NumericError(ErrorCode.INVALID_FORMAT, f"ceil of {x.kind.value}")
    if x.is_infinite:
        return x
    return Float.big(Decimal(_ceil(real_ops.value_q(x))))


def round_to(x, places: int = 0):
    """Round half away from zero to `places` fractional digits (negative: tens, hundreds...)."""
    x = _coerce(x)
    if isinstance(x, Integer):
        if places >= 0:
            return x
        return Integer(int(round_q(Q(x.value), places)))
    return _real_rounding(x, lambda q: round_q(q, places), lambda d: round_decimal(d, places))


def truncate(x, places: int = 0):
    """Cut towards zero after `places` fractional digits."""
    x = _coerce(x)
    if isinstance(x, Integer):
        if places >= 0:
            return x
        return Integer(int(truncate_q(Q(x.value), places)))
    return _real_rounding(x, lambda q: truncate_q(q, places), lambda d: truncate_decimal(d, places))


def conj(x):
    x = _coerce(x)
    if isinstance(x, Float) and x.is_complex:
        return complex_algebra.conj(x)
    return x


# -- bit operations ----------------------------------------------------------

def _bits(a, b):
    a, b = _coerce(a), _coerce(b)
    if not (isinstance(a, Integer) and isinstance(b, Integer)):
        raise NumericError(ErrorCode.INVALID_FORMAT, "bit operations need integers")
    return a.value, b.value


def bitand(a, b) -> Integer:
    x, y = _bits(a, b)
    return Integer(x & y)


def bitor(a, b) -> Integer:
    x, y = _bits(a, b)
    return Integer(x | y)


def bitxor(a, b) -> Integer:
    x, y = _bits(a, b)
    return Integer(x ^ y)


def xnor(a, b) -> Integer:
    x, y = _bits(a, b)
    return Integer(~(x ^ y))


def _shift_distance(n: int) -> int:
    if n < 0:
        raise NumericError(ErrorCode.NEGATIVE_RESULT, "negative shift")
    if n > MAX_SHIFT:
        raise NumericError(ErrorCode.NUMBER_TOO_LARGE, f"shift by {n}")
    return n


def shift_left(a, n) -> Integer:
    x, y = _bits(a, n)
    return Integer(x << _shift_distance(y))


def shift_right(a, n) -> Integer:
    x, y = _bits(a, n)
    return Integer(x >> _shift_distance(y))


# -- comparison --------------------------------------------------------------

def equals(a, b) -> bool:
    """Value equality across kinds; NaN equals nothing, itself included."""
    a, b = _coerce(a), _coerce(b)
    if isinstance(a, Integer) and isinstance(b, Integer):
        return a.value == b.value
    a, b = Float.of(a), Float.of(b)
    if a.is_nan or b.is_nan:
        return False
    if a.is_complex or b.is_complex:
        (ar, ai), (br, bi) = a.parts(), b.parts()
        return equals(ar, br) and equals(ai, bi)
    if a.is_infinite or b.is_infinite:
        return a.kind is b.kind
    return real_ops.value_q(a) == real_ops.value_q(b)


def _sort_key(x: Float):
    if x.kind is FloatKind.NEG_INFINITY:
        return -1, Q(0)
    if x.kind is FloatKind.INFINITY:
        return 1, Q(0)
    return 0, real_ops.value_q(x)


def compare(a, b) -> int:
    """
    -1, 0 or 1 as a is below, equal to or above b.

    Raises:
        NumericError(INVALID_FORMAT): a NaN operand
        NumericError(UNIMPLEMENTED): a complex operand
    """
    a, b = _coerce(a), _coerce(b)
    if isinstance(a, Integer) and isinstance(b, Integer):
        return (a.value > b.value) - (a.value < b.value)
    a, b = Float.of(a), Float.of(b)
    _check_nan(a, b)
    if a.is_complex or b.is_complex:
        raise NumericError(ErrorCode.UNIMPLEMENTED, "complex numbers are not ordered")
    ka, kb = _sort_key(a), _sort_key(b)
    return (ka > kb) - (ka < kb)


def ordered(a, b, test: Callable[[int], bool]):
    """Rich-comparison helper: NotImplemented for foreign types, False with NaN."""
    if not is_number(b):
        return NotImplemented
    if any(isinstance(v, Float) and v.is_nan for v in (a, b)):
        return False
    if isinstance(b, (float, np.floating)) and np.isnan(b):
        return False
    return test(compare(a, b))


def hash_value(x: Float) -> int:
    if x.is_nan:
        return id(x)
    if x.kind is FloatKind.INFINITY:
        return hash(float("inf"))
    if x.kind is FloatKind.NEG_INFINITY:
        return hash(float("-inf"))
    if x.is_complex:
        if x.imag.is_real and x.imag.is_zero:
            return hash_value(x.real)
        return hash((hash_value(x.real), hash_value(x.imag)))
    return hash(real_ops.value_q(x))


def approx_eq(a, b, epsilon) -> bool:
    """
    |a - b| <= epsilon, componentwise for complex values. Same-sign
    infinities match; NaN, and a complex value against a real one, never do.
    """
    a, b = Float.of(_coerce(a)), Float.of(_coerce(b))
    eps = epsilon
    if not isinstance(eps, Fraction):
        eps = Float.of(_coerce(eps))
        eps = real_ops.value_q(eps) if eps.is_real else to_q(0)
    if a.is_nan or b.is_nan:
        return False
    if a.is_complex != b.is_complex:
        return False
    if a.is_complex:
        return approx_eq(a.real, b.real, eps) and approx_eq(a.imag, b.imag, eps)
    if a.is_infinite or b.is_infinite:
        return a.kind is b.kind
    return abs(real_ops.value_q(a) - real_ops.value_q(b)) <= eps


# -- conversions -------------------------------------------------------------

def to_int(x) -> Integer:
    """
    The Integer a Float stands for.

    Raises:
        NumericError(INVALID_FORMAT): NaN, complex, or a fractional value
        NumericError(INFINITE_RESULT): an infinity
    """
    x = _coerce(x)
    if isinstance(x, Integer):
        return x
    if x.is_nan:
        raise NumericError(ErrorCode.INVALID_FORMAT, "NaN has no integer value")
    if x.is_infinite:
        raise NumericError(ErrorCode.INFINITE_RESULT)
    if x.is_complex:
        raise NumericError(ErrorCode.INVALID_FORMAT, "complex value has no integer value")
    q = real_ops.value_q(x)
    if q.denominator != 1:
        raise NumericError(ErrorCode.INVALID_FORMAT, "value has a fractional part")
    return Integer(q.numerator)


def to_native_float(x, width: str = "f64"):
    """
    Nearest native float (numpy scalar) of the given format.

    Raises:
        NumericError(INVALID_FORMAT): NaN or complex
        NumericError(NUMBER_TOO_LARGE): magnitude above the format's largest finite value
    """
    fmt = get_float_format(width)
    x = Float.of(_coerce(x))
    if x.is_nan:
        raise NumericError(ErrorCode.INVALID_FORMAT, "NaN has no native value")
    if x.is_complex:
        raise NumericError(ErrorCode.INVALID_FORMAT, "complex value has no native float")
    if x.is_infinite:
        return fmt.dtype(-np.inf if x.is_negative else np.inf)
    if abs(real_ops.value_q(x)) > Q(fmt.Fmax):
        raise NumericError(ErrorCode.NUMBER_TOO_LARGE, f"out of {fmt.name} range")
    if x.kind is FloatKind.SMALL:
        return fmt.dtype(x.value)
    return fmt.dtype(float(x.decimal))


def to_f64(x) -> float:
    return float(to_native_float(x, "f64"))
