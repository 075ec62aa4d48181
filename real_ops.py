"""
Arithmetic on real (non-complex, non-NaN) Floats.

Exact operands (BIG, SMALL, and RECURRING values whose cycle can be recovered)
are combined as rationals and re-materialized, so 1/3 + 1 stays a repeating
1.(3) and (1/3) * 3 is exactly 1. Once an IRRATIONAL operand is involved the
result is an approximation truncated to IRRATIONAL_PRECISION digits.

Infinite operands follow the extended-real table:

    lhs   rhs     add       mul           div
    inf   inf     inf       inf           NaN
    inf   -inf    error     -inf          0 (sign=xor)
    inf   finite  inf       ±inf (xor)    ±inf (xor)
    fin   0       finite    0             error(div-by-zero)
"""
from __future__ import annotations
from decimal import Decimal
from math import trunc
from typing import Callable, Optional

from arithmetic import (IRRATIONAL_PRECISION, Q, ROUNDING, dadd, dmul, dsub, has_fraction, strip,
                        truncate_decimal, truncate_q)
from errors import ErrorCode, NumericError
from values import INFINITY, NAN, NEG_INFINITY, Float, FloatKind
import legacy
import recurring


def exact_value(x: Float) -> Optional[Q]:
    """The exact rational behind a real Float, or None for approximations."""
    kind = legacy.kind_of(x)
    if kind is legacy.NumberKind.FINITE:
        return Q(x.decimal)
    if kind is legacy.NumberKind.RECURRING:
        return recurring.exact_value(x.decimal)
    return None


def value_q(x: Float) -> Q:
    """Best rational for a real Float: exact where known, else its stored digits."""
    q = exact_value(x)
    return q if q is not None else Q(x.decimal)


def approximate(d: Decimal, irrational: bool) -> Float:
    """
    Wrap an inexact result. With an irrational operand the digits are cut to
    IRRATIONAL_PRECISION and the tag kept only while a fraction remains;
    otherwise the operand was a repeating value whose cycle is unknown, and
    the result keeps that tag.
    """
    if irrational:
        d = truncate_decimal(d, IRRATIONAL_PRECISION)
        return Float.irrational(d) if has_fraction(d) else Float.big(strip(d))
    return Float.recurring(d)


def signed_zero(negative: bool) -> Float:
    return Float.big(Decimal((1 if negative else 0, (0,), 0)))


def signed_infinity(negative: bool) -> Float:
    return NEG_INFINITY if negative else INFINITY


def negate(x: Float) -> Float:
    if x.kind is FloatKind.INFINITY:
        return NEG_INFINITY
    if x.kind is FloatKind.NEG_INFINITY:
        return INFINITY
    if x.kind is FloatKind.SMALL:
        return Float.small(-x.value)
    if x.is_real:
        return Float(x.kind, x.value.copy_negate())
    return x


def absolute(x: Float) -> Float:
    if x.is_infinite:
        return INFINITY
    return negate(x) if x.is_negative else x


def _combine(a: Float, b: Float, exact_op: Callable[[Q, Q], Q],
             approx_op: Callable[[Decimal, Decimal], Decimal]) -> Float:
    qa, qb = exact_value(a), exact_value(b)
    if qa is not None and qb is not None:
        return recurring.materialize(exact_op(qa, qb))
    return approximate(approx_op(a.decimal, b.decimal), a.is_irrational or b.is_irrational)


def add(a: Float, b: Float) -> Float:
    if a.is_infinite or b.is_infinite:
        if a.is_infinite and b.is_infinite:
            if a.kind is b.kind:
                return a
            raise NumericError(ErrorCode.INFINITE_RESULT, "Infinity + -Infinity")
        return a if a.is_infinite else b
    return _combine(a, b, lambda x, y: x + y, dadd)


def sub(a: Float, b: Float) -> Float:
    if a.is_infinite or b.is_infinite:
        return add(a, negate(b))
    return _combine(a, b, lambda x, y: x - y, dsub)


def mul(a: Float, b: Float) -> Float:
    if a.is_infinite or b.is_infinite:
        return signed_infinity(a.is_negative != b.is_negative)
    return _combine(a, b, lambda x, y: x * y, dmul)


def div(a: Float, b: Float) -> Float:
    if b.is_zero:
        raise NumericError(ErrorCode.DIV_BY_ZERO)
    negative = a.is_negative != b.is_negative
    if a.is_infinite and b.is_infinite:
        return NAN if a.kind is b.kind else signed_zero(negative)
    if a.is_infinite:
        return signed_infinity(negative)
    if b.is_infinite:
        return signed_zero(negative)

    qa, qb = exact_value(a), exact_value(b)
    if qa is not None and qb is not None:
        return recurring.materialize(qa / qb)
    quotient = truncate_q(Q(a.decimal) / Q(b.decimal), IRRATIONAL_PRECISION)
    return approximate(quotient, a.is_irrational or b.is_irrational)


def mod(a: Float, b: Float) -> Float:
    """Truncated remainder a - b*trunc(a/b); its sign follows the dividend."""
    if b.is_zero:
        raise NumericError(ErrorCode.DIV_BY_ZERO)
    if a.is_infinite:
        return NAN
    if b.is_infinite:
        return a

    qa, qb = exact_value(a), exact_value(b)
    if qa is not None and qb is not None:
        return recurring.materialize(qa - qb * trunc(qa / qb))
    return approximate(ROUNDING.remainder(a.decimal, b.decimal), a.is_irrational or b.is_irrational)
