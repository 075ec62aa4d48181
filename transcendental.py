"""
sqrt and the transcendental functions on real Floats.

Each function projects its operand onto a native double, evaluates with
numpy, and re-embeds the result as a decimal truncated to
IRRATIONAL_PRECISION fractional digits, tagged IRRATIONAL while a fractional
part remains. Operands outside double range are evaluated with the Decimal
methods instead.
"""
from __future__ import annotations
from decimal import Context, Decimal, localcontext
from functools import lru_cache
from typing import Callable

import numpy as np

from arithmetic import IRRATIONAL_PRECISION, Q, decimal_from_float, has_fraction, strip, truncate_decimal
from errors import ErrorCode, NumericError
from values import INFINITY, NEG_INFINITY, Float, FloatKind
import real_ops

# Extra significant digits for the Decimal fallbacks and constants.
GUARD_DIGITS = 20


def project(x: Float) -> np.float64:
    """Lossy projection of a real Float onto a double (±inf outside its range)."""
    if x.kind is FloatKind.INFINITY:
        return np.float64(np.inf)
    if x.kind is FloatKind.NEG_INFINITY:
        return np.float64(-np.inf)
    if x.kind is FloatKind.SMALL:
        return np.float64(x.value)
    return np.float64(float(x.decimal))


def tag(d: Decimal) -> Float:
    d = truncate_decimal(d, IRRATIONAL_PRECISION)
    return Float.irrational(d) if has_fraction(d) else Float.big(strip(d))


def embed(y, name: str = "result") -> Float:
    """Re-embed a native float result; NaN is an invalid format, ±inf an infinite result."""
    if np.isnan(y):
        raise NumericError(ErrorCode.INVALID_FORMAT, f"{name} is not a number")
    if np.isinf(y):
        raise NumericError(ErrorCode.INFINITE_RESULT, f"{name} overflows")
    return tag(decimal_from_float(y))


def _in_range(x: Float, y) -> bool:
    return bool(np.isfinite(y)) and (y != 0 or x.is_zero)


def _context(x: Float) -> Context:
    return Context(prec=max(x.decimal.adjusted(), 0) + IRRATIONAL_PRECISION + GUARD_DIGITS)


def _evaluate(x: Float, fn: Callable, name: str) -> Float:
    if x.is_nan:
        raise NumericError(ErrorCode.INVALID_FORMAT, f"{name} of NaN")
    with np.errstate(all="ignore"):
        y = fn(project(x))
    if x.is_infinite and np.isinf(y):
        return real_ops.signed_infinity(y < 0)
    return embed(y, name)


def sqrt(x: Float) -> Float:
    """
    Square root of a real Float.

    Raises:
        NumericError(INVALID_FORMAT): NaN
        NumericError(NEGATIVE_SQRT): negative input
    """
    if x.is_nan:
        raise NumericError(ErrorCode.INVALID_FORMAT, "sqrt of NaN")
    if x.is_negative:
        raise NumericError(ErrorCode.NEGATIVE_SQRT)
    if x.kind is FloatKind.INFINITY:
        return INFINITY
    if x.is_zero or x.decimal == 1:
        return x

    with np.errstate(all="ignore"):
        y = np.sqrt(project(x))
    if _in_range(x, y):
        root = truncate_decimal(decimal_from_float(y), IRRATIONAL_PRECISION)
    else:
        root = truncate_decimal(x.decimal.sqrt(_context(x)), IRRATIONAL_PRECISION)

    q = real_ops.exact_value(x)
    if q is not None and Q(root) ** 2 == q:
        return Float.big(strip(root))
    return tag(root)


def sin(x: Float) -> Float:
    return _evaluate(x, np.sin, "sin")


def cos(x: Float) -> Float:
    return _evaluate(x, np.cos, "cos")


def tan(x: Float) -> Float:
    return _evaluate(x, np.tan, "tan")


def sinh(x: Float) -> Float:
    return _evaluate(x, np.sinh, "sinh")


def cosh(x: Float) -> Float:
    return _evaluate(x, np.cosh, "cosh")


def exp(x: Float) -> Float:
    """e^x; a finite operand whose result overflows raises INFINITE_RESULT."""
    return _evaluate(x, np.exp, "exp")


def _log(x: Float, fn: Callable, method: str, name: str) -> Float:
    if x.is_nan:
        raise NumericError(ErrorCode.INVALID_FORMAT, f"{name} of NaN")
    if x.is_zero or x.is_negative:
        raise NumericError(ErrorCode.INVALID_FORMAT, f"{name} of a non-positive number")
    if x.is_infinite:
        return INFINITY
    p = project(x)
    if not _in_range(x, p):
        return tag(getattr(x.decimal, method)(_context(x)))
    with np.errstate(all="ignore"):
        return embed(fn(p), name)


def ln(x: Float) -> Float:
    return _log(x, np.log, "ln", "ln")


def log10(x: Float) -> Float:
    return _log(x, np.log10, "log10", "log10")


def log(x: Float, base: Float) -> Float:
    """ln(x) / ln(base) for positive reals."""
    for value in (x, base):
        if value.is_nan or value.is_zero or value.is_negative:
            raise NumericError(ErrorCode.INVALID_FORMAT, "log needs positive operands")
    if base.is_real and base.decimal == 1:
        raise NumericError(ErrorCode.DIV_BY_ZERO, "log base 1")
    if x.is_infinite:
        return INFINITY
    if base.is_infinite:
        return Float.big(Decimal(0))
    return real_ops.div(ln(x), ln(base)) if not _in_range(x, project(x)) else _float_log(x, base)


def _float_log(x: Float, base: Float) -> Float:
    with np.errstate(all="ignore"):
        y = np.log(project(x)) / np.log(project(base))
    return embed(y, "log")


def _pi(ctx: Context) -> Decimal:
    # series from the decimal module documentation
    with localcontext(ctx) as local:
        local.prec += 2
        three = Decimal(3)
        lasts, t, s, n, na, d, da = 0, three, 3, 1, 0, 0, 24
        while s != lasts:
            lasts = s
            n, na = n + na, na + 8
            d, da = d + da, da + 32
            t = (t * n) / d
            s += t
    return s


@lru_cache(maxsize=None)
def constant(name: str) -> Float:
    """pi, e, phi or sqrt2 to IRRATIONAL_PRECISION digits, computed once."""
    ctx = Context(prec=IRRATIONAL_PRECISION + GUARD_DIGITS)
    if name == "pi":
        d = _pi(ctx)
    elif name == "e":
        d = ctx.exp(Decimal(1))
    elif name == "phi":
        d = ctx.divide(ctx.add(1, ctx.sqrt(Decimal(5))), 2)
    elif name == "sqrt2":
        d = ctx.sqrt(Decimal(2))
    else:
        raise KeyError(f"unknown constant {name!r}")
    return Float.irrational(truncate_decimal(d, IRRATIONAL_PRECISION))
