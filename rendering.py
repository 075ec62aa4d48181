"""
Integer / Float -> text.

`render` is the display form: Floats always show a fractional digit
("2.0"), repeating values show their cycle ("0.(3)"), irrational values end
in "..." and complex values read "3.0 + 4.0i".

`canonical` is the interchange form read back by the strict parser: no
forced ".0" and compact complex values ("3+4i").
"""
from __future__ import annotations
from decimal import Decimal
from typing import Optional
import logging

from arithmetic import FALLBACK_DIGITS, SCAN_LIMIT, SCIENTIFIC_THRESHOLD, digits_of, strip, truncate_decimal
from errors import ErrorCode, NumericError
from values import Float, FloatKind, Integer
import recurring

logger = logging.getLogger(__name__)

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _int_text(n: int) -> str:
    return ("-" if n < 0 else "") + digits_of(n)


def positional(d: Decimal, force_point: bool = True) -> str:
    """
    Plain digits of a finite decimal, switching to "m.mmme±N" once more than
    SCIENTIFIC_THRESHOLD padding zeros would be needed. Zero is unsigned.
    """
    d = strip(d)
    if d.is_zero():
        return "0.0" if force_point else "0"
    sign, digits, exponent = d.as_tuple()
    text = "".join(map(str, digits))
    minus = "-" if sign else ""
    n = len(text)

    if exponent >= 0:
        if exponent > SCIENTIFIC_THRESHOLD:
            return minus + _scientific(text, exponent + n - 1, force_point)
        return minus + text + "0" * exponent + (".0" if force_point else "")
    if -exponent >= n:
        lead = -exponent - n
        if lead > SCIENTIFIC_THRESHOLD:
            return minus + _scientific(text, exponent + n - 1, force_point)
        return minus + "0." + "0" * lead + text
    return minus + text[:n + exponent] + "." + text[n + exponent:]


def _scientific(text: str, adjusted: int, force_point: bool) -> str:
    rest = text[1:]
    if rest:
        mantissa = f"{text[0]}.{rest}"
    else:
        mantissa = text[0] + (".0" if force_point else "")
    return f"{mantissa}e{adjusted}"


def _cycle_text(x: Float, limit: Optional[int] = SCAN_LIMIT):
    """'int.prefix(cycle)' for a repeating value, or None when no cycle shows within `limit` digits."""
    found = recurring.split(x.decimal, limit)
    if found is None:
        return None
    negative, int_part, prefix, cycle = found
    return f"{'-' if negative else ''}{int_part}.{prefix}({cycle})"


def _render_real(x: Float) -> str:
    kind = x.kind
    if kind is FloatKind.NAN:
        return "NaN"
    if kind is FloatKind.INFINITY:
        return "Infinity"
    if kind is FloatKind.NEG_INFINITY:
        return "-Infinity"
    if kind is FloatKind.RECURRING:
        x = recurring.normalize(x)
        if not x.is_recurring:
            return positional(x.decimal)
        text = _cycle_text(x)
        if text is None:
            logger.debug("render: no cycle found, showing %d digits", FALLBACK_DIGITS)
            return positional(truncate_decimal(x.decimal, FALLBACK_DIGITS))
        return text
    if kind is FloatKind.IRRATIONAL:
        return positional(x.decimal) + "..."
    return positional(x.decimal)


def _is_one(x: Float) -> bool:
    return x.is_real and not x.is_irrational and x.decimal.copy_abs() == 1


def _render_complex(x: Float) -> str:
    re, im = x.real, x.imag
    if im.is_real and im.is_zero:
        return _render_real(re)
    negative = im.is_negative
    magnitude = -im if negative else im
    coefficient = "" if _is_one(magnitude) else _render_real(magnitude)
    if re.is_real and re.is_zero:
        return f"{'-' if negative else ''}{coefficient}i"
    return f"{_render_real(re)} {'-' if negative else '+'} {coefficient}i"


def render(x) -> str:
    """Display text of an Integer or Float."""
    if isinstance(x, Integer):
        return _int_text(x.value)
    if x.is_complex:
        return _render_complex(x)
    return _render_real(x)


def _canonical_real(x: Float) -> str:
    kind = x.kind
    if kind is FloatKind.RECURRING:
        x = recurring.normalize(x)
        if not x.is_recurring:
            return positional(x.decimal, force_point=False)
        return _cycle_text(x, limit=None) or positional(x.decimal, force_point=False)
    if kind is FloatKind.IRRATIONAL:
        return positional(x.decimal, force_point=False) + "..."
    if x.is_real:
        return positional(x.decimal, force_point=False)
    return _render_real(x)


def canonical(x) -> str:
    """
    Text that the strict parser turns back into an equal value:
      Integer(-12)          -> "-12"
      Float 2.50            -> "2.5"
      1/3                   -> "0.(3)"
      complex(7, 0)         -> "7+0i"
      complex(0, -1)        -> "-i"
    """
    if isinstance(x, Integer):
        return _int_text(x.value)
    if not x.is_complex:
        return _canonical_real(x)
    re, im = x.real, x.imag
    negative = im.is_negative
    magnitude = -im if negative else im
    coefficient = "" if _is_one(magnitude) else _canonical_real(magnitude)
    sign = "-" if negative else "+"
    if re.is_real and re.is_zero and not (im.is_real and im.is_zero):
        return f"{'-' if negative else ''}{coefficient}i"
    return f"{_canonical_real(re)}{sign}{coefficient}i"


def to_radix(n: Integer, radix: int) -> str:
    """Signed digits of n in base 2..36, lowercase."""
    if not 2 <= radix <= 36:
        raise NumericError(ErrorCode.INVALID_FORMAT, f"radix {radix} is outside 2..36")
    value = n.value
    if radix == 10:
        return _int_text(value)
    if value == 0:
        return "0"
    magnitude = abs(value)
    out = []
    while magnitude:
        magnitude, digit = divmod(magnitude, radix)
        out.append(_DIGITS[digit])
    if value < 0:
        out.append("-")
    return "".join(reversed(out))
