"""
Mantissa/exponent view of Integer and Float values.

A value decomposes into `Parts(digits, exponent, negative, kind)` meaning
±digits * 10**exponent, and any such tuple rebuilds the value. `kind_of` is
also how the real arithmetic tells exact operands from approximations.
"""
from __future__ import annotations
from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Tuple

from arithmetic import digits_of, int_from_digits
from errors import ErrorCode, NumericError
from values import NAN, INFINITY, NEG_INFINITY, Float, FloatKind, Integer


class NumberKind(Enum):
    NAN = "NaN"
    INFINITY = "Infinity"
    NEG_INFINITY = "-Infinity"
    IRRATIONAL = "Irrational"
    RECURRING = "Recurring"
    FINITE = "Finite"
    IMAGINARY = "Imaginary"
    COMPLEX = "Complex"


@dataclass(frozen=True)
class Parts:
    digits: str         # mantissa digits, no sign, no trailing zeros ("0" for zero)
    exponent: int       # base-10 exponent applied to digits
    negative: bool
    kind: NumberKind
    coefficient: NumberKind = NumberKind.FINITE   # kind of an IMAGINARY value's coefficient


_KINDS = {
    FloatKind.SMALL: NumberKind.FINITE,
    FloatKind.BIG: NumberKind.FINITE,
    FloatKind.IRRATIONAL: NumberKind.IRRATIONAL,
    FloatKind.RECURRING: NumberKind.RECURRING,
    FloatKind.NAN: NumberKind.NAN,
    FloatKind.INFINITY: NumberKind.INFINITY,
    FloatKind.NEG_INFINITY: NumberKind.NEG_INFINITY,
}


def kind_of(x: Float) -> NumberKind:
    if x.is_complex:
        return NumberKind.IMAGINARY if x.real.is_zero else NumberKind.COMPLEX
    return _KINDS[x.kind]


def decimal_parts(d: Decimal, kind: NumberKind = NumberKind.FINITE) -> Parts:
    sign, digits, exponent = d.as_tuple()
    text = "".join(map(str, digits)).lstrip("0")
    if not text:
        return Parts("0", 0, bool(sign), kind)
    if kind is not NumberKind.RECURRING:
        # a repeating value keeps its stored cycles intact, trailing zeros included
        trimmed = text.rstrip("0")
        exponent += len(text) - len(trimmed)
        text = trimmed
    return Parts(text, exponent, bool(sign), kind)


def to_parts(x: Float) -> Parts:
    kind = kind_of(x)
    if kind in (NumberKind.NAN, NumberKind.INFINITY, NumberKind.NEG_INFINITY):
        return Parts("", 0, kind is NumberKind.NEG_INFINITY, kind)
    if kind is NumberKind.IMAGINARY:
        coefficient = to_parts(x.imag)
        return replace(coefficient, kind=kind, coefficient=coefficient.kind)
    if kind is NumberKind.COMPLEX:
        raise NumericError(ErrorCode.INVALID_FORMAT, "a complex value has two mantissas; use complex_parts")
    return decimal_parts(x.decimal, kind)


def complex_parts(x: Float) -> Tuple[Parts, Parts]:
    re, im = x.parts()
    return to_parts(re), to_parts(im)


def parts_decimal(parts: Parts) -> Decimal:
    digits = tuple(int(c) for c in (parts.digits or "0"))
    return Decimal((1 if parts.negative else 0, digits, parts.exponent))


def from_parts(parts: Parts) -> Float:
    kind = parts.kind
    if kind is NumberKind.NAN:
        return NAN
    if kind is NumberKind.INFINITY:
        return INFINITY
    if kind is NumberKind.NEG_INFINITY:
        return NEG_INFINITY
    d = parts_decimal(parts)
    if kind is NumberKind.IRRATIONAL:
        return Float.irrational(d)
    if kind is NumberKind.RECURRING:
        return Float.recurring(d)
    if kind is NumberKind.IMAGINARY:
        imag = from_parts(replace(parts, kind=parts.coefficient, coefficient=NumberKind.FINITE))
        return Float.complex(Float.big(Decimal(0)), imag)
    if kind is NumberKind.COMPLEX:
        raise NumericError(ErrorCode.INVALID_FORMAT, "a complex value has two mantissas; use from_complex_parts")
    return Float.big(d)


def from_complex_parts(real: Parts, imag: Parts) -> Float:
    return Float.complex(from_parts(real), from_parts(imag))


def int_to_parts(n: Integer) -> Tuple[str, bool, NumberKind]:
    return digits_of(n.value), n.value < 0, NumberKind.FINITE


def int_from_parts(digits: str, negative: bool) -> Integer:
    if not digits or not digits.isdigit():
        raise NumericError(ErrorCode.INVALID_FORMAT, f"bad integer digits {digits!r}")
    value = int_from_digits(digits)
    return Integer(-value if negative else value)
