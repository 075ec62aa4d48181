from __future__ import annotations
from dataclasses import dataclass
from math import ldexp
from typing import Optional

import numpy as np

from errors import ErrorCode, NumericError


@dataclass(frozen=True)
class IntWidth:
    name: str
    bits: int
    signed: bool
    dtype: Optional[type]   # numpy scalar type; None where numpy has no native type
    min_value: int
    max_value: int

    def contains(self, value: int) -> bool:
        return self.min_value <= value <= self.max_value


@dataclass(frozen=True)
class FloatFormat:
    name: str
    dtype: type         # numpy scalar type
    Fmax: float         # largest finite positive (IEEE-754, round-to-nearest-even)


def _derive_int(name: str, bits: int, signed: bool, dtype: Optional[type]) -> IntWidth:
    if dtype is not None:
        info = np.iinfo(dtype)
        lo, hi = int(info.min), int(info.max)
    elif signed:
        lo, hi = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    else:
        lo, hi = 0, (1 << bits) - 1
    return IntWidth(name=name, bits=bits, signed=signed, dtype=dtype, min_value=lo, max_value=hi)


def _derive_float(name: str, p: int, emax: int, dtype: type) -> FloatFormat:
    # Fmax = (2 - 2^(1-p)) * 2^emax
    Fmax = (2.0 - ldexp(1.0, 1 - p)) * ldexp(1.0, emax)
    return FloatFormat(name=name, dtype=dtype, Fmax=Fmax)


# Native integer widths of the fast path. numpy has no 128-bit integers, so
# those widths are range-checked Python ints.
_INT_REGISTRY = {
    "i8":    (8, True, np.int8),
    "u8":    (8, False, np.uint8),
    "i16":   (16, True, np.int16),
    "u16":   (16, False, np.uint16),
    "i32":   (32, True, np.int32),
    "u32":   (32, False, np.uint32),
    "i64":   (64, True, np.int64),
    "u64":   (64, False, np.uint64),
    "isize": (64, True, np.int64),
    "usize": (64, False, np.uint64),
    "i128":  (128, True, None),
    "u128":  (128, False, None),
}

# IEEE-754 binary formats: precision in bits (incl. implicit 1), maximum exponent
# - binary32:   p=24,  emax = 127
# - binary64:   p=53,  emax = 1023
_FLOAT_REGISTRY = {
    "f32":      (24, 127, np.float32),
    "float32":  (24, 127, np.float32),
    "single":   (24, 127, np.float32),
    "f64":      (53, 1023, np.float64),
    "float64":  (53, 1023, np.float64),
    "double":   (53, 1023, np.float64),
}

_DTYPE_NAMES = {
    np.dtype(np.int8): "i8", np.dtype(np.uint8): "u8",
    np.dtype(np.int16): "i16", np.dtype(np.uint16): "u16",
    np.dtype(np.int32): "i32", np.dtype(np.uint32): "u32",
    np.dtype(np.int64): "i64", np.dtype(np.uint64): "u64",
    np.dtype(np.float32): "f32", np.dtype(np.float64): "f64",
}


def get_int_width(name: str) -> IntWidth:
    key = (name or "i64").lower()
    try:
        bits, signed, dtype = _INT_REGISTRY[key]
    except KeyError:
        raise NotImplementedError(f"Integer width '{name}' not implemented. Supported widths {list(_INT_REGISTRY)}")
    return _derive_int(key, bits, signed, dtype)


def get_float_format(name: str) -> FloatFormat:
    key = (name or "f64").lower()
    try:
        p, emax, dtype = _FLOAT_REGISTRY[key]
    except KeyError:
        raise NotImplementedError(f"Format '{name}' not implemented. Supported formats {list(_FLOAT_REGISTRY)}")
    return _derive_float(key, p, emax, dtype)


def width_of(scalar) -> str:
    """Registry name of a numpy scalar's dtype, e.g. np.int8(1) -> 'i8'."""
    try:
        if not isinstance(scalar, np.generic):
            raise TypeError(type(scalar))
        return _DTYPE_NAMES[scalar.dtype]
    except (KeyError, TypeError):
        raise NotImplementedError(f"No native width for {type(scalar).__name__}")


def narrow(value: int, name: str):
    """
    Narrow an unbounded int to the native width `name`.

    Returns a numpy scalar where numpy has one, else a range-checked int.
    Raises NumericError(NEGATIVE_RESULT) for a negative value into an
    unsigned width and NumericError(NUMBER_TOO_LARGE) when out of range.
    """
    width = get_int_width(name)
    if value < 0 and not width.signed:
        raise NumericError(ErrorCode.NEGATIVE_RESULT, f"{value} does not fit unsigned {width.name}")
    if not width.contains(value):
        raise NumericError(ErrorCode.NUMBER_TOO_LARGE, f"{value} does not fit {width.name}")
    if width.dtype is None:
        return value
    return width.dtype(value)
