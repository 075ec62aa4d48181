from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from typing import Optional, Union

import numpy as np

from arithmetic import decimal_from_float, digits_of, has_fraction
from errors import ErrorCode, NumericError
from formats import get_int_width, narrow, width_of


class FloatKind(Enum):
    SMALL = "small"             # native f32/f64 scalar
    BIG = "big"                 # exact unbounded decimal
    IRRATIONAL = "irrational"   # decimal approximation truncated to a digit budget
    RECURRING = "recurring"     # exact rational, stored as prefix + repeated cycle
    COMPLEX = "complex"
    NAN = "nan"
    INFINITY = "infinity"
    NEG_INFINITY = "-infinity"


_DECIMAL_KINDS = (FloatKind.BIG, FloatKind.IRRATIONAL, FloatKind.RECURRING)
_SINGLETONS = (FloatKind.NAN, FloatKind.INFINITY, FloatKind.NEG_INFINITY)


@dataclass(frozen=True, eq=False)
class Integer:
    """
    An integer of unbounded size.

    `width` names a native fast-path width ("i8" ... "u128", see formats.py)
    when the value was built from a native scalar; arithmetic always works on
    the unbounded value and returns unbounded Integers, so e.g.
    Integer(np.int8(127)) + 1 == 128.

    `/` is the engine's integer division: the quotient rounded half away from
    zero. `%` is the truncated remainder (sign of the dividend).
    """
    value: int = 0
    width: Optional[str] = None   # native width of the fast path, None when unbounded

    def __post_init__(self):
        v = self.value
        if isinstance(v, np.integer):
            if self.width is None:
                object.__setattr__(self, "width", width_of(v))
            v = int(v)
        elif isinstance(v, Integer):
            v = v.value
        elif not isinstance(v, int):
            raise TypeError(f"Integer value must be an int, got {type(v).__name__}")
        if self.width is not None:
            w = get_int_width(self.width)
            if not w.contains(v):
                raise NumericError(ErrorCode.NUMBER_TOO_LARGE, f"{v} does not fit {w.name}")
            object.__setattr__(self, "width", w.name)
        object.__setattr__(self, "value", int(v))

    # -- predicates -----------------------------------------------------------

    @property
    def is_small(self) -> bool:
        return self.width is not None

    @property
    def is_zero(self) -> bool:
        return self.value == 0

    @property
    def is_negative(self) -> bool:
        return self.value < 0

    def is_integer_like(self) -> bool:
        return True

    @property
    def native(self):
        """The fast-path scalar (numpy where available); None for unbounded values."""
        if self.width is None:
            return None
        return narrow(self.value, self.width)

    # -- conversions ----------------------------------------------------------

    def to_float(self) -> Float:
        return Float.big(Decimal(self.value))

    def to_native(self, width: str):
        return narrow(self.value, width)

    def to_i64(self):
        return narrow(self.value, "i64")

    def to_u64(self):
        return narrow(self.value, "u64")

    def to_i128(self) -> int:
        return narrow(self.value, "i128")

    def to_usize(self):
        return narrow(self.value, "usize")

    def to_f64(self) -> float:
        return engine.to_f64(self)

    def to_str(self) -> str:
        return rendering.canonical(self)

    def to_str_radix(self, radix: int) -> str:
        return rendering.to_radix(self, radix)

    @classmethod
    def from_str_radix(cls, text: str, radix: int) -> Integer:
        return parsing.parse_radix(text, radix)

    @classmethod
    def from_hex(cls, text: str) -> Integer:
        return parsing.parse_hex(text)

    # -- operations -----------------------------------------------------------

    def add(self, other): return engine.add(self, other)
    def sub(self, other): return engine.sub(self, other)
    def mul(self, other): return engine.mul(self, other)
    def div(self, other): return engine.div(self, other)
    def mod(self, other): return engine.mod(self, other)
    def pow(self, other): return engine.power(self, other)
    def sqrt(self): return engine.sqrt(self)
    def sin(self): return engine.sin(self)
    def cos(self): return engine.cos(self)
    def tan(self): return engine.tan(self)
    def ln(self): return engine.ln(self)
    def exp(self): return engine.exp(self)
    def log10(self): return engine.log10(self)
    def log(self, base): return engine.log(self, base)
    def floor(self): return self
    def ceil(self): return self
    def xnor(self, other): return engine.xnor(self, other)

    def approx_eq(self, other, epsilon) -> bool:
        return engine.approx_eq(self, other, epsilon)

    # -- Python protocol ------------------------------------------------------

    __add__ = add
    __sub__ = sub
    __mul__ = mul
    __truediv__ = div
    __mod__ = mod
    __pow__ = pow

    def __radd__(self, other): return engine.add(other, self)
    def __rsub__(self, other): return engine.sub(other, self)
    def __rmul__(self, other): return engine.mul(other, self)
    def __rtruediv__(self, other): return engine.div(other, self)
    def __rmod__(self, other): return engine.mod(other, self)
    def __rpow__(self, other): return engine.power(other, self)
    def __and__(self, other): return engine.bitand(self, other)
    def __or__(self, other): return engine.bitor(self, other)
    def __xor__(self, other): return engine.bitxor(self, other)
    def __lshift__(self, other): return engine.shift_left(self, other)
    def __rshift__(self, other): return engine.shift_right(self, other)
    def __invert__(self): return Integer(~self.value)
    def __neg__(self): return Integer(-self.value)
    def __pos__(self): return self
    def __abs__(self): return Integer(abs(self.value))

    def __eq__(self, other):
        if not engine.is_number(other):
            return NotImplemented
        return engine.equals(self, other)

    def __lt__(self, other): return engine.ordered(self, other, lambda c: c < 0)
    def __le__(self, other): return engine.ordered(self, other, lambda c: c <= 0)
    def __gt__(self, other): return engine.ordered(self, other, lambda c: c > 0)
    def __ge__(self, other): return engine.ordered(self, other, lambda c: c >= 0)

    def __hash__(self):
        return hash(self.value)

    def __bool__(self):
        return self.value != 0

    def __int__(self):
        return self.value

    __index__ = __int__

    def __float__(self):
        return engine.to_f64(self)

    def __round__(self, ndigits=None):
        return self

    def __str__(self):
        return rendering.render(self)

    def __repr__(self):
        if self.width is None:
            return f"Integer({'-' if self.value < 0 else ''}{digits_of(self.value)})"
        return f"Integer({self.value}, {self.width!r})"


@dataclass(frozen=True, eq=False)
class Float:
    kind: FloatKind
    value: Union[Decimal, np.floating, None] = None   # SMALL: numpy scalar; BIG/IRRATIONAL/RECURRING: Decimal
    real: Optional[Float] = None                       # COMPLEX only
    imag: Optional[Float] = None                       # COMPLEX only

    def __post_init__(self):
        kind = self.kind
        if kind is FloatKind.COMPLEX:
            for part in (self.real, self.imag):
                if not isinstance(part, Float) or part.kind is FloatKind.COMPLEX:
                    raise TypeError("complex parts must be real Floats")
            if self.value is not None:
                raise TypeError("complex Float carries no decimal payload")
            return
        if self.real is not None or self.imag is not None:
            raise TypeError(f"{kind.value} Float has no complex parts")
        if kind in _SINGLETONS:
            if self.value is not None:
                raise TypeError(f"{kind.value} carries no payload")
        elif kind is FloatKind.SMALL:
            if not isinstance(self.value, (np.float32, np.float64)) or not np.isfinite(self.value):
                raise TypeError("small Float needs a finite np.float32 or np.float64")
        elif not isinstance(self.value, Decimal) or not self.value.is_finite():
            raise TypeError(f"{kind.value} Float needs a finite Decimal")

    # -- constructors ---------------------------------------------------------

    @classmethod
    def big(cls, d: Decimal) -> Float:
        return cls(FloatKind.BIG, d)

    @classmethod
    def irrational(cls, d: Decimal) -> Float:
        return cls(FloatKind.IRRATIONAL, d)

    @classmethod
    def recurring(cls, d: Decimal) -> Float:
        return cls(FloatKind.RECURRING, d)

    @classmethod
    def small(cls, x) -> Float:
        """Wrap a native float; non-finite inputs become NaN / Infinity."""
        if not isinstance(x, (np.float32, np.float64)):
            x = np.float64(x)
        if np.isnan(x):
            return NAN
        if np.isinf(x):
            return INFINITY if x > 0 else NEG_INFINITY
        return cls(FloatKind.SMALL, x)

    @classmethod
    def complex(cls, real: Float, imag: Float) -> Float:
        return cls(FloatKind.COMPLEX, real=Float.of(real), imag=Float.of(imag))

    @classmethod
    def of(cls, x) -> Float:
        """Promote any supported number (Integer, int, float, Decimal, Fraction) to a Float."""
        if isinstance(x, Float):
            return x
        if isinstance(x, Integer):
            return x.to_float()
        if isinstance(x, (int, np.integer)):
            return cls.big(Decimal(int(x)))
        if isinstance(x, (float, np.floating)):
            return cls.small(x)
        if isinstance(x, Decimal):
            if x.is_nan():
                return NAN
            if x.is_infinite():
                return NEG_INFINITY if x.is_signed() else INFINITY
            return cls.big(x)
        if isinstance(x, Fraction):
            return recurring.materialize(x)
        raise TypeError(f"cannot make a Float from {type(x).__name__}")

    # -- payload access -------------------------------------------------------

    @property
    def decimal(self) -> Decimal:
        """The decimal payload of a finite real Float."""
        if self.kind in _DECIMAL_KINDS:
            return self.value
        if self.kind is FloatKind.SMALL:
            return decimal_from_float(self.value)
        raise NumericError(ErrorCode.INVALID_FORMAT, f"{self.kind.value} has no decimal value")

    @property
    def is_nan(self) -> bool:
        return self.kind is FloatKind.NAN

    @property
    def is_infinite(self) -> bool:
        return self.kind in (FloatKind.INFINITY, FloatKind.NEG_INFINITY)

    @property
    def is_complex(self) -> bool:
        return self.kind is FloatKind.COMPLEX

    @property
    def is_real(self) -> bool:
        """A finite real value (has a decimal payload)."""
        return self.kind in _DECIMAL_KINDS or self.kind is FloatKind.SMALL

    @property
    def is_irrational(self) -> bool:
        return self.kind is FloatKind.IRRATIONAL

    @property
    def is_recurring(self) -> bool:
        return self.kind is FloatKind.RECURRING

    @property
    def is_zero(self) -> bool:
        if self.is_real:
            return self.decimal.is_zero()
        if self.is_complex:
            return self.real.is_zero and self.imag.is_zero
        return False

    @property
    def is_negative(self) -> bool:
        if self.kind is FloatKind.NEG_INFINITY:
            return True
        if self.is_real:
            return self.decimal.is_signed()
        return False

    def is_integer_like(self) -> bool:
        if self.is_recurring:
            q = recurring.exact_value(self.decimal)
            return q is not None and q.denominator == 1
        return self.is_real and not has_fraction(self.decimal)

    def make_irrational(self) -> Float:
        """The same value, tagged as an approximation."""
        if not self.is_real:
            return self
        return Float.irrational(self.decimal)

    def parts(self):
        """(real, imaginary) pair; real values have a zero imaginary part."""
        if self.is_complex:
            return self.real, self.imag
        return self, FLOAT_ZERO

    # -- conversions ----------------------------------------------------------

    def to_int(self) -> Integer:
        return engine.to_int(self)

    def to_f64(self) -> float:
        return engine.to_f64(self)

    def to_native(self, width: str = "f64"):
        return engine.to_native_float(self, width)

    def to_str(self) -> str:
        return rendering.canonical(self)

    # -- operations -----------------------------------------------------------

    def add(self, other): return engine.add(self, other)
    def sub(self, other): return engine.sub(self, other)
    def mul(self, other): return engine.mul(self, other)
    def div(self, other): return engine.div(self, other)
    def mod(self, other): return engine.mod(self, other)
    def pow(self, other): return engine.power(self, other)
    def sqrt(self): return engine.sqrt(self)
    def sin(self): return engine.sin(self)
    def cos(self): return engine.cos(self)
    def tan(self): return engine.tan(self)
    def ln(self): return engine.ln(self)
    def exp(self): return engine.exp(self)
    def log10(self): return engine.log10(self)
    def log(self, base): return engine.log(self, base)
    def floor(self): return engine.floor(self)
    def ceil(self): return engine.ceil(self)
    def round(self, places: int = 0): return engine.round_to(self, places)
    def truncate(self, places: int = 0): return engine.truncate(self, places)
    def conj(self): return engine.conj(self)
    def abs(self): return engine.absolute(self)

    def approx_eq(self, other, epsilon) -> bool:
        return engine.approx_eq(self, other, epsilon)

    # -- Python protocol ------------------------------------------------------

    __add__ = add
    __sub__ = sub
    __mul__ = mul
    __truediv__ = div
    __mod__ = mod
    __pow__ = pow
    __abs__ = abs

    def __radd__(self, other): return engine.add(other, self)
    def __rsub__(self, other): return engine.sub(other, self)
    def __rmul__(self, other): return engine.mul(other, self)
    def __rtruediv__(self, other): return engine.div(other, self)
    def __rmod__(self, other): return engine.mod(other, self)
    def __rpow__(self, other): return engine.power(other, self)
    def __neg__(self): return engine.negate(self)
    def __pos__(self): return self

    def __eq__(self, other):
        if not engine.is_number(other):
            return NotImplemented
        return engine.equals(self, other)

    def __lt__(self, other): return engine.ordered(self, other, lambda c: c < 0)
    def __le__(self, other): return engine.ordered(self, other, lambda c: c <= 0)
    def __gt__(self, other): return engine.ordered(self, other, lambda c: c > 0)
    def __ge__(self, other): return engine.ordered(self, other, lambda c: c >= 0)

    def __hash__(self):
        return engine.hash_value(self)

    def __bool__(self):
        return not self.is_zero

    def __float__(self):
        return engine.to_f64(self)

    def __int__(self):
        return engine.to_int(engine.truncate(self, 0)).value

    def __floor__(self):
        return engine.to_int(engine.floor(self))

    def __ceil__(self):
        return engine.to_int(engine.ceil(self))

    def __trunc__(self):
        return engine.to_int(engine.truncate(self, 0))

    def __round__(self, ndigits=None):
        if ndigits is None:
            return engine.to_int(engine.round_to(self, 0))
        return engine.round_to(self, ndigits)

    def __str__(self):
        return rendering.render(self)

    def __repr__(self):
        if self.is_complex:
            return f"Float.complex({self.real!r}, {self.imag!r})"
        if self.kind in _SINGLETONS:
            return f"Float({self.kind.name})"
        return f"Float.{self.kind.value}({rendering.canonical(self)!r})"


NAN = Float(FloatKind.NAN)
INFINITY = Float(FloatKind.INFINITY)
NEG_INFINITY = Float(FloatKind.NEG_INFINITY)
FLOAT_ZERO = Float.big(Decimal(0))
FLOAT_ONE = Float.big(Decimal(1))


def imaginary_unit() -> Float:
    return Float.complex(FLOAT_ZERO, FLOAT_ONE)


# The operator, rendering and parsing modules build on the classes above.
import engine  # noqa: E402
import parsing  # noqa: E402
import recurring  # noqa: E402
import rendering  # noqa: E402
