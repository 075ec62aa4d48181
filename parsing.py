"""
Text -> Integer / Float.

Integer grammar:  [+-] ( digits | 0x hex | 0b bin | 0o oct )     `_` allowed after a prefix
Float grammar:    [+-] nan | inf | infinity
                  [+-] digits [. digits] [(cycle)] [e [+-] digits] [...]
                  real [+-] real? i                                  complex

A repeating part `a.b(c)` is read as the exact rational it stands for and
materialized like any other repeating result. A trailing `...` marks the
digits as an irrational approximation.

The strict functions raise ParseError; the lenient ones fall back to
Integer(0) and NaN.
"""
from __future__ import annotations
from decimal import Decimal
from typing import Optional, Tuple

from arithmetic import MAX_DIVISION_DIGITS, Q, expansion_to_q, int_from_digits
from errors import ErrorCode, NumericError
from values import FLOAT_ONE, FLOAT_ZERO, INFINITY, NAN, NEG_INFINITY, Float, Integer
import recurring

_SPECIALS = ("nan", "inf", "infinity")
_PREFIXES = {"0x": 16, "0b": 2, "0o": 8}
IRRATIONAL_MARKER = "..."


class ParseError(NumericError, ValueError):
    def __init__(self, detail: str):
        super().__init__(ErrorCode.INVALID_FORMAT, detail)


def expect_char(s: str, i: int, ch: str):
    if i >= len(s) or s[i] != ch:
        raise ParseError(f"Expected '{ch}' at position {i} in {s!r}")
    return i + 1


def parse_sign(s: str, i: int) -> Tuple[bool, int]:
    if i < len(s) and s[i] in "+-":
        return s[i] == "-", i + 1
    return False, i


def parse_digits(s: str, i: int) -> Tuple[str, int]:
    start = i
    while i < len(s) and s[i].isdigit() and s[i].isascii():
        i += 1
    return s[start:i], i


def _digit_value(c: str) -> int:
    if "0" <= c <= "9":
        return ord(c) - ord("0")
    if "a" <= c.lower() <= "z":
        return ord(c.lower()) - ord("a") + 10
    return 99


def _accumulate(s: str, radix: int) -> int:
    """acc = acc * radix + digit over `s`, skipping `_` separators."""
    acc = 0
    seen = False
    for i, c in enumerate(s):
        if c == "_":
            continue
        d = _digit_value(c)
        if d >= radix:
            raise ParseError(f"Invalid base-{radix} digit {c!r} at position {i} in {s!r}")
        acc = acc * radix + d
        seen = True
    if not seen:
        raise ParseError(f"No base-{radix} digits in {s!r}")
    return acc


def parse_radix(text: str, radix: int) -> Integer:
    """Signed integer in base 2..36; `_` separators are skipped."""
    if not 2 <= radix <= 36:
        raise ParseError(f"Radix {radix} is outside 2..36")
    s = text.strip()
    negative, i = parse_sign(s, 0)
    value = _accumulate(s[i:], radix)
    return Integer(-value if negative else value)


def parse_hex(text: str) -> Integer:
    """[+-][0x]hexdigits, `_` separators allowed."""
    s = text.strip()
    negative, i = parse_sign(s, 0)
    if s[i:i + 2].lower() == "0x":
        i += 2
    value = _accumulate(s[i:], 16)
    return Integer(-value if negative else value)


def parse_int_strict(text: str) -> Integer:
    s = text.strip()
    if not s:
        raise ParseError("Empty integer literal")
    negative, i = parse_sign(s, 0)
    body = s[i:]
    if body.lower() in _SPECIALS:
        raise ParseError(f"{body!r} is not an integer")
    radix = _PREFIXES.get(body[:2].lower())
    if radix is not None:
        value = _accumulate(body[2:], radix)
        return Integer(-value if negative else value)

    digits, i = parse_digits(s, i)
    if i < len(s) and s[i] == ".":
        raise ParseError(f"{s!r} is not an integer")
    if not digits:
        raise ParseError(f"Expected digit at position {i} in {s!r}")
    if i != len(s):
        raise ParseError(f"Unexpected trailing content at position {i} in {s!r}")
    value = int_from_digits(digits)
    return Integer(-value if negative else value)


def parse_int(text: str) -> Integer:
    """Lenient integer parse: malformed text gives 0."""
    try:
        return parse_int_strict(text)
    except ParseError:
        return Integer(0)


def _parse_exponent(s: str, i: int) -> Tuple[int, int]:
    if i < len(s) and s[i] in "eE":
        negative, i = parse_sign(s, i + 1)
        digits, i = parse_digits(s, i)
        if not digits:
            raise ParseError(f"Expected exponent digits at position {i} in {s!r}")
        e = int(digits)
        return (-e if negative else e), i
    return 0, i


def parse_real(s: str) -> Float:
    """A signed real literal (no imaginary part)."""
    s = s.strip()
    negative, i = parse_sign(s, 0)
    word = s[i:].lower()
    if word == "nan":
        return NAN
    if word in ("inf", "infinity"):
        return NEG_INFINITY if negative else INFINITY

    irrational = s.endswith(IRRATIONAL_MARKER)
    if irrational:
        s = s[:-len(IRRATIONAL_MARKER)]

    int_part, i = parse_digits(s, i)
    frac, cycle = "", None
    if i < len(s) and s[i] == ".":
        frac, i = parse_digits(s, i + 1)
        if i < len(s) and s[i] == "(":
            cycle, i = parse_digits(s, i + 1)
            i = expect_char(s, i, ")")
            if not cycle:
                raise ParseError(f"Empty repeating block in {s!r}")
    if not (int_part or frac):
        raise ParseError(f"Expected digit at position {i} in {s!r}")
    exponent, i = _parse_exponent(s, i)
    if i != len(s):
        raise ParseError(f"Unexpected trailing content at position {i} in {s!r}")

    if cycle is not None:
        if irrational:
            raise ParseError(f"A repeating value cannot be irrational: {s!r}")
        if abs(exponent) > MAX_DIVISION_DIGITS:
            raise NumericError(ErrorCode.NUMBER_TOO_LARGE, f"exponent {exponent} on a repeating value")
        q = expansion_to_q(negative, int_from_digits(int_part or "0"), frac, cycle)
        return recurring.materialize(q * Q(10) ** exponent)

    d = Decimal(f"{'-' if negative else ''}{int_part or '0'}.{frac}E{exponent}")
    return Float.irrational(d) if irrational else Float.big(d)


def _split_complex(body: str) -> Tuple[Optional[str], str]:
    """Split `a+b` at the last sign that is neither leading nor an exponent sign."""
    for k in range(len(body) - 1, 0, -1):
        if body[k] in "+-" and body[k - 1] not in "eE":
            return body[:k], body[k:]
    return None, body


def _coefficient(text: str) -> Float:
    if text in ("", "+"):
        return FLOAT_ONE
    if text == "-":
        return -FLOAT_ONE
    return parse_real(text)


def parse_float_strict(text: str) -> Float:
    s = text.strip()
    if not s:
        raise ParseError("Empty float literal")
    if s.endswith(("i", "I")) and s.lower().lstrip("+-") not in _SPECIALS:
        real_text, imag_text = _split_complex(s[:-1].strip())
        real = parse_real(real_text) if real_text is not None else FLOAT_ZERO
        return Float.complex(real, _coefficient(imag_text.replace(" ", "")))
    return parse_real(s)


def parse_float(text: str) -> Float:
    """Lenient float parse: malformed text gives NaN."""
    try:
        return parse_float_strict(text)
    except NumericError:
        return NAN


def create_complex(real_text: str, imag_text: str) -> Float:
    """real + imag*i from two real literals; the result stays complex even for a zero imaginary part."""
    return Float.complex(parse_real(real_text), parse_real(imag_text))


def parse_number(text: str):
    """Integer when the text is an integer literal, otherwise Float."""
    try:
        return parse_int_strict(text)
    except ParseError:
        return parse_float_strict(text)
