"""
Complex arithmetic on (real, imaginary) pairs of real Floats.

Real operands take part as (x, 0). A result whose imaginary part comes out
exactly zero collapses to a real Float, so (3+4i)(3-4i) is the real 25.
"""
from __future__ import annotations
from typing import Callable

import numpy as np

from errors import ErrorCode, NumericError
from values import FLOAT_ZERO, Float
import real_ops
import transcendental


def collapse(re: Float, im: Float) -> Float:
    if im.is_real and im.is_zero:
        return re
    return Float.complex(re, im)


def add(a: Float, b: Float) -> Float:
    (ar, ai), (br, bi) = a.parts(), b.parts()
    return collapse(real_ops.add(ar, br), real_ops.add(ai, bi))


def sub(a: Float, b: Float) -> Float:
    (ar, ai), (br, bi) = a.parts(), b.parts()
    return collapse(real_ops.sub(ar, br), real_ops.sub(ai, bi))


def mul(a: Float, b: Float) -> Float:
    # (a + bi)(c + di) = (ac - bd) + (ad + bc)i
    (ar, ai), (br, bi) = a.parts(), b.parts()
    re = real_ops.sub(real_ops.mul(ar, br), real_ops.mul(ai, bi))
    im = real_ops.add(real_ops.mul(ar, bi), real_ops.mul(ai, br))
    return collapse(re, im)


def _norm(z: Float) -> Float:
    re, im = z.parts()
    return real_ops.add(real_ops.mul(re, re), real_ops.mul(im, im))


def div(a: Float, b: Float) -> Float:
    """
    (a + bi) / (c + di) = ((ac + bd) + (bc - ad)i) / (c^2 + d^2)

    Raises:
        NumericError(DIV_BY_ZERO): c^2 + d^2 == 0
    """
    (ar, ai), (br, bi) = a.parts(), b.parts()
    denominator = _norm(b)
    if denominator.is_zero:
        raise NumericError(ErrorCode.DIV_BY_ZERO)
    re = real_ops.add(real_ops.mul(ar, br), real_ops.mul(ai, bi))
    im = real_ops.sub(real_ops.mul(ai, br), real_ops.mul(ar, bi))
    return collapse(real_ops.div(re, denominator), real_ops.div(im, denominator))


def modulus(z: Float) -> Float:
    """|a + bi| = sqrt(a^2 + b^2)"""
    return transcendental.sqrt(_norm(z))


def conj(z: Float) -> Float:
    re, im = z.parts()
    return Float.complex(re, real_ops.negate(im))


def _half(x: Float) -> Float:
    x = real_ops.div(x, Float.of(2))
    # truncation can leave r - a a hair below zero
    return FLOAT_ZERO if x.is_negative else x


def sqrt(z: Float) -> Float:
    """
    Principal root by the half-angle formula:
      sqrt(a + bi) = sqrt((r + a)/2) + sign(b) i sqrt((r - a)/2),  r = |a + bi|
    """
    a, b = z.parts()
    r = modulus(z)
    re = transcendental.sqrt(_half(real_ops.add(r, a)))
    im = transcendental.sqrt(_half(real_ops.sub(r, a)))
    if b.is_negative:
        im = real_ops.negate(im)
    return collapse(re, im)


def _pi_fraction(numerator: int, denominator: int) -> Float:
    return real_ops.div(real_ops.mul(transcendental.constant("pi"), Float.of(numerator)), Float.of(denominator))


def argument(z: Float) -> Float:
    """
    atan2(b, a) with the quadrants spelled out:
      a = 0:  +-pi/2 by the sign of b
      b = 0:  pi for negative a, else 0
      a < 0:  atan(b/a) +- pi, towards the sign of b
    """
    a, b = z.parts()
    if a.is_zero:
        if b.is_zero:
            raise NumericError(ErrorCode.INVALID_FORMAT, "argument of zero")
        return _pi_fraction(-1 if b.is_negative else 1, 2)
    if b.is_zero:
        return _pi_fraction(1, 1) if a.is_negative else FLOAT_ZERO
    with np.errstate(all="ignore"):
        theta = transcendental.embed(np.arctan(transcendental.project(real_ops.div(b, a))), "atan")
    if a.is_negative:
        pi = transcendental.constant("pi")
        theta = real_ops.sub(theta, pi) if b.is_negative else real_ops.add(theta, pi)
    return theta


def ln(z: Float) -> Float:
    """ln|z| + i arg(z); ln 0 is an invalid format."""
    if z.is_zero:
        raise NumericError(ErrorCode.INVALID_FORMAT, "ln of zero")
    return collapse(transcendental.ln(modulus(z)), argument(z))


def exp(z: Float) -> Float:
    """e^a (cos b + i sin b)"""
    a, b = z.parts()
    scale = transcendental.exp(a)
    return collapse(real_ops.mul(scale, transcendental.cos(b)), real_ops.mul(scale, transcendental.sin(b)))


def sin(z: Float) -> Float:
    # sin(a + bi) = sin a cosh b + i cos a sinh b
    a, b = z.parts()
    re = real_ops.mul(transcendental.sin(a), transcendental.cosh(b))
    im = real_ops.mul(transcendental.cos(a), transcendental.sinh(b))
    return collapse(re, im)


def cos(z: Float) -> Float:
    # cos(a + bi) = cos a cosh b - i sin a sinh b
    a, b = z.parts()
    re = real_ops.mul(transcendental.cos(a), transcendental.cosh(b))
    im = real_ops.negate(real_ops.mul(transcendental.sin(a), transcendental.sinh(b)))
    return collapse(re, im)


def tan(z: Float) -> Float:
    return div(sin(z), cos(z))


def log10(z: Float) -> Float:
    return div(ln(z), transcendental.ln(Float.of(10)))


def log(z: Float, base: Float) -> Float:
    return div(ln(z), ln(base))


def power(base: Float, exponent: Float) -> Float:
    """base^w = exp(w ln base); a zero base gives zero."""
    if base.is_zero:
        return FLOAT_ZERO
    return exp(mul(exponent, ln(base)))


def componentwise(z: Float, fn: Callable[[Float], Float]) -> Float:
    re, im = z.parts()
    return collapse(fn(re), fn(im))
