"""Minimal complex arithmetic used for evaluating transfer functions.

Values are immutable; every operation returns a new Complex. Non-finite
results (division by zero, overflow in exp/cosh) propagate as IEEE inf/nan
instead of raising, so all float work goes through numpy with warnings off.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import numpy as np

from src.core.errors import UnsupportedExponent

Number = Union[int, float, "Complex"]


@dataclass(frozen=True)
class Complex:
    """A complex number (re, im)."""

    re: float
    im: float = 0.0

    def __add__(self, other: Number) -> Complex:
        return add(self, _coerce(other))

    def __radd__(self, other: Number) -> Complex:
        return add(_coerce(other), self)

    def __sub__(self, other: Number) -> Complex:
        return sub(self, _coerce(other))

    def __rsub__(self, other: Number) -> Complex:
        return sub(_coerce(other), self)

    def __mul__(self, other: Number) -> Complex:
        return mul(self, _coerce(other))

    def __rmul__(self, other: Number) -> Complex:
        return mul(_coerce(other), self)

    def __truediv__(self, other: Number) -> Complex:
        return div(self, _coerce(other))

    def __rtruediv__(self, other: Number) -> Complex:
        return div(_coerce(other), self)

    def __pow__(self, other: Number) -> Complex:
        return pow(self, _coerce(other))

    def __repr__(self) -> str:
        sign = "-" if np.signbit(self.im) else "+"
        return f"({self.re} {sign} {abs(self.im)}i)"


@dataclass(frozen=True)
class Polar:
    """Polar form. `angle` is measured with atan2(re, im), see polar()."""

    radius: float
    angle: float


ZERO = Complex(0.0, 0.0)
ONE = Complex(1.0, 0.0)


def _coerce(value: Number) -> Complex:
    if isinstance(value, Complex):
        return value
    return Complex(float(value), 0.0)


def _ieee_div(a: float, b: float) -> float:
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.float64(a) / np.float64(b))


def add(a: Complex, b: Complex) -> Complex:
    return Complex(a.re + b.re, a.im + b.im)


def sub(a: Complex, b: Complex) -> Complex:
    return Complex(a.re - b.re, a.im - b.im)


def mul(a: Complex, b: Complex) -> Complex:
    return Complex(a.re * b.re - a.im * b.im, a.re * b.im + a.im * b.re)


def div(a: Complex, b: Complex) -> Complex:
    """Complex division. Dividing by zero yields nan/inf components."""
    d = b.re * b.re + b.im * b.im
    return Complex(
        _ieee_div(a.re * b.re + a.im * b.im, d),
        _ieee_div(a.im * b.re - a.re * b.im, d),
    )


def neg(z: Complex) -> Complex:
    # Only the real part flips; callers that need -z use sub(ZERO, z).
    return Complex(-z.re, z.im)


def polar(z: Complex) -> Polar:
    """Return (radius, angle) of z.

    The angle is atan2(re, im), i.e. measured from the imaginary axis. Phase
    plots downstream are scaled for this convention, so it is not the usual
    atan2(im, re).
    """
    radius = float(np.sqrt(z.re * z.re + z.im * z.im))
    return Polar(radius, float(np.arctan2(z.re, z.im)))


def exp(z: Complex) -> Complex:
    with np.errstate(over="ignore", invalid="ignore"):
        e = np.exp(np.float64(z.re))
        return Complex(float(e * np.cos(z.im)), float(e * np.sin(z.im)))


def ln(z: Complex) -> Complex:
    p = polar(z)
    with np.errstate(divide="ignore", invalid="ignore"):
        return Complex(float(np.log(np.float64(p.radius))), p.angle)


def pow(base: Complex, exponent: Complex) -> Complex:
    """Raise `base` to a real integer `exponent`.

    Powers are accumulated one step at a time (repeated mul, or repeated div
    from 1 for negative exponents) so results match naive sequential
    arithmetic bit for bit.
    """
    if exponent.im != 0 or not float(exponent.re).is_integer():
        raise UnsupportedExponent()
    k = int(exponent.re)
    if k == 0:
        return ONE
    if k == 1:
        return base
    if k < 0:
        result = ONE
        for _ in range(-k):
            result = div(result, base)
        return result

    result = Complex(base.re, base.im)
    for _ in range(1, k):
        result = mul(result, base)
    return result


def sin(z: Complex) -> Complex:
    with np.errstate(over="ignore", invalid="ignore"):
        return Complex(
            float(np.sin(z.re) * np.cosh(z.im)),
            float(np.cos(z.re) * np.sinh(z.im)),
        )


def cos(z: Complex) -> Complex:
    with np.errstate(over="ignore", invalid="ignore"):
        return Complex(
            float(np.cos(z.re) * np.cosh(z.im)),
            float(-np.sin(z.re) * np.sinh(z.im)),
        )


def tan(z: Complex) -> Complex:
    with np.errstate(over="ignore", invalid="ignore"):
        numerator = Complex(float(np.sin(z.re * 2)), float(np.sinh(z.im * 2)))
        denominator = Complex(float(np.cos(z.re * 2) + np.cosh(z.im * 2)), 0.0)
    return div(numerator, denominator)


def unit(theta: float) -> Complex:
    """The point (cos theta, sin theta) on the unit circle."""
    return Complex(float(np.cos(theta)), float(np.sin(theta)))
