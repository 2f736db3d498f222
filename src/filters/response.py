"""Frequency response of a term list on the unit circle.

H(z) = sum(c_k z^offset_k for x terms) / sum(c_k z^offset_k for y terms),
evaluated at z = (cos theta, sin theta) for evenly spaced theta.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from src.core import complex as cx
from src.core.complex import Complex
from src.filters.transfer_function import Term, TermKind

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResponseSample:
    """H evaluated at one angle, with its polar magnitude and phase."""

    theta: float
    value: Complex
    magnitude: float
    phase: float


def transfer_function(terms: Sequence[Term]) -> tuple[list[Term], list[Term]]:
    """Split terms into (numerator: x terms, denominator: y terms)."""
    numerator = [t for t in terms if t.kind == TermKind.X]
    denominator = [t for t in terms if t.kind == TermKind.Y]
    return numerator, denominator


def polynomial(terms: Sequence[Term], z: Complex) -> Complex:
    """Sum of coefficient * z^offset, accumulated from zero in list order."""
    total = cx.ZERO
    for term in terms:
        power = cx.pow(z, Complex(float(term.offset), 0.0))
        total = cx.add(total, cx.mul(Complex(term.coefficient, 0.0), power))
    return total


def evaluate_transfer(terms: Sequence[Term], z: Complex) -> Complex:
    """H(z) for the given terms at a single point."""
    numerator, denominator = transfer_function(terms)
    return cx.div(polynomial(numerator, z), polynomial(denominator, z))


def frequency_response(
    terms: Sequence[Term],
    points: int = 800,
    span: float = math.pi,
) -> list[ResponseSample]:
    """Sample H on the unit circle at theta = i / points * span, i < points."""
    numerator, denominator = transfer_function(terms)
    log.debug(
        "Sampling %d points: %d numerator / %d denominator terms",
        points, len(numerator), len(denominator),
    )

    samples: list[ResponseSample] = []
    for theta in np.linspace(0.0, span, points, endpoint=False):
        value = evaluate_transfer(terms, cx.unit(float(theta)))
        p = cx.polar(value)
        samples.append(ResponseSample(float(theta), value, p.radius, p.angle))
    return samples


def magnitudes(samples: Sequence[ResponseSample]) -> np.ndarray:
    return np.array([s.magnitude for s in samples])


def phases(samples: Sequence[ResponseSample]) -> np.ndarray:
    return np.array([s.phase for s in samples])
