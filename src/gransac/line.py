"""
2D line model utilities.

The line through two points is kept in slope/intercept form

    y = m*x + d

and, for distance evaluation, in implicit form

    a*x + b*y + c = 0,   a = m, b = -1, c = d

Point-to-line distance:

    dist = |a*x + b*y + c| / sqrt(a^2 + b^2)

The denominator only depends on the line, so it is computed once per fit.
Vertical lines have no slope: two points sharing x are a degenerate sample.
"""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Sequence, TypeAlias

import numpy as np

from .errors import DegenerateSample
from .types import FloatArray

# (N,2) float64 array of [x, y] rows
Points2D: TypeAlias = FloatArray


@dataclass(frozen=True)
class Point2D:
    """One 2D measurement."""
    x: float
    y: float


@dataclass(frozen=True)
class LineParams:
    slope: float        # m
    intercept: float    # d
    a: float
    b: float
    c: float
    dist_denominator: float     # sqrt(a^2 + b^2)


def as_array(points: Sequence[Point2D]) -> Points2D:
    """
    Convert a sequence of Point2D -> (N,2) float64 array.
    """
    out = np.empty((len(points), 2), dtype=np.float64)
    for i, p in enumerate(points):
        out[i, 0] = p.x
        out[i, 1] = p.y
    return out


def fit_line_two_points(p1: Point2D, p2: Point2D) -> LineParams:
    """
    Line through exactly two points.

    Raises DegenerateSample when the slope is undefined (same x, which
    includes coincident points) or the result is not finite.
    """
    dx = float(p2.x) - float(p1.x)
    dy = float(p2.y) - float(p1.y)
    if dx == 0.0:
        raise DegenerateSample(f"points {p1} and {p2} share x, slope is undefined")

    m = dy / dx
    d = float(p1.y) - m * float(p1.x)
    if not (math.isfinite(m) and math.isfinite(d)):
        raise DegenerateSample(f"non-finite line through {p1} and {p2}")

    # m*x - y + d = 0
    a, b, c = m, -1.0, d
    # hypot does not overflow for steep lines where a*a would
    denom = math.hypot(a, b)
    return LineParams(
        slope=m,
        intercept=d,
        a=a,
        b=b,
        c=c,
        dist_denominator=denom,
    )


def point_line_distance(line: LineParams, p: Point2D) -> float:
    numer = abs(line.a * p.x + line.b * p.y + line.c)
    return numer / line.dist_denominator


def residuals_line(line: LineParams, pts: Points2D) -> FloatArray:
    """
    Vectorised point-to-line distance for (N,2) points. Returns shape (N,).
    """
    if pts.ndim != 2 or pts.shape[1] != 2:
        raise ValueError(f"Expected pts shape (N,2), got {pts.shape}")
    numer = np.abs(line.a * pts[:, 0] + line.b * pts[:, 1] + line.c)
    return (numer / line.dist_denominator).astype(np.float64)
