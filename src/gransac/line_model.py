"""
Adapter: makes the line functions conform to the ConsensusModel contract.

Observation type: Point2D. Minimal sample: 2 points.
"""

from __future__ import annotations

from typing import Sequence

from .line import (
    LineParams, Point2D, as_array, fit_line_two_points,
    point_line_distance, residuals_line,
)
from .model import BaseModel
from .types import FloatArray


class Line2DModel(BaseModel[Point2D]):
    sample_size = 2

    def __init__(self, sample: Sequence[Point2D]):
        super().__init__(sample)
        p1, p2 = self.min_sample
        self._line: LineParams = fit_line_two_points(p1, p2)

    @classmethod
    def fit(cls, sample: Sequence[Point2D]) -> Line2DModel:
        return cls(sample)

    @property
    def params(self) -> LineParams:
        return self._line

    @property
    def slope(self) -> float:
        return self._line.slope

    @property
    def intercept(self) -> float:
        return self._line.intercept

    def distance_to(self, observation: Point2D) -> float:
        return point_line_distance(self._line, observation)

    def distances(self, batch: Sequence[Point2D]) -> FloatArray:
        # one numpy pass instead of a Python loop over distance_to
        return residuals_line(self._line, as_array(batch))

    def __repr__(self) -> str:
        return f"Line2DModel(slope={self.slope!r}, intercept={self.intercept!r})"
