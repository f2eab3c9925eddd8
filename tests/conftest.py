"""Shared fixtures and toy models for the gransac tests."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np
import pytest

from gransac import BaseModel, DegenerateSample, Point2D


class ConstantModel(BaseModel[float]):
    """1D model: every observation should equal one value. k = 1."""
    sample_size = 1

    def __init__(self, sample: Sequence[float]):
        super().__init__(sample)
        (value,) = self.min_sample
        if not math.isfinite(value):
            raise DegenerateSample(f"non-finite value {value!r}")
        self.value = float(value)

    @classmethod
    def fit(cls, sample: Sequence[float]) -> ConstantModel:
        return cls(sample)

    def distance_to(self, observation: float) -> float:
        return abs(float(observation) - self.value)


class ExplodingModel(ConstantModel):
    """Raises an error that is not a fit failure."""

    @classmethod
    def fit(cls, sample: Sequence[float]) -> ExplodingModel:
        raise RuntimeError("bug in model")


def make_line_data(seed: int = 7, n_inliers: int = 80, n_noise: int = 20) -> list[Point2D]:
    """Points exactly on y = 2x + 1 mixed with uniform noise."""
    rng = np.random.default_rng(seed)
    xs = np.linspace(0.0, 10.0, n_inliers)
    inliers = [Point2D(float(x), float(2.0 * x + 1.0)) for x in xs]
    noise = rng.uniform([0.0, 0.0], [10.0, 25.0], size=(n_noise, 2))
    outliers = [Point2D(float(x), float(y)) for x, y in noise]
    data = inliers + outliers
    return [data[i] for i in rng.permutation(len(data))]


@pytest.fixture
def line_data() -> list[Point2D]:
    return make_line_data()


@pytest.fixture
def noise_data() -> list[Point2D]:
    rng = np.random.default_rng(11)
    xy = rng.uniform(0.0, 100.0, size=(50, 2))
    return [Point2D(float(x), float(y)) for x, y in xy]
