"""
Adapter glue: a base class that turns a model's distance function into the full
ConsensusModel contract.

Subclasses provide:
- sample_size (k)
- fit(sample): build the model, caching whatever distance_to needs
- distance_to(observation)

and inherit:
- min_sample bookkeeping
- sample-size checking
- batch distances (override `distances` with a vectorised version when possible)
- evaluate(batch, threshold)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, Generic, Sequence

import numpy as np

from .errors import SampleSizeMismatch
from .types import O, FloatArray, BoolArray, EvaluationResult


def inlier_mask(distances: FloatArray, threshold: float) -> BoolArray:
    """
    Inliers are those with distance < threshold (strict).
    """
    return np.asarray(distances, dtype=np.float64) < float(threshold)


def evaluate_by_distance(
        batch: Sequence[O],
        distances: FloatArray,
        threshold: float,
) -> EvaluationResult[O]:
    """
    Build an EvaluationResult from per-observation distances.

    - distances: shape (N,), one per batch element, same order
    - empty batch -> fraction 0 and no inliers
    """
    n = len(batch)
    if n == 0:
        return EvaluationResult.empty()

    distances = np.asarray(distances, dtype=np.float64)
    if distances.shape != (n,):
        raise ValueError(f"Expected distances shape ({n},), got {distances.shape}")

    mask = inlier_mask(distances, threshold)

    # np.flatnonzero is ascending, so batch order is preserved
    inliers = tuple(batch[i] for i in np.flatnonzero(mask))
    return EvaluationResult(inlier_fraction=len(inliers) / float(n), inliers=inliers)


class BaseModel(ABC, Generic[O]):
    sample_size: ClassVar[int]

    def __init__(self, sample: Sequence[O]):
        self._min_sample: tuple[O, ...] = self.check_sample(sample)

    @classmethod
    def check_sample(cls, sample: Sequence[O]) -> tuple[O, ...]:
        """
        Freeze the sample and verify it holds exactly k observations.
        """
        sample = tuple(sample)
        if len(sample) != cls.sample_size:
            raise SampleSizeMismatch(expected=cls.sample_size, got=len(sample))
        return sample

    @classmethod
    @abstractmethod
    def fit(cls, sample: Sequence[O]) -> BaseModel[O]:
        ...

    @property
    def min_sample(self) -> tuple[O, ...]:
        return self._min_sample

    @abstractmethod
    def distance_to(self, observation: O) -> float:
        ...

    def distances(self, batch: Sequence[O]) -> FloatArray:
        return np.fromiter(
            (self.distance_to(obs) for obs in batch),
            dtype=np.float64,
            count=len(batch),
        )

    def evaluate(self, batch: Sequence[O], threshold: float) -> EvaluationResult[O]:
        return evaluate_by_distance(batch, self.distances(batch), threshold)
