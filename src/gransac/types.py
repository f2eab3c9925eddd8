"""
Shared typed primitives for the RANSAC engine.

Defines:
- Typed NumPy aliases
- Generic model protocol (the contract a pluggable model type must satisfy)
- Evaluation result of one model against a batch
- Structured RANSAC result container (model + inliers + stats)

Observations are opaque to the engine: it only reads and reorders references
to them. The concrete observation type is chosen by the model type.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Generic, Optional, Protocol, Sequence, TypeVar, TypeAlias

import numpy as np
import numpy.typing as npt

# ---------- Numpy typing aliases ----------
FloatArray: TypeAlias = npt.NDArray[np.float64]
BoolArray: TypeAlias = npt.NDArray[np.bool_]

# ---------- Generic typing ----------
# O: observation type
O = TypeVar("O")


# ---------- Evaluation output ----------
@dataclass(frozen=True)
class EvaluationResult(Generic[O]):
    """
    Score of one model against one batch.

    inlier_fraction = len(inliers) / len(batch), 0.0 for an empty batch.
    inliers keep the batch's relative order.
    """
    inlier_fraction: float
    inliers: tuple[O, ...]

    @property
    def num_inliers(self) -> int:
        return len(self.inliers)

    @classmethod
    def empty(cls) -> EvaluationResult[O]:
        return cls(inlier_fraction=0.0, inliers=())


class ConsensusModel(Protocol[O]):
    """
    Interface that a model must implement to be usable by the generic RANSAC engine.

    RANSAC steps per trial:
    1) Fit a model from a minimal sample of exactly `sample_size` observations
    2) Score the remaining observations by distance to the model
    3) Keep those with distance < threshold as the consensus set
    """

    # k: minimal number of observations that determine one model
    sample_size: ClassVar[int]

    @classmethod
    def fit(cls, sample: Sequence[O]) -> ConsensusModel[O]:
        """
        Fit from exactly `sample_size` observations.
        Raise SampleSizeMismatch for a wrong count, DegenerateSample if the
        sample cannot determine a valid model.
        """
        ...

    @property
    def min_sample(self) -> tuple[O, ...]:
        """The observations this model was fitted from."""
        ...

    def distance_to(self, observation: O) -> float:
        """Nonnegative, deterministic, side-effect-free distance to the model."""
        ...

    def evaluate(self, batch: Sequence[O], threshold: float) -> EvaluationResult[O]:
        """Split batch into inliers (distance < threshold) and the rest."""
        ...


# ---------- RANSAC output container ----------
# frozen=True: the estimator swaps the whole result at once, callers only read it
@dataclass(frozen=True)
class RansacResult(Generic[O]):
    model: ConsensusModel[O]    # best model found
    inliers: tuple[O, ...]      # consensus set from the winning trial's evaluation batch
    inlier_fraction: float      # score of the winning trial
    trial_index: int            # index of the winning trial
    iterations: int             # how many trials were run
    failed_trials: int          # trials whose minimal sample could not be fitted
    threshold: float            # the inlier threshold used
    seed: int                   # base seed the trial streams were derived from

    @property
    def num_inliers(self) -> int:
        return len(self.inliers)


@dataclass(frozen=True)
class TrialResult(Generic[O]):
    """
    Output slot of one trial. A failed fit keeps model=None and scores 0.
    """
    index: int
    evaluation: EvaluationResult[O]
    model: Optional[ConsensusModel[O]] = None
    error: Optional[Exception] = None

    @property
    def score(self) -> float:
        return self.evaluation.inlier_fraction

    @property
    def failed(self) -> bool:
        return self.model is None
