"""
Exception taxonomy for the RANSAC engine.

Two families:
- Whole-call errors: ConfigurationError, InsufficientData
  (the operation is rejected before any trial runs)
- Per-trial fit errors: SampleSizeMismatch, DegenerateSample
  (raised by Model.fit, caught by the engine and scored as zero consensus)
"""

from __future__ import annotations


class RansacError(Exception):
    """Root of every error raised by gransac."""


class ConfigurationError(RansacError, ValueError):
    """Invalid estimator configuration (threshold, iteration count, workers)."""


class InsufficientData(RansacError):
    """
    Not enough observations to draw a minimal sample AND leave something to score.
    Estimate needs strictly more than k observations.
    """

    def __init__(self, num_observations: int, sample_size: int):
        self.num_observations = num_observations
        self.sample_size = sample_size
        super().__init__(
            f"need more than {sample_size} observations, got {num_observations}"
        )


class ModelFitError(RansacError):
    """A candidate model could not be fitted from its minimal sample."""


class SampleSizeMismatch(ModelFitError):
    def __init__(self, expected: int, got: int):
        self.expected = expected
        self.got = got
        super().__init__(f"expected a minimal sample of {expected} observations, got {got}")


class DegenerateSample(ModelFitError):
    """The minimal sample does not determine a unique model (e.g. coincident points)."""
