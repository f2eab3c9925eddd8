"""
gransac: generic random sample consensus

This package provides:
- A reusable, model-agnostic RANSAC estimator with reproducible parallel trials
- The model contract (ConsensusModel protocol + BaseModel adapter)
- Typed result containers
- A 2D line model as a reference implementation of the contract
"""

import logging

from .errors import (
    RansacError, ConfigurationError, InsufficientData,
    ModelFitError, SampleSizeMismatch, DegenerateSample,
)

from .types import (
    FloatArray, BoolArray,
    ConsensusModel, EvaluationResult, RansacResult, TrialResult,
)

from .model import BaseModel, evaluate_by_distance, inlier_mask

from .core import (
    DEFAULT_MAX_ITERATIONS, RansacParams, Estimator, EstimatorState,
    draw_minimal_sample, ransac, resolve_workers, run_trial, select_best, trial_rng,
)

from .line import Point2D, Points2D, LineParams, fit_line_two_points, residuals_line

from .line_model import Line2DModel

from .logger import setup_logger

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "RansacError", "ConfigurationError", "InsufficientData",
    "ModelFitError", "SampleSizeMismatch", "DegenerateSample",
    "FloatArray", "BoolArray",
    "ConsensusModel", "EvaluationResult", "RansacResult", "TrialResult",
    "BaseModel", "evaluate_by_distance", "inlier_mask",
    "DEFAULT_MAX_ITERATIONS", "RansacParams", "Estimator", "EstimatorState",
    "draw_minimal_sample", "ransac", "resolve_workers", "run_trial", "select_best", "trial_rng",
    "Point2D", "Points2D", "LineParams", "fit_line_two_points", "residuals_line",
    "Line2DModel",
    "setup_logger",
]
