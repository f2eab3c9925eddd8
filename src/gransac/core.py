"""
Generic RANSAC estimator (model-agnostic).

RANSAC overview:
- Randomly sample a *minimal* subset of k observations
- Fit a candidate model from that subset
- Score the remaining observations by their distance to the candidate
- Mark inliers where distance < threshold
- Keep the candidate with the highest inlier fraction

Every trial is independent:
- trial i draws from its own random stream, derived from (base seed, i)
- trial i writes only to output slot i
so trials can run on any number of workers, in any order, and the result only
depends on the base seed and the input.

Uses the ConsensusModel Protocol from types.py.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
import logging
import math
import os
import threading
from typing import Generic, Optional, Sequence

import numpy as np

from .errors import ConfigurationError, InsufficientData, ModelFitError, RansacError
from .types import O, ConsensusModel, EvaluationResult, RansacResult, TrialResult

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 1000


# ---------- Configuration ----------
@dataclass(frozen=True)
class RansacParams:
    """
    threshold: inlier distance bound (distance < threshold is an inlier), > 0
    max_iterations: number of trials run by every estimate, > 0
    """
    threshold: float
    max_iterations: int = DEFAULT_MAX_ITERATIONS

    def __post_init__(self) -> None:
        try:
            t = float(self.threshold)
            iterations = int(self.max_iterations)
        except (TypeError, ValueError, OverflowError) as exc:
            raise ConfigurationError(
                f"threshold and max_iterations must be numbers, got {self.threshold!r} and {self.max_iterations!r}"
            ) from exc
        if not math.isfinite(t) or t <= 0.0:
            raise ConfigurationError(f"threshold must be a finite value > 0, got {self.threshold!r}")
        if isinstance(self.max_iterations, bool) or iterations != self.max_iterations:
            raise ConfigurationError(f"max_iterations must be an integer, got {self.max_iterations!r}")
        if iterations <= 0:
            raise ConfigurationError(f"max_iterations must be > 0, got {self.max_iterations}")
        object.__setattr__(self, "threshold", t)
        object.__setattr__(self, "max_iterations", iterations)


def resolve_workers(degree_of_parallelism: Optional[int]) -> int:
    """
    None -> hardware parallelism reported by the OS. Always at least 1.
    """
    if degree_of_parallelism is None:
        return max(1, os.cpu_count() or 1)
    try:
        workers = int(degree_of_parallelism)
    except (TypeError, ValueError, OverflowError) as exc:
        raise ConfigurationError(
            f"degree_of_parallelism must be an integer, got {degree_of_parallelism!r}"
        ) from exc
    if workers < 1:
        raise ConfigurationError(
            f"degree_of_parallelism must be >= 1, got {degree_of_parallelism}"
        )
    return workers


# ---------- Per-trial randomness ----------
def trial_rng(seed: int, trial_index: int) -> np.random.Generator:
    """
    Random stream of one trial.

    Same construction as SeedSequence(seed).spawn(n)[trial_index]: statistically
    independent children keyed by trial index, not by worker.
    """
    ss = np.random.SeedSequence(entropy=seed, spawn_key=(trial_index,))
    return np.random.default_rng(ss)


def draw_minimal_sample(
        data: Sequence[O],
        sample_size: int,
        rng: np.random.Generator,
) -> tuple[tuple[O, ...], tuple[O, ...]]:
    """
    Uniformly permute the data; the first k elements are the minimal sample,
    the rest is the evaluation batch.

    One O(n) shuffle, so there is no retry loop on repeated indices.
    """
    perm = rng.permutation(len(data))
    sample = tuple(data[i] for i in perm[:sample_size])
    remainder = tuple(data[i] for i in perm[sample_size:])
    return sample, remainder


def run_trial(
        model_type: type[ConsensusModel[O]],
        data: Sequence[O],
        threshold: float,
        *,
        seed: int,
        trial_index: int,
) -> TrialResult[O]:
    """
    One sample -> fit -> evaluate cycle.

    A model-fit failure is not fatal: the trial scores 0 with no inliers.
    Anything else raised by the model propagates.
    """
    rng = trial_rng(seed, trial_index)
    sample, remainder = draw_minimal_sample(data, model_type.sample_size, rng)

    try:
        model = model_type.fit(sample)
    except ModelFitError as exc:
        logger.debug("trial %d: fit failed (%s)", trial_index, exc)
        return TrialResult(index=trial_index, evaluation=EvaluationResult.empty(), error=exc)

    evaluation = model.evaluate(remainder, threshold)
    return TrialResult(index=trial_index, evaluation=evaluation, model=model)


def select_best(trials: Sequence[TrialResult[O]]) -> Optional[TrialResult[O]]:
    """
    Sequential reduction over trial slots in index order.

    Primary criterion: strictly greater inlier fraction replaces the current best.
    Tie: the earlier trial index is kept.
    Failed trials (no model) never win.
    """
    best: Optional[TrialResult[O]] = None
    for trial in trials:
        if trial.failed:
            continue
        if best is None or trial.score > best.score:
            best = trial
            logger.debug("better model: trial=%d fraction=%.4f", trial.index, trial.score)
    return best


# ---------- Estimator ----------
class EstimatorState(str, Enum):
    UNCONFIGURED = "unconfigured"
    CONFIGURED = "configured"
    RUNNING = "running"
    READY = "ready"


@dataclass(eq=False)
class Estimator(Generic[O]):
    """
    Stateful, re-entrant RANSAC estimator.

    - initialize(threshold, max_iterations)
    - estimate(data) -> bool
    - best_model / best_inliers (the last successful estimate)

    A successful estimate replaces the stored best result as a whole, unless
    every trial failed to fit (nothing to store). A failed estimate leaves it
    untouched.

    seed:
      base seed for the per-trial streams. None draws fresh entropy on every
      estimate; the value used is recorded in best_result.seed.
    degree_of_parallelism:
      worker threads used for the trials. None uses os.cpu_count().
    """
    model_type: type[ConsensusModel[O]]
    seed: Optional[int] = 0
    degree_of_parallelism: Optional[int] = None

    # ---------- Internal state -----------
    _params: Optional[RansacParams] = field(default=None, init=False, repr=False)
    _best: Optional[RansacResult[O]] = field(default=None, init=False, repr=False)
    _last_error: Optional[RansacError] = field(default=None, init=False, repr=False)
    _running: bool = field(default=False, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def __post_init__(self) -> None:
        k = getattr(self.model_type, "sample_size", None)
        if not isinstance(k, int) or k < 1:
            raise ConfigurationError(
                f"{getattr(self.model_type, '__name__', self.model_type)!r} must define sample_size >= 1"
            )
        if self.seed is not None:
            try:
                seed = int(self.seed)
            except (TypeError, ValueError, OverflowError) as exc:
                raise ConfigurationError(f"seed must be a non-negative integer or None, got {self.seed!r}") from exc
            if isinstance(self.seed, bool) or seed != self.seed or seed < 0:
                raise ConfigurationError(f"seed must be a non-negative integer or None, got {self.seed!r}")
            self.seed = seed
        # validate early, resolved again per call
        resolve_workers(self.degree_of_parallelism)

    # ---------- Configuration -----------
    def initialize(self, threshold: float, max_iterations: int = DEFAULT_MAX_ITERATIONS) -> None:
        """
        Store configuration. Does not touch a previously stored best result.
        """
        self._params = RansacParams(threshold=threshold, max_iterations=max_iterations)

    @property
    def params(self) -> Optional[RansacParams]:
        return self._params

    @property
    def sample_size(self) -> int:
        return self.model_type.sample_size

    @property
    def state(self) -> EstimatorState:
        if self._running:
            return EstimatorState.RUNNING
        if self._best is not None:
            return EstimatorState.READY
        if self._params is not None:
            return EstimatorState.CONFIGURED
        return EstimatorState.UNCONFIGURED

    # ---------- Results -----------
    @property
    def best_result(self) -> Optional[RansacResult[O]]:
        return self._best

    @property
    def best_model(self) -> Optional[ConsensusModel[O]]:
        return None if self._best is None else self._best.model

    @property
    def best_inliers(self) -> tuple[O, ...]:
        """
        Consensus set of the best model. Drawn from the winning trial's
        evaluation batch only, so the k fitting observations are not included.
        """
        return () if self._best is None else self._best.inliers

    @property
    def last_error(self) -> Optional[RansacError]:
        """Why the most recent estimate returned False, None after a success."""
        return self._last_error

    def get_best_model(self) -> Optional[ConsensusModel[O]]:
        return self.best_model

    def get_best_inliers(self) -> tuple[O, ...]:
        return self.best_inliers

    # ---------- Main entry -----------
    def estimate(self, data: Sequence[O]) -> bool:
        """
        Run max_iterations independent trials over data and keep the best one.

        Returns False (no trial run) when len(data) <= k. Raises
        ConfigurationError before initialize(). When no trial could fit a
        model the call still succeeds, but there is nothing to store and the
        previous best result is kept.
        """
        if self._params is None:
            raise ConfigurationError("estimate() called before initialize()")

        with self._lock:
            self._running = True
            try:
                result, error = self._estimate(tuple(data), self._params)
            finally:
                self._running = False

            self._last_error = error
            if error is not None:
                return False
            if result is not None:
                self._best = result
            return True

    def _estimate(
            self,
            data: tuple[O, ...],
            params: RansacParams,
    ) -> tuple[Optional[RansacResult[O]], Optional[RansacError]]:
        k = self.sample_size
        n = len(data)
        if n <= k:
            logger.warning("RANSAC - number of data points (%d) is too small for k=%d, not doing anything", n, k)
            return None, InsufficientData(n, k)

        seed = self.seed if self.seed is not None else int(np.random.SeedSequence().entropy)
        iterations = params.max_iterations
        workers = min(resolve_workers(self.degree_of_parallelism), iterations)
        logger.info("RANSAC - %d trials over %d observations on %d worker(s)", iterations, n, workers)

        # one slot per trial, filled by exactly one worker
        slots: list[Optional[TrialResult[O]]] = [None] * iterations

        def run_range(start: int, stop: int) -> None:
            for i in range(start, stop):
                slots[i] = run_trial(self.model_type, data, params.threshold, seed=seed, trial_index=i)

        if workers == 1:
            run_range(0, iterations)
        else:
            bounds = np.linspace(0, iterations, workers + 1).astype(int)
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="gransac") as pool:
                futures = [
                    pool.submit(run_range, int(lo), int(hi))
                    for lo, hi in zip(bounds[:-1], bounds[1:])
                    if hi > lo
                ]
                # re-raises the first unexpected error from any worker
                for fut in futures:
                    fut.result()

        trials = [t for t in slots if t is not None]
        if len(trials) != iterations:
            raise RuntimeError(f"RANSAC - {iterations - len(trials)} trial slots were not filled")

        failed = sum(1 for t in trials if t.failed)
        best = select_best(trials)
        if best is None:
            logger.warning("RANSAC - all %d trials failed to fit a model", iterations)
            return None, None

        logger.debug(
            "RANSAC - best trial=%d fraction=%.4f inliers=%d failed_trials=%d",
            best.index, best.score, best.evaluation.num_inliers, failed,
        )

        return RansacResult(
            model=best.model,
            inliers=best.evaluation.inliers,
            inlier_fraction=best.score,
            trial_index=best.index,
            iterations=iterations,
            failed_trials=failed,
            threshold=params.threshold,
            seed=seed,
        ), None


def ransac(
        model_type: type[ConsensusModel[O]],
        data: Sequence[O],
        *,
        threshold: float,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        seed: Optional[int] = 0,
        degree_of_parallelism: Optional[int] = None,
) -> Optional[RansacResult[O]]:
    """
    One-shot RANSAC.

    Inputs:
    - model_type: class implementing ConsensusModel (e.g. Line2DModel)
    - data: observations of the model's observation type
    - threshold: inlier distance bound
    - max_iterations: number of trials
    - seed: base seed for reproducibility
    - degree_of_parallelism: worker threads

    Returns:
    - RansacResult with best model + inliers, or None if it fails.
    """
    estimator = Estimator(model_type, seed=seed, degree_of_parallelism=degree_of_parallelism)
    estimator.initialize(threshold, max_iterations)
    if not estimator.estimate(data):
        return None
    return estimator.best_result
