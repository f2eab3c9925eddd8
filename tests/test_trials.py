"""Tests for per-trial sampling, trial execution and the reduction."""

import numpy as np
import pytest

from gransac import (
    DegenerateSample, EvaluationResult, Line2DModel, Point2D, TrialResult,
    draw_minimal_sample, run_trial, select_best, trial_rng,
)

from conftest import ConstantModel, ExplodingModel


def _trial(index, fraction, model=object()):
    return TrialResult(
        index=index,
        evaluation=EvaluationResult(inlier_fraction=fraction, inliers=()),
        model=model,
    )


class TestTrialRng:

    def test_same_index_same_stream(self):
        a = trial_rng(5, 3).integers(0, 1_000_000, size=8)
        b = trial_rng(5, 3).integers(0, 1_000_000, size=8)
        np.testing.assert_array_equal(a, b)

    def test_streams_differ_by_index_and_seed(self):
        a = trial_rng(5, 3).integers(0, 1_000_000, size=8)
        b = trial_rng(5, 4).integers(0, 1_000_000, size=8)
        c = trial_rng(6, 3).integers(0, 1_000_000, size=8)
        assert not np.array_equal(a, b)
        assert not np.array_equal(a, c)

    def test_matches_spawned_children(self):
        children = np.random.SeedSequence(9).spawn(4)
        expected = np.random.default_rng(children[2]).random(5)
        np.testing.assert_array_equal(trial_rng(9, 2).random(5), expected)


class TestDrawMinimalSample:

    def test_partition(self):
        data = list(range(20))
        sample, remainder = draw_minimal_sample(data, 3, trial_rng(0, 0))
        assert len(sample) == 3
        assert len(remainder) == 17
        assert sorted(sample + remainder) == data

    def test_no_repeats(self):
        data = list(range(10))
        for i in range(50):
            sample, _ = draw_minimal_sample(data, 4, trial_rng(1, i))
            assert len(set(sample)) == 4

    def test_deterministic(self):
        data = list("abcdefgh")
        assert draw_minimal_sample(data, 2, trial_rng(7, 1)) == draw_minimal_sample(data, 2, trial_rng(7, 1))


class TestRunTrial:

    def test_successful_trial(self):
        data = [1.0, 1.0, 1.0, 1.0, 50.0]
        trial = run_trial(ConstantModel, data, 0.5, seed=0, trial_index=0)
        assert trial.index == 0
        assert not trial.failed
        assert trial.error is None
        assert len(trial.model.min_sample) == 1
        # the fitting observation is never part of its own batch
        assert trial.evaluation.num_inliers <= len(data) - 1

    def test_failed_fit_scores_zero(self):
        data = [float("nan")] * 4
        trial = run_trial(ConstantModel, data, 0.5, seed=0, trial_index=2)
        assert trial.failed
        assert trial.score == 0.0
        assert trial.evaluation.inliers == ()
        assert isinstance(trial.error, DegenerateSample)

    def test_unexpected_error_propagates(self):
        with pytest.raises(RuntimeError):
            run_trial(ExplodingModel, [1.0, 2.0, 3.0], 0.5, seed=0, trial_index=0)

    def test_line_trial_replays(self):
        data = [Point2D(float(i), float(2 * i)) for i in range(10)]
        a = run_trial(Line2DModel, data, 0.1, seed=4, trial_index=17)
        b = run_trial(Line2DModel, data, 0.1, seed=4, trial_index=17)
        assert a.model.min_sample == b.model.min_sample
        assert a.evaluation == b.evaluation


class TestSelectBest:

    def test_strictly_greater_wins(self):
        trials = [_trial(0, 0.5), _trial(1, 0.7), _trial(2, 0.2)]
        assert select_best(trials).index == 1

    def test_tie_keeps_earliest(self):
        trials = [_trial(0, 0.5), _trial(1, 0.7), _trial(2, 0.7), _trial(3, 0.7)]
        assert select_best(trials).index == 1

    def test_failed_trials_never_win(self):
        trials = [_trial(0, 0.0, model=None), _trial(1, 0.0), _trial(2, 0.0, model=None)]
        assert select_best(trials).index == 1

    def test_all_failed(self):
        assert select_best([_trial(0, 0.0, model=None)]) is None
        assert select_best([]) is None
