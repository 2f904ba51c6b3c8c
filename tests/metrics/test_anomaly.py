"""Tests for z-score anomaly measurement"""

import math

import pytest
from zscan_app.config.defaults import ZeroStdevPolicy
from zscan_app.errors import InsufficientDataError, UndefinedStatisticError
from zscan_app.metrics.anomaly import AnomalyScorer, AnomalyScores, mean, population_stdev, zscore

REFERENCE_RETURNS = [0.01, -0.02, 0.03, 0.01, -0.01]


class TestDescriptiveStatistics:
    """Test mean and population standard deviation"""

    def test_reference_mean(self):
        """Test mean of the reference return series"""
        assert mean(REFERENCE_RETURNS) == pytest.approx(0.004)

    def test_reference_population_stdev(self):
        """Test population stdev divides by n, not n-1"""
        # squared deviations sum to 0.00152 over 5 points
        expected = math.sqrt(0.00152 / 5)
        assert population_stdev(REFERENCE_RETURNS) == pytest.approx(expected, rel=1e-12)
        assert round(population_stdev(REFERENCE_RETURNS), 10) == round(expected, 10)

    def test_stdev_is_reproducible(self):
        """Test repeated computation is bit-identical"""
        assert population_stdev(REFERENCE_RETURNS) == population_stdev(list(REFERENCE_RETURNS))

    @pytest.mark.parametrize("values", [
        [0.1, 0.1, 0.1],
        [5.0],
        [1e-9] * 40,
        [123456.789] * 7,
    ])
    def test_stdev_zero_only_for_constant(self, values):
        """Test constant series have exactly zero dispersion"""
        assert population_stdev(values) == 0.0

    @pytest.mark.parametrize("values", [
        [0.1, 0.1, 0.1000000001],
        [1.0, 2.0],
        [-3.0, 3.0, 0.0],
        REFERENCE_RETURNS,
    ])
    def test_stdev_positive_for_varying(self, values):
        """Test any variation yields strictly positive dispersion"""
        assert population_stdev(values) > 0

    def test_empty_series(self):
        """Test empty series raise"""
        with pytest.raises(InsufficientDataError):
            population_stdev([])
        with pytest.raises(InsufficientDataError):
            mean([])

    def test_non_finite_series(self):
        """Test NaN in the window is undefined"""
        with pytest.raises(UndefinedStatisticError):
            population_stdev([1.0, math.nan, 2.0])


class TestZScore:
    """Test z-score of the latest observation"""

    def test_latest_included_in_baseline(self):
        """Test the latest point is part of its own baseline"""
        series = [1.0, 1.0, 1.0, 5.0]
        # mean 2.0, pstdev sqrt(3)
        assert zscore(5.0, series) == pytest.approx(3.0 / math.sqrt(3.0))

    def test_reference_latest(self):
        """Test z of the reference series' last point"""
        expected = (-0.01 - 0.004) / math.sqrt(0.00152 / 5)
        assert zscore(REFERENCE_RETURNS[-1], REFERENCE_RETURNS) == pytest.approx(expected)

    def test_zero_stdev_undefined(self):
        """Test constant series have no z-score"""
        with pytest.raises(UndefinedStatisticError):
            zscore(2.0, [2.0, 2.0, 2.0])

    def test_non_finite_latest(self):
        """Test non-finite latest value"""
        with pytest.raises(UndefinedStatisticError):
            zscore(math.inf, [1.0, 2.0])


class TestAnomalyScorer:
    """Test AnomalyScorer policies"""

    def test_scores_both_series(self):
        """Test return and volume z-scores"""
        scorer = AnomalyScorer()
        volumes = [100.0, 100.0, 100.0, 400.0]

        scores = scorer.score(REFERENCE_RETURNS, volumes)

        assert isinstance(scores, AnomalyScores)
        assert scores.return_z == pytest.approx(zscore(-0.01, REFERENCE_RETURNS))
        assert scores.volume_z == pytest.approx(zscore(400.0, volumes))
        assert scores.volume_z > 0

    def test_neutral_policy_forces_zero(self):
        """Test neutral policy maps zero dispersion to z = 0"""
        scorer = AnomalyScorer(ZeroStdevPolicy.NEUTRAL)

        scores = scorer.score(REFERENCE_RETURNS, [50.0] * 6)

        assert scores.volume_z == 0.0
        assert scores.return_z != 0.0

    def test_neutral_policy_applies_to_returns(self):
        """Test neutral policy on the return series too"""
        scores = AnomalyScorer(ZeroStdevPolicy.NEUTRAL).score([0.0] * 5, [1.0, 2.0, 3.0])
        assert scores.return_z == 0.0

    def test_skip_policy_raises_for_volume(self):
        """Test skip policy on a flat volume window"""
        scorer = AnomalyScorer(ZeroStdevPolicy.SKIP)

        with pytest.raises(UndefinedStatisticError) as exc_info:
            scorer.score(REFERENCE_RETURNS, [50.0] * 6)

        assert exc_info.value.context["series"] == "volume"

    def test_skip_policy_raises_for_returns(self):
        """Test skip policy on a flat return window"""
        with pytest.raises(UndefinedStatisticError) as exc_info:
            AnomalyScorer(ZeroStdevPolicy.SKIP).score([0.0] * 5, [1.0, 2.0, 3.0])

        assert exc_info.value.context["series"] == "return"

    def test_empty_series(self):
        """Test empty inputs"""
        with pytest.raises(InsufficientDataError):
            AnomalyScorer().score([], [1.0])
