"""
Z-score anomaly measurement over return and volume windows.

The baseline is the whole window including the latest observation, with
population standard deviation (divide by n). Scores are not comparable
with a leave-one-out or sample-variance variant.
"""

import math
import statistics
from collections.abc import Sequence
from dataclasses import dataclass

from ..config.defaults import ZeroStdevPolicy
from ..errors import InsufficientDataError, UndefinedStatisticError


def _require_values(values: Sequence[float], statistic: str) -> None:
    if len(values) == 0:
        raise InsufficientDataError(f"Cannot compute {statistic} of an empty series",
                                    required_count=1, available_count=0)
    if not all(math.isfinite(v) for v in values):
        raise UndefinedStatisticError("Series contains non-finite values", statistic=statistic)


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean of a non-empty finite series."""
    _require_values(values, "mean")
    return statistics.fmean(values)


def population_stdev(values: Sequence[float]) -> float:
    """
    Population standard deviation of a non-empty finite series.

    Computed with exact rational arithmetic, so the result is 0.0 exactly
    when every element is equal and strictly positive otherwise.

    Raises:
        InsufficientDataError: If the series is empty
        UndefinedStatisticError: If the series or the result is non-finite
    """
    _require_values(values, "stdev")
    try:
        result = statistics.pstdev(values)
    except OverflowError as e:
        raise UndefinedStatisticError(f"Standard deviation overflowed: {e}", statistic="stdev") from e

    if not math.isfinite(result):
        raise UndefinedStatisticError("Standard deviation is not finite",
                                      statistic="stdev", value=result)
    return result


def zscore(latest: float, series: Sequence[float]) -> float:
    """
    Standardized deviation of ``latest`` from the series distribution.

    z = (latest - mean(series)) / pstdev(series)

    Raises:
        UndefinedStatisticError: If stdev is zero or any value is non-finite
    """
    if not math.isfinite(latest):
        raise UndefinedStatisticError("Latest value is not finite", statistic="zscore", value=latest)

    spread = population_stdev(series)
    if spread == 0:
        raise UndefinedStatisticError("Standard deviation is zero", statistic="zscore", value=0.0)

    z = (latest - mean(series)) / spread
    if not math.isfinite(z):
        raise UndefinedStatisticError("Z-score is not finite", statistic="zscore", value=z)
    return z


@dataclass(frozen=True)
class AnomalyScores:
    """Z-scores of the latest return and latest volume"""
    return_z: float
    volume_z: float


class AnomalyScorer:
    """Scores the latest bar of a candidate with one zero-dispersion policy"""

    def __init__(self, zero_stdev_policy: ZeroStdevPolicy = ZeroStdevPolicy.NEUTRAL):
        self.zero_stdev_policy = zero_stdev_policy

    def score(self, returns: Sequence[float], volumes: Sequence[float]) -> AnomalyScores:
        """
        Compute return and volume z-scores of the latest observations

        Args:
            returns: Return series, oldest first
            volumes: Volume series over the candle window, oldest first

        Returns:
            AnomalyScores for the latest bar

        Raises:
            UndefinedStatisticError: Under the skip policy when a window has no dispersion
        """
        if not returns or not volumes:
            raise InsufficientDataError(
                "Return and volume series must be non-empty",
                available_count=min(len(returns), len(volumes))
            )

        return AnomalyScores(
            return_z=self._score_latest(returns, "return"),
            volume_z=self._score_latest(volumes, "volume"),
        )

    def _score_latest(self, series: Sequence[float], name: str) -> float:
        try:
            spread = population_stdev(series)
        except UndefinedStatisticError:
            spread = math.nan

        if spread == 0 or not math.isfinite(spread):
            if self.zero_stdev_policy is ZeroStdevPolicy.NEUTRAL:
                return 0.0
            raise UndefinedStatisticError(
                f"{name} series has no usable dispersion",
                statistic="stdev",
                value=spread,
                context={"series": name}
            )

        return zscore(series[-1], series)
