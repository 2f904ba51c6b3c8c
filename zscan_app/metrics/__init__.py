"""Scoring pipeline metrics: returns, z-scores, volatility regime, composite score"""

from .anomaly import AnomalyScorer, AnomalyScores, mean, population_stdev, zscore
from .composite import CompositeScore, CompositeScorer, Direction, direction_from_zscore
from .returns import build_return_series, latest_return
from .volatility import Category, VolatilityClassifier, calculate_atr_proxy

__all__ = [
    "AnomalyScorer",
    "AnomalyScores",
    "Category",
    "CompositeScore",
    "CompositeScorer",
    "Direction",
    "VolatilityClassifier",
    "build_return_series",
    "calculate_atr_proxy",
    "direction_from_zscore",
    "latest_return",
    "mean",
    "population_stdev",
    "zscore",
]
