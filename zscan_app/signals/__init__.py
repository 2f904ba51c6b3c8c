"""
Signal models and ranking of per-candidate outcomes.
"""

from .aggregator import AggregateResult, SignalAggregator
from .models import EvaluationResult, OutcomeStatus, RankedFeed, Signal

__all__ = [
    "AggregateResult",
    "EvaluationResult",
    "OutcomeStatus",
    "RankedFeed",
    "Signal",
    "SignalAggregator",
]
