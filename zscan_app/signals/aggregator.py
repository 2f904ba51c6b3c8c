"""
Admission filtering and ranking of per-candidate outcomes.

The aggregator never raises on a bad candidate: skipped outcomes and
signals below the admission threshold are counted and dropped.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass

from ..config.defaults import ScoringParams
from .models import EvaluationResult, Signal


@dataclass(frozen=True)
class AggregateResult:
    """Ranked items plus what was left out and why."""
    items: tuple[Signal, ...]
    rejected: tuple[Signal, ...]
    skipped: tuple[EvaluationResult, ...]

    @property
    def accepted_count(self) -> int:
        return len(self.items)

    @property
    def skip_reasons(self) -> dict[str, int]:
        """Count of skipped candidates per error type."""
        reasons: dict[str, int] = {}
        for result in self.skipped:
            key = result.error_type or "unknown"
            reasons[key] = reasons.get(key, 0) + 1
        return reasons


class SignalAggregator:
    """
    Builds the ranked list from outcomes given in top-N order.

    Admission is inclusive: a signal with ``score == min_score`` is kept.
    Ranking is by score descending with a stable sort, so ties keep top-N
    order and identical input yields identical output.
    """

    def __init__(self, min_score: int = 60):
        self.min_score = min_score

    @classmethod
    def from_config(cls, params: ScoringParams) -> "SignalAggregator":
        return cls(min_score=params.min_score)

    def admits(self, signal: Signal) -> bool:
        """Whether a signal passes the admission threshold."""
        if not math.isfinite(signal.score):
            return False
        return signal.score >= self.min_score

    def aggregate(self, results: Iterable[EvaluationResult]) -> AggregateResult:
        """
        Filter and rank outcomes.

        Args:
            results: Per-candidate outcomes in top-N order

        Returns:
            AggregateResult with items sorted by score descending
        """
        admitted = []
        rejected = []
        skipped = []

        for result in results:
            if not result.is_scored or result.signal is None:
                skipped.append(result)
                continue

            if self.admits(result.signal):
                admitted.append(result.signal)
            else:
                rejected.append(result.signal)

        ranked = sorted(admitted, key=lambda signal: signal.score, reverse=True)

        return AggregateResult(
            items=tuple(ranked),
            rejected=tuple(rejected),
            skipped=tuple(skipped),
        )
