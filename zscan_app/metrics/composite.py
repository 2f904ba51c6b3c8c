"""Composite score aggregation with regime-dependent down-weighting"""

import math
from dataclasses import dataclass
from enum import Enum

from ..config.defaults import ScoringParams
from ..errors import UndefinedStatisticError
from .volatility import Category


class Direction(Enum):
    """Trade direction implied by the latest return's z-score"""
    LONG = "long"
    SHORT = "short"


def direction_from_zscore(return_z: float) -> Direction:
    """LONG for return_z >= 0 (zero breaks toward LONG), SHORT otherwise."""
    return Direction.LONG if return_z >= 0 else Direction.SHORT


def round_half_up(value: float) -> int:
    """Round a non-negative value with halves going up (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class CompositeScore:
    """Rounded score with its direction and the pre-rounding value"""
    score: int
    direction: Direction
    raw: float


class CompositeScorer:
    """
    Combines z-scores and volatility into one ranked integer score.

    raw = |rz| * W_r + |vz| * W_v + atr * W_a

    Wildcard-regime contracts are multiplied by ``wildcard_factor`` before
    rounding so chronically volatile names do not flood the feed.
    """

    def __init__(
        self,
        return_weight: float = 40.0,
        volume_weight: float = 40.0,
        atr_weight: float = 200.0,
        wildcard_factor: float = 0.7
    ):
        self.return_weight = return_weight
        self.volume_weight = volume_weight
        self.atr_weight = atr_weight
        self.wildcard_factor = wildcard_factor

    @classmethod
    def from_config(cls, params: ScoringParams) -> "CompositeScorer":
        return cls(
            return_weight=params.return_weight,
            volume_weight=params.volume_weight,
            atr_weight=params.atr_weight,
            wildcard_factor=params.wildcard_factor,
        )

    def raw_score(self, return_z: float, volume_z: float, atr: float, category: Category) -> float:
        """Weighted sum before rounding, with the wildcard penalty applied."""
        raw = (
            abs(return_z) * self.return_weight +
            abs(volume_z) * self.volume_weight +
            atr * self.atr_weight
        )

        if category is Category.WILDCARD:
            raw *= self.wildcard_factor

        return raw

    def score(self, return_z: float, volume_z: float, atr: float, category: Category) -> CompositeScore:
        """
        Score one candidate.

        Raises:
            UndefinedStatisticError: If any input or the result is non-finite
        """
        for name, value in (("return_z", return_z), ("volume_z", volume_z), ("atr", atr)):
            if not math.isfinite(value):
                raise UndefinedStatisticError(f"{name} is not finite", statistic=name, value=value)

        raw = self.raw_score(return_z, volume_z, atr, category)
        if not math.isfinite(raw):
            raise UndefinedStatisticError("Composite score is not finite", statistic="score", value=raw)

        return CompositeScore(
            score=round_half_up(raw),
            direction=direction_from_zscore(return_z),
            raw=raw,
        )
