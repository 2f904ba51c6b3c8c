"""
Signal, per-candidate outcome and ranked feed models.

All of these are created and discarded within one run; nothing here is
persisted across runs.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from ..metrics.composite import Direction
from ..metrics.volatility import Category
from ..utils.time import local_timestamp


@dataclass(frozen=True)
class Signal:
    """Scored trading candidate for one contract."""
    symbol: str
    direction: Direction
    score: int
    category: Category

    # Diagnostics
    return_z: float = 0.0
    volume_z: float = 0.0
    atr: float = 0.0

    def to_dict(self, include_diagnostics: bool = True) -> dict[str, Any]:
        """Feed item representation."""
        item: dict[str, Any] = {
            "symbol": self.symbol,
            "direction": self.direction.value,
            "score": self.score,
            "category": self.category.value,
        }
        if include_diagnostics:
            item["rz"] = round(self.return_z, 2)
            item["vz"] = round(self.volume_z, 2)
            item["atr"] = round(self.atr, 4)
        return item


class OutcomeStatus(Enum):
    """What evaluating a candidate produced."""
    SCORED = "scored"      # Signal computed, admission pending
    SKIPPED = "skipped"    # Data or fetch error, no signal


@dataclass(frozen=True)
class EvaluationResult:
    """Structured outcome of evaluating one candidate."""
    symbol: str
    status: OutcomeStatus
    signal: Optional[Signal] = None
    error_type: Optional[str] = None
    reason: Optional[str] = None

    @property
    def is_scored(self) -> bool:
        return self.status is OutcomeStatus.SCORED

    @classmethod
    def scored(cls, signal: Signal) -> "EvaluationResult":
        """Create a result carrying a computed signal."""
        return cls(symbol=signal.symbol, status=OutcomeStatus.SCORED, signal=signal)

    @classmethod
    def skipped(cls, symbol: str, error: Exception) -> "EvaluationResult":
        """Create a skipped result from the error that caused it."""
        return cls(
            symbol=symbol,
            status=OutcomeStatus.SKIPPED,
            error_type=type(error).__name__,
            reason=str(error),
        )


@dataclass(frozen=True)
class RankedFeed:
    """Ranked signal feed produced by one run."""
    generated_at: datetime
    mode: str
    interval: str
    items: tuple[Signal, ...] = ()

    @property
    def count(self) -> int:
        return len(self.items)

    def to_document(self, include_diagnostics: bool = True) -> dict[str, Any]:
        """Output document with a human-readable local ``updated`` time."""
        return {
            "updated": local_timestamp(self.generated_at),
            "mode": self.mode,
            "interval": self.interval,
            "count": self.count,
            "items": [signal.to_dict(include_diagnostics) for signal in self.items],
        }
