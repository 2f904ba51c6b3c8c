"""
Canonical data models for normalized market data.

This module defines immutable data structures that describe raw exchange
candle rows (layout and chronological order) and the clean, oldest-first
candles the scoring pipeline works on.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Union

FieldKey = Union[int, str]


class ChronoOrder(Enum):
    """Chronological direction in which a source delivers candle rows."""
    OLDEST_FIRST = "oldest_first"
    NEWEST_FIRST = "newest_first"


@dataclass(frozen=True)
class CandleLayout:
    """
    Field positions inside a raw candle row.

    Keys are list indices for array rows and string keys for object rows.
    A layout without a timestamp field skips the chronology check.
    """
    name: str
    close: FieldKey
    volume: FieldKey
    timestamp: Optional[FieldKey] = None


# Gate.io futures: {"t": 1700000000, "v": 123, "c": "1.23", "h": ..., "l": ..., "o": ..., "sum": ...}
GATE_FUTURES_LAYOUT = CandleLayout(name="gate_futures", close="c", volume="v", timestamp="t")

# Gate.io spot: [t, quote_volume, close, high, low, open, base_volume, closed]
GATE_SPOT_LAYOUT = CandleLayout(name="gate_spot", close=2, volume=1, timestamp=0)

CANDLE_LAYOUTS: dict[str, CandleLayout] = {
    GATE_FUTURES_LAYOUT.name: GATE_FUTURES_LAYOUT,
    GATE_SPOT_LAYOUT.name: GATE_SPOT_LAYOUT,
}


def get_candle_layout(name: str) -> CandleLayout:
    """Look up a registered candle layout by name."""
    try:
        return CANDLE_LAYOUTS[name]
    except KeyError:
        raise ValueError(
            f"Unknown candle layout: {name}. Expected one of {sorted(CANDLE_LAYOUTS)}"
        ) from None


@dataclass(frozen=True)
class Candle:
    """Normalized bar, ordered oldest to newest in any sequence."""
    close: float                    # Closing price
    volume: float                   # Bar volume
    ts: Optional[datetime] = None   # UTC bar open time, when the layout carries one


@dataclass(frozen=True)
class TickerEntry:
    """One contract from the ticker list with its 24h volume."""
    symbol: str
    volume_24h: float
