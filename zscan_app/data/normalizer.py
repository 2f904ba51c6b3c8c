"""
Candle normalization from raw exchange rows to canonical oldest-first candles.

Chronological direction and field layout are required arguments. A
newest-first sequence scored as if it were oldest-first flips the sign of the
latest return, so the reversal happens here and nowhere else.
"""

import math
from collections.abc import Sequence
from typing import Any, Optional

from ..config.defaults import HistoryParams
from ..errors import (
    DegenerateSeriesError,
    InsufficientDataError,
    MalformedDataError,
    TemporalDataError,
)
from ..utils.time import epoch_to_datetime
from .models import Candle, CandleLayout, ChronoOrder, FieldKey


def _read_field(row: Any, key: FieldKey, index: int, name: str) -> Any:
    try:
        return row[key]
    except (KeyError, IndexError, TypeError):
        raise MalformedDataError(
            f"Candle {index} has no {name} field at {key!r}",
            raw_data=str(row)[:100],
            context={"index": index, "field": name}
        ) from None


def _to_float(value: Any, index: int, name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        raise MalformedDataError(
            f"Candle {index} {name} is not numeric: {value!r}",
            raw_data=str(value)[:100],
            context={"index": index, "field": name}
        ) from None

    if not math.isfinite(number):
        raise MalformedDataError(
            f"Candle {index} {name} is not finite: {value!r}",
            raw_data=str(value)[:100],
            context={"index": index, "field": name}
        )
    return number


class CandleNormalizer:
    """
    Converts raw candle rows into a canonical oldest-first Candle sequence.

    Checks, in order: minimum history length, row parsing, chronology
    against the declared order (when the layout carries timestamps) and
    the distinct-close count.
    """

    def __init__(self, min_candles: int = 30, min_distinct_closes: int = 5):
        """
        Initialize the normalizer.

        Args:
            min_candles: Minimum raw rows required
            min_distinct_closes: Minimum number of distinct closes, 0 disables
        """
        self.min_candles = min_candles
        self.min_distinct_closes = min_distinct_closes

    @classmethod
    def from_config(cls, params: HistoryParams) -> "CandleNormalizer":
        """Create a normalizer from history parameters."""
        return cls(
            min_candles=params.min_candles,
            min_distinct_closes=params.min_distinct_closes,
        )

    def normalize(
        self,
        raw_candles: Optional[Sequence],
        order: ChronoOrder,
        layout: CandleLayout
    ) -> list[Candle]:
        """
        Normalize raw candle rows.

        Args:
            raw_candles: Rows as delivered by the source
            order: Chronological direction of ``raw_candles``
            layout: Field positions inside each row

        Returns:
            Candles ordered oldest to newest

        Raises:
            TypeError: If order or layout are not the explicit types
            InsufficientDataError: If fewer than min_candles rows
            MalformedDataError: If a row cannot be read
            TemporalDataError: If timestamps contradict the declared order
            DegenerateSeriesError: If closes are near-constant
        """
        if not isinstance(order, ChronoOrder):
            raise TypeError(f"order must be a ChronoOrder, got {type(order).__name__}")
        if not isinstance(layout, CandleLayout):
            raise TypeError(f"layout must be a CandleLayout, got {type(layout).__name__}")

        rows = list(raw_candles) if raw_candles else []
        if len(rows) < self.min_candles:
            raise InsufficientDataError(
                f"Need {self.min_candles} candles, got {len(rows)}",
                required_count=self.min_candles,
                available_count=len(rows)
            )

        if order is ChronoOrder.NEWEST_FIRST:
            rows.reverse()

        candles = [self._parse_row(index, row, layout) for index, row in enumerate(rows)]

        self._check_chronology(candles)
        self._check_distinct_closes(candles)

        return candles

    def _parse_row(self, index: int, row: Any, layout: CandleLayout) -> Candle:
        """Parse a single raw row into a Candle."""
        close = _to_float(_read_field(row, layout.close, index, "close"), index, "close")
        volume = _to_float(_read_field(row, layout.volume, index, "volume"), index, "volume")

        if volume < 0:
            raise MalformedDataError(
                f"Candle {index} volume is negative: {volume}",
                context={"index": index, "field": "volume"}
            )

        ts = None
        if layout.timestamp is not None:
            raw_ts = _read_field(row, layout.timestamp, index, "timestamp")
            try:
                ts = epoch_to_datetime(raw_ts)
            except ValueError as e:
                raise MalformedDataError(
                    f"Candle {index} timestamp is invalid: {e}",
                    raw_data=str(raw_ts)[:100],
                    context={"index": index, "field": "timestamp"}
                ) from None

        return Candle(close=close, volume=volume, ts=ts)

    def _check_chronology(self, candles: list[Candle]) -> None:
        """Ensure timestamps never go backwards after ordering."""
        previous = None
        for index, candle in enumerate(candles):
            if candle.ts is None:
                continue
            if previous is not None and candle.ts < previous:
                raise TemporalDataError(
                    f"Candle {index} at {candle.ts.isoformat()} precedes "
                    f"{previous.isoformat()}; declared order does not match data",
                    timestamp=int(candle.ts.timestamp()),
                    expected_timestamp=int(previous.timestamp()),
                    context={"index": index}
                )
            previous = candle.ts

    def _check_distinct_closes(self, candles: list[Candle]) -> None:
        """Reject near-constant price series."""
        if self.min_distinct_closes <= 0:
            return

        distinct = len({candle.close for candle in candles})
        if distinct < self.min_distinct_closes:
            raise DegenerateSeriesError(
                f"Only {distinct} distinct closes, need {self.min_distinct_closes}",
                distinct_count=distinct,
                required_distinct=self.min_distinct_closes
            )
