"""Tests for candle normalization."""

import pytest
from datetime import datetime, UTC

from zscan_app.data.models import (
    Candle,
    CandleLayout,
    ChronoOrder,
    GATE_FUTURES_LAYOUT,
    GATE_SPOT_LAYOUT,
    get_candle_layout,
)
from zscan_app.data.normalizer import CandleNormalizer
from zscan_app.errors import (
    DataQualityError,
    DegenerateSeriesError,
    InsufficientDataError,
    MalformedDataError,
    TemporalDataError,
)


class TestChronologicalOrder:
    """Test that the declared source order is honored."""

    def test_oldest_first_kept_as_is(self, futures_rows):
        """Test oldest-first rows pass through in order"""
        closes = [100.0 + i for i in range(30)]
        normalizer = CandleNormalizer(min_candles=20)

        candles = normalizer.normalize(futures_rows(closes), ChronoOrder.OLDEST_FIRST, GATE_FUTURES_LAYOUT)

        assert [c.close for c in candles] == closes
        assert candles[-1].close == 129.0

    def test_newest_first_reversed(self, futures_rows):
        """Test newest-first rows are reversed so the last close is the latest price"""
        closes = [100.0 + i for i in range(30)]
        oldest_first = futures_rows(closes)
        newest_first = list(reversed(oldest_first))
        normalizer = CandleNormalizer(min_candles=20)

        candles = normalizer.normalize(newest_first, ChronoOrder.NEWEST_FIRST, GATE_FUTURES_LAYOUT)
        expected = normalizer.normalize(oldest_first, ChronoOrder.OLDEST_FIRST, GATE_FUTURES_LAYOUT)

        assert candles == expected
        assert candles[-1].close == 129.0
        assert candles[-1].ts == datetime.fromtimestamp(1_700_000_000 + 29 * 60, tz=UTC)

    def test_input_not_mutated(self, futures_rows):
        """Test reversal does not mutate the caller's list"""
        rows = list(reversed(futures_rows([100.0 + i for i in range(25)])))
        first = rows[0]

        CandleNormalizer(min_candles=20).normalize(rows, ChronoOrder.NEWEST_FIRST, GATE_FUTURES_LAYOUT)

        assert rows[0] is first

    def test_declared_order_contradicted_by_timestamps(self, futures_rows):
        """Test newest-first data declared oldest-first is rejected"""
        rows = list(reversed(futures_rows([100.0 + i for i in range(30)])))

        with pytest.raises(TemporalDataError, match="declared order"):
            CandleNormalizer(min_candles=20).normalize(rows, ChronoOrder.OLDEST_FIRST, GATE_FUTURES_LAYOUT)

    def test_order_must_be_explicit_enum(self, futures_rows):
        """Test a bare string order is refused"""
        rows = futures_rows([100.0 + i for i in range(30)])

        with pytest.raises(TypeError):
            CandleNormalizer().normalize(rows, "oldest_first", GATE_FUTURES_LAYOUT)

    def test_layout_must_be_explicit(self, futures_rows):
        """Test a bare dict layout is refused"""
        rows = futures_rows([100.0 + i for i in range(30)])

        with pytest.raises(TypeError):
            CandleNormalizer().normalize(rows, ChronoOrder.OLDEST_FIRST, {"close": "c"})


class TestLayouts:
    """Test field layout handling."""

    def test_spot_array_rows(self):
        """Test list rows [t, volume, close, high, low, open]"""
        rows = [
            [str(1_700_000_000 + i * 60), str(500 + i), str(10.0 + i * 0.1), "0", "0", "0"]
            for i in range(25)
        ]

        candles = CandleNormalizer(min_candles=20).normalize(rows, ChronoOrder.OLDEST_FIRST, GATE_SPOT_LAYOUT)

        assert len(candles) == 25
        assert candles[0] == Candle(close=10.0, volume=500.0, ts=datetime.fromtimestamp(1_700_000_000, tz=UTC))
        assert candles[-1].volume == 524.0

    def test_layout_without_timestamp(self):
        """Test a layout with no timestamp skips the chronology check"""
        layout = CandleLayout(name="bare", close=0, volume=1)
        rows = [[100.0 + i, 10.0] for i in range(20)]

        candles = CandleNormalizer(min_candles=20).normalize(rows, ChronoOrder.NEWEST_FIRST, layout)

        assert candles[0].close == 119.0
        assert candles[0].ts is None

    def test_millisecond_timestamps(self):
        """Test millisecond epochs are accepted"""
        rows = [[1_700_000_000_000 + i * 60_000, 1.0, 50.0 + i] for i in range(20)]

        candles = CandleNormalizer(min_candles=20).normalize(rows, ChronoOrder.OLDEST_FIRST, GATE_SPOT_LAYOUT)

        assert candles[0].ts == datetime.fromtimestamp(1_700_000_000, tz=UTC)

    def test_get_candle_layout(self):
        """Test layout registry lookup"""
        assert get_candle_layout("gate_futures") is GATE_FUTURES_LAYOUT
        with pytest.raises(ValueError, match="Unknown candle layout"):
            get_candle_layout("okx")


class TestHistoryRequirements:
    """Test minimum history and degenerate series checks."""

    def test_insufficient_candles(self, futures_rows):
        """Test fewer rows than min_candles"""
        rows = futures_rows([100.0 + i for i in range(19)])

        with pytest.raises(InsufficientDataError) as exc_info:
            CandleNormalizer(min_candles=20).normalize(rows, ChronoOrder.OLDEST_FIRST, GATE_FUTURES_LAYOUT)

        assert exc_info.value.required_count == 20
        assert exc_info.value.available_count == 19
        assert isinstance(exc_info.value, DataQualityError)

    @pytest.mark.parametrize("payload", [None, []])
    def test_empty_payload(self, payload):
        """Test empty or missing payloads"""
        with pytest.raises(InsufficientDataError):
            CandleNormalizer().normalize(payload, ChronoOrder.OLDEST_FIRST, GATE_FUTURES_LAYOUT)

    def test_exact_minimum_accepted(self, futures_rows):
        """Test exactly min_candles rows"""
        rows = futures_rows([100.0 + i for i in range(30)])

        candles = CandleNormalizer(min_candles=30).normalize(rows, ChronoOrder.OLDEST_FIRST, GATE_FUTURES_LAYOUT)

        assert len(candles) == 30

    def test_degenerate_series(self, futures_rows):
        """Test near-constant closes are rejected"""
        closes = [100.0, 100.5, 101.0, 100.5] * 8

        with pytest.raises(DegenerateSeriesError) as exc_info:
            CandleNormalizer(min_candles=20, min_distinct_closes=5).normalize(
                futures_rows(closes), ChronoOrder.OLDEST_FIRST, GATE_FUTURES_LAYOUT
            )

        assert exc_info.value.distinct_count == 3

    def test_distinct_check_disabled(self, futures_rows):
        """Test min_distinct_closes=0 disables the check"""
        closes = [100.0] * 30

        candles = CandleNormalizer(min_candles=20, min_distinct_closes=0).normalize(
            futures_rows(closes), ChronoOrder.OLDEST_FIRST, GATE_FUTURES_LAYOUT
        )

        assert len(candles) == 30


class TestMalformedRows:
    """Test rows that cannot be read."""

    def test_missing_field(self, futures_rows):
        """Test a row without the close key"""
        rows = futures_rows([100.0 + i for i in range(25)])
        del rows[3]["c"]

        with pytest.raises(MalformedDataError, match="no close field"):
            CandleNormalizer(min_candles=20).normalize(rows, ChronoOrder.OLDEST_FIRST, GATE_FUTURES_LAYOUT)

    @pytest.mark.parametrize("bad_value", ["abc", None, "nan", "inf"])
    def test_non_numeric_close(self, futures_rows, bad_value):
        """Test unreadable or non-finite close values"""
        rows = futures_rows([100.0 + i for i in range(25)])
        rows[5]["c"] = bad_value

        with pytest.raises(MalformedDataError):
            CandleNormalizer(min_candles=20).normalize(rows, ChronoOrder.OLDEST_FIRST, GATE_FUTURES_LAYOUT)

    @pytest.mark.parametrize("field", ["v", "c", "t"])
    def test_integer_too_large_for_float(self, futures_rows, field):
        """Test integers beyond float range are malformed rather than fatal"""
        rows = futures_rows([100.0 + i for i in range(25)])
        rows[7][field] = 10**400

        with pytest.raises(MalformedDataError):
            CandleNormalizer(min_candles=20).normalize(rows, ChronoOrder.OLDEST_FIRST, GATE_FUTURES_LAYOUT)

    def test_negative_volume(self, futures_rows):
        """Test negative volume"""
        rows = futures_rows([100.0 + i for i in range(25)])
        rows[0]["v"] = -5

        with pytest.raises(MalformedDataError, match="negative"):
            CandleNormalizer(min_candles=20).normalize(rows, ChronoOrder.OLDEST_FIRST, GATE_FUTURES_LAYOUT)

    def test_short_array_row(self):
        """Test array row shorter than the layout"""
        rows = [[1_700_000_000 + i * 60, 1.0] for i in range(20)]

        with pytest.raises(MalformedDataError):
            CandleNormalizer(min_candles=20).normalize(rows, ChronoOrder.OLDEST_FIRST, GATE_SPOT_LAYOUT)

    def test_zero_close_passes_normalization(self, futures_rows):
        """Test zero closes are left for the return builder to reject"""
        closes = [100.0 + i for i in range(25)]
        closes[10] = 0.0

        candles = CandleNormalizer(min_candles=20).normalize(
            futures_rows(closes), ChronoOrder.OLDEST_FIRST, GATE_FUTURES_LAYOUT
        )

        assert candles[10].close == 0.0
