"""Tests for feed and exchange time helpers."""

import math
from datetime import UTC, datetime, timedelta, timezone

import pytest

from zscan_app.utils.time import epoch_to_datetime, local_timestamp, utc_now


class TestUtcNow:
    """Test utc_now function."""

    def test_is_aware_utc(self):
        """Should return an aware datetime in UTC."""
        now = utc_now()
        assert now.tzinfo is UTC


class TestEpochToDatetime:
    """Test epoch_to_datetime function."""

    def test_seconds(self):
        """Should read Gate.io second timestamps."""
        assert epoch_to_datetime(1_700_000_000) == datetime(2023, 11, 14, 22, 13, 20, tzinfo=UTC)

    def test_milliseconds(self):
        """Should treat large values as milliseconds."""
        assert epoch_to_datetime(1_700_000_000_000) == epoch_to_datetime(1_700_000_000)

    def test_numeric_string(self):
        """Should accept numeric strings."""
        assert epoch_to_datetime("1700000000") == epoch_to_datetime(1_700_000_000)

    @pytest.mark.parametrize("value", ["yesterday", None, math.nan, 1e20, 10**400])
    def test_invalid(self, value):
        """Should raise ValueError for unusable values."""
        with pytest.raises(ValueError):
            epoch_to_datetime(value)


class TestLocalTimestamp:
    """Test local_timestamp function."""

    def test_format(self):
        """Should render as YYYY/MM/DD HH:MM:SS."""
        moment = datetime(2026, 10, 19, 12, 30, 5, tzinfo=UTC)
        local = moment.astimezone()

        assert local_timestamp(moment) == local.strftime("%Y/%m/%d %H:%M:%S")

    def test_converts_to_local_zone(self):
        """Should express the same instant in local time."""
        moment = datetime(2026, 1, 1, 0, 0, 0, tzinfo=timezone(timedelta(hours=8)))
        rendered = local_timestamp(moment)

        parsed = datetime.strptime(rendered, "%Y/%m/%d %H:%M:%S")
        assert parsed == moment.astimezone().replace(tzinfo=None)

    def test_defaults_to_now(self):
        """Should format the current time when no moment is given."""
        assert len(local_timestamp()) == len("2026/10/19 12:30:05")
