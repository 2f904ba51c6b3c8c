"""
Time helpers for feed timestamps and exchange epoch values.

The feed carries two notions of time: a UTC ``generated_at`` used
internally and a human-readable local ``updated`` string for readers of the
output document.
"""

from datetime import UTC, datetime
from typing import Optional, Union

# Epoch values above this are milliseconds rather than seconds
_MILLISECOND_THRESHOLD = 1e12

LOCAL_TIMESTAMP_FORMAT = "%Y/%m/%d %H:%M:%S"


def utc_now() -> datetime:
    """Current wall-clock time as an aware UTC datetime."""
    return datetime.now(UTC)


def epoch_to_datetime(value: Union[int, float, str]) -> datetime:
    """
    Convert an exchange epoch timestamp to a UTC datetime.

    Gate.io reports candle times in seconds; some endpoints use
    milliseconds. Values above 1e12 are treated as milliseconds.

    Args:
        value: Epoch timestamp as number or numeric string

    Returns:
        Aware UTC datetime

    Raises:
        ValueError: If the value is not numeric or out of range
    """
    try:
        seconds = float(value)
    except (TypeError, ValueError, OverflowError):
        raise ValueError(f"Invalid epoch timestamp: {value!r}") from None

    if seconds > _MILLISECOND_THRESHOLD:
        seconds /= 1000.0

    try:
        return datetime.fromtimestamp(seconds, tz=UTC)
    except (OverflowError, OSError, ValueError) as e:
        raise ValueError(f"Epoch timestamp out of range: {value!r}") from e


def local_timestamp(moment: Optional[datetime] = None) -> str:
    """
    Format a moment as a human-readable local-time string.

    Args:
        moment: Aware datetime, defaults to now

    Returns:
        String like ``2026/10/19 14:03:27`` in the process's local timezone
    """
    if moment is None:
        moment = utc_now()
    return moment.astimezone().strftime(LOCAL_TIMESTAMP_FORMAT)
