"""Bar-over-bar fractional return series"""

import math
from collections.abc import Sequence

from ..errors import InsufficientDataError, InvalidPriceError


def build_return_series(closes: Sequence[float]) -> list[float]:
    """
    Build fractional returns from an oldest-first close sequence

    ret[i] = (close[i+1] - close[i]) / close[i]

    Args:
        closes: Close prices, oldest first

    Returns:
        Returns of length len(closes) - 1

    Raises:
        InsufficientDataError: If fewer than 2 closes
        InvalidPriceError: If any close is zero, negative or non-finite
    """
    if len(closes) < 2:
        raise InsufficientDataError(
            f"Need at least 2 closes for a return, got {len(closes)}",
            required_count=2,
            available_count=len(closes)
        )

    for index, close in enumerate(closes):
        if not math.isfinite(close) or close <= 0:
            raise InvalidPriceError(
                f"Invalid close {close!r} at index {index}",
                index=index,
                price=close
            )

    return [
        (closes[i + 1] - closes[i]) / closes[i]
        for i in range(len(closes) - 1)
    ]


def latest_return(returns: Sequence[float]) -> float:
    """Most recent bar-over-bar return (last element)."""
    if not returns:
        raise InsufficientDataError("Return series is empty", required_count=1, available_count=0)
    return returns[-1]
