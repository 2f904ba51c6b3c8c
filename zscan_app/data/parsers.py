"""
Gate.io ticker parsing and top-N candidate selection.

Ticker payload format (``GET /futures/usdt/tickers``)::

    [
        {"contract": "BTC_USDT", "last": "67000.1", "volume_24h": "182734", ...},
        ...
    ]

Numeric fields arrive as strings.
"""

import math
from collections.abc import Iterable
from typing import Any

from ..errors import MalformedDataError
from ..logging.config import get_logger
from .models import TickerEntry

logger = get_logger(__name__)


def parse_ticker(raw: Any, volume_field: str = "volume_24h") -> TickerEntry:
    """
    Parse one ticker row into a TickerEntry.

    Args:
        raw: Ticker dictionary from the exchange
        volume_field: Field holding the 24h volume

    Returns:
        Parsed ticker

    Raises:
        MalformedDataError: If the contract name or volume is missing or invalid
    """
    if not isinstance(raw, dict):
        raise MalformedDataError("Ticker must be a dictionary", raw_data=str(raw)[:100])

    symbol = raw.get("contract")
    if not isinstance(symbol, str) or not symbol:
        raise MalformedDataError("Ticker has no contract name", raw_data=str(raw)[:100])

    try:
        volume = float(raw.get(volume_field))
    except (TypeError, ValueError):
        raise MalformedDataError(
            f"Ticker {symbol} has invalid {volume_field}: {raw.get(volume_field)!r}",
            raw_data=str(raw)[:100],
            expected_format="numeric string"
        ) from None

    if not math.isfinite(volume) or volume < 0:
        raise MalformedDataError(
            f"Ticker {symbol} has invalid {volume_field}: {volume}",
            raw_data=str(raw)[:100]
        )

    return TickerEntry(symbol=symbol, volume_24h=volume)


def select_top_contracts(
    tickers: Iterable[Any],
    top_n: int,
    quote_suffix: str = "USDT",
    volume_field: str = "volume_24h"
) -> list[TickerEntry]:
    """
    Select the top-N contracts by descending 24h volume.

    Contracts not quoted in ``quote_suffix`` are ignored, malformed rows are
    logged and skipped. Equal volumes keep the exchange's listing order.

    Args:
        tickers: Raw ticker rows
        top_n: Number of contracts to keep
        quote_suffix: Required contract name suffix
        volume_field: Field holding the 24h volume

    Returns:
        Ticker entries, highest volume first
    """
    entries = []

    for raw in tickers:
        contract = raw.get("contract") if isinstance(raw, dict) else None
        if isinstance(contract, str) and not contract.endswith(quote_suffix):
            continue

        try:
            entries.append(parse_ticker(raw, volume_field))
        except MalformedDataError as e:
            logger.warning("ticker_skipped", reason=str(e))

    entries.sort(key=lambda entry: entry.volume_24h, reverse=True)
    return entries[:top_n]
