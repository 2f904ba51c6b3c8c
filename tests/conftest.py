"""Pytest configuration and shared fixtures."""

import pytest
from typing import Any, Callable, Dict, List, Optional

from zscan_app.config.defaults import ScanMode, get_default_config
from zscan_app.config.loader import ConfigLoader

START_TS = 1_700_000_000
BAR_SECONDS = 60


def build_futures_rows(
    closes: List[float],
    volumes: Optional[List[float]] = None,
    start_ts: int = START_TS,
    step: int = BAR_SECONDS,
) -> List[Dict[str, Any]]:
    """Gate.io futures candle rows, oldest first, with string prices."""
    if volumes is None:
        volumes = [1000 + (i % 7) * 10 for i in range(len(closes))]
    return [
        {
            "t": start_ts + i * step,
            "v": volume,
            "c": str(close),
            "h": str(close * 1.01),
            "l": str(close * 0.99),
            "o": str(close),
            "sum": str(close * volume),
        }
        for i, (close, volume) in enumerate(zip(closes, volumes))
    ]


def wave_closes(count: int = 40, base: float = 100.0) -> List[float]:
    """Gently oscillating closes with plenty of distinct values."""
    pattern = [0.0, 0.4, -0.3, 0.6, -0.5, 0.2, -0.1]
    return [round(base + pattern[i % len(pattern)] + i * 0.01, 4) for i in range(count)]


class FakeGateClient:
    """In-memory stand-in for GateFuturesClient."""

    def __init__(self, tickers: Any = None, candles: Optional[Dict[str, Any]] = None,
                 ticker_error: Optional[Exception] = None):
        self.tickers = tickers or []
        self.candles = candles or {}
        self.ticker_error = ticker_error
        self.candle_requests: List[tuple] = []
        self.closed = False

    def fetch_tickers(self):
        if self.ticker_error is not None:
            raise self.ticker_error
        return self.tickers

    def fetch_candles(self, contract, interval, limit):
        self.candle_requests.append((contract, interval, limit))
        payload = self.candles.get(contract, [])
        if isinstance(payload, Exception):
            raise payload
        return payload

    def close(self):
        self.closed = True


@pytest.fixture
def futures_rows() -> Callable[..., List[Dict[str, Any]]]:
    """Factory for Gate.io futures candle rows."""
    return build_futures_rows


@pytest.fixture
def default_config():
    """Fast-mode default configuration."""
    return get_default_config(ScanMode.FAST)


@pytest.fixture
def isolated_loader(tmp_path) -> Callable[..., ConfigLoader]:
    """Loader factory reading only the given environment and a temp config file."""
    def _make(environ: Optional[Dict[str, str]] = None, yaml_text: Optional[str] = None) -> ConfigLoader:
        config_file = tmp_path / "scan.yaml"
        if yaml_text is not None:
            config_file.write_text(yaml_text)
        return ConfigLoader.create(config_file=config_file, environ=environ or {})
    return _make


@pytest.fixture
def sample_tickers() -> List[Dict[str, Any]]:
    """Ticker payload with mixed quote currencies and one malformed row."""
    return [
        {"contract": "BTC_USDT", "last": "67000.1", "volume_24h": "900000"},
        {"contract": "ETH_USDT", "last": "3500.2", "volume_24h": "700000"},
        {"contract": "BTC_USD", "last": "67000.1", "volume_24h": "99999999"},
        {"contract": "SOL_USDT", "last": "150.3", "volume_24h": "500000"},
        {"contract": "BAD_USDT", "last": "1", "volume_24h": "n/a"},
        {"contract": "DOGE_USDT", "last": "0.15", "volume_24h": "700000"},
    ]


@pytest.fixture
def make_closes() -> Callable[..., List[float]]:
    """Factory for oscillating close series."""
    return wave_closes


@pytest.fixture
def fake_client_cls():
    """The in-memory Gate client class."""
    return FakeGateClient
