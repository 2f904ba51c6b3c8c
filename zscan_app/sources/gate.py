"""Gate.io USDT-settled futures REST client."""

from __future__ import annotations

from typing import Any, Optional

import orjson
import requests
from requests.adapters import HTTPAdapter

from ..config.defaults import FetchParams
from ..errors import FetchError
from ..logging.config import get_logger

logger = get_logger(__name__)


class GateFuturesClient:
    """Fetch tickers and candle history from Gate.io's public futures API."""

    def __init__(
        self,
        base_url: str = "https://api.gateio.ws/api/v4",
        settle: str = "usdt",
        timeout_seconds: float = 10.0,
        session: Optional[requests.Session] = None,
        pool_maxsize: int = 10,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.settle = settle
        self.timeout_seconds = timeout_seconds
        if session is None:
            # One pooled connection per fetch worker
            session = requests.Session()
            adapter = HTTPAdapter(pool_connections=pool_maxsize, pool_maxsize=pool_maxsize)
            session.mount("https://", adapter)
            session.mount("http://", adapter)
        self.session = session
        self.session.headers.update({"Accept": "application/json"})

    @classmethod
    def from_config(cls, params: FetchParams) -> GateFuturesClient:
        return cls(
            base_url=params.base_url,
            settle=params.settle,
            timeout_seconds=params.timeout_seconds,
            pool_maxsize=params.max_workers,
        )

    def fetch_tickers(self) -> list[dict[str, Any]]:
        """Ticker list for every contract of the settle currency."""
        payload = self._get(f"/futures/{self.settle}/tickers")
        if not isinstance(payload, list):
            raise FetchError(
                f"Unexpected tickers payload type: {type(payload).__name__}",
                url=self._url(f"/futures/{self.settle}/tickers"),
            )
        return payload

    def fetch_candles(self, contract: str, interval: str, limit: int) -> list[Any]:
        """Raw candle rows for one contract, in the exchange's native order."""
        path = f"/futures/{self.settle}/candlesticks"
        payload = self._get(
            path,
            params={"contract": contract, "interval": interval, "limit": str(limit)},
        )
        if not isinstance(payload, list):
            raise FetchError(
                f"Unexpected candlesticks payload for {contract}: {str(payload)[:100]}",
                url=self._url(path),
            )
        return payload

    def close(self) -> None:
        self.session.close()

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _get(self, path: str, params: Optional[dict[str, str]] = None) -> Any:
        url = self._url(path)
        try:
            response = self.session.get(url, params=params, timeout=self.timeout_seconds)
        except requests.RequestException as exc:
            raise FetchError(f"Request to {url} failed: {exc}", url=url) from exc

        if not 200 <= response.status_code < 300:
            logger.debug("fetch_failed", url=url, status_code=response.status_code)
            raise FetchError(
                f"{url} returned HTTP {response.status_code}: {response.text[:200]}",
                url=url,
                status_code=response.status_code,
            )

        try:
            return orjson.loads(response.content)
        except orjson.JSONDecodeError as exc:
            raise FetchError(f"Invalid JSON from {url}: {exc}", url=url) from exc
