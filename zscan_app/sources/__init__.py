"""Exchange market data sources."""

from .gate import GateFuturesClient

__all__ = ["GateFuturesClient"]
