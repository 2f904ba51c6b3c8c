"""
ZScan App - Futures Anomaly Scanner

Pulls recent candle history for the most liquid USDT perpetual futures,
scores each contract's latest bar by return and volume z-scores, classifies
its volatility regime and emits a ranked signal feed.
"""

__version__ = "0.1.0"
__author__ = "ZScan Team"
