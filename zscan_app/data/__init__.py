"""
Data ingestion and normalization module.

Handles ticker selection and normalization of raw exchange candle rows into
canonical oldest-first candles.
"""
