"""
Data quality error classifications for candidate evaluation.

Every error in this module is scoped to a single contract: the scan engine
catches them at the candidate boundary and records the contract as skipped.
"""

from typing import Optional, Dict, Any


class DataQualityError(Exception):
    """Base class for data quality issues that can be handled gracefully."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class MalformedDataError(DataQualityError):
    """Data exists but is in incorrect format."""

    def __init__(self, message: str, raw_data: Optional[str] = None,
                 expected_format: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.raw_data = raw_data
        self.expected_format = expected_format


class InsufficientDataError(DataQualityError):
    """Not enough historical data for calculations."""

    def __init__(self, message: str, required_count: Optional[int] = None,
                 available_count: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.required_count = required_count
        self.available_count = available_count


class DegenerateSeriesError(DataQualityError):
    """Price series is too close to constant to carry information."""

    def __init__(self, message: str, distinct_count: Optional[int] = None,
                 required_distinct: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.distinct_count = distinct_count
        self.required_distinct = required_distinct


class InvalidPriceError(DataQualityError):
    """Close price that cannot be used as a return divisor."""

    def __init__(self, message: str, index: Optional[int] = None,
                 price: Optional[float] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.index = index
        self.price = price


class TemporalDataError(DataQualityError):
    """Timestamp sequencing contradicts the declared chronological order."""

    def __init__(self, message: str, timestamp: Optional[int] = None,
                 expected_timestamp: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.timestamp = timestamp
        self.expected_timestamp = expected_timestamp


class UndefinedStatisticError(DataQualityError):
    """Statistic cannot be computed (zero or non-finite dispersion, NaN leakage)."""

    def __init__(self, message: str, statistic: Optional[str] = None,
                 value: Optional[float] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.statistic = statistic
        self.value = value
