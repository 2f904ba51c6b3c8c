"""
Error classification for the scan pipeline.

Data quality errors are scoped to one candidate and never abort a run.
System failures describe the exchange, configuration or output layer.
"""

from .data_quality import (
    DataQualityError,
    MalformedDataError,
    InsufficientDataError,
    DegenerateSeriesError,
    InvalidPriceError,
    TemporalDataError,
    UndefinedStatisticError,
)
from .system_failures import (
    SystemFailureError,
    FetchError,
    ConfigurationError,
    DeliveryError,
)

__all__ = [
    # Data Quality Errors
    "DataQualityError",
    "MalformedDataError",
    "InsufficientDataError",
    "DegenerateSeriesError",
    "InvalidPriceError",
    "TemporalDataError",
    "UndefinedStatisticError",
    # System Failures
    "SystemFailureError",
    "FetchError",
    "ConfigurationError",
    "DeliveryError",
]
