"""
System failure error classifications.

These exceptions represent failures outside a single contract's data. A
``FetchError`` on the ticker list ends the run; on a candle history request
the engine downgrades it to a per-candidate skip.
"""

from typing import Optional, Dict, Any


class SystemFailureError(Exception):
    """Base class for unrecoverable system failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class FetchError(SystemFailureError):
    """Network, HTTP status or payload decoding failure talking to the exchange."""

    def __init__(self, message: str, url: Optional[str] = None,
                 status_code: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.url = url
        self.status_code = status_code


class ConfigurationError(SystemFailureError):
    """Scan configuration failed validation at startup."""

    def __init__(self, message: str, errors: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.errors = errors or []


class DeliveryError(SystemFailureError):
    """Ranked feed could not be written to its destination."""

    def __init__(self, message: str, delivery_method: Optional[str] = None,
                 target: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.delivery_method = delivery_method
        self.target = target
