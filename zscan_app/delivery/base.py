"""Base classes for feed delivery mechanisms."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import orjson

from ..logging.config import get_logger
from ..signals.models import RankedFeed


class DeliveryStatus(Enum):
    """Feed delivery status."""
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class DeliveryResult:
    """Result of a feed delivery attempt."""
    status: DeliveryStatus
    message: Optional[str] = None
    delivery_time_ms: Optional[int] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.status is DeliveryStatus.SUCCESS


def serialize_document(document: dict[str, Any], indent: bool = True) -> bytes:
    """Serialize a feed document to UTF-8 JSON bytes."""
    option = orjson.OPT_INDENT_2 if indent else 0
    return orjson.dumps(document, option=option)


class BaseFeedDelivery(ABC):
    """Base class for feed delivery mechanisms."""

    def __init__(self, name: str, config: Any):
        self.name = name
        self.config = config
        self.logger = get_logger(f"feed.delivery.{name}")
        self._delivery_count = 0
        self._error_count = 0

    @abstractmethod
    def deliver(self, feed: RankedFeed) -> DeliveryResult:
        """
        Deliver a ranked feed to the configured destination.

        Args:
            feed: Feed produced by a scan run

        Returns:
            Delivery result
        """
        pass

    @abstractmethod
    def health_check(self) -> bool:
        """Check if delivery mechanism is healthy."""
        pass

    def _record(self, result: DeliveryResult) -> DeliveryResult:
        if result.ok:
            self._delivery_count += 1
        else:
            self._error_count += 1
        return result

    def get_stats(self) -> dict[str, Any]:
        """Get delivery statistics."""
        return {
            "name": self.name,
            "delivery_count": self._delivery_count,
            "error_count": self._error_count,
            "success_rate": (
                self._delivery_count / (self._delivery_count + self._error_count)
                if (self._delivery_count + self._error_count) > 0 else 0.0
            )
        }
