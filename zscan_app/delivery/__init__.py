"""Feed delivery: mode-specific JSON file or stdout."""

from .base import BaseFeedDelivery, DeliveryResult, DeliveryStatus
from .file_delivery import FileFeedDelivery
from .stdout_delivery import StdoutFeedDelivery

__all__ = [
    "BaseFeedDelivery",
    "DeliveryResult",
    "DeliveryStatus",
    "FileFeedDelivery",
    "StdoutFeedDelivery",
]
