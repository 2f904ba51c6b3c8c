"""Standard output feed delivery mechanism."""

import sys

from ..config.delivery import StdoutDeliveryConfig
from ..signals.models import RankedFeed
from .base import BaseFeedDelivery, DeliveryResult, DeliveryStatus, serialize_document


class StdoutFeedDelivery(BaseFeedDelivery):
    """Prints the feed document to stdout (dry runs)."""

    def __init__(self, name: str, config: StdoutDeliveryConfig):
        super().__init__(name, config)
        self.config: StdoutDeliveryConfig = config

    def deliver(self, feed: RankedFeed) -> DeliveryResult:
        """Deliver the feed to stdout."""
        document = feed.to_document(self.config.include_diagnostics)
        output = serialize_document(document, self.config.indent).decode("utf-8")

        try:
            print(output, file=sys.stdout, flush=True)
        except OSError as e:
            self.logger.error("feed_print_failed", delivery_name=self.name, error=str(e))
            return self._record(DeliveryResult(
                status=DeliveryStatus.FAILED,
                message=f"Stdout error: {e}",
                error=e
            ))

        return self._record(DeliveryResult(
            status=DeliveryStatus.SUCCESS,
            message="Printed to stdout"
        ))

    def health_check(self) -> bool:
        """Check if stdout is available."""
        return sys.stdout.writable()
