"""File-based feed delivery mechanism."""

import os
import tempfile
import time
from pathlib import Path

import orjson

from ..config.delivery import FileDeliveryConfig
from ..signals.models import RankedFeed
from .base import (
    BaseFeedDelivery,
    DeliveryResult,
    DeliveryStatus,
    serialize_document,
)


class FileFeedDelivery(BaseFeedDelivery):
    """
    Writes the feed document to a file, replacing the previous run's.

    The document is written to a temporary file in the target directory and
    renamed over the destination, so readers never see a partial file.
    """

    def __init__(self, name: str, config: FileDeliveryConfig):
        super().__init__(name, config)
        self.config: FileDeliveryConfig = config
        self.output_path = Path(config.output_path)

    def deliver(self, feed: RankedFeed) -> DeliveryResult:
        """Deliver the feed to file."""
        start_time = time.time()

        try:
            if self.config.create_dirs:
                self.output_path.parent.mkdir(parents=True, exist_ok=True)

            document = feed.to_document(self.config.include_diagnostics)
            self._write_atomic(serialize_document(document, self.config.indent))

        except OSError as e:
            self.logger.warning(
                "feed_write_failed",
                delivery_name=self.name,
                output_path=str(self.output_path),
                error=str(e)
            )
            return self._record(DeliveryResult(
                status=DeliveryStatus.FAILED,
                message=f"File system error: {e}",
                error=e
            ))

        except orjson.JSONEncodeError as e:
            self.logger.error(
                "feed_encode_failed",
                delivery_name=self.name,
                error=str(e)
            )
            return self._record(DeliveryResult(
                status=DeliveryStatus.FAILED,
                message=f"JSON encoding error: {e}",
                error=e
            ))

        self.logger.info(
            "feed_written",
            delivery_name=self.name,
            output_path=str(self.output_path),
            count=feed.count
        )
        return self._record(DeliveryResult(
            status=DeliveryStatus.SUCCESS,
            message=f"Written to {self.output_path}",
            delivery_time_ms=int((time.time() - start_time) * 1000)
        ))

    def _write_atomic(self, payload: bytes) -> None:
        """Write bytes to a sibling temp file and rename it into place."""
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.output_path.name}.",
            suffix=".tmp",
            dir=self.output_path.parent
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(payload)
                f.write(b"\n")
            os.replace(tmp_name, self.output_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def health_check(self) -> bool:
        """Check if the output directory is writable."""
        directory = self.output_path.parent
        return directory.is_dir() and os.access(directory, os.W_OK)
