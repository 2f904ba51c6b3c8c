"""Command line entry point for a single scan run."""

from __future__ import annotations

import argparse
import sys
from typing import Any, Optional, Sequence

from .config.defaults import ScanConfig
from .config.delivery import create_file_delivery_config, create_stdout_delivery_config
from .config.loader import ConfigLoader
from .delivery.base import BaseFeedDelivery
from .delivery.file_delivery import FileFeedDelivery
from .delivery.stdout_delivery import StdoutFeedDelivery
from .engine import ScanEngine
from .errors import ConfigurationError, DeliveryError, FetchError
from .logging.config import configure_logging, get_logger

EXIT_OK = 0
EXIT_FETCH_FAILED = 1
EXIT_CONFIG_INVALID = 2
EXIT_DELIVERY_FAILED = 3

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zscan",
        description="Rank the most liquid USDT futures by return/volume anomaly score.",
    )
    parser.add_argument("--mode", choices=["fast", "slow"], help="Run mode (overrides MODE).")
    parser.add_argument("--config", help="YAML configuration file (overrides SCAN_CONFIG_FILE).")
    parser.add_argument("--output-dir", help="Directory for the feed document.")
    parser.add_argument("--top-n", type=int, help="Number of contracts by 24h volume to evaluate.")
    parser.add_argument("--min-score", type=int, help="Admission threshold (inclusive).")
    parser.add_argument("--log-level", default="INFO", help="Logging level.")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON lines.")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the feed document to stdout instead of writing the file.",
    )
    return parser


def _overrides_from_args(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if args.output_dir:
        overrides.setdefault("output", {})["output_dir"] = args.output_dir
    if args.top_n is not None:
        overrides.setdefault("scan", {})["top_n"] = args.top_n
    if args.min_score is not None:
        overrides.setdefault("scoring", {})["min_score"] = args.min_score
    return overrides


def build_delivery(config: ScanConfig, dry_run: bool = False) -> BaseFeedDelivery:
    """File delivery to the mode-specific path, or stdout for dry runs."""
    if dry_run:
        return StdoutFeedDelivery("stdout", create_stdout_delivery_config(config))
    return FileFeedDelivery("file", create_file_delivery_config(config))


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level=args.log_level, format_json=args.json_logs)

    try:
        loader = ConfigLoader.create(args.config)
        config = loader.load(mode=args.mode, overrides=_overrides_from_args(args))
    except ConfigurationError as exc:
        logger.error("configuration_invalid", error=str(exc))
        return EXIT_CONFIG_INVALID

    engine = ScanEngine(config, delivery=build_delivery(config, args.dry_run))

    try:
        feed = engine.run()
    except FetchError as exc:
        logger.error("ticker_fetch_failed", url=exc.url, status_code=exc.status_code, error=str(exc))
        return EXIT_FETCH_FAILED
    except DeliveryError as exc:
        logger.error("feed_delivery_failed", delivery_method=exc.delivery_method, error=str(exc))
        return EXIT_DELIVERY_FAILED
    finally:
        engine.client.close()

    logger.info("scan_finished", items=feed.count, **engine.get_stats())
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
