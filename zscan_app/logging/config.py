"""
Centralized logging configuration for the scan pipeline.

This module provides standardized logging configuration using structlog
for all components. Candidate outcomes and run summaries are logged as
structured events so skips can be told apart from low-conviction rejections.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
    """
    log_level = getattr(logging, level.upper())

    # Logs go to stderr so --dry-run output on stdout stays parseable
    logging.basicConfig(
        level=log_level,
        stream=sys.stderr,
        format="%(message)s"
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_scan_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for per-candidate scan decisions.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for candidate outcomes
    """
    return get_logger(name).bind(subsystem="scan")


def log_candidate_outcome(
    logger: FilteringBoundLogger,
    symbol: str,
    outcome: str,
    reason: Optional[str] = None,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log one candidate's evaluation outcome with standardized format.

    Skips are warnings, rejections below the admission threshold are debug
    and accepted signals are info.

    Args:
        logger: Structlog logger instance
        symbol: Contract identifier
        outcome: "accepted", "rejected" or "skipped"
        reason: Skip reason or rejection detail
        context: Additional context data (scores, error fields)
    """
    bound_logger = logger.bind(symbol=symbol, outcome=outcome)

    if reason:
        bound_logger = bound_logger.bind(reason=reason)

    if context:
        bound_logger = bound_logger.bind(context=context)

    if outcome == "skipped":
        bound_logger.warning("candidate_skipped")
    elif outcome == "rejected":
        bound_logger.debug("candidate_rejected")
    else:
        bound_logger.info("candidate_scored")


def log_run_summary(
    logger: FilteringBoundLogger,
    mode: str,
    candidates: int,
    accepted: int,
    rejected: int,
    skipped: int,
    duration_ms: Optional[int] = None
) -> None:
    """
    Log the outcome counts of a finished scan run.

    Args:
        logger: Structlog logger instance
        mode: Run mode token
        candidates: Number of top-N candidates evaluated
        accepted: Signals admitted to the feed
        rejected: Signals below the admission threshold
        skipped: Candidates that produced no signal due to errors
        duration_ms: Wall-clock duration of the run
    """
    logger.info(
        "scan_completed",
        mode=mode,
        candidates=candidates,
        accepted=accepted,
        rejected=rejected,
        skipped=skipped,
        duration_ms=duration_ms
    )
