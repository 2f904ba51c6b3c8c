"""Unit tests for structured logging setup."""

import pytest
import structlog
from structlog.testing import capture_logs

from zscan_app.logging.config import (
    configure_logging,
    get_scan_logger,
    log_candidate_outcome,
    log_run_summary,
)


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


class TestConfigureLogging:
    """Test suite for the processor chain."""

    def test_json_renderer_last(self) -> None:
        """Test JSON output renders after every other processor."""
        configure_logging(level="DEBUG", format_json=True)

        processors = structlog.get_config()["processors"]

        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
        assert any(isinstance(p, structlog.processors.TimeStamper) for p in processors)

    def test_console_without_timestamp(self) -> None:
        """Test the console renderer and the timestamp switch."""
        configure_logging(include_timestamp=False)

        processors = structlog.get_config()["processors"]

        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
        assert not any(isinstance(p, structlog.processors.TimeStamper) for p in processors)


class TestOutcomeLogging:
    """Test suite for candidate and run events."""

    @pytest.mark.parametrize("outcome,event,level", [
        ("skipped", "candidate_skipped", "warning"),
        ("rejected", "candidate_rejected", "debug"),
        ("accepted", "candidate_scored", "info"),
    ])
    def test_candidate_outcome_levels(self, outcome, event, level) -> None:
        """Test each outcome is logged at its own level."""
        with capture_logs() as logs:
            log_candidate_outcome(get_scan_logger("test"), "BTC_USDT", outcome, reason="detail")

        assert len(logs) == 1
        assert logs[0]["event"] == event
        assert logs[0]["log_level"] == level
        assert logs[0]["symbol"] == "BTC_USDT"
        assert logs[0]["subsystem"] == "scan"
        assert logs[0]["reason"] == "detail"

    def test_run_summary_counts(self) -> None:
        """Test the run summary carries every outcome count."""
        with capture_logs() as logs:
            log_run_summary(get_scan_logger("test"), "slow", candidates=10, accepted=3, rejected=5, skipped=2)

        assert logs[0]["mode"] == "slow"
        assert (logs[0]["candidates"], logs[0]["accepted"], logs[0]["rejected"], logs[0]["skipped"]) == (10, 3, 5, 2)
