"""
Main scan engine coordinator.

Orchestrates one scan run: ticker list, top-N selection, per-candidate
candle fetch and scoring, admission and ranking, feed delivery.

Tickers → Top-N → Normalize → Returns → Z-scores + Regime → Score → Rank → Deliver
"""

import time
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Optional

from .config.defaults import ScanConfig
from .data.models import TickerEntry, get_candle_layout
from .data.normalizer import CandleNormalizer
from .data.parsers import select_top_contracts
from .delivery.base import BaseFeedDelivery, DeliveryResult
from .errors import DataQualityError, DeliveryError, FetchError
from .logging.config import (
    get_logger,
    get_scan_logger,
    log_candidate_outcome,
    log_run_summary,
)
from .metrics.anomaly import AnomalyScorer
from .metrics.composite import CompositeScorer
from .metrics.returns import build_return_series, latest_return
from .metrics.volatility import VolatilityClassifier, calculate_atr_proxy
from .signals.aggregator import AggregateResult, SignalAggregator
from .signals.models import EvaluationResult, RankedFeed, Signal
from .sources.gate import GateFuturesClient
from .utils.time import utc_now

logger = get_logger(__name__)
scan_logger = get_scan_logger(__name__)


class CandidateEvaluator:
    """
    Scores one contract from its raw candle rows.

    Evaluation is side-effect free. Data quality errors are converted to a
    skipped EvaluationResult here; they never escape to the caller.
    """

    def __init__(self, config: ScanConfig) -> None:
        self.config = config
        self.order = config.history.source_order
        self.layout = get_candle_layout(config.history.candle_layout)

        self.normalizer = CandleNormalizer.from_config(config.history)
        self.anomaly_scorer = AnomalyScorer(config.scoring.zero_stdev_policy)
        self.classifier = VolatilityClassifier.from_config(config.classifier)
        self.composite_scorer = CompositeScorer.from_config(config.scoring)

    def evaluate(self, symbol: str, raw_candles: Optional[Sequence[Any]]) -> EvaluationResult:
        """
        Evaluate a single candidate.

        Args:
            symbol: Contract identifier
            raw_candles: Candle rows as returned by the exchange

        Returns:
            Scored result carrying a Signal, or a skipped result
        """
        try:
            return EvaluationResult.scored(self._score(symbol, raw_candles))
        except DataQualityError as e:
            return EvaluationResult.skipped(symbol, e)

    def _score(self, symbol: str, raw_candles: Optional[Sequence[Any]]) -> Signal:
        candles = self.normalizer.normalize(raw_candles, self.order, self.layout)

        closes = [candle.close for candle in candles]
        volumes = [candle.volume for candle in candles]

        returns = build_return_series(closes)
        anomaly = self.anomaly_scorer.score(returns, volumes)

        atr = calculate_atr_proxy(latest_return(returns))
        category = self.classifier.classify(atr)

        composite = self.composite_scorer.score(anomaly.return_z, anomaly.volume_z, atr, category)

        return Signal(
            symbol=symbol,
            direction=composite.direction,
            score=composite.score,
            category=category,
            return_z=anomaly.return_z,
            volume_z=anomaly.volume_z,
            atr=atr,
        )


def evaluate_candidate(symbol: str, raw_candles: Optional[Sequence[Any]], config: ScanConfig) -> EvaluationResult:
    """Score one contract with a throwaway evaluator."""
    return CandidateEvaluator(config).evaluate(symbol, raw_candles)


class ScanEngine:
    """
    Main coordinator for a scan run.

    The ticker list fetch is the only failure that ends a run; every
    per-candidate failure becomes a skipped outcome.
    """

    def __init__(
        self,
        config: ScanConfig,
        client: Optional[GateFuturesClient] = None,
        delivery: Optional[BaseFeedDelivery] = None
    ) -> None:
        """Initialize the scan engine."""
        self.config = config
        self.client = client or GateFuturesClient.from_config(config.fetch)
        self.delivery = delivery

        self.evaluator = CandidateEvaluator(config)
        self.aggregator = SignalAggregator.from_config(config.scoring)

        self.last_aggregate: Optional[AggregateResult] = None
        self.last_delivery: Optional[DeliveryResult] = None
        self.last_candidates: list[TickerEntry] = []

        logger.info(
            "Scan engine initialized",
            mode=config.mode.value,
            interval=config.interval,
            top_n=config.scan.top_n
        )

    def run(self) -> RankedFeed:
        """
        Execute one scan run.

        Returns:
            The ranked feed (also delivered when a delivery is configured)

        Raises:
            FetchError: If the ticker list cannot be fetched
            DeliveryError: If the configured delivery reports a failure
        """
        start_time = time.time()

        tickers = self.client.fetch_tickers()
        candidates = select_top_contracts(
            tickers,
            top_n=self.config.scan.top_n,
            quote_suffix=self.config.fetch.quote_suffix,
            volume_field=self.config.fetch.volume_field,
        )
        self.last_candidates = candidates

        results = self.evaluate_candidates([entry.symbol for entry in candidates])
        aggregate = self.aggregator.aggregate(results)
        self.last_aggregate = aggregate

        feed = RankedFeed(
            generated_at=utc_now(),
            mode=self.config.mode.value,
            interval=self.config.interval,
            items=aggregate.items,
        )

        log_run_summary(
            logger,
            mode=feed.mode,
            candidates=len(candidates),
            accepted=aggregate.accepted_count,
            rejected=len(aggregate.rejected),
            skipped=len(aggregate.skipped),
            duration_ms=int((time.time() - start_time) * 1000)
        )

        if self.delivery is not None:
            self.last_delivery = self.delivery.deliver(feed)
            if not self.last_delivery.ok:
                raise DeliveryError(
                    f"Feed delivery failed: {self.last_delivery.message}",
                    delivery_method=self.delivery.name,
                    context={"mode": feed.mode}
                )

        return feed

    def evaluate_candidates(self, symbols: Sequence[str]) -> list[EvaluationResult]:
        """
        Fetch and evaluate candidates with bounded concurrency.

        Results come back in the order of ``symbols`` regardless of
        completion order.
        """
        if not symbols:
            return []

        workers = min(self.config.fetch.max_workers, len(symbols))
        if workers <= 1:
            return [self.fetch_and_evaluate(symbol) for symbol in symbols]

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="zscan") as pool:
            return list(pool.map(self.fetch_and_evaluate, symbols))

    def fetch_and_evaluate(self, symbol: str) -> EvaluationResult:
        """Fetch one candidate's candles and score them."""
        try:
            raw_candles = self.client.fetch_candles(
                symbol,
                interval=self.config.interval,
                limit=self.config.fetch.candle_limit,
            )
        except FetchError as e:
            result = EvaluationResult.skipped(symbol, e)
        else:
            result = self.evaluator.evaluate(symbol, raw_candles)

        self._log_outcome(result)
        return result

    def _log_outcome(self, result: EvaluationResult) -> None:
        if not result.is_scored:
            log_candidate_outcome(
                scan_logger,
                result.symbol,
                "skipped",
                reason=result.reason,
                context={"error_type": result.error_type}
            )
            return

        signal = result.signal
        outcome = "accepted" if self.aggregator.admits(signal) else "rejected"
        log_candidate_outcome(
            scan_logger,
            signal.symbol,
            outcome,
            context={
                "score": signal.score,
                "direction": signal.direction.value,
                "category": signal.category.value,
            }
        )

    def get_stats(self) -> dict[str, Any]:
        """Outcome counts of the last run."""
        aggregate = self.last_aggregate
        if aggregate is None:
            return {"candidates": 0, "accepted": 0, "rejected": 0, "skipped": 0, "skip_reasons": {}}

        return {
            "candidates": len(self.last_candidates),
            "accepted": aggregate.accepted_count,
            "rejected": len(aggregate.rejected),
            "skipped": len(aggregate.skipped),
            "skip_reasons": aggregate.skip_reasons,
        }
