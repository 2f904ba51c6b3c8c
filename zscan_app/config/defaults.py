"""Default configuration parameters for the anomaly scan."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from zscan_app.data.models import ChronoOrder


class ScanMode(Enum):
    """Run mode selecting bar interval and output destination."""
    FAST = "fast"
    SLOW = "slow"


class ZeroStdevPolicy(Enum):
    """What a z-score does when the window has no dispersion."""
    NEUTRAL = "neutral"    # z forced to 0, candidate still scored
    SKIP = "skip"          # candidate skipped


@dataclass(frozen=True)
class ModePreset:
    """Mode-derived interval and output file name."""
    interval: str
    output_filename: str


MODE_PRESETS: dict[ScanMode, ModePreset] = {
    ScanMode.FAST: ModePreset(interval="1m", output_filename="data_fast.json"),
    ScanMode.SLOW: ModePreset(interval="5m", output_filename="data_slow.json"),
}


@dataclass(frozen=True)
class ScanParams:
    """Candidate universe parameters."""
    top_n: int = 100                                 # Contracts by 24h volume


@dataclass(frozen=True)
class FetchParams:
    """Exchange REST parameters."""
    base_url: str = "https://api.gateio.ws/api/v4"
    settle: str = "usdt"
    timeout_seconds: float = 10.0                    # Per request
    max_workers: int = 8                             # Concurrent candle fetches
    quote_suffix: str = "USDT"
    volume_field: str = "volume_24h"
    candle_limit: int = 60                           # Bars requested per contract


@dataclass(frozen=True)
class HistoryParams:
    """Candle history requirements and source contract."""
    min_candles: int = 30
    min_distinct_closes: int = 5                     # 0 disables the check
    source_order: ChronoOrder = ChronoOrder.OLDEST_FIRST
    candle_layout: str = "gate_futures"


@dataclass(frozen=True)
class ClassifierParams:
    """Volatility regime thresholds on abs(latest return)."""
    wildcard_threshold: float = 0.05
    altcoin_threshold: float = 0.02


@dataclass(frozen=True)
class ScoringParams:
    """Composite score weights and admission."""
    return_weight: float = 40.0
    volume_weight: float = 40.0
    atr_weight: float = 200.0
    wildcard_factor: float = 0.7                     # Applied before rounding
    min_score: int = 60                              # Inclusive
    zero_stdev_policy: ZeroStdevPolicy = ZeroStdevPolicy.NEUTRAL


@dataclass(frozen=True)
class OutputParams:
    """Feed document destination."""
    output_dir: str = "."
    filename: str = "data_fast.json"
    include_diagnostics: bool = True


@dataclass(frozen=True)
class ScanConfig:
    """Complete scan configuration, built once per process."""
    mode: ScanMode
    interval: str
    scan: ScanParams
    fetch: FetchParams
    history: HistoryParams
    classifier: ClassifierParams
    scoring: ScoringParams
    output: OutputParams

    @property
    def output_path(self) -> Path:
        """Mode-specific path of the feed document."""
        return Path(self.output.output_dir) / self.output.filename


def get_default_config(mode: ScanMode = ScanMode.FAST) -> ScanConfig:
    """Get the default configuration instance for a run mode."""
    preset = MODE_PRESETS[mode]
    return ScanConfig(
        mode=mode,
        interval=preset.interval,
        scan=ScanParams(),
        fetch=FetchParams(),
        history=HistoryParams(),
        classifier=ClassifierParams(),
        scoring=ScoringParams(),
        output=OutputParams(filename=preset.output_filename),
    )
