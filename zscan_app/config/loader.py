"""Configuration loader with 3-tier parameter precedence."""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Union

import yaml

from zscan_app.data.models import ChronoOrder
from zscan_app.errors import ConfigurationError

from .defaults import (
    MODE_PRESETS,
    ClassifierParams,
    FetchParams,
    HistoryParams,
    OutputParams,
    ScanConfig,
    ScanMode,
    ScanParams,
    ScoringParams,
    ZeroStdevPolicy,
    get_default_config,
)
from .validation import ConfigValidator, ValidationError

MODE_ENV_VAR = "MODE"
CONFIG_FILE_ENV_VAR = "SCAN_CONFIG_FILE"
DEFAULT_CONFIG_FILE = Path(__file__).parent / "scan.yaml"


def _parse_bool(raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"not a boolean: {raw!r}")


# env var -> (section or None for top level, key, parser)
ENV_OVERRIDES: dict[str, tuple[Optional[str], str, Callable[[str], Any]]] = {
    "SCAN_INTERVAL": (None, "interval", str),
    "SCAN_TOP_N": ("scan", "top_n", int),
    "SCAN_BASE_URL": ("fetch", "base_url", str),
    "SCAN_TIMEOUT": ("fetch", "timeout_seconds", float),
    "SCAN_MAX_WORKERS": ("fetch", "max_workers", int),
    "SCAN_CANDLE_LIMIT": ("fetch", "candle_limit", int),
    "SCAN_MIN_CANDLES": ("history", "min_candles", int),
    "SCAN_MIN_DISTINCT_CLOSES": ("history", "min_distinct_closes", int),
    "SCAN_SOURCE_ORDER": ("history", "source_order", str),
    "SCAN_CANDLE_LAYOUT": ("history", "candle_layout", str),
    "SCAN_WILDCARD_THRESHOLD": ("classifier", "wildcard_threshold", float),
    "SCAN_ALTCOIN_THRESHOLD": ("classifier", "altcoin_threshold", float),
    "SCAN_RETURN_WEIGHT": ("scoring", "return_weight", float),
    "SCAN_VOLUME_WEIGHT": ("scoring", "volume_weight", float),
    "SCAN_ATR_WEIGHT": ("scoring", "atr_weight", float),
    "SCAN_WILDCARD_FACTOR": ("scoring", "wildcard_factor", float),
    "SCAN_MIN_SCORE": ("scoring", "min_score", int),
    "SCAN_ZERO_STDEV_POLICY": ("scoring", "zero_stdev_policy", str),
    "SCAN_OUTPUT_DIR": ("output", "output_dir", str),
    "SCAN_INCLUDE_DIAGNOSTICS": ("output", "include_diagnostics", _parse_bool),
}


@dataclass(frozen=True)
class ConfigLoader:
    """
    Builds the immutable ScanConfig with 3-tier precedence.

    Priority order:
    1. Explicit overrides (command line)
    2. Environment variables
    3. YAML file, top-level sections then ``modes.<mode>``
    4. Mode-aware defaults (lowest priority)
    """

    config_file: Path
    environ: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        config_file: Optional[Union[str, Path]] = None,
        environ: Optional[Mapping[str, str]] = None
    ) -> "ConfigLoader":
        """Create a ConfigLoader reading the given (or process) environment."""
        if environ is None:
            environ = os.environ

        if config_file is None:
            env_file = environ.get(CONFIG_FILE_ENV_VAR)
            if env_file:
                config_file = Path(env_file)
            else:
                config_file = DEFAULT_CONFIG_FILE

        return cls(config_file=Path(config_file), environ=dict(environ))

    def resolve_mode(self, mode: Optional[Union[str, ScanMode]] = None) -> ScanMode:
        """Resolve the run mode from the argument, then MODE, then the file."""
        if mode is None:
            mode = self.environ.get(MODE_ENV_VAR) or self.load_file_config().get("mode") or "fast"

        if isinstance(mode, ScanMode):
            return mode

        try:
            return ScanMode(str(mode).strip().lower())
        except ValueError:
            valid = [m.value for m in ScanMode]
            raise ConfigurationError(
                f"Invalid mode: {mode!r}. Must be one of {valid}",
                errors=[ValidationError(field="mode", message=f"Must be one of {valid}", value=mode)]
            ) from None

    def load_file_config(self) -> dict[str, Any]:
        """Load the YAML configuration file, empty when absent."""
        if not self.config_file.exists():
            return {}

        try:
            with open(self.config_file) as f:
                file_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in {self.config_file}: {e}",
                context={"config_file": str(self.config_file)}
            ) from e

        if file_config is None:
            return {}
        if not isinstance(file_config, dict):
            raise ConfigurationError(
                f"Configuration file {self.config_file} must contain a mapping",
                context={"config_file": str(self.config_file)}
            )
        return file_config

    def load_env_overrides(self) -> dict[str, Any]:
        """Collect overrides from recognized environment variables."""
        overrides: dict[str, Any] = {}
        errors = []

        for env_name, (section, key, parser) in ENV_OVERRIDES.items():
            raw = self.environ.get(env_name)
            if raw is None or raw == "":
                continue

            try:
                value = parser(raw)
            except ValueError:
                errors.append(ValidationError(
                    field=env_name,
                    message=f"Could not parse as {getattr(parser, '__name__', 'value')}",
                    value=raw
                ))
                continue

            if section is None:
                overrides[key] = value
            else:
                overrides.setdefault(section, {})[key] = value

        if errors:
            raise ConfigurationError("Invalid environment configuration", errors=errors)

        return overrides

    def merge_config(
        self,
        mode: Optional[Union[str, ScanMode]] = None,
        overrides: Optional[dict[str, Any]] = None
    ) -> dict[str, Any]:
        """Merge all tiers into a plain configuration dictionary."""
        scan_mode = self.resolve_mode(mode)

        # Start with mode-aware defaults
        config = self._dataclass_to_dict(get_default_config(scan_mode))

        file_config = self.load_file_config()
        file_sections = {k: v for k, v in file_config.items() if k not in ("mode", "modes")}
        config = self._deep_merge(config, file_sections)

        mode_sections = self._mode_sections(file_config, scan_mode)
        config = self._deep_merge(config, mode_sections)

        config = self._deep_merge(config, self.load_env_overrides())

        if overrides:
            config = self._deep_merge(config, overrides)

        config["mode"] = scan_mode.value
        return config

    def load(
        self,
        mode: Optional[Union[str, ScanMode]] = None,
        overrides: Optional[dict[str, Any]] = None
    ) -> ScanConfig:
        """Merge, validate and freeze the configuration."""
        config = self.merge_config(mode, overrides)

        errors = ConfigValidator.validate_config(config)
        if errors:
            details = "; ".join(f"{err.field}: {err.message} (got: {err.value!r})" for err in errors)
            raise ConfigurationError(f"Invalid configuration: {details}", errors=errors)

        return build_scan_config(config)

    def _mode_sections(self, file_config: dict[str, Any], scan_mode: ScanMode) -> dict[str, Any]:
        """Sections under ``modes.<mode>``, empty when the file has none."""
        modes = file_config.get("modes") or {}
        if not isinstance(modes, dict):
            raise ConfigurationError(
                f"Invalid configuration: modes must be a mapping (got: {modes!r})",
                errors=[ValidationError(field="modes", message="Must be a mapping", value=modes)]
            )

        sections = modes.get(scan_mode.value) or {}
        if not isinstance(sections, dict):
            field_name = f"modes.{scan_mode.value}"
            raise ConfigurationError(
                f"Invalid configuration: {field_name} must be a mapping (got: {sections!r})",
                errors=[ValidationError(field=field_name, message="Must be a mapping", value=sections)]
            )

        return sections

    def _dataclass_to_dict(self, obj: Any) -> Any:
        """Convert nested dataclasses to dictionary, enums to their values."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name in obj.__dataclass_fields__:
                result[field_name] = self._dataclass_to_dict(getattr(obj, field_name))
            return result
        if isinstance(obj, Enum):
            return obj.value
        return obj

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result


def _section(config: dict[str, Any], name: str) -> dict[str, Any]:
    return dict(config.get(name) or {})


def build_scan_config(config: dict[str, Any]) -> ScanConfig:
    """Freeze a validated configuration dictionary into a ScanConfig."""
    history = _section(config, "history")
    if "source_order" in history:
        history["source_order"] = ChronoOrder(history["source_order"])

    scoring = _section(config, "scoring")
    if "zero_stdev_policy" in scoring:
        scoring["zero_stdev_policy"] = ZeroStdevPolicy(scoring["zero_stdev_policy"])

    mode = ScanMode(config["mode"])

    return ScanConfig(
        mode=mode,
        interval=config.get("interval", MODE_PRESETS[mode].interval),
        scan=ScanParams(**_section(config, "scan")),
        fetch=FetchParams(**_section(config, "fetch")),
        history=HistoryParams(**history),
        classifier=ClassifierParams(**_section(config, "classifier")),
        scoring=ScoringParams(**scoring),
        output=OutputParams(**_section(config, "output")),
    )


def load_config(
    mode: Optional[Union[str, ScanMode]] = None,
    config_file: Optional[Union[str, Path]] = None,
    overrides: Optional[dict[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None
) -> ScanConfig:
    """Convenience wrapper: create a loader and build the configuration."""
    return ConfigLoader.create(config_file, environ).load(mode, overrides)
