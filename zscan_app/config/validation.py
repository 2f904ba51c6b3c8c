"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any

from zscan_app.data.models import CANDLE_LAYOUTS, ChronoOrder

from .defaults import (
    ClassifierParams,
    FetchParams,
    HistoryParams,
    OutputParams,
    ScanMode,
    ScanParams,
    ScoringParams,
    ZeroStdevPolicy,
)

MAX_WORKERS_LIMIT = 20

SECTION_PARAMS: dict[str, type] = {
    "scan": ScanParams,
    "fetch": FetchParams,
    "history": HistoryParams,
    "classifier": ClassifierParams,
    "scoring": ScoringParams,
    "output": OutputParams,
}

TOP_LEVEL_KEYS = ("mode", "interval", *SECTION_PARAMS)


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


class ConfigValidator:
    """Validates merged configuration dictionaries."""

    @staticmethod
    def validate_scan_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate candidate universe parameters."""
        errors = []

        if "top_n" in params:
            value = params["top_n"]
            if not _is_int(value) or value <= 0:
                errors.append(ValidationError(
                    field="scan.top_n",
                    message="Must be a positive integer",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_fetch_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate exchange REST parameters."""
        errors = []

        if "base_url" in params:
            value = params["base_url"]
            if not isinstance(value, str) or not value.startswith(("http://", "https://")):
                errors.append(ValidationError(
                    field="fetch.base_url",
                    message="Must be an http(s) URL",
                    value=value
                ))

        if "timeout_seconds" in params:
            value = params["timeout_seconds"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="fetch.timeout_seconds",
                    message="Must be a positive number",
                    value=value
                ))

        if "max_workers" in params:
            value = params["max_workers"]
            if not _is_int(value) or value < 1 or value > MAX_WORKERS_LIMIT:
                errors.append(ValidationError(
                    field="fetch.max_workers",
                    message=f"Must be an integer between 1 and {MAX_WORKERS_LIMIT}",
                    value=value
                ))

        if "candle_limit" in params:
            value = params["candle_limit"]
            if not _is_int(value) or value < 2:
                errors.append(ValidationError(
                    field="fetch.candle_limit",
                    message="Must be an integer of at least 2",
                    value=value
                ))

        for key in ("settle", "quote_suffix", "volume_field"):
            if key in params:
                value = params[key]
                if not isinstance(value, str) or not value:
                    errors.append(ValidationError(
                        field=f"fetch.{key}",
                        message="Must be a non-empty string",
                        value=value
                    ))

        return errors

    @staticmethod
    def validate_history_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate candle history requirements."""
        errors = []

        if "min_candles" in params:
            value = params["min_candles"]
            if not _is_int(value) or value < 3:
                errors.append(ValidationError(
                    field="history.min_candles",
                    message="Must be an integer of at least 3",
                    value=value
                ))

        if "min_distinct_closes" in params:
            value = params["min_distinct_closes"]
            if not _is_int(value) or value < 0:
                errors.append(ValidationError(
                    field="history.min_distinct_closes",
                    message="Must be a non-negative integer",
                    value=value
                ))

        if "source_order" in params:
            value = params["source_order"]
            if value not in _enum_values(ChronoOrder):
                errors.append(ValidationError(
                    field="history.source_order",
                    message=f"Must be one of {_enum_values(ChronoOrder)}",
                    value=value
                ))

        if "candle_layout" in params:
            value = params["candle_layout"]
            if value not in CANDLE_LAYOUTS:
                errors.append(ValidationError(
                    field="history.candle_layout",
                    message=f"Must be one of {sorted(CANDLE_LAYOUTS)}",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_classifier_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate volatility regime thresholds."""
        errors = []

        for key in ("wildcard_threshold", "altcoin_threshold"):
            if key in params:
                value = params[key]
                if not _is_number(value) or value <= 0 or value > 1:
                    errors.append(ValidationError(
                        field=f"classifier.{key}",
                        message="Must be a positive number between 0 and 1",
                        value=value
                    ))

        wildcard = params.get("wildcard_threshold")
        altcoin = params.get("altcoin_threshold")
        if _is_number(wildcard) and _is_number(altcoin) and altcoin >= wildcard:
            errors.append(ValidationError(
                field="classifier.altcoin_threshold",
                message="Must be below wildcard_threshold",
                value=altcoin
            ))

        return errors

    @staticmethod
    def validate_scoring_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate composite weights and admission."""
        errors = []

        for key in ("return_weight", "volume_weight", "atr_weight"):
            if key in params:
                value = params[key]
                if not _is_number(value) or value < 0:
                    errors.append(ValidationError(
                        field=f"scoring.{key}",
                        message="Must be a non-negative number",
                        value=value
                    ))

        if "wildcard_factor" in params:
            value = params["wildcard_factor"]
            if not _is_number(value) or value <= 0 or value > 1:
                errors.append(ValidationError(
                    field="scoring.wildcard_factor",
                    message="Must be a positive number between 0 and 1",
                    value=value
                ))

        if "min_score" in params:
            value = params["min_score"]
            if not _is_int(value) or value < 0:
                errors.append(ValidationError(
                    field="scoring.min_score",
                    message="Must be a non-negative integer",
                    value=value
                ))

        if "zero_stdev_policy" in params:
            value = params["zero_stdev_policy"]
            if value not in _enum_values(ZeroStdevPolicy):
                errors.append(ValidationError(
                    field="scoring.zero_stdev_policy",
                    message=f"Must be one of {_enum_values(ZeroStdevPolicy)}",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_output_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate feed destination."""
        errors = []

        for key in ("output_dir", "filename"):
            if key in params:
                value = params[key]
                if not isinstance(value, str) or not value:
                    errors.append(ValidationError(
                        field=f"output.{key}",
                        message="Must be a non-empty string",
                        value=value
                    ))

        if "include_diagnostics" in params:
            value = params["include_diagnostics"]
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    field="output.include_diagnostics",
                    message="Must be a boolean",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_known_keys(section: str, params: dict[str, Any]) -> list[ValidationError]:
        """Report options a section does not define."""
        known = SECTION_PARAMS[section].__dataclass_fields__
        return [
            ValidationError(field=f"{section}.{key}", message="Unknown option", value=value)
            for key, value in params.items()
            if key not in known
        ]

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """
        Validate complete configuration.

        Sections that are not mappings (an empty ``scan:`` loads as None)
        are reported once and their options are not checked further.
        """
        errors = []

        for key, value in config.items():
            if key not in TOP_LEVEL_KEYS:
                errors.append(ValidationError(
                    field=str(key),
                    message="Unknown section",
                    value=value
                ))

        if "mode" in config and config["mode"] not in _enum_values(ScanMode):
            errors.append(ValidationError(
                field="mode",
                message=f"Must be one of {_enum_values(ScanMode)}",
                value=config["mode"]
            ))

        if "interval" in config:
            value = config["interval"]
            if not isinstance(value, str) or not value:
                errors.append(ValidationError(
                    field="interval",
                    message="Must be a non-empty string",
                    value=value
                ))

        section_validators = {
            "scan": ConfigValidator.validate_scan_params,
            "fetch": ConfigValidator.validate_fetch_params,
            "history": ConfigValidator.validate_history_params,
            "classifier": ConfigValidator.validate_classifier_params,
            "scoring": ConfigValidator.validate_scoring_params,
            "output": ConfigValidator.validate_output_params,
        }

        for section, validate in section_validators.items():
            if section not in config:
                continue

            params = config[section]
            if not isinstance(params, dict):
                errors.append(ValidationError(
                    field=section,
                    message="Must be a mapping",
                    value=params
                ))
                continue

            errors.extend(ConfigValidator.validate_known_keys(section, params))
            errors.extend(validate(params))

        # Every candidate would be skipped if fewer bars are requested than required
        fetch = config.get("fetch")
        history = config.get("history")
        limit = fetch.get("candle_limit") if isinstance(fetch, dict) else None
        minimum = history.get("min_candles") if isinstance(history, dict) else None
        if _is_int(limit) and _is_int(minimum) and limit < minimum:
            errors.append(ValidationError(
                field="fetch.candle_limit",
                message="Must be at least history.min_candles",
                value=limit
            ))

        return errors
