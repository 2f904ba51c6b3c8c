"""Configuration for feed delivery mechanisms."""

from dataclasses import dataclass

from .defaults import ScanConfig


@dataclass(frozen=True)
class FileDeliveryConfig:
    """Configuration for file-based delivery."""
    output_path: str
    include_diagnostics: bool = True
    indent: bool = True
    create_dirs: bool = True


@dataclass(frozen=True)
class StdoutDeliveryConfig:
    """Configuration for stdout delivery."""
    include_diagnostics: bool = True
    indent: bool = True


def create_file_delivery_config(config: ScanConfig) -> FileDeliveryConfig:
    """File delivery writing the mode-specific feed document."""
    return FileDeliveryConfig(
        output_path=str(config.output_path),
        include_diagnostics=config.output.include_diagnostics,
    )


def create_stdout_delivery_config(config: ScanConfig) -> StdoutDeliveryConfig:
    """Stdout delivery for dry runs."""
    return StdoutDeliveryConfig(include_diagnostics=config.output.include_diagnostics)
