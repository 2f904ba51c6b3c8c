"""Scan configuration: defaults, loading and validation."""

from .defaults import ScanConfig, ScanMode, ZeroStdevPolicy, get_default_config
from .loader import ConfigLoader, load_config

__all__ = [
    "ConfigLoader",
    "ScanConfig",
    "ScanMode",
    "ZeroStdevPolicy",
    "get_default_config",
    "load_config",
]
