"""
Logging configuration and utilities for the scan pipeline.
"""
from .config import configure_logging, get_logger, get_scan_logger

__all__ = ["configure_logging", "get_logger", "get_scan_logger"]
