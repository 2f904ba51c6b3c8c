"""
Utility functions module.

Time Semantics:
- Candle timestamps from the exchange are authoritative for bar ordering
- Wall-clock time is only used to stamp the generated feed
"""

from .time import epoch_to_datetime, local_timestamp, utc_now

__all__ = ["epoch_to_datetime", "local_timestamp", "utc_now"]
