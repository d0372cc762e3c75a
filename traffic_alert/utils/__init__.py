"""Utilities for the traffic alert engine.

NOTE: Keep this package lightweight.
Avoid importing heavy/optional dependencies (matplotlib, pandas, ...) at import time.
"""

from traffic_alert.utils.geo import (
    as_finite,
    bearing_deg,
    clock_position,
    distance_nm,
    relative_bearing,
    round_half_up,
)
from traffic_alert.utils.logging import get_logger

__all__ = [
    "as_finite",
    "bearing_deg",
    "clock_position",
    "distance_nm",
    "get_logger",
    "relative_bearing",
    "round_half_up",
]
