"""Great-circle distance and bearing utilities on a spherical Earth."""

from __future__ import annotations

import math
from typing import Any

import numpy as np

EARTH_RADIUS_M = 6_371_000.0
METERS_PER_NM = 1852.0


def distance_nm(lat1_deg: Any, lon1_deg: Any, lat2_deg: Any, lon2_deg: Any) -> float:
    """Haversine distance in nautical miles.

    Args:
        lat1_deg: Latitude of the first point in degrees.
        lon1_deg: Longitude of the first point in degrees.
        lat2_deg: Latitude of the second point in degrees.
        lon2_deg: Longitude of the second point in degrees.

    Returns:
        Distance in nautical miles, or NaN when any input is missing or non-finite.
    """

    coords = _coords(lat1_deg, lon1_deg, lat2_deg, lon2_deg)
    if coords is None:
        return float("nan")
    lat1, lon1, lat2, lon2 = np.deg2rad(coords)
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = np.sin(dlat / 2.0) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(dlon / 2.0) ** 2
    c = 2.0 * np.arctan2(np.sqrt(a), np.sqrt(max(0.0, 1.0 - a)))
    return float(EARTH_RADIUS_M * c / METERS_PER_NM)


def bearing_deg(lat1_deg: Any, lon1_deg: Any, lat2_deg: Any, lon2_deg: Any) -> float:
    """Initial great-circle bearing from point 1 to point 2, in [0, 360)."""

    coords = _coords(lat1_deg, lon1_deg, lat2_deg, lon2_deg)
    if coords is None:
        return float("nan")
    lat1, lon1, lat2, lon2 = np.deg2rad(coords)
    dlon = lon2 - lon1
    y = np.sin(dlon) * np.cos(lat2)
    x = np.cos(lat1) * np.sin(lat2) - np.sin(lat1) * np.cos(lat2) * np.cos(dlon)
    return _wrap_360(float(np.rad2deg(np.arctan2(y, x))))


def relative_bearing(bearing: Any, heading: Any) -> float:
    """Bearing relative to heading, ``(bearing - heading) mod 360``."""

    b = as_finite(bearing)
    h = as_finite(heading)
    if b is None or h is None:
        return float("nan")
    return _wrap_360(b - h)


def clock_position(rel_bearing_deg: Any) -> int | None:
    """Clock hour (1-12) for a relative bearing, 12 being dead ahead."""

    rel = as_finite(rel_bearing_deg)
    if rel is None:
        return None
    hour = round_half_up(rel / 30.0) % 12
    return 12 if hour == 0 else hour


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def as_finite(value: Any) -> float | None:
    """Return ``value`` as a float, or None when it is missing or non-finite."""

    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _coords(*values: Any) -> np.ndarray | None:
    parsed = [as_finite(value) for value in values]
    if any(value is None for value in parsed):
        return None
    return np.array(parsed, dtype=float)


def _wrap_360(angle_deg: float) -> float:
    wrapped = angle_deg % 360.0
    # -1e-15 % 360 rounds to 360.0 in floating point.
    return 0.0 if wrapped >= 360.0 else wrapped
