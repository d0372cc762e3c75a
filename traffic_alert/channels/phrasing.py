"""Spoken traffic callouts."""

from __future__ import annotations

from traffic_alert.config import AlertConfig
from traffic_alert.models import AlertCandidate
from traffic_alert.utils.geo import as_finite, clock_position, round_half_up


def build_utterance(candidate: AlertCandidate, cfg: AlertConfig | None = None) -> str:
    """Compose e.g. "Traffic, 2 o'clock, 1.4 nautical miles, 300 feet above, climbing".

    Parts whose source value is missing or non-finite are left out.
    """

    cfg = cfg or AlertConfig()
    parts = ["Traffic"]

    clock = clock_position(candidate.relative_bearing_deg)
    if clock is not None:
        parts.append(f"{clock} o'clock")

    dist = as_finite(candidate.distance_nm)
    if dist is not None:
        parts.append(f"{round_half_up(dist * 10.0) / 10.0:.1f} nautical miles")

    altitude = altitude_phrase(candidate.alt_delta_ft)
    if altitude is not None:
        parts.append(altitude)

    trend = trend_word(candidate.vvel_fpm, cfg.level_threshold_fpm)
    if trend is not None:
        parts.append(trend)

    return ", ".join(parts)


def altitude_phrase(alt_delta_ft: float | None) -> str | None:
    delta = as_finite(alt_delta_ft)
    if delta is None:
        return None
    hundreds = round_half_up(delta / 100.0) * 100
    if hundreds == 0:
        return "same altitude"
    if hundreds > 0:
        return f"{hundreds} feet above"
    return f"{-hundreds} feet below"


def trend_word(vvel_fpm: float | None, threshold_fpm: float = 50.0) -> str | None:
    rate = as_finite(vvel_fpm)
    if rate is None:
        return None
    if rate > threshold_fpm:
        return "climbing"
    if rate < -threshold_fpm:
        return "descending"
    return "level"
