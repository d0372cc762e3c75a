"""Configuration objects for the traffic alert engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class AlertConfig:
    """Timing and threshold constants for target selection and alert channels."""

    stale_age_s: float = 15.0
    display_ttl_s: float = 30.0
    beep_cooldown_ms: float = 2000.0
    beep_tone_spacing_ms: float = 180.0
    speech_repeat_ms: float = 10000.0
    speech_lock_ms: float = 4500.0
    level_threshold_fpm: float = 50.0


def default_alert_config() -> AlertConfig:
    """Return the stock alert thresholds."""

    return AlertConfig()


@dataclass(frozen=True)
class SimRunConfig:
    """Headless simulation run defaults."""

    duration_s: float = 60.0
    telemetry_dt_s: float = 1.0
    render_dt_s: float = 0.1
    center_lat_deg: float = 40.0
    center_lon_deg: float = -75.0
    ownship_alt_ft: float = 4500.0
    ownship_radius_nm: float = 0.5
    ownship_heading_deg: float = 0.0
    traffic_count: int = 8
    traffic_radius_nm: float = 2.0
    traffic_dropouts: bool = True
    plot_range_nm: float = 5.0
    alert_range_nm: float = 2.0
    alert_alt_band_ft: float = 1000.0
    mode: str = "both"
    audio_armed: bool = True
    speech_supported: bool = True
    utterance_ms: float = 2500.0
    scripted_targets: tuple[dict[str, Any], ...] = field(default_factory=tuple)
