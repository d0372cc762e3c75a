"""Error taxonomy for the traffic alert engine."""

from __future__ import annotations

from enum import Enum


class ExclusionReason(Enum):
    """Why a traffic target was left out of alert consideration."""

    MISSING_DATA = "missing_data"
    STALE_FEED = "stale_feed"
    ON_GROUND = "on_ground"
    BAD_DISTANCE = "bad_distance"
    OUTSIDE_ALT_BAND = "outside_alt_band"


class BackendUnavailable(Enum):
    """Output channels that cannot currently produce sound."""

    AUDIO_UNARMED = "AUDIO UNARMED"
    SPEECH_UNAVAILABLE = "SPEECH UNAVAILABLE"


class InvalidControlValue(ValueError):
    """A control value is not one of its presets."""


class TelemetryUnavailable(RuntimeError):
    """A telemetry poll failed; callers keep the last-known state."""
