"""Alert controls: presets, mode cycling and persistence."""

from traffic_alert.control.persistence import (
    InMemoryControlPersistence,
    JsonFileControlPersistence,
    load_controls,
)
from traffic_alert.control.state import (
    ALERT_RANGE_PRESETS_NM,
    ALT_BAND_PRESETS_FT,
    PLOT_RANGE_PRESETS_NM,
    AlertMode,
    ControlState,
    cycle_mode,
)

__all__ = [
    "ALERT_RANGE_PRESETS_NM",
    "ALT_BAND_PRESETS_FT",
    "AlertMode",
    "ControlState",
    "InMemoryControlPersistence",
    "JsonFileControlPersistence",
    "PLOT_RANGE_PRESETS_NM",
    "cycle_mode",
    "load_controls",
]
