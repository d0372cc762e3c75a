"""User-tunable alert controls with fixed preset lists."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Mapping

from traffic_alert.errors import InvalidControlValue
from traffic_alert.utils.geo import as_finite
from traffic_alert.utils.logging import get_logger

LOGGER = get_logger()


class AlertMode(str, Enum):
    OFF = "off"
    BOTH = "both"
    SPEECH = "speech"
    BEEP = "beep"


PLOT_RANGE_PRESETS_NM: tuple[float, ...] = (2.0, 5.0, 10.0, 20.0, 40.0)
ALERT_RANGE_PRESETS_NM: tuple[float, ...] = (0.5, 1.0, 2.0, 3.0, 5.0)
ALT_BAND_PRESETS_FT: tuple[float, ...] = (500.0, 1000.0, 1500.0, 2000.0, 3000.0)

DEFAULT_PLOT_RANGE_NM = 5.0
DEFAULT_ALERT_RANGE_NM = 2.0
DEFAULT_ALT_BAND_FT = 1000.0
DEFAULT_MODE = AlertMode.BOTH

BEEP_MODES = frozenset({AlertMode.BEEP, AlertMode.BOTH})
SPEECH_MODES = frozenset({AlertMode.SPEECH, AlertMode.BOTH})

_MODE_RING = (AlertMode.OFF, AlertMode.BOTH, AlertMode.SPEECH, AlertMode.BEEP)


def cycle_mode(mode: AlertMode) -> AlertMode:
    """Advance one step along off -> both -> speech -> beep -> off."""

    idx = _MODE_RING.index(AlertMode(mode))
    return _MODE_RING[(idx + 1) % len(_MODE_RING)]


@dataclass(frozen=True)
class ControlState:
    """Plot range, alert range, altitude band and alert mode.

    Instances built by persistence layers may carry arbitrary values; call
    ``sanitized()`` before use. Instances built through ``with_*`` helpers are
    always valid.
    """

    plot_range_nm: Any = DEFAULT_PLOT_RANGE_NM
    alert_range_nm: Any = DEFAULT_ALERT_RANGE_NM
    alert_alt_band_ft: Any = DEFAULT_ALT_BAND_FT
    mode: Any = DEFAULT_MODE

    def sanitized(self) -> ControlState:
        """Return a copy with every out-of-preset value replaced by its default."""

        return ControlState(
            plot_range_nm=_preset_or_default(
                "plot_range_nm", self.plot_range_nm, PLOT_RANGE_PRESETS_NM, DEFAULT_PLOT_RANGE_NM
            ),
            alert_range_nm=_preset_or_default(
                "alert_range_nm", self.alert_range_nm, ALERT_RANGE_PRESETS_NM, DEFAULT_ALERT_RANGE_NM
            ),
            alert_alt_band_ft=_preset_or_default(
                "alert_alt_band_ft", self.alert_alt_band_ft, ALT_BAND_PRESETS_FT, DEFAULT_ALT_BAND_FT
            ),
            mode=_mode_or_default(self.mode),
        )

    def with_plot_range(self, value: Any) -> ControlState:
        return replace(self, plot_range_nm=require_preset("plot_range_nm", value, PLOT_RANGE_PRESETS_NM))

    def with_alert_range(self, value: Any) -> ControlState:
        return replace(self, alert_range_nm=require_preset("alert_range_nm", value, ALERT_RANGE_PRESETS_NM))

    def with_alert_alt_band(self, value: Any) -> ControlState:
        return replace(self, alert_alt_band_ft=require_preset("alert_alt_band_ft", value, ALT_BAND_PRESETS_FT))

    def with_mode(self, value: Any) -> ControlState:
        try:
            mode = AlertMode(value)
        except ValueError as exc:
            raise InvalidControlValue(f"mode must be one of {[m.value for m in AlertMode]}, got {value!r}") from exc
        return replace(self, mode=mode)

    def cycled(self) -> ControlState:
        return replace(self, mode=cycle_mode(_mode_or_default(self.mode)))

    def to_dict(self) -> dict[str, Any]:
        mode = self.mode.value if isinstance(self.mode, AlertMode) else self.mode
        return {
            "plot_range_nm": self.plot_range_nm,
            "alert_range_nm": self.alert_range_nm,
            "alert_alt_band_ft": self.alert_alt_band_ft,
            "mode": mode,
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ControlState:
        """Build an unvalidated instance from stored key/value pairs."""

        return cls(
            plot_range_nm=data.get("plot_range_nm", DEFAULT_PLOT_RANGE_NM),
            alert_range_nm=data.get("alert_range_nm", DEFAULT_ALERT_RANGE_NM),
            alert_alt_band_ft=data.get("alert_alt_band_ft", DEFAULT_ALT_BAND_FT),
            mode=data.get("mode", DEFAULT_MODE.value),
        )


def require_preset(name: str, value: Any, presets: tuple[float, ...]) -> float:
    matched = _match_preset(value, presets)
    if matched is None:
        raise InvalidControlValue(f"{name} must be one of {list(presets)}, got {value!r}")
    return matched


def _match_preset(value: Any, presets: tuple[float, ...]) -> float | None:
    number = as_finite(value)
    if number is None:
        return None
    for preset in presets:
        if abs(number - preset) < 1e-9:
            return preset
    return None


def _preset_or_default(name: str, value: Any, presets: tuple[float, ...], default: float) -> float:
    matched = _match_preset(value, presets)
    if matched is None:
        LOGGER.debug("Control %s=%r not in presets; using default %s", name, value, default)
        return default
    return matched


def _mode_or_default(value: Any) -> AlertMode:
    try:
        return AlertMode(value)
    except ValueError:
        LOGGER.debug("Control mode=%r unknown; using default %s", value, DEFAULT_MODE.value)
        return DEFAULT_MODE
