"""Factories for assembling simulated alerting runs."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping

from traffic_alert.backends.recording import RecordingAudioBackend, RecordingSpeechBackend
from traffic_alert.config import AlertConfig, SimRunConfig
from traffic_alert.control.state import ControlState
from traffic_alert.feeds.simulated import (
    OwnshipSim,
    ScriptedTarget,
    SimOwnshipConfig,
    SimTrafficConfig,
    SimulatedTelemetrySource,
    TrafficSim,
)
from traffic_alert.runtime.coordinator import AlertCoordinator


class SimClock:
    """Manually advanced millisecond clock."""

    def __init__(self, t0_ms: float = 0.0) -> None:
        self.t_ms = float(t0_ms)

    def __call__(self) -> float:
        return self.t_ms

    @property
    def t_s(self) -> float:
        return self.t_ms / 1000.0

    def advance(self, dt_ms: float) -> float:
        self.t_ms += float(dt_ms)
        return self.t_ms


@dataclass
class SimRig:
    coordinator: AlertCoordinator
    source: SimulatedTelemetrySource
    audio: RecordingAudioBackend
    speech: RecordingSpeechBackend
    clock: SimClock


def scripted_target_from_dict(data: Mapping[str, Any]) -> ScriptedTarget:
    allowed = {f.name for f in fields(ScriptedTarget)}
    unknown = set(data) - allowed
    if unknown:
        raise ValueError(f"Unknown scripted target keys: {sorted(unknown)}")
    return ScriptedTarget(**dict(data))


def build_sim_coordinator(cfg: SimRunConfig, alert_cfg: AlertConfig | None = None) -> SimRig:
    """Return a coordinator wired to simulated telemetry and recording backends."""

    clock = SimClock()
    audio = RecordingAudioBackend(armed=cfg.audio_armed)
    speech = RecordingSpeechBackend(
        supported=cfg.speech_supported,
        clock=clock,
        utterance_ms=cfg.utterance_ms,
    )
    ownship = OwnshipSim(
        SimOwnshipConfig(
            center_lat_deg=cfg.center_lat_deg,
            center_lon_deg=cfg.center_lon_deg,
            alt_ft=cfg.ownship_alt_ft,
            radius_nm=cfg.ownship_radius_nm,
            heading_deg=cfg.ownship_heading_deg,
        )
    )
    traffic = None
    if cfg.traffic_count > 0:
        traffic = TrafficSim(
            SimTrafficConfig(
                count=cfg.traffic_count,
                center_lat_deg=cfg.center_lat_deg,
                center_lon_deg=cfg.center_lon_deg,
                base_alt_ft=cfg.ownship_alt_ft,
                radius_nm=cfg.traffic_radius_nm,
                dropouts=cfg.traffic_dropouts,
            )
        )
    source = SimulatedTelemetrySource(
        lambda: clock.t_s,
        ownship=ownship,
        traffic=traffic,
        scripted=[scripted_target_from_dict(item) for item in cfg.scripted_targets],
    )
    controls = ControlState(
        plot_range_nm=cfg.plot_range_nm,
        alert_range_nm=cfg.alert_range_nm,
        alert_alt_band_ft=cfg.alert_alt_band_ft,
        mode=cfg.mode,
    )
    coordinator = AlertCoordinator(
        audio=audio,
        speech=speech,
        source=source,
        controls=controls,
        cfg=alert_cfg,
        clock=clock,
    )
    return SimRig(coordinator=coordinator, source=source, audio=audio, speech=speech, clock=clock)
