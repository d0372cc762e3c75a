"""Deterministic simulated own-ship and traffic telemetry."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable

from traffic_alert.models import OwnshipState, TelemetrySnapshot, TelemetrySource, TrafficTarget

NM_PER_DEG_LAT = 60.0


@dataclass(frozen=True)
class SimOwnshipConfig:
    """Own-ship flying a figure-eight around a center point."""

    center_lat_deg: float = 40.0
    center_lon_deg: float = -75.0
    alt_ft: float = 3000.0
    radius_nm: float = 0.5
    period_s: float = 120.0
    alt_amplitude_ft: float = 500.0
    heading_deg: float = 0.0  # Used when radius_nm is 0.


@dataclass(frozen=True)
class SimTrafficConfig:
    """Ring of orbiting traffic plus an on-ground and a crossing target."""

    count: int = 8
    center_lat_deg: float = 40.0
    center_lon_deg: float = -75.0
    base_alt_ft: float = 4500.0
    alt_step_ft: float = 300.0
    ground_kt: float = 120.0
    radius_nm: float = 2.0
    period_s: float = 90.0
    alt_amplitude_ft: float = 150.0
    dropouts: bool = True
    keep_dropped_s: float = 30.0


@dataclass(frozen=True)
class ScriptedTarget:
    """Straight-line target for encounter scenarios."""

    target_id: str
    lat_deg: float
    lon_deg: float
    alt_ft: float | None
    track_deg: float = 0.0
    ground_kt: float = 0.0
    vvel_fpm: float = 0.0
    start_t_s: float = 0.0
    end_t_s: float | None = None
    on_ground: bool = False

    def position(self, t_s: float) -> tuple[float, float, float | None]:
        dt_h = (t_s - self.start_t_s) / 3600.0
        dist_nm = self.ground_kt * dt_h
        trk = math.radians(self.track_deg)
        dlat = dist_nm * math.cos(trk) / NM_PER_DEG_LAT
        dlon = dist_nm * math.sin(trk) / (NM_PER_DEG_LAT * math.cos(math.radians(self.lat_deg)))
        alt = None if self.alt_ft is None else self.alt_ft + self.vvel_fpm * dt_h * 60.0
        return self.lat_deg + dlat, self.lon_deg + dlon, alt


class OwnshipSim:
    def __init__(self, config: SimOwnshipConfig | None = None) -> None:
        self.config = config or SimOwnshipConfig()

    def state(self, t_s: float) -> OwnshipState:
        cfg = self.config
        period = cfg.period_s if cfg.period_s > 0 else 120.0
        w = 2.0 * math.pi * ((t_s % period) / period)
        radius_deg = cfg.radius_nm / NM_PER_DEG_LAT
        # Figure-eight: x = cos(w), y = 0.5 sin(2w).
        x = math.cos(w)
        y = 0.5 * math.sin(2.0 * w)
        lat = cfg.center_lat_deg + radius_deg * y
        lon = cfg.center_lon_deg + radius_deg * x / math.cos(math.radians(cfg.center_lat_deg))
        if cfg.radius_nm > 0.0:
            east = -math.sin(w)
            north = math.cos(2.0 * w)
            track = math.degrees(math.atan2(east, north)) % 360.0
        else:
            track = cfg.heading_deg

        # Vertical profile decoupled from the horizontal period.
        vp = max(period / 2.0, 30.0)
        wv = 2.0 * math.pi * ((t_s % vp) / vp)
        alt = cfg.alt_ft + cfg.alt_amplitude_ft * math.sin(wv)
        return OwnshipState.from_sources(
            lat_deg=lat,
            lon_deg=lon,
            alt_ft=float(round(alt)),
            track_deg=track,
        )


class TrafficSim:
    def __init__(self, config: SimTrafficConfig | None = None) -> None:
        self.config = config or SimTrafficConfig()

    def targets(self, t_s: float) -> list[tuple[TrafficTarget, bool]]:
        """Return ``(target, visible)`` pairs for every simulated aircraft."""

        cfg = self.config
        if cfg.count <= 0:
            return []
        period = cfg.period_s if cfg.period_s > 0 else 90.0
        radius_deg = (cfg.radius_nm if cfg.radius_nm > 0 else 2.0) / NM_PER_DEG_LAT
        cos_lat = math.cos(math.radians(cfg.center_lat_deg))
        phase = (t_s % period) / period
        base_theta = 2.0 * math.pi * phase

        out: list[tuple[TrafficTarget, bool]] = []
        for i in range(cfg.count):
            target_id = f"SIM{i:03d}"
            visible = True
            if cfg.dropouts and i >= 2 and i % 6 == 0:
                p = (phase + i * 0.07) % 1.0
                visible = not (0.20 <= p < 0.30)

            phase_v = ((t_s + i * 0.031) % period) / period
            w_v = 2.0 * math.pi * phase_v
            alt = cfg.base_alt_ft + (i - cfg.count // 2) * cfg.alt_step_ft
            alt += cfg.alt_amplitude_ft * math.sin(w_v)
            vvel = cfg.alt_amplitude_ft * (2.0 * math.pi / period) * math.cos(w_v) * 60.0

            if i == 0:
                target = TrafficTarget(
                    target_id=target_id,
                    lat_deg=cfg.center_lat_deg + radius_deg * 0.10,
                    lon_deg=cfg.center_lon_deg,
                    alt_ft=float(round(alt)),
                    vvel_fpm=0.0,
                    track_deg=0.0,
                    on_ground=True,
                    ground_kt=0.0,
                )
            elif i == 1:
                x = math.sin(base_theta)
                target = TrafficTarget(
                    target_id=target_id,
                    lat_deg=cfg.center_lat_deg - radius_deg * 0.15,
                    lon_deg=cfg.center_lon_deg + radius_deg * x / cos_lat,
                    alt_ft=float(round(alt)),
                    vvel_fpm=float(round(vvel)),
                    track_deg=90.0,
                    ground_kt=cfg.ground_kt,
                )
            else:
                offset = 2.0 * math.pi * (i / cfg.count)
                direction = 1.0 if i % 2 else -1.0
                theta = direction * base_theta + offset
                r = radius_deg * (0.6 + 0.4 * ((i * 0.37) % 1.0))
                track = (math.degrees(theta) + (90.0 if direction > 0 else 270.0)) % 360.0
                speed = cfg.ground_kt * 0.5 if i % 5 == 0 else cfg.ground_kt
                target = TrafficTarget(
                    target_id=target_id,
                    lat_deg=cfg.center_lat_deg + r * math.cos(theta),
                    lon_deg=cfg.center_lon_deg + r * math.sin(theta) / cos_lat,
                    alt_ft=float(round(alt)),
                    vvel_fpm=float(round(vvel)),
                    track_deg=track,
                    ground_kt=speed,
                    extrapolated=i % 7 == 0,
                )
            out.append((target, visible))
        return out


@dataclass
class _LastSeen:
    target: TrafficTarget
    t_s: float


class SimulatedTelemetrySource(TelemetrySource):
    """Telemetry source backed by the own-ship and traffic simulators.

    Targets that drop out keep being reported at their last position with a
    growing age until ``keep_dropped_s`` passes, like a traffic store with a TTL.
    """

    def __init__(
        self,
        clock_s: Callable[[], float],
        *,
        ownship: OwnshipSim | None = None,
        traffic: TrafficSim | None = None,
        scripted: list[ScriptedTarget] | None = None,
    ) -> None:
        self.clock_s = clock_s
        self.ownship = ownship or OwnshipSim()
        self.traffic = traffic
        self.scripted = list(scripted or [])
        self._last_seen: dict[str, _LastSeen] = {}
        self.poll_count = 0

    def poll(self) -> TelemetrySnapshot:
        t_s = float(self.clock_s())
        self.poll_count += 1
        reports: list[TrafficTarget] = []
        if self.traffic is not None:
            keep_s = self.traffic.config.keep_dropped_s
            for target, visible in self.traffic.targets(t_s):
                if visible:
                    self._last_seen[target.target_id] = _LastSeen(target, t_s)
                    reports.append(target)
                    continue
                last = self._last_seen.get(target.target_id)
                if last is not None and t_s - last.t_s <= keep_s:
                    reports.append(last.target.aged(t_s - last.t_s))
        for scripted in self.scripted:
            if t_s < scripted.start_t_s or (scripted.end_t_s is not None and t_s > scripted.end_t_s):
                continue
            lat, lon, alt = scripted.position(t_s)
            reports.append(
                TrafficTarget(
                    target_id=scripted.target_id,
                    lat_deg=lat,
                    lon_deg=lon,
                    alt_ft=alt,
                    vvel_fpm=scripted.vvel_fpm,
                    track_deg=scripted.track_deg,
                    on_ground=scripted.on_ground,
                    ground_kt=scripted.ground_kt,
                )
            )
        return TelemetrySnapshot(ownship=self.ownship.state(t_s), traffic=tuple(reports))
