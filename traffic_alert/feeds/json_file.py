"""Telemetry source reading a status-style JSON document from disk."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

from traffic_alert.errors import TelemetryUnavailable
from traffic_alert.models import OwnshipState, TelemetrySnapshot, TelemetrySource, TrafficTarget
from traffic_alert.utils.geo import as_finite


class JsonFileTelemetrySource(TelemetrySource):
    """Reads ``{"gps": {...}, "attitude": {...}, "traffic": [...]}`` on every poll.

    Field names follow the status document: ``lat_deg``, ``lon_deg``,
    ``alt_feet``, ``track_deg``, ``vvel_fpm``, ``age_sec``, ``on_ground``.
    Sections or traffic entries of the wrong JSON type are ignored.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.reads = 0
        self.errors = 0

    def poll(self) -> TelemetrySnapshot:
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            self.errors += 1
            raise TelemetryUnavailable(f"{self.path}: {exc}") from exc
        if not isinstance(payload, dict):
            self.errors += 1
            raise TelemetryUnavailable(f"{self.path}: top-level JSON value is not an object")
        self.reads += 1
        return parse_status(payload)


def parse_status(payload: Mapping[str, Any]) -> TelemetrySnapshot:
    gps = _section(payload.get("gps"))
    attitude = _section(payload.get("attitude"))
    # AHRS magnetic heading only backs up a missing GPS track.
    magnetic_heading = as_finite(attitude.get("heading_deg")) if attitude.get("valid") is True else None
    ownship = OwnshipState.from_sources(
        lat_deg=as_finite(gps.get("lat_deg")),
        lon_deg=as_finite(gps.get("lon_deg")),
        alt_ft=as_finite(gps.get("alt_feet")),
        track_deg=as_finite(gps.get("track_deg")),
        heading_deg=magnetic_heading,
        valid=gps.get("valid") is True,
    )
    entries = payload.get("traffic")
    traffic = []
    for entry in entries if isinstance(entries, list) else []:
        if not isinstance(entry, Mapping):
            continue
        target_id = str(entry.get("icao") or entry.get("tail") or "").strip()
        if not target_id:
            continue
        age = as_finite(entry.get("age_sec"))
        traffic.append(
            TrafficTarget(
                target_id=target_id,
                lat_deg=as_finite(entry.get("lat_deg")),
                lon_deg=as_finite(entry.get("lon_deg")),
                alt_ft=as_finite(entry.get("alt_feet")),
                vvel_fpm=as_finite(entry.get("vvel_fpm")),
                track_deg=as_finite(entry.get("track_deg")),
                age_s=0.0 if age is None else age,
                on_ground=bool(entry.get("on_ground", False)),
                extrapolated=bool(entry.get("extrapolated", False)),
                tail=str(entry["tail"]) if entry.get("tail") else None,
                ground_kt=as_finite(entry.get("ground_kt")),
            )
        )
    return TelemetrySnapshot(ownship=ownship, traffic=tuple(traffic))


def _section(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}
