from __future__ import annotations

import json
from pathlib import Path

import pytest

from traffic_alert.errors import TelemetryUnavailable
from traffic_alert.feeds.json_file import JsonFileTelemetrySource, parse_status
from traffic_alert.feeds.simulated import (
    OwnshipSim,
    ScriptedTarget,
    SimOwnshipConfig,
    SimTrafficConfig,
    SimulatedTelemetrySource,
    TrafficSim,
)
from traffic_alert.runtime.alert_types import AlertState
from traffic_alert.runtime.coordinator import AlertCoordinator
from traffic_alert.utils.geo import distance_nm

STATUS = {
    "gps": {"valid": True, "lat_deg": 40.0, "lon_deg": -75.0, "alt_feet": 1000, "track_deg": 90.0},
    "traffic": [
        {
            "icao": "ABC123",
            "tail": "N12345",
            "lat_deg": 40.0,
            "lon_deg": -74.983,
            "alt_feet": 1300,
            "vvel_fpm": -200,
            "age_sec": 2.5,
            "on_ground": False,
            "extrapolated": True,
        },
        {"icao": "", "tail": "", "lat_deg": 40.1, "lon_deg": -75.1},
    ],
}


def test_parse_status_maps_fields() -> None:
    snapshot = parse_status(STATUS)

    assert snapshot.ownship.heading_deg == 90.0
    assert snapshot.ownship.alt_ft == 1000.0
    assert len(snapshot.traffic) == 1
    target = snapshot.traffic[0]
    assert target.target_id == "ABC123"
    assert target.tail == "N12345"
    assert target.age_s == 2.5
    assert target.extrapolated is True
    assert target.vvel_fpm == -200.0


def test_json_file_source_reads_and_fails(tmp_path: Path) -> None:
    path = tmp_path / "status.json"
    source = JsonFileTelemetrySource(path)

    with pytest.raises(TelemetryUnavailable):
        source.poll()

    path.write_text(json.dumps(STATUS))
    assert source.poll().traffic[0].target_id == "ABC123"

    path.write_text("[1, 2")
    with pytest.raises(TelemetryUnavailable):
        source.poll()
    assert source.errors == 2
    assert source.reads == 1


def test_ownship_sim_stays_near_center() -> None:
    sim = OwnshipSim(SimOwnshipConfig(radius_nm=0.5))
    for t_s in (0.0, 17.0, 45.0, 90.0):
        state = sim.state(t_s)
        assert distance_nm(40.0, -75.0, state.lat_deg, state.lon_deg) <= 0.51
        assert 0.0 <= state.heading_deg < 360.0


def test_stationary_ownship_uses_configured_heading() -> None:
    state = OwnshipSim(SimOwnshipConfig(radius_nm=0.0, heading_deg=270.0)).state(12.0)

    assert state.heading_deg == 270.0
    assert state.lat_deg == 40.0


def test_traffic_sim_shapes() -> None:
    pairs = TrafficSim(SimTrafficConfig(count=8)).targets(0.0)
    targets = {target.target_id: target for target, _ in pairs}

    assert sorted(targets) == [f"SIM{i:03d}" for i in range(8)]
    assert targets["SIM000"].on_ground is True
    assert targets["SIM007"].extrapolated is True
    assert targets["SIM001"].extrapolated is False
    assert [t.target_id for t, _ in pairs if t.extrapolated] == ["SIM007"]
    assert targets["SIM003"].alt_ft != targets["SIM004"].alt_ft


def test_dropped_target_is_reported_with_growing_age() -> None:
    clock = {"t": 70.0}
    source = SimulatedTelemetrySource(lambda: clock["t"], traffic=TrafficSim(SimTrafficConfig(count=8)))

    first = {t.target_id: t for t in source.poll().traffic}
    assert first["SIM006"].age_s == 0.0

    clock["t"] = 72.0
    second = {t.target_id: t for t in source.poll().traffic}
    assert second["SIM006"].age_s == pytest.approx(2.0)
    assert second["SIM006"].lat_deg == first["SIM006"].lat_deg
    assert second["SIM005"].age_s == 0.0


def test_scripted_target_moves_along_track() -> None:
    scripted = ScriptedTarget(
        target_id="A1B2C3",
        lat_deg=40.0,
        lon_deg=-74.913,
        alt_ft=4800.0,
        track_deg=270.0,
        ground_kt=120.0,
        vvel_fpm=-100.0,
        end_t_s=100.0,
    )
    clock = {"t": 30.0}
    source = SimulatedTelemetrySource(
        lambda: clock["t"],
        ownship=OwnshipSim(SimOwnshipConfig(radius_nm=0.0)),
        scripted=[scripted],
    )

    target = source.poll().traffic[0]
    assert distance_nm(40.0, -74.913, target.lat_deg, target.lon_deg) == pytest.approx(1.0, abs=0.01)
    assert target.alt_ft == pytest.approx(4750.0)

    clock["t"] = 101.0
    assert source.poll().traffic == ()


def test_parse_status_ignores_malformed_sections() -> None:
    snapshot = parse_status({"gps": "x", "attitude": [1], "traffic": [None, "ABC123", 7, STATUS["traffic"][0]]})

    assert snapshot.ownship.lat_deg is None
    assert snapshot.ownship.valid is False
    assert [t.target_id for t in snapshot.traffic] == ["ABC123"]
    assert parse_status({"traffic": {"icao": "ABC123"}}).traffic == ()


def test_malformed_traffic_entry_does_not_break_telemetry_tick(tmp_path: Path) -> None:
    path = tmp_path / "status.json"
    path.write_text(json.dumps(STATUS))
    coord = AlertCoordinator(source=JsonFileTelemetrySource(path))

    assert coord.telemetry_tick(now_ms=0.0) is True
    path.write_text(json.dumps({**STATUS, "traffic": [None]}))
    assert coord.telemetry_tick(now_ms=1000.0) is True
    out = coord.render_tick(now_ms=1000.0)

    assert out.state == AlertState.NO_CANDIDATE
    assert coord.telemetry_failures == 0


def test_attitude_heading_backs_up_missing_track() -> None:
    gps = {"valid": True, "lat_deg": 40.0, "lon_deg": -75.0, "alt_feet": 1000}
    attitude = {"valid": True, "heading_deg": 90.0}

    assert parse_status({"gps": gps, "attitude": attitude}).ownship.heading_deg == 90.0
    with_track = parse_status({"gps": {**gps, "track_deg": 180.0}, "attitude": attitude})
    assert with_track.ownship.heading_deg == 180.0
    invalid = parse_status({"gps": gps, "attitude": {"valid": False, "heading_deg": 90.0}})
    assert invalid.ownship.heading_deg is None
    assert parse_status({"gps": {**gps, "heading_deg": 45.0}}).ownship.heading_deg is None
