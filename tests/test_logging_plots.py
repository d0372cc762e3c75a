from __future__ import annotations

import csv
import json
from pathlib import Path

import pytest

from traffic_alert.backends.recording import RecordingAudioBackend, RecordingSpeechBackend
from traffic_alert.config import SimRunConfig
from traffic_alert.logger import TICK_CSV_COLUMNS, append_tick_csv, load_tick_rows, save_ticks_csv
from traffic_alert.models import OwnshipState, TrafficTarget
from traffic_alert.runtime.coordinator import AlertCoordinator
from sim.run_demo import run_demo

OWN = OwnshipState(lat_deg=40.0, lon_deg=-75.0, alt_ft=1000.0, heading_deg=90.0, valid=True)
INTRUDER = TrafficTarget(target_id="ABC123", lat_deg=40.0, lon_deg=-74.983, alt_ft=1300.0, vvel_fpm=300.0)


def _ticks():
    coord = AlertCoordinator(
        audio=RecordingAudioBackend(armed=True),
        speech=RecordingSpeechBackend(auto_finish=True),
    )
    return [
        coord.tick(OWN, [INTRUDER], now_ms=0.0),
        coord.tick(OWN, [INTRUDER], now_ms=1000.0),
        coord.tick(OWN, [], now_ms=2000.0),
    ]


def test_tick_csv_roundtrip_keeps_utterance_commas(tmp_path: Path) -> None:
    path = tmp_path / "tick_log.csv"
    save_ticks_csv(path, _ticks())

    rows = load_tick_rows(path)

    assert len(rows) == 3
    assert list(rows[0]) == TICK_CSV_COLUMNS
    assert rows[0]["utterance"] == "Traffic, 12 o'clock, 0.8 nautical miles, 300 feet above, climbing"
    assert rows[0]["beeped"] == "1"
    assert rows[1]["beeped"] == "0"
    assert rows[2]["candidate_id"] == ""
    assert rows[2]["state"] == "no_candidate"


def test_append_tick_csv_writes_header_once(tmp_path: Path) -> None:
    path = tmp_path / "append.csv"
    for tick in _ticks():
        append_tick_csv(path, tick)

    with path.open(newline="", encoding="utf-8") as handle:
        lines = list(csv.reader(handle))
    assert lines[0] == TICK_CSV_COLUMNS
    assert len(lines) == 4


def test_ticks_to_frame_columns() -> None:
    pytest.importorskip("pandas")
    from traffic_alert.plots import ticks_to_frame

    frame = ticks_to_frame(_ticks())

    assert list(frame["state"]) == ["candidate_in_range", "candidate_in_range", "no_candidate"]
    assert frame.loc[0, "beeped"] == 1.0
    assert frame.loc[0, "distance_nm"] == pytest.approx(0.78, abs=0.01)


def test_demo_outputs(tmp_path: Path) -> None:
    pytest.importorskip("pandas")
    cfg = SimRunConfig(duration_s=5.0)
    tick_log_path = run_demo(cfg, tmp_path / "pytest", save_figs=True)
    output_dir = tick_log_path.parent
    expected_files = {
        "tick_log.csv",
        "run_metadata.json",
        "candidate_distance.png",
        "alert_state.png",
        "channel_events.png",
    }
    assert expected_files.issubset({path.name for path in output_dir.iterdir()})

    rows = load_tick_rows(tick_log_path)
    assert len(rows) == 50
    metadata = json.loads((output_dir / "run_metadata.json").read_text())
    assert metadata["summary"]["ticks"] == 50
    assert metadata["config"]["cfg_mode"] == "both"
