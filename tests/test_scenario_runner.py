from __future__ import annotations

import json
from pathlib import Path

import pytest

from sim.scenario_runner import build_run_config, run_scenarios

HEAD_ON = {
    "name": "head_on",
    "duration_s": 90,
    "traffic_count": 0,
    "ownship_radius_nm": 0.0,
    "ownship_heading_deg": 90.0,
    "scripted_targets": [
        {
            "target_id": "A1B2C3",
            "lat_deg": 40.0,
            "lon_deg": -74.913,
            "alt_ft": 4800.0,
            "track_deg": 270.0,
            "ground_kt": 120.0,
        }
    ],
}


def _write_scenario(path: Path, payload: dict) -> Path:
    path.write_text(json.dumps(payload))
    return path


def test_scenario_runner_outputs(tmp_path: Path) -> None:
    scenarios_dir = tmp_path / "scenarios"
    scenarios_dir.mkdir()
    head_on = _write_scenario(scenarios_dir / "head_on.json", HEAD_ON)
    muted = _write_scenario(scenarios_dir / "muted.json", {**HEAD_ON, "name": "muted", "mode": "off"})
    run_root = tmp_path / "runs"

    summaries = run_scenarios([head_on, muted], run_root=run_root, save_figs=False)

    assert len(summaries) == 2
    run_dirs = [Path(summary["run_dir"]) for summary in summaries]
    assert all((run_dir / "summary.json").exists() for run_dir in run_dirs)
    assert all((run_dir / "tick_log.csv").exists() for run_dir in run_dirs)
    assert (run_root / "summary.csv").exists()

    active = next(summary for summary in summaries if summary["scenario"] == "head_on")
    silent = next(summary for summary in summaries if summary["scenario"] == "muted")
    assert 59.0 <= active["first_in_range_t_s"] <= 62.0
    assert active["beep_count"] > 0
    assert active["speech_count"] > 0
    assert active["unique_candidates"] == 1
    assert silent["beep_count"] == 0
    assert silent["speech_count"] == 0
    assert silent["in_range_rate"] == pytest.approx(active["in_range_rate"])


def test_unknown_override_rejected() -> None:
    with pytest.raises(ValueError):
        build_run_config({"name": "bad", "duration_s": 5, "warp_factor": 9})


def test_missing_required_keys_rejected(tmp_path: Path) -> None:
    path = _write_scenario(tmp_path / "broken.json", {"name": "broken"})

    with pytest.raises(ValueError):
        run_scenarios([path], run_root=tmp_path / "runs", save_figs=False)
