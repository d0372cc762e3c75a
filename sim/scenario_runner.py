"""Scenario runner for traffic alerting experiments."""

from __future__ import annotations

import argparse
import csv
import json
import math
from dataclasses import fields
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import numpy as np

from traffic_alert.config import SimRunConfig
from traffic_alert.logger import load_tick_rows
from sim.run_demo import run_demo, sanitize_json

RESERVED_KEYS = {"name", "duration_s", "description"}
REQUIRED_KEYS = {"name", "duration_s"}

SUMMARY_COLUMNS = [
    "scenario",
    "run_dir",
    "mode",
    "ticks",
    "in_range_rate",
    "beep_count",
    "speech_count",
    "candidate_min_distance_nm",
    "first_in_range_t_s",
    "unique_candidates",
    "excluded_stale_feed",
    "excluded_on_ground",
    "excluded_outside_alt_band",
]


def run_scenarios(
    scenario_paths: list[Path],
    *,
    run_root: Path = Path("runs"),
    save_figs: bool = True,
) -> list[dict[str, Any]]:
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    summaries: list[dict[str, Any]] = []
    run_root.mkdir(parents=True, exist_ok=True)

    for path in scenario_paths:
        scenario = load_scenario(path)
        scenario_name = str(scenario["name"])
        run_dir = run_root / f"{timestamp}_{_slugify(scenario_name)}"
        cfg = build_run_config(scenario)
        tick_log_path = run_demo(cfg, run_dir, save_figs=save_figs)
        summary = {
            "scenario": scenario_name,
            "run_dir": str(run_dir),
            "mode": cfg.mode,
            **summary_from_tick_log(tick_log_path),
        }
        (run_dir / "summary.json").write_text(
            json.dumps(sanitize_json(summary), indent=2, allow_nan=False),
            encoding="utf-8",
        )
        summaries.append(summary)
        _append_summary_csv(run_root / "summary.csv", summary)

    return summaries


def load_scenario(path: Path) -> dict[str, Any]:
    scenario = json.loads(Path(path).read_text(encoding="utf-8"))
    missing = REQUIRED_KEYS - scenario.keys()
    if missing:
        raise ValueError(f"Scenario {path} missing required keys: {sorted(missing)}")
    return scenario


def build_run_config(scenario: dict[str, Any]) -> SimRunConfig:
    fields_by_name = {field.name for field in fields(SimRunConfig)}
    cfg_kwargs: dict[str, Any] = {"duration_s": float(scenario["duration_s"])}
    for key, value in scenario.items():
        if key in RESERVED_KEYS:
            continue
        if key not in fields_by_name:
            raise ValueError(f"Unknown SimRunConfig override '{key}' in scenario '{scenario['name']}'")
        if key == "scripted_targets":
            value = tuple(dict(item) for item in value or ())
        cfg_kwargs[key] = value
    return SimRunConfig(**cfg_kwargs)


def summary_from_tick_log(path: Path) -> dict[str, Any]:
    rows = load_tick_rows(path)
    in_range = np.array([row["state"] == "candidate_in_range" for row in rows], dtype=float)
    distances = _float_column(rows, "distance_nm")
    first_in_range = next(
        (float(row["t_s"]) for row in rows if row["state"] == "candidate_in_range"),
        float("nan"),
    )
    return {
        "ticks": len(rows),
        "in_range_rate": _safe_mean(in_range),
        "beep_count": int(sum(row["beeped"] == "1" for row in rows)),
        "speech_count": int(sum(row["spoke"] == "1" for row in rows)),
        "candidate_min_distance_nm": _safe_min(distances),
        "first_in_range_t_s": first_in_range,
        "unique_candidates": len({row["candidate_id"] for row in rows if row["candidate_id"]}),
        "excluded_stale_feed": _column_max(rows, "excluded_stale_feed"),
        "excluded_on_ground": _column_max(rows, "excluded_on_ground"),
        "excluded_outside_alt_band": _column_max(rows, "excluded_outside_alt_band"),
    }


def _float_column(rows: list[dict[str, str]], key: str) -> np.ndarray:
    values = []
    for row in rows:
        value = _parse_float(row.get(key))
        if value is not None and math.isfinite(value):
            values.append(value)
    return np.array(values, dtype=float)


def _column_max(rows: list[dict[str, str]], key: str) -> int:
    values = _float_column(rows, key)
    return int(values.max()) if values.size else 0


def _parse_float(value: str | None) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _safe_mean(values: np.ndarray) -> float:
    if values.size == 0:
        return float("nan")
    return float(np.mean(values))


def _safe_min(values: np.ndarray) -> float:
    if values.size == 0:
        return float("nan")
    return float(np.min(values))


def _append_summary_csv(path: Path, summary: dict[str, Any]) -> None:
    write_header = not path.exists()
    with path.open("a", encoding="utf-8", newline="") as handle:
        writer = csv.DictWriter(handle, fieldnames=SUMMARY_COLUMNS)
        if write_header:
            writer.writeheader()
        writer.writerow({key: summary.get(key) for key in SUMMARY_COLUMNS})


def _slugify(name: str) -> str:
    return "".join(char if char.isalnum() or char in "-_." else "_" for char in name.lower())


def main() -> None:
    parser = argparse.ArgumentParser(description="Run traffic alert scenarios from JSON configs.")
    parser.add_argument("--scenarios", nargs="+", required=True, help="Scenario JSON files to run.")
    parser.add_argument("--run-root", type=str, default="runs", help="Root directory for run outputs.")
    parser.add_argument("--no-plots", action="store_true", help="Disable saving run plots.")
    args = parser.parse_args()
    run_scenarios([Path(path) for path in args.scenarios], run_root=Path(args.run_root), save_figs=not args.no_plots)


if __name__ == "__main__":
    main()
