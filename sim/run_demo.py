"""Run a headless traffic alerting demo on simulated telemetry."""

from __future__ import annotations

import argparse
import json
import math
from dataclasses import asdict, replace
from pathlib import Path
from typing import Any

import numpy as np

from traffic_alert.config import SimRunConfig
from traffic_alert.control.state import AlertMode
from traffic_alert.logger import save_ticks_csv
from traffic_alert.runtime import SimRig, TickOutput, build_sim_coordinator
from traffic_alert.runtime.alert_types import AlertState


def run_demo(
    cfg: SimRunConfig,
    out_dir: str | Path,
    *,
    save_figs: bool = True,
    verbose: bool = False,
) -> Path:
    """Drive the coordinator for ``cfg.duration_s`` and write run outputs.

    Returns the path of the tick log CSV.
    """

    output_dir = Path(out_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    ticks, rig = simulate(cfg, verbose=verbose)

    tick_log_path = output_dir / "tick_log.csv"
    save_ticks_csv(tick_log_path, ticks)
    summary = summarize_ticks(ticks)
    summary["telemetry_failures"] = rig.coordinator.telemetry_failures
    summary["utterances"] = list(rig.speech.spoken)
    metadata = {"config": _config_metadata(cfg), "summary": summary}
    (output_dir / "run_metadata.json").write_text(
        json.dumps(sanitize_json(metadata), indent=2, allow_nan=False),
        encoding="utf-8",
    )
    if save_figs:
        from traffic_alert.plots import save_run_plots

        save_run_plots(ticks, out_dir=output_dir)
    return tick_log_path


def simulate(cfg: SimRunConfig, *, verbose: bool = False) -> tuple[list[TickOutput], SimRig]:
    rig = build_sim_coordinator(cfg)
    render_dt_ms = cfg.render_dt_s * 1000.0
    steps = int(round(cfg.duration_s / cfg.render_dt_s))
    telemetry_every = max(1, int(round(cfg.telemetry_dt_s / cfg.render_dt_s)))

    ticks: list[TickOutput] = []
    for step in range(steps):
        rig.clock.t_ms = step * render_dt_ms
        rig.speech.pump()
        if step % telemetry_every == 0:
            rig.coordinator.telemetry_tick()
        out = rig.coordinator.render_tick()
        ticks.append(out)
        if verbose and (out.spoke or any(code.startswith("transition_") for code in out.reason_codes)):
            print(
                f"t={out.t_ms / 1000.0:6.1f}s state={out.state.value:22s} "
                f"summary={out.summary or '-'} utterance={out.utterance or '-'}"
            )
    return ticks, rig


def summarize_ticks(ticks: list[TickOutput]) -> dict[str, Any]:
    in_range = np.array([tick.state == AlertState.CANDIDATE_IN_RANGE for tick in ticks], dtype=float)
    distances = np.array(
        [tick.candidate.distance_nm if tick.candidate is not None else np.nan for tick in ticks],
        dtype=float,
    )
    candidates = sorted({tick.candidate.target_id for tick in ticks if tick.candidate is not None})
    return {
        "ticks": len(ticks),
        "in_range_rate": _safe_mean(in_range),
        "beep_count": int(sum(tick.beeped for tick in ticks)),
        "speech_count": int(sum(tick.spoke for tick in ticks)),
        "candidate_min_distance_nm": _safe_min(distances),
        "candidate_ids": candidates,
    }


def sanitize_json(obj: Any) -> Any:
    """Replace NaN/Inf floats with None so JSON is standards-compliant."""

    if isinstance(obj, float):
        return None if (math.isnan(obj) or math.isinf(obj)) else obj
    if isinstance(obj, dict):
        return {k: sanitize_json(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [sanitize_json(v) for v in obj]
    return obj


def _config_metadata(cfg: SimRunConfig) -> dict[str, Any]:
    return {f"cfg_{key}": value for key, value in asdict(cfg).items()}


def _safe_mean(values: np.ndarray) -> float:
    values = values[np.isfinite(values)]
    return float(np.mean(values)) if values.size else float("nan")


def _safe_min(values: np.ndarray) -> float:
    values = values[np.isfinite(values)]
    return float(np.min(values)) if values.size else float("nan")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a simulated traffic alerting demo.")
    parser.add_argument("--duration-s", type=float, default=60.0, help="Simulated run length")
    parser.add_argument("--out-dir", type=str, default="out", help="Output root directory")
    parser.add_argument("--run-name", type=str, default="demo", help="Run folder name")
    parser.add_argument("--mode", choices=[m.value for m in AlertMode], default=AlertMode.BOTH.value)
    parser.add_argument("--alert-range-nm", type=float, default=2.0)
    parser.add_argument("--alt-band-ft", type=float, default=1000.0)
    parser.add_argument("--traffic-count", type=int, default=8)
    parser.add_argument("--audio-unarmed", action="store_true", help="Simulate audio never being armed")
    parser.add_argument("--no-plots", action="store_true", help="Skip saving plot PNGs")
    parser.add_argument("--verbose", action="store_true", help="Print transitions and callouts")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    cfg = replace(
        SimRunConfig(),
        duration_s=args.duration_s,
        mode=args.mode,
        alert_range_nm=args.alert_range_nm,
        alert_alt_band_ft=args.alt_band_ft,
        traffic_count=args.traffic_count,
        audio_armed=not args.audio_unarmed,
    )
    tick_log = run_demo(cfg, Path(args.out_dir) / args.run_name, save_figs=not args.no_plots, verbose=args.verbose)
    print(f"Wrote {tick_log}")


if __name__ == "__main__":
    main()
