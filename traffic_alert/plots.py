"""Timeline plots for alerting run outputs."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import matplotlib
import numpy as np

from traffic_alert.runtime.alert_types import AlertState, TickOutput

matplotlib.use("Agg", force=True)
import matplotlib.pyplot as plt  # noqa: E402

_STATE_TO_VALUE = {
    AlertState.NO_CANDIDATE.value: 0.0,
    AlertState.CANDIDATE_OUT_OF_RANGE.value: 1.0,
    AlertState.CANDIDATE_IN_RANGE.value: 2.0,
}


def save_run_plots(
    ticks: list[TickOutput],
    *,
    out_dir: str | Path = "out",
    run_name: str | None = None,
) -> Path:
    """Save the standard run plots to an output directory."""

    frame = ticks_to_frame(ticks)
    output_dir = _prepare_output_dir(out_dir, run_name)
    alert_range = float(ticks[-1].render.alert_range_nm) if ticks else float("nan")
    plot_candidate_distance(frame, output_dir / "candidate_distance.png", alert_range_nm=alert_range)
    plot_alert_state(frame, output_dir / "alert_state.png")
    plot_channel_events(frame, output_dir / "channel_events.png")
    return output_dir


def ticks_to_frame(ticks: list[TickOutput]) -> Any:
    """Build a DataFrame from tick outputs."""

    import pandas as pd

    payload = []
    for tick in ticks:
        cand = tick.candidate
        payload.append(
            {
                "t_s": tick.t_ms / 1000.0,
                "state": tick.state.value,
                "state_value": _STATE_TO_VALUE[tick.state.value],
                "candidate_id": cand.target_id if cand is not None else "",
                "distance_nm": cand.distance_nm if cand is not None else float("nan"),
                "alt_delta_ft": cand.alt_delta_ft if cand is not None else float("nan"),
                "beeped": float(tick.beeped),
                "spoke": float(tick.spoke),
                "traffic_plotted": float(len(tick.render.traffic)),
            }
        )
    return pd.DataFrame(payload)


def plot_candidate_distance(data: Any, path: str | Path, *, alert_range_nm: float) -> None:
    times = _series_or_nan(data, "t_s")
    distance = _series_or_nan(data, "distance_nm")

    fig, ax = plt.subplots(figsize=(9, 4))
    ax.plot(times, distance, marker="o", markersize=2, color="tab:blue", label="Candidate distance")
    if np.isfinite(alert_range_nm):
        ax.axhline(alert_range_nm, color="tab:red", linestyle="--", label="Alert range")
    ax.set_title("Alert Candidate Distance vs Time")
    ax.set_xlabel("Time (s)")
    ax.set_ylabel("Distance (nm)")
    ax.grid(True, alpha=0.3)
    ax.legend(loc="best")
    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)


def plot_alert_state(data: Any, path: str | Path) -> None:
    times = _series_or_nan(data, "t_s")
    states = _series_or_nan(data, "state_value")

    fig, ax = plt.subplots(figsize=(9, 4))
    ax.step(times, states, where="post", color="tab:red")
    ax.set_title("Alert State vs Time")
    ax.set_xlabel("Time (s)")
    ax.set_ylabel("State")
    ax.set_yticks([0.0, 1.0, 2.0])
    ax.set_yticklabels(["none", "out of range", "in range"])
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)


def plot_channel_events(data: Any, path: str | Path) -> None:
    times = _series_or_nan(data, "t_s")
    beeped = _series_or_nan(data, "beeped")
    spoke = _series_or_nan(data, "spoke")

    fig, ax = plt.subplots(figsize=(9, 4))
    beep_t = times[beeped > 0.5]
    speech_t = times[spoke > 0.5]
    ax.scatter(beep_t, np.full(beep_t.shape, 1.0), marker="|", s=200, color="tab:orange", label="Beep")
    ax.scatter(speech_t, np.full(speech_t.shape, 2.0), marker="|", s=200, color="tab:green", label="Speech")
    ax.set_title("Alert Channel Events vs Time")
    ax.set_xlabel("Time (s)")
    ax.set_yticks([1.0, 2.0])
    ax.set_yticklabels(["beep", "speech"])
    ax.set_ylim(0.5, 2.5)
    ax.grid(True, alpha=0.3)
    ax.legend(loc="best")
    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)


def _series_or_nan(data: Any, column: str) -> np.ndarray:
    if column in data.columns:
        return data[column].to_numpy(dtype=float)
    return np.full(len(data), float("nan"))


def _prepare_output_dir(out_dir: str | Path, run_name: str | None) -> Path:
    root = Path(out_dir)
    output_dir = root if run_name is None else root / run_name
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir
