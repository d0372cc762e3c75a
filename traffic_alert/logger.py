"""Per-tick CSV logging for alerting runs."""

from __future__ import annotations

import csv
from pathlib import Path

from traffic_alert.errors import ExclusionReason
from traffic_alert.runtime.alert_types import TickOutput

TICK_CSV_COLUMNS = [
    "t_ms",
    "t_s",
    "state",
    "mode",
    "candidate_id",
    "distance_nm",
    "alt_delta_ft",
    "relative_bearing_deg",
    "candidate_age_s",
    "beeped",
    "spoke",
    "utterance",
    "summary",
    "reason_codes",
    "traffic_plotted",
    "time_in_state_ms",
] + [f"excluded_{reason.value}" for reason in ExclusionReason]


def append_tick_csv(path: str | Path, tick: TickOutput) -> None:
    """Append a single tick to a CSV file, writing the header on first use."""

    target = Path(path)
    new_file = not target.exists()
    with target.open("a", encoding="utf-8", newline="") as handle:
        writer = csv.writer(handle)
        if new_file:
            writer.writerow(TICK_CSV_COLUMNS)
        writer.writerow(_tick_to_row(tick))


def save_ticks_csv(path: str | Path, ticks: list[TickOutput]) -> None:
    """Save all ticks to a CSV file."""

    target = Path(path)
    with target.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.writer(handle)
        writer.writerow(TICK_CSV_COLUMNS)
        for tick in ticks:
            writer.writerow(_tick_to_row(tick))


def load_tick_rows(path: str | Path) -> list[dict[str, str]]:
    target = Path(path)
    if not target.exists():
        raise FileNotFoundError(f"Tick log not found: {target}")
    with target.open("r", encoding="utf-8", newline="") as handle:
        return list(csv.DictReader(handle))


def _tick_to_row(tick: TickOutput) -> list[str]:
    render = tick.render
    cand = render.candidate
    mode = getattr(render.mode, "value", render.mode)
    row = [
        tick.t_ms,
        tick.t_ms / 1000.0,
        render.state.value,
        mode,
        cand.target_id if cand else None,
        cand.distance_nm if cand else None,
        cand.alt_delta_ft if cand else None,
        cand.relative_bearing_deg if cand else None,
        cand.age_s if cand else None,
        tick.beeped,
        tick.spoke,
        tick.utterance,
        render.summary,
        "|".join(tick.reason_codes),
        len(render.traffic),
        tick.time_in_state_ms,
    ]
    row += [tick.exclusions.get(reason.value, 0) for reason in ExclusionReason]
    return [_format_value(value) for value in row]


def _format_value(value: float | int | bool | str | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)
