"""Per-tick output types for the alert coordinator."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from traffic_alert.control.state import AlertMode
from traffic_alert.models import AlertCandidate, OwnshipState, PlotTarget


class AlertState(Enum):
    NO_CANDIDATE = "no_candidate"
    CANDIDATE_OUT_OF_RANGE = "candidate_out_of_range"
    CANDIDATE_IN_RANGE = "candidate_in_range"


@dataclass
class RenderModel:
    """Everything the renderer needs for one frame."""

    state: AlertState
    candidate: AlertCandidate | None
    summary: str
    ownship: OwnshipState
    traffic: list[PlotTarget]
    mode: AlertMode
    plot_range_nm: float
    alert_range_nm: float
    alert_alt_band_ft: float
    audio_armed: bool
    speech_supported: bool


@dataclass
class TickOutput:
    t_ms: float
    render: RenderModel
    beeped: bool
    spoke: bool
    utterance: str | None
    reason_codes: list[str]
    time_in_state_ms: float
    last_transition_ms: float
    exclusions: dict[str, int] = field(default_factory=dict)

    @property
    def state(self) -> AlertState:
        return self.render.state

    @property
    def summary(self) -> str:
        return self.render.summary

    @property
    def candidate(self) -> AlertCandidate | None:
        return self.render.candidate
