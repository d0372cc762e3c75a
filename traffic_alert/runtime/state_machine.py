"""Tick classification state machine for traffic alerting."""

from __future__ import annotations

from dataclasses import dataclass

from traffic_alert.models import AlertCandidate
from traffic_alert.runtime.alert_types import AlertState
from traffic_alert.utils.logging import get_logger

LOGGER = get_logger()


def classify(candidate: AlertCandidate | None, alert_range_nm: float) -> AlertState:
    if candidate is None:
        return AlertState.NO_CANDIDATE
    if candidate.distance_nm > alert_range_nm:
        return AlertState.CANDIDATE_OUT_OF_RANGE
    return AlertState.CANDIDATE_IN_RANGE


@dataclass
class _StateTracker:
    state: AlertState
    state_entry_t_ms: float
    last_transition_t_ms: float


@dataclass
class StateStep:
    state: AlertState
    reason_codes: list[str]
    time_in_state_ms: float
    last_transition_t_ms: float
    transitioned: bool


class AlertStateMachine:
    """Deterministic classifier that also tracks time-in-state."""

    def __init__(self) -> None:
        self.reset()

    def reset(self, t0_ms: float = 0.0) -> None:
        self._tracker = _StateTracker(
            state=AlertState.NO_CANDIDATE,
            state_entry_t_ms=float(t0_ms),
            last_transition_t_ms=float(t0_ms),
        )

    @property
    def state(self) -> AlertState:
        return self._tracker.state

    def step(
        self,
        t_ms: float,
        candidate: AlertCandidate | None,
        alert_range_nm: float,
    ) -> StateStep:
        t_ms = float(t_ms)
        new_state = classify(candidate, alert_range_nm)
        old_state = self._tracker.state
        reasons = [new_state.value]
        transitioned = new_state != old_state
        if transitioned:
            reasons.append(f"transition_{old_state.value}_to_{new_state.value}")
            self._tracker.state = new_state
            self._tracker.state_entry_t_ms = t_ms
            self._tracker.last_transition_t_ms = t_ms
            LOGGER.info(
                "Alert state %s -> %s%s",
                old_state.value,
                new_state.value,
                f" ({candidate.target_id} {candidate.distance_nm:.2f}nm)" if candidate is not None else "",
            )
        return StateStep(
            state=new_state,
            reason_codes=reasons,
            time_in_state_ms=t_ms - self._tracker.state_entry_t_ms,
            last_transition_t_ms=self._tracker.last_transition_t_ms,
            transitioned=transitioned,
        )
