"""Alert coordinator: one instance owns all mutable alerting state."""

from __future__ import annotations

import queue
import time
from collections import Counter
from typing import Callable, Iterable

from traffic_alert.channels.beep import BeepChannel
from traffic_alert.channels.speech import SpeechChannel
from traffic_alert.config import AlertConfig
from traffic_alert.control.persistence import load_controls
from traffic_alert.control.state import BEEP_MODES, SPEECH_MODES, AlertMode, ControlState
from traffic_alert.errors import BackendUnavailable, TelemetryUnavailable
from traffic_alert.models import (
    AlertCandidate,
    AudioBackend,
    ControlPersistence,
    OwnshipState,
    SpeechBackend,
    TelemetrySnapshot,
    TelemetrySource,
    TrafficTarget,
)
from traffic_alert.runtime.alert_types import AlertState, RenderModel, TickOutput
from traffic_alert.runtime.state_machine import AlertStateMachine
from traffic_alert.selection.target_filter import plot_targets, select_candidate
from traffic_alert.utils.geo import round_half_up
from traffic_alert.utils.logging import get_logger

LOGGER = get_logger()

Renderer = Callable[[RenderModel], None]


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


def format_summary(candidate: AlertCandidate) -> str:
    distance = round_half_up(candidate.distance_nm * 10.0) / 10.0
    return (
        f"TRAFFIC {candidate.target_id} · {distance:.1f}nm · "
        f"ΔALT {round_half_up(candidate.alt_delta_ft):+d}ft"
    )


class AlertCoordinator:
    """Runs the telemetry and render ticks for traffic alerting.

    Ticks must not be re-entered. Speech completions may arrive on any thread;
    they are queued and applied at the start of the next tick.
    """

    def __init__(
        self,
        *,
        audio: AudioBackend | None = None,
        speech: SpeechBackend | None = None,
        source: TelemetrySource | None = None,
        persistence: ControlPersistence | None = None,
        controls: ControlState | None = None,
        renderer: Renderer | None = None,
        cfg: AlertConfig | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.cfg = cfg or AlertConfig()
        self.clock = clock or monotonic_ms
        self.source = source
        self.persistence = persistence
        self.renderer = renderer
        self.audio = audio
        self.speech_backend = speech
        self.controls = controls.sanitized() if controls is not None else load_controls(persistence)
        self._inbox: queue.SimpleQueue = queue.SimpleQueue()
        self.beep = BeepChannel(audio, self.cfg)
        self.speech = SpeechChannel(speech, self.cfg, dispatch=self._inbox.put)
        self.state_machine = AlertStateMachine()
        self._snapshot = TelemetrySnapshot(ownship=OwnshipState())
        self._snapshot_t_ms: float | None = None
        self.telemetry_failures = 0
        self.last_output: TickOutput | None = None

    # Ticks

    def telemetry_tick(self, now_ms: float | None = None) -> bool:
        """Poll the telemetry source; keeps the last-known state on failure."""

        if self.source is None:
            return False
        try:
            snapshot = self.source.poll()
        except TelemetryUnavailable as exc:
            self.telemetry_failures += 1
            LOGGER.warning("Telemetry poll failed (%s); keeping last-known state", exc)
            return False
        self.update_telemetry(snapshot, now_ms)
        return True

    def update_telemetry(self, snapshot: TelemetrySnapshot, now_ms: float | None = None) -> None:
        self._snapshot = snapshot
        self._snapshot_t_ms = self._now(now_ms)

    def render_tick(self, now_ms: float | None = None) -> TickOutput:
        """Re-evaluate alert state against the latest telemetry."""

        now = self._now(now_ms)
        self._drain_inbox()
        self.speech.flush_pending()
        ownship, traffic = self._current_view(now)
        output = self.evaluate(ownship, traffic, now)
        if self.renderer is not None:
            self.renderer(output.render)
        return output

    def tick(
        self,
        ownship: OwnshipState,
        traffic: Iterable[TrafficTarget],
        now_ms: float | None = None,
    ) -> TickOutput:
        """Feed one snapshot and evaluate it in the same call."""

        now = self._now(now_ms)
        self.update_telemetry(TelemetrySnapshot(ownship=ownship, traffic=tuple(traffic)), now)
        return self.render_tick(now)

    def evaluate(
        self,
        ownship: OwnshipState,
        traffic: Iterable[TrafficTarget],
        now_ms: float,
    ) -> TickOutput:
        traffic = tuple(traffic)
        controls = self.controls
        mode = controls.mode
        exclusions: Counter = Counter()
        candidate = select_candidate(
            ownship,
            traffic,
            controls.alert_alt_band_ft,
            cfg=self.cfg,
            exclusions=exclusions,
        )
        step = self.state_machine.step(now_ms, candidate, controls.alert_range_nm)
        reasons = list(step.reason_codes)
        reasons.extend(f"excluded_{reason.value}" for reason in exclusions)

        beeped = False
        spoke = False
        utterance = None
        summary = ""
        if step.state == AlertState.CANDIDATE_IN_RANGE and candidate is not None:
            summary = format_summary(candidate)
            if mode == AlertMode.OFF:
                reasons.append("mode_off")
            else:
                beeped = self.beep.maybe_beep(candidate, now_ms, mode)
                spoke = self.speech.maybe_speak(candidate, now_ms, mode)
                if spoke:
                    utterance = self.speech.last_utterance
                    reasons.append("speech_enqueued")
                if beeped:
                    reasons.append("beep_fired")
                for notice in self.backend_notices(mode):
                    summary += f" · {notice.value}"
                    reasons.append(notice.name.lower())

        render = RenderModel(
            state=step.state,
            candidate=candidate,
            summary=summary,
            ownship=ownship,
            traffic=plot_targets(ownship, traffic, controls.plot_range_nm, cfg=self.cfg),
            mode=mode,
            plot_range_nm=controls.plot_range_nm,
            alert_range_nm=controls.alert_range_nm,
            alert_alt_band_ft=controls.alert_alt_band_ft,
            audio_armed=self.beep.available,
            speech_supported=self.speech.available,
        )
        output = TickOutput(
            t_ms=float(now_ms),
            render=render,
            beeped=beeped,
            spoke=spoke,
            utterance=utterance,
            reason_codes=reasons,
            time_in_state_ms=step.time_in_state_ms,
            last_transition_ms=step.last_transition_t_ms,
            exclusions={reason.value: count for reason, count in exclusions.items()},
        )
        self.last_output = output
        return output

    def backend_notices(self, mode: AlertMode) -> list[BackendUnavailable]:
        notices = []
        if mode in BEEP_MODES and not self.beep.available:
            notices.append(BackendUnavailable.AUDIO_UNARMED)
        if mode in SPEECH_MODES and not self.speech.available:
            notices.append(BackendUnavailable.SPEECH_UNAVAILABLE)
        return notices

    # Controls

    def cycle_mode(self) -> AlertMode:
        self._apply_controls(self.controls.cycled())
        return self.controls.mode

    def set_mode(self, mode: AlertMode | str) -> AlertMode:
        self._apply_controls(self.controls.with_mode(mode))
        return self.controls.mode

    def set_plot_range(self, range_nm: float) -> ControlState:
        return self._apply_controls(self.controls.with_plot_range(range_nm))

    def set_alert_range(self, range_nm: float) -> ControlState:
        return self._apply_controls(self.controls.with_alert_range(range_nm))

    def set_alert_alt_band(self, band_ft: float) -> ControlState:
        return self._apply_controls(self.controls.with_alert_alt_band(band_ft))

    def _apply_controls(self, controls: ControlState) -> ControlState:
        if controls != self.controls:
            LOGGER.info("Controls changed: %s", controls.to_dict())
        self.controls = controls
        if self.persistence is not None:
            self.persistence.save(controls)
        return controls

    # Internals

    def _now(self, now_ms: float | None) -> float:
        return float(self.clock() if now_ms is None else now_ms)

    def _drain_inbox(self) -> None:
        while True:
            try:
                handler = self._inbox.get_nowait()
            except queue.Empty:
                return
            handler()

    def _current_view(self, now_ms: float) -> tuple[OwnshipState, tuple[TrafficTarget, ...]]:
        snapshot = self._snapshot
        if self._snapshot_t_ms is None:
            return snapshot.ownship, snapshot.traffic
        elapsed_s = max(0.0, (now_ms - self._snapshot_t_ms) / 1000.0)
        return snapshot.ownship, tuple(target.aged(elapsed_s) for target in snapshot.traffic)
