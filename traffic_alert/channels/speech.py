"""Spoken traffic alert channel with target lock and single-slot queue."""

from __future__ import annotations

from typing import Callable

from traffic_alert.channels.phrasing import build_utterance
from traffic_alert.config import AlertConfig
from traffic_alert.control.state import SPEECH_MODES, AlertMode
from traffic_alert.models import AlertCandidate, AlertChannelState, SpeechBackend
from traffic_alert.utils.logging import get_logger

LOGGER = get_logger()

# Wraps a completion handler so it runs on the owner's execution context.
Dispatch = Callable[[Callable[[], None]], None]


def _direct(handler: Callable[[], None]) -> None:
    handler()


class SpeechChannel:
    """Speaks the current candidate, guarding against interruptions.

    A callout locks the channel to its target for ``speech_lock_ms``; while the
    lock holds, other targets are dropped (not queued). The same target is
    repeated at most every ``speech_repeat_ms``. When the backend is busy the
    newest callout replaces any pending one.
    """

    def __init__(
        self,
        speech: SpeechBackend | None,
        cfg: AlertConfig | None = None,
        *,
        dispatch: Dispatch | None = None,
    ) -> None:
        self.cfg = cfg or AlertConfig()
        self.speech = speech
        self.dispatch = dispatch or _direct
        self.state = AlertChannelState(cooldown_ms=self.cfg.speech_repeat_ms)
        self.last_utterance: str | None = None

    @property
    def available(self) -> bool:
        return self.speech is not None and bool(self.speech.supported)

    def is_locked_against(self, target_id: str, now_ms: float) -> bool:
        st = self.state
        return (
            st.locked_target is not None
            and st.locked_target != target_id
            and st.lock_expires_at_ms is not None
            and now_ms < st.lock_expires_at_ms
        )

    def maybe_speak(self, candidate: AlertCandidate, now_ms: float, mode: AlertMode) -> bool:
        if mode not in SPEECH_MODES or not self.available:
            return False
        st = self.state
        target_id = candidate.target_id
        if self.is_locked_against(target_id, now_ms):
            return False
        due = (
            st.last_fired_at_ms is None
            or now_ms - st.last_fired_at_ms >= st.cooldown_ms
            or st.last_target != target_id
        )
        if not due:
            return False

        text = build_utterance(candidate, self.cfg)
        self.last_utterance = text
        self._submit(text)
        st.last_fired_at_ms = float(now_ms)
        st.last_target = target_id
        st.locked_target = target_id
        st.lock_expires_at_ms = float(now_ms) + self.cfg.speech_lock_ms
        st.fire_count += 1
        return True

    def on_backend_done(self) -> None:
        """Completion of the in-flight utterance; starts the pending one if any."""

        st = self.state
        st.busy = False
        if st.pending_message is not None:
            text = st.pending_message
            st.pending_message = None
            self._start(text)

    def flush_pending(self) -> bool:
        """Start a queued callout held back by a backend busy with other speech."""

        st = self.state
        if st.busy or st.pending_message is None or not self.available or self.speech.busy:
            return False
        text = st.pending_message
        st.pending_message = None
        self._start(text)
        return True

    def reset(self) -> None:
        self.state = AlertChannelState(cooldown_ms=self.cfg.speech_repeat_ms)
        self.last_utterance = None

    def _submit(self, text: str) -> None:
        st = self.state
        if st.busy or self.speech.busy:
            if st.pending_message is not None:
                LOGGER.debug("Speech queue: replacing %r", st.pending_message)
            st.pending_message = text
            return
        self._start(text)

    def _start(self, text: str) -> None:
        self.state.busy = True
        LOGGER.debug("Speak: %s", text)
        self.speech.speak(text, self._on_done)

    def _on_done(self) -> None:
        self.dispatch(self.on_backend_done)
