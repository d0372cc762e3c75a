"""Tone alert channel."""

from __future__ import annotations

from traffic_alert.config import AlertConfig
from traffic_alert.control.state import BEEP_MODES, AlertMode
from traffic_alert.models import AlertCandidate, AlertChannelState, AudioBackend, BeepPattern
from traffic_alert.utils.geo import round_half_up
from traffic_alert.utils.logging import get_logger

LOGGER = get_logger()


def alert_key(candidate: AlertCandidate) -> str:
    """Target id plus 0.1 nm distance bucket."""

    return f"{candidate.target_id}:{round_half_up(candidate.distance_nm * 10.0)}"


class BeepChannel:
    """Rate-limited two-tone alert.

    Fires when it never fired before, when the cooldown elapsed, or when the
    target/distance bucket changed since the last beep. A bucket change
    re-fires even inside the cooldown.
    """

    def __init__(self, audio: AudioBackend | None, cfg: AlertConfig | None = None) -> None:
        self.cfg = cfg or AlertConfig()
        self.audio = audio
        self.pattern = BeepPattern(spacing_ms=self.cfg.beep_tone_spacing_ms)
        self.state = AlertChannelState(cooldown_ms=self.cfg.beep_cooldown_ms)

    @property
    def available(self) -> bool:
        return self.audio is not None and bool(self.audio.armed)

    def maybe_beep(self, candidate: AlertCandidate, now_ms: float, mode: AlertMode) -> bool:
        if mode not in BEEP_MODES or not self.available:
            return False
        st = self.state
        key = alert_key(candidate)
        due = (
            st.last_fired_at_ms is None
            or now_ms - st.last_fired_at_ms >= st.cooldown_ms
            or key != st.last_key
        )
        if not due:
            return False
        st.last_fired_at_ms = float(now_ms)
        st.last_key = key
        st.last_target = candidate.target_id
        st.fire_count += 1
        LOGGER.debug("Beep %s at t=%.0fms", key, now_ms)
        self.audio.play(self.pattern)
        return True

    def reset(self) -> None:
        self.state = AlertChannelState(cooldown_ms=self.cfg.beep_cooldown_ms)
