"""In-memory backends that record requests, for simulation runs and tests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from traffic_alert.models import AudioBackend, BeepPattern, SpeechBackend


class RecordingAudioBackend(AudioBackend):
    """Audio backend armed by an explicit user-gesture signal."""

    def __init__(self, armed: bool = False) -> None:
        self._armed = bool(armed)
        self.played: list[BeepPattern] = []

    @property
    def armed(self) -> bool:
        return self._armed

    def arm(self) -> None:
        """Host-observed user gesture."""

        self._armed = True

    def play(self, pattern: BeepPattern) -> None:
        self.played.append(pattern)


@dataclass
class _Utterance:
    text: str
    on_done: Callable[[], None]
    started_ms: float


class RecordingSpeechBackend(SpeechBackend):
    """Speech backend whose utterances finish on ``finish()``.

    With ``auto_finish=True`` every utterance completes immediately. With a
    ``clock`` and ``utterance_ms``, ``pump()`` completes the utterance once that
    much time has passed.
    """

    def __init__(
        self,
        *,
        auto_finish: bool = False,
        supported: bool = True,
        clock: Callable[[], float] | None = None,
        utterance_ms: float = 0.0,
    ) -> None:
        self.auto_finish = auto_finish
        self._supported = supported
        self.clock = clock
        self.utterance_ms = float(utterance_ms)
        self.spoken: list[str] = []
        self._current: _Utterance | None = None

    @property
    def supported(self) -> bool:
        return self._supported

    @property
    def busy(self) -> bool:
        return self._current is not None

    def speak(self, text: str, on_done: Callable[[], None]) -> None:
        self.spoken.append(text)
        if self.auto_finish:
            on_done()
            return
        started = self.clock() if self.clock is not None else 0.0
        self._current = _Utterance(text, on_done, float(started))

    def finish(self) -> str | None:
        """Complete the in-flight utterance and fire its callback."""

        current = self._current
        if current is None:
            return None
        self._current = None
        current.on_done()
        return current.text

    def pump(self) -> str | None:
        current = self._current
        if current is None or self.clock is None:
            return None
        if self.clock() - current.started_ms < self.utterance_ms:
            return None
        return self.finish()
