"""No-op backends for hosts without tone or speech output."""

from __future__ import annotations

from typing import Callable

from traffic_alert.models import AudioBackend, BeepPattern, SpeechBackend


class NullAudioBackend(AudioBackend):
    """Audio that is never armed; beeps are never requested."""

    @property
    def armed(self) -> bool:
        return False

    def play(self, pattern: BeepPattern) -> None:
        del pattern


class NullSpeechBackend(SpeechBackend):
    """Speech reported as unsupported."""

    @property
    def supported(self) -> bool:
        return False

    @property
    def busy(self) -> bool:
        return False

    def speak(self, text: str, on_done: Callable[[], None]) -> None:
        del text
        on_done()
