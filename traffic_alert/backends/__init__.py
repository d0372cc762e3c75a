"""Audio and speech backends for non-browser hosts."""

from traffic_alert.backends.null import NullAudioBackend, NullSpeechBackend
from traffic_alert.backends.recording import RecordingAudioBackend, RecordingSpeechBackend

__all__ = [
    "NullAudioBackend",
    "NullSpeechBackend",
    "RecordingAudioBackend",
    "RecordingSpeechBackend",
]
