"""Notification channels (tone and speech)."""

from traffic_alert.channels.beep import BeepChannel, alert_key
from traffic_alert.channels.phrasing import altitude_phrase, build_utterance, trend_word
from traffic_alert.channels.speech import SpeechChannel

__all__ = [
    "BeepChannel",
    "SpeechChannel",
    "alert_key",
    "altitude_phrase",
    "build_utterance",
    "trend_word",
]
