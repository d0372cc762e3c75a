from __future__ import annotations

from traffic_alert.backends.recording import RecordingAudioBackend
from traffic_alert.channels.beep import BeepChannel, alert_key
from traffic_alert.control.state import AlertMode
from traffic_alert.models import AlertCandidate, TrafficTarget


def _candidate(target_id: str = "ABC123", distance_nm: float = 0.78) -> AlertCandidate:
    return AlertCandidate(
        target=TrafficTarget(target_id=target_id, lat_deg=40.0, lon_deg=-74.983, alt_ft=1300.0),
        distance_nm=distance_nm,
        alt_delta_ft=300.0,
        bearing_deg=90.0,
        relative_bearing_deg=0.0,
    )


def test_alert_key_uses_tenth_nm_bucket() -> None:
    assert alert_key(_candidate(distance_nm=0.78)) == "ABC123:8"
    assert alert_key(_candidate(distance_nm=0.75)) == "ABC123:8"
    assert alert_key(_candidate(distance_nm=0.74)) == "ABC123:7"


def test_beep_cooldown_for_same_key() -> None:
    audio = RecordingAudioBackend(armed=True)
    channel = BeepChannel(audio)
    cand = _candidate()

    assert channel.maybe_beep(cand, 0.0, AlertMode.BOTH) is True
    assert channel.maybe_beep(cand, 1000.0, AlertMode.BOTH) is False
    assert channel.maybe_beep(cand, 1999.0, AlertMode.BOTH) is False
    assert channel.maybe_beep(cand, 2000.0, AlertMode.BOTH) is True
    assert len(audio.played) == 2
    assert audio.played[0].frequencies_hz == (880.0, 660.0)
    assert audio.played[0].spacing_ms == 180.0


def test_bucket_change_refires_inside_cooldown() -> None:
    audio = RecordingAudioBackend(armed=True)
    channel = BeepChannel(audio)

    assert channel.maybe_beep(_candidate(distance_nm=0.78), 0.0, AlertMode.BEEP) is True
    assert channel.maybe_beep(_candidate(distance_nm=0.62), 500.0, AlertMode.BEEP) is True
    assert channel.maybe_beep(_candidate("OTHER", distance_nm=0.62), 700.0, AlertMode.BEEP) is True
    assert channel.state.fire_count == 3


def test_no_beep_when_unarmed_or_mode_excludes_tone() -> None:
    audio = RecordingAudioBackend(armed=False)
    channel = BeepChannel(audio)

    assert channel.maybe_beep(_candidate(), 0.0, AlertMode.BOTH) is False

    audio.arm()
    assert channel.maybe_beep(_candidate(), 100.0, AlertMode.SPEECH) is False
    assert channel.maybe_beep(_candidate(), 100.0, AlertMode.OFF) is False
    assert channel.maybe_beep(_candidate(), 100.0, AlertMode.BEEP) is True
    assert channel.state.last_fired_at_ms == 100.0


def test_missing_backend_is_unavailable() -> None:
    channel = BeepChannel(None)

    assert channel.available is False
    assert channel.maybe_beep(_candidate(), 0.0, AlertMode.BOTH) is False
