"""Core data models and interfaces for the traffic alert engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from traffic_alert.control.state import ControlState


@dataclass(frozen=True)
class OwnshipState:
    """Own-ship snapshot, replaced wholesale each telemetry tick."""

    lat_deg: float | None = None
    lon_deg: float | None = None
    alt_ft: float | None = None
    heading_deg: float | None = None  # GPS track when available.
    valid: bool = False

    @classmethod
    def from_sources(
        cls,
        *,
        lat_deg: float | None,
        lon_deg: float | None,
        alt_ft: float | None = None,
        track_deg: float | None = None,
        heading_deg: float | None = None,
        valid: bool = True,
    ) -> OwnshipState:
        """Build a snapshot, preferring GPS track over magnetic heading."""

        return cls(
            lat_deg=lat_deg,
            lon_deg=lon_deg,
            alt_ft=alt_ft,
            heading_deg=track_deg if track_deg is not None else heading_deg,
            valid=valid,
        )


@dataclass(frozen=True)
class TrafficTarget:
    """Single traffic report keyed by ICAO hex or tail."""

    target_id: str
    lat_deg: float | None
    lon_deg: float | None
    alt_ft: float | None = None
    vvel_fpm: float | None = None
    track_deg: float | None = None
    age_s: float = 0.0
    on_ground: bool = False
    extrapolated: bool = False
    tail: str | None = None
    ground_kt: float | None = None

    def aged(self, elapsed_s: float) -> TrafficTarget:
        """Return a copy whose report age has advanced by ``elapsed_s``."""

        if elapsed_s <= 0.0:
            return self
        return replace(self, age_s=self.age_s + elapsed_s)


@dataclass(frozen=True)
class TelemetrySnapshot:
    """Own-ship plus traffic set as returned by one telemetry poll."""

    ownship: OwnshipState
    traffic: tuple[TrafficTarget, ...] = ()


@dataclass(frozen=True)
class AlertCandidate:
    """The single alert-worthy target selected for a tick."""

    target: TrafficTarget
    distance_nm: float
    alt_delta_ft: float
    bearing_deg: float
    relative_bearing_deg: float
    vvel_fpm: float | None = None

    @property
    def target_id(self) -> str:
        return self.target.target_id

    @property
    def age_s(self) -> float:
        return self.target.age_s


@dataclass(frozen=True)
class PlotTarget:
    """Geometry-only view of a target for the renderer."""

    target_id: str
    distance_nm: float
    bearing_deg: float
    relative_bearing_deg: float
    alt_delta_ft: float | None
    track_deg: float | None
    age_s: float
    stale: bool
    extrapolated: bool


@dataclass(frozen=True)
class BeepPattern:
    """Two-tone request handed to the audio backend."""

    frequencies_hz: tuple[float, ...] = (880.0, 660.0)
    tone_ms: float = 120.0
    spacing_ms: float = 180.0


@dataclass
class AlertChannelState:
    """Mutable per-channel bookkeeping."""

    cooldown_ms: float
    last_fired_at_ms: float | None = None
    last_key: str | None = None
    busy: bool = False
    pending_message: str | None = None
    locked_target: str | None = None
    lock_expires_at_ms: float | None = None
    last_target: str | None = None
    fire_count: int = 0


class TelemetrySource(ABC):
    """Interface for own-ship and traffic telemetry feeds."""

    @abstractmethod
    def poll(self) -> TelemetrySnapshot:
        """Return the latest snapshot or raise ``TelemetryUnavailable``."""


class AudioBackend(ABC):
    """Interface for tone output."""

    @property
    @abstractmethod
    def armed(self) -> bool:
        """True once the host observed a user gesture enabling audio."""

    @abstractmethod
    def play(self, pattern: BeepPattern) -> None:
        """Fire-and-forget tone request."""


class SpeechBackend(ABC):
    """Interface for text-to-speech output."""

    @property
    def supported(self) -> bool:
        return True

    @property
    @abstractmethod
    def busy(self) -> bool:
        """True while an utterance is being spoken."""

    @abstractmethod
    def speak(self, text: str, on_done: Callable[[], None]) -> None:
        """Start speaking ``text`` and call ``on_done`` when finished."""


class ControlPersistence(ABC):
    """Interface for storing user-tunable alert controls."""

    @abstractmethod
    def load(self) -> ControlState:
        """Return the stored controls (not yet validated)."""

    @abstractmethod
    def save(self, state: ControlState) -> None:
        """Persist the controls."""
