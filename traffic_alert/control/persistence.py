"""Control persistence backends."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from traffic_alert.control.state import ControlState
from traffic_alert.models import ControlPersistence
from traffic_alert.utils.logging import get_logger

LOGGER = get_logger()


class InMemoryControlPersistence(ControlPersistence):
    """Key/value store kept in process memory."""

    def __init__(self, values: dict[str, Any] | None = None) -> None:
        self.values: dict[str, Any] = dict(values or {})
        self.save_count = 0

    def load(self) -> ControlState:
        return ControlState.from_mapping(self.values)

    def save(self, state: ControlState) -> None:
        self.values = state.to_dict()
        self.save_count += 1


class JsonFileControlPersistence(ControlPersistence):
    """Controls stored as a flat JSON object on disk."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> ControlState:
        if not self.path.exists():
            return ControlState()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            LOGGER.warning("Could not read controls from %s (%s); using defaults", self.path, exc)
            return ControlState()
        if not isinstance(data, dict):
            LOGGER.warning("Controls file %s is not a JSON object; using defaults", self.path)
            return ControlState()
        return ControlState.from_mapping(data)

    def save(self, state: ControlState) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(state.to_dict(), indent=2), encoding="utf-8")


def load_controls(persistence: ControlPersistence | None) -> ControlState:
    """Load controls and replace out-of-preset values with defaults."""

    if persistence is None:
        return ControlState()
    return persistence.load().sanitized()
