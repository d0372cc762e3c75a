"""Telemetry sources for hosts and simulation runs."""

from traffic_alert.feeds.json_file import JsonFileTelemetrySource, parse_status
from traffic_alert.feeds.simulated import (
    OwnshipSim,
    ScriptedTarget,
    SimOwnshipConfig,
    SimTrafficConfig,
    SimulatedTelemetrySource,
    TrafficSim,
)

__all__ = [
    "JsonFileTelemetrySource",
    "OwnshipSim",
    "ScriptedTarget",
    "SimOwnshipConfig",
    "SimTrafficConfig",
    "SimulatedTelemetrySource",
    "TrafficSim",
    "parse_status",
]
