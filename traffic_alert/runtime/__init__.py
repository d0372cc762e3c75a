"""Runtime tick orchestration for traffic alerting."""

from traffic_alert.runtime.alert_types import AlertState, RenderModel, TickOutput
from traffic_alert.runtime.coordinator import AlertCoordinator, format_summary, monotonic_ms
from traffic_alert.runtime.factory import SimClock, SimRig, build_sim_coordinator
from traffic_alert.runtime.state_machine import AlertStateMachine, classify

__all__ = [
    "AlertCoordinator",
    "AlertState",
    "AlertStateMachine",
    "RenderModel",
    "SimClock",
    "SimRig",
    "TickOutput",
    "build_sim_coordinator",
    "classify",
    "format_summary",
    "monotonic_ms",
]
