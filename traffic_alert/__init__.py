"""Traffic proximity alerting engine."""

from traffic_alert.config import AlertConfig, SimRunConfig

__all__ = [
    "AlertConfig",
    "SimRunConfig",
    "channels",
    "control",
    "runtime",
    "selection",
    "utils",
]
