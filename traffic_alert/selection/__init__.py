"""Traffic target selection."""

from traffic_alert.selection.target_filter import plot_targets, select_candidate

__all__ = ["plot_targets", "select_candidate"]
