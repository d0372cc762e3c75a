from __future__ import annotations

from collections import Counter

from traffic_alert.errors import ExclusionReason
from traffic_alert.models import OwnshipState, TrafficTarget
from traffic_alert.selection.target_filter import plot_targets, select_candidate

OWN = OwnshipState(lat_deg=40.0, lon_deg=-75.0, alt_ft=1000.0, heading_deg=90.0, valid=True)


def _target(target_id: str, lon_deg: float, alt_ft: float | None = 1300.0, **kwargs) -> TrafficTarget:
    return TrafficTarget(target_id=target_id, lat_deg=40.0, lon_deg=lon_deg, alt_ft=alt_ft, **kwargs)


def test_selects_nearest_in_band_target() -> None:
    far = _target("FAR", -74.95)
    near = _target("NEAR", -74.98)

    candidate = select_candidate(OWN, [far, near], 1000.0)

    assert candidate is not None
    assert candidate.target_id == "NEAR"
    assert candidate.alt_delta_ft == 300.0


def test_selection_is_deterministic() -> None:
    targets = [_target(f"T{i}", -74.99 + i * 0.002) for i in range(5)]

    first = select_candidate(OWN, targets, 1000.0)
    second = select_candidate(OWN, targets, 1000.0)

    assert first == second


def test_distance_tie_keeps_input_order() -> None:
    a = _target("A", -74.983, alt_ft=1200.0)
    b = _target("B", -74.983, alt_ft=900.0)

    assert select_candidate(OWN, [a, b], 1000.0).target_id == "A"
    assert select_candidate(OWN, [b, a], 1000.0).target_id == "B"


def test_nearest_target_outside_band_is_excluded() -> None:
    high = _target("HIGH", -74.99, alt_ft=2500.0)
    further = _target("OK", -74.95, alt_ft=1500.0)
    exclusions: Counter = Counter()

    candidate = select_candidate(OWN, [high, further], 1000.0, exclusions=exclusions)

    assert candidate.target_id == "OK"
    assert exclusions[ExclusionReason.OUTSIDE_ALT_BAND] == 1


def test_on_ground_and_stale_targets_never_selected() -> None:
    ground = _target("GND", -74.99, on_ground=True)
    stale = _target("OLD", -74.99, age_s=20.0)
    exclusions: Counter = Counter()

    assert select_candidate(OWN, [ground, stale], 1000.0, exclusions=exclusions) is None
    assert exclusions[ExclusionReason.ON_GROUND] == 1
    assert exclusions[ExclusionReason.STALE_FEED] == 1


def test_age_at_threshold_is_still_fresh() -> None:
    target = _target("EDGE", -74.99, age_s=15.0)

    assert select_candidate(OWN, [target], 1000.0).target_id == "EDGE"


def test_missing_altitude_or_position_excluded() -> None:
    no_alt = _target("NOALT", -74.99, alt_ft=None)
    no_pos = TrafficTarget(target_id="NOPOS", lat_deg=None, lon_deg=None, alt_ft=1000.0)
    exclusions: Counter = Counter()

    assert select_candidate(OWN, [no_alt, no_pos], 1000.0, exclusions=exclusions) is None
    assert exclusions[ExclusionReason.MISSING_DATA] == 2


def test_ownship_altitude_missing_yields_no_candidate() -> None:
    own = OwnshipState(lat_deg=40.0, lon_deg=-75.0, alt_ft=None, heading_deg=90.0)

    assert select_candidate(own, [_target("A", -74.99)], 1000.0) is None


def test_ownship_position_missing_yields_no_candidate() -> None:
    own = OwnshipState(alt_ft=1000.0)

    assert select_candidate(own, [_target("A", -74.99)], 1000.0) is None


def test_zero_distance_target_excluded() -> None:
    overhead = TrafficTarget(target_id="OVH", lat_deg=40.0, lon_deg=-75.0, alt_ft=1300.0)
    exclusions: Counter = Counter()

    assert select_candidate(OWN, [overhead], 1000.0, exclusions=exclusions) is None
    assert exclusions[ExclusionReason.BAD_DISTANCE] == 1


def test_unknown_heading_leaves_relative_bearing_nan() -> None:
    own = OwnshipState(lat_deg=40.0, lon_deg=-75.0, alt_ft=1000.0)

    candidate = select_candidate(own, [_target("A", -74.99)], 1000.0)

    assert candidate.relative_bearing_deg != candidate.relative_bearing_deg


def test_plot_targets_ignore_alert_filters_but_honor_range_and_ttl() -> None:
    targets = [
        _target("GND", -74.99, on_ground=True),
        _target("HIGH", -74.99, alt_ft=9000.0),
        _target("STALE", -74.99, age_s=20.0),
        _target("GONE", -74.99, age_s=31.0),
        _target("FAR", -74.0),
    ]

    plotted = {p.target_id: p for p in plot_targets(OWN, targets, 5.0)}

    assert set(plotted) == {"GND", "HIGH", "STALE"}
    assert plotted["STALE"].stale is True
    assert plotted["HIGH"].alt_delta_ft == 8000.0
