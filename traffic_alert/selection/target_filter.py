"""Per-tick selection of the single alert-worthy traffic target."""

from __future__ import annotations

from collections import Counter
from typing import Iterable

from traffic_alert.config import AlertConfig
from traffic_alert.errors import ExclusionReason
from traffic_alert.models import AlertCandidate, OwnshipState, PlotTarget, TrafficTarget
from traffic_alert.utils.geo import as_finite, bearing_deg, distance_nm, relative_bearing

_DEFAULT_CFG = AlertConfig()


def select_candidate(
    ownship: OwnshipState,
    targets: Iterable[TrafficTarget],
    alert_alt_band_ft: float,
    *,
    cfg: AlertConfig | None = None,
    exclusions: Counter | None = None,
) -> AlertCandidate | None:
    """Return the nearest target inside the altitude band, or None.

    Alert range is not applied here; the caller gates on distance so the nearest
    in-band target can still be shown as ordinary traffic. Ties on distance keep
    the first target in input order.
    """

    cfg = cfg or _DEFAULT_CFG
    own_lat = as_finite(ownship.lat_deg)
    own_lon = as_finite(ownship.lon_deg)
    if own_lat is None or own_lon is None:
        return None
    own_alt = as_finite(ownship.alt_ft)
    heading = as_finite(ownship.heading_deg)
    band = float(alert_alt_band_ft)

    best: AlertCandidate | None = None
    for target in targets:
        lat = as_finite(target.lat_deg)
        lon = as_finite(target.lon_deg)
        if lat is None or lon is None:
            _count(exclusions, ExclusionReason.MISSING_DATA)
            continue
        if target.on_ground:
            _count(exclusions, ExclusionReason.ON_GROUND)
            continue
        age = as_finite(target.age_s)
        if age is None or age > cfg.stale_age_s:
            _count(exclusions, ExclusionReason.STALE_FEED)
            continue
        dist = distance_nm(own_lat, own_lon, lat, lon)
        if as_finite(dist) is None or dist <= 0.0:
            _count(exclusions, ExclusionReason.BAD_DISTANCE)
            continue
        tgt_alt = as_finite(target.alt_ft)
        if own_alt is None or tgt_alt is None:
            _count(exclusions, ExclusionReason.MISSING_DATA)
            continue
        alt_delta = tgt_alt - own_alt
        if abs(alt_delta) > band:
            _count(exclusions, ExclusionReason.OUTSIDE_ALT_BAND)
            continue
        if best is not None and dist >= best.distance_nm:
            continue
        brg = bearing_deg(own_lat, own_lon, lat, lon)
        best = AlertCandidate(
            target=target,
            distance_nm=dist,
            alt_delta_ft=alt_delta,
            bearing_deg=brg,
            relative_bearing_deg=relative_bearing(brg, heading),
            vvel_fpm=as_finite(target.vvel_fpm),
        )
    return best


def plot_targets(
    ownship: OwnshipState,
    targets: Iterable[TrafficTarget],
    plot_range_nm: float,
    *,
    cfg: AlertConfig | None = None,
) -> list[PlotTarget]:
    """Geometry-only display list of positioned targets within plot range."""

    cfg = cfg or _DEFAULT_CFG
    own_lat = as_finite(ownship.lat_deg)
    own_lon = as_finite(ownship.lon_deg)
    if own_lat is None or own_lon is None:
        return []
    own_alt = as_finite(ownship.alt_ft)
    heading = as_finite(ownship.heading_deg)

    out: list[PlotTarget] = []
    for target in targets:
        age = as_finite(target.age_s)
        if age is None or age > cfg.display_ttl_s:
            continue
        dist = distance_nm(own_lat, own_lon, target.lat_deg, target.lon_deg)
        if as_finite(dist) is None or dist > plot_range_nm:
            continue
        brg = bearing_deg(own_lat, own_lon, target.lat_deg, target.lon_deg)
        tgt_alt = as_finite(target.alt_ft)
        out.append(
            PlotTarget(
                target_id=target.target_id,
                distance_nm=dist,
                bearing_deg=brg,
                relative_bearing_deg=relative_bearing(brg, heading),
                alt_delta_ft=None if own_alt is None or tgt_alt is None else tgt_alt - own_alt,
                track_deg=as_finite(target.track_deg),
                age_s=age,
                stale=age > cfg.stale_age_s,
                extrapolated=target.extrapolated,
            )
        )
    return out


def _count(exclusions: Counter | None, reason: ExclusionReason) -> None:
    if exclusions is not None:
        exclusions[reason] += 1
