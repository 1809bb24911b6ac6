"""Bounds resolution — one padded lat/lng box for the whole export."""

from __future__ import annotations

from typing import Iterable

from storymap.pipeline.config import EXPORT_RULES
from storymap.pipeline.errors import InsufficientGeographicData

from .models import GeoBounds, GeoPoint, check_coordinate


def resolve_bounds(
    points: Iterable[GeoPoint],
    route_region: GeoBounds | None = None,
    *,
    padding_ratio: float = EXPORT_RULES.padding_ratio,
    min_padding_deg: float = EXPORT_RULES.min_padding_deg,
) -> GeoBounds:
    """Return the padded box covering every point and the route region.

    Each axis is padded independently by ``padding_ratio`` of its raw
    span on both sides.  An axis with zero span (a single location, or
    locations on one meridian / parallel) is padded by
    ``min_padding_deg`` instead, so the result always has a positive
    area.  Only min/max are used, so the result does not depend on the
    order of *points*.
    """
    lats: list[float] = []
    lngs: list[float] = []
    for p in points:
        check_coordinate(p.lat, p.lng)
        lats.append(p.lat)
        lngs.append(p.lng)

    if route_region is not None:
        for corner in (
            GeoPoint(route_region.min_lat, route_region.min_lng),
            GeoPoint(route_region.max_lat, route_region.max_lng),
        ):
            check_coordinate(corner.lat, corner.lng)
            lats.append(corner.lat)
            lngs.append(corner.lng)

    if not lats:
        raise InsufficientGeographicData()

    min_lat, max_lat = min(lats), max(lats)
    min_lng, max_lng = min(lngs), max(lngs)

    lat_pad = _padding(max_lat - min_lat, padding_ratio, min_padding_deg)
    lng_pad = _padding(max_lng - min_lng, padding_ratio, min_padding_deg)

    return GeoBounds(
        min_lat=min_lat - lat_pad,
        max_lat=max_lat + lat_pad,
        min_lng=min_lng - lng_pad,
        max_lng=max_lng + lng_pad,
    )


def route_region_of(
    route_bounds: GeoBounds | None,
    route_path: list[GeoPoint],
) -> GeoBounds | None:
    """The region a template contributes: explicit bounds, else the path extent."""
    if route_bounds is not None:
        return route_bounds
    if not route_path:
        return None
    return GeoBounds(
        min_lat=min(p.lat for p in route_path),
        max_lat=max(p.lat for p in route_path),
        min_lng=min(p.lng for p in route_path),
        max_lng=max(p.lng for p in route_path),
    )


def _padding(span: float, ratio: float, fallback: float) -> float:
    pad = span * ratio
    return pad if pad > 0 else fallback
