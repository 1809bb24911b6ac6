"""Geographic-features layer — real coastlines, lakes, rivers and boundaries.

Features are projected with the shared projection and clipped to the
content box with shapely.  Lakes are areas and become closed paths;
every other type is drawn as open lines.  Nothing here creates
geometry: no input, or nothing left after clipping, is an error.
"""

from __future__ import annotations

import logging
from typing import Iterator, Sequence

from shapely.geometry import LineString, Polygon, box as shapely_box
from shapely.geometry.base import BaseGeometry
from shapely.validation import make_valid

from storymap.geodata.models import GeographicFeature
from storymap.pipeline.errors import NoFeaturesFound
from storymap.pipeline.geo.projection import Projection

from .models import Layer, LayerName, PathPrimitive

log = logging.getLogger(__name__)

AREA_TYPES = {"lake"}


def _parts(geom: BaseGeometry) -> Iterator[BaseGeometry]:
    """Yield the simple geometries inside *geom*."""
    if geom.is_empty:
        return
    if hasattr(geom, "geoms"):
        for g in geom.geoms:
            yield from _parts(g)
    else:
        yield geom


def _to_paths(geom: BaseGeometry, role: str) -> list[PathPrimitive]:
    out: list[PathPrimitive] = []
    for part in _parts(geom):
        if isinstance(part, Polygon):
            ring = list(part.exterior.coords)[:-1]
            if len(ring) >= 3:
                out.append(PathPrimitive(tuple((x, y) for x, y in ring), closed=True, role=role))
        elif isinstance(part, LineString):
            coords = list(part.coords)
            if len(coords) >= 2:
                out.append(PathPrimitive(tuple((x, y) for x, y in coords), role=role))
        # Points left over from touching the clip edge are not drawable
    return out


def generate_feature_layer(
    projection: Projection, features: Sequence[GeographicFeature],
) -> Layer:
    if not features:
        raise NoFeaturesFound("no geographic features supplied for the map area")

    (x0, y0), _, (x1, y1), _ = projection.content_box()
    clip = shapely_box(min(x0, x1), min(y0, y1), max(x0, x1), max(y0, y1))

    prims: list[PathPrimitive] = []
    dropped = 0
    for f in features:
        pts = [projection.project(p) for p in f.coordinates]
        role = f"geographic-{f.type}"
        if f.type in AREA_TYPES and len(pts) >= 3:
            geom: BaseGeometry = Polygon(pts)
            if not geom.is_valid:
                geom = make_valid(geom)
        elif len(pts) >= 2:
            geom = LineString(pts)
        else:
            dropped += 1
            continue

        paths = _to_paths(geom.intersection(clip), role)
        if not paths:
            dropped += 1
        prims.extend(paths)

    if dropped:
        log.warning("%d of %d geographic features fell outside the map area", dropped, len(features))
    if not prims:
        raise NoFeaturesFound("every geographic feature lies outside the map area")

    return Layer(LayerName.GEOGRAPHIC, tuple(prims), tuple(projection.content_box()))
