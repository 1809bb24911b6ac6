"""GeoJSON → GeographicFeature conversion.

Features arrive as GeoJSON (from the feature service or a local file).
Each geometry is flattened into one feature per line string or polygon
ring exterior.  Points carry no drawable shape and are skipped.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable

from storymap.pipeline.geo.models import GeoPoint

from .models import FEATURE_TYPES, GeographicFeature

log = logging.getLogger(__name__)


def _ring(coords: list) -> tuple[GeoPoint, ...]:
    return tuple(GeoPoint(lat=float(c[1]), lng=float(c[0])) for c in coords)


def flatten_geometry(geometry: dict | None) -> list[tuple[GeoPoint, ...]]:
    """Return the drawable coordinate runs of a GeoJSON geometry."""
    if not geometry:
        return []
    gtype = geometry.get("type")
    coords = geometry.get("coordinates") or []

    if gtype == "LineString":
        return [_ring(coords)]
    if gtype == "MultiLineString":
        return [_ring(line) for line in coords]
    if gtype == "Polygon":
        return [_ring(coords[0])] if coords else []
    if gtype == "MultiPolygon":
        return [_ring(poly[0]) for poly in coords if poly]
    if gtype == "GeometryCollection":
        out: list[tuple[GeoPoint, ...]] = []
        for g in geometry.get("geometries", []):
            out.extend(flatten_geometry(g))
        return out
    return []


def classify(properties: dict, default_type: str) -> str:
    """Feature type from the ``class`` / ``feature_type`` property, else *default_type*."""
    for key in ("class", "feature_type"):
        value = str(properties.get(key) or "").lower()
        if value in FEATURE_TYPES:
            return value
        if value in ("water", "ocean", "reservoir"):
            return "lake"
        if value in ("stream", "canal"):
            return "river"
        if value in ("admin", "state", "country"):
            return "boundary"
    return default_type


def features_from_geojson(
    collection: dict, default_type: str = "coastline", id_prefix: str = "",
) -> list[GeographicFeature]:
    """Convert a GeoJSON FeatureCollection into GeographicFeatures."""
    out: list[GeographicFeature] = []
    for i, feat in enumerate(collection.get("features", [])):
        props = feat.get("properties") or {}
        ftype = classify(props, default_type)
        base_id = str(feat.get("id") or props.get("id") or f"{id_prefix}{i}")
        runs = [r for r in flatten_geometry(feat.get("geometry")) if len(r) >= 2]
        for j, run in enumerate(runs):
            out.append(GeographicFeature(
                id=base_id if len(runs) == 1 else f"{base_id}-{j}",
                name=str(props.get("name") or ""),
                type=ftype,
                coordinates=run,
            ))
    return out


def dedupe_features(features: Iterable[GeographicFeature]) -> list[GeographicFeature]:
    """Drop features sharing type, first point and last point; first one wins."""
    seen: set[tuple] = set()
    out: list[GeographicFeature] = []
    dropped = 0
    for f in features:
        key = (f.type, f.coordinates[0], f.coordinates[-1])
        if key in seen:
            dropped += 1
            continue
        seen.add(key)
        out.append(f)
    if dropped:
        log.debug("Dropped %d duplicate geographic features", dropped)
    return out


def load_geojson_features(path: Path, default_type: str = "coastline") -> list[GeographicFeature]:
    """Read a GeoJSON FeatureCollection file from disk."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    features = dedupe_features(features_from_geojson(data, default_type, id_prefix=f"{Path(path).stem}-"))
    log.info("Loaded %d geographic features from %s", len(features), path)
    return features
