"""Template loader — reads templates/data/*.json files, parses and validates them."""

from __future__ import annotations

import json
import math
from pathlib import Path

from storymap.pipeline.geo.models import GeoBounds, GeoPoint

from .models import Template, TemplateCatalog, ValidationError, Waypoint


TEMPLATES_DIR = Path(__file__).resolve().parent / "data"


# ── Validation ─────────────────────────────────────────────────────

def _valid_point(p: GeoPoint) -> bool:
    return (
        math.isfinite(p.lat) and math.isfinite(p.lng)
        and -90 <= p.lat <= 90 and -180 <= p.lng <= 180
    )


def _validate_template(t: Template) -> list[ValidationError]:
    """Run all validation checks on a single template."""
    errs: list[ValidationError] = []
    tid = t.id

    if t.category not in {"journey", "relationship", "story"}:
        errs.append(ValidationError(tid, "category", f"Unknown category '{t.category}'"))

    for i, p in enumerate(t.route_path):
        if not _valid_point(p):
            errs.append(ValidationError(tid, f"route.path[{i}]", f"Invalid coordinate {p}"))
    if len(t.route_path) == 1:
        errs.append(ValidationError(tid, "route.path", "A route path needs at least 2 points"))

    b = t.route_bounds
    if b is not None:
        if b.min_lat > b.max_lat:
            errs.append(ValidationError(tid, "route.bounds", "south is north of north"))
        if b.min_lng > b.max_lng:
            errs.append(ValidationError(tid, "route.bounds", "west is east of east"))

    seen: set[str] = set()
    for wp in t.waypoints:
        if wp.id in seen:
            errs.append(ValidationError(tid, f"waypoints.{wp.id}", "Duplicate waypoint ID"))
        seen.add(wp.id)
        if not _valid_point(wp.point):
            errs.append(ValidationError(tid, f"waypoints.{wp.id}", f"Invalid coordinate {wp.point}"))

    return errs


# ── Parsing ────────────────────────────────────────────────────────

def _lnglat(pair: list) -> GeoPoint:
    """JSON stores coordinates GeoJSON-style as [lng, lat]."""
    return GeoPoint(lat=float(pair[1]), lng=float(pair[0]))


def _parse_bounds(data: dict | None) -> GeoBounds | None:
    if data is None:
        return None
    return GeoBounds(
        min_lat=float(data["south"]),
        max_lat=float(data["north"]),
        min_lng=float(data["west"]),
        max_lng=float(data["east"]),
    )


def parse_template(data: dict, source_file: str = "") -> Template:
    route = data.get("route") or {}
    return Template(
        id=data["id"],
        name=data["name"],
        category=data.get("category", "journey"),
        community=data.get("community", ""),
        description=data.get("description", ""),
        route_path=tuple(_lnglat(p) for p in route.get("path", [])),
        route_bounds=_parse_bounds(route.get("bounds")),
        waypoints=tuple(
            Waypoint(
                id=w["id"],
                name=w["name"],
                point=_lnglat(w["coordinates"]),
                type=w.get("type", "waypoint"),
                description=w.get("description", ""),
            )
            for w in route.get("waypoints", [])
        ),
        regions=tuple(route.get("regions", [])),
        source_file=source_file,
    )


# ── Public API ─────────────────────────────────────────────────────

def load_templates(templates_dir: Path | None = None) -> TemplateCatalog:
    """Load and validate every template JSON file in *templates_dir*."""
    d = templates_dir or TEMPLATES_DIR
    templates: list[Template] = []
    errors: list[ValidationError] = []

    for path in sorted(d.glob("*.json")):
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            tpl = parse_template(data, source_file=str(path))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError, IndexError) as e:
            errors.append(ValidationError(path.stem, "file", f"Parse error: {e}"))
            continue
        errors.extend(_validate_template(tpl))
        templates.append(tpl)

    ids = [t.id for t in templates]
    for tid in sorted({i for i in ids if ids.count(i) > 1}):
        errors.append(ValidationError(tid, "id", "Duplicate template ID"))

    return TemplateCatalog(templates=templates, errors=errors)
