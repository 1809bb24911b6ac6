"""Template serialization — JSON-safe dicts for the operations API."""

from __future__ import annotations

from .models import Template, TemplateCatalog


def template_to_dict(t: Template) -> dict:
    route: dict = {}
    if t.route_path:
        route["path"] = [[p.lng, p.lat] for p in t.route_path]
    if t.route_bounds is not None:
        b = t.route_bounds
        route["bounds"] = {
            "north": b.max_lat, "south": b.min_lat,
            "east": b.max_lng, "west": b.min_lng,
        }
    if t.waypoints:
        route["waypoints"] = [
            {
                "id": w.id,
                "name": w.name,
                "coordinates": [w.point.lng, w.point.lat],
                "type": w.type,
                **({"description": w.description} if w.description else {}),
            }
            for w in t.waypoints
        ]
    if t.regions:
        route["regions"] = list(t.regions)

    return {
        "id": t.id,
        "name": t.name,
        "category": t.category,
        "community": t.community,
        "description": t.description,
        **({"route": route} if route else {}),
    }


def catalog_to_dict(catalog: TemplateCatalog) -> dict:
    return {
        "ok": catalog.ok,
        "templates": [template_to_dict(t) for t in catalog.templates],
        "errors": [str(e) for e in catalog.errors],
    }
