"""Route-path layer — the template's journey polyline."""

from __future__ import annotations

from storymap.pipeline.geo.projection import Projection
from storymap.templates.models import Template

from .models import Layer, LayerName, PathPrimitive


def generate_route_layer(projection: Projection, template: Template | None) -> Layer:
    """One open path through the template route; empty when there is none."""
    anchors = tuple(projection.content_box())
    if template is None or not template.has_route:
        return Layer(LayerName.ROUTE, (), anchors)
    pts = tuple(projection.project(p) for p in template.route_path)
    return Layer(LayerName.ROUTE, (PathPrimitive(pts, role="route"),), anchors)
