"""Equirectangular projection from lat/lng into canvas points.

Longitude maps linearly onto ``[margin, margin + content_width]``.
Latitude maps linearly onto the content height and is then flipped so
north renders toward the top of the sheet (canvas y grows downward).

A single ``Projection`` instance is built per export and handed to every
layer generator; the layers register because they share it, not because
they happen to recompute the same numbers.
"""

from __future__ import annotations

from dataclasses import dataclass

from .models import CanvasFrame, GeoBounds, GeoPoint, check_coordinate

CanvasPoint = tuple[float, float]


@dataclass(frozen=True)
class Projection:
    bounds: GeoBounds
    frame: CanvasFrame

    def project(self, point: GeoPoint) -> CanvasPoint:
        return self.project_latlng(point.lat, point.lng)

    def project_latlng(self, lat: float, lng: float) -> CanvasPoint:
        check_coordinate(lat, lng)
        b = self.bounds
        f = self.frame
        x = (lng - b.min_lng) / b.lng_span * f.content_width
        y = (lat - b.min_lat) / b.lat_span * f.content_height
        return f.margin_pt + x, f.margin_pt + (f.content_height - y)

    def content_box(self) -> list[CanvasPoint]:
        """Projected bounds corners: top-left, top-right, bottom-right, bottom-left."""
        return [self.project(c) for c in self.bounds.corners]
