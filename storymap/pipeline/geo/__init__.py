"""Geo — bounds resolution and canvas projection.

Submodules:
  models      GeoPoint, GeoBounds, CanvasFrame and coordinate checks.
  bounds      Padded bounding box over locations + template route region.
  projection  Linear lat/lng → canvas mapping with vertical flip.
"""

from .models import GeoPoint, GeoBounds, CanvasFrame, check_coordinate
from .bounds import resolve_bounds, route_region_of
from .projection import Projection, CanvasPoint

__all__ = [
    # Models
    "GeoPoint", "GeoBounds", "CanvasFrame", "check_coordinate",
    # Bounds
    "resolve_bounds", "route_region_of",
    # Projection
    "Projection", "CanvasPoint",
]
