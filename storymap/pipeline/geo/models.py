"""Geographic and canvas dataclasses shared by every layer."""

from __future__ import annotations

import math
from dataclasses import dataclass

from storymap.pipeline.config import EXPORT_RULES
from storymap.pipeline.errors import DegenerateCanvas, MalformedGeometryInput


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lng: float


@dataclass(frozen=True)
class GeoBounds:
    """Axis-aligned lat/lng box, degrees."""

    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    @property
    def lat_span(self) -> float:
        return self.max_lat - self.min_lat

    @property
    def lng_span(self) -> float:
        return self.max_lng - self.min_lng

    @property
    def corners(self) -> list[GeoPoint]:
        """NW, NE, SE, SW — the order the canvas corners are reported in."""
        return [
            GeoPoint(self.max_lat, self.min_lng),
            GeoPoint(self.max_lat, self.max_lng),
            GeoPoint(self.min_lat, self.max_lng),
            GeoPoint(self.min_lat, self.min_lng),
        ]


@dataclass(frozen=True)
class CanvasFrame:
    """Physical sheet in inches, with canvas units in points.

    Canvas origin is the top-left corner of the sheet, y grows downward.
    """

    width_in: float
    height_in: float
    points_per_inch: float = EXPORT_RULES.points_per_inch
    margin_pt: float = EXPORT_RULES.content_margin_pt
    cut_margin_pt: float = EXPORT_RULES.cut_margin_pt

    def __post_init__(self) -> None:
        if self.content_width <= 0 or self.content_height <= 0:
            raise DegenerateCanvas(self.width_in, self.height_in, self.margin_pt / self.points_per_inch)

    @property
    def width_pt(self) -> float:
        return self.width_in * self.points_per_inch

    @property
    def height_pt(self) -> float:
        return self.height_in * self.points_per_inch

    @property
    def content_width(self) -> float:
        return self.width_pt - 2 * self.margin_pt

    @property
    def content_height(self) -> float:
        return self.height_pt - 2 * self.margin_pt

    def to_inches(self, value_pt: float) -> float:
        return value_pt / self.points_per_inch


def check_coordinate(lat: float, lng: float) -> None:
    """Raise MalformedGeometryInput for non-finite or out-of-range values."""
    if not (math.isfinite(lat) and math.isfinite(lng)):
        raise MalformedGeometryInput(lat, lng, "non-finite value")
    if not -90.0 <= lat <= 90.0:
        raise MalformedGeometryInput(lat, lng, "latitude outside [-90, 90]")
    if not -180.0 <= lng <= 180.0:
        raise MalformedGeometryInput(lat, lng, "longitude outside [-180, 180]")
