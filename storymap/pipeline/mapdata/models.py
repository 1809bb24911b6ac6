"""Map snapshot dataclasses — what the customer assembled, frozen at order time."""

from __future__ import annotations

from dataclasses import dataclass, field

from storymap.pipeline.geo.models import GeoPoint


MARKER_TYPES = ("icon", "emoji", "image")
THEMES = ("minimalist", "woodburn", "vintage", "inverted")
ORIENTATIONS = ("portrait", "landscape")
DIGITAL_FORMATS = ("png", "svg", "pdf", "dxf")


@dataclass(frozen=True)
class Location:
    id: str
    name: str
    lat: float
    lng: float
    narrative: str | None = None
    caption: str | None = None
    marker_type: str = "icon"           # "icon" | "emoji" | "image"
    icon: str | None = None             # named icon, e.g. "Anchor"
    emoji: str | None = None
    custom_image: str | None = None     # reference to an uploaded image

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(self.lat, self.lng)


@dataclass(frozen=True)
class Chapter:
    """Story enrichment of exactly one Location."""
    id: str
    location_id: str
    title: str
    description: str | None = None
    icon: str | None = None             # marker override
    emoji: str | None = None
    custom_image: str | None = None


@dataclass(frozen=True)
class StyleSettings:
    theme: str = "minimalist"
    font: str = "font-sans"
    font_size: float = 10.0             # points
    stroke_width: float = 1.0           # points
    show_labels: bool = True
    show_roads: bool = False
    show_landmarks: bool = True


@dataclass(frozen=True)
class ExportSettings:
    size: str = "8x10"                  # named size or "custom"
    orientation: str = "portrait"
    material: str = "cherry-wood"
    digital_format: str = "svg"
    custom_width_in: float | None = None
    custom_height_in: float | None = None


@dataclass(frozen=True)
class MapData:
    template_id: str | None
    locations: tuple[Location, ...]
    chapters: tuple[Chapter, ...] = ()
    style: StyleSettings = field(default_factory=StyleSettings)
    export_settings: ExportSettings = field(default_factory=ExportSettings)
    title: str | None = None

    def chapter_for(self, location_id: str) -> Chapter | None:
        return next((c for c in self.chapters if c.location_id == location_id), None)
