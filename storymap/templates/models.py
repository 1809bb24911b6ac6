"""Template dataclasses — typed representations of templates/data/*.json."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from storymap.pipeline.geo.models import GeoBounds, GeoPoint


@dataclass(frozen=True)
class Waypoint:
    id: str
    name: str
    point: GeoPoint
    type: str                           # "start" | "stop" | "waypoint" | "end"
    description: str = ""


@dataclass(frozen=True)
class Template:
    id: str
    name: str
    category: str                       # "journey" | "relationship" | "story"
    community: str
    description: str
    route_path: tuple[GeoPoint, ...] = ()
    route_bounds: GeoBounds | None = None
    waypoints: tuple[Waypoint, ...] = ()
    regions: tuple[str, ...] = ()
    source_file: str = ""               # path of the JSON file (for error reporting)

    @property
    def has_route(self) -> bool:
        return len(self.route_path) >= 2


@dataclass
class ValidationError:
    template_id: str
    field: str
    message: str

    def __str__(self) -> str:
        return f"[{self.template_id}] {self.field}: {self.message}"


class TemplateLookup(Protocol):
    def get(self, template_id: str) -> Template | None:
        ...


@dataclass
class TemplateCatalog:
    """Result of loading the templates — read-only lookup + any validation errors."""
    templates: list[Template]
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return len(self.errors) == 0

    def get(self, template_id: str) -> Template | None:
        return next((t for t in self.templates if t.id == template_id), None)

    def by_category(self, category: str) -> list[Template]:
        return [t for t in self.templates if t.category == category]
