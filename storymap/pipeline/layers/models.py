"""Layer geometry dataclasses — format-neutral output of the generators.

All coordinates are canvas points: origin top-left, y grows downward.
The encoders turn these primitives into SVG elements or DXF entities.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from storymap.pipeline.geo.projection import CanvasPoint


class LayerName:
    CUT = "CUT"
    TEXT = "TEXT-ENGRAVE"
    GEOGRAPHIC = "GEOGRAPHIC-FEATURES"
    ROUTE = "ROUTE-PATH"


# Production order: outline first, deep routing, route engrave, fine text last.
LAYER_ORDER = (LayerName.CUT, LayerName.GEOGRAPHIC, LayerName.ROUTE, LayerName.TEXT)


@dataclass(frozen=True)
class PathPrimitive:
    points: tuple[CanvasPoint, ...]
    closed: bool = False
    role: str = ""                      # styling hint, e.g. "cut", "route", "geographic-lake"


@dataclass(frozen=True)
class CirclePrimitive:
    center: CanvasPoint
    radius: float
    role: str = ""


@dataclass(frozen=True)
class TextPrimitive:
    anchor: CanvasPoint                 # baseline point
    text: str
    size_pt: float
    role: str = ""                      # "title" | "marker" | "label" | "caption" | "legend"
    align: str = "middle"               # "start" | "middle" | "end"


Primitive = Union[PathPrimitive, CirclePrimitive, TextPrimitive]


@dataclass(frozen=True)
class Layer:
    name: str
    primitives: tuple[Primitive, ...]
    anchors: tuple[CanvasPoint, ...]    # registration reference points
    warnings: tuple[str, ...] = ()      # content the generator had to leave out

    @property
    def is_empty(self) -> bool:
        return not self.primitives

    def of_type(self, kind: type) -> list:
        return [p for p in self.primitives if isinstance(p, kind)]
