"""DXF encoder — ASCII DXF R12 written line by line.

Every value is a (group code, value) pair on two lines.  Units are
inches: R12 has no units header variable, so a leading 999 comment
states the unit and $INSUNITS = 1 covers later readers.  Canvas points
are divided by points-per-inch and the y axis is flipped (DXF y grows
upward, canvas y grows down) so the drawing reads the same way up as
the SVG.

Entity handles come from a counter owned by one document, so encoding
the same layers twice produces byte-identical files.
"""

from __future__ import annotations

from typing import Sequence

from storymap.pipeline.geo.models import CanvasFrame
from storymap.pipeline.layers.models import (
    LAYER_ORDER, CirclePrimitive, Layer, LayerName, PathPrimitive, TextPrimitive,
)

# ACI colour per layer
LAYER_COLORS = {
    LayerName.CUT: 1,           # red
    LayerName.GEOGRAPHIC: 3,    # green
    LayerName.ROUTE: 4,         # cyan
    LayerName.TEXT: 5,          # blue
}

_ALIGN = {"start": 0, "middle": 1, "end": 2}


class _Document:
    """Collects DXF lines and hands out sequential entity handles."""

    def __init__(self, frame: CanvasFrame) -> None:
        self.frame = frame
        self.entities: list[str] = []
        self._next_handle = 0x20

    def handle(self) -> str:
        h = f"{self._next_handle:X}"
        self._next_handle += 1
        return h

    @property
    def handle_seed(self) -> str:
        return f"{self._next_handle:X}"

    # ── coordinate conversion ──────────────────────────────────────

    def x(self, x_pt: float) -> str:
        return _num(x_pt / self.frame.points_per_inch)

    def y(self, y_pt: float) -> str:
        return _num(self.frame.height_in - y_pt / self.frame.points_per_inch)

    def length(self, v_pt: float) -> str:
        return _num(v_pt / self.frame.points_per_inch)

    # ── entities ───────────────────────────────────────────────────

    def pair(self, code: int, value) -> None:
        self.entities.append(str(code))
        self.entities.append(str(value))

    def polyline(self, layer: str, p: PathPrimitive) -> None:
        self.pair(0, "POLYLINE")
        self.pair(5, self.handle())
        self.pair(8, layer)
        self.pair(66, 1)
        self.pair(70, 1 if p.closed else 0)
        self.pair(10, "0.0")
        self.pair(20, "0.0")
        self.pair(30, "0.0")
        for px, py in p.points:
            self.pair(0, "VERTEX")
            self.pair(5, self.handle())
            self.pair(8, layer)
            self.pair(10, self.x(px))
            self.pair(20, self.y(py))
            self.pair(30, "0.0")
        self.pair(0, "SEQEND")
        self.pair(5, self.handle())
        self.pair(8, layer)

    def circle(self, layer: str, c: CirclePrimitive) -> None:
        self.pair(0, "CIRCLE")
        self.pair(5, self.handle())
        self.pair(8, layer)
        self.pair(10, self.x(c.center[0]))
        self.pair(20, self.y(c.center[1]))
        self.pair(30, "0.0")
        self.pair(40, self.length(c.radius))

    def text(self, layer: str, t: TextPrimitive) -> None:
        value = _dxf_text(t.text)
        if not value.strip():
            # Nothing R12 can draw (e.g. an emoji outside the BMP): keep a
            # circle where the glyph sits so the marker is not lost.
            cx, cy = t.anchor[0], t.anchor[1] - t.size_pt * 0.35
            self.circle(layer, CirclePrimitive((cx, cy), t.size_pt * 0.35, role=t.role))
            return
        x, y = self.x(t.anchor[0]), self.y(t.anchor[1])
        align = _ALIGN.get(t.align, 0)
        self.pair(0, "TEXT")
        self.pair(5, self.handle())
        self.pair(8, layer)
        self.pair(10, x)
        self.pair(20, y)
        self.pair(30, "0.0")
        self.pair(40, self.length(t.size_pt))
        self.pair(1, value)
        if align:
            self.pair(72, align)
            self.pair(11, x)
            self.pair(21, y)
            self.pair(31, "0.0")

    def add_layer(self, layer: Layer) -> None:
        for prim in layer.primitives:
            if isinstance(prim, PathPrimitive):
                self.polyline(layer.name, prim)
            elif isinstance(prim, CirclePrimitive):
                self.circle(layer.name, prim)
            elif isinstance(prim, TextPrimitive):
                self.text(layer.name, prim)

    # ── document ───────────────────────────────────────────────────

    def render(self, layer_names: Sequence[str]) -> str:
        f = self.frame
        lines: list[str] = []

        def pair(code: int, value) -> None:
            lines.append(str(code))
            lines.append(str(value))

        pair(999, "Units: inches")
        pair(0, "SECTION")
        pair(2, "HEADER")
        pair(9, "$ACADVER")
        pair(1, "AC1009")
        pair(9, "$INSUNITS")
        pair(70, 1)
        pair(9, "$HANDLING")
        pair(70, 1)
        pair(9, "$HANDSEED")
        pair(5, self.handle_seed)
        pair(9, "$EXTMIN")
        pair(10, _num(0))
        pair(20, _num(0))
        pair(9, "$EXTMAX")
        pair(10, _num(f.width_in))
        pair(20, _num(f.height_in))
        pair(0, "ENDSEC")

        pair(0, "SECTION")
        pair(2, "TABLES")
        pair(0, "TABLE")
        pair(2, "LAYER")
        pair(70, len(layer_names))
        for name in layer_names:
            pair(0, "LAYER")
            pair(2, name)
            pair(70, 0)
            pair(62, LAYER_COLORS.get(name, 7))
            pair(6, "CONTINUOUS")
        pair(0, "ENDTAB")
        pair(0, "ENDSEC")

        pair(0, "SECTION")
        pair(2, "ENTITIES")
        lines.extend(self.entities)
        pair(0, "ENDSEC")
        pair(0, "EOF")
        return "\n".join(lines) + "\n"


def _num(v: float) -> str:
    return f"{v:.4f}"


def _dxf_text(s: str) -> str:
    """R12 text is single-byte; other BMP characters use the \\U+XXXX escape.

    The escape holds exactly four hex digits, so characters beyond U+FFFF
    are dropped, along with the variation selectors that decorate emoji.
    """
    out: list[str] = []
    for c in s:
        o = ord(c)
        if 32 <= o < 127:
            out.append(c)
        elif o <= 0xFFFF and not 0xFE00 <= o <= 0xFE0F:
            out.append(f"\\U+{o:04X}")
    return "".join(out)


# ── Public API ─────────────────────────────────────────────────────

def encode_layer_dxf(layer: Layer, frame: CanvasFrame) -> str:
    """A standalone DXF containing a single named layer."""
    doc = _Document(frame)
    doc.add_layer(layer)
    return doc.render([layer.name])


def encode_combined_dxf(layers: Sequence[Layer], frame: CanvasFrame) -> str:
    """All layers in one DXF, each on its own named layer, in production order."""
    doc = _Document(frame)
    by_name = {layer.name: layer for layer in layers}
    names = [n for n in LAYER_ORDER if n in by_name]
    for name in names:
        doc.add_layer(by_name[name])
    return doc.render(names)


def read_extents(dxf_text: str) -> tuple[tuple[float, float], tuple[float, float]]:
    """Parse ``$EXTMIN`` / ``$EXTMAX`` back out of a DXF document (inches)."""
    lines = dxf_text.splitlines()
    out: dict[str, tuple[float, float]] = {}
    for i, line in enumerate(lines):
        if line in ("$EXTMIN", "$EXTMAX"):
            out[line] = (float(lines[i + 2]), float(lines[i + 4]))
    return out["$EXTMIN"], out["$EXTMAX"]
