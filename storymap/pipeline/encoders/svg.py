"""SVG encoder — one Inkscape layer per manufacturing layer.

The document is sized in inches with a viewBox in canvas points, so the
same coordinates the generators produced are written unchanged.  Layer
styling lives in a CSS block keyed by class names (``cut``, ``engrave``,
``marker``, ``label``, ``caption``, ``title``, ``legend``,
``geographic geographic-<type>``, ``route``) which laser software and
the preview both understand.
"""

from __future__ import annotations

from typing import Sequence

import svgwrite

from storymap.pipeline.geo.models import CanvasFrame
from storymap.pipeline.layers.models import (
    LAYER_ORDER, CirclePrimitive, Layer, LayerName, PathPrimitive, TextPrimitive,
)
from storymap.pipeline.mapdata.models import StyleSettings

INKSCAPE_NS = "http://www.inkscape.org/namespaces/inkscape"

# theme → (background, lines, markers, text)
THEME_PALETTES: dict[str, tuple[str, str, str, str]] = {
    "minimalist": ("#ffffff", "#e2e8f0", "#475569", "#475569"),
    "woodburn":   ("#fef3c7", "#92400e", "#92400e", "#451a03"),
    "vintage":    ("#f5f5f4", "#78716c", "#44403c", "#44403c"),
    "inverted":   ("#0f172a", "#94a3b8", "#f8fafc", "#f8fafc"),
}

FONT_FAMILIES = {
    "font-serif": "Georgia, serif",
    "font-mono": "Monaco, monospace",
}
DEFAULT_FONT_FAMILY = "Inter, sans-serif"

CUT_COLOR = "#ff0000"
ROUTE_COLOR = "#1d4ed8"

_LAYER_IDS = {
    LayerName.CUT: "cut",
    LayerName.TEXT: "text-engrave",
    LayerName.GEOGRAPHIC: "geographic-features",
    LayerName.ROUTE: "route-path",
}


def font_family(font: str) -> str:
    return FONT_FAMILIES.get(font, DEFAULT_FONT_FAMILY)


def _fmt(v: float) -> str:
    s = f"{v:.3f}".rstrip("0").rstrip(".")
    return "0" if s in ("", "-0") else s


def _css(style: StyleSettings) -> str:
    bg, lines, markers, text = THEME_PALETTES.get(style.theme, THEME_PALETTES["minimalist"])
    sw = style.stroke_width
    family = font_family(style.font)
    return "\n".join([
        f".sheet {{ fill: {bg}; stroke: none; }}",
        f".cut {{ fill: none; stroke: {CUT_COLOR}; stroke-width: {_fmt(sw * 0.25)}; }}",
        f".registration {{ fill: none; stroke: {CUT_COLOR}; stroke-width: {_fmt(sw * 0.25)}; }}",
        f".engrave {{ fill: {text}; stroke: none; font-family: {family}; }}",
        f".marker {{ fill: {markers}; }}",
        ".title { font-weight: bold; }",
        ".caption { font-style: italic; }",
        f".geographic {{ fill: none; stroke: {lines}; stroke-width: {_fmt(sw)}; "
        f"stroke-linecap: round; stroke-linejoin: round; }}",
        f".geographic-lake {{ fill: {lines}; fill-opacity: 0.35; }}",
        f".route {{ fill: none; stroke: {ROUTE_COLOR}; stroke-width: {_fmt(sw * 1.5)}; "
        f"stroke-linecap: round; stroke-linejoin: round; }}",
    ])


def _classes(role: str) -> str:
    if role.startswith("geographic-"):
        return f"geographic {role}"
    if role in ("marker", "label", "caption", "title", "legend"):
        return f"engrave {role}"
    if role == "registration":
        return "cut registration"
    return role or "engrave"


def _path_d(p: PathPrimitive) -> str:
    parts = [
        f"{'M' if i == 0 else 'L'}{_fmt(x)},{_fmt(y)}"
        for i, (x, y) in enumerate(p.points)
    ]
    if p.closed:
        parts.append("Z")
    return " ".join(parts)


def _make_svg(frame: CanvasFrame, style: StyleSettings) -> svgwrite.Drawing:
    dwg = svgwrite.Drawing(
        size=(f"{_fmt(frame.width_in)}in", f"{_fmt(frame.height_in)}in"),
        viewBox=f"0 0 {_fmt(frame.width_pt)} {_fmt(frame.height_pt)}",
        debug=False,
    )
    dwg.attribs["xmlns:inkscape"] = INKSCAPE_NS
    dwg.defs.add(dwg.style(_css(style)))
    return dwg


def _layer_group(dwg: svgwrite.Drawing, layer: Layer):
    group = dwg.g(id=_LAYER_IDS.get(layer.name, layer.name.lower()))
    group.attribs["inkscape:label"] = layer.name
    group.attribs["inkscape:groupmode"] = "layer"

    for prim in layer.primitives:
        cls = _classes(prim.role)
        if isinstance(prim, PathPrimitive):
            group.add(dwg.path(d=_path_d(prim), class_=cls))
        elif isinstance(prim, CirclePrimitive):
            group.add(dwg.circle(
                center=(_fmt(prim.center[0]), _fmt(prim.center[1])),
                r=_fmt(prim.radius), class_=cls,
            ))
        elif isinstance(prim, TextPrimitive):
            group.add(dwg.text(
                prim.text,
                insert=(_fmt(prim.anchor[0]), _fmt(prim.anchor[1])),
                class_=cls,
                font_size=_fmt(prim.size_pt),
                text_anchor=prim.align,
            ))
    return group


# ── Public API ─────────────────────────────────────────────────────

def encode_layer_svg(layer: Layer, frame: CanvasFrame, style: StyleSettings) -> str:
    """A standalone SVG containing a single layer."""
    dwg = _make_svg(frame, style)
    dwg.add(_layer_group(dwg, layer))
    return dwg.tostring()


def encode_combined_svg(
    layers: Sequence[Layer], frame: CanvasFrame, style: StyleSettings,
) -> str:
    """Preview / production SVG: sheet background, cut layer as base, the rest on top."""
    dwg = _make_svg(frame, style)
    dwg.add(dwg.rect(
        insert=(0, 0), size=(_fmt(frame.width_pt), _fmt(frame.height_pt)), class_="sheet",
    ))
    by_name = {layer.name: layer for layer in layers}
    for name in LAYER_ORDER:
        if name in by_name:
            dwg.add(_layer_group(dwg, by_name[name]))
    return dwg.tostring()
