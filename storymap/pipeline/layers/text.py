"""Text-engrave layer — title, location markers, labels and the legend.

Label placement is greedy: labels are placed in location order and each
one is pushed down in fixed steps until its box keeps the minimum
separation from every box already placed (legend included).  A label
with no room below its marker is tried above it, pushing upward.  Labels
stay inside the content area; one that finds no room either way is left
out and reported in the layer's warnings.
"""

from __future__ import annotations

from shapely.geometry import Polygon, box as shapely_box

from storymap.pipeline.config import EXPORT_RULES, ExportRules
from storymap.pipeline.geo.projection import CanvasPoint, Projection
from storymap.pipeline.mapdata.models import Location, MapData
from storymap.templates.models import Template

from .models import CirclePrimitive, Layer, LayerName, TextPrimitive

CHAR_WIDTH_RATIO = 0.55     # average glyph advance / font size
MAX_PUSH_STEPS = 40
LEGEND_HEADING = "Journey highlights"
DEFAULT_TITLE = "Our Story"


def text_box(anchor: CanvasPoint, text: str, size: float, align: str = "middle") -> Polygon:
    """Approximate bounding box of a text run whose baseline starts at *anchor*."""
    x, y = anchor
    w = len(text) * size * CHAR_WIDTH_RATIO
    if align == "middle":
        x -= w / 2
    elif align == "end":
        x -= w
    return shapely_box(x, y - size, x + w, y + size * 0.25)


def place_label(
    anchor: CanvasPoint,
    text: str,
    size: float,
    placed: list[Polygon],
    separation: float,
    step: float,
    area: tuple[float, float, float, float] | None = None,
) -> CanvasPoint | None:
    """Push *anchor* by *step* until the label clears every placed box; records the box.

    A positive *step* pushes down, a negative one pushes up.  With *area*
    (minx, miny, maxx, maxy) the label is shifted sideways to fit inside
    it and may not be pushed out of it.  Returns None, recording nothing,
    when the label cannot be placed within ``MAX_PUSH_STEPS`` steps.
    """
    x, y = anchor
    if area is not None:
        minx, miny, maxx, maxy = area
        left, _, right, _ = text_box((x, y), text, size).bounds
        if right - left > maxx - minx:
            return None
        x += max(0.0, minx - left) - max(0.0, right - maxx)

    for _ in range(MAX_PUSH_STEPS):
        candidate = text_box((x, y), text, size)
        if area is not None:
            above, below = candidate.bounds[1] < area[1], candidate.bounds[3] > area[3]
            if (below and step > 0) or (above and step < 0):
                return None
            if above or below:
                y += step
                continue
        if all(candidate.distance(b) >= separation for b in placed):
            placed.append(candidate)
            return x, y
        y += step
    return None


def _title(map_data: MapData, template: Template | None) -> str:
    return map_data.title or (template.name if template else "") or DEFAULT_TITLE


def _marker(loc: Location, map_data: MapData, at: CanvasPoint, rules: ExportRules, size: float):
    chapter = map_data.chapter_for(loc.id)
    emoji = (chapter.emoji if chapter else None) or loc.emoji
    if loc.marker_type == "emoji" and emoji:
        return TextPrimitive((at[0], at[1] + size * 0.35), emoji, size * 1.2, role="marker")
    return CirclePrimitive(at, rules.marker_radius_pt, role="marker")


def generate_text_layer(
    projection: Projection,
    map_data: MapData,
    template: Template | None = None,
    rules: ExportRules = EXPORT_RULES,
) -> Layer:
    f = projection.frame
    style = map_data.style
    size = style.font_size
    sep = rules.label_separation_pt
    prims: list = []
    placed: list[Polygon] = []

    # ── Title (centred in the top margin) ──────────────────────────
    title = _title(map_data, template)
    title_size = size * 1.8
    title_at = (f.width_pt / 2, f.margin_pt * 0.5 + title_size * 0.35)
    prims.append(TextPrimitive(title_at, title, title_size, role="title"))
    placed.append(text_box(title_at, title, title_size))

    # ── Legend (bottom-left of the content box) ────────────────────
    chapters = [c for c in map_data.chapters if any(loc.id == c.location_id for loc in map_data.locations)]
    chapters = chapters[: rules.legend_max_chapters]
    if chapters:
        line_h = size * 1.3
        x = f.margin_pt + sep
        y = f.height_pt - f.margin_pt - sep - line_h * len(chapters)
        prims.append(TextPrimitive((x, y), LEGEND_HEADING, size, role="legend", align="start"))
        placed.append(text_box((x, y), LEGEND_HEADING, size, "start"))
        for i, ch in enumerate(chapters, 1):
            entry = f"{i}. {ch.title}"
            at = (x, y + line_h * i)
            prims.append(TextPrimitive(at, entry, size * 0.9, role="legend", align="start"))
            placed.append(text_box(at, entry, size * 0.9, "start"))

    # ── Markers ────────────────────────────────────────────────────
    positions: list[tuple[Location, CanvasPoint]] = []
    for loc in map_data.locations:
        at = projection.project(loc.point)
        positions.append((loc, at))
        prims.append(_marker(loc, map_data, at, rules, size))
        r = rules.marker_radius_pt
        placed.append(shapely_box(at[0] - r, at[1] - r, at[0] + r, at[1] + r))

    # ── Labels ─────────────────────────────────────────────────────
    dropped: list[str] = []
    if style.show_labels:
        step = size * 0.5
        caption_size = size * 0.8
        area = (f.margin_pt, f.margin_pt, f.width_pt - f.margin_pt, f.height_pt - f.margin_pt)
        # Start clear of the marker so an isolated label is never pushed
        offset = max(rules.label_offset_pt, rules.marker_radius_pt + sep + size + 1.0)
        offset_above = rules.marker_radius_pt + sep + size * 0.25 + 1.0
        for loc, (x, y) in positions:
            # Below the marker first; above it, pushing upward, when that fails
            direction = 1.0
            label_at = place_label((x, y + offset), loc.name, size, placed, sep, step, area)
            if label_at is None:
                direction = -1.0
                label_at = place_label(
                    (x, y - offset_above), loc.name, size, placed, sep, -step, area,
                )
            if label_at is None:
                dropped.append(f"Label for '{loc.name}' dropped: no room near its marker")
                continue
            prims.append(TextPrimitive(label_at, loc.name, size, role="label"))
            if loc.caption:
                if direction > 0:
                    cap_y = label_at[1] + size * 0.25 + sep + caption_size + 1.0
                else:
                    cap_y = label_at[1] - size - sep - caption_size * 0.25 - 1.0
                cap_at = place_label(
                    (label_at[0], cap_y), loc.caption, caption_size,
                    placed, sep, step * direction, area,
                )
                if cap_at is None:
                    dropped.append(f"Caption for '{loc.name}' dropped: no room beside its label")
                    continue
                prims.append(TextPrimitive(cap_at, loc.caption, caption_size, role="caption"))

    return Layer(
        LayerName.TEXT, tuple(prims), tuple(projection.content_box()), warnings=tuple(dropped),
    )
