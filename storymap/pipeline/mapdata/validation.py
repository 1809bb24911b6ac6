"""Map snapshot validation — structural checks before an order is placed."""

from __future__ import annotations

import math

from storymap.pipeline.config import EXPORT_RULES

from .models import DIGITAL_FORMATS, MARKER_TYPES, ORIENTATIONS, THEMES, ExportSettings, MapData


def requested_size(es: ExportSettings) -> tuple[float, float] | None:
    """Width and height in inches named by the export settings, if they spell one out."""
    if es.size == "custom":
        if es.custom_width_in and es.custom_height_in:
            return float(es.custom_width_in), float(es.custom_height_in)
        return None
    w, sep, h = es.size.partition("x")
    if not sep:
        return None
    try:
        return float(w), float(h)
    except ValueError:
        return None


def validate_map_data(md: MapData) -> list[str]:
    """Validate a MapData snapshot. Returns error messages (empty = valid)."""
    errors: list[str] = []

    # ── Location IDs unique, coordinates sane ──
    seen_ids: set[str] = set()
    for loc in md.locations:
        if loc.id in seen_ids:
            errors.append(f"Duplicate location id '{loc.id}'")
        seen_ids.add(loc.id)

        if not (math.isfinite(loc.lat) and math.isfinite(loc.lng)):
            errors.append(f"Location '{loc.id}': non-finite coordinates")
        elif not (-90 <= loc.lat <= 90 and -180 <= loc.lng <= 180):
            errors.append(
                f"Location '{loc.id}': coordinates ({loc.lat}, {loc.lng}) out of range"
            )

        if loc.marker_type not in MARKER_TYPES:
            errors.append(f"Location '{loc.id}': unknown marker_type '{loc.marker_type}'")
        elif loc.marker_type == "emoji" and not loc.emoji:
            errors.append(f"Location '{loc.id}': marker_type 'emoji' requires an emoji")
        elif loc.marker_type == "image" and not loc.custom_image:
            errors.append(f"Location '{loc.id}': marker_type 'image' requires custom_image")

    # ── Chapters: one per location, and only for known locations ──
    chapter_owner: dict[str, str] = {}
    for ch in md.chapters:
        if ch.location_id not in seen_ids:
            errors.append(
                f"Chapter '{ch.id}': references unknown location '{ch.location_id}'"
            )
            continue
        if ch.location_id in chapter_owner:
            errors.append(
                f"Location '{ch.location_id}' has more than one chapter "
                f"('{chapter_owner[ch.location_id]}' and '{ch.id}')"
            )
        else:
            chapter_owner[ch.location_id] = ch.id

    # ── Style / export settings ──
    if md.style.theme not in THEMES:
        errors.append(f"Unknown theme '{md.style.theme}'")
    if md.style.stroke_width <= 0:
        errors.append("stroke_width must be > 0")
    if md.style.font_size <= 0:
        errors.append("font_size must be > 0")

    es = md.export_settings
    if es.orientation not in ORIENTATIONS:
        errors.append(f"Unknown orientation '{es.orientation}'")
    if es.digital_format not in DIGITAL_FORMATS:
        errors.append(f"Unknown digital format '{es.digital_format}'")
    if es.size == "custom":
        if not es.custom_width_in or not es.custom_height_in:
            errors.append("Custom size requires custom_width_in and custom_height_in")
        elif es.custom_width_in <= 0 or es.custom_height_in <= 0:
            errors.append("Custom size dimensions must be > 0")

    dims = requested_size(es)
    min_side = 2 * EXPORT_RULES.content_margin_in
    if dims is not None and min(dims) > 0 and min(dims) <= min_side:
        errors.append(
            f"Size {dims[0]:g}x{dims[1]:g} in leaves no drawing area inside the margins; "
            f"both sides must be larger than {min_side:g} in"
        )

    return errors
