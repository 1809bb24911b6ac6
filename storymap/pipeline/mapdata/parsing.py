"""Map snapshot parsing — convert raw dicts/JSON into MapData."""

from __future__ import annotations

from .models import Chapter, ExportSettings, Location, MapData, StyleSettings


def parse_map_data(data: dict) -> MapData:
    """Parse a raw dict (from JSON / API input) into a MapData snapshot."""
    locations = tuple(_parse_location(loc) for loc in data.get("locations", []))

    chapters = tuple(
        Chapter(
            id=c["id"],
            location_id=c["location_id"],
            title=c["title"],
            description=c.get("description"),
            icon=c.get("icon"),
            emoji=c.get("emoji"),
            custom_image=c.get("custom_image"),
        )
        for c in data.get("chapters", [])
    )

    return MapData(
        template_id=data.get("template_id") or None,
        locations=locations,
        chapters=chapters,
        style=_parse_style(data.get("style") or {}),
        export_settings=_parse_export_settings(data.get("export_settings") or {}),
        title=data.get("title"),
    )


def _parse_location(v: dict) -> Location:
    # Older snapshots stored [lng, lat] under "coordinates"
    if "coordinates" in v and "lat" not in v:
        lng, lat = v["coordinates"]
    else:
        lat, lng = v["lat"], v["lng"]

    marker_type = v.get("marker_type")
    if marker_type is None:
        if v.get("custom_image"):
            marker_type = "image"
        elif v.get("emoji"):
            marker_type = "emoji"
        else:
            marker_type = "icon"

    return Location(
        id=v["id"],
        name=v["name"],
        lat=float(lat),
        lng=float(lng),
        narrative=v.get("narrative"),
        caption=v.get("caption"),
        marker_type=marker_type,
        icon=v.get("icon"),
        emoji=v.get("emoji"),
        custom_image=v.get("custom_image"),
    )


def _parse_style(v: dict) -> StyleSettings:
    defaults = StyleSettings()
    return StyleSettings(
        theme=v.get("theme", defaults.theme),
        font=v.get("font", defaults.font),
        font_size=float(v.get("font_size", defaults.font_size)),
        stroke_width=float(v.get("stroke_width", defaults.stroke_width)),
        show_labels=bool(v.get("show_labels", defaults.show_labels)),
        show_roads=bool(v.get("show_roads", defaults.show_roads)),
        show_landmarks=bool(v.get("show_landmarks", defaults.show_landmarks)),
    )


def _parse_export_settings(v: dict) -> ExportSettings:
    defaults = ExportSettings()
    cw = v.get("custom_width_in")
    ch = v.get("custom_height_in")
    return ExportSettings(
        size=v.get("size", defaults.size),
        orientation=v.get("orientation", defaults.orientation),
        material=v.get("material", defaults.material),
        digital_format=v.get("digital_format", defaults.digital_format),
        custom_width_in=float(cw) if cw is not None else None,
        custom_height_in=float(ch) if ch is not None else None,
    )
