"""Map snapshot serialization — convert MapData to JSON-safe dicts."""

from __future__ import annotations

from dataclasses import asdict

from .models import MapData


def map_data_to_dict(md: MapData) -> dict:
    """Convert a MapData snapshot to a JSON-serializable dict."""
    return {
        "template_id": md.template_id,
        **({"title": md.title} if md.title else {}),
        "locations": [
            {
                "id": loc.id,
                "name": loc.name,
                "lat": loc.lat,
                "lng": loc.lng,
                "marker_type": loc.marker_type,
                **({"narrative": loc.narrative} if loc.narrative else {}),
                **({"caption": loc.caption} if loc.caption else {}),
                **({"icon": loc.icon} if loc.icon else {}),
                **({"emoji": loc.emoji} if loc.emoji else {}),
                **({"custom_image": loc.custom_image} if loc.custom_image else {}),
            }
            for loc in md.locations
        ],
        "chapters": [
            {
                "id": c.id,
                "location_id": c.location_id,
                "title": c.title,
                **({"description": c.description} if c.description else {}),
                **({"icon": c.icon} if c.icon else {}),
                **({"emoji": c.emoji} if c.emoji else {}),
                **({"custom_image": c.custom_image} if c.custom_image else {}),
            }
            for c in md.chapters
        ],
        "style": asdict(md.style),
        "export_settings": {
            k: v for k, v in asdict(md.export_settings).items() if v is not None
        },
    }
