"""Production data — physical dimensions, material, machine settings, filenames."""

from __future__ import annotations

import logging

from storymap.config.materials import materials
from storymap.pipeline.config import EXPORT_RULES
from storymap.pipeline.mapdata.models import ExportSettings, MapData
from storymap.pipeline.mapdata.validation import requested_size

from .models import Dimensions, ProductionData

log = logging.getLogger(__name__)

# Layer file slugs, in the order the files are listed.
LAYER_SLUGS = ("cut", "text-engrave", "geographic-features", "route-path")


def parse_dimensions(settings: ExportSettings) -> Dimensions:
    """Resolve the physical panel size in inches.

    Named sizes come from the materials config; ``"custom"`` uses the
    explicit custom width/height; any other ``"WxH"`` string is parsed
    directly.  Sizes with no drawing area inside the content margins
    fall back to the default size.  Landscape orientation puts the
    longer side horizontal.
    """
    size = settings.size
    dims = materials.size_inches(size) or requested_size(settings)
    if dims is None or min(dims) <= 2 * EXPORT_RULES.content_margin_in:
        log.warning("Unusable size %r, falling back to %s", size, materials.default_size)
        dims = materials.size_inches(materials.default_size)

    width, height = dims
    if settings.orientation == "landscape" and width < height:
        width, height = height, width

    return Dimensions(width_in=width, height_in=height, thickness_in=materials.default_thickness)


def export_filenames(order_number: str) -> dict[str, str]:
    """Every file a manufacturing export of *order_number* produces, keyed by role.

    Per-layer keys are ``"<slug>_svg"`` / ``"<slug>_dxf"``; the rest are
    the combined files and the three production documents.
    """
    names: dict[str, str] = {}
    for slug in LAYER_SLUGS:
        key = slug.replace("-", "_")
        names[f"{key}_svg"] = f"{order_number}-{slug}.svg"
        names[f"{key}_dxf"] = f"{order_number}-{slug}.dxf"
    names["combined_svg"] = f"{order_number}-combined.svg"
    names["combined_dxf"] = f"{order_number}-combined.dxf"
    names["material_sheet"] = f"{order_number}-material-sheet.txt"
    names["production_instructions"] = f"{order_number}-production-instructions.txt"
    names["process_guide"] = f"{order_number}-process-guide.txt"
    return names


def generate_production_data(map_data: MapData, order_number: str) -> ProductionData:
    material = materials.material(map_data.export_settings.material)
    return ProductionData(
        dimensions=parse_dimensions(map_data.export_settings),
        material=material,
        machine_settings=materials.machine_settings(material.type),
        files=export_filenames(order_number),
    )
