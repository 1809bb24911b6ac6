"""Manufacturing export orchestrator.

One call produces the complete bundle for one order or raises; there
is no partial result.  The feature fetch is the only await: everything
else is local computation on the immutable order snapshot.

Stages:
  1. Feature source configured?        (fail fast, before any work)
  2. Template → bounds → one Projection
  3. Fetch real geographic features
  4. Generate the four layers, encode SVG + DXF
  5. Combined SVG / DXF
  6. Material sheet, production instructions, process guide
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Sequence

from storymap.geodata.models import FeatureSource
from storymap.orders.models import Order
from storymap.orders.production import export_filenames
from storymap.pipeline.config import EXPORT_RULES, FORMAT_VERSION, ExportRules
from storymap.pipeline.encoders.dxf import encode_combined_dxf, encode_layer_dxf
from storymap.pipeline.encoders.svg import encode_combined_svg, encode_layer_svg
from storymap.pipeline.errors import ExportError, UnknownTemplate
from storymap.pipeline.geo.bounds import resolve_bounds, route_region_of
from storymap.pipeline.geo.models import CanvasFrame
from storymap.pipeline.geo.projection import Projection
from storymap.pipeline.layers.cut import generate_cut_layer
from storymap.pipeline.layers.features import generate_feature_layer
from storymap.pipeline.layers.models import Layer, LayerName
from storymap.pipeline.layers.route import generate_route_layer
from storymap.pipeline.layers.text import generate_text_layer
from storymap.templates.models import Template, TemplateLookup

from .documents import material_sheet, process_guide, production_instructions
from .models import LayerFiles, ManufacturingExport

log = logging.getLogger(__name__)

FEATURE_CATEGORIES = ("water", "admin")

_LAYER_KEYS = {
    LayerName.CUT: "cut",
    LayerName.TEXT: "text_engrave",
    LayerName.GEOGRAPHIC: "geographic_features",
    LayerName.ROUTE: "route_path",
}


def build_projection(
    order: Order, template: Template | None, rules: ExportRules = EXPORT_RULES,
) -> Projection:
    """The single projection every layer of *order* is drawn with."""
    region = route_region_of(template.route_bounds, list(template.route_path)) if template else None
    bounds = resolve_bounds(
        [loc.point for loc in order.map_data.locations],
        region,
        padding_ratio=rules.padding_ratio,
        min_padding_deg=rules.min_padding_deg,
    )
    dims = order.production_data.dimensions
    frame = CanvasFrame(
        width_in=dims.width_in,
        height_in=dims.height_in,
        points_per_inch=rules.points_per_inch,
        margin_pt=rules.content_margin_pt,
        cut_margin_pt=rules.cut_margin_pt,
    )
    return Projection(bounds, frame)


class ManufacturingExporter:
    def __init__(
        self,
        templates: TemplateLookup,
        feature_source: FeatureSource,
        *,
        rules: ExportRules = EXPORT_RULES,
        categories: Sequence[str] = FEATURE_CATEGORIES,
    ) -> None:
        self.templates = templates
        self.feature_source = feature_source
        self.rules = rules
        self.categories = tuple(categories)

    async def export(
        self, order: Order, exported_by: str = "system", now: datetime | None = None,
    ) -> ManufacturingExport:
        try:
            return await self._export(order, exported_by, now or datetime.now(timezone.utc))
        except ExportError as e:
            log.error("Export of order %s failed: %s", order.order_number, e)
            raise

    async def _export(self, order: Order, exported_by: str, now: datetime) -> ManufacturingExport:
        # ── 1. Fail fast on missing credentials ────────────────────
        self.feature_source.ensure_configured()

        # ── 2. Template, bounds, projection ────────────────────────
        md = order.map_data
        template: Template | None = None
        if md.template_id:
            template = self.templates.get(md.template_id)
            if template is None:
                raise UnknownTemplate(md.template_id)
        projection = build_projection(order, template, self.rules)
        b = projection.bounds
        log.info(
            "Order %s: bounds lat %.4f..%.4f lng %.4f..%.4f on %gx%g in",
            order.order_number, b.min_lat, b.max_lat, b.min_lng, b.max_lng,
            projection.frame.width_in, projection.frame.height_in,
        )

        # ── 3. Real geography ──────────────────────────────────────
        features = await self.feature_source.fetch_features(b, self.categories)
        log.info("Order %s: %d geographic features", order.order_number, len(features))

        # ── 4. Layers (all share the projection) ───────────────────
        layers: list[Layer] = [
            generate_cut_layer(projection, self.rules),
            generate_text_layer(projection, md, template, self.rules),
            generate_feature_layer(projection, features),
            generate_route_layer(projection, template),
        ]
        warnings: list[str] = [w for layer in layers for w in layer.warnings]
        if not md.locations:
            warnings.append("No locations: the map shows the template route only")
        if template is not None and not template.has_route:
            warnings.append(f"Template '{template.id}' has no route path; ROUTE-PATH layer is empty")

        frame, style = projection.frame, md.style
        names = export_filenames(order.order_number)
        files: dict[str, str] = {}
        encoded: dict[str, LayerFiles] = {}
        guide_files: dict[str, str] = {}
        for layer in layers:
            lf = LayerFiles(
                svg=encode_layer_svg(layer, frame, style),
                dxf=encode_layer_dxf(layer, frame),
                primitive_count=len(layer.primitives),
            )
            encoded[layer.name] = lf
            key = _LAYER_KEYS[layer.name]
            files[names[f"{key}_svg"]] = lf.svg
            files[names[f"{key}_dxf"]] = lf.dxf
            guide_files[layer.name] = names[f"{key}_dxf"]

        # ── 5. Combined files ──────────────────────────────────────
        combined_svg = encode_combined_svg(layers, frame, style)
        combined_dxf = encode_combined_dxf(layers, frame)
        guide_files["combined_svg"] = names["combined_svg"]
        guide_files["combined_dxf"] = names["combined_dxf"]
        files[guide_files["combined_svg"]] = combined_svg
        files[guide_files["combined_dxf"]] = combined_dxf

        # ── 6. Documents ───────────────────────────────────────────
        template_name = template.name if template else ""
        documents = {
            "material_sheet": material_sheet(order, template_name),
            "production_instructions": production_instructions(order, template_name, guide_files),
            "process_guide": process_guide(order, encoded, guide_files),
        }
        for role, text in documents.items():
            files[names[role]] = text

        for w in warnings:
            log.warning("Order %s: %s", order.order_number, w)
        log.info("Order %s: export complete, %d files", order.order_number, len(files))

        return ManufacturingExport(
            order_id=order.id,
            order_number=order.order_number,
            files=files,
            layers=encoded,
            combined_svg=combined_svg,
            combined_dxf=combined_dxf,
            documents=documents,
            exported_at=now,
            exported_by=exported_by,
            format_version=FORMAT_VERSION,
            warnings=warnings,
        )
