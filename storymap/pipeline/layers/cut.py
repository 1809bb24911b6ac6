"""Cut layer — sheet outline and registration marks."""

from __future__ import annotations

from storymap.pipeline.config import EXPORT_RULES, ExportRules
from storymap.pipeline.geo.projection import Projection

from .models import CirclePrimitive, Layer, LayerName, PathPrimitive


def generate_cut_layer(projection: Projection, rules: ExportRules = EXPORT_RULES) -> Layer:
    """Outline inset by the cut margin plus a cross-and-circle mark on
    each content-box corner.  The mark centres are the layer anchors."""
    f = projection.frame
    m = f.cut_margin_pt
    w, h = f.width_pt, f.height_pt

    prims: list = [
        PathPrimitive(((m, m), (w - m, m), (w - m, h - m), (m, h - m)), closed=True, role="cut"),
    ]

    a = rules.registration_mark_pt
    centres = projection.content_box()
    for cx, cy in centres:
        prims.append(PathPrimitive(((cx - a, cy), (cx + a, cy)), role="registration"))
        prims.append(PathPrimitive(((cx, cy - a), (cx, cy + a)), role="registration"))
        prims.append(CirclePrimitive((cx, cy), a / 2, role="registration"))

    return Layer(LayerName.CUT, tuple(prims), tuple(centres))
