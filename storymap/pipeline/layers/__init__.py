"""Layers — the four registered layers of a manufacturing export.

Submodules:
  models    Primitive and Layer dataclasses, layer names and order.
  cut       Sheet outline and registration marks.
  text      Title, markers, labels (collision-avoiding) and legend.
  features  Real geographic features clipped to the content box.
  route     Template route polyline.
"""

from .models import (
    LayerName, LAYER_ORDER, Layer, PathPrimitive, CirclePrimitive, TextPrimitive,
)
from .cut import generate_cut_layer
from .text import generate_text_layer, place_label, text_box
from .features import generate_feature_layer
from .route import generate_route_layer

__all__ = [
    # Models
    "LayerName", "LAYER_ORDER", "Layer", "PathPrimitive", "CirclePrimitive", "TextPrimitive",
    # Generators
    "generate_cut_layer", "generate_text_layer", "generate_feature_layer",
    "generate_route_layer",
    # Label placement (used by tests)
    "place_label", "text_box",
]
