"""Encoders — SVG and DXF writers for layer geometry.

Submodules:
  svg  svgwrite documents with Inkscape layers and theme CSS.
  dxf  Hand-written ASCII DXF R12 with deterministic handles.
"""

from .svg import encode_layer_svg, encode_combined_svg, font_family, THEME_PALETTES
from .dxf import encode_layer_dxf, encode_combined_dxf, read_extents

__all__ = [
    # SVG
    "encode_layer_svg", "encode_combined_svg", "font_family", "THEME_PALETTES",
    # DXF
    "encode_layer_dxf", "encode_combined_dxf", "read_extents",
]
