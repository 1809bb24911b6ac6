"""Tests for the SVG and DXF encoders.

Validates:
  - SVG is sized in inches with a points viewBox and Inkscape layers
  - Semantic CSS classes and theme styling are present
  - DXF declares inches, the sheet extents and the four named layers
  - SVG and DXF describe the same physical size
  - DXF coordinates are inches with y flipped
  - Text outside the single-byte range is escaped; undrawable text keeps a marker circle
  - Encoding is reproducible byte for byte
"""

from __future__ import annotations

import unittest
import xml.etree.ElementTree as ET

from storymap.pipeline.encoders import (
    encode_combined_dxf, encode_combined_svg, encode_layer_dxf, encode_layer_svg,
    font_family, read_extents,
)
from storymap.pipeline.encoders.dxf import _dxf_text
from storymap.pipeline.geo import CanvasFrame
from storymap.pipeline.layers import (
    CirclePrimitive, Layer, LayerName, PathPrimitive, TextPrimitive,
    generate_cut_layer, generate_feature_layer, generate_route_layer, generate_text_layer,
)
from storymap.pipeline.export.engine import build_projection
from storymap.pipeline.mapdata.models import StyleSettings
from tests.story_fixture import make_catalog, make_features, make_order

SVG_NS = "{http://www.w3.org/2000/svg}"
INKSCAPE_LABEL = "{http://www.inkscape.org/namespaces/inkscape}label"


def _dxf_pairs(text: str) -> list[tuple[str, str]]:
    lines = text.splitlines()
    return list(zip(lines[0::2], lines[1::2]))


class _LayersCase(unittest.TestCase):

    def setUp(self):
        self.order = make_order()
        template = make_catalog().get("appalachian-trail")
        self.proj = build_projection(self.order, template)
        self.frame = self.proj.frame
        self.style = self.order.map_data.style
        self.layers = [
            generate_cut_layer(self.proj),
            generate_text_layer(self.proj, self.order.map_data, template),
            generate_feature_layer(self.proj, make_features()),
            generate_route_layer(self.proj, template),
        ]


class TestSvg(_LayersCase):

    def test_physical_size_and_viewbox(self):
        root = ET.fromstring(encode_layer_svg(self.layers[0], self.frame, self.style))
        self.assertEqual(root.get("width"), "8in")
        self.assertEqual(root.get("height"), "10in")
        self.assertEqual(root.get("viewBox"), "0 0 576 720")

    def test_combined_has_four_inkscape_layers_cut_first(self):
        root = ET.fromstring(encode_combined_svg(self.layers, self.frame, self.style))
        groups = [g for g in root.iter(f"{SVG_NS}g") if g.get(INKSCAPE_LABEL)]
        self.assertEqual(
            [g.get(INKSCAPE_LABEL) for g in groups],
            [LayerName.CUT, LayerName.GEOGRAPHIC, LayerName.ROUTE, LayerName.TEXT],
        )

    def test_semantic_classes(self):
        svg = encode_combined_svg(self.layers, self.frame, self.style)
        for cls in ('class="cut"', 'class="route"', 'class="engrave title"',
                    'class="engrave label"', 'class="geographic geographic-lake"'):
            self.assertIn(cls, svg)

    def test_theme_and_font(self):
        svg = encode_combined_svg(self.layers, self.frame, self.style)
        self.assertIn("#fef3c7", svg)           # woodburn background
        self.assertIn("Georgia, serif", svg)
        self.assertEqual(font_family("font-mono"), "Monaco, monospace")
        self.assertEqual(font_family("anything"), "Inter, sans-serif")

    def test_stroke_width_from_style(self):
        svg = encode_layer_svg(self.layers[2], self.frame, StyleSettings(stroke_width=2.5))
        self.assertIn("stroke-width: 2.5;", svg)


class TestDxf(_LayersCase):

    def test_header_units_and_extents(self):
        dxf = encode_combined_dxf(self.layers, self.frame)
        pairs = _dxf_pairs(dxf)
        self.assertEqual(pairs[0], ("999", "Units: inches"))
        i = pairs.index(("9", "$INSUNITS"))
        self.assertEqual(pairs[i + 1], ("70", "1"))
        self.assertEqual(read_extents(dxf), ((0.0, 0.0), (8.0, 10.0)))
        self.assertEqual(pairs[-1], ("0", "EOF"))

    def test_layer_table(self):
        pairs = _dxf_pairs(encode_combined_dxf(self.layers, self.frame))
        names = [pairs[i + 1][1] for i, p in enumerate(pairs) if p == ("0", "LAYER")]
        self.assertEqual(
            names,
            [LayerName.CUT, LayerName.GEOGRAPHIC, LayerName.ROUTE, LayerName.TEXT],
        )

    def test_same_physical_size_as_svg(self):
        root = ET.fromstring(encode_combined_svg(self.layers, self.frame, self.style))
        (_, _), (w, h) = read_extents(encode_combined_dxf(self.layers, self.frame))
        self.assertEqual(float(root.get("width").removesuffix("in")), w)
        self.assertEqual(float(root.get("height").removesuffix("in")), h)

    def test_inches_and_y_flip(self):
        frame = CanvasFrame(width_in=8, height_in=10)
        layer = Layer(
            "CUT",
            (
                PathPrimitive(((72.0, 72.0), (144.0, 72.0)), role="cut"),
                CirclePrimitive((72.0, 648.0), 36.0, role="registration"),
            ),
            (),
        )
        pairs = _dxf_pairs(encode_layer_dxf(layer, frame))
        start = pairs.index(("2", "ENTITIES"))
        ent = pairs[start:]
        vertex_xy = [
            (ent[i + 3][1], ent[i + 4][1])
            for i, p in enumerate(ent) if p == ("0", "VERTEX")
        ]
        self.assertEqual(vertex_xy, [("1.0000", "9.0000"), ("2.0000", "9.0000")])
        c = ent.index(("0", "CIRCLE"))
        self.assertEqual(ent[c + 3], ("10", "1.0000"))
        self.assertEqual(ent[c + 4], ("20", "1.0000"))
        self.assertEqual(ent[c + 6], ("40", "0.5000"))

    def test_text_entities_on_text_layer(self):
        pairs = _dxf_pairs(encode_layer_dxf(self.layers[1], self.frame))
        texts = [i for i, p in enumerate(pairs) if p == ("0", "TEXT")]
        self.assertTrue(texts)
        for i in texts:
            self.assertEqual(pairs[i + 2], ("8", LayerName.TEXT))
        # Non-ASCII emoji marker is escaped
        self.assertTrue(any(v.startswith("\\U+") for _, v in pairs))

    def test_text_escape_stays_four_digits(self):
        value = _dxf_text("Map \U0001F5FA\uFE0F \u26F0 caf\u00e9")
        self.assertEqual(value, "Map  \\U+26F0 caf\\U+00E9")
        self.assertNotRegex(value, r"\\U\+[0-9A-F]{5}")

    def test_undrawable_text_becomes_circle(self):
        frame = CanvasFrame(width_in=8, height_in=10)
        layer = Layer(
            LayerName.TEXT,
            (TextPrimitive((144.0, 144.0), "\U0001F3D4\uFE0F", 12.0, role="marker"),),
            (),
        )
        pairs = _dxf_pairs(encode_layer_dxf(layer, frame))
        ent = pairs[pairs.index(("2", "ENTITIES")):]
        self.assertNotIn(("0", "TEXT"), ent)
        c = ent.index(("0", "CIRCLE"))
        self.assertEqual(ent[c + 2], ("8", LayerName.TEXT))
        self.assertEqual(ent[c + 3], ("10", "2.0000"))
        self.assertEqual(ent[c + 6], ("40", "0.0583"))

    def test_reproducible(self):
        a = encode_combined_dxf(self.layers, self.frame)
        b = encode_combined_dxf(self.layers, self.frame)
        self.assertEqual(a, b)
        self.assertEqual(
            encode_combined_svg(self.layers, self.frame, self.style),
            encode_combined_svg(self.layers, self.frame, self.style),
        )

    def test_unique_handles(self):
        pairs = _dxf_pairs(encode_combined_dxf(self.layers, self.frame))
        start = pairs.index(("2", "ENTITIES"))
        handles = [v for c, v in pairs[start:] if c == "5"]
        self.assertEqual(len(handles), len(set(handles)))


if __name__ == "__main__":
    unittest.main()
