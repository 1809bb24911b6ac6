"""Tests for map snapshot parsing, validation and serialization."""

from __future__ import annotations

import unittest

from storymap.pipeline.mapdata import map_data_to_dict, parse_map_data, validate_map_data
from storymap.pipeline.mapdata.models import Chapter, ExportSettings, StyleSettings
from tests.story_fixture import make_map_data


class TestParsing(unittest.TestCase):

    def test_legacy_coordinates_and_marker_inference(self):
        md = parse_map_data({
            "template_id": "",
            "locations": [
                {"id": "a", "name": "A", "coordinates": [-77.7, 39.3], "emoji": "🏕"},
                {"id": "b", "name": "B", "lat": 40.0, "lng": -75.0, "custom_image": "img-1"},
                {"id": "c", "name": "C", "lat": 41.0, "lng": -74.0},
            ],
        })
        self.assertIsNone(md.template_id)
        a, b, c = md.locations
        self.assertEqual((a.lat, a.lng), (39.3, -77.7))
        self.assertEqual([a.marker_type, b.marker_type, c.marker_type], ["emoji", "image", "icon"])
        self.assertEqual(md.style, StyleSettings())
        self.assertEqual(md.export_settings, ExportSettings())

    def test_round_trip(self):
        md = make_map_data()
        self.assertEqual(parse_map_data(map_data_to_dict(md)), md)


class TestValidation(unittest.TestCase):

    def test_fixture_is_valid(self):
        self.assertEqual(validate_map_data(make_map_data()), [])

    def test_chapter_for_unknown_location(self):
        md = make_map_data(chapters=(Chapter(id="c", location_id="ghost", title="?"),))
        errors = validate_map_data(md)
        self.assertEqual(len(errors), 1)
        self.assertIn("unknown location 'ghost'", errors[0])

    def test_two_chapters_for_one_location(self):
        md = make_map_data(chapters=(
            Chapter(id="c1", location_id="springer", title="One"),
            Chapter(id="c2", location_id="springer", title="Two"),
        ))
        self.assertTrue(any("more than one chapter" in e for e in validate_map_data(md)))

    def test_settings(self):
        md = make_map_data(
            style=StyleSettings(theme="neon", stroke_width=0),
            export_settings=ExportSettings(size="custom", orientation="diagonal"),
        )
        errors = validate_map_data(md)
        self.assertEqual(len(errors), 4)

    def test_panel_too_small_for_margins(self):
        tiny = make_map_data(export_settings=ExportSettings(
            size="custom", custom_width_in=0.8, custom_height_in=0.8,
        ))
        errors = validate_map_data(tiny)
        self.assertEqual(len(errors), 1)
        self.assertIn("no drawing area", errors[0])
        # Exactly twice the margin is still nothing to draw on
        self.assertTrue(validate_map_data(make_map_data(export_settings=ExportSettings(size="1x12"))))
        self.assertEqual(
            validate_map_data(make_map_data(export_settings=ExportSettings(size="1.5x2"))), [],
        )


if __name__ == "__main__":
    unittest.main()
