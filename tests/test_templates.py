"""Tests for the bundled journey templates and the loader."""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from storymap.templates import catalog_to_dict, load_templates, parse_template, template_to_dict


class TestBundledTemplates(unittest.TestCase):

    def setUp(self):
        self.catalog = load_templates()

    def test_catalog_is_valid(self):
        self.assertTrue(self.catalog.ok, [str(e) for e in self.catalog.errors])
        self.assertEqual(
            sorted(t.id for t in self.catalog.templates), ["appalachian-trail", "great-loop"],
        )

    def test_lookup(self):
        at = self.catalog.get("appalachian-trail")
        self.assertTrue(at.has_route)
        self.assertEqual(at.route_path[0].lat, 34.627)
        self.assertEqual(at.route_path[0].lng, -84.279)
        self.assertEqual(at.route_bounds.max_lat, 45.9)
        self.assertIsNone(self.catalog.get("nope"))
        self.assertFalse(self.catalog.get("great-loop").has_route)
        self.assertEqual(len(self.catalog.by_category("journey")), 2)

    def test_serialization_round_trip(self):
        at = self.catalog.get("appalachian-trail")
        again = parse_template(template_to_dict(at), source_file=at.source_file)
        self.assertEqual(again, at)
        self.assertTrue(catalog_to_dict(self.catalog)["ok"])


class TestLoaderErrors(unittest.TestCase):

    def _load(self, *docs) -> object:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        for i, doc in enumerate(docs):
            text = doc if isinstance(doc, str) else json.dumps(doc)
            (Path(tmp.name) / f"t{i}.json").write_text(text, encoding="utf-8")
        return load_templates(Path(tmp.name))

    def test_parse_error_reported(self):
        catalog = self._load("{not json")
        self.assertFalse(catalog.ok)
        self.assertIn("Parse error", str(catalog.errors[0]))

    def test_bad_coordinates_and_duplicates(self):
        doc = {
            "id": "x", "name": "X", "category": "journey",
            "route": {"path": [[0, 0], [200, 0]]},
        }
        catalog = self._load(doc, doc)
        messages = [str(e) for e in catalog.errors]
        self.assertTrue(any("route.path[1]" in m for m in messages))
        self.assertTrue(any("Duplicate template ID" in m for m in messages))

    def test_unknown_category(self):
        catalog = self._load({"id": "y", "name": "Y", "category": "poem"})
        self.assertEqual(catalog.errors[0].field, "category")


if __name__ == "__main__":
    unittest.main()
