"""Tests for the FastAPI operations server (in-memory store, static features)."""

from __future__ import annotations

import unittest

from fastapi.testclient import TestClient

from storymap.geodata.client import FeatureServiceSource, StaticFeatureSource
from storymap.orders.store import InMemoryOrderStore
from storymap.pipeline.errors import FeatureSourceNetworkError
from storymap.pipeline.mapdata import map_data_to_dict
from storymap.web.server import create_app
from tests.story_fixture import make_catalog, make_feature_source, make_map_data

CUSTOMER = {"name": "Ada Hiker", "email": "ada@example.com"}


class _FailingSource:
    def ensure_configured(self) -> None:
        return None

    async def fetch_features(self, bounds, categories):
        raise FeatureSourceNetworkError("connection reset")


class _ServerCase(unittest.TestCase):
    feature_source = None
    strict = False

    def setUp(self):
        self.store = InMemoryOrderStore()
        app = create_app(
            store=self.store,
            templates=make_catalog(),
            feature_source=self.feature_source or make_feature_source(),
            strict_transitions=self.strict,
        )
        self.client = TestClient(app)

    def _create(self, map_data: dict | None = None):
        return self.client.post("/api/orders", json={
            "customer": CUSTOMER,
            "map_data": map_data or map_data_to_dict(make_map_data()),
        })


class TestOrdersApi(_ServerCase):

    def test_templates_and_materials(self):
        r = self.client.get("/api/templates")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(len(r.json()["templates"]), 2)
        r = self.client.get("/api/materials")
        self.assertIn("cherry-wood", [m["id"] for m in r.json()["materials"]])

    def test_create_get_list(self):
        r = self._create()
        self.assertEqual(r.status_code, 201)
        order = r.json()
        self.assertEqual(order["status"], "pending")
        self.assertEqual(len(order["status_history"]), 1)

        r = self.client.get(f"/api/orders/{order['id']}")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["order_number"], order["order_number"])

        listing = self.client.get("/api/orders").json()["orders"]
        self.assertEqual([o["id"] for o in listing], [order["id"]])
        self.assertEqual(self.client.get("/api/orders?status=shipped").json()["orders"], [])

        self.assertEqual(self.client.get("/api/orders/missing").status_code, 404)

    def test_invalid_map_data(self):
        md = map_data_to_dict(make_map_data())
        md["locations"][0]["lat"] = 95.0
        r = self._create(md)
        self.assertEqual(r.status_code, 422)
        self.assertTrue(r.json()["detail"]["errors"])
        self.assertEqual(self.store.list(), [])

    def test_status_updates(self):
        order_id = self._create().json()["id"]
        r = self.client.post(f"/api/orders/{order_id}/status", json={
            "status": "design_review", "note": "checking labels", "updated_by": "designer-1",
        })
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertEqual(body["status"], "design_review")
        self.assertEqual(body["version"], 2)
        self.assertEqual(body["status_history"][-1]["updated_by"], "designer-1")

        r = self.client.post(f"/api/orders/{order_id}/status", json={
            "status": "approved", "expected_status": "pending",
        })
        self.assertEqual(r.status_code, 409)

        r = self.client.post(f"/api/orders/{order_id}/status", json={"status": "teleported"})
        self.assertEqual(r.status_code, 422)

        r = self.client.post("/api/orders/missing/status", json={"status": "approved"})
        self.assertEqual(r.status_code, 404)

    def _approve(self, order_id: str) -> None:
        r = self.client.post(f"/api/orders/{order_id}/status", json={"status": "approved"})
        self.assertEqual(r.status_code, 200)

    def test_export(self):
        order = self._create().json()
        self._approve(order["id"])
        r = self.client.post(f"/api/orders/{order['id']}/export", json={"exported_by": "op-1"})
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertEqual(body["exported_by"], "op-1")
        self.assertIn(f"{order['order_number']}-combined.dxf", body["files"])
        self.assertIn("MATERIAL SPECIFICATION SHEET", body["documents"]["material_sheet"])
        self.assertEqual(self.client.post("/api/orders/missing/export").status_code, 404)

    def test_pending_order_not_exported(self):
        order_id = self._create().json()["id"]
        r = self.client.post(f"/api/orders/{order_id}/export", json={})
        self.assertEqual(r.status_code, 409)
        self.assertIn("pending", r.json()["detail"])

        r = self.client.post(f"/api/orders/{order_id}/export", json={"force": True})
        self.assertEqual(r.status_code, 200)


class TestStrictTransitions(_ServerCase):
    strict = True

    def test_illegal_jump_rejected(self):
        order_id = self._create().json()["id"]
        r = self.client.post(f"/api/orders/{order_id}/status", json={"status": "shipped"})
        self.assertEqual(r.status_code, 409)


class TestExportErrors(_ServerCase):

    def _export_with(self, source):
        self.feature_source = source
        self.setUp()
        order_id = self._create().json()["id"]
        return self.client.post(f"/api/orders/{order_id}/export", json={"force": True})

    def test_missing_credential(self):
        r = self._export_with(FeatureServiceSource(base_url="", api_key=""))
        self.assertEqual(r.status_code, 503)
        self.assertEqual(r.json()["detail"]["cause"], "missing_credential")

    def test_no_data(self):
        r = self._export_with(StaticFeatureSource([]))
        self.assertEqual(r.status_code, 422)
        self.assertEqual(r.json()["detail"]["cause"], "no_data")

    def test_network(self):
        r = self._export_with(_FailingSource())
        self.assertEqual(r.status_code, 502)
        self.assertEqual(r.json()["detail"]["cause"], "network")


if __name__ == "__main__":
    unittest.main()
