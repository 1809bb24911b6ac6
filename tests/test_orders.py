"""Tests for order creation, the status lifecycle and order stores.

Validates:
  - New orders start pending with one system history entry
  - Order numbers follow EM + 6 digits + 2 digits
  - Production data: sizes, landscape swap, material fallback
  - Each status change appends exactly one entry (append-only history)
  - Cancellation scenario and unknown-id failure without side effects
  - Optimistic concurrency via expected_status and store versions
  - The optional strict validator rejects illegal transitions
  - JsonOrderStore round-trips orders through disk
  - Only approved orders (and later production states) pass the export gate
"""

from __future__ import annotations

import re
import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

from storymap.orders import (
    EXPORTABLE_STATUSES, InMemoryOrderStore, InvalidOrder, InvalidTransition, JsonOrderStore,
    OrderNotExportable, OrderNotFound, OrderStatus, StaleOrderError, ensure_exportable,
    export_filenames, generate_order_number, parse_dimensions, strict_transition_validator,
    update_order_status,
)
from storymap.pipeline.errors import UnknownTemplate
from storymap.pipeline.mapdata.models import ExportSettings, Location
from storymap.templates.models import TemplateCatalog
from tests.story_fixture import CREATED_AT, make_map_data, make_order


class TestCreateOrder(unittest.TestCase):

    def test_initial_state(self):
        order = make_order()
        self.assertEqual(order.status, OrderStatus.PENDING)
        self.assertEqual(order.version, 1)
        self.assertEqual(len(order.status_history), 1)
        entry = order.status_history[0]
        self.assertEqual(entry.status, OrderStatus.PENDING)
        self.assertEqual(entry.updated_by, "system")
        self.assertEqual(entry.note, "Order received and queued for design review")
        self.assertEqual(order.created_at, order.updated_at)

    def test_order_number_format(self):
        self.assertRegex(make_order().order_number, r"^EM\d{8}$")
        self.assertEqual(generate_order_number(now_ms=1714564800123)[:8], "EM800123")

    def test_production_data(self):
        order = make_order()
        pd = order.production_data
        self.assertEqual((pd.dimensions.width_in, pd.dimensions.height_in), (8.0, 10.0))
        self.assertEqual(pd.dimensions.thickness_in, 0.25)
        self.assertEqual(pd.material.id, "walnut-wood")
        self.assertEqual(pd.machine_settings.cut_speed, 100)
        n = order.order_number
        self.assertEqual(pd.files, export_filenames(n))
        self.assertEqual(pd.files["cut_svg"], f"{n}-cut.svg")
        self.assertEqual(pd.files["process_guide"], f"{n}-process-guide.txt")
        self.assertEqual(len(pd.files), 13)

    def test_invalid_map_data_rejected(self):
        bad = make_map_data(locations=(Location(id="x", name="X", lat=95.0, lng=0.0),), chapters=())
        with self.assertRaises(InvalidOrder) as ctx:
            make_order(bad)
        self.assertTrue(any("out of range" in e for e in ctx.exception.errors))

    def test_unknown_template_rejected(self):
        from storymap.orders.lifecycle import create_order
        from storymap.orders.models import Customer
        with self.assertRaises(UnknownTemplate):
            create_order(make_map_data(), Customer("A", "a@example.com"), TemplateCatalog(templates=[]))


class TestDimensions(unittest.TestCase):

    def test_named_sizes(self):
        d = parse_dimensions(ExportSettings(size="16x20"))
        self.assertEqual((d.width_in, d.height_in), (16.0, 20.0))

    def test_landscape_swaps(self):
        d = parse_dimensions(ExportSettings(size="11x14", orientation="landscape"))
        self.assertEqual((d.width_in, d.height_in), (14.0, 11.0))

    def test_custom(self):
        d = parse_dimensions(ExportSettings(size="custom", custom_width_in=12, custom_height_in=9))
        self.assertEqual((d.width_in, d.height_in), (12.0, 9.0))
        d = parse_dimensions(ExportSettings(size="6x9"))
        self.assertEqual((d.width_in, d.height_in), (6.0, 9.0))

    def test_unusable_falls_back(self):
        d = parse_dimensions(ExportSettings(size="huge"))
        self.assertEqual((d.width_in, d.height_in), (8.0, 10.0))
        d = parse_dimensions(ExportSettings(size="custom", custom_width_in=0.8, custom_height_in=0.8))
        self.assertEqual((d.width_in, d.height_in), (8.0, 10.0))

    def test_unknown_material_falls_back(self):
        order = make_order(make_map_data(export_settings=ExportSettings(material="unobtainium")))
        self.assertEqual(order.production_data.material.id, "cherry-wood")


class TestStatusLifecycle(unittest.TestCase):

    def setUp(self):
        self.store = InMemoryOrderStore()
        self.order = make_order()
        self.store.put(self.order)

    def test_append_only_history(self):
        before = self.store.get(self.order.id).status_history
        t = CREATED_AT + timedelta(hours=1)
        updated = update_order_status(
            self.store, self.order.id, OrderStatus.DESIGN_REVIEW,
            note="Looks good", updated_by="designer-1", now=t,
        )
        self.assertEqual(len(updated.status_history), len(before) + 1)
        self.assertEqual(updated.status_history[: len(before)], before)
        last = updated.status_history[-1]
        self.assertEqual(last.status, OrderStatus.DESIGN_REVIEW)
        self.assertEqual(last.updated_by, "designer-1")
        self.assertEqual(last.note, "Looks good")
        self.assertEqual(updated.status, last.status)
        self.assertEqual(updated.updated_at, t)
        self.assertEqual(updated.version, 2)
        self.assertEqual(self.store.get(self.order.id), updated)

    def test_timestamps_never_decrease(self):
        earlier = CREATED_AT - timedelta(days=1)
        updated = update_order_status(self.store, self.order.id, "approved", now=earlier)
        stamps = [e.timestamp for e in updated.status_history]
        self.assertEqual(stamps, sorted(stamps))

    def test_cancellation(self):
        update_order_status(self.store, self.order.id, OrderStatus.DESIGN_REVIEW)
        cancelled = update_order_status(
            self.store, self.order.id, OrderStatus.CANCELLED,
            note="Customer changed their mind", updated_by="support-2",
        )
        self.assertEqual(cancelled.status, OrderStatus.CANCELLED)
        self.assertEqual(
            [e.status for e in cancelled.status_history],
            [OrderStatus.PENDING, OrderStatus.DESIGN_REVIEW, OrderStatus.CANCELLED],
        )
        self.assertEqual(cancelled.version, 3)

    def test_unknown_order(self):
        with self.assertRaises(OrderNotFound):
            update_order_status(self.store, "no-such-id", OrderStatus.APPROVED)
        self.assertEqual(self.store.get(self.order.id), self.order)
        self.assertEqual(len(self.store.list()), 1)

    def test_expected_status_mismatch(self):
        update_order_status(self.store, self.order.id, OrderStatus.DESIGN_REVIEW)
        with self.assertRaises(StaleOrderError):
            update_order_status(
                self.store, self.order.id, OrderStatus.APPROVED,
                expected_status=OrderStatus.PENDING,
            )
        self.assertEqual(self.store.get(self.order.id).status, OrderStatus.DESIGN_REVIEW)

    def test_store_rejects_stale_version(self):
        with self.assertRaises(StaleOrderError):
            self.store.put(self.order, expected_version=7)

    def test_permissive_by_default(self):
        updated = update_order_status(self.store, self.order.id, OrderStatus.DELIVERED)
        self.assertEqual(updated.status, OrderStatus.DELIVERED)

    def test_strict_validator(self):
        with self.assertRaises(InvalidTransition):
            update_order_status(
                self.store, self.order.id, OrderStatus.SHIPPED,
                validator=strict_transition_validator,
            )
        self.assertEqual(len(self.store.get(self.order.id).status_history), 1)
        ok = update_order_status(
            self.store, self.order.id, OrderStatus.DESIGN_REVIEW,
            validator=strict_transition_validator,
        )
        self.assertEqual(ok.status, OrderStatus.DESIGN_REVIEW)

    def test_invalid_status_value(self):
        with self.assertRaises(ValueError):
            update_order_status(self.store, self.order.id, "lost-in-mail")


class TestExportGate(unittest.TestCase):

    def test_only_approved_orders_export(self):
        store = InMemoryOrderStore()
        order = make_order()
        store.put(order)
        with self.assertRaises(OrderNotExportable) as cm:
            ensure_exportable(order)
        self.assertEqual(cm.exception.status, OrderStatus.PENDING)

        for status in (OrderStatus.DESIGN_REVIEW, OrderStatus.CANCELLED, OrderStatus.REFUNDED):
            order = update_order_status(store, order.id, status)
            with self.assertRaises(OrderNotExportable):
                ensure_exportable(order)

        for status in (OrderStatus.APPROVED, OrderStatus.SHIPPED):
            order = update_order_status(store, order.id, status)
            self.assertIn(order.status, EXPORTABLE_STATUSES)
            ensure_exportable(order)


class TestJsonOrderStore(unittest.TestCase):

    def test_round_trip_and_update(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            store = JsonOrderStore(Path(tmpdir))
            order = make_order()
            store.put(order)
            self.assertEqual(store.get(order.id), order)

            updated = update_order_status(store, order.id, OrderStatus.APPROVED, note="ok")
            reloaded = JsonOrderStore(Path(tmpdir)).get(order.id)
            self.assertEqual(reloaded, updated)
            self.assertEqual(reloaded.status_history[-1].note, "ok")
            self.assertEqual(
                [p.name for p in Path(tmpdir).iterdir()], [f"{order.id}.json"],
            )

    def test_missing_and_listing(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            store = JsonOrderStore(Path(tmpdir))
            self.assertIsNone(store.get("nope"))
            self.assertIsNone(store.get("../etc/passwd"))
            a = make_order()
            store.put(a)
            self.assertEqual([o.id for o in store.list()], [a.id])


if __name__ == "__main__":
    unittest.main()
