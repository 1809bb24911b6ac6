"""
StoryMap manufacturing — entry point.

Usage:
    python -m storymap serve [--host HOST] [--port PORT]
    python -m storymap list [--status STATUS]
    python -m storymap export ORDER_ID --out DIR [--features FILE.geojson] [--force]
    python -m storymap status ORDER_ID STATUS [--note TEXT] [--by ACTOR] [--strict]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="storymap", description="Story map orders → manufacturing files")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    sv = sub.add_parser("serve", help="Start the operations API server")
    sv.add_argument("--host", default="127.0.0.1", help="Host to bind")
    sv.add_argument("--port", type=int, default=8000, help="Port to bind")

    ls = sub.add_parser("list", help="List stored orders")
    ls.add_argument("--status", default=None, help="Only orders in this status")

    ex = sub.add_parser("export", help="Produce the manufacturing files for an order")
    ex.add_argument("order_id")
    ex.add_argument("--out", required=True, help="Output directory")
    ex.add_argument("--features", default=None,
                    help="GeoJSON file of real features to use instead of the feature service")
    ex.add_argument("--by", default="system", help="Actor recorded as exporter")
    ex.add_argument("--force", action="store_true",
                    help="Export even if the order is not approved (proofs, re-runs)")

    st = sub.add_parser("status", help="Move an order to a new status")
    st.add_argument("order_id")
    st.add_argument("status")
    st.add_argument("--note", default=None)
    st.add_argument("--by", default="system", help="Actor recorded in the history entry")
    st.add_argument("--strict", action="store_true", help="Enforce the transition graph")

    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.cmd == "serve":
        from storymap.web.server import main as serve_main
        serve_main(host=args.host, port=args.port)
        return 0

    from storymap.config.env import load_env, orders_dir
    from storymap.orders.models import OrderNotFound, OrderStatus
    from storymap.orders.store import JsonOrderStore
    from storymap.pipeline.errors import ExportError, ExternalFeatureSourceUnavailable

    load_env()
    store = JsonOrderStore(orders_dir())

    if args.cmd == "list":
        for o in store.list():
            if args.status and o.status.value != args.status:
                continue
            print(f"{o.order_number}  {o.id}  {o.status.value:<14} {o.customer.name}")
        return 0

    if args.cmd == "export":
        from storymap.geodata.client import FeatureServiceSource, StaticFeatureSource
        from storymap.geodata.geojson import load_geojson_features
        from storymap.orders.lifecycle import ensure_exportable
        from storymap.orders.models import OrderNotExportable
        from storymap.pipeline.export.engine import ManufacturingExporter
        from storymap.pipeline.export.writer import write_export
        from storymap.templates.loader import load_templates

        order = store.get(args.order_id)
        if order is None:
            print(f"Order '{args.order_id}' not found", file=sys.stderr)
            return 1
        if not args.force:
            try:
                ensure_exportable(order)
            except OrderNotExportable as e:
                print(f"{e} (use --force to override)", file=sys.stderr)
                return 1
        if args.features:
            source = StaticFeatureSource(load_geojson_features(Path(args.features)))
        else:
            source = FeatureServiceSource()
        exporter = ManufacturingExporter(load_templates(), source)
        try:
            export = asyncio.run(exporter.export(order, exported_by=args.by))
        except ExternalFeatureSourceUnavailable as e:
            print(f"Export failed ({e.cause}): {e.user_message}", file=sys.stderr)
            return 1
        except ExportError as e:
            print(f"Export failed: {e}", file=sys.stderr)
            return 1
        path = write_export(export, Path(args.out))
        print(f"✅ Wrote {len(export.files)} files to {path}")
        return 0

    if args.cmd == "status":
        from storymap.orders.lifecycle import strict_transition_validator, update_order_status
        from storymap.orders.models import InvalidTransition, StaleOrderError

        try:
            order = update_order_status(
                store, args.order_id, OrderStatus(args.status),
                note=args.note,
                updated_by=args.by,
                validator=strict_transition_validator if args.strict else None,
            )
        except ValueError:
            print(f"Unknown status '{args.status}'", file=sys.stderr)
            return 2
        except OrderNotFound as e:
            print(str(e), file=sys.stderr)
            return 1
        except (InvalidTransition, StaleOrderError) as e:
            print(str(e), file=sys.stderr)
            return 1
        print(f"{order.order_number} → {order.status.value}")
        return 0

    return 2


if __name__ == "__main__":
    sys.exit(main())
