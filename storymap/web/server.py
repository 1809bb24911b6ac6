"""
FastAPI operations server — orders, status updates and manufacturing exports.
"""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from storymap.config.env import ROOT, load_env, orders_dir
from storymap.config.materials import materials
from storymap.geodata.client import FeatureServiceSource
from storymap.geodata.models import FeatureSource
from storymap.orders.lifecycle import (
    create_order, ensure_exportable, strict_transition_validator, update_order_status,
)
from storymap.orders.models import (
    Customer, InvalidOrder, InvalidTransition, OrderNotExportable, OrderNotFound, OrderStatus,
    StaleOrderError,
)
from storymap.orders.serialization import order_summary, order_to_dict
from storymap.orders.store import JsonOrderStore, OrderStore
from storymap.pipeline.errors import (
    ExportError,
    ExternalFeatureSourceUnavailable,
    FeatureSourceNetworkError,
    MissingCredential,
    UnknownTemplate,
)
from storymap.pipeline.export.engine import ManufacturingExporter
from storymap.pipeline.export.writer import export_manifest, write_export
from storymap.pipeline.mapdata.parsing import parse_map_data
from storymap.templates.loader import load_templates
from storymap.templates.models import TemplateCatalog
from storymap.templates.serialization import catalog_to_dict

log = logging.getLogger(__name__)

EXPORTS_DIR = ROOT / "outputs" / "exports"


# ── Models ─────────────────────────────────────────────────────────

class CustomerModel(BaseModel):
    name: str
    email: str


class CreateOrderRequest(BaseModel):
    customer: CustomerModel
    map_data: dict


class StatusUpdateRequest(BaseModel):
    status: str
    note: str | None = None
    updated_by: str = "system"
    expected_status: str | None = None


class ExportRequest(BaseModel):
    exported_by: str = "system"
    write: bool = False
    force: bool = False     # export an order that is not approved (proofs, re-runs)


# ── Error mapping ──────────────────────────────────────────────────

def _export_http_error(e: ExportError) -> HTTPException:
    if isinstance(e, ExternalFeatureSourceUnavailable):
        if isinstance(e, MissingCredential):
            code = 503
        elif isinstance(e, FeatureSourceNetworkError):
            code = 502
        else:
            code = 422
        return HTTPException(code, {"cause": e.cause, "message": e.user_message, "detail": e.detail})
    return HTTPException(422, {"cause": "invalid_input", "message": str(e)})


def _parse_status(value: str) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        raise HTTPException(422, f"Unknown status '{value}'.")


# ── App ────────────────────────────────────────────────────────────

def create_app(
    store: OrderStore | None = None,
    templates: TemplateCatalog | None = None,
    feature_source: FeatureSource | None = None,
    *,
    strict_transitions: bool = False,
    exports_dir: Path = EXPORTS_DIR,
) -> FastAPI:
    """Build the app.  Anything not injected comes from the environment."""
    load_env()
    store = store if store is not None else JsonOrderStore(orders_dir())
    catalog = templates if templates is not None else load_templates()
    source = feature_source if feature_source is not None else FeatureServiceSource()
    exporter = ManufacturingExporter(catalog, source)
    validator = strict_transition_validator if strict_transitions else None

    for err in catalog.errors:
        log.warning("Template problem: %s", err)

    app = FastAPI(title="StoryMap Manufacturing")

    # ── Routes ─────────────────────────────────────────────────────

    @app.get("/api/templates")
    def list_templates():
        return catalog_to_dict(catalog)

    @app.get("/api/materials")
    def list_materials():
        return {
            "sizes": materials.sizes,
            "materials": [
                {"id": m.id, "name": m.name, "type": m.type, "finish": m.finish}
                for m in (materials.material(i) for i in materials.material_ids)
            ],
        }

    @app.get("/api/orders")
    def list_orders(status: str | None = None):
        orders = store.list()
        if status is not None:
            wanted = _parse_status(status)
            orders = [o for o in orders if o.status == wanted]
        return {"orders": [order_summary(o) for o in orders]}

    @app.get("/api/orders/{order_id}")
    def get_order(order_id: str):
        order = store.get(order_id)
        if order is None:
            raise HTTPException(404, f"Order '{order_id}' not found.")
        return order_to_dict(order)

    @app.post("/api/orders", status_code=201)
    def post_order(req: CreateOrderRequest):
        try:
            map_data = parse_map_data(req.map_data)
        except (KeyError, TypeError, ValueError) as e:
            raise HTTPException(422, f"Malformed map data: {e}")
        try:
            order = create_order(
                map_data, Customer(name=req.customer.name, email=req.customer.email), catalog,
            )
        except InvalidOrder as e:
            raise HTTPException(422, {"message": "Invalid map data.", "errors": e.errors})
        except UnknownTemplate as e:
            raise HTTPException(422, str(e))
        store.put(order)
        return order_to_dict(order)

    @app.post("/api/orders/{order_id}/status")
    def post_status(order_id: str, req: StatusUpdateRequest):
        status = _parse_status(req.status)
        expected = _parse_status(req.expected_status) if req.expected_status else None
        try:
            order = update_order_status(
                store, order_id, status,
                note=req.note,
                updated_by=req.updated_by,
                expected_status=expected,
                validator=validator,
            )
        except OrderNotFound:
            raise HTTPException(404, f"Order '{order_id}' not found.")
        except (StaleOrderError, InvalidTransition) as e:
            raise HTTPException(409, str(e))
        return order_to_dict(order)

    @app.post("/api/orders/{order_id}/export")
    async def post_export(order_id: str, req: ExportRequest | None = None):
        req = req or ExportRequest()
        order = store.get(order_id)
        if order is None:
            raise HTTPException(404, f"Order '{order_id}' not found.")
        if not req.force:
            try:
                ensure_exportable(order)
            except OrderNotExportable as e:
                raise HTTPException(409, str(e))
        try:
            export = await exporter.export(order, exported_by=req.exported_by)
        except ExportError as e:
            raise _export_http_error(e)

        result = {
            **export_manifest(export),
            "documents": export.documents,
        }
        if req.write:
            result["path"] = str(write_export(export, exports_dir))
        return result

    return app


# ── Entry point ────────────────────────────────────────────────────

def main(host: str = "127.0.0.1", port: int = 8000):
    import uvicorn
    uvicorn.run("storymap.web.server:create_app", host=host, port=port, reload=False, factory=True)


if __name__ == "__main__":
    main()
