"""Order serialization — JSON conversion for the store and the API."""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime

from storymap.config.materials import MachineSettings, MaterialSpec
from storymap.pipeline.mapdata.parsing import parse_map_data
from storymap.pipeline.mapdata.serialization import map_data_to_dict

from .models import (
    Customer, Dimensions, Order, OrderStatus, ProductionData, StatusHistoryEntry,
)


def _entry_to_dict(e: StatusHistoryEntry) -> dict:
    return {
        "id": e.id,
        "order_id": e.order_id,
        "status": e.status.value,
        "timestamp": e.timestamp.isoformat(),
        "updated_by": e.updated_by,
        **({"note": e.note} if e.note else {}),
    }


def order_to_dict(o: Order) -> dict:
    """Serialize an Order to a JSON-safe dict."""
    pd = o.production_data
    return {
        "id": o.id,
        "order_number": o.order_number,
        "status": o.status.value,
        "created_at": o.created_at.isoformat(),
        "updated_at": o.updated_at.isoformat(),
        "version": o.version,
        "customer": {"name": o.customer.name, "email": o.customer.email},
        "map_data": map_data_to_dict(o.map_data),
        "production_data": {
            "dimensions": asdict(pd.dimensions),
            "material": asdict(pd.material),
            "machine_settings": asdict(pd.machine_settings),
            "files": dict(pd.files),
        },
        "status_history": [_entry_to_dict(e) for e in o.status_history],
    }


def order_summary(o: Order) -> dict:
    """The short form used by order listings."""
    return {
        "id": o.id,
        "order_number": o.order_number,
        "status": o.status.value,
        "customer": o.customer.name,
        "template_id": o.map_data.template_id,
        "created_at": o.created_at.isoformat(),
        "updated_at": o.updated_at.isoformat(),
    }


def parse_order(data: dict) -> Order:
    """Parse a dict produced by order_to_dict back into an Order."""
    pd = data["production_data"]
    return Order(
        id=data["id"],
        order_number=data["order_number"],
        status=OrderStatus(data["status"]),
        created_at=datetime.fromisoformat(data["created_at"]),
        updated_at=datetime.fromisoformat(data["updated_at"]),
        customer=Customer(**data["customer"]),
        map_data=parse_map_data(data["map_data"]),
        production_data=ProductionData(
            dimensions=Dimensions(**pd["dimensions"]),
            material=MaterialSpec(**pd["material"]),
            machine_settings=MachineSettings(**pd["machine_settings"]),
            files=dict(pd.get("files", {})),
        ),
        status_history=tuple(
            StatusHistoryEntry(
                id=e["id"],
                order_id=e["order_id"],
                status=OrderStatus(e["status"]),
                timestamp=datetime.fromisoformat(e["timestamp"]),
                updated_by=e.get("updated_by", "system"),
                note=e.get("note"),
            )
            for e in data["status_history"]
        ),
        version=data.get("version", 1),
    )
