"""Orders — order records, production data, persistence and the status lifecycle.

Submodules:
  models         Order, StatusHistoryEntry, OrderStatus and order errors.
  production     Dimensions, material and machine settings derived from a snapshot.
  lifecycle      create_order, update_order_status, optional strict validator,
                 the approval gate for exports.
  store          OrderStore protocol, InMemoryOrderStore, JsonOrderStore.
  serialization  JSON conversion (order_to_dict, parse_order).
"""

from .models import (
    OrderStatus, StatusHistoryEntry, Customer, Dimensions, ProductionData, Order,
    OrderNotFound, StaleOrderError, InvalidTransition, InvalidOrder, OrderNotExportable,
)
from .production import parse_dimensions, export_filenames, generate_production_data
from .store import OrderStore, InMemoryOrderStore, JsonOrderStore
from .lifecycle import (
    generate_order_number, create_order, update_order_status,
    strict_transition_validator, ALLOWED_TRANSITIONS,
    ensure_exportable, EXPORTABLE_STATUSES,
)
from .serialization import order_to_dict, order_summary, parse_order

__all__ = [
    # Models
    "OrderStatus", "StatusHistoryEntry", "Customer", "Dimensions", "ProductionData", "Order",
    "OrderNotFound", "StaleOrderError", "InvalidTransition", "InvalidOrder", "OrderNotExportable",
    # Production data
    "parse_dimensions", "export_filenames", "generate_production_data",
    # Store
    "OrderStore", "InMemoryOrderStore", "JsonOrderStore",
    # Lifecycle
    "generate_order_number", "create_order", "update_order_status",
    "strict_transition_validator", "ALLOWED_TRANSITIONS",
    "ensure_exportable", "EXPORTABLE_STATUSES",
    # Serialization
    "order_to_dict", "order_summary", "parse_order",
]
