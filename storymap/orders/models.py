"""Order dataclasses, status enum and order errors."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from storymap.config.materials import MachineSettings, MaterialSpec
from storymap.pipeline.mapdata.models import MapData


class OrderStatus(str, Enum):
    PENDING = "pending"
    DESIGN_REVIEW = "design_review"
    APPROVED = "approved"
    IN_PRODUCTION = "in_production"
    QUALITY_CHECK = "quality_check"
    PACKAGING = "packaging"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


@dataclass(frozen=True)
class StatusHistoryEntry:
    id: str
    order_id: str
    status: OrderStatus
    timestamp: datetime
    updated_by: str = "system"          # actor id, or "system"
    note: str | None = None


@dataclass(frozen=True)
class Customer:
    name: str
    email: str


@dataclass(frozen=True)
class Dimensions:
    width_in: float
    height_in: float
    thickness_in: float


@dataclass(frozen=True)
class ProductionData:
    dimensions: Dimensions
    material: MaterialSpec
    machine_settings: MachineSettings
    files: dict[str, str] = field(default_factory=dict)    # role → generated filename


@dataclass(frozen=True)
class Order:
    """One customer order.  Replaced as a whole on every status change."""

    id: str
    order_number: str
    status: OrderStatus
    created_at: datetime
    updated_at: datetime
    customer: Customer
    map_data: MapData
    production_data: ProductionData
    status_history: tuple[StatusHistoryEntry, ...]
    version: int = 1


# ── Errors ─────────────────────────────────────────────────────────


class OrderNotFound(Exception):
    def __init__(self, order_id: str) -> None:
        self.order_id = order_id
        super().__init__(f"Order '{order_id}' not found")


class StaleOrderError(Exception):
    """The stored order changed since the caller last read it."""

    def __init__(self, order_id: str, expected: str, actual: str) -> None:
        self.order_id = order_id
        self.expected = expected
        self.actual = actual
        super().__init__(f"Order '{order_id}' is {actual}, expected {expected}")


class InvalidTransition(Exception):
    """Raised by a transition validator that rejects a status change."""

    def __init__(self, order_id: str, current: OrderStatus, requested: OrderStatus) -> None:
        self.order_id = order_id
        self.current = current
        self.requested = requested
        super().__init__(
            f"Order '{order_id}' cannot move from {current.value} to {requested.value}"
        )


class InvalidOrder(Exception):
    """The submitted map snapshot failed validation."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__("Invalid order: " + "; ".join(errors))


class OrderNotExportable(Exception):
    """The order has not been approved for production, or was withdrawn."""

    def __init__(self, order_id: str, status: OrderStatus) -> None:
        self.order_id = order_id
        self.status = status
        super().__init__(
            f"Order '{order_id}' is {status.value}; only approved orders can be exported"
        )
