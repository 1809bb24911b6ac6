"""Order lifecycle — creation and the status state machine.

Every status change appends exactly one history entry and replaces the
stored order in one ``put``: the new status, ``updated_at``, the grown
history and the bumped ``version`` are never observable separately.

Transitions are permissive by default (operators may move an order to
any status, matching how the shop actually works).  Pass a validator,
e.g. ``strict_transition_validator``, to enforce a transition graph.
"""

from __future__ import annotations

import logging
import random
import time
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable

from storymap.pipeline.errors import UnknownTemplate
from storymap.pipeline.mapdata.models import MapData
from storymap.pipeline.mapdata.validation import validate_map_data
from storymap.templates.models import TemplateLookup

from .models import (
    Customer,
    InvalidOrder,
    InvalidTransition,
    Order,
    OrderNotExportable,
    OrderNotFound,
    OrderStatus,
    StaleOrderError,
    StatusHistoryEntry,
)
from .production import generate_production_data
from .store import OrderStore

log = logging.getLogger(__name__)

ORDER_PREFIX = "EM"
INITIAL_NOTE = "Order received and queued for design review"

TransitionValidator = Callable[[Order, OrderStatus], None]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def generate_order_number(now_ms: int | None = None, rng: random.Random | None = None) -> str:
    """``EM`` + last 6 digits of the millisecond clock + 2 random digits."""
    ms = int(time.time() * 1000) if now_ms is None else now_ms
    r = (rng or random).randrange(100)
    return f"{ORDER_PREFIX}{str(ms)[-6:].rjust(6, '0')}{r:02d}"


def create_order(
    map_data: MapData,
    customer: Customer,
    templates: TemplateLookup | None = None,
    *,
    now: datetime | None = None,
) -> Order:
    """Build a new pending order from a validated map snapshot."""
    errors = validate_map_data(map_data)
    if errors:
        raise InvalidOrder(errors)
    if templates is not None and map_data.template_id and templates.get(map_data.template_id) is None:
        raise UnknownTemplate(map_data.template_id)

    ts = now or _now()
    order_id = str(uuid.uuid4())
    entry = StatusHistoryEntry(
        id=str(uuid.uuid4()),
        order_id=order_id,
        status=OrderStatus.PENDING,
        timestamp=ts,
        updated_by="system",
        note=INITIAL_NOTE,
    )
    order_number = generate_order_number(int(ts.timestamp() * 1000))
    order = Order(
        id=order_id,
        order_number=order_number,
        status=OrderStatus.PENDING,
        created_at=ts,
        updated_at=ts,
        customer=customer,
        map_data=map_data,
        production_data=generate_production_data(map_data, order_number),
        status_history=(entry,),
    )
    log.info("Created order %s (%s)", order.order_number, order.id)
    return order


def update_order_status(
    store: OrderStore,
    order_id: str,
    status: OrderStatus | str,
    *,
    note: str | None = None,
    updated_by: str = "system",
    expected_status: OrderStatus | str | None = None,
    validator: TransitionValidator | None = None,
    now: datetime | None = None,
) -> Order:
    """Move an order to *status*, appending one history entry.

    Raises OrderNotFound (nothing written) when the id is unknown,
    StaleOrderError when *expected_status* no longer matches, and
    whatever *validator* raises when it rejects the transition.
    """
    new_status = OrderStatus(status)
    order = store.get(order_id)
    if order is None:
        raise OrderNotFound(order_id)

    if expected_status is not None and order.status != OrderStatus(expected_status):
        raise StaleOrderError(order_id, OrderStatus(expected_status).value, order.status.value)
    if validator is not None:
        validator(order, new_status)

    # Timestamps never run backwards, even if the clock does
    ts = max(now or _now(), order.updated_at)
    entry = StatusHistoryEntry(
        id=str(uuid.uuid4()),
        order_id=order_id,
        status=new_status,
        timestamp=ts,
        updated_by=updated_by,
        note=note,
    )
    updated = replace(
        order,
        status=new_status,
        updated_at=ts,
        status_history=order.status_history + (entry,),
        version=order.version + 1,
    )
    store.put(updated, expected_version=order.version)
    log.info(
        "Order %s: %s → %s by %s",
        order.order_number, order.status.value, new_status.value, updated_by,
    )
    return updated


# ── Production gate ────────────────────────────────────────────────

# Statuses from approval onward; cancelled and refunded orders are never produced.
EXPORTABLE_STATUSES = frozenset({
    OrderStatus.APPROVED,
    OrderStatus.IN_PRODUCTION,
    OrderStatus.QUALITY_CHECK,
    OrderStatus.PACKAGING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
})


def ensure_exportable(order: Order) -> None:
    """Raise OrderNotExportable unless *order* has been approved for production."""
    if order.status not in EXPORTABLE_STATUSES:
        raise OrderNotExportable(order.id, order.status)


# ── Optional strict transition graph ───────────────────────────────

ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.DESIGN_REVIEW, OrderStatus.CANCELLED}),
    OrderStatus.DESIGN_REVIEW: frozenset({
        OrderStatus.APPROVED, OrderStatus.PENDING, OrderStatus.CANCELLED,
    }),
    OrderStatus.APPROVED: frozenset({OrderStatus.IN_PRODUCTION, OrderStatus.CANCELLED}),
    OrderStatus.IN_PRODUCTION: frozenset({OrderStatus.QUALITY_CHECK, OrderStatus.CANCELLED}),
    OrderStatus.QUALITY_CHECK: frozenset({OrderStatus.PACKAGING, OrderStatus.IN_PRODUCTION}),
    OrderStatus.PACKAGING: frozenset({OrderStatus.SHIPPED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset({OrderStatus.REFUNDED}),
    OrderStatus.CANCELLED: frozenset({OrderStatus.REFUNDED}),
    OrderStatus.REFUNDED: frozenset(),
}


def strict_transition_validator(order: Order, new_status: OrderStatus) -> None:
    if new_status not in ALLOWED_TRANSITIONS[order.status]:
        raise InvalidTransition(order.id, order.status, new_status)
