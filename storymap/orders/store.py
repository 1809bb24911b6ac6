"""Order persistence — the OrderStore interface and two implementations.

``put`` replaces the whole record.  Passing ``expected_version`` makes
the replacement conditional: if the stored record's version differs the
put raises StaleOrderError and nothing is written.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Protocol

from .models import Order, StaleOrderError
from .serialization import order_to_dict, parse_order

log = logging.getLogger(__name__)


class OrderStore(Protocol):
    def get(self, order_id: str) -> Order | None:
        ...

    def put(self, order: Order, expected_version: int | None = None) -> None:
        ...

    def list(self) -> list[Order]:
        ...


def _check_version(current: Order | None, order: Order, expected_version: int | None) -> None:
    if expected_version is None:
        return
    actual = current.version if current is not None else 0
    if actual != expected_version:
        raise StaleOrderError(order.id, f"version {expected_version}", f"version {actual}")


class InMemoryOrderStore:
    def __init__(self) -> None:
        self._orders: dict[str, Order] = {}
        self._lock = threading.Lock()

    def get(self, order_id: str) -> Order | None:
        return self._orders.get(order_id)

    def put(self, order: Order, expected_version: int | None = None) -> None:
        with self._lock:
            _check_version(self._orders.get(order.id), order, expected_version)
            self._orders[order.id] = order

    def list(self) -> list[Order]:
        return sorted(self._orders.values(), key=lambda o: o.created_at, reverse=True)


class JsonOrderStore:
    """One ``<order id>.json`` file per order, replaced atomically."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def _path(self, order_id: str) -> Path:
        if not order_id or "/" in order_id or "\\" in order_id or order_id.startswith("."):
            raise ValueError(f"Invalid order id {order_id!r}")
        return self.directory / f"{order_id}.json"

    def get(self, order_id: str) -> Order | None:
        try:
            p = self._path(order_id)
        except ValueError:
            return None
        if not p.exists():
            return None
        return parse_order(json.loads(p.read_text(encoding="utf-8")))

    def put(self, order: Order, expected_version: int | None = None) -> None:
        path = self._path(order.id)
        with self._lock:
            _check_version(self.get(order.id), order, expected_version)
            fd, tmp = tempfile.mkstemp(dir=self.directory, prefix=".tmp-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(order_to_dict(order), f, indent=2, ensure_ascii=False)
                os.replace(tmp, path)
            except BaseException:
                Path(tmp).unlink(missing_ok=True)
                raise
        log.debug("Saved order %s (v%d) to %s", order.order_number, order.version, path)

    def list(self) -> list[Order]:
        orders = [
            parse_order(json.loads(p.read_text(encoding="utf-8")))
            for p in sorted(self.directory.glob("*.json"))
            if not p.name.startswith(".")
        ]
        return sorted(orders, key=lambda o: o.created_at, reverse=True)
