"""Inventory ledger: product id -> stock quantity, never below zero.

Two implementations share one contract:

* ``InventoryLedger`` keeps levels in memory (optionally persisted to a
  ``LocalStore``) and serializes writers with one lock per product.
* ``SqlInventoryLedger`` works inside the caller's SQLAlchemy session and
  applies every change as a single conditional UPDATE, so concurrent request
  handlers cannot lose updates and the change commits or rolls back with the
  surrounding transaction.

``adjust`` is the clamping primitive. ``decrease`` refuses to oversell unless
``clamp=True`` is passed.
"""

import threading
from typing import Dict, Mapping, Optional

from sqlalchemy import case, select, update
from sqlalchemy.orm import Session

from storefront.core.logging_config import get_logger
from storefront.domain.errors import InsufficientStockError, NotFoundError, ValidationError
from storefront.domain.models import Inventory, Product
from storefront.infrastructure.local_store import INVENTORY_KEY, LocalStore

logger = get_logger(__name__)


def _check_quantity(quantity: int) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError("Quantity must be an integer")
    if quantity < 0:
        raise ValidationError("Quantity must be >= 0")
    return quantity


class InventoryLedger:
    def __init__(
        self,
        baseline: Optional[Mapping[str, int]] = None,
        default: int = 0,
        store: Optional[LocalStore] = None,
    ):
        self._baseline = dict(baseline or {})
        self._default = default
        self._store = store
        if store is not None:
            self._levels: Dict[str, int] = store.get(INVENTORY_KEY, seed=lambda: dict(self._baseline))
        else:
            self._levels = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()
        # Serializes snapshot-and-write so an older snapshot never lands after a newer one
        self._persist_lock = threading.Lock()

    def _lock_for(self, product_id: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(product_id)
            if lock is None:
                lock = self._locks[product_id] = threading.Lock()
            return lock

    def _current(self, product_id: str) -> int:
        # Caller holds the product lock
        if product_id not in self._levels:
            with self._registry_lock:
                self._levels[product_id] = self._baseline.get(product_id, self._default)
        return self._levels[product_id]

    def _persist(self) -> None:
        if self._store is None:
            return
        with self._persist_lock:
            with self._registry_lock:
                snapshot = dict(self._levels)
            self._store.set(INVENTORY_KEY, snapshot)

    def get(self, product_id: str) -> int:
        with self._lock_for(product_id):
            return self._current(product_id)

    def adjust(self, product_id: str, delta: int) -> int:
        with self._lock_for(product_id):
            new_qty = max(0, self._current(product_id) + delta)
            self._levels[product_id] = new_qty
            self._persist()
        return new_qty

    def increase(self, product_id: str, quantity: int) -> int:
        return self.adjust(product_id, _check_quantity(quantity))

    def decrease(self, product_id: str, quantity: int, clamp: bool = False) -> int:
        _check_quantity(quantity)
        if clamp:
            return self.adjust(product_id, -quantity)
        with self._lock_for(product_id):
            current = self._current(product_id)
            if quantity > current:
                raise InsufficientStockError(product_id, quantity, current)
            self._levels[product_id] = current - quantity
            self._persist()
            return current - quantity

    def is_in_stock(self, product_id: str) -> bool:
        return self.get(product_id) > 0

    def levels(self) -> Dict[str, int]:
        with self._registry_lock:
            return dict(self._levels)


class SqlInventoryLedger:
    """Ledger bound to one request's session; the caller owns commit/rollback."""

    def __init__(self, db: Session, baseline: Optional[Mapping[str, int]] = None, default: int = 0):
        self.db = db
        self._baseline = dict(baseline or {})
        self._default = default
        # Set when a change flips a product's in_stock flag, so callers can refresh catalog caches
        self.catalog_changed = False

    def _read(self, product_id: str) -> Optional[int]:
        return self.db.execute(
            select(Inventory.quantity).where(Inventory.product_id == product_id)
        ).scalar_one_or_none()

    def _ensure(self, product_id: str) -> int:
        quantity = self._read(product_id)
        if quantity is not None:
            return quantity
        if self.db.get(Product, product_id) is None:
            raise NotFoundError(f"Product {product_id} not found")
        quantity = self._baseline.get(product_id, self._default)
        self.db.add(Inventory(product_id=product_id, quantity=quantity))
        self.db.flush()
        logger.info(f"Initialized stock for {product_id} at {quantity}")
        return quantity

    def _sync_in_stock(self, product_id: str, quantity: int) -> None:
        result = self.db.execute(
            update(Product)
            .where(Product.id == product_id, Product.in_stock != (quantity > 0))
            .values(in_stock=quantity > 0)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount:
            self.catalog_changed = True

    def get(self, product_id: str) -> int:
        return self._ensure(product_id)

    def adjust(self, product_id: str, delta: int) -> int:
        self._ensure(product_id)
        new_qty = Inventory.quantity + delta
        self.db.execute(
            update(Inventory)
            .where(Inventory.product_id == product_id)
            .values(quantity=case((new_qty < 0, 0), else_=new_qty))
            .execution_options(synchronize_session=False)
        )
        quantity = self._read(product_id)
        self._sync_in_stock(product_id, quantity)
        return quantity

    def increase(self, product_id: str, quantity: int) -> int:
        return self.adjust(product_id, _check_quantity(quantity))

    def decrease(self, product_id: str, quantity: int, clamp: bool = False) -> int:
        _check_quantity(quantity)
        if clamp:
            return self.adjust(product_id, -quantity)
        self._ensure(product_id)
        # Compare-and-set: only succeeds while enough stock remains at write time
        result = self.db.execute(
            update(Inventory)
            .where(Inventory.product_id == product_id, Inventory.quantity >= quantity)
            .values(quantity=Inventory.quantity - quantity)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise InsufficientStockError(product_id, quantity, self._read(product_id) or 0)
        remaining = self._read(product_id)
        self._sync_in_stock(product_id, remaining)
        return remaining

    def is_in_stock(self, product_id: str) -> bool:
        return self.get(product_id) > 0

    def levels(self) -> Dict[str, int]:
        rows = self.db.execute(select(Inventory.product_id, Inventory.quantity).order_by(Inventory.product_id))
        return {product_id: quantity for product_id, quantity in rows}
