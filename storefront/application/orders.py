"""Order creation and lifecycle.

Creating an order writes the order row, its items and the stock debits in one
database transaction: if any line is short on stock, the request deadline
expires or the driver fails, nothing is persisted.
"""

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from storefront.core.logging_config import get_logger
from storefront.domain.errors import NotFoundError, RequestTimeoutError, ValidationError
from storefront.domain.models import Customer, Order, OrderItem, Product
from storefront.domain.order_status import OrderStatus, ensure_transition
from storefront.domain.seed_data import INVENTORY
from .cart import CartService
from .inventory import SqlInventoryLedger
from .schemas import OrderItemCreate

logger = get_logger(__name__)


class Deadline:
    """Monotonic request deadline; ``None`` seconds means no limit."""

    def __init__(self, seconds: Optional[float]):
        self.expires_at = time.monotonic() + seconds if seconds else None

    def expired(self) -> bool:
        return self.expires_at is not None and time.monotonic() >= self.expires_at

    def check(self, what: str) -> None:
        if self.expired():
            raise RequestTimeoutError(f"Timed out while {what}")


@dataclass(frozen=True)
class LineItem:
    product_id: str
    quantity: int
    unit_price: Decimal
    name: Optional[str] = None


class OrderService:
    def __init__(self, db: Session, ledger: Optional[SqlInventoryLedger] = None, default_stock: int = 0):
        self.db = db
        self.ledger = ledger or SqlInventoryLedger(db, baseline=INVENTORY, default=default_stock)

    @staticmethod
    def _order_number(order: Order) -> str:
        """Order number in format ORD-YYYY-NNNNN, taken from the database-assigned id"""
        return f"ORD-{order.created_at.year}-{order.id:05d}"

    def open_order(self, customer_id: int, total: Decimal, shipping_address: Optional[str] = None,
                   notes: Optional[str] = None) -> Order:
        """Insert a pending order row and number it; the caller commits or rolls back."""
        order = Order(
            customer_id=customer_id,
            status=OrderStatus.PENDING.value,
            total_amount=total,
            shipping_address=shipping_address,
            notes=notes,
            created_at=datetime.now(timezone.utc).replace(tzinfo=None),
        )
        self.db.add(order)
        self.db.flush()  # assign id
        order.order_number = self._order_number(order)
        return order

    def get(self, order_id: int) -> Optional[Order]:
        return self.db.execute(
            select(Order).where(Order.id == order_id).options(selectinload(Order.items))
        ).scalar_one_or_none()

    def list_for_customer(self, customer_id: int) -> List[Order]:
        return self.db.execute(
            select(Order).where(Order.customer_id == customer_id).order_by(Order.created_at.desc(), Order.id.desc())
        ).scalars().all()

    def resolve_items(self, items: Iterable[OrderItemCreate]) -> List[LineItem]:
        """Attach prices and names to requested items; unit price defaults to the catalog price."""
        resolved = []
        for item in items:
            if item.quantity < 1:
                raise ValidationError("Quantity must be at least 1")
            product = self.db.get(Product, item.product_id)
            if product is None:
                raise ValidationError(f"Unknown product {item.product_id}")
            price = Decimal(str(item.unit_price)) if item.unit_price is not None else Decimal(product.price)
            resolved.append(LineItem(item.product_id, item.quantity, price, product.name))
        return resolved

    def create_order(
        self,
        customer_id: int,
        items: List[LineItem],
        shipping_address: Optional[str] = None,
        notes: Optional[str] = None,
        deadline: Optional[Deadline] = None,
        clear_session: Optional[str] = None,
    ) -> Order:
        if not items:
            raise ValidationError("An order needs at least one item")
        if self.db.get(Customer, customer_id) is None:
            raise ValidationError(f"Unknown customer {customer_id}")
        deadline = deadline or Deadline(None)

        try:
            total = sum((i.unit_price * i.quantity for i in items), Decimal("0"))
            order = self.open_order(customer_id, total, shipping_address, notes)

            for item in items:
                self.db.add(OrderItem(
                    order_id=order.id,
                    product_id=item.product_id,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    subtotal=item.unit_price * item.quantity,
                    product_name_snapshot=item.name,
                ))
                self.ledger.decrease(item.product_id, item.quantity)
                deadline.check("creating order")

            if clear_session:
                CartService(self.db).clear(clear_session, commit=False)

            deadline.check("creating order")
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.warning(f"Order creation for customer {customer_id} rolled back", exc_info=True)
            raise

        self.db.refresh(order)
        logger.info(
            f"Created order {order.order_number}",
            extra={'extra_fields': {'order_id': order.id, 'total_amount': str(total), 'lines': len(items)}},
        )
        return order

    def checkout(self, session_id: str, customer_id: int, shipping_address: Optional[str] = None,
                 notes: Optional[str] = None, deadline: Optional[Deadline] = None) -> Order:
        """Turn a session's cart into an order at the cart's snapshot prices, then empty the cart."""
        cart_items = CartService(self.db).items(session_id)
        if not cart_items:
            raise ValidationError("Cart is empty")
        items = [
            LineItem(c.product_id, c.quantity, Decimal(c.price_snapshot), c.name_snapshot)
            for c in cart_items
        ]
        return self.create_order(customer_id, items, shipping_address, notes, deadline, clear_session=session_id)

    def update_status(self, order_id: int, status: str, deadline: Optional[Deadline] = None) -> Order:
        requested = OrderStatus.parse(status)
        order = self.get(order_id)
        if order is None:
            raise NotFoundError("Order not found")
        current = OrderStatus.parse(order.status)
        ensure_transition(current, requested)
        deadline = deadline or Deadline(None)

        try:
            order.status = requested.value
            if requested is OrderStatus.CANCELLED:
                # Cancelled orders give their stock back
                for item in order.items:
                    self.ledger.increase(item.product_id, item.quantity)
            deadline.check("updating order status")
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info(f"Order {order.order_number}: {current.value} -> {requested.value}")
        return order
