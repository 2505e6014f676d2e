import time
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from storefront.application.cart import CartService
from storefront.application.inventory import SqlInventoryLedger
from storefront.application.orders import Deadline, LineItem, OrderService
from storefront.application.schemas import OrderItemCreate
from storefront.domain.errors import (
    InsufficientStockError,
    InvalidTransitionError,
    RequestTimeoutError,
    ValidationError,
)
from storefront.domain.models import Customer, Order, OrderItem
from storefront.domain.order_status import OrderStatus
from storefront.infrastructure.db import SessionLocal


@pytest.fixture
def customer_id(db):
    customer = Customer(email="buyer@example.com", name="Buyer")
    db.add(customer)
    db.commit()
    return customer.id


@pytest.fixture
def service(db):
    return OrderService(db)


def stock(db, product_id):
    return SqlInventoryLedger(db).get(product_id)


def order_count(db):
    return db.execute(select(func.count(Order.id))).scalar_one()


def test_create_order_debits_stock(db, service, customer_id):
    items = service.resolve_items([
        OrderItemCreate(product_id="roadster-200", quantity=2),
        OrderItemCreate(product_id="city-hybrid", quantity=1, unit_price=500),
    ])
    order = service.create_order(customer_id, items, shipping_address="1 Chain St")

    assert order.status == "pending"
    assert order.order_number.startswith("ORD-")
    assert order.total_amount == Decimal("1898")
    assert {i.product_id: i.subtotal for i in order.items} == {
        "roadster-200": Decimal("1398"),
        "city-hybrid": Decimal("500"),
    }
    assert stock(db, "roadster-200") == 28
    assert stock(db, "city-hybrid") == 39


def test_order_numbers_are_sequential(service, customer_id):
    first = service.create_order(customer_id, [LineItem("roadster-200", 1, Decimal("699"))])
    second = service.create_order(customer_id, [LineItem("roadster-200", 1, Decimal("699"))])
    assert int(second.order_number.rsplit("-", 1)[1]) == int(first.order_number.rsplit("-", 1)[1]) + 1


def test_in_flight_orders_get_distinct_numbers(service, customer_id):
    other = SessionLocal()
    try:
        pending = OrderService(other).open_order(customer_id, Decimal("699"))
        order = service.create_order(customer_id, [LineItem("roadster-200", 1, Decimal("699"))])
    finally:
        other.close()

    assert order.order_number != pending.order_number
    assert order.order_number == f"ORD-{order.created_at.year}-{order.id:05d}"


def test_short_line_rolls_back_whole_order(db, service, customer_id):
    items = [
        LineItem("roadster-200", 3, Decimal("699")),
        LineItem("speedster-elite", 6, Decimal("1499")),
    ]
    with pytest.raises(InsufficientStockError):
        service.create_order(customer_id, items)

    assert order_count(db) == 0
    assert db.execute(select(func.count(OrderItem.id))).scalar_one() == 0
    assert stock(db, "roadster-200") == 30
    assert stock(db, "speedster-elite") == 5


def test_expired_deadline_rolls_back(db, service, customer_id):
    deadline = Deadline(10)
    deadline.expires_at = time.monotonic() - 1

    with pytest.raises(RequestTimeoutError):
        service.create_order(customer_id, [LineItem("roadster-200", 1, Decimal("699"))], deadline=deadline)
    assert order_count(db) == 0
    assert stock(db, "roadster-200") == 30


def test_rejects_unknown_customer_and_product(service, customer_id):
    with pytest.raises(ValidationError):
        service.create_order(customer_id + 100, [LineItem("roadster-200", 1, Decimal("699"))])
    with pytest.raises(ValidationError):
        service.resolve_items([OrderItemCreate(product_id="unicycle", quantity=1)])
    with pytest.raises(ValidationError):
        service.create_order(customer_id, [])


def test_checkout_uses_cart_snapshot_and_empties_cart(db, service, customer_id):
    cart = CartService(db)
    cart.add_item("sess", "pro-racer-x", quantity=2)
    cart.add_item("sess", "summit-mtn")

    order = service.checkout("sess", customer_id)
    assert order.total_amount == Decimal("3447")
    assert cart.lines("sess") == []
    assert stock(db, "pro-racer-x") == 6


def test_failed_checkout_keeps_cart(db, service, customer_id):
    cart = CartService(db)
    cart.add_item("sess", "speedster-elite", quantity=9)

    with pytest.raises(InsufficientStockError):
        service.checkout("sess", customer_id)
    assert len(cart.lines("sess")) == 1


def test_checkout_empty_cart(service, customer_id):
    with pytest.raises(ValidationError):
        service.checkout("nobody", customer_id)


def test_status_lifecycle(service, customer_id):
    order = service.create_order(customer_id, [LineItem("roadster-200", 1, Decimal("699"))])

    for status in ("processing", "shipped", "delivered"):
        assert service.update_status(order.id, status).status == status

    with pytest.raises(InvalidTransitionError):
        service.update_status(order.id, "cancelled")


def test_cannot_skip_states(service, customer_id):
    order = service.create_order(customer_id, [LineItem("roadster-200", 1, Decimal("699"))])
    with pytest.raises(InvalidTransitionError):
        service.update_status(order.id, "delivered")
    with pytest.raises(ValidationError):
        service.update_status(order.id, "lost")


def test_cancel_restores_stock(db, service, customer_id):
    order = service.create_order(customer_id, [LineItem("speedster-elite", 5, Decimal("1499"))])
    assert stock(db, "speedster-elite") == 0

    service.update_status(order.id, OrderStatus.CANCELLED.value)
    assert stock(db, "speedster-elite") == 5
    assert OrderStatus.CANCELLED.is_terminal


def test_orders_for_customer_newest_first(service, customer_id):
    first = service.create_order(customer_id, [LineItem("roadster-200", 1, Decimal("699"))])
    second = service.create_order(customer_id, [LineItem("city-hybrid", 1, Decimal("529"))])
    assert [o.id for o in service.list_for_customer(customer_id)] == [second.id, first.id]
