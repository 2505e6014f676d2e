from decimal import Decimal

import pytest

from storefront.application.cart import CartService
from storefront.domain.errors import NotFoundError, ValidationError
from storefront.domain.models import Product

SESSION = "sess-1"


@pytest.fixture
def cart(db):
    return CartService(db)


def test_adding_twice_merges_into_one_line(cart):
    cart.add_item(SESSION, "roadster-200")
    cart.add_item(SESSION, "roadster-200")

    lines = cart.lines(SESSION)
    assert len(lines) == 1
    assert lines[0]["quantity"] == 2
    assert lines[0]["name"] == "Roadster 200"
    assert lines[0]["category"] == "road"


def test_add_rejects_bad_quantity_and_unknown_product(cart):
    with pytest.raises(ValidationError):
        cart.add_item(SESSION, "roadster-200", quantity=0)
    with pytest.raises(NotFoundError):
        cart.add_item(SESSION, "unicycle")
    assert cart.lines(SESSION) == []


def test_sessions_are_isolated(cart):
    cart.add_item(SESSION, "roadster-200")
    cart.add_item("sess-2", "city-hybrid", quantity=3)
    assert [l["product_id"] for l in cart.lines(SESSION)] == ["roadster-200"]
    assert cart.stats("sess-2")["total_items"] == 3


def test_set_quantity_clamps_to_one(cart):
    cart.add_item(SESSION, "city-hybrid", quantity=4)
    assert cart.set_quantity(SESSION, "city-hybrid", 0).quantity == 1
    assert cart.set_quantity(SESSION, "city-hybrid", 6).quantity == 6
    assert cart.set_quantity(SESSION, "summit-mtn", 2) is None


def test_remove_and_clear(cart):
    cart.add_item(SESSION, "roadster-200")
    cart.add_item(SESSION, "city-hybrid")

    cart.remove_item(SESSION, "roadster-200")
    cart.remove_item(SESSION, "roadster-200")
    assert [l["product_id"] for l in cart.lines(SESSION)] == ["city-hybrid"]

    cart.clear(SESSION)
    assert cart.lines(SESSION) == []


def test_stats_use_snapshot_prices(db, cart):
    cart.add_item(SESSION, "roadster-200", quantity=2)
    cart.add_item(SESSION, "city-hybrid")

    db.get(Product, "roadster-200").price = Decimal("999")
    db.commit()

    stats = cart.stats(SESSION)
    assert stats["item_count"] == 2
    assert stats["total_items"] == 3
    assert stats["total_price"] == Decimal("1927")
