from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
from sqlalchemy import delete, select
from sqlalchemy.orm import Session
from storefront.domain.errors import NotFoundError, ValidationError
from storefront.domain.models import CartItem, Product

def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)

class CartService:
    """Session-scoped carts. Prices are snapshotted when a product is first added."""

    def __init__(self, db: Session):
        self.db = db

    def _line(self, session_id: str, product_id: str) -> Optional[CartItem]:
        return self.db.execute(
            select(CartItem).where(CartItem.session_id == session_id, CartItem.product_id == product_id)
        ).scalar_one_or_none()

    def items(self, session_id: str) -> list[CartItem]:
        return self.db.execute(
            select(CartItem).where(CartItem.session_id == session_id).order_by(CartItem.added_at, CartItem.id)
        ).scalars().all()

    def add_item(self, session_id: str, product_id: str, quantity: int = 1,
                 customer_id: Optional[int] = None) -> CartItem:
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")
        line = self._line(session_id, product_id)
        if line is not None:
            line.quantity += quantity
            if customer_id is not None:
                line.customer_id = customer_id
        else:
            product = self.db.get(Product, product_id)
            if product is None:
                raise NotFoundError(f"Product {product_id} not found")
            line = CartItem(
                session_id=session_id,
                customer_id=customer_id,
                product_id=product_id,
                quantity=quantity,
                name_snapshot=product.name,
                price_snapshot=product.price,
                image_snapshot=product.image,
                added_at=_utcnow(),
            )
            self.db.add(line)
        self.db.commit()
        self.db.refresh(line)
        return line

    def remove_item(self, session_id: str, product_id: str) -> None:
        self.db.execute(
            delete(CartItem).where(CartItem.session_id == session_id, CartItem.product_id == product_id)
        )
        self.db.commit()

    def set_quantity(self, session_id: str, product_id: str, quantity: int) -> Optional[CartItem]:
        """Set a line's quantity, clamped to at least 1. Absent lines are left alone."""
        line = self._line(session_id, product_id)
        if line is None:
            return None
        line.quantity = max(1, quantity)
        self.db.commit()
        return line

    def clear(self, session_id: str, commit: bool = True) -> None:
        self.db.execute(delete(CartItem).where(CartItem.session_id == session_id))
        if commit:
            self.db.commit()

    def lines(self, session_id: str) -> list[dict]:
        return [
            {
                "session_id": item.session_id,
                "product_id": item.product_id,
                "name": item.name_snapshot,
                "price": item.price_snapshot,
                "image": item.image_snapshot,
                "category": item.product.category if item.product else None,
                "quantity": item.quantity,
                "added_at": item.added_at,
            }
            for item in self.items(session_id)
        ]

    def stats(self, session_id: str) -> dict:
        items = self.items(session_id)
        return {
            "item_count": len(items),
            "total_items": sum(i.quantity for i in items),
            "total_price": sum((Decimal(i.price_snapshot) * i.quantity for i in items), Decimal("0")),
        }
