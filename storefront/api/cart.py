from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from storefront.application.cart import CartService
from storefront.application.schemas import CartAdd, CartLineRead, CartQuantityUpdate, CartStatsRead, Message
from storefront.infrastructure.db import get_db

router = APIRouter(prefix="/api/cart", tags=["cart"])

@router.post("/add", response_model=Message)
def add_to_cart(payload: CartAdd, db: Session = Depends(get_db)):
    CartService(db).add_item(payload.session_id, payload.product_id, payload.quantity, payload.customer_id)
    return {"message": "Item added to cart"}

@router.get("/{session_id}", response_model=list[CartLineRead])
def get_cart(session_id: str, db: Session = Depends(get_db)):
    return CartService(db).lines(session_id)

@router.get("/{session_id}/stats", response_model=CartStatsRead)
def get_cart_stats(session_id: str, db: Session = Depends(get_db)):
    return CartService(db).stats(session_id)

@router.put("/{session_id}/{product_id}", response_model=Message)
def set_cart_quantity(session_id: str, product_id: str, payload: CartQuantityUpdate, db: Session = Depends(get_db)):
    line = CartService(db).set_quantity(session_id, product_id, payload.quantity)
    if line is None:
        return {"message": "Item not in cart"}
    return {"message": f"Quantity set to {line.quantity}"}

@router.delete("/{session_id}/{product_id}", response_model=Message)
def remove_from_cart(session_id: str, product_id: str, db: Session = Depends(get_db)):
    CartService(db).remove_item(session_id, product_id)
    return {"message": "Item removed from cart"}

@router.delete("/{session_id}", response_model=Message)
def clear_cart(session_id: str, db: Session = Depends(get_db)):
    CartService(db).clear(session_id)
    return {"message": "Cart cleared"}
