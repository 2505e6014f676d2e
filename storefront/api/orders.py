from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from storefront.application.inventory import SqlInventoryLedger
from storefront.application.orders import Deadline, OrderService
from storefront.application.schemas import (
    CheckoutRequest, Message, OrderCreate, OrderCreated, OrderDetails, OrderRead, OrderStatusUpdate,
)
from storefront.infrastructure.cache import CatalogCache
from storefront.infrastructure.db import get_db
from .deps import catalog_cache, inventory_ledger, request_deadline

router = APIRouter(prefix="/api/orders", tags=["orders"])

def get_orders(db: Session = Depends(get_db), ledger: SqlInventoryLedger = Depends(inventory_ledger)) -> OrderService:
    return OrderService(db, ledger)

def _created(order) -> dict:
    return {"order_id": order.id, "order_number": order.order_number, "total_amount": order.total_amount}

@router.post("", response_model=OrderCreated)
def create_order(
    payload: OrderCreate,
    orders: OrderService = Depends(get_orders),
    deadline: Deadline = Depends(request_deadline),
    cache: CatalogCache = Depends(catalog_cache),
):
    items = orders.resolve_items(payload.items)
    order = orders.create_order(payload.customer_id, items, payload.shipping_address, payload.notes, deadline)
    if orders.ledger.catalog_changed:
        cache.invalidate()
    return _created(order)

@router.post("/checkout", response_model=OrderCreated)
def checkout(
    payload: CheckoutRequest,
    orders: OrderService = Depends(get_orders),
    deadline: Deadline = Depends(request_deadline),
    cache: CatalogCache = Depends(catalog_cache),
):
    order = orders.checkout(payload.session_id, payload.customer_id, payload.shipping_address, payload.notes, deadline)
    if orders.ledger.catalog_changed:
        cache.invalidate()
    return _created(order)

@router.get("/customer/{customer_id}", response_model=list[OrderRead])
def list_customer_orders(customer_id: int, orders: OrderService = Depends(get_orders)):
    return orders.list_for_customer(customer_id)

@router.get("/{order_id}/details", response_model=OrderDetails)
def get_order_details(order_id: int, orders: OrderService = Depends(get_orders)):
    order = orders.get(order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return {"order": order, "items": order.items}

@router.put("/{order_id}/status", response_model=Message)
def update_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    orders: OrderService = Depends(get_orders),
    deadline: Deadline = Depends(request_deadline),
    cache: CatalogCache = Depends(catalog_cache),
):
    order = orders.update_status(order_id, payload.status, deadline)
    if orders.ledger.catalog_changed:
        cache.invalidate()
    return {"message": f"Order status updated to {order.status}"}
