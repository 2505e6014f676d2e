from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from storefront.application.inventory import SqlInventoryLedger
from storefront.application.schemas import StockAdjust, StockRead
from storefront.core.logging_config import get_logger
from storefront.infrastructure.cache import CatalogCache
from storefront.infrastructure.db import get_db
from .deps import catalog_cache, current_admin, inventory_ledger

router = APIRouter(prefix="/api/inventory", tags=["inventory"])
logger = get_logger(__name__)

@router.get("", response_model=dict[str, int])
def list_inventory(ledger: SqlInventoryLedger = Depends(inventory_ledger)):
    return ledger.levels()

@router.get("/{product_id}", response_model=StockRead)
def get_stock(product_id: str, ledger: SqlInventoryLedger = Depends(inventory_ledger), db: Session = Depends(get_db)):
    quantity = ledger.get(product_id)
    # get() may have lazily created the entry
    db.commit()
    return {"product_id": product_id, "quantity": quantity, "in_stock": quantity > 0}

@router.post("/{product_id}/adjust", response_model=StockRead, dependencies=[Depends(current_admin)])
def adjust_stock(
    product_id: str,
    payload: StockAdjust,
    ledger: SqlInventoryLedger = Depends(inventory_ledger),
    db: Session = Depends(get_db),
    cache: CatalogCache = Depends(catalog_cache),
):
    try:
        quantity = ledger.adjust(product_id, payload.delta)
        db.commit()
    except Exception:
        db.rollback()
        raise
    if ledger.catalog_changed:
        cache.invalidate()
    logger.info(f"Adjusted stock for {product_id} by {payload.delta} to {quantity}")
    return {"product_id": product_id, "quantity": quantity, "in_stock": quantity > 0}
