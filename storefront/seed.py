"""Seed the bike catalog and opening stock levels.

Idempotent: products and inventory rows that already exist are left alone,
so it is safe to run on every startup.
"""

import time
from decimal import Decimal
from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session
from storefront.core.logging_config import get_logger, setup_logging
from storefront.core_settings import get_settings
from storefront.domain.models import Inventory, Product
from storefront.domain.seed_data import INVENTORY, PRODUCTS
from storefront.infrastructure.db import SessionLocal, engine, init_models

MAX_ATTEMPTS = 30
SLEEP_SECONDS = 2

logger = get_logger(__name__)

def seed_catalog(db: Session) -> int:
    """Insert missing seed products and stock rows; returns the number of products added."""
    added = 0
    for data in PRODUCTS:
        if db.get(Product, data["id"]) is None:
            db.add(Product(**{**data, "price": Decimal(str(data["price"]))}))
            added += 1
    db.flush()
    for product_id, quantity in INVENTORY.items():
        if db.get(Inventory, product_id) is None:
            db.add(Inventory(product_id=product_id, quantity=quantity))
    db.commit()
    if added:
        logger.info(f"Seeded {added} products")
    return added

def wait_for_database(engine, max_attempts: int = MAX_ATTEMPTS, delay: float = SLEEP_SECONDS) -> None:
    for attempt in range(1, max_attempts + 1):
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            logger.info(f"Database ready after {attempt} attempt(s)")
            return
        except OperationalError as e:
            logger.warning(f"Database not ready (attempt {attempt}): {e}")
            time.sleep(delay)
    raise SystemExit("Database not ready after max attempts")

def main():
    settings = get_settings()
    setup_logging("storefront-seed", level=settings.LOG_LEVEL, version=settings.SERVICE_VERSION,
                  environment=settings.ENVIRONMENT)
    wait_for_database(engine)
    init_models()
    with SessionLocal() as db:
        seed_catalog(db)

if __name__ == "__main__":
    main()
