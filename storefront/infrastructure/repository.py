"""Catalog repositories: relational and key-value implementations of ``load``/``save``."""

from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.domain.catalog import CatalogProduct
from storefront.domain.models import Product
from storefront.domain.seed_data import PRODUCTS
from storefront.infrastructure.cache import CatalogCache
from storefront.infrastructure.local_store import PRODUCTS_KEY, LocalStore


class SqlCatalogRepository:
    def __init__(self, db: Session, cache: Optional[CatalogCache] = None):
        self.db = db
        self.cache = cache

    def load(self) -> List[CatalogProduct]:
        if self.cache is not None:
            cached = self.cache.get()
            if cached is not None:
                return [CatalogProduct.from_mapping(row) for row in cached]

        rows = self.db.execute(
            select(Product).order_by(Product.name).execution_options(populate_existing=True)
        ).scalars().all()
        products = [CatalogProduct.from_orm(row) for row in rows]
        if self.cache is not None:
            self.cache.set([p.to_dict() for p in products])
        return products

    def get(self, product_id: str) -> Optional[CatalogProduct]:
        row = self.db.get(Product, product_id)
        return CatalogProduct.from_orm(row) if row else None

    def save(self, products: Sequence[CatalogProduct]) -> None:
        """Insert or update the given products; commits the session."""
        for product in products:
            row = self.db.get(Product, product.id)
            if row is None:
                row = Product(id=product.id)
                self.db.add(row)
            row.name = product.name
            row.category = product.category
            row.price = product.price
            row.description = product.description
            row.image = product.image
            row.specs = dict(product.specs)
            row.in_stock = product.in_stock
            row.rating = product.rating
            row.review_count = product.review_count
        self.db.commit()
        self.invalidate()

    def invalidate(self) -> None:
        if self.cache is not None:
            self.cache.invalidate()


class KeyValueCatalogRepository:
    """Catalog kept as one JSON document; the seed catalog is written on first access."""

    def __init__(self, store: LocalStore, seed: Sequence[dict] = PRODUCTS):
        self.store = store
        self.seed = [dict(p) for p in seed]

    def load(self) -> List[CatalogProduct]:
        rows = self.store.get(PRODUCTS_KEY, seed=lambda: [dict(p) for p in self.seed])
        return [CatalogProduct.from_mapping(row) for row in rows]

    def get(self, product_id: str) -> Optional[CatalogProduct]:
        return next((p for p in self.load() if p.id == product_id), None)

    def save(self, products: Sequence[CatalogProduct]) -> None:
        self.store.set(PRODUCTS_KEY, [p.to_dict() for p in products])
