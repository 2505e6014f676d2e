from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Session
from storefront.core.logging_config import get_logger
from storefront.domain.catalog import CatalogProduct
from storefront.domain.errors import ConflictError, NotFoundError
from storefront.domain.models import Inventory, Product
from storefront.domain.seed_data import INVENTORY
from storefront.infrastructure.cache import CatalogCache
from storefront.infrastructure.repository import SqlCatalogRepository
from .query import ProductFilter, ProductQueryEngine, search, sort_products
from .schemas import ProductCreate, ProductUpdate

logger = get_logger(__name__)

class CatalogService:
    """Catalog reads go through the query engine; writes go to the database and drop the cache."""

    def __init__(self, db: Session, cache: Optional[CatalogCache] = None):
        self.db = db
        self.repository = SqlCatalogRepository(db, cache)
        self.engine = ProductQueryEngine(self.repository)

    def list(self) -> List[CatalogProduct]:
        return sort_products(self.engine.products(), "name")

    def get(self, product_id: str) -> Optional[CatalogProduct]:
        return self.repository.get(product_id)

    def by_category(self, category: str) -> List[CatalogProduct]:
        return sort_products(self.engine.filter(ProductFilter(category=category)), "name")

    def search(self, query: str) -> List[CatalogProduct]:
        return sort_products(search(query, self.engine.products()), "name")

    def create(self, data: ProductCreate) -> CatalogProduct:
        if self.db.get(Product, data.id) is not None:
            raise ConflictError(f"Product {data.id} already exists")
        fields = data.model_dump(exclude={"stock"})
        fields["price"] = Decimal(str(data.price))
        product = Product(**fields)
        self.db.add(product)
        self.db.flush()
        stock = data.stock if data.stock is not None else INVENTORY.get(data.id, 0)
        self.db.add(Inventory(product_id=data.id, quantity=stock))
        if stock == 0:
            product.in_stock = False
        self.db.commit()
        self.repository.invalidate()
        logger.info(f"Created product {data.id} with stock {stock}")
        return CatalogProduct.from_orm(product)

    def update(self, product_id: str, data: ProductUpdate) -> CatalogProduct:
        product = self.db.get(Product, product_id)
        if product is None:
            raise NotFoundError("Product not found")
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if "price" in changes:
            changes["price"] = Decimal(str(changes["price"]))
        for name, value in changes.items():
            setattr(product, name, value)
        self.db.commit()
        self.db.refresh(product)
        self.repository.invalidate()
        logger.info(f"Updated product {product_id}", extra={'extra_fields': {'fields': sorted(changes)}})
        return CatalogProduct.from_orm(product)
