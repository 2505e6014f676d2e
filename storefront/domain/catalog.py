"""Catalog value objects used by the query engine and repositories."""

from dataclasses import dataclass, field, asdict
from decimal import Decimal
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class CatalogProduct:
    """Read-only snapshot of a product, detached from any storage session."""

    id: str
    name: str
    category: str
    price: Decimal
    description: str = ""
    image: Optional[str] = None
    specs: Dict[str, str] = field(default_factory=dict)
    in_stock: bool = True
    rating: float = 0.0
    review_count: int = 0

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> "CatalogProduct":
        # Accepts both the stored snake_case shape and the camelCase shape of the seed catalog
        return cls(
            id=str(data["id"]),
            name=data["name"],
            category=data["category"],
            price=Decimal(str(data["price"])),
            description=data.get("description") or "",
            image=data.get("image"),
            specs={str(k): str(v) for k, v in (data.get("specs") or {}).items()},
            in_stock=bool(data.get("in_stock", data.get("inStock", True))),
            rating=float(data.get("rating", data.get("reviews", 0.0))),
            review_count=int(data.get("review_count", data.get("reviewCount", 0))),
        )

    @classmethod
    def from_orm(cls, product) -> "CatalogProduct":
        return cls(
            id=product.id,
            name=product.name,
            category=product.category,
            price=Decimal(str(product.price)),
            description=product.description or "",
            image=product.image,
            specs=dict(product.specs or {}),
            in_stock=bool(product.in_stock),
            rating=float(product.rating or 0.0),
            review_count=int(product.review_count or 0),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["price"] = str(self.price)
        return data
