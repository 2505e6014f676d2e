"""Product query engine.

Pure functions over an in-memory catalog snapshot: search, filter, sort and
aggregate statistics. None of them perform I/O; ``ProductQueryEngine`` binds
them to a catalog repository for callers that want the current snapshot.
"""

from dataclasses import dataclass, fields
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, Union

from storefront.domain.catalog import CatalogProduct
from storefront.domain.errors import EmptyCatalogError, ValidationError


class AnyCategory(str, Enum):
    """Sentinel for an explicit "every category" filter."""
    ALL = "all"


ALL_CATEGORIES = AnyCategory.ALL


class CatalogRepository(Protocol):
    def load(self) -> List[CatalogProduct]: ...

    def save(self, products: Sequence[CatalogProduct]) -> None: ...


@dataclass(frozen=True)
class ProductFilter:
    """Optional, conjunctive filter criteria.

    ``None`` means the criterion is absent. ``category=ALL_CATEGORIES`` is an
    explicit no-op and is kept distinct from absence.
    """

    category: Union[str, AnyCategory, None] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    in_stock: Optional[bool] = None
    min_rating: Optional[float] = None
    min_reviews: Optional[int] = None

    _ALIASES = {
        "category": "category",
        "minPrice": "min_price",
        "min_price": "min_price",
        "maxPrice": "max_price",
        "max_price": "max_price",
        "inStock": "in_stock",
        "in_stock": "in_stock",
        "minRating": "min_rating",
        "min_rating": "min_rating",
        "minReviews": "min_reviews",
        "min_reviews": "min_reviews",
    }

    @classmethod
    def from_mapping(cls, criteria: Optional[Mapping[str, Any]]) -> "ProductFilter":
        """Build a filter from a loose mapping; unrecognized keys are ignored."""
        values: Dict[str, Any] = {}
        for key, value in (criteria or {}).items():
            name = cls._ALIASES.get(key)
            if name is None or value is None:
                continue
            values[name] = value

        try:
            if "category" in values:
                category = str(values["category"])
                values["category"] = ALL_CATEGORIES if category == ALL_CATEGORIES.value else category
            for name in ("min_price", "max_price"):
                if name in values:
                    values[name] = Decimal(str(values[name]))
            if "in_stock" in values:
                values["in_stock"] = _as_bool(values["in_stock"])
            if "min_rating" in values:
                values["min_rating"] = float(values["min_rating"])
            if "min_reviews" in values:
                values["min_reviews"] = int(values["min_reviews"])
        except (ArithmeticError, TypeError, ValueError) as e:
            raise ValidationError(f"Invalid filter criteria: {e}")
        return cls(**values)

    @property
    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def matches(self, product: CatalogProduct) -> bool:
        if self.category is not None and self.category != ALL_CATEGORIES:
            if product.category != self.category:
                return False
        if self.min_price is not None and product.price < self.min_price:
            return False
        if self.max_price is not None and product.price > self.max_price:
            return False
        if self.in_stock and not product.in_stock:
            return False
        if self.min_rating is not None and product.rating < self.min_rating:
            return False
        if self.min_reviews is not None and product.review_count < self.min_reviews:
            return False
        return True


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("1", "true", "yes", "on"):
        return True
    if text in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"not a boolean: {value!r}")


def search(query: Optional[str], corpus: Sequence[CatalogProduct]) -> List[CatalogProduct]:
    """Case-insensitive substring search over name, description, category and spec values."""
    needle = (query or "").strip().lower()
    if not needle:
        return list(corpus)

    def haystacks(product: CatalogProduct):
        yield product.name
        yield product.description
        yield product.category
        for value in product.specs.values():
            yield str(value)

    return [p for p in corpus if any(needle in (text or "").lower() for text in haystacks(p))]


def filter_products(
    criteria: Union[ProductFilter, Mapping[str, Any], None],
    corpus: Sequence[CatalogProduct],
) -> List[CatalogProduct]:
    if not isinstance(criteria, ProductFilter):
        criteria = ProductFilter.from_mapping(criteria)
    if criteria.is_empty:
        return list(corpus)
    return [p for p in corpus if criteria.matches(p)]


SORT_KEYS = {
    "id": "id",
    "name": "name",
    "category": "category",
    "price": "price",
    "rating": "rating",
    "reviews": "rating",
    "review_count": "review_count",
    "reviewCount": "review_count",
}


def sort_products(
    corpus: Sequence[CatalogProduct],
    key: str = "name",
    direction: str = "asc",
) -> List[CatalogProduct]:
    """Return a new, stably sorted list.

    Unknown keys compare every product as equal, which leaves the input order intact.
    """
    if direction not in ("asc", "desc"):
        raise ValidationError(f"Sort direction must be 'asc' or 'desc', got '{direction}'")

    attr = SORT_KEYS.get(key)
    if attr is None:
        return list(corpus)

    def sort_key(product: CatalogProduct):
        value = getattr(product, attr)
        return value.lower() if isinstance(value, str) else value

    # sorted() stays stable with reverse=True, so equal keys keep input order either way
    return sorted(corpus, key=sort_key, reverse=(direction == "desc"))


def search_and_filter(
    query: Optional[str],
    criteria: Union[ProductFilter, Mapping[str, Any], None],
    corpus: Sequence[CatalogProduct],
) -> List[CatalogProduct]:
    return filter_products(criteria, search(query, corpus))


def top_rated(corpus: Sequence[CatalogProduct], n: int) -> List[CatalogProduct]:
    return _take(sort_products(corpus, "rating", "desc"), n)


def most_reviewed(corpus: Sequence[CatalogProduct], n: int) -> List[CatalogProduct]:
    return _take(sort_products(corpus, "review_count", "desc"), n)


def _take(products: List[CatalogProduct], n: int) -> List[CatalogProduct]:
    if n < 0:
        raise ValidationError("n must be >= 0")
    return products[:n]


@dataclass
class CategoryStats:
    count: int = 0
    total_price: Decimal = Decimal("0")
    total_rating: float = 0.0

    @property
    def avg_price(self) -> Decimal:
        return self.total_price / self.count

    @property
    def avg_rating(self) -> float:
        return self.total_rating / self.count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "total_price": self.total_price,
            "avg_price": self.avg_price,
            "total_rating": self.total_rating,
            "avg_rating": self.avg_rating,
        }


def category_stats(corpus: Sequence[CatalogProduct]) -> Dict[str, CategoryStats]:
    stats: Dict[str, CategoryStats] = {}
    for product in corpus:
        group = stats.setdefault(product.category, CategoryStats())
        group.count += 1
        group.total_price += product.price
        group.total_rating += product.rating
    return stats


@dataclass(frozen=True)
class PriceRange:
    min: Decimal
    max: Decimal
    average: Decimal


def price_range(corpus: Sequence[CatalogProduct]) -> PriceRange:
    if not corpus:
        raise EmptyCatalogError("Price range is undefined for an empty catalog")
    prices = [p.price for p in corpus]
    return PriceRange(min=min(prices), max=max(prices), average=sum(prices) / len(prices))


class ProductQueryEngine:
    """Query operations bound to the current snapshot of a catalog repository."""

    def __init__(self, repository: CatalogRepository):
        self.repository = repository

    def products(self) -> List[CatalogProduct]:
        return self.repository.load()

    def search(self, query: Optional[str]) -> List[CatalogProduct]:
        return search(query, self.products())

    def filter(self, criteria) -> List[CatalogProduct]:
        return filter_products(criteria, self.products())

    def query(self, query: Optional[str] = None, criteria=None,
              sort: Optional[str] = None, direction: str = "asc") -> List[CatalogProduct]:
        results = search_and_filter(query, criteria, self.products())
        if sort:
            results = sort_products(results, sort, direction)
        return results

    def get_top_rated(self, n: int) -> List[CatalogProduct]:
        return top_rated(self.products(), n)

    def get_most_reviewed(self, n: int) -> List[CatalogProduct]:
        return most_reviewed(self.products(), n)

    def category_stats(self) -> Dict[str, CategoryStats]:
        return category_stats(self.products())

    def price_range(self) -> PriceRange:
        return price_range(self.products())
