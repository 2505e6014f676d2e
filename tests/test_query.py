from decimal import Decimal

import pytest

from storefront.application.query import (
    ALL_CATEGORIES,
    ProductFilter,
    ProductQueryEngine,
    category_stats,
    filter_products,
    most_reviewed,
    price_range,
    search,
    search_and_filter,
    sort_products,
    top_rated,
)
from storefront.domain.catalog import CatalogProduct
from storefront.domain.errors import EmptyCatalogError, ValidationError
from storefront.infrastructure.local_store import LocalStore
from storefront.infrastructure.repository import KeyValueCatalogRepository


def make(pid, name, price, category="road", rating=4.0, reviews=10, in_stock=True):
    return CatalogProduct(id=pid, name=name, category=category, price=Decimal(price),
                          rating=rating, review_count=reviews, in_stock=in_stock)


def ids(products):
    return [p.id for p in products]


class TestSearch:
    def test_empty_query_returns_corpus(self, catalog):
        assert search("", catalog) == catalog
        assert search("   ", catalog) == catalog
        assert search(None, catalog) == catalog

    def test_carbon_matches_spec_values(self, catalog):
        assert ids(search("carbon", catalog)) == ["pro-racer-x", "speedster-elite"]

    def test_case_and_whitespace_insensitive(self, catalog):
        assert ids(search("  CARBON fiber ", catalog)) == ["pro-racer-x", "speedster-elite"]

    def test_matches_category_and_description(self, catalog):
        assert {p.category for p in search("mountain", catalog)} == {"mountain"}
        assert ids(search("commuting", catalog)) == ["city-hybrid"]

    def test_preserves_input_order(self, catalog):
        reversed_catalog = list(reversed(catalog))
        assert ids(search("carbon", reversed_catalog)) == ["speedster-elite", "pro-racer-x"]

    def test_no_match(self, catalog):
        assert search("unicycle", catalog) == []


class TestFilter:
    def test_no_criteria_is_identity(self, catalog):
        assert filter_products({}, catalog) == catalog
        assert filter_products(None, catalog) == catalog
        assert filter_products(ProductFilter(), catalog) == catalog

    def test_category_road(self, catalog):
        result = filter_products({"category": "road"}, catalog)
        assert len(result) == 3
        assert all(p.category == "road" for p in result)

    def test_all_sentinel_is_noop(self, catalog):
        assert ProductFilter.from_mapping({"category": "all"}).category is ALL_CATEGORIES
        assert filter_products({"category": "all"}, catalog) == catalog

    def test_price_bounds_are_inclusive(self, catalog):
        result = filter_products({"minPrice": 649, "maxPrice": 849}, catalog)
        assert sorted(ids(result)) == ["roadster-200", "summit-mtn", "urban-classic"]

    def test_combined_criteria(self, catalog):
        result = filter_products({"category": "mountain", "max_price": 1000, "minRating": 4.6}, catalog)
        assert ids(result) == ["summit-mtn", "trail-explorer"]

    def test_min_reviews(self, catalog):
        assert ids(filter_products({"minReviews": 67}, catalog)) == ["pro-racer-x", "speedster-elite"]

    def test_in_stock(self):
        corpus = [make("a", "A", 10), make("b", "B", 10, in_stock=False)]
        assert ids(filter_products({"inStock": True}, corpus)) == ["a"]
        assert ids(filter_products({"inStock": False}, corpus)) == ["a", "b"]

    def test_unknown_fields_ignored(self, catalog):
        assert filter_products({"colour": "red", "warp": 9}, catalog) == catalog

    def test_malformed_value_rejected(self, catalog):
        with pytest.raises(ValidationError):
            filter_products({"minPrice": "cheap"}, catalog)


class TestSort:
    def test_price_ascending(self, catalog):
        prices = [p.price for p in sort_products(catalog, "price", "asc")]
        assert prices == sorted(prices)

    def test_stable_on_ties_in_both_directions(self):
        corpus = [make("a", "A", 5), make("b", "B", 5), make("c", "C", 1), make("d", "D", 5)]
        assert ids(sort_products(corpus, "price", "asc")) == ["c", "a", "b", "d"]
        assert ids(sort_products(corpus, "price", "desc")) == ["a", "b", "d", "c"]

    def test_names_compare_case_insensitively(self):
        corpus = [make("1", "banana", 1), make("2", "Apple", 1), make("3", "cherry", 1)]
        assert ids(sort_products(corpus, "name")) == ["2", "1", "3"]

    def test_unknown_key_keeps_input_order(self, catalog):
        assert sort_products(catalog, "colour", "desc") == catalog

    def test_does_not_mutate_input(self, catalog):
        original = list(catalog)
        sort_products(catalog, "price", "desc")
        assert catalog == original

    def test_rejects_bad_direction(self, catalog):
        with pytest.raises(ValidationError):
            sort_products(catalog, "price", "sideways")


def test_search_then_filter(catalog):
    result = search_and_filter("carbon", {"maxPrice": 1300}, catalog)
    assert ids(result) == ["pro-racer-x"]


def test_top_rated(catalog):
    assert ids(top_rated(catalog, 1)) == ["pro-racer-x"]
    assert top_rated(catalog, 0) == []
    assert len(top_rated(catalog, 50)) == len(catalog)


def test_top_rated_rejects_negative(catalog):
    with pytest.raises(ValidationError):
        top_rated(catalog, -1)


def test_most_reviewed(catalog):
    assert ids(most_reviewed(catalog, 2)) == ["speedster-elite", "pro-racer-x"]


def test_category_stats(catalog):
    stats = category_stats(catalog)
    assert set(stats) == {"road", "mountain", "hybrid"}
    for category, group in stats.items():
        prices = [p.price for p in catalog if p.category == category]
        assert group.count == len(prices)
        assert group.avg_price == sum(prices) / len(prices)
    assert stats["road"].total_price == Decimal("3497")
    assert stats["road"].avg_rating == pytest.approx((4.5 + 4.9 + 4.8) / 3)


def test_price_range():
    corpus = [make("a", "A", 699), make("b", "B", 849), make("c", "C", 529)]
    result = price_range(corpus)
    assert result.min == Decimal("529")
    assert result.max == Decimal("849")
    assert float(result.average) == pytest.approx(692.333, abs=1e-3)


def test_price_range_empty():
    with pytest.raises(EmptyCatalogError):
        price_range([])


def test_engine_over_key_value_repository(tmp_path):
    store = LocalStore(tmp_path / "store.json")
    engine = ProductQueryEngine(KeyValueCatalogRepository(store))

    assert ids(engine.get_top_rated(1)) == ["pro-racer-x"]
    assert ids(engine.query("carbon", {"category": "road"}, sort="price", direction="desc")) == [
        "speedster-elite", "pro-racer-x",
    ]
    # Seeded on first access and persisted
    assert len(LocalStore(tmp_path / "store.json").get("bike_sale_products")) == 9
