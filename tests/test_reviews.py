import pytest

from storefront.application.reviews import ReviewService
from storefront.application.schemas import ReviewCreate
from storefront.domain.errors import NotFoundError, ValidationError
from storefront.domain.models import Product
from storefront.infrastructure.db import SessionLocal


def test_review_updates_running_average(db):
    ReviewService(db).create(ReviewCreate(product_id="roadster-200", rating=5, review_text="Quick"))

    db.expire_all()
    product = db.get(Product, "roadster-200")
    assert product.review_count == 24
    assert product.rating == pytest.approx(4.52)


def test_concurrent_reviews_both_count(db):
    first, second = SessionLocal(), SessionLocal()
    try:
        # Both sessions hold the product as it was before either review
        assert first.get(Product, "roadster-200").review_count == 23
        assert second.get(Product, "roadster-200").review_count == 23

        ReviewService(first).create(ReviewCreate(product_id="roadster-200", rating=5))
        ReviewService(second).create(ReviewCreate(product_id="roadster-200", rating=1))
    finally:
        first.close()
        second.close()

    db.expire_all()
    product = db.get(Product, "roadster-200")
    assert product.review_count == 25
    assert product.rating == pytest.approx(4.38)
    assert len(ReviewService(db).list_for_product("roadster-200")) == 2


@pytest.mark.parametrize("rating", [0, 6])
def test_rating_range(db, rating):
    with pytest.raises(ValidationError):
        ReviewService(db).create(ReviewCreate(product_id="roadster-200", rating=rating))


def test_unknown_product(db):
    with pytest.raises(NotFoundError):
        ReviewService(db).create(ReviewCreate(product_id="unicycle", rating=4))
