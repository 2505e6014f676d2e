from datetime import datetime, timezone
from sqlalchemy import Numeric, cast, func, select, update
from sqlalchemy.orm import Session
from storefront.domain.errors import NotFoundError, ValidationError
from storefront.domain.models import Product, Review
from .schemas import ReviewCreate

class ReviewService:
    def __init__(self, db: Session):
        self.db = db

    def list_for_product(self, product_id: str):
        return self.db.execute(
            select(Review).where(Review.product_id == product_id).order_by(Review.created_at.desc(), Review.id.desc())
        ).scalars().all()

    def create(self, data: ReviewCreate) -> Review:
        if not 1 <= data.rating <= 5:
            raise ValidationError("Rating must be between 1 and 5")
        product = self.db.get(Product, data.product_id)
        if product is None:
            raise NotFoundError(f"Product {data.product_id} not found")

        review = Review(
            product_id=data.product_id,
            customer_id=data.customer_id,
            rating=data.rating,
            review_text=data.review_text,
            created_at=datetime.now(timezone.utc).replace(tzinfo=None),
        )
        self.db.add(review)
        # Fold the new rating into the running average in one statement, against the row's current values
        count = func.coalesce(Product.review_count, 0)
        average = (func.coalesce(Product.rating, 0.0) * count + data.rating) / (count + 1)
        self.db.execute(
            update(Product)
            .where(Product.id == data.product_id)
            .values(rating=func.round(cast(average, Numeric(10, 4)), 2), review_count=count + 1)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        self.db.expire(product)
        self.db.refresh(review)
        return review
