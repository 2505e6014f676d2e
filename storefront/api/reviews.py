from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from storefront.application.reviews import ReviewService
from storefront.application.schemas import ReviewRead, ReviewCreate
from storefront.infrastructure.cache import CatalogCache
from storefront.infrastructure.db import get_db
from .deps import catalog_cache

router = APIRouter(prefix="/api/reviews", tags=["reviews"])

@router.post("")
def add_review(payload: ReviewCreate, db: Session = Depends(get_db), cache: CatalogCache = Depends(catalog_cache)):
    review = ReviewService(db).create(payload)
    # Rating and review count feed the catalog snapshot
    cache.invalidate()
    return {"id": review.id, "message": "Review added successfully"}

@router.get("/product/{product_id}", response_model=list[ReviewRead])
def list_reviews(product_id: str, db: Session = Depends(get_db)):
    return ReviewService(db).list_for_product(product_id)
