from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional
from storefront.application.catalog import CatalogService
from storefront.application.query import ProductFilter
from storefront.application.schemas import (
    CategoryStatsRead, PriceRangeRead, ProductCreate, ProductRead, ProductUpdate,
)
from storefront.infrastructure.cache import CatalogCache
from storefront.infrastructure.db import get_db
from .deps import catalog_cache, current_admin

router = APIRouter(prefix="/api/products", tags=["products"])

def get_catalog(db: Session = Depends(get_db), cache: CatalogCache = Depends(catalog_cache)) -> CatalogService:
    return CatalogService(db, cache)

@router.get("", response_model=list[ProductRead])
def list_products(catalog: CatalogService = Depends(get_catalog)):
    return catalog.list()

@router.get("/query", response_model=list[ProductRead])
def query_products(
    q: Optional[str] = Query(None, max_length=100, description="Free-text search"),
    category: Optional[str] = Query(None, description="Exact category, or 'all'"),
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    in_stock: Optional[bool] = None,
    min_rating: Optional[float] = Query(None, ge=0, le=5),
    min_reviews: Optional[int] = Query(None, ge=0),
    sort: Optional[str] = Query(None, description="name, price, rating or review_count"),
    direction: str = Query("asc", pattern="^(asc|desc)$"),
    catalog: CatalogService = Depends(get_catalog),
):
    """Search, filter and sort the catalog in one call"""
    criteria = ProductFilter.from_mapping({
        "category": category,
        "min_price": min_price,
        "max_price": max_price,
        "in_stock": in_stock,
        "min_rating": min_rating,
        "min_reviews": min_reviews,
    })
    return catalog.engine.query(q, criteria, sort, direction)

@router.get("/top-rated", response_model=list[ProductRead])
def top_rated(limit: int = Query(5, ge=0, le=100), catalog: CatalogService = Depends(get_catalog)):
    return catalog.engine.get_top_rated(limit)

@router.get("/most-reviewed", response_model=list[ProductRead])
def most_reviewed(limit: int = Query(5, ge=0, le=100), catalog: CatalogService = Depends(get_catalog)):
    return catalog.engine.get_most_reviewed(limit)

@router.get("/stats/categories", response_model=dict[str, CategoryStatsRead])
def category_stats(catalog: CatalogService = Depends(get_catalog)):
    return {category: stats.to_dict() for category, stats in catalog.engine.category_stats().items()}

@router.get("/stats/price-range", response_model=PriceRangeRead)
def price_range(catalog: CatalogService = Depends(get_catalog)):
    result = catalog.engine.price_range()
    return {"min": result.min, "max": result.max, "average": result.average}

@router.get("/category/{category}", response_model=list[ProductRead])
def products_by_category(category: str, catalog: CatalogService = Depends(get_catalog)):
    return catalog.by_category(category)

@router.get("/search/{query}", response_model=list[ProductRead])
def search_products(query: str, catalog: CatalogService = Depends(get_catalog)):
    return catalog.search(query)

@router.get("/{product_id}", response_model=ProductRead)
def get_product(product_id: str, catalog: CatalogService = Depends(get_catalog)):
    product = catalog.get(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product

@router.post("", response_model=ProductRead, status_code=201, dependencies=[Depends(current_admin)])
def create_product(payload: ProductCreate, catalog: CatalogService = Depends(get_catalog)):
    return catalog.create(payload)

@router.put("/{product_id}", response_model=ProductRead, dependencies=[Depends(current_admin)])
def update_product(product_id: str, payload: ProductUpdate, catalog: CatalogService = Depends(get_catalog)):
    return catalog.update(product_id, payload)
