"""
Public Products API Endpoints
Customer-facing catalog: only approved products are ever returned
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from desiconnect.core.database import get_db
from desiconnect.services.catalog_service import CatalogService

router = APIRouter(prefix="/api/products", tags=["Products"])


def _page(products, total, limit, offset) -> dict:
    return {
        "status": "success",
        "total": total,
        "limit": limit,
        "offset": offset,
        "count": len(products),
        "data": [product.to_dict() for product in products],
    }


@router.get("")
def get_approved_products(
    category: Optional[str] = Query(None, description="Filter by category"),
    search: Optional[str] = Query(None, description="Search by name, description or category"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    products, total = CatalogService(db).list_public(category=category, search=search, limit=limit, offset=offset)
    return _page(products, total, limit, offset)


@router.get("/search")
def search_products(
    q: str = Query(..., min_length=1, description="Search text"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    products, total = CatalogService(db).list_public(search=q, limit=limit, offset=offset)
    return _page(products, total, limit, offset)


@router.get("/category/{category}")
def get_products_by_category(
    category: str,
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    products, total = CatalogService(db).list_public(category=category, limit=limit, offset=offset)
    return _page(products, total, limit, offset)


@router.get("/{product_id}")
def get_product_details(product_id: int, db: Session = Depends(get_db)):
    product = CatalogService(db).get_public(product_id)
    return {"status": "success", "data": product.to_dict()}
