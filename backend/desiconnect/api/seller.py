"""
Seller API Endpoints
Profile, dashboard stats, product listings and order preparation
"""
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session

from desiconnect.core.auth import (
    TokenUser,
    require_active_seller,
    verify_seller_owns_order,
    verify_seller_owns_product,
)
from desiconnect.core.database import get_db
from desiconnect.domain.product import ProductCreate, ProductUpdate
from desiconnect.domain.user import SellerProfileUpdate
from desiconnect.domain.workflow import UserRole
from desiconnect.services.account_service import AccountService
from desiconnect.services.catalog_service import CatalogService
from desiconnect.services.order_service import OrderService
from desiconnect.services.stats_service import StatsService
from desiconnect.services.upload_service import delete_image, save_image

router = APIRouter(prefix="/api/seller", tags=["Seller"])


def _has_file(upload: Optional[UploadFile]) -> bool:
    return upload is not None and bool(upload.filename)


# =============================================================================
# Profile
# =============================================================================

@router.get("/profile")
def get_seller_profile(user: TokenUser = Depends(require_active_seller), db: Session = Depends(get_db)):
    seller = AccountService(db).get_profile(user.id, UserRole.SELLER)
    return {"status": "success", "data": seller.to_dict()}


@router.put("/profile")
def update_seller_profile(
    body: SellerProfileUpdate,
    user: TokenUser = Depends(require_active_seller),
    db: Session = Depends(get_db),
):
    seller = AccountService(db).update_profile(user.id, UserRole.SELLER, **body.model_dump(exclude_unset=True))
    return {"status": "success", "data": seller.to_dict()}


@router.get("/stats")
def get_seller_stats(user: TokenUser = Depends(require_active_seller), db: Session = Depends(get_db)):
    return {"status": "success", "data": StatsService(db).seller_stats(user.id).model_dump()}


# =============================================================================
# Products
# =============================================================================

@router.get("/products")
def get_seller_products(user: TokenUser = Depends(require_active_seller), db: Session = Depends(get_db)):
    products = CatalogService(db).list_for_seller(user.id)
    return {
        "status": "success",
        "count": len(products),
        "data": [product.to_dict() for product in products],
    }


@router.post("/products", status_code=status.HTTP_201_CREATED)
def create_product(
    name: str = Form(..., min_length=1, max_length=255),
    price: Decimal = Form(..., gt=0),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None, max_length=100),
    image: Optional[UploadFile] = File(None),
    user: TokenUser = Depends(require_active_seller),
    db: Session = Depends(get_db),
):
    """List a new product; it stays pending until an admin reviews it"""
    image_path = save_image(image) if _has_file(image) else None
    data = ProductCreate(name=name, price=price, description=description, category=category, image=image_path)

    try:
        product = CatalogService(db).create_for_seller(user.id, data)
    except Exception:
        delete_image(image_path)
        raise

    return {"status": "success", "data": product.to_dict()}


@router.put("/products/{product_id}")
def update_product(
    product_id: int,
    name: Optional[str] = Form(None, min_length=1, max_length=255),
    price: Optional[Decimal] = Form(None, gt=0),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None, max_length=100),
    image: Optional[UploadFile] = File(None),
    user: TokenUser = Depends(verify_seller_owns_product),
    db: Session = Depends(get_db),
):
    """Edit an owned product; rejected products cannot be edited"""
    service = CatalogService(db)
    previous_image = service.products.find_by_id(product_id).image

    image_path = save_image(image) if _has_file(image) else None
    data = ProductUpdate(name=name, price=price, description=description, category=category, image=image_path)
    try:
        product = service.update_for_seller(product_id, data)
    except Exception:
        delete_image(image_path)
        raise

    if image_path and previous_image != image_path:
        delete_image(previous_image)

    return {"status": "success", "data": product.to_dict()}


@router.delete("/products/{product_id}")
def delete_product(
    product_id: int,
    user: TokenUser = Depends(verify_seller_owns_product),
    db: Session = Depends(get_db),
):
    product = CatalogService(db).delete(product_id)
    delete_image(product.image)
    return {"status": "success", "message": "Product deleted"}


# =============================================================================
# Orders
# =============================================================================

@router.get("/orders")
def get_seller_orders(user: TokenUser = Depends(require_active_seller), db: Session = Depends(get_db)):
    orders = OrderService(db).list_orders(seller_id=user.id)
    return {
        "status": "success",
        "count": len(orders),
        "data": [order.to_dict() for order in orders],
    }


@router.put("/orders/{order_id}/ready")
def mark_order_ready(
    order_id: int,
    user: TokenUser = Depends(verify_seller_owns_order),
    db: Session = Depends(get_db),
):
    order = OrderService(db).mark_ready(order_id, user.id)
    return {"status": "success", "data": order.to_dict()}
