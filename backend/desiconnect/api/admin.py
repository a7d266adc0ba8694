"""
Admin API Endpoints
Platform stats, seller onboarding, product review and order fulfillment
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from desiconnect.core.auth import require_admin
from desiconnect.core.database import get_db
from desiconnect.domain.order import TrackingUpdate
from desiconnect.domain.user import SellerCreate, SellerUpdate
from desiconnect.domain.workflow import OrderStatus, SellerApprovalStatus, UserRole
from desiconnect.services.account_service import AccountService
from desiconnect.services.catalog_service import CatalogService
from desiconnect.services.order_service import OrderService
from desiconnect.services.stats_service import StatsService
from desiconnect.services.upload_service import delete_image

router = APIRouter(prefix="/api/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


def _list_response(items) -> dict:
    return {
        "status": "success",
        "count": len(items),
        "data": [item.to_dict() for item in items],
    }


@router.get("/stats")
def get_admin_stats(db: Session = Depends(get_db)):
    return {"status": "success", "data": StatsService(db).admin_stats().model_dump()}


# =============================================================================
# Seller Management
# =============================================================================

@router.post("/sellers", status_code=status.HTTP_201_CREATED)
def create_seller(body: SellerCreate, db: Session = Depends(get_db)):
    """Sellers created by an admin are approved immediately"""
    seller = AccountService(db).register_seller(body, approved=True)
    return {"status": "success", "data": seller.to_dict()}


@router.get("/sellers")
def get_all_sellers(
    approval_status: Optional[SellerApprovalStatus] = Query(None, description="Filter by onboarding status"),
    db: Session = Depends(get_db),
):
    return _list_response(AccountService(db).list_sellers(approval_status))


@router.get("/sellers/{seller_id}")
def get_seller(seller_id: int, db: Session = Depends(get_db)):
    seller = AccountService(db).get_profile(seller_id, UserRole.SELLER)
    return {"status": "success", "data": seller.to_dict()}


@router.put("/sellers/{seller_id}")
def update_seller(seller_id: int, body: SellerUpdate, db: Session = Depends(get_db)):
    seller = AccountService(db).update_seller(seller_id, body)
    return {"status": "success", "data": seller.to_dict()}


@router.put("/sellers/{seller_id}/approve")
def approve_seller(seller_id: int, db: Session = Depends(get_db)):
    seller = AccountService(db).review_seller(seller_id, "approve")
    return {"status": "success", "data": seller.to_dict()}


@router.put("/sellers/{seller_id}/reject")
def reject_seller(seller_id: int, db: Session = Depends(get_db)):
    seller = AccountService(db).review_seller(seller_id, "reject")
    return {"status": "success", "data": seller.to_dict()}


# =============================================================================
# Product Review
# =============================================================================

@router.get("/products/pending")
def get_pending_products(db: Session = Depends(get_db)):
    return _list_response(CatalogService(db).list_pending())


@router.put("/products/{product_id}/approve")
def approve_product(product_id: int, db: Session = Depends(get_db)):
    product = CatalogService(db).review(product_id, "approve")
    return {"status": "success", "data": product.to_dict()}


@router.put("/products/{product_id}/reject")
def reject_product(product_id: int, db: Session = Depends(get_db)):
    product = CatalogService(db).review(product_id, "reject")
    return {"status": "success", "data": product.to_dict()}


@router.delete("/products/{product_id}")
def delete_product(product_id: int, db: Session = Depends(get_db)):
    product = CatalogService(db).delete(product_id)
    delete_image(product.image)
    return {"status": "success", "message": "Product deleted"}


# =============================================================================
# Order Fulfillment
# =============================================================================

@router.get("/orders")
def get_all_orders(db: Session = Depends(get_db)):
    return _list_response(OrderService(db).list_orders())


@router.get("/orders/status/{order_status}")
def get_orders_by_status(order_status: OrderStatus, db: Session = Depends(get_db)):
    return _list_response(OrderService(db).list_orders(status=order_status))


@router.put("/orders/{order_id}/tracking")
def add_tracking_to_order(
    order_id: int,
    body: TrackingUpdate,
    db: Session = Depends(get_db),
):
    """Fulfill a ready order by attaching the carrier tracking number"""
    order = OrderService(db).add_tracking(order_id, body.tracking_number)
    return {"status": "success", "data": order.to_dict()}
