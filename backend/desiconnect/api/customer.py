"""
Customer API Endpoints
Profile, cart and orders
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from desiconnect.core.auth import TokenUser, require_customer, verify_customer_owns_order
from desiconnect.core.database import get_db
from desiconnect.domain.errors import ValidationFailedError
from desiconnect.domain.order import CartUpdate, CheckoutRequest
from desiconnect.domain.user import CustomerProfileUpdate
from desiconnect.domain.workflow import ProductStatus, UserRole
from desiconnect.repositories.cart_repository import CartRepository
from desiconnect.repositories.product_repository import ProductRepository
from desiconnect.services.account_service import AccountService
from desiconnect.services.order_service import OrderService

router = APIRouter(prefix="/api/customer", tags=["Customer"])


# =============================================================================
# Profile
# =============================================================================

@router.get("/profile")
def get_customer_profile(user: TokenUser = Depends(require_customer), db: Session = Depends(get_db)):
    customer = AccountService(db).get_profile(user.id, UserRole.CUSTOMER)
    return {"status": "success", "data": customer.to_dict()}


@router.put("/profile")
def update_customer_profile(
    body: CustomerProfileUpdate,
    user: TokenUser = Depends(require_customer),
    db: Session = Depends(get_db),
):
    customer = AccountService(db).update_profile(user.id, UserRole.CUSTOMER, **body.model_dump(exclude_unset=True))
    return {"status": "success", "data": customer.to_dict()}


# =============================================================================
# Cart
# =============================================================================

@router.get("/cart")
def get_cart(user: TokenUser = Depends(require_customer), db: Session = Depends(get_db)):
    items = CartRepository(db).get_items(user.id)
    return {"status": "success", "data": {"items": [item.model_dump() for item in items]}}


@router.post("/cart")
def update_cart(body: CartUpdate, user: TokenUser = Depends(require_customer), db: Session = Depends(get_db)):
    """Replace the cart; only approved products can be added"""
    product_ids = {item.product_id for item in body.items}
    approved = {
        product.id
        for product in ProductRepository(db).find_by_ids(list(product_ids), approved_sellers_only=True)
        if product.status is ProductStatus.APPROVED
    }
    missing = sorted(product_ids - approved)
    if missing:
        raise ValidationFailedError(f"Products not available: {missing}")

    items = CartRepository(db).replace_items(user.id, body.items)
    return {"status": "success", "data": {"items": [item.model_dump() for item in items]}}


# =============================================================================
# Orders
# =============================================================================

@router.post("/orders", status_code=status.HTTP_201_CREATED)
def create_order(body: CheckoutRequest, user: TokenUser = Depends(require_customer), db: Session = Depends(get_db)):
    orders = OrderService(db).checkout(user.id, body)
    return {
        "status": "success",
        "count": len(orders),
        "data": [order.to_dict() for order in orders],
    }


@router.get("/orders")
def get_customer_orders(user: TokenUser = Depends(require_customer), db: Session = Depends(get_db)):
    orders = OrderService(db).list_orders(customer_id=user.id)
    return {
        "status": "success",
        "count": len(orders),
        "data": [order.to_dict() for order in orders],
    }


@router.get("/orders/{order_id}")
def get_order_details(
    order_id: int,
    user: TokenUser = Depends(verify_customer_owns_order),
    db: Session = Depends(get_db),
):
    order = OrderService(db).get_for_user(order_id, user)
    return {"status": "success", "data": order.to_dict()}
