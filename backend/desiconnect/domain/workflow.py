"""
Workflow rules for orders, products and seller onboarding

Every status change in the marketplace goes through one of the
`next_*_status` functions below. They never touch the database; the
repositories apply the returned status with a compare-and-set update.
"""
from enum import Enum
from typing import Dict, Optional, Tuple

from desiconnect.domain.errors import InvalidTransitionError


class UserRole(str, Enum):
    ADMIN = "admin"
    SELLER = "seller"
    CUSTOMER = "customer"


class OrderStatus(str, Enum):
    PLACED = "placed"
    READY = "ready"
    FULFILLED = "fulfilled"


class ProductStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class SellerApprovalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


# (current status, acting role) -> next status
ORDER_TRANSITIONS: Dict[Tuple[OrderStatus, UserRole], OrderStatus] = {
    (OrderStatus.PLACED, UserRole.SELLER): OrderStatus.READY,
    (OrderStatus.READY, UserRole.ADMIN): OrderStatus.FULFILLED,
}

# Product review is a single admin decision out of 'pending'
PRODUCT_DECISIONS = {
    "approve": ProductStatus.APPROVED,
    "reject": ProductStatus.REJECTED,
}

SELLER_DECISIONS = {
    "approve": SellerApprovalStatus.APPROVED,
    "reject": SellerApprovalStatus.REJECTED,
}


def next_order_status(
    current: OrderStatus,
    actor: UserRole,
    tracking_number: Optional[str] = None,
) -> OrderStatus:
    """
    Resolve the next order status for an action by `actor`

    Args:
        current: Status the order is in now
        actor: Role of the caller performing the transition
        tracking_number: Required when moving to 'fulfilled'

    Returns:
        The status the order moves to

    Raises:
        InvalidTransitionError: If the move is not allowed from `current`
            for `actor`, or fulfillment is attempted without a tracking number
    """
    current = OrderStatus(current)
    actor = UserRole(actor)

    target = ORDER_TRANSITIONS.get((current, actor))
    if target is None:
        raise InvalidTransitionError(
            f"Order in status '{current.value}' cannot be advanced by {actor.value}"
        )

    if target is OrderStatus.FULFILLED and not (tracking_number or "").strip():
        raise InvalidTransitionError("Tracking number is required to fulfill an order")

    return target


def next_product_status(current: ProductStatus, decision: str) -> ProductStatus:
    """Resolve an admin review decision ('approve' / 'reject') on a product"""
    current = ProductStatus(current)
    if decision not in PRODUCT_DECISIONS:
        raise InvalidTransitionError(f"Unknown product decision: {decision}")
    if current is not ProductStatus.PENDING:
        raise InvalidTransitionError(
            f"Only pending products can be reviewed (product is '{current.value}')"
        )
    return PRODUCT_DECISIONS[decision]


def next_seller_status(current: Optional[SellerApprovalStatus], decision: str) -> SellerApprovalStatus:
    """Resolve an admin onboarding decision on a seller account"""
    if decision not in SELLER_DECISIONS:
        raise InvalidTransitionError(f"Unknown seller decision: {decision}")
    target = SELLER_DECISIONS[decision]
    if current is not None and SellerApprovalStatus(current) is target:
        raise InvalidTransitionError(f"Seller is already {target.value}")
    return target
