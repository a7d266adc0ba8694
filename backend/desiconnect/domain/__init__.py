"""
Domain Layer - Business Entities

Pydantic models for marketplace entities plus the workflow rules that
govern their status changes.
"""
from desiconnect.domain.user import User
from desiconnect.domain.product import Product
from desiconnect.domain.order import Order
from desiconnect.domain.stats import AdminStats, SellerStats
from desiconnect.domain.workflow import (
    UserRole,
    OrderStatus,
    ProductStatus,
    SellerApprovalStatus,
)

__all__ = [
    'User',
    'Product',
    'Order',
    'AdminStats',
    'SellerStats',
    'UserRole',
    'OrderStatus',
    'ProductStatus',
    'SellerApprovalStatus',
]
