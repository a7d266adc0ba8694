"""
Dashboard statistics
"""
from pydantic import BaseModel


class AdminStats(BaseModel):
    total_sellers: int = 0
    pending_sellers: int = 0
    total_customers: int = 0
    total_products: int = 0
    pending_products: int = 0
    total_orders: int = 0
    placed_orders: int = 0
    ready_orders: int = 0
    fulfilled_orders: int = 0
    total_revenue: float = 0.0


class SellerStats(BaseModel):
    total_products: int = 0
    pending_approvals: int = 0
    approved_products: int = 0
    new_orders: int = 0
    ready_orders: int = 0
    fulfilled_orders: int = 0
    total_revenue: float = 0.0
