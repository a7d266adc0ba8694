"""
Dashboard statistics for admins and sellers
"""
from sqlalchemy.orm import Session

from desiconnect.domain.stats import AdminStats, SellerStats
from desiconnect.domain.workflow import OrderStatus, ProductStatus, SellerApprovalStatus, UserRole
from desiconnect.repositories.order_repository import OrderRepository
from desiconnect.repositories.product_repository import ProductRepository
from desiconnect.repositories.user_repository import UserRepository


class StatsService:

    def __init__(self, db: Session):
        self.users = UserRepository(db)
        self.products = ProductRepository(db)
        self.orders = OrderRepository(db)

    def admin_stats(self) -> AdminStats:
        return AdminStats(
            total_sellers=self.users.count(role=UserRole.SELLER),
            pending_sellers=self.users.count(role=UserRole.SELLER, approval_status=SellerApprovalStatus.PENDING),
            total_customers=self.users.count(role=UserRole.CUSTOMER),
            total_products=self.products.count(),
            pending_products=self.products.count(status=ProductStatus.PENDING),
            total_orders=self.orders.count(),
            placed_orders=self.orders.count(status=OrderStatus.PLACED),
            ready_orders=self.orders.count(status=OrderStatus.READY),
            fulfilled_orders=self.orders.count(status=OrderStatus.FULFILLED),
            total_revenue=self.orders.revenue(),
        )

    def seller_stats(self, seller_id: int) -> SellerStats:
        return SellerStats(
            total_products=self.products.count(seller_id=seller_id),
            pending_approvals=self.products.count(seller_id=seller_id, status=ProductStatus.PENDING),
            approved_products=self.products.count(seller_id=seller_id, status=ProductStatus.APPROVED),
            new_orders=self.orders.count(seller_id=seller_id, status=OrderStatus.PLACED),
            ready_orders=self.orders.count(seller_id=seller_id, status=OrderStatus.READY),
            fulfilled_orders=self.orders.count(seller_id=seller_id, status=OrderStatus.FULFILLED),
            total_revenue=self.orders.revenue(seller_id=seller_id),
        )
