"""
Order Service
Checkout and the placed -> ready -> fulfilled workflow
"""
import logging
from typing import List

from sqlalchemy.orm import Session

from desiconnect.core.auth import TokenUser
from desiconnect.domain.errors import (
    ConcurrentUpdateError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from desiconnect.domain.order import Order, CheckoutRequest
from desiconnect.domain.workflow import OrderStatus, ProductStatus, UserRole, next_order_status
from desiconnect.repositories.cart_repository import CartRepository
from desiconnect.repositories.order_repository import OrderRepository
from desiconnect.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class OrderService:

    def __init__(self, db: Session):
        self.orders = OrderRepository(db)
        self.products = ProductRepository(db)
        self.carts = CartRepository(db)

    def checkout(self, customer_id: int, request: CheckoutRequest) -> List[Order]:
        """
        Turn checkout lines into placed orders, one per product line

        Lines come from the request, or from the stored cart when the
        request carries none. The cart is emptied in the same transaction.

        Raises:
            ValidationFailedError: No lines, or a product that is missing,
                not approved, or sold by a seller who is not approved
        """
        items = request.items
        if not items:
            items = self.carts.get_items(customer_id)
        if not items:
            raise ValidationFailedError("Cart is empty")

        products = {
            product.id: product
            for product in self.products.find_by_ids(
                [item.product_id for item in items], approved_sellers_only=True
            )
        }

        lines = []
        for item in items:
            product = products.get(item.product_id)
            if product is None or product.status is not ProductStatus.APPROVED:
                raise ValidationFailedError(f"Product {item.product_id} is not available")
            lines.append({
                'seller_id': product.seller_id,
                'product_id': product.id,
                'product_name': product.name,
                'unit_price': product.price,
                'quantity': item.quantity,
                'message': item.message,
            })

        self.carts.clear(customer_id, commit=False)
        orders = self.orders.create_many(customer_id, request.address.strip(), lines)
        logger.info(f"Customer {customer_id} placed {len(orders)} order(s): {[o.id for o in orders]}")
        return orders

    def mark_ready(self, order_id: int, seller_id: int) -> Order:
        """Seller step: placed -> ready"""
        order = self._get(order_id)
        if order.seller_id != seller_id:
            raise PermissionDeniedError("You do not have permission to access this order")

        target = next_order_status(order.status, UserRole.SELLER)
        if not self.orders.transition_status(order_id, order.status, target):
            raise ConcurrentUpdateError("Order status changed, please refresh")

        logger.info(f"Order {order_id} marked {target.value} by seller {seller_id}")
        return self._get(order_id)

    def add_tracking(self, order_id: int, tracking_number: str) -> Order:
        """Admin step: ready -> fulfilled, recording the tracking number"""
        order = self._get(order_id)
        tracking_number = (tracking_number or "").strip()

        target = next_order_status(order.status, UserRole.ADMIN, tracking_number)
        if not self.orders.transition_status(order_id, order.status, target, tracking_number=tracking_number):
            raise ConcurrentUpdateError("Order status changed, please refresh")

        logger.info(f"Order {order_id} fulfilled with tracking {tracking_number}")
        return self._get(order_id)

    def get_for_user(self, order_id: int, user: TokenUser) -> Order:
        """Admins see every order; sellers and customers only their own"""
        order = self._get(order_id)
        if user.role is UserRole.ADMIN:
            return order
        if user.role is UserRole.SELLER and order.seller_id == user.id:
            return order
        if user.role is UserRole.CUSTOMER and order.customer_id == user.id:
            return order
        raise PermissionDeniedError("You do not have permission to access this order")

    def list_orders(self, **filters) -> List[Order]:
        orders, _ = self.orders.find_all(limit=10000, **filters)
        return orders

    def _get(self, order_id: int) -> Order:
        order = self.orders.find_by_id(order_id)
        if order is None:
            raise NotFoundError("Order not found")
        return order
