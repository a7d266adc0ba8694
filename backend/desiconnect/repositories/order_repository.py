"""
Order Repository - Data Access Layer for Orders

Handles all database queries for orders and returns Order domain models.
"""
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session, joinedload

from desiconnect.domain.order import Order
from desiconnect.domain.workflow import OrderStatus
from desiconnect.models.order import Order as OrderModel


class OrderRepository:
    """
    Repository for Order data access

    Returns Order domain models with customer and seller names joined in.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, order_id: int) -> Optional[Order]:
        row = self.db.scalars(
            select(OrderModel)
            .options(joinedload(OrderModel.customer), joinedload(OrderModel.seller))
            .where(OrderModel.id == order_id)
        ).first()
        return self._to_domain(row) if row else None

    def find_all(
        self,
        customer_id: Optional[int] = None,
        seller_id: Optional[int] = None,
        status: Optional[OrderStatus] = None,
        limit: int = 500,
        offset: int = 0,
    ) -> Tuple[List[Order], int]:
        """
        Find orders with filters, newest first

        Returns:
            Tuple of (list of orders, total count)
        """
        conditions = []
        if customer_id is not None:
            conditions.append(OrderModel.customer_id == customer_id)
        if seller_id is not None:
            conditions.append(OrderModel.seller_id == seller_id)
        if status is not None:
            conditions.append(OrderModel.status == OrderStatus(status).value)

        total = self.db.scalar(select(func.count(OrderModel.id)).where(*conditions)) or 0

        rows = self.db.scalars(
            select(OrderModel)
            .options(joinedload(OrderModel.customer), joinedload(OrderModel.seller))
            .where(*conditions)
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            .limit(limit)
            .offset(offset)
        ).all()

        return [self._to_domain(row) for row in rows], total

    def get_owner_ids(self, order_id: int) -> Optional[Tuple[int, int]]:
        """
        Returns:
            (customer_id, seller_id) or None if the order does not exist
        """
        row = self.db.execute(
            select(OrderModel.customer_id, OrderModel.seller_id).where(OrderModel.id == order_id)
        ).first()
        return (row.customer_id, row.seller_id) if row else None

    def create_many(self, customer_id: int, address: str, lines: List[dict]) -> List[Order]:
        """
        Insert one placed order per checkout line in a single transaction

        Args:
            customer_id: Buyer
            address: Shipping address shared by every line
            lines: Dicts with seller_id, product_id, product_name,
                unit_price, quantity and optional message

        Returns:
            Created orders in input order
        """
        rows = []
        for line in lines:
            unit_price = Decimal(str(line['unit_price']))
            rows.append(OrderModel(
                customer_id=customer_id,
                seller_id=line['seller_id'],
                product_id=line['product_id'],
                product_name=line['product_name'],
                unit_price=unit_price,
                quantity=line['quantity'],
                total_price=unit_price * line['quantity'],
                address=address,
                message=line.get('message'),
                status=OrderStatus.PLACED.value,
            ))

        self.db.add_all(rows)
        self.db.commit()

        return [self.find_by_id(row.id) for row in rows]

    def transition_status(
        self,
        order_id: int,
        expected: OrderStatus,
        new: OrderStatus,
        tracking_number: Optional[str] = None,
    ) -> bool:
        """
        Compare-and-set the order status

        Only one of two concurrent transitions out of the same status can
        match the WHERE clause.

        Returns:
            True if the row was in `expected` and is now `new`
        """
        values = {"status": OrderStatus(new).value}
        if tracking_number is not None:
            values["tracking_number"] = tracking_number

        result = self.db.execute(
            update(OrderModel)
            .where(
                OrderModel.id == order_id,
                OrderModel.status == OrderStatus(expected).value,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return result.rowcount == 1

    def count(self, seller_id: Optional[int] = None, status: Optional[OrderStatus] = None) -> int:
        query = select(func.count(OrderModel.id))
        if seller_id is not None:
            query = query.where(OrderModel.seller_id == seller_id)
        if status is not None:
            query = query.where(OrderModel.status == OrderStatus(status).value)
        return self.db.scalar(query) or 0

    def revenue(self, seller_id: Optional[int] = None) -> float:
        """Sum of order totals, across all statuses"""
        query = select(func.coalesce(func.sum(OrderModel.total_price), 0))
        if seller_id is not None:
            query = query.where(OrderModel.seller_id == seller_id)
        return float(self.db.scalar(query) or 0)

    @staticmethod
    def _to_domain(row: OrderModel) -> Order:
        order = Order.model_validate(row)
        if row.customer is not None:
            order.customer_name = row.customer.name
            order.customer_email = row.customer.email
        if row.seller is not None:
            order.seller_business_name = row.seller.business_name
        return order
