"""
Cart Repository - one stored cart per customer
"""
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from desiconnect.domain.order import CartItem, CheckoutItem
from desiconnect.models.cart import Cart as CartModel, CartItem as CartItemModel


class CartRepository:

    def __init__(self, db: Session):
        self.db = db

    def get_items(self, customer_id: int) -> List[CartItem]:
        """Cart lines with current product name, price and image"""
        cart = self._find(customer_id)
        if cart is None:
            return []

        items = []
        for line in cart.items:
            item = CartItem(product_id=line.product_id, quantity=line.quantity, message=line.message)
            if line.product is not None:
                item.name = line.product.name
                item.price = float(line.product.price)
                item.image = line.product.image
            items.append(item)
        return items

    def replace_items(self, customer_id: int, items: List[CheckoutItem]) -> List[CartItem]:
        cart = self._find(customer_id)
        if cart is None:
            cart = CartModel(customer_id=customer_id)
            self.db.add(cart)

        cart.items = [
            CartItemModel(product_id=item.product_id, quantity=item.quantity, message=item.message)
            for item in items
        ]
        self.db.commit()
        return self.get_items(customer_id)

    def clear(self, customer_id: int, commit: bool = True) -> None:
        cart = self._find(customer_id)
        if cart is not None:
            cart.items = []
            if commit:
                self.db.commit()

    def _find(self, customer_id: int):
        return self.db.scalars(
            select(CartModel)
            .options(selectinload(CartModel.items).selectinload(CartItemModel.product))
            .where(CartModel.customer_id == customer_id)
        ).first()
