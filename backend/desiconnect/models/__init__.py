"""
Database models
"""
from .user import User
from .product import Product
from .order import Order
from .cart import Cart, CartItem

__all__ = [
    "User",
    "Product",
    "Order",
    "Cart",
    "CartItem",
]
