"""
Repository Layer - Data Access

This layer handles all database queries and returns domain models.
Repositories abstract away SQL details from business logic.
"""
from desiconnect.repositories.user_repository import UserRepository
from desiconnect.repositories.product_repository import ProductRepository
from desiconnect.repositories.order_repository import OrderRepository
from desiconnect.repositories.cart_repository import CartRepository

__all__ = [
    'UserRepository',
    'ProductRepository',
    'OrderRepository',
    'CartRepository',
]
