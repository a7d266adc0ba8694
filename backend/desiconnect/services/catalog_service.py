"""
Catalog Service
Seller product listings and admin product review
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from desiconnect.domain.errors import (
    ConcurrentUpdateError,
    InvalidTransitionError,
    NotFoundError,
    PermissionDeniedError,
)
from desiconnect.domain.product import Product, ProductCreate, ProductUpdate
from desiconnect.domain.workflow import ProductStatus, UserRole, next_product_status
from desiconnect.repositories.product_repository import ProductRepository
from desiconnect.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class CatalogService:
    """
    Product lifecycle: pending -> approved | rejected, then deleted by
    the admin or the owning seller
    """

    def __init__(self, db: Session):
        self.products = ProductRepository(db)
        self.users = UserRepository(db)

    # Public catalog ----------------------------------------------------------

    def list_public(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Tuple[List[Product], int]:
        return self.products.find_all(
            status=ProductStatus.APPROVED,
            approved_sellers_only=True,
            category=category,
            search=search,
            limit=limit,
            offset=offset,
        )

    def get_public(self, product_id: int) -> Product:
        product = self.products.find_by_id(
            product_id, status=ProductStatus.APPROVED, approved_sellers_only=True
        )
        if product is None:
            raise NotFoundError("Product not found")
        return product

    # Seller ------------------------------------------------------------------

    def create_for_seller(self, seller_id: int, data: ProductCreate) -> Product:
        """
        List a new product for review

        Raises:
            PermissionDeniedError: The seller has not been approved yet
        """
        seller = self.users.find_by_id(seller_id, role=UserRole.SELLER)
        if seller is None or not seller.is_approved_seller:
            raise PermissionDeniedError("Seller account is awaiting approval")

        product = self.products.create(seller_id, data)
        logger.info(f"Seller {seller_id} listed product {product.id} ({product.name}) for review")
        return product

    def update_for_seller(self, product_id: int, data: ProductUpdate) -> Product:
        """
        Edit product content; the review status is left as it is

        Raises:
            NotFoundError: Unknown product
            InvalidTransitionError: The product was rejected
        """
        product = self.products.find_by_id(product_id)
        if product is None:
            raise NotFoundError("Product not found")
        if product.status is ProductStatus.REJECTED:
            raise InvalidTransitionError("Rejected products cannot be edited")
        return self.products.update(product_id, data)

    def list_for_seller(self, seller_id: int) -> List[Product]:
        products, _ = self.products.find_all(seller_id=seller_id, limit=10000)
        return products

    # Admin -------------------------------------------------------------------

    def list_pending(self) -> List[Product]:
        products, _ = self.products.find_all(status=ProductStatus.PENDING, limit=10000)
        return products

    def review(self, product_id: int, decision: str) -> Product:
        """
        Approve or reject a pending product

        Raises:
            NotFoundError: Unknown product
            InvalidTransitionError: Product is not pending
            ConcurrentUpdateError: Another review landed first
        """
        product = self.products.find_by_id(product_id)
        if product is None:
            raise NotFoundError("Product not found")

        target = next_product_status(product.status, decision)
        if not self.products.transition_status(product_id, ProductStatus.PENDING, target):
            raise ConcurrentUpdateError("Product was reviewed by another request")

        logger.info(f"Product {product_id} {target.value}")
        return self.products.find_by_id(product_id)

    def delete(self, product_id: int) -> Product:
        product = self.products.find_by_id(product_id)
        if product is None or not self.products.delete(product_id):
            raise NotFoundError("Product not found")
        logger.info(f"Product {product_id} deleted")
        return product
