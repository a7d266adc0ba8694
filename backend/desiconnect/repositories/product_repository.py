"""
Product Repository - Data Access Layer for Products

Handles all database queries for products and returns Product domain models.
"""
from typing import List, Optional, Tuple

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.orm import Session, joinedload

from desiconnect.domain.product import Product, ProductCreate, ProductUpdate
from desiconnect.domain.workflow import ProductStatus, SellerApprovalStatus
from desiconnect.models.cart import CartItem as CartItemModel
from desiconnect.models.order import Order as OrderModel
from desiconnect.models.product import Product as ProductModel
from desiconnect.models.user import User as UserModel


class ProductRepository:
    """
    Repository for Product data access

    All product queries are centralized here. Status changes go through
    `transition_status`, which only succeeds when the row is still in the
    expected status.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(
        self,
        product_id: int,
        status: Optional[ProductStatus] = None,
        approved_sellers_only: bool = False,
    ) -> Optional[Product]:
        """
        Find product by ID

        Args:
            product_id: Product ID
            status: When given, only return the product if it has this status
            approved_sellers_only: Hide products whose seller is not approved

        Returns:
            Product or None if not found
        """
        query = (
            select(ProductModel)
            .options(joinedload(ProductModel.seller))
            .where(ProductModel.id == product_id)
        )
        if status is not None:
            query = query.where(ProductModel.status == ProductStatus(status).value)
        if approved_sellers_only:
            query = query.where(self._seller_is_approved())

        row = self.db.scalars(query).first()
        return self._to_domain(row) if row else None

    def find_all(
        self,
        seller_id: Optional[int] = None,
        status: Optional[ProductStatus] = None,
        category: Optional[str] = None,
        search: Optional[str] = None,
        approved_sellers_only: bool = False,
        limit: int = 100,
        offset: int = 0,
    ) -> Tuple[List[Product], int]:
        """
        Find products with filters

        Args:
            seller_id: Only products of this seller
            status: Filter by approval status
            category: Case-insensitive category match
            search: Search in name, description and category
            approved_sellers_only: Hide products whose seller is not approved
            limit: Maximum results to return
            offset: Number of results to skip

        Returns:
            Tuple of (list of products, total count)
        """
        conditions = []

        if seller_id is not None:
            conditions.append(ProductModel.seller_id == seller_id)

        if status is not None:
            conditions.append(ProductModel.status == ProductStatus(status).value)

        if category:
            conditions.append(func.lower(ProductModel.category) == category.strip().lower())

        if search:
            pattern = f"%{search.strip()}%"
            conditions.append(or_(
                ProductModel.name.ilike(pattern),
                ProductModel.description.ilike(pattern),
                ProductModel.category.ilike(pattern),
            ))

        if approved_sellers_only:
            conditions.append(self._seller_is_approved())

        total = self.db.scalar(select(func.count(ProductModel.id)).where(*conditions)) or 0

        rows = self.db.scalars(
            select(ProductModel)
            .options(joinedload(ProductModel.seller))
            .where(*conditions)
            .order_by(ProductModel.created_at.desc(), ProductModel.id.desc())
            .limit(limit)
            .offset(offset)
        ).all()

        return [self._to_domain(row) for row in rows], total

    def find_by_ids(self, product_ids: List[int], approved_sellers_only: bool = False) -> List[Product]:
        if not product_ids:
            return []
        query = select(ProductModel).where(ProductModel.id.in_(product_ids))
        if approved_sellers_only:
            query = query.where(self._seller_is_approved())
        rows = self.db.scalars(query).all()
        return [self._to_domain(row) for row in rows]

    def get_owner_id(self, product_id: int) -> Optional[int]:
        return self.db.scalar(select(ProductModel.seller_id).where(ProductModel.id == product_id))

    def create(self, seller_id: int, data: ProductCreate) -> Product:
        """Insert a product; new listings always start as pending"""
        row = ProductModel(
            seller_id=seller_id,
            status=ProductStatus.PENDING.value,
            **data.model_dump(),
        )
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return self._to_domain(row)

    def update(self, product_id: int, data: ProductUpdate) -> Optional[Product]:
        """
        Apply a seller edit to the product content

        Status is never written here; it only changes through
        `transition_status`.
        """
        row = self.db.get(ProductModel, product_id)
        if row is None:
            return None

        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if changes:
            for key, value in changes.items():
                setattr(row, key, value)
            self.db.commit()
            self.db.refresh(row)

        return self._to_domain(row)

    def transition_status(self, product_id: int, expected: ProductStatus, new: ProductStatus) -> bool:
        """
        Compare-and-set the product status

        Returns:
            True if the row was in `expected` and is now `new`
        """
        result = self.db.execute(
            update(ProductModel)
            .where(
                ProductModel.id == product_id,
                ProductModel.status == ProductStatus(expected).value,
            )
            .values(status=ProductStatus(new).value)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return result.rowcount == 1

    def delete(self, product_id: int) -> bool:
        """
        Delete a product

        Orders keep their product name/price snapshot with product_id
        cleared; cart lines for the product are removed.
        """
        row = self.db.get(ProductModel, product_id)
        if row is None:
            return False

        self.db.execute(
            update(OrderModel)
            .where(OrderModel.product_id == product_id)
            .values(product_id=None)
            .execution_options(synchronize_session=False)
        )
        self.db.execute(
            delete(CartItemModel)
            .where(CartItemModel.product_id == product_id)
            .execution_options(synchronize_session=False)
        )
        self.db.delete(row)
        self.db.commit()
        return True

    def count(self, seller_id: Optional[int] = None, status: Optional[ProductStatus] = None) -> int:
        query = select(func.count(ProductModel.id))
        if seller_id is not None:
            query = query.where(ProductModel.seller_id == seller_id)
        if status is not None:
            query = query.where(ProductModel.status == ProductStatus(status).value)
        return self.db.scalar(query) or 0

    @staticmethod
    def _seller_is_approved():
        return ProductModel.seller_id.in_(
            select(UserModel.id).where(UserModel.approval_status == SellerApprovalStatus.APPROVED.value)
        )

    @staticmethod
    def _to_domain(row: ProductModel) -> Product:
        product = Product.model_validate(row)
        if row.seller is not None:
            product.seller_business_name = row.seller.business_name
        return product
