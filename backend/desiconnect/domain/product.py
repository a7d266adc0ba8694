"""
Product Domain Models

Represents a product listed by a seller and moderated by an admin.
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime
from decimal import Decimal

from desiconnect.domain.workflow import ProductStatus


class Product(BaseModel):
    """
    Product domain model

    Fields:
        id: Product ID
        seller_id: Owning seller
        name: Product name
        description: Long description (optional)
        price: Unit price
        category: Catalog category (apparel, accessories, festivities, ...)
        image: Public path of the uploaded image (/uploads/...)
        status: pending, approved or rejected

        # From seller (optional, from JOIN)
        seller_business_name: Seller business name
    """

    id: int = Field(..., description="Product ID")
    seller_id: int = Field(..., description="Owning seller ID")
    name: str = Field(..., description="Product name")
    description: Optional[str] = Field(None, description="Product description")
    price: Decimal = Field(..., description="Unit price", ge=0)
    category: Optional[str] = Field(None, description="Product category")
    image: Optional[str] = Field(None, description="Image URL path")
    status: ProductStatus = Field(..., description="Approval status")

    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    seller_business_name: Optional[str] = Field(None, description="Seller business name (from JOIN)")

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_public(self) -> bool:
        """Only approved products are visible to customers"""
        return self.status is ProductStatus.APPROVED

    def to_dict(self) -> dict:
        """Convert to JSON-ready dict with price as float"""
        data = self.model_dump(mode="json")
        data['price'] = float(self.price)
        return data


class ProductCreate(BaseModel):
    """Fields a seller provides when listing a product"""
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    price: Decimal = Field(..., gt=0)
    category: Optional[str] = Field(None, max_length=100)
    image: Optional[str] = None


class ProductUpdate(BaseModel):
    """Partial product edit by its seller; status is never editable here"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, gt=0)
    category: Optional[str] = Field(None, max_length=100)
    image: Optional[str] = None
