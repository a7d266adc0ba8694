"""
Order Domain Models

Represents customer orders and the request bodies of the checkout and
fulfillment steps.
"""
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal

from desiconnect.domain.workflow import OrderStatus


class Order(BaseModel):
    """
    Order domain model - one product line bought by a customer

    Fields:
        id: Order ID
        customer_id: Buyer
        seller_id: Seller who fulfills the order
        product_id: Product bought (None once the product is deleted)
        product_name: Product name at checkout
        unit_price: Product price at checkout
        quantity: Units ordered
        total_price: unit_price * quantity
        address: Shipping address
        message: Optional note from the customer
        status: placed, ready or fulfilled
        tracking_number: Carrier tracking number, set at fulfillment

        # Related data (optional, from JOINs)
        customer_name: Customer name
        customer_email: Customer email
        seller_business_name: Seller business name
    """

    id: int = Field(..., description="Order ID")
    customer_id: int = Field(..., description="Customer ID")
    seller_id: int = Field(..., description="Seller ID")
    product_id: Optional[int] = Field(None, description="Product ID")
    product_name: str = Field(..., description="Product name at checkout")
    unit_price: Decimal = Field(..., description="Unit price at checkout", ge=0)
    quantity: int = Field(..., description="Quantity ordered", ge=1)
    total_price: Decimal = Field(..., description="Order total", ge=0)
    address: str = Field(..., description="Shipping address")
    message: Optional[str] = Field(None, description="Customer note")

    status: OrderStatus = Field(..., description="Fulfillment status")
    tracking_number: Optional[str] = Field(None, description="Carrier tracking number")

    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    customer_name: Optional[str] = Field(None, description="Customer name (from JOIN)")
    customer_email: Optional[str] = Field(None, description="Customer email (from JOIN)")
    seller_business_name: Optional[str] = Field(None, description="Seller business name (from JOIN)")

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_fulfilled(self) -> bool:
        return self.status is OrderStatus.FULFILLED

    def to_dict(self) -> dict:
        """Convert to JSON-ready dict with money fields as floats"""
        data = self.model_dump(mode="json")
        data['unit_price'] = float(self.unit_price)
        data['total_price'] = float(self.total_price)
        data['is_fulfilled'] = self.is_fulfilled
        return data


class CheckoutItem(BaseModel):
    product_id: int
    quantity: int = Field(1, ge=1)
    message: Optional[str] = None


class CheckoutRequest(BaseModel):
    """
    Checkout body

    An empty `items` list checks out the customer's stored cart.
    """
    address: str = Field(..., min_length=5)
    items: List[CheckoutItem] = Field(default_factory=list)


class TrackingUpdate(BaseModel):
    tracking_number: str = Field(..., min_length=1, max_length=100)

    @field_validator("tracking_number")
    @classmethod
    def strip_tracking_number(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Tracking number cannot be blank")
        return value


class CartItem(BaseModel):
    """Cart line, enriched with product data when read back"""
    product_id: int
    quantity: int = Field(1, ge=1)
    message: Optional[str] = None

    name: Optional[str] = None
    price: Optional[float] = None
    image: Optional[str] = None


class CartUpdate(BaseModel):
    """Replaces the whole cart"""
    items: List[CheckoutItem] = Field(default_factory=list)
