"""
Customer orders (one order per product line at checkout)
"""
from sqlalchemy import Column, Integer, String, DateTime, Text, DECIMAL, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from desiconnect.core.database import Base


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)

    # Relationships
    customer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    seller_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="SET NULL"), index=True)

    # Product data at time of checkout
    product_name = Column(String(255), nullable=False)
    unit_price = Column(DECIMAL(12, 2), nullable=False)

    quantity = Column(Integer, nullable=False)
    total_price = Column(DECIMAL(12, 2), nullable=False)
    address = Column(Text, nullable=False)
    message = Column(Text)

    # Fulfillment: 'placed' -> 'ready' -> 'fulfilled'
    status = Column(String(20), nullable=False, default="placed", index=True)
    tracking_number = Column(String(100))

    # Metadata
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    customer = relationship("User", foreign_keys=[customer_id])
    seller = relationship("User", foreign_keys=[seller_id])
    product = relationship("Product")
