"""
User accounts (admins, sellers, customers)
"""
from sqlalchemy import Column, Integer, String, DateTime, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from desiconnect.core.database import Base


class User(Base):
    """
    Single table for every role; seller-only columns stay NULL for
    admins and customers
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, index=True)  # 'admin', 'seller', 'customer'

    # Profile
    name = Column(String(255))
    phone = Column(String(50))
    address = Column(Text)

    # Seller profile
    business_name = Column(String(255))
    business_address = Column(Text)
    warehouse_address = Column(Text)
    zip_code = Column(String(20))
    gst = Column(String(50))
    approval_status = Column(String(20), index=True)  # 'pending', 'approved', 'rejected'

    # Metadata
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    products = relationship("Product", back_populates="seller", cascade="all, delete-orphan")
    cart = relationship("Cart", back_populates="customer", uselist=False, cascade="all, delete-orphan")
