"""
User Domain Models

Account data returned by the API plus the request bodies used to create
and edit accounts. Password hashes never leave the repository layer.
"""
from pydantic import BaseModel, Field, ConfigDict, EmailStr
from typing import Optional
from datetime import datetime

from desiconnect.domain.workflow import UserRole, SellerApprovalStatus


class User(BaseModel):
    """
    User domain model - any of admin, seller or customer

    Seller fields (business_name, gst, approval_status, ...) are None for
    the other roles.
    """

    id: int = Field(..., description="User ID")
    email: str = Field(..., description="Login email")
    role: UserRole = Field(..., description="admin, seller or customer")

    name: Optional[str] = Field(None, description="Display name")
    phone: Optional[str] = Field(None, description="Contact phone")
    address: Optional[str] = Field(None, description="Postal address")

    business_name: Optional[str] = Field(None, description="Seller business name")
    business_address: Optional[str] = Field(None, description="Seller business address")
    warehouse_address: Optional[str] = Field(None, description="Seller warehouse address")
    zip_code: Optional[str] = Field(None, description="Seller zip code")
    gst: Optional[str] = Field(None, description="Seller GST number")
    approval_status: Optional[SellerApprovalStatus] = Field(None, description="Seller onboarding status")

    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_approved_seller(self) -> bool:
        return self.role is UserRole.SELLER and self.approval_status is SellerApprovalStatus.APPROVED

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")


class RegisterRequest(BaseModel):
    """Self-registration body for customers and admins"""
    email: EmailStr
    password: str = Field(..., min_length=6)
    name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class SellerCreate(BaseModel):
    """Seller account body (self-registration or created by an admin)"""
    email: EmailStr
    password: str = Field(..., min_length=6)
    business_name: str = Field(..., min_length=2)
    name: Optional[str] = None
    phone: Optional[str] = None
    business_address: Optional[str] = None
    warehouse_address: Optional[str] = None
    zip_code: Optional[str] = None
    gst: Optional[str] = None


class SellerUpdate(BaseModel):
    """Admin edit of a seller account"""
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6)
    business_name: Optional[str] = Field(None, min_length=2)
    name: Optional[str] = None
    phone: Optional[str] = None
    business_address: Optional[str] = None
    warehouse_address: Optional[str] = None
    zip_code: Optional[str] = None
    gst: Optional[str] = None


class SellerProfileUpdate(BaseModel):
    """Seller editing their own profile"""
    business_name: Optional[str] = Field(None, min_length=2)
    name: Optional[str] = None
    phone: Optional[str] = None
    business_address: Optional[str] = None
    warehouse_address: Optional[str] = None
    zip_code: Optional[str] = None
    gst: Optional[str] = None


class CustomerProfileUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class PasswordResetRequest(BaseModel):
    email: EmailStr
