"""
Authentication API endpoints for DesiConnect
- Login, registration and password reset for each portal (admin, seller, customer)
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from desiconnect.core.auth import create_access_token
from desiconnect.core.config import settings
from desiconnect.core.database import get_db
from desiconnect.core.rate_limit import auth_rate_limit
from desiconnect.domain.user import LoginRequest, PasswordResetRequest, RegisterRequest, SellerCreate
from desiconnect.domain.workflow import UserRole
from desiconnect.services.account_service import AccountService

router = APIRouter(prefix="/api/auth", tags=["Authentication"])

RESET_MESSAGE = "If an account exists for this email, a new password has been sent to it"


def _login(role: UserRole, body: LoginRequest, db: Session) -> dict:
    token, user = AccountService(db).login(role, body.email, body.password)
    return {
        "status": "success",
        "data": {"token": token, "user": user.to_dict()},
    }


def _reset(role: UserRole, body: PasswordResetRequest, db: Session) -> dict:
    AccountService(db).reset_password(role, body.email)
    return {"status": "success", "message": RESET_MESSAGE}


# =============================================================================
# Admin
# =============================================================================

@router.post("/admin/login", dependencies=[Depends(auth_rate_limit)])
def login_admin(body: LoginRequest, db: Session = Depends(get_db)):
    return _login(UserRole.ADMIN, body, db)


@router.post("/admin/register", status_code=status.HTTP_201_CREATED)
def register_admin(body: RegisterRequest, db: Session = Depends(get_db)):
    """Open admin registration, disabled unless ALLOW_ADMIN_REGISTRATION is set"""
    if not settings.ALLOW_ADMIN_REGISTRATION:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin registration is disabled",
        )
    user = AccountService(db).register_admin(body)
    return {"status": "success", "data": user.to_dict()}


@router.post("/admin/reset-password", dependencies=[Depends(auth_rate_limit)])
def reset_admin_password(body: PasswordResetRequest, db: Session = Depends(get_db)):
    return _reset(UserRole.ADMIN, body, db)


# =============================================================================
# Seller
# =============================================================================

@router.post("/seller/login", dependencies=[Depends(auth_rate_limit)])
def login_seller(body: LoginRequest, db: Session = Depends(get_db)):
    return _login(UserRole.SELLER, body, db)


@router.post("/seller/register", status_code=status.HTTP_201_CREATED)
def register_seller(body: SellerCreate, db: Session = Depends(get_db)):
    """Self-registered sellers start pending admin approval"""
    user = AccountService(db).register_seller(body, approved=False)
    return {"status": "success", "data": user.to_dict()}


@router.post("/seller/reset-password", dependencies=[Depends(auth_rate_limit)])
def reset_seller_password(body: PasswordResetRequest, db: Session = Depends(get_db)):
    return _reset(UserRole.SELLER, body, db)


# =============================================================================
# Customer
# =============================================================================

@router.post("/customer/register", status_code=status.HTTP_201_CREATED)
def register_customer(body: RegisterRequest, db: Session = Depends(get_db)):
    """Customers are signed in right after registering"""
    user = AccountService(db).register_customer(body)
    token = create_access_token(user.id, user.email, user.role)
    return {"status": "success", "data": {"token": token, "user": user.to_dict()}}


@router.post("/customer/login", dependencies=[Depends(auth_rate_limit)])
def login_customer(body: LoginRequest, db: Session = Depends(get_db)):
    return _login(UserRole.CUSTOMER, body, db)


@router.post("/customer/reset-password", dependencies=[Depends(auth_rate_limit)])
def reset_customer_password(body: PasswordResetRequest, db: Session = Depends(get_db)):
    return _reset(UserRole.CUSTOMER, body, db)
