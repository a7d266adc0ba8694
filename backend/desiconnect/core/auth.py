"""
Authentication and authorization dependencies for DesiConnect
Issues and validates JWT tokens and gates endpoints by role and ownership
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError, ExpiredSignatureError
from passlib.context import CryptContext
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from desiconnect.core.config import settings
from desiconnect.core.database import get_db
from desiconnect.domain.workflow import SellerApprovalStatus, UserRole
from desiconnect.repositories.order_repository import OrderRepository
from desiconnect.repositories.product_repository import ProductRepository
from desiconnect.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

# Security scheme for bearer tokens
security = HTTPBearer(auto_error=False)

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


class TokenUser(BaseModel):
    """User data extracted from JWT token"""
    id: int
    email: str
    role: UserRole


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return pwd_context.verify(password, password_hash)
    except ValueError:
        # Unrecognized or corrupt hash
        return False


def create_access_token(user_id: int, email: str, role: UserRole, expires_in: Optional[timedelta] = None) -> str:
    """
    Sign a token for a user

    Payload:
    {
        "id": 12,
        "sub": "12",
        "email": "seller@desiconnect.com",
        "role": "seller",
        "iat": 1234567890,
        "exp": 1234654290
    }
    """
    now = datetime.now(timezone.utc)
    expires_at = now + (expires_in or timedelta(hours=settings.JWT_EXPIRES_HOURS))
    payload = {
        "id": user_id,
        "sub": str(user_id),
        "email": email,
        "role": UserRole(role).value,
        "iat": now,
        "exp": expires_at,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_access_token(token: str) -> TokenUser:
    """
    Validate signature and expiry and return the identity in the token

    Raises:
        HTTPException 401 for expired, malformed or incomplete tokens
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise _unauthorized("Token has expired")
    except JWTError as e:
        logger.info(f"Rejected token: {e}")
        raise _unauthorized("Invalid or expired token")

    user_id = payload.get("id") or payload.get("sub")
    email = payload.get("email")
    role = payload.get("role")

    if not user_id or not email or role not in {r.value for r in UserRole}:
        raise _unauthorized("Invalid token payload")

    try:
        return TokenUser(id=int(user_id), email=email, role=role)
    except (TypeError, ValueError):
        raise _unauthorized("Invalid token payload")


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> TokenUser:
    """
    Dependency that extracts and validates the current user from JWT.

    Usage:
        @router.get("/protected")
        async def protected_route(user: TokenUser = Depends(get_current_user)):
            return {"message": f"Hello {user.email}"}
    """
    if not credentials:
        raise _unauthorized("Authentication required")

    user = decode_access_token(credentials.credentials)
    logger.info(
        f"{user.role.value.upper()} {user.email} accessed {request.method} {request.url.path}"
    )
    return user


def require_role(*roles: UserRole):
    """
    Dependency factory for role-based access control.

    Roles are not hierarchical: an admin token does not pass a seller gate.

    Usage:
        @router.put("/orders/{order_id}/ready")
        def mark_ready(order_id: int, user: TokenUser = Depends(require_role(UserRole.SELLER))):
            ...
    """
    allowed = {UserRole(role) for role in roles}

    async def role_checker(user: TokenUser = Depends(get_current_user)) -> TokenUser:
        if user.role not in allowed:
            names = ", ".join(sorted(role.value for role in allowed))
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. {names.capitalize()} permission required.",
            )
        return user

    return role_checker


# Convenience dependencies for common role requirements
require_admin = require_role(UserRole.ADMIN)
require_seller = require_role(UserRole.SELLER)
require_customer = require_role(UserRole.CUSTOMER)


def _lookup_failed(e: Exception) -> HTTPException:
    logger.error(f"Access check failed: {e}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Server error while verifying access",
    )


def require_active_seller(
    user: TokenUser = Depends(require_seller),
    db: Session = Depends(get_db),
) -> TokenUser:
    """
    Seller gate that re-reads the account on every request

    A token issued before an admin rejected the seller stops working
    immediately instead of at expiry.
    """
    try:
        account = UserRepository(db).find_by_id(user.id, role=UserRole.SELLER)
    except SQLAlchemyError as e:
        raise _lookup_failed(e)

    if account is None or account.approval_status is SellerApprovalStatus.REJECTED:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Seller account has been rejected",
        )
    return user


# =============================================================================
# Ownership checks
# =============================================================================

def verify_seller_owns_product(
    product_id: int,
    user: TokenUser = Depends(require_active_seller),
    db: Session = Depends(get_db),
) -> TokenUser:
    """Allow the request only if the product belongs to the calling seller"""
    try:
        owner_id = ProductRepository(db).get_owner_id(product_id)
    except SQLAlchemyError as e:
        raise _lookup_failed(e)

    if owner_id is None or owner_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have permission to access this product",
        )
    return user


def verify_seller_owns_order(
    order_id: int,
    user: TokenUser = Depends(require_active_seller),
    db: Session = Depends(get_db),
) -> TokenUser:
    """Allow the request only if the order is fulfilled by the calling seller"""
    try:
        owners = OrderRepository(db).get_owner_ids(order_id)
    except SQLAlchemyError as e:
        raise _lookup_failed(e)

    if owners is None or owners[1] != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have permission to access this order",
        )
    return user


def verify_customer_owns_order(
    order_id: int,
    user: TokenUser = Depends(require_customer),
    db: Session = Depends(get_db),
) -> TokenUser:
    """Allow the request only if the order was placed by the calling customer"""
    try:
        owners = OrderRepository(db).get_owner_ids(order_id)
    except SQLAlchemyError as e:
        raise _lookup_failed(e)

    if owners is None or owners[0] != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have permission to access this order",
        )
    return user
