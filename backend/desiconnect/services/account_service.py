"""
Account Service
Registration, login, password reset and seller onboarding

Handles:
- Per-portal registration and login (admin, seller, customer)
- Temporary-password resets delivered by email
- Admin management of seller accounts and their approval status
"""
import logging
import secrets
import string
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from desiconnect.core.auth import create_access_token, hash_password, verify_password
from desiconnect.domain.errors import (
    AuthenticationError,
    ConcurrentUpdateError,
    NotFoundError,
    ValidationFailedError,
)
from desiconnect.domain.user import User, RegisterRequest, SellerCreate, SellerUpdate
from desiconnect.domain.workflow import UserRole, SellerApprovalStatus, next_seller_status
from desiconnect.repositories.user_repository import UserRepository
from desiconnect.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

TEMP_PASSWORD_LENGTH = 10


def generate_temporary_password(length: int = TEMP_PASSWORD_LENGTH) -> str:
    alphabet = string.ascii_letters + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


class AccountService:

    def __init__(self, db: Session, notifier: Optional[NotificationService] = None):
        self.users = UserRepository(db)
        self.notifier = notifier or NotificationService()

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def register_customer(self, data: RegisterRequest) -> User:
        return self._register(UserRole.CUSTOMER, data.email, data.password, data.model_dump(exclude={"email", "password"}))

    def register_admin(self, data: RegisterRequest) -> User:
        return self._register(UserRole.ADMIN, data.email, data.password, data.model_dump(exclude={"email", "password"}))

    def register_seller(self, data: SellerCreate, approved: bool = False) -> User:
        """
        Create a seller account

        Args:
            data: Seller profile and credentials
            approved: True when an admin creates the seller; self-registered
                sellers wait in 'pending' until an admin approves them
        """
        profile = data.model_dump(exclude={"email", "password"})
        profile["approval_status"] = (
            SellerApprovalStatus.APPROVED if approved else SellerApprovalStatus.PENDING
        )
        return self._register(UserRole.SELLER, data.email, data.password, profile)

    def _register(self, role: UserRole, email: str, password: str, profile: dict) -> User:
        if self.users.find_by_email(email) is not None:
            raise ValidationFailedError("Email already registered")

        try:
            user = self.users.create(email, hash_password(password), role, **profile)
        except IntegrityError:
            # Concurrent registration of the same email
            raise ValidationFailedError("Email already registered")

        logger.info(f"Registered {role.value} account {user.email} (id={user.id})")

        self.notifier.send_welcome_email(user.email, user.name or user.business_name, role)
        return user

    # -------------------------------------------------------------------------
    # Login / password reset
    # -------------------------------------------------------------------------

    def login(self, role: UserRole, email: str, password: str) -> Tuple[str, User]:
        """
        Authenticate against one portal

        Returns:
            (token, user)

        Raises:
            AuthenticationError: Unknown email, wrong password, wrong portal,
                or a rejected seller
        """
        found = self.users.find_credentials(email)
        if found is None:
            logger.warning(f"Failed {role.value} login for unknown email {email}")
            raise AuthenticationError("Invalid email or password")

        user, password_hash = found
        if user.role is not UserRole(role) or not verify_password(password, password_hash):
            logger.warning(f"Failed {role.value} login for {email}")
            raise AuthenticationError("Invalid email or password")

        if user.role is UserRole.SELLER and user.approval_status is SellerApprovalStatus.REJECTED:
            raise AuthenticationError("Seller account has been rejected")

        token = create_access_token(user.id, user.email, user.role)
        logger.info(f"{role.value} {user.email} logged in")
        return token, user

    def reset_password(self, role: UserRole, email: str) -> None:
        """
        Replace the password with a temporary one and email it

        Unknown emails (or emails of another role) are silently ignored so
        the endpoint does not reveal which accounts exist.
        """
        user = self.users.find_by_email(email)
        if user is None or user.role is not UserRole(role):
            logger.info(f"Password reset requested for unknown {role.value} email {email}")
            return

        temporary = generate_temporary_password()
        self.users.set_password_hash(user.id, hash_password(temporary))
        logger.info(f"Password reset for {role.value} {user.email}")
        self.notifier.send_password_reset_email(user.email, user.name or user.business_name, temporary, role)

    # -------------------------------------------------------------------------
    # Profiles and seller management
    # -------------------------------------------------------------------------

    def get_profile(self, user_id: int, role: UserRole) -> User:
        user = self.users.find_by_id(user_id, role=role)
        if user is None:
            raise NotFoundError(f"{UserRole(role).value.capitalize()} not found")
        return user

    def update_profile(self, user_id: int, role: UserRole, **fields) -> User:
        self.get_profile(user_id, role)
        return self.users.update(user_id, **fields)

    def list_sellers(self, approval_status: Optional[SellerApprovalStatus] = None) -> List[User]:
        return self.users.find_all(role=UserRole.SELLER, approval_status=approval_status)

    def update_seller(self, seller_id: int, data: SellerUpdate) -> User:
        seller = self.get_profile(seller_id, UserRole.SELLER)

        fields = data.model_dump(exclude_unset=True, exclude={"password"})
        if data.email and data.email.lower() != seller.email:
            if self.users.find_by_email(data.email) is not None:
                raise ValidationFailedError("Email already registered")
        if data.password:
            fields["password_hash"] = hash_password(data.password)

        try:
            return self.users.update(seller_id, **fields)
        except IntegrityError:
            raise ValidationFailedError("Email already registered")

    def review_seller(self, seller_id: int, decision: str) -> User:
        """Approve or reject a seller account ('approve' / 'reject')"""
        seller = self.get_profile(seller_id, UserRole.SELLER)
        target = next_seller_status(seller.approval_status, decision)

        updated = self.users.update(seller_id, approval_status=target)
        if updated is None:
            raise ConcurrentUpdateError("Seller was removed during review")

        logger.info(f"Seller {seller.email} {target.value}")
        return updated
