"""
User Repository - Data Access Layer for accounts

Handles all queries on the users table and returns User domain models.
"""
from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from desiconnect.domain.user import User
from desiconnect.domain.workflow import UserRole, SellerApprovalStatus
from desiconnect.models.user import User as UserModel


class UserRepository:
    """
    Repository for User data access

    Emails are stored lower-cased so lookups are case-insensitive.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, user_id: int, role: Optional[UserRole] = None) -> Optional[User]:
        """
        Find a user by ID, optionally restricted to one role

        Returns:
            User or None if not found (or the role does not match)
        """
        row = self.db.get(UserModel, user_id)
        if row is None or (role is not None and row.role != UserRole(role).value):
            return None
        return User.model_validate(row)

    def find_by_email(self, email: str) -> Optional[User]:
        row = self._row_by_email(email)
        return User.model_validate(row) if row else None

    def find_credentials(self, email: str) -> Optional[Tuple[User, str]]:
        """
        Find a user and their password hash for login

        Returns:
            (User, password_hash) or None if the email is unknown
        """
        row = self._row_by_email(email)
        if row is None:
            return None
        return User.model_validate(row), row.password_hash

    def find_all(
        self,
        role: Optional[UserRole] = None,
        approval_status: Optional[SellerApprovalStatus] = None,
    ) -> List[User]:
        """Find users, newest first, filtered by role and seller approval status"""
        query = select(UserModel)
        if role is not None:
            query = query.where(UserModel.role == UserRole(role).value)
        if approval_status is not None:
            query = query.where(UserModel.approval_status == SellerApprovalStatus(approval_status).value)
        query = query.order_by(UserModel.created_at.desc(), UserModel.id.desc())

        return [User.model_validate(row) for row in self.db.scalars(query).all()]

    def create(self, email: str, password_hash: str, role: UserRole, **profile) -> User:
        """
        Insert a new user

        Args:
            email: Login email (lower-cased before storing)
            password_hash: bcrypt hash
            role: admin, seller or customer
            **profile: Optional profile columns (name, phone, business_name, ...)

        Raises:
            sqlalchemy.exc.IntegrityError: The email is already taken; the
                session is rolled back before the error propagates
        """
        row = UserModel(
            email=email.strip().lower(),
            password_hash=password_hash,
            role=UserRole(role).value,
            **self._clean(profile),
        )
        self.db.add(row)
        self._commit()
        self.db.refresh(row)
        return User.model_validate(row)

    def update(self, user_id: int, **fields) -> Optional[User]:
        """
        Update profile columns of a user

        None values are ignored so partial updates can be passed straight
        from request bodies.
        """
        row = self.db.get(UserModel, user_id)
        if row is None:
            return None

        fields = {k: v for k, v in self._clean(fields).items() if v is not None}
        if "email" in fields:
            fields["email"] = fields["email"].strip().lower()
        for key, value in fields.items():
            setattr(row, key, value)

        self._commit()
        self.db.refresh(row)
        return User.model_validate(row)

    def set_password_hash(self, user_id: int, password_hash: str) -> bool:
        row = self.db.get(UserModel, user_id)
        if row is None:
            return False
        row.password_hash = password_hash
        self.db.commit()
        return True

    def count(
        self,
        role: Optional[UserRole] = None,
        approval_status: Optional[SellerApprovalStatus] = None,
    ) -> int:
        query = select(func.count(UserModel.id))
        if role is not None:
            query = query.where(UserModel.role == UserRole(role).value)
        if approval_status is not None:
            query = query.where(UserModel.approval_status == SellerApprovalStatus(approval_status).value)
        return self.db.scalar(query) or 0

    def _commit(self):
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise

    def _row_by_email(self, email: str) -> Optional[UserModel]:
        return self.db.scalars(
            select(UserModel).where(UserModel.email == email.strip().lower())
        ).first()

    @staticmethod
    def _clean(fields: dict) -> dict:
        """Drop keys that are not user columns and unwrap enums"""
        allowed = set(UserModel.__table__.columns.keys()) - {"id", "created_at", "updated_at", "role"}
        cleaned = {}
        for key, value in fields.items():
            if key not in allowed:
                continue
            cleaned[key] = value.value if hasattr(value, "value") else value
        return cleaned
