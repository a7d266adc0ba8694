"""
Default accounts created at startup
"""
import logging

from sqlalchemy.orm import Session

from desiconnect.core.auth import hash_password
from desiconnect.core.config import settings
from desiconnect.domain.workflow import UserRole
from desiconnect.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


def seed_default_accounts(db: Session) -> int:
    """
    Create the default admin and customer accounts if missing

    Returns:
        Number of accounts created
    """
    users = UserRepository(db)
    defaults = [
        (UserRole.ADMIN, settings.DEFAULT_ADMIN_EMAIL, settings.DEFAULT_ADMIN_PASSWORD, "Admin"),
        (UserRole.CUSTOMER, settings.DEFAULT_CUSTOMER_EMAIL, settings.DEFAULT_CUSTOMER_PASSWORD, "Test Customer"),
    ]

    created = 0
    for role, email, password, name in defaults:
        if users.find_by_email(email) is not None:
            logger.info(f"Default {role.value} account already exists.")
            continue
        users.create(email, hash_password(password), role, name=name)
        logger.info(f"Default {role.value} created with email: {email}")
        created += 1
    return created
