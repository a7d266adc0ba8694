"""
Tests for AccountService: registration, login, reset and seller onboarding
"""
from unittest.mock import MagicMock, patch

import pytest

from desiconnect.core.auth import decode_access_token
from desiconnect.core.config import settings
from desiconnect.domain.errors import AuthenticationError, InvalidTransitionError, NotFoundError, ValidationFailedError
from desiconnect.domain.user import RegisterRequest, SellerCreate, SellerUpdate
from desiconnect.domain.workflow import SellerApprovalStatus, UserRole
from desiconnect.services.account_service import AccountService, generate_temporary_password
from desiconnect.services.bootstrap import seed_default_accounts


@pytest.fixture
def notifier():
    return MagicMock()


@pytest.fixture
def service(db_session, notifier):
    return AccountService(db_session, notifier=notifier)


class TestRegistration:

    def test_register_customer_sends_welcome(self, service, notifier):
        user = service.register_customer(RegisterRequest(email="priya@desiconnect.com", password="secret123", name="Priya"))

        assert user.role is UserRole.CUSTOMER
        notifier.send_welcome_email.assert_called_once_with("priya@desiconnect.com", "Priya", UserRole.CUSTOMER)

    def test_duplicate_email_rejected(self, service, customer):
        with pytest.raises(ValidationFailedError, match="Email already registered"):
            service.register_customer(RegisterRequest(email=customer.email.upper(), password="secret123"))

    def test_concurrent_duplicate_registration_rejected(self, service, notifier, customer):
        """Test an email taken between the pre-check and the insert is a validation error"""
        # Arrange
        request = RegisterRequest(email=customer.email, password="secret123")

        # Act / Assert
        with patch.object(service.users, 'find_by_email', return_value=None):
            with pytest.raises(ValidationFailedError, match="Email already registered"):
                service.register_customer(request)

        notifier.send_welcome_email.assert_not_called()
        assert service.users.find_by_email(customer.email).id == customer.id

    def test_self_registered_seller_is_pending(self, service, sample_seller_data):
        seller = service.register_seller(SellerCreate(**sample_seller_data))

        assert seller.approval_status is SellerApprovalStatus.PENDING
        assert seller.gst == "32ABCDE1234F1Z5"

    def test_admin_created_seller_is_approved(self, service, sample_seller_data):
        seller = service.register_seller(SellerCreate(**sample_seller_data), approved=True)

        assert seller.approval_status is SellerApprovalStatus.APPROVED


class TestLogin:

    def test_login_returns_valid_token(self, service, seller):
        token, user = service.login(UserRole.SELLER, seller.email, "secret123")

        assert user.id == seller.id
        assert decode_access_token(token).role is UserRole.SELLER

    def test_wrong_password(self, service, customer):
        with pytest.raises(AuthenticationError, match="Invalid email or password"):
            service.login(UserRole.CUSTOMER, customer.email, "nope")

    def test_wrong_portal(self, service, customer):
        """Test a customer cannot sign in through the seller portal"""
        with pytest.raises(AuthenticationError):
            service.login(UserRole.SELLER, customer.email, "secret123")

    def test_rejected_seller_cannot_login(self, service, make_user):
        rejected = make_user(UserRole.SELLER, approval_status=SellerApprovalStatus.REJECTED)

        with pytest.raises(AuthenticationError, match="rejected"):
            service.login(UserRole.SELLER, rejected.email, "secret123")

    def test_pending_seller_can_login(self, service, make_user):
        pending = make_user(UserRole.SELLER, approval_status=SellerApprovalStatus.PENDING)

        _, user = service.login(UserRole.SELLER, pending.email, "secret123")

        assert user.approval_status is SellerApprovalStatus.PENDING


class TestPasswordReset:

    def test_reset_replaces_password_and_emails_it(self, service, notifier, customer):
        # Act
        service.reset_password(UserRole.CUSTOMER, customer.email)

        # Assert
        args = notifier.send_password_reset_email.call_args[0]
        assert args[0] == customer.email
        temporary = args[2]
        with pytest.raises(AuthenticationError):
            service.login(UserRole.CUSTOMER, customer.email, "secret123")
        _, user = service.login(UserRole.CUSTOMER, customer.email, temporary)
        assert user.id == customer.id

    def test_unknown_email_is_silent(self, service, notifier):
        service.reset_password(UserRole.ADMIN, "ghost@desiconnect.com")

        notifier.send_password_reset_email.assert_not_called()

    def test_temporary_password_shape(self):
        password = generate_temporary_password()

        assert len(password) == 10
        assert password.isalnum()


class TestSellerManagement:

    def test_review_seller(self, service, make_user):
        pending = make_user(UserRole.SELLER, approval_status=SellerApprovalStatus.PENDING)

        approved = service.review_seller(pending.id, "approve")

        assert approved.approval_status is SellerApprovalStatus.APPROVED
        with pytest.raises(InvalidTransitionError):
            service.review_seller(pending.id, "approve")

    def test_review_non_seller_is_not_found(self, service, customer):
        with pytest.raises(NotFoundError, match="Seller not found"):
            service.review_seller(customer.id, "approve")

    def test_update_seller_rehashes_password(self, service, seller):
        service.update_seller(seller.id, SellerUpdate(password="newpass1", phone="12345"))

        _, user = service.login(UserRole.SELLER, seller.email, "newpass1")
        assert user.phone == "12345"

    def test_update_seller_email_conflict(self, service, seller, customer):
        with pytest.raises(ValidationFailedError):
            service.update_seller(seller.id, SellerUpdate(email=customer.email))

    def test_concurrent_email_change_conflict(self, service, seller, customer):
        with patch.object(service.users, 'find_by_email', return_value=None):
            with pytest.raises(ValidationFailedError, match="Email already registered"):
                service.update_seller(seller.id, SellerUpdate(email=customer.email))

        assert service.get_profile(seller.id, UserRole.SELLER).email == seller.email


class TestBootstrap:

    def test_seeds_default_accounts_once(self, db_session):
        """Test the default admin and customer are created only when missing"""
        first = seed_default_accounts(db_session)
        second = seed_default_accounts(db_session)

        assert first == 2
        assert second == 0
        service = AccountService(db_session, notifier=MagicMock())
        _, admin = service.login(UserRole.ADMIN, settings.DEFAULT_ADMIN_EMAIL, settings.DEFAULT_ADMIN_PASSWORD)
        assert admin.name == "Admin"
