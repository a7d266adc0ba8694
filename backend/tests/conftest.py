"""
Pytest fixtures and configuration for DesiConnect backend tests

Every test runs against a fresh in-memory SQLite database. The FastAPI
app is exercised through TestClient with `get_db` overridden so requests
and fixtures share one session.
"""
import os
import tempfile

# Settings are read at import time, so the test environment must be in
# place before anything from desiconnect is imported.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENVIRONMENT"] = "development"
os.environ["SEED_DEFAULT_ACCOUNTS"] = "false"
os.environ["UPLOADS_DIR"] = tempfile.mkdtemp(prefix="desiconnect-uploads-")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from desiconnect.core.auth import create_access_token, hash_password
from desiconnect.core.database import get_db, init_db
from desiconnect.core.rate_limit import rate_limiter
from desiconnect.domain.product import ProductCreate
from desiconnect.domain.workflow import ProductStatus, SellerApprovalStatus, UserRole
from desiconnect.main import app
from desiconnect.repositories.order_repository import OrderRepository
from desiconnect.repositories.product_repository import ProductRepository
from desiconnect.repositories.user_repository import UserRepository

DEFAULT_PASSWORD = "secret123"


@pytest.fixture(scope="function")
def db_engine():
    """
    Provides an empty in-memory database with all tables created

    Scope: function (new database per test)
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine):
    """
    Provides a SQLAlchemy session bound to the test database

    Scope: function (closed after the test)
    """
    session = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)()
    yield session
    session.close()


@pytest.fixture(scope="function")
def client(db_session):
    """
    Provides a TestClient whose requests use the test session

    The lifespan is not started: tables already exist and no default
    accounts are seeded.
    """
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    rate_limiter.reset()
    yield TestClient(app)
    app.dependency_overrides.clear()
    rate_limiter.reset()


# =============================================================================
# Factories
# =============================================================================

@pytest.fixture
def make_user(db_session):
    """
    Factory creating users directly in the database

    Usage:
        seller = make_user(UserRole.SELLER, business_name="Spice Co")
    """
    counter = {"n": 0}

    def _make(role=UserRole.CUSTOMER, email=None, password=DEFAULT_PASSWORD, **profile):
        counter["n"] += 1
        email = email or f"{UserRole(role).value}{counter['n']}@desiconnect.com"
        if UserRole(role) is UserRole.SELLER:
            profile.setdefault("business_name", f"Seller Business {counter['n']}")
            profile.setdefault("approval_status", SellerApprovalStatus.APPROVED)
        profile.setdefault("name", f"User {counter['n']}")
        return UserRepository(db_session).create(email, hash_password(password), role, **profile)

    return _make


@pytest.fixture
def make_product(db_session):
    """Factory creating products, approved unless told otherwise"""

    def _make(seller, name="Masala Chai", price="12.50", category="Tea",
              status=ProductStatus.APPROVED, description="Loose leaf spiced tea"):
        repo = ProductRepository(db_session)
        product = repo.create(
            seller.id,
            ProductCreate(name=name, price=Decimal(price), category=category, description=description),
        )
        if status is not ProductStatus.PENDING:
            repo.transition_status(product.id, ProductStatus.PENDING, status)
        return repo.find_by_id(product.id)

    return _make


@pytest.fixture
def make_order(db_session):
    """Factory placing a single-line order for a product"""

    def _make(customer, product, quantity=1, address="12 MG Road, Bengaluru", message=None):
        return OrderRepository(db_session).create_many(customer.id, address, [{
            'seller_id': product.seller_id,
            'product_id': product.id,
            'product_name': product.name,
            'unit_price': product.price,
            'quantity': quantity,
            'message': message,
        }])[0]

    return _make


@pytest.fixture
def auth_headers():
    """Builds the Bearer header for a user created by `make_user`"""

    def _headers(user) -> dict:
        token = create_access_token(user.id, user.email, user.role)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def admin(make_user):
    return make_user(UserRole.ADMIN, email="admin@desiconnect.com", name="Admin")


@pytest.fixture
def seller(make_user):
    return make_user(UserRole.SELLER, email="seller@desiconnect.com", business_name="Spice Route")


@pytest.fixture
def customer(make_user):
    return make_user(UserRole.CUSTOMER, email="customer@desiconnect.com", name="Priya")


@pytest.fixture
def sample_seller_data():
    """Provides a seller registration payload"""
    return {
        "email": "newseller@desiconnect.com",
        "password": "seller123",
        "business_name": "Kerala Spices",
        "name": "Anil",
        "phone": "+91 98765 43210",
        "business_address": "Fort Kochi, Kerala",
        "warehouse_address": "Ernakulam, Kerala",
        "zip_code": "682001",
        "gst": "32ABCDE1234F1Z5",
    }
