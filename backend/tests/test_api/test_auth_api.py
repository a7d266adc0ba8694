"""
API tests for /api/auth
"""
from desiconnect.core.config import settings


class TestLoginEndpoints:

    def test_customer_login(self, client, customer):
        response = client.post("/api/auth/customer/login",
                               json={"email": customer.email, "password": "secret123"})

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "success"
        assert body["data"]["token"]
        assert body["data"]["user"]["email"] == customer.email
        assert "password_hash" not in body["data"]["user"]

    def test_bad_credentials_use_message_envelope(self, client, admin):
        response = client.post("/api/auth/admin/login",
                               json={"email": admin.email, "password": "wrong"})

        assert response.status_code == 401
        assert response.json() == {"message": "Invalid email or password"}

    def test_token_from_login_opens_portal(self, client, seller):
        token = client.post("/api/auth/seller/login",
                            json={"email": seller.email, "password": "secret123"}).json()["data"]["token"]

        response = client.get("/api/seller/profile", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        assert response.json()["data"]["business_name"] == "Spice Route"

    def test_invalid_body_is_422(self, client):
        response = client.post("/api/auth/customer/login", json={"email": "not-an-email"})

        assert response.status_code == 422
        body = response.json()
        assert body["message"] == "Validation error"
        assert {error["field"] for error in body["errors"]} >= {"body.email", "body.password"}


class TestRegistrationEndpoints:

    def test_customer_register_returns_token(self, client):
        response = client.post("/api/auth/customer/register", json={
            "email": "new@desiconnect.com", "password": "secret123", "name": "Ravi",
        })

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["token"]
        assert data["user"]["role"] == "customer"

    def test_duplicate_registration(self, client, customer):
        response = client.post("/api/auth/customer/register",
                               json={"email": customer.email, "password": "secret123"})

        assert response.status_code == 400
        assert response.json()["message"] == "Email already registered"

    def test_seller_register_is_pending(self, client, sample_seller_data):
        response = client.post("/api/auth/seller/register", json=sample_seller_data)

        assert response.status_code == 201
        assert response.json()["data"]["approval_status"] == "pending"

    def test_admin_register_disabled_by_default(self, client):
        response = client.post("/api/auth/admin/register",
                               json={"email": "boss@desiconnect.com", "password": "secret123"})

        assert response.status_code == 403

    def test_admin_register_when_enabled(self, client, monkeypatch):
        monkeypatch.setattr(settings, "ALLOW_ADMIN_REGISTRATION", True)

        response = client.post("/api/auth/admin/register",
                               json={"email": "boss@desiconnect.com", "password": "secret123"})

        assert response.status_code == 201
        assert response.json()["data"]["role"] == "admin"


class TestPasswordResetEndpoints:

    def test_same_response_for_known_and_unknown_email(self, client, customer):
        known = client.post("/api/auth/customer/reset-password", json={"email": customer.email})
        unknown = client.post("/api/auth/customer/reset-password", json={"email": "ghost@desiconnect.com"})

        assert known.status_code == unknown.status_code == 200
        assert known.json() == unknown.json()

    def test_reset_invalidates_old_password(self, client, customer):
        client.post("/api/auth/customer/reset-password", json={"email": customer.email})

        response = client.post("/api/auth/customer/login",
                               json={"email": customer.email, "password": "secret123"})

        assert response.status_code == 401
