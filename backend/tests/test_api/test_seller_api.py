"""
API tests for /api/seller
"""
import os
from unittest.mock import patch

from sqlalchemy.exc import SQLAlchemyError

from desiconnect.core.config import settings
from desiconnect.domain.workflow import ProductStatus, SellerApprovalStatus, UserRole

PNG_BYTES = b"\x89PNG\r\n\x1a\n fake image"


class TestSellerProducts:

    def test_create_product_with_image(self, client, seller, auth_headers):
        """Test multipart listing stores the image and starts pending"""
        # Act
        response = client.post(
            "/api/seller/products",
            data={"name": "Masala Chai", "price": "12.50", "category": "Tea", "description": "Spiced"},
            files={"image": ("chai.png", PNG_BYTES, "image/png")},
            headers=auth_headers(seller),
        )

        # Assert
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["status"] == "pending"
        assert data["price"] == 12.5
        assert data["image"].startswith("/uploads/")
        served = client.get(data["image"])
        assert served.status_code == 200
        assert served.content == PNG_BYTES

    def test_create_product_without_image(self, client, seller, auth_headers):
        response = client.post("/api/seller/products", data={"name": "Ghee", "price": "20"},
                               headers=auth_headers(seller))

        assert response.status_code == 201
        assert response.json()["data"]["image"] is None

    def test_non_positive_price_is_422(self, client, seller, auth_headers):
        response = client.post("/api/seller/products", data={"name": "Ghee", "price": "0"},
                               headers=auth_headers(seller))

        assert response.status_code == 422

    def test_non_image_upload_rejected(self, client, seller, auth_headers):
        response = client.post(
            "/api/seller/products",
            data={"name": "Ghee", "price": "20"},
            files={"image": ("ghee.pdf", b"%PDF", "application/pdf")},
            headers=auth_headers(seller),
        )

        assert response.status_code == 400

    def test_pending_seller_cannot_list(self, client, make_user, auth_headers):
        pending = make_user(UserRole.SELLER, approval_status=SellerApprovalStatus.PENDING)

        response = client.post("/api/seller/products", data={"name": "Ghee", "price": "20"},
                               headers=auth_headers(pending))

        assert response.status_code == 403
        assert response.json()["message"] == "Seller account is awaiting approval"

    def test_update_keeps_approved_status(self, client, seller, auth_headers, make_product):
        """Test editing a listed product leaves it approved and public"""
        product = make_product(seller)

        response = client.put(f"/api/seller/products/{product.id}", data={"price": "15.00"},
                              headers=auth_headers(seller))

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "approved"
        assert response.json()["data"]["price"] == 15.0
        assert client.get(f"/api/products/{product.id}").json()["data"]["price"] == 15.0

    def test_rejected_product_edit_refused(self, client, seller, auth_headers, make_product):
        """Test a rejected product cannot be edited and its new image is discarded"""
        # Arrange
        product = make_product(seller, status=ProductStatus.REJECTED)
        before = set(os.listdir(settings.UPLOADS_DIR))

        # Act
        response = client.put(
            f"/api/seller/products/{product.id}",
            data={"name": "Renamed"},
            files={"image": ("chai.png", PNG_BYTES, "image/png")},
            headers=auth_headers(seller),
        )

        # Assert
        assert response.status_code == 400
        assert response.json()["message"] == "Rejected products cannot be edited"
        assert set(os.listdir(settings.UPLOADS_DIR)) == before
        assert client.get(f"/api/products/{product.id}").status_code == 404

    @patch('desiconnect.api.seller.CatalogService.create_for_seller')
    def test_failed_create_discards_uploaded_image(self, mock_create, client, seller, auth_headers):
        """Test a database failure after upload leaves no orphaned file"""
        # Arrange
        mock_create.side_effect = SQLAlchemyError("insert failed")
        before = set(os.listdir(settings.UPLOADS_DIR))

        # Act
        response = client.post(
            "/api/seller/products",
            data={"name": "Masala Chai", "price": "12.50"},
            files={"image": ("chai.png", PNG_BYTES, "image/png")},
            headers=auth_headers(seller),
        )

        # Assert
        assert response.status_code == 500
        assert set(os.listdir(settings.UPLOADS_DIR)) == before

    @patch('desiconnect.api.seller.CatalogService.update_for_seller')
    def test_failed_update_discards_uploaded_image(self, mock_update, client, seller, auth_headers, make_product):
        product = make_product(seller)
        mock_update.side_effect = SQLAlchemyError("update failed")
        before = set(os.listdir(settings.UPLOADS_DIR))

        response = client.put(
            f"/api/seller/products/{product.id}",
            data={"price": "15.00"},
            files={"image": ("chai.png", PNG_BYTES, "image/png")},
            headers=auth_headers(seller),
        )

        assert response.status_code == 500
        assert set(os.listdir(settings.UPLOADS_DIR)) == before

    def test_cannot_touch_other_sellers_product(self, client, make_user, seller, auth_headers, make_product):
        product = make_product(seller)
        other = make_user(UserRole.SELLER)

        update = client.put(f"/api/seller/products/{product.id}", data={"price": "1"}, headers=auth_headers(other))
        delete = client.delete(f"/api/seller/products/{product.id}", headers=auth_headers(other))

        assert update.status_code == 403
        assert delete.status_code == 403

    def test_missing_product_is_403(self, client, seller, auth_headers):
        response = client.delete("/api/seller/products/9999", headers=auth_headers(seller))

        assert response.status_code == 403

    def test_list_only_own_products(self, client, make_user, seller, auth_headers, make_product):
        make_product(seller, name="Mine", status=ProductStatus.PENDING)
        make_product(make_user(UserRole.SELLER), name="Theirs")

        response = client.get("/api/seller/products", headers=auth_headers(seller))

        assert [p["name"] for p in response.json()["data"]] == ["Mine"]

    def test_delete_own_product(self, client, seller, auth_headers, make_product):
        product = make_product(seller)

        response = client.delete(f"/api/seller/products/{product.id}", headers=auth_headers(seller))

        assert response.status_code == 200
        assert client.get(f"/api/products/{product.id}").status_code == 404


class TestSellerOrders:

    def test_mark_ready(self, client, seller, customer, auth_headers, make_product, make_order):
        order = make_order(customer, make_product(seller))

        response = client.put(f"/api/seller/orders/{order.id}/ready", headers=auth_headers(seller))
        again = client.put(f"/api/seller/orders/{order.id}/ready", headers=auth_headers(seller))

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "ready"
        assert again.status_code == 400

    def test_cannot_mark_other_sellers_order(self, client, make_user, seller, customer, auth_headers,
                                             make_product, make_order):
        order = make_order(customer, make_product(seller))

        response = client.put(f"/api/seller/orders/{order.id}/ready",
                              headers=auth_headers(make_user(UserRole.SELLER)))

        assert response.status_code == 403

    def test_list_orders(self, client, seller, customer, auth_headers, make_product, make_order):
        make_order(customer, make_product(seller), message="Please pack well")

        response = client.get("/api/seller/orders", headers=auth_headers(seller))

        data = response.json()["data"]
        assert response.json()["count"] == 1
        assert data[0]["message"] == "Please pack well"
        assert data[0]["customer_name"] == "Priya"


class TestSellerProfile:

    def test_update_profile(self, client, seller, auth_headers):
        response = client.put("/api/seller/profile", json={"warehouse_address": "Pune"}, headers=auth_headers(seller))

        assert response.status_code == 200
        assert response.json()["data"]["warehouse_address"] == "Pune"
        assert response.json()["data"]["business_name"] == "Spice Route"

    def test_stats(self, client, seller, customer, auth_headers, make_product, make_order):
        make_order(customer, make_product(seller, price="9.00"))

        data = client.get("/api/seller/stats", headers=auth_headers(seller)).json()["data"]

        assert data["new_orders"] == 1
        assert data["total_revenue"] == 9.0


class TestRejectedSeller:

    def test_existing_token_loses_seller_access(self, client, admin, seller, customer, auth_headers,
                                                make_product, make_order):
        """Test a token issued before rejection stops working for seller endpoints"""
        # Arrange
        order = make_order(customer, make_product(seller))
        headers = auth_headers(seller)

        # Act
        rejected = client.put(f"/api/admin/sellers/{seller.id}/reject", headers=auth_headers(admin))

        # Assert
        assert rejected.status_code == 200
        ready = client.put(f"/api/seller/orders/{order.id}/ready", headers=headers)
        assert ready.status_code == 403
        assert ready.json()["message"] == "Seller account has been rejected"
        assert client.get("/api/seller/products", headers=headers).status_code == 403
        assert client.post("/api/seller/products", data={"name": "Ghee", "price": "20"},
                           headers=headers).status_code == 403

    def test_products_leave_catalog_cart_and_checkout(self, client, admin, seller, customer, auth_headers,
                                                      make_product):
        # Arrange
        product = make_product(seller)
        client.put(f"/api/admin/sellers/{seller.id}/reject", headers=auth_headers(admin))
        headers = auth_headers(customer)

        # Act
        listing = client.get("/api/products")
        detail = client.get(f"/api/products/{product.id}")
        cart = client.post("/api/customer/cart", json={"items": [{"product_id": product.id}]}, headers=headers)
        checkout = client.post("/api/customer/orders", json={
            "address": "12 MG Road, Bengaluru",
            "items": [{"product_id": product.id, "quantity": 1}],
        }, headers=headers)

        # Assert
        assert listing.json()["count"] == 0
        assert detail.status_code == 404
        assert cart.status_code == 400
        assert checkout.status_code == 400

    def test_pending_seller_keeps_profile_access(self, client, make_user, auth_headers):
        pending = make_user(UserRole.SELLER, approval_status=SellerApprovalStatus.PENDING)

        response = client.get("/api/seller/profile", headers=auth_headers(pending))

        assert response.status_code == 200
        assert response.json()["data"]["approval_status"] == "pending"
