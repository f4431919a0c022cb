"""Integration tests for the cart, checkout and order lifecycle."""

import pytest

from multistore.models import CartItem, Order, Product

ADDRESS = {"name": "Asha Rao", "address": "12 Lake Road", "city": "Pune", "state": "MH", "zipCode": "411001", "phone": "9999999999"}


def stock_of(db, product):
    db.expire_all()
    return db.query(Product).filter(Product.id == product.id).one().stock


# =============================================================================
# Cart
# =============================================================================


class TestCart:
    def test_add_and_summary(self, client, buyer, store, make_product, auth):
        product = make_product(store, price="100.00")

        added = client.post("/api/cart", json={"product_id": product.id, "quantity": 2}, headers=auth(buyer))
        assert added.status_code == 200
        assert added.json()["quantity"] == 2

        cart = client.get("/api/cart", headers=auth(buyer)).json()
        assert cart["items"][0]["product"]["vendor"]["id"] == store.id
        assert cart["summary"]["subtotal"] == 200
        assert cart["summary"]["tax_amount"] == 36
        assert cart["summary"]["shipping_fee"] == 50
        assert cart["summary"]["total"] == 286
        assert cart["summary"]["free_shipping_remaining"] == 300.01

    def test_adding_again_increments(self, client, buyer, store, make_product, auth):
        product = make_product(store)
        client.post("/api/cart", json={"product_id": product.id, "quantity": 1}, headers=auth(buyer))

        response = client.post("/api/cart", json={"product_id": product.id, "quantity": 3}, headers=auth(buyer))

        assert response.json()["quantity"] == 4
        assert len(client.get("/api/cart", headers=auth(buyer)).json()["items"]) == 1

    def test_inactive_product(self, client, buyer, store, make_product, auth):
        product = make_product(store, is_active=False)
        response = client.post("/api/cart", json={"product_id": product.id}, headers=auth(buyer))
        assert response.status_code == 404

    def test_zero_quantity_rejected(self, client, buyer, store, make_product, auth):
        product = make_product(store)
        response = client.post("/api/cart", json={"product_id": product.id, "quantity": 0}, headers=auth(buyer))
        assert response.status_code == 422

    def test_update_and_remove(self, client, buyer, store, make_product, auth):
        product = make_product(store)
        client.post("/api/cart", json={"product_id": product.id}, headers=auth(buyer))

        assert client.put(f"/api/cart/{product.id}", json={"quantity": 5}, headers=auth(buyer)).json()["quantity"] == 5
        assert client.put(f"/api/cart/{product.id}", json={"quantity": 0}, headers=auth(buyer)).json() == {"success": True, "removed": True}
        assert client.get("/api/cart", headers=auth(buyer)).json()["items"] == []

    def test_update_missing_line(self, client, buyer, auth):
        assert client.put("/api/cart/missing", json={"quantity": 1}, headers=auth(buyer)).status_code == 404

    def test_delete_line_and_clear(self, client, buyer, store, make_product, auth):
        first = make_product(store)
        second = make_product(store)
        for product in (first, second):
            client.post("/api/cart", json={"product_id": product.id}, headers=auth(buyer))

        assert client.delete(f"/api/cart/{first.id}", headers=auth(buyer)).json() == {"success": True}
        assert client.delete(f"/api/cart/{first.id}", headers=auth(buyer)).json() == {"success": False}
        assert client.delete("/api/cart", headers=auth(buyer)).json() == {"success": True}
        assert client.get("/api/cart", headers=auth(buyer)).json()["items"] == []

    def test_requires_login(self, client):
        assert client.get("/api/cart").status_code == 401


# =============================================================================
# Checkout
# =============================================================================


@pytest.fixture
def two_vendor_cart(db, buyer, store, make_vendor, make_product):
    other = make_vendor(name="Other", domain="other.example.com")
    cheap = make_product(store, name="Mug", price="100.00", stock=5)
    pricey = make_product(other, name="Lamp", price="300.00", stock=5)
    db.add(CartItem(user_id=buyer.id, product_id=cheap.id, quantity=2))
    db.add(CartItem(user_id=buyer.id, product_id=pricey.id, quantity=2))
    db.commit()
    return {"store": store, "other": other, "cheap": cheap, "pricey": pricey}


class TestCheckout:
    def test_cart_summary_matches_what_checkout_charges(self, client, buyer, two_vendor_cart, auth):
        summary = client.get("/api/cart", headers=auth(buyer)).json()["summary"]
        assert {v["vendor_id"] for v in summary["vendors"]} == {two_vendor_cart["store"].id, two_vendor_cart["other"].id}
        assert summary["shipping_fee"] == 50
        assert summary["free_shipping_remaining"] is None

        orders = client.post("/api/orders", json={"shipping_address": ADDRESS}, headers=auth(buyer)).json()

        assert summary["total"] == pytest.approx(sum(o["total"] for o in orders))
        assert summary["total"] == 994

    def test_one_order_per_vendor(self, client, db, buyer, two_vendor_cart, auth):
        response = client.post("/api/orders", json={"shipping_address": ADDRESS}, headers=auth(buyer))

        assert response.status_code == 200
        orders = {o["vendor_id"]: o for o in response.json()}
        assert set(orders) == {two_vendor_cart["store"].id, two_vendor_cart["other"].id}

        small = orders[two_vendor_cart["store"].id]
        assert small["subtotal"] == 200
        assert small["tax_amount"] == 36
        assert small["shipping_fee"] == 50
        assert small["total"] == 286
        assert small["status"] == "pending"
        assert small["payment_method"] == "cod"
        assert small["items"][0]["product_name"] == "Mug"
        assert small["shipping_address"]["city"] == "Pune"
        assert small["order_number"].startswith("ORD")

        large = orders[two_vendor_cart["other"].id]
        assert large["subtotal"] == 600
        assert large["shipping_fee"] == 0
        assert large["total"] == 708

        assert stock_of(db, two_vendor_cart["cheap"]) == 3
        assert stock_of(db, two_vendor_cart["pricey"]) == 3
        assert db.query(CartItem).count() == 0

    def test_single_vendor_checkout(self, client, db, buyer, two_vendor_cart, auth):
        response = client.post("/api/orders", json={
            "shipping_address": ADDRESS, "vendor_id": two_vendor_cart["other"].id,
        }, headers=auth(buyer))

        assert [o["vendor_id"] for o in response.json()] == [two_vendor_cart["other"].id]
        db.expire_all()
        remaining = db.query(CartItem).all()
        assert [i.product_id for i in remaining] == [two_vendor_cart["cheap"].id]

    def test_empty_cart(self, client, buyer, auth):
        response = client.post("/api/orders", json={"shipping_address": ADDRESS}, headers=auth(buyer))
        assert response.status_code == 400
        assert response.json()["detail"] == "Cart is empty"

    def test_insufficient_stock_changes_nothing(self, client, db, buyer, store, make_product, auth):
        product = make_product(store, name="Rare", stock=1)
        db.add(CartItem(user_id=buyer.id, product_id=product.id, quantity=2))
        db.commit()

        response = client.post("/api/orders", json={"shipping_address": ADDRESS}, headers=auth(buyer))

        assert response.status_code == 400
        assert response.json()["detail"] == "Insufficient stock for Rare"
        assert stock_of(db, product) == 1
        assert db.query(Order).count() == 0
        assert db.query(CartItem).count() == 1


# =============================================================================
# Order lifecycle
# =============================================================================


@pytest.fixture
def placed_order(client, buyer, store, make_product, auth):
    product = make_product(store, name="Mug", price="100.00", stock=5)
    client.post("/api/cart", json={"product_id": product.id, "quantity": 2}, headers=auth(buyer))
    order = client.post("/api/orders", json={"shipping_address": ADDRESS}, headers=auth(buyer)).json()[0]
    return {"order": order, "product": product}


class TestOrderAccess:
    def test_listing_by_role(self, client, buyer, seller, super_admin, make_user, placed_order, auth):
        stranger = make_user()
        order_id = placed_order["order"]["id"]

        assert [o["id"] for o in client.get("/api/orders", headers=auth(buyer)).json()] == [order_id]
        assert [o["id"] for o in client.get("/api/orders", headers=auth(seller)).json()] == [order_id]
        assert [o["id"] for o in client.get("/api/orders", headers=auth(super_admin)).json()] == [order_id]
        assert client.get("/api/orders", headers=auth(stranger)).json() == []

    def test_detail(self, client, buyer, seller, make_user, placed_order, auth):
        order_id = placed_order["order"]["id"]

        assert client.get(f"/api/orders/{order_id}", headers=auth(buyer)).json()["customer"]["id"] == buyer.id
        assert client.get(f"/api/orders/{order_id}", headers=auth(seller)).status_code == 200
        assert client.get(f"/api/orders/{order_id}", headers=auth(make_user())).status_code == 403
        assert client.get("/api/orders/missing", headers=auth(buyer)).status_code == 404

    def test_vendor_orders(self, client, seller, placed_order, auth):
        orders = client.get("/api/vendor/orders", headers=auth(seller)).json()
        assert [o["id"] for o in orders] == [placed_order["order"]["id"]]


class TestOrderStatus:
    def test_seller_updates_own(self, client, seller, placed_order, auth):
        response = client.put(f"/api/orders/{placed_order['order']['id']}/status", json={"status": "shipped"}, headers=auth(seller))
        assert response.status_code == 200
        assert response.json()["status"] == "shipped"

    def test_invalid_status(self, client, super_admin, placed_order, auth):
        response = client.put(f"/api/orders/{placed_order['order']['id']}/status", json={"status": "lost"}, headers=auth(super_admin))
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid order status"

    def test_admin_missing_order(self, client, super_admin, auth):
        assert client.put("/api/orders/missing/status", json={"status": "shipped"}, headers=auth(super_admin)).status_code == 404

    def test_other_seller_forbidden(self, client, make_user, make_vendor, placed_order, auth):
        other = make_user(role="seller")
        make_vendor(name="Other", domain="other.example.com", owner=other)
        response = client.put(f"/api/orders/{placed_order['order']['id']}/status", json={"status": "shipped"}, headers=auth(other))
        assert response.status_code == 403

    def test_buyer_forbidden(self, client, buyer, placed_order, auth):
        response = client.put(f"/api/orders/{placed_order['order']['id']}/status", json={"status": "delivered"}, headers=auth(buyer))
        assert response.status_code == 403

    def test_cancelling_through_status_restores_stock(self, client, db, super_admin, placed_order, auth):
        assert stock_of(db, placed_order["product"]) == 3

        response = client.put(f"/api/orders/{placed_order['order']['id']}/status", json={"status": "cancelled"}, headers=auth(super_admin))

        assert response.json()["status"] == "cancelled"
        assert stock_of(db, placed_order["product"]) == 5

    def test_cancelled_order_cannot_be_reopened(self, client, db, buyer, seller, placed_order, auth):
        order_id = placed_order["order"]["id"]
        client.post(f"/api/orders/{order_id}/cancel", json={}, headers=auth(buyer))

        response = client.put(f"/api/orders/{order_id}/status", json={"status": "confirmed"}, headers=auth(seller))

        assert response.status_code == 400
        assert stock_of(db, placed_order["product"]) == 5


class TestCancel:
    def test_restores_stock(self, client, db, buyer, placed_order, auth):
        assert stock_of(db, placed_order["product"]) == 3

        response = client.post(f"/api/orders/{placed_order['order']['id']}/cancel", json={"reason": "changed mind"}, headers=auth(buyer))

        assert response.json()["status"] == "cancelled"
        assert stock_of(db, placed_order["product"]) == 5

    def test_cannot_cancel_shipped(self, client, buyer, seller, placed_order, auth):
        order_id = placed_order["order"]["id"]
        client.put(f"/api/orders/{order_id}/status", json={"status": "shipped"}, headers=auth(seller))

        response = client.post(f"/api/orders/{order_id}/cancel", json={}, headers=auth(buyer))

        assert response.status_code == 400

    def test_stranger_cannot_cancel(self, client, make_user, placed_order, auth):
        response = client.post(f"/api/orders/{placed_order['order']['id']}/cancel", json={}, headers=auth(make_user()))
        assert response.status_code == 403


def test_invoice_pdf(client, buyer, placed_order, auth):
    response = client.get(f"/api/orders/{placed_order['order']['id']}/invoice", headers=auth(buyer))

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")
    assert placed_order["order"]["order_number"] in response.headers["content-disposition"]
