"""Checkout and order administration."""

import pytest

from models.customer import Customer
from models.product import ProductVariant


@pytest.fixture
def variants(stored_catalog):
    soap, oil, rice = stored_catalog
    return {
        "soap": soap.variants[0].id,
        "oil": oil.variants[0].id,
        "rice_5kg": rice.variants[0].id,
        "rice_1kg": rice.variants[1].id,
    }


def place_order(client, headers, *lines, customer_id=None):
    payload = {"items": [{"variant_id": v, "qty": q} for v, q in lines]}
    if customer_id is not None:
        payload["customer_id"] = customer_id
    return client.post("/orders", json=payload, headers=headers)


class TestCheckout:
    def test_order_snapshots_lines_and_total(self, client, customer_headers, variants):
        response = place_order(client, customer_headers, (variants["soap"], 2), (variants["rice_5kg"], 1))
        assert response.status_code == 201

        body = response.json()
        assert body["status"] == "pending"
        assert body["total_amount"] == 120.0
        lines = {(i["product_name"], i["unit_size"]): i for i in body["items"]}
        assert lines[("Soap", "200g")]["line_total"] == 20.0
        assert lines[("Rice", "5kg")]["unit_price"] == 100.0

    def test_tracked_stock_is_decremented(self, client, customer_headers, variants, db_session):
        place_order(client, customer_headers, (variants["soap"], 2))

        db_session.expire_all()
        assert db_session.get(ProductVariant, variants["soap"]).stock_quantity == 3

    def test_catalog_reflects_new_stock(self, client, customer_headers, variants):
        assert client.get("/products", params={"search": "soap"}).json()["data"][0]["variant"]["stockQuantity"] == 5
        place_order(client, customer_headers, (variants["soap"], 5))

        item = client.get("/products", params={"search": "soap"}).json()["data"][0]
        assert item["variant"]["stockQuantity"] == 0
        assert item["variant"]["stockStatus"] == 0

    def test_untracked_stock_is_never_short(self, client, customer_headers, variants, db_session):
        response = place_order(client, customer_headers, (variants["rice_1kg"], 500))
        assert response.status_code == 201

        db_session.expire_all()
        assert db_session.get(ProductVariant, variants["rice_1kg"]).stock_quantity is None

    def test_insufficient_stock(self, client, customer_headers, variants, db_session):
        response = place_order(client, customer_headers, (variants["soap"], 1), (variants["oil"], 1))
        assert response.status_code == 400
        assert "Insufficient stock" in response.json()["detail"]

        db_session.expire_all()
        assert db_session.get(ProductVariant, variants["soap"]).stock_quantity == 5

    def test_repeated_lines_are_merged(self, client, customer_headers, variants):
        response = place_order(client, customer_headers, (variants["soap"], 3), (variants["soap"], 3))
        assert response.status_code == 400

    def test_empty_cart(self, client, customer_headers):
        assert place_order(client, customer_headers).status_code == 400

    def test_unknown_variant(self, client, customer_headers, variants):
        assert place_order(client, customer_headers, (9999, 1)).status_code == 404

    def test_unknown_customer(self, client, customer_headers, variants):
        response = place_order(client, customer_headers, (variants["soap"], 1), customer_id=42)
        assert response.status_code == 404

    def test_order_for_customer(self, client, customer_headers, variants, db_session):
        customer = Customer(name="Corner Shop", mobile="555-0100")
        db_session.add(customer)
        db_session.commit()

        response = place_order(client, customer_headers, (variants["soap"], 1), customer_id=customer.id)
        assert response.status_code == 201
        assert response.json()["customer_id"] == customer.id

    def test_requires_login(self, client, variants):
        response = place_order(client, {}, (variants["soap"], 1))
        assert response.status_code in (401, 403)


class TestOrderAdmin:
    def test_list_orders_newest_first(self, client, admin_headers, customer_headers, variants):
        first = place_order(client, customer_headers, (variants["soap"], 1)).json()
        second = place_order(client, customer_headers, (variants["rice_5kg"], 1)).json()

        body = client.get("/orders", params={"page_size": 1}, headers=admin_headers).json()
        assert body["total"] == 2
        assert [o["id"] for o in body["items"]] == [second["id"]]

        body = client.get("/orders", params={"page": 2, "page_size": 1}, headers=admin_headers).json()
        assert [o["id"] for o in body["items"]] == [first["id"]]

    def test_list_requires_admin(self, client, customer_headers):
        assert client.get("/orders", headers=customer_headers).status_code == 403

    def test_status_change(self, client, admin_headers, customer_headers, variants):
        order = place_order(client, customer_headers, (variants["soap"], 1)).json()

        response = client.put(f"/orders/{order['id']}", json={"status": "Shipped"}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["status"] == "shipped"

    def test_unknown_status(self, client, admin_headers, customer_headers, variants):
        order = place_order(client, customer_headers, (variants["soap"], 1)).json()
        response = client.put(f"/orders/{order['id']}", json={"status": "lost"}, headers=admin_headers)
        assert response.status_code == 400

    def test_final_status_is_locked(self, client, admin_headers, customer_headers, variants):
        order = place_order(client, customer_headers, (variants["soap"], 1)).json()
        client.put(f"/orders/{order['id']}", json={"status": "cancelled"}, headers=admin_headers)

        response = client.put(f"/orders/{order['id']}", json={"status": "pending"}, headers=admin_headers)
        assert response.status_code == 400

    def test_missing_order(self, client, admin_headers):
        response = client.put("/orders/9999", json={"status": "shipped"}, headers=admin_headers)
        assert response.status_code == 404
