"""Back-office customer records."""

import pytest

from models.order import Order
from routes.customers import to_camel_case


@pytest.mark.parametrize("raw,expected", [
    ("Green Valley  Store", "greenValleyStore"),
    ("corner", "corner"),
    ("", None),
    (None, None),
])
def test_to_camel_case(raw, expected):
    assert to_camel_case(raw) == expected


def test_create_customer(client, staff_headers):
    response = client.post(
        "/customers",
        json={"name": " ", "mobile": " 555-0101 ", "shop_name": "Green Valley Store"},
        headers=staff_headers,
    )
    assert response.status_code == 201

    body = response.json()
    assert body["name"] == "Unknown Customer"
    assert body["mobile"] == "555-0101"
    assert body["shop_name"] == "greenValleyStore"


def test_duplicate_mobile(client, staff_headers):
    client.post("/customers", json={"mobile": "555-0101"}, headers=staff_headers)
    response = client.post("/customers", json={"mobile": "555-0101"}, headers=staff_headers)
    assert response.status_code == 409


def test_list_customers_by_name(client, admin_headers):
    for name, mobile in [("Zed", "1"), ("Amy", "2"), ("Kim", "3")]:
        client.post("/customers", json={"name": name, "mobile": mobile}, headers=admin_headers)

    body = client.get("/customers", params={"limit": 2}, headers=admin_headers).json()
    assert body["totalCount"] == 3
    assert [c["name"] for c in body["customers"]] == ["Amy", "Kim"]


def test_update_customer(client, staff_headers):
    created = client.post("/customers", json={"name": "Amy", "mobile": "1"}, headers=staff_headers).json()
    client.post("/customers", json={"name": "Bob", "mobile": "2"}, headers=staff_headers)

    response = client.put(f"/customers/{created['id']}", json={"address": "High St 1"}, headers=staff_headers)
    assert response.status_code == 200
    assert response.json()["address"] == "High St 1"

    conflict = client.put(f"/customers/{created['id']}", json={"mobile": "2"}, headers=staff_headers)
    assert conflict.status_code == 409


def test_delete_customer_with_orders_is_refused(client, admin_headers, admin_user, db_session):
    created = client.post("/customers", json={"mobile": "1"}, headers=admin_headers).json()
    db_session.add(Order(user_id=admin_user.id, customer_id=created["id"], status="pending", total_amount=0))
    db_session.commit()

    response = client.delete(f"/customers/{created['id']}", headers=admin_headers)
    assert response.status_code == 409


def test_delete_customer(client, admin_headers):
    created = client.post("/customers", json={"mobile": "1"}, headers=admin_headers).json()
    assert client.delete(f"/customers/{created['id']}", headers=admin_headers).status_code == 200
    assert client.delete(f"/customers/{created['id']}", headers=admin_headers).status_code == 404


def test_customers_are_back_office_only(client, customer_headers):
    assert client.get("/customers", headers=customer_headers).status_code == 403
