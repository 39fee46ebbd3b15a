"""
HTTP-level tests: envelope shape, identity headers, role guards and a
full owner -> admin -> customer flow.
"""

from unittest.mock import MagicMock

import pytest

from conftest import headers
from foodcourt.models import Role

OWNER = headers("owner-1", Role.RESTAURANT)
ADMIN = headers("admin-1", Role.ADMIN)
CUSTOMER = headers("cust-1", Role.USER)


async def open_restaurant(client) -> dict:
    created = await client.post(
        "/api/restaurants",
        headers=OWNER,
        json={"name": "Spice Route", "address": "12 Market Street"},
    )
    restaurant = created.json()["data"]
    approved = await client.patch(f"/api/restaurants/admin/{restaurant['id']}/approve", headers=ADMIN)
    return approved.json()["data"]


async def test_root(client):
    response = await client.get("/")

    assert response.status_code == 200
    assert response.json()["success"] is True


async def test_missing_identity_is_401(client):
    response = await client.get("/api/restaurants")

    assert response.status_code == 401
    assert response.json() == {
        "success": False,
        "message": "No token provided. Please login first",
        "data": None,
    }


async def test_wrong_role_is_403(client):
    response = await client.post("/api/orders", headers=OWNER, json={})

    assert response.status_code == 403
    assert response.json()["message"] == "You don't have permission to access this"


async def test_unknown_role_is_403(client):
    response = await client.get("/api/restaurants", headers={"X-User-Id": "x", "X-User-Role": "CHEF"})

    assert response.status_code == 403


async def test_public_menu_needs_no_identity(client):
    restaurant = await open_restaurant(client)

    response = await client.get(f"/api/menus/restaurant/{restaurant['id']}")

    assert response.status_code == 200
    assert response.json()["data"] == []


async def test_domain_errors_map_to_status_codes(client):
    await open_restaurant(client)

    duplicate = await client.post(
        "/api/restaurants",
        headers=OWNER,
        json={"name": "Again", "address": "Elsewhere"},
    )
    assert duplicate.status_code == 409
    assert duplicate.json()["message"] == "You already have a restaurant"

    missing = await client.patch("/api/orders/nope/cancel", headers=CUSTOMER)
    assert missing.status_code == 404
    assert missing.json()["message"] == "Order not found"

    invalid = await client.post("/api/orders", headers=CUSTOMER, json={"restaurant_id": "r", "items": []})
    assert invalid.status_code == 400
    assert invalid.json()["message"] == "Order must have at least one item"


async def test_body_validation_is_400_envelope(client):
    response = await client.patch("/api/restaurants/toggle-status", headers=OWNER, json={"is_open": "maybe"})

    assert response.status_code == 400
    assert response.json()["success"] is False


async def test_my_restaurant_is_null_before_creation(client):
    response = await client.get("/api/restaurants/my-restaurant", headers=OWNER)

    body = response.json()
    assert body["success"] is True
    assert body["message"] == "No restaurant found"
    assert body["data"] is None


async def test_order_flow(client):
    restaurant = await open_restaurant(client)
    assert restaurant["is_open"] is True

    item = (await client.post(
        "/api/menus",
        headers=OWNER,
        json={"name": "Butter Chicken", "price": 12.5, "category": "Main Course"},
    )).json()["data"]

    placed = await client.post(
        "/api/orders",
        headers=CUSTOMER,
        json={"restaurant_id": restaurant["id"], "items": [{"menu_item_id": item["id"], "quantity": 2}]},
    )
    assert placed.status_code == 200
    order = placed.json()["data"]
    assert order["total_amount"] == 25.0
    assert order["status"] == "PLACED"
    assert order["items"][0]["name_snapshot"] == "Butter Chicken"

    for status in ["CONFIRMED", "PREPARING", "READY", "DELIVERED"]:
        updated = await client.patch(f"/api/orders/{order['id']}/status", headers=OWNER, json={"status": status})
        assert updated.status_code == 200
    assert updated.json()["data"]["payment_status"] == "PAID"

    mine = (await client.get("/api/orders/my-orders", headers=CUSTOMER)).json()["data"]
    assert mine[0]["restaurant"]["name"] == "Spice Route"

    stats = (await client.get("/api/orders/restaurant-stats", headers=OWNER)).json()["data"]
    assert stats["total_revenue"] == 25.0
    assert stats["platform_fee"] == pytest.approx(5.0)
    assert stats["restaurant_earnings"] == pytest.approx(20.0)

    dashboard = (await client.get("/api/restaurants/dashboard", headers=OWNER)).json()["data"]
    assert dashboard["total_revenue"] == 0

    report = (await client.get("/api/admin/reports", headers=ADMIN)).json()["data"]
    assert report["top_restaurants"][0]["restaurant_id"] == restaurant["id"]
    assert report["recent_orders"][0]["id"] == order["id"]

    daily = (await client.get("/api/admin/revenue/daily", headers=ADMIN)).json()["data"]
    assert daily[0]["total_revenue"] == 25.0


async def test_payment_routes(client):
    restaurant = await open_restaurant(client)
    item = (await client.post("/api/menus", headers=OWNER, json={"name": "Naan", "price": 3})).json()["data"]
    order = (await client.post(
        "/api/orders",
        headers=CUSTOMER,
        json={"restaurant_id": restaurant["id"], "items": [{"menu_item_id": item["id"], "quantity": 1}]},
    )).json()["data"]

    paid = await client.post(f"/api/payments/{order['id']}/mark-paid", headers=CUSTOMER)
    assert paid.json()["data"]["payment_status"] == "PAID"

    again = await client.post(f"/api/payments/{order['id']}/mark-paid", headers=CUSTOMER)
    assert again.status_code == 400
    assert again.json()["message"] == "Order is already paid"

    status = (await client.get(f"/api/payments/{order['id']}/status", headers=ADMIN)).json()["data"]
    assert status == {"order_id": order["id"], "payment_status": "PAID", "amount": 3.0}


async def test_export_is_queued(client, monkeypatch):
    from foodcourt.api import admin

    fake_task = MagicMock()
    fake_task.delay.return_value.id = "task-123"
    monkeypatch.setattr(admin, "export_daily_revenue_report", fake_task)

    response = await client.post("/api/admin/reports/export", headers=ADMIN)

    assert response.json()["data"] == {"task_id": "task-123", "status": "queued"}
    fake_task.delay.assert_called_once_with()


async def test_admin_routes_reject_customers(client):
    for path in ["/api/admin/users", "/api/admin/restaurants", "/api/admin/orders", "/api/admin/reports"]:
        response = await client.get(path, headers=CUSTOMER)
        assert response.status_code == 403
