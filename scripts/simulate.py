"""
Order Flow Simulation Script

Drives a running API end to end: an owner opens a restaurant, an admin
approves it, customers place orders concurrently and the owner walks part
of them to DELIVERED. Finishes by printing the admin report.

Run from project root: python scripts/simulate.py --orders 50
"""

import argparse
import asyncio
import random
import sys
import time
import uuid
from typing import Any, Optional

import httpx

# Configuration
API_BASE_URL = "http://localhost:8001"
TOTAL_ORDERS = 50

MENU = [
    {"name": "Paneer Tikka", "price": 8.5, "category": "Appetizers", "is_veg": True},
    {"name": "Butter Chicken", "price": 12.0, "category": "Main Course", "is_veg": False},
    {"name": "Veg Biryani", "price": 10.0, "category": "Rice & Biryani", "is_veg": True},
    {"name": "Garlic Naan", "price": 2.5, "category": "Breads", "is_veg": True},
    {"name": "Gulab Jamun", "price": 4.0, "category": "Desserts", "is_veg": True},
    {"name": "Mango Lassi", "price": 3.5, "category": "Beverages", "is_veg": True},
]

# Status walk for the share of orders that gets delivered; the rest stay PLACED
WALK = ["CONFIRMED", "PREPARING", "READY", "DELIVERED"]


def identity(role: str, user_id: Optional[str] = None) -> dict[str, str]:
    """Headers the perimeter auth would normally set."""
    return {"X-User-Id": user_id or uuid.uuid4().hex, "X-User-Role": role}


def unwrap(response: httpx.Response) -> Any:
    body = response.json()
    if not body.get("success"):
        raise RuntimeError(f"{response.request.method} {response.request.url.path}: {body.get('message')}")
    return body["data"]


# =============================================================================
# SETUP
# =============================================================================

async def setup_restaurant(client: httpx.AsyncClient) -> tuple[dict, dict, list[dict]]:
    """Create, approve and stock a restaurant. Returns owner headers, restaurant, menu."""
    owner = identity("RESTAURANT")
    admin = identity("ADMIN")

    restaurant = unwrap(await client.post(
        "/api/restaurants",
        headers=owner,
        json={"name": f"Sim Kitchen {owner['X-User-Id'][:6]}", "address": "1 Simulation Road"},
    ))
    print(f"   Restaurant {restaurant['id']} created ({restaurant['approval_status']})")

    restaurant = unwrap(await client.patch(
        f"/api/restaurants/admin/{restaurant['id']}/approve",
        headers=admin,
        json={"admin_notes": "Simulation"},
    ))
    print(f"   Approved, open: {restaurant['is_open']}")

    menu = []
    for item in MENU:
        menu.append(unwrap(await client.post("/api/menus", headers=owner, json=item)))
    print(f"   {len(menu)} menu items added")

    return owner, restaurant, menu


# =============================================================================
# ORDERS
# =============================================================================

async def place_order(
    client: httpx.AsyncClient,
    restaurant_id: str,
    menu: list[dict],
    order_num: int,
) -> dict[str, Any]:
    """Place one random order as a fresh customer."""
    lines = random.sample(menu, k=random.randint(1, 3))
    payload = {
        "restaurant_id": restaurant_id,
        "items": [{"menu_item_id": m["id"], "quantity": random.randint(1, 3)} for m in lines],
    }
    start_time = time.time()

    try:
        response = await client.post("/api/orders", headers=identity("USER"), json=payload, timeout=30.0)
        elapsed = round(time.time() - start_time, 3)
        body = response.json()
        if body.get("success"):
            return {
                "order_num": order_num,
                "success": True,
                "order_id": body["data"]["id"],
                "total": body["data"]["total_amount"],
                "time": elapsed,
            }
        return {"order_num": order_num, "success": False, "error": body.get("message"), "time": elapsed}
    except httpx.HTTPError as e:
        elapsed = round(time.time() - start_time, 3)
        return {"order_num": order_num, "success": False, "error": str(e)[:100], "time": elapsed}


async def walk_order(client: httpx.AsyncClient, owner: dict, order_id: str) -> None:
    for status in WALK:
        unwrap(await client.patch(f"/api/orders/{order_id}/status", headers=owner, json={"status": status}))


# =============================================================================
# MAIN SIMULATION RUNNER
# =============================================================================

async def run_simulation(num_orders: int = TOTAL_ORDERS, delivered_share: float = 0.5) -> dict[str, Any]:
    """
    Run the simulation.

    Args:
        num_orders: Number of concurrent orders to place
        delivered_share: Fraction of successful orders walked to DELIVERED
    """
    print("=" * 70)
    print("ORDER FLOW SIMULATION")
    print("=" * 70)
    print(f"Target: {API_BASE_URL}")
    print(f"Orders: {num_orders}")
    print("=" * 70)

    async with httpx.AsyncClient(base_url=API_BASE_URL) as client:
        health = (await client.get("/health")).json()
        print(f"\nHealth: {health.get('status')} (db {health.get('database')}, redis {health.get('redis')})")

        print("\nSetting up restaurant...")
        owner, restaurant, menu = await setup_restaurant(client)

        print(f"\nFiring {num_orders} orders...")
        start_time = time.time()
        results = await asyncio.gather(
            *[place_order(client, restaurant["id"], menu, i + 1) for i in range(num_orders)]
        )
        total_time = round(time.time() - start_time, 2)

        successful = [r for r in results if r["success"]]
        failed = [r for r in results if not r["success"]]

        to_deliver = successful[: int(len(successful) * delivered_share)]
        print(f"\nWalking {len(to_deliver)} orders to DELIVERED...")
        await asyncio.gather(*[walk_order(client, owner, r["order_id"]) for r in to_deliver])

        stats = unwrap(await client.get("/api/orders/restaurant-stats", headers=owner))
        report = unwrap(await client.get("/api/admin/reports", headers=identity("ADMIN")))

    print("\n" + "=" * 70)
    print("RESULTS")
    print("=" * 70)
    print(f"Successful orders: {len(successful)}/{num_orders}")
    print(f"Failed orders: {len(failed)}/{num_orders}")
    print(f"Placement time: {total_time}s")

    if successful:
        avg_time = round(sum(r["time"] for r in successful) / len(successful), 3)
        print(f"Average response: {avg_time}s")

    expected = sum(r["total"] for r in to_deliver)
    print(f"\nDelivered revenue: {stats['total_revenue']:.2f} (expected {expected:.2f})")
    print(f"Platform fee: {stats['platform_fee']:.2f}")
    print(f"Restaurant earnings: {stats['restaurant_earnings']:.2f}")
    print(f"Platform revenue (all restaurants): {report['platform_revenue']:.2f}")

    if failed:
        print("\nFailed order details (first 5):")
        for f in failed[:5]:
            print(f"   Order #{f['order_num']}: {f.get('error', 'Unknown error')}")

    print("=" * 70)

    return {
        "total": num_orders,
        "successful": len(successful),
        "failed": len(failed),
        "delivered": len(to_deliver),
        "revenue_matches": abs(stats["total_revenue"] - expected) < 0.01,
    }


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Order Flow Simulation")
    parser.add_argument("--orders", type=int, default=TOTAL_ORDERS, help="Number of orders")
    parser.add_argument("--delivered", type=float, default=0.5, help="Share of orders to deliver")
    args = parser.parse_args()

    summary = asyncio.run(run_simulation(args.orders, args.delivered))
    sys.exit(0 if summary["failed"] == 0 and summary["revenue_matches"] else 1)
