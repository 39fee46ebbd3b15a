from datetime import date, datetime, timedelta

import pytest

from conftest import make_item, make_restaurant, make_user
from foodcourt.core.config import get_settings
from foodcourt.models import OrderStatus, Role
from foodcourt.services import OrderEngine, RevenueAggregator, commission_split
from foodcourt.utils.time_windows import UTC, utcnow


async def place(store, restaurant, item, quantity=1, user_id="cust-1", status=None, created_at=None):
    """Place an order, optionally move it to ``status`` and backdate it."""
    engine = OrderEngine(store)
    order = await engine.place(user_id, restaurant.id, [{"menu_item_id": item.id, "quantity": quantity}])
    if status is not None:
        order = await engine.update_status(restaurant.id, order.id, status)
    if created_at is not None:
        order.created_at = created_at
        order = await store.save(order)
    return order


@pytest.fixture
async def kitchen(store):
    restaurant = await make_restaurant(store, owner_id="owner-1")
    item = await make_item(store, "owner-1", price=10.0)
    return restaurant, item


def test_commission_split_adds_up():
    platform, restaurant = commission_split(123.45)

    assert platform == pytest.approx(24.69)
    assert platform + restaurant == pytest.approx(123.45)


def test_commission_rate_is_configurable(monkeypatch):
    monkeypatch.setenv("PLATFORM_COMMISSION_RATE", "0.1")
    get_settings.cache_clear()

    assert commission_split(50.0) == pytest.approx((5.0, 45.0))


async def test_restaurant_stats(store, kitchen):
    restaurant, item = kitchen
    await place(store, restaurant, item, quantity=2, status=OrderStatus.DELIVERED)
    await place(store, restaurant, item, quantity=3, status=OrderStatus.DELIVERED)
    await place(store, restaurant, item, status=OrderStatus.READY)
    await place(store, restaurant, item, status=OrderStatus.CANCELLED)
    await place(store, restaurant, item)

    stats = await RevenueAggregator(store).restaurant_stats(restaurant.id)

    assert stats["total_orders"] == 5
    assert stats["pending"] == 1
    assert stats["ready"] == 1
    assert stats["delivered"] == 2
    assert stats["cancelled"] == 1
    assert stats["confirmed"] == 0
    assert stats["total_revenue"] == pytest.approx(50.0)
    assert stats["platform_fee"] == pytest.approx(10.0)
    assert stats["platform_fee"] + stats["restaurant_earnings"] == pytest.approx(stats["total_revenue"])


async def test_user_stats_with_nothing_delivered(store, kitchen):
    restaurant, item = kitchen
    await place(store, restaurant, item)

    stats = await RevenueAggregator(store).user_stats("cust-1")

    assert stats["total_orders"] == 1
    assert stats["pending"] == 1
    assert stats["total_spent"] == 0
    assert stats["avg_order_value"] == 0


async def test_user_stats_month_and_year_windows(store, kitchen):
    restaurant, item = kitchen
    await place(store, restaurant, item, quantity=2, status=OrderStatus.DELIVERED)
    await place(
        store, restaurant, item, quantity=4,
        status=OrderStatus.DELIVERED,
        created_at=utcnow() - timedelta(days=400),
    )
    await place(store, restaurant, item, quantity=9, status=OrderStatus.PREPARING)

    stats = await RevenueAggregator(store).user_stats("cust-1")

    assert stats["total_orders"] == 3
    assert stats["delivered"] == 2
    assert stats["preparing"] == 1
    assert stats["total_spent"] == pytest.approx(60.0)
    assert stats["this_month_spent"] == pytest.approx(20.0)
    assert stats["this_year_spent"] == pytest.approx(20.0)
    assert stats["avg_order_value"] == pytest.approx(30.0)


async def test_dashboard_counts_ready_revenue_only(store, kitchen):
    restaurant, item = kitchen
    await place(store, restaurant, item, quantity=1, status=OrderStatus.READY)
    await place(store, restaurant, item, quantity=5, status=OrderStatus.DELIVERED)
    await place(store, restaurant, item, quantity=2)
    await place(store, restaurant, item, created_at=utcnow() - timedelta(days=2))

    dashboard = await RevenueAggregator(store).dashboard(restaurant.id)

    assert dashboard == {
        "total_orders": 4,
        "pending_orders": 2,
        "today_orders": 3,
        "total_revenue": pytest.approx(10.0),
    }


async def test_system_reports(store, kitchen):
    restaurant, item = kitchen
    await make_user(store, Role.USER)
    await make_user(store, Role.USER)
    await make_user(store, Role.RESTAURANT)
    await make_user(store, Role.ADMIN)
    await place(store, restaurant, item, quantity=3, status=OrderStatus.DELIVERED)
    await place(store, restaurant, item, quantity=1, status=OrderStatus.DELIVERED)
    await place(store, restaurant, item)

    report = await RevenueAggregator(store).system_reports()

    assert report["total_users"] == 2
    assert report["total_restaurants"] == 1
    assert report["total_orders"] == 3
    assert report["total_revenue"] == pytest.approx(40.0)
    assert report["platform_revenue"] + report["restaurant_revenue"] == pytest.approx(40.0)
    assert report["monthly_revenue"] == pytest.approx(40.0)
    assert report["monthly_platform_revenue"] == pytest.approx(8.0)
    assert report["avg_order_value"] == pytest.approx(20.0)

    by_status = {row["status"]: row["count"] for row in report["orders_by_status"]}
    assert by_status[OrderStatus.DELIVERED] == 2
    assert by_status[OrderStatus.PLACED] == 1
    assert by_status[OrderStatus.READY] == 0

    [top] = report["top_restaurants"]
    assert top["restaurant_name"] == "Spice Route"
    assert top["order_count"] == 2
    assert top["platform_commission"] + top["restaurant_earnings"] == pytest.approx(top["total_revenue"])

    assert len(report["recent_orders"]) == 3
    assert report["recent_orders"][0].restaurant.name == "Spice Route"


async def test_system_reports_on_empty_platform(store):
    report = await RevenueAggregator(store).system_reports()

    assert report["total_revenue"] == 0
    assert report["avg_order_value"] == 0
    assert report["top_restaurants"] == []
    assert report["recent_orders"] == []


async def test_top_restaurants_ties_break_on_id(store):
    restaurants = []
    for n in range(3):
        owner_id = f"owner-{n}"
        restaurant = await make_restaurant(store, owner_id=owner_id, name=f"Kitchen {n}")
        item = await make_item(store, owner_id)
        restaurants.append((restaurant, item))

    busiest, item = restaurants[2]
    await place(store, busiest, item, status=OrderStatus.DELIVERED)
    for restaurant, item in restaurants:
        await place(store, restaurant, item, status=OrderStatus.DELIVERED)

    top = (await RevenueAggregator(store).system_reports())["top_restaurants"]

    assert top[0]["restaurant_id"] == busiest.id
    assert top[0]["order_count"] == 2
    tied = [row["restaurant_id"] for row in top[1:]]
    assert tied == sorted(r.id for r, _ in restaurants[:2])


async def test_top_restaurants_limited_to_five(store):
    for n in range(7):
        owner_id = f"owner-{n}"
        restaurant = await make_restaurant(store, owner_id=owner_id, name=f"Kitchen {n}")
        item = await make_item(store, owner_id)
        await place(store, restaurant, item, status=OrderStatus.DELIVERED)

    top = (await RevenueAggregator(store).system_reports())["top_restaurants"]

    assert len(top) == 5


async def test_daily_revenue_groups_by_day_newest_first(store, kitchen):
    restaurant, item = kitchen
    day_one = datetime(2026, 3, 1, 9, 30, tzinfo=UTC)
    day_two = datetime(2026, 3, 2, 18, 0, tzinfo=UTC)
    await place(store, restaurant, item, quantity=1, status=OrderStatus.DELIVERED, created_at=day_one)
    await place(store, restaurant, item, quantity=2, status=OrderStatus.DELIVERED, created_at=day_one)
    await place(store, restaurant, item, quantity=5, status=OrderStatus.DELIVERED, created_at=day_two)
    await place(store, restaurant, item, quantity=7, status=OrderStatus.READY, created_at=day_two)

    days = await RevenueAggregator(store).daily_revenue()

    assert [d["date"] for d in days] == [date(2026, 3, 2), date(2026, 3, 1)]
    assert days[0]["total_revenue"] == pytest.approx(50.0)
    assert days[0]["order_count"] == 1
    assert days[1]["total_revenue"] == pytest.approx(30.0)
    assert days[1]["order_count"] == 2
    assert days[1]["platform_revenue"] == pytest.approx(6.0)
    assert days[1]["restaurant_revenue"] == pytest.approx(24.0)


async def test_daily_revenue_uses_report_time_zone(store, kitchen, monkeypatch):
    monkeypatch.setenv("REPORT_TIMEZONE", "Asia/Kolkata")
    get_settings.cache_clear()
    restaurant, item = kitchen
    # 20:00 UTC is already the next day in India (UTC+05:30)
    late_evening = datetime(2026, 1, 1, 20, 0, tzinfo=UTC)
    await place(store, restaurant, item, status=OrderStatus.DELIVERED, created_at=late_evening)

    [day] = await RevenueAggregator(store).daily_revenue()

    assert day["date"] == date(2026, 1, 2)


async def test_daily_revenue_keeps_newest_thirty_days(store, kitchen):
    restaurant, item = kitchen
    start = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
    for offset in range(32):
        await place(
            store, restaurant, item,
            status=OrderStatus.DELIVERED,
            created_at=start + timedelta(days=offset),
        )

    days = await RevenueAggregator(store).daily_revenue()

    assert len(days) == 30
    assert days[0]["date"] == date(2026, 2, 1)
    assert days[-1]["date"] == date(2026, 1, 3)


async def test_daily_revenue_stops_reading_past_the_kept_days(store, kitchen, monkeypatch):
    monkeypatch.setenv("DAILY_REVENUE_DAYS", "2")
    get_settings.cache_clear()
    monkeypatch.setattr("foodcourt.services.stats.DAILY_REVENUE_BATCH", 2)
    restaurant, item = kitchen
    start = datetime(2026, 5, 1, 10, 0, tzinfo=UTC)
    for offset in range(6):
        for hour in range(2):
            await place(
                store, restaurant, item,
                status=OrderStatus.DELIVERED,
                created_at=start + timedelta(days=offset, hours=hour),
            )

    fetched = []
    rows = store.rows

    async def counting_rows(*args, **kwargs):
        batch = await rows(*args, **kwargs)
        fetched.extend(batch)
        return batch

    monkeypatch.setattr(store, "rows", counting_rows)

    days = await RevenueAggregator(store).daily_revenue()

    assert [d["date"] for d in days] == [date(2026, 5, 6), date(2026, 5, 5)]
    assert [d["order_count"] for d in days] == [2, 2]
    assert days[0]["total_revenue"] == pytest.approx(20.0)
    assert len(fetched) == 6
