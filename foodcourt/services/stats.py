"""
Revenue & Stats Aggregator

Read-only rollups computed on demand from the orders table. Nothing here
writes or caches.

Two revenue definitions coexist:
    - Stats and admin reports count DELIVERED orders, split between the
      platform and the restaurant with the configured commission rate.
    - The restaurant dashboard counts READY orders only.
"""

import logging
from collections import defaultdict
from typing import Any

from sqlalchemy.orm import selectinload

from foodcourt.core.config import get_settings
from foodcourt.models import Order, OrderStatus, Restaurant, Role, User
from foodcourt.store import DocumentStore
from foodcourt.utils.time_windows import (
    as_utc,
    local_date,
    start_of_day,
    start_of_month,
    start_of_year,
    utcnow,
)

logger = logging.getLogger(__name__)

# Field name used for each status bucket in the stats payloads
STATUS_BUCKETS = {
    OrderStatus.PLACED: "pending",
    OrderStatus.CONFIRMED: "confirmed",
    OrderStatus.PREPARING: "preparing",
    OrderStatus.READY: "ready",
    OrderStatus.DELIVERED: "delivered",
    OrderStatus.CANCELLED: "cancelled",
}

# Delivered orders fetched per round trip when building the daily report
DAILY_REVENUE_BATCH = 500


def commission_split(total: float) -> tuple[float, float]:
    """
    Split delivered revenue into ``(platform_fee, restaurant_earnings)``.

    The two parts always add back up to ``total``.
    """
    platform_fee = total * get_settings().platform_commission_rate
    return platform_fee, total - platform_fee


def _status_buckets(counts: dict[Any, int]) -> dict[str, int]:
    return {name: counts.get(status, 0) for status, name in STATUS_BUCKETS.items()}


class RevenueAggregator:
    """Per-user, per-restaurant and system-wide statistics."""

    def __init__(self, store: DocumentStore):
        self.store = store
        self.settings = get_settings()

    # =========================================================================
    # RESTAURANT
    # =========================================================================

    async def restaurant_stats(self, restaurant_id: str) -> dict[str, Any]:
        """Status counts plus DELIVERED revenue and its commission split."""
        counts = await self.store.group_count(Order, Order.status, restaurant_id=restaurant_id)
        total_revenue = float(await self.store.sum(
            Order,
            Order.total_amount,
            restaurant_id=restaurant_id,
            status=OrderStatus.DELIVERED,
        ))
        platform_fee, restaurant_earnings = commission_split(total_revenue)

        return {
            **_status_buckets(counts),
            "total_orders": sum(counts.values()),
            "total_revenue": total_revenue,
            "platform_fee": platform_fee,
            "restaurant_earnings": restaurant_earnings,
        }

    async def dashboard(self, restaurant_id: str) -> dict[str, Any]:
        """
        Restaurant self-view.

        ``total_revenue`` here sums READY orders only, unlike every other
        revenue figure in this module.
        """
        today = start_of_day(self.settings.report_zone)

        total_orders = await self.store.count(Order, restaurant_id=restaurant_id)
        pending_orders = await self.store.count(
            Order, restaurant_id=restaurant_id, status=OrderStatus.PLACED
        )
        today_orders = await self.store.count(
            Order, Order.created_at >= today, restaurant_id=restaurant_id
        )
        total_revenue = float(await self.store.sum(
            Order,
            Order.total_amount,
            restaurant_id=restaurant_id,
            status=OrderStatus.READY,
        ))

        return {
            "total_orders": total_orders,
            "pending_orders": pending_orders,
            "today_orders": today_orders,
            "total_revenue": total_revenue,
        }

    # =========================================================================
    # CUSTOMER
    # =========================================================================

    async def user_stats(self, user_id: str) -> dict[str, Any]:
        """Status counts and DELIVERED spending, bucketed by month and year."""
        zone = self.settings.report_zone
        now = utcnow()
        month_start = start_of_month(zone, now)
        year_start = start_of_year(zone, now)

        rows = await self.store.rows(
            Order, Order.status, Order.total_amount, Order.created_at, user_id=user_id
        )

        counts: dict[Any, int] = defaultdict(int)
        total_spent = this_month_spent = this_year_spent = 0.0

        for status, amount, created_at in rows:
            counts[status] += 1
            if status != OrderStatus.DELIVERED:
                continue
            total_spent += amount
            created_at = as_utc(created_at)
            if created_at >= month_start:
                this_month_spent += amount
            if created_at >= year_start:
                this_year_spent += amount

        delivered = counts.get(OrderStatus.DELIVERED, 0)

        return {
            "total_orders": len(rows),
            **_status_buckets(counts),
            "total_spent": total_spent,
            "this_month_spent": this_month_spent,
            "this_year_spent": this_year_spent,
            "avg_order_value": total_spent / delivered if delivered > 0 else 0,
        }

    # =========================================================================
    # ADMIN
    # =========================================================================

    async def system_reports(self) -> dict[str, Any]:
        """Platform-wide counts, revenue, top restaurants and recent orders."""
        delivered = OrderStatus.DELIVERED
        month_start = start_of_month(self.settings.report_zone)

        total_users = await self.store.count(User, role=Role.USER)
        total_restaurants = await self.store.count(Restaurant)
        total_orders = await self.store.count(Order)

        by_status = await self.store.group_count(Order, Order.status)

        total_revenue = float(await self.store.sum(Order, Order.total_amount, status=delivered))
        platform_revenue, restaurant_revenue = commission_split(total_revenue)

        monthly_revenue = float(await self.store.sum(
            Order, Order.total_amount, Order.created_at >= month_start, status=delivered
        ))
        monthly_platform_revenue, _ = commission_split(monthly_revenue)

        top_restaurants = await self._top_restaurants()

        delivered_orders = by_status.get(delivered, 0)
        avg_order_value = total_revenue / delivered_orders if delivered_orders > 0 else 0

        recent_orders = await self.store.find(
            Order,
            order_by=[Order.created_at.desc()],
            limit=self.settings.recent_orders_limit,
            options=[selectinload(Order.restaurant), selectinload(Order.customer)],
        )

        return {
            "total_users": total_users,
            "total_restaurants": total_restaurants,
            "total_orders": total_orders,
            "total_revenue": total_revenue,
            "platform_revenue": platform_revenue,
            "restaurant_revenue": restaurant_revenue,
            "monthly_revenue": monthly_revenue,
            "monthly_platform_revenue": monthly_platform_revenue,
            "avg_order_value": avg_order_value,
            "orders_by_status": [
                {"status": status, "count": by_status.get(status, 0)}
                for status in OrderStatus
            ],
            "top_restaurants": top_restaurants,
            "recent_orders": recent_orders,
        }

    async def _top_restaurants(self) -> list[dict[str, Any]]:
        """Restaurants with the most DELIVERED orders; ties go to the lower id."""
        groups = await self.store.group_totals(
            Order,
            Order.restaurant_id,
            Order.total_amount,
            limit=self.settings.top_restaurants_limit,
            status=OrderStatus.DELIVERED,
        )
        restaurants = await self.store.find_by_ids(Restaurant, [g[0] for g in groups])

        ranking = []
        for restaurant_id, order_count, total_revenue in groups:
            restaurant = restaurants.get(restaurant_id)
            if restaurant is None:
                continue
            platform_commission, restaurant_earnings = commission_split(total_revenue)
            ranking.append({
                "restaurant_id": restaurant_id,
                "restaurant_name": restaurant.name,
                "order_count": order_count,
                "total_revenue": total_revenue,
                "platform_commission": platform_commission,
                "restaurant_earnings": restaurant_earnings,
            })
        return ranking

    async def daily_revenue(self) -> list[dict[str, Any]]:
        """
        DELIVERED revenue per calendar day, newest day first.

        Days are taken in the configured report time zone, so a deployment
        always buckets the same order into the same day. Orders are read
        newest first in batches and reading stops at the first order that
        falls outside the kept days.
        """
        zone = self.settings.report_zone
        max_days = self.settings.daily_revenue_days

        buckets: dict[Any, list[float]] = {}
        offset = scanned = 0
        window_full = False

        while not window_full:
            batch = await self.store.rows(
                Order,
                Order.created_at,
                Order.total_amount,
                order_by=[Order.created_at.desc(), Order.id.desc()],
                limit=DAILY_REVENUE_BATCH,
                offset=offset,
                status=OrderStatus.DELIVERED,
            )
            for created_at, amount in batch:
                day = local_date(created_at, zone)
                if day not in buckets:
                    if len(buckets) == max_days:
                        window_full = True
                        break
                    buckets[day] = [0.0, 0]
                buckets[day][0] += amount
                buckets[day][1] += 1
                scanned += 1
            if len(batch) < DAILY_REVENUE_BATCH:
                break
            offset += DAILY_REVENUE_BATCH

        logger.debug(f"Daily revenue: {scanned} delivered orders over {len(buckets)} days")

        report = []
        for day in sorted(buckets, reverse=True):
            total_revenue, order_count = buckets[day]
            platform_revenue, restaurant_revenue = commission_split(total_revenue)
            report.append({
                "date": day,
                "total_revenue": total_revenue,
                "order_count": order_count,
                "platform_revenue": platform_revenue,
                "restaurant_revenue": restaurant_revenue,
            })
        return report
