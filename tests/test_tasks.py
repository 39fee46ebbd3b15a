from datetime import datetime
from unittest.mock import AsyncMock

from conftest import make_item, make_restaurant
from foodcourt import tasks
from foodcourt.models import OrderStatus
from foodcourt.services import OrderEngine
from foodcourt.services.excel_manager import ExcelManager
from foodcourt.utils.time_windows import UTC


async def test_collect_daily_revenue_reads_through_its_own_session(store, session_maker, monkeypatch):
    restaurant = await make_restaurant(store, owner_id="owner-1")
    item = await make_item(store, "owner-1", price=8.0)
    engine = OrderEngine(store)
    order = await engine.place("cust-1", restaurant.id, [{"menu_item_id": item.id, "quantity": 2}])
    order = await engine.update_status(restaurant.id, order.id, OrderStatus.DELIVERED)
    order.created_at = datetime(2026, 4, 10, 12, 0, tzinfo=UTC)
    await store.save(order)

    monkeypatch.setattr(tasks, "async_session_maker", session_maker)
    monkeypatch.setattr(tasks, "engine", AsyncMock())

    days = await tasks.collect_daily_revenue()

    assert len(days) == 1
    assert days[0]["total_revenue"] == 16.0


def test_export_task_writes_workbook(monkeypatch):
    async def fake_collect():
        return [{
            "date": datetime(2026, 4, 10).date(),
            "total_revenue": 16.0,
            "order_count": 1,
            "platform_revenue": 3.2,
            "restaurant_revenue": 12.8,
        }]

    monkeypatch.setattr(tasks, "collect_daily_revenue", fake_collect)

    result = tasks.export_daily_revenue_report.apply().get()

    assert result["success"] is True
    assert result["rows"] == 1
    assert ExcelManager.read_daily_revenue()[0]["total_revenue"] == 16.0
