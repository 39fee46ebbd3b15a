from datetime import date

from filelock import FileLock

from foodcourt.core.config import get_settings
from foodcourt.services.excel_manager import ExcelManager

DAYS = [
    {
        "date": date(2026, 3, 2),
        "total_revenue": 50.0,
        "order_count": 1,
        "platform_revenue": 10.0,
        "restaurant_revenue": 40.0,
    },
    {
        "date": date(2026, 3, 1),
        "total_revenue": 30.0,
        "order_count": 2,
        "platform_revenue": 6.0,
        "restaurant_revenue": 24.0,
    },
]


def test_export_writes_workbook():
    result = ExcelManager.export_daily_revenue(DAYS)

    assert result["success"] is True
    assert result["rows"] == 2
    assert result["file"].startswith(get_settings().data_directory)

    rows = ExcelManager.read_daily_revenue()
    assert [r["date"] for r in rows] == ["2026-03-02", "2026-03-01"]
    assert rows[1]["order_count"] == 2
    assert rows[0]["platform_revenue"] + rows[0]["restaurant_revenue"] == rows[0]["total_revenue"]


def test_export_replaces_previous_file():
    ExcelManager.export_daily_revenue(DAYS)
    ExcelManager.export_daily_revenue(DAYS[:1])

    assert len(ExcelManager.read_daily_revenue()) == 1


def test_export_of_empty_report_keeps_columns():
    ExcelManager.export_daily_revenue([])

    assert ExcelManager.read_daily_revenue() == []


def test_read_without_export():
    assert ExcelManager.read_daily_revenue() == []


def test_export_times_out_when_locked(monkeypatch):
    monkeypatch.setenv("EXPORT_LOCK_TIMEOUT", "0")
    get_settings.cache_clear()
    path = ExcelManager.revenue_file()

    with FileLock(str(path) + ".lock"):
        result = ExcelManager.export_daily_revenue(DAYS)

    assert result["success"] is False
    assert "Lock timeout" in result["message"]
