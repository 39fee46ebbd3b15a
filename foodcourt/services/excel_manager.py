"""
Excel Report Exporter with Concurrency Control

Writes the daily revenue report to ``<data_directory>/daily_revenue.xlsx``.
Each export replaces the workbook under a file lock, so two workers never
interleave their writes.
"""

import logging
from pathlib import Path
from typing import Any

import pandas as pd
from filelock import FileLock, Timeout

from foodcourt.core.config import get_settings
from foodcourt.utils.time_windows import utcnow

logger = logging.getLogger(__name__)

REVENUE_FILE_NAME = "daily_revenue.xlsx"


class ExcelManager:
    """Lock-guarded Excel exports of report data."""

    REVENUE_COLUMNS = [
        "date",
        "order_count",
        "total_revenue",
        "platform_revenue",
        "restaurant_revenue",
        "exported_at",
    ]

    @classmethod
    def _data_dir(cls) -> Path:
        """Create data directory if needed."""
        data_dir = Path(get_settings().data_directory)
        if not data_dir.exists():
            data_dir.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created data directory: {data_dir}")
        return data_dir

    @classmethod
    def revenue_file(cls) -> Path:
        return cls._data_dir() / REVENUE_FILE_NAME

    @classmethod
    def export_daily_revenue(cls, days: list[dict[str, Any]]) -> dict[str, Any]:
        """
        Write the daily revenue rows, replacing any previous export.

        Args:
            days: Rows as produced by ``RevenueAggregator.daily_revenue``

        Returns:
            dict: ``success``, ``message``, ``rows``, ``file`` and ``exported_at``
        """
        file_path = cls.revenue_file()
        lock_timeout = get_settings().export_lock_timeout
        result = {
            "success": False,
            "message": "",
            "rows": len(days),
            "file": str(file_path),
            "exported_at": None,
        }

        try:
            lock = FileLock(str(file_path) + ".lock", timeout=lock_timeout)

            with lock:
                logger.debug(f"Lock acquired for {file_path}")

                export_time = utcnow().isoformat()
                rows = [
                    {
                        "date": day["date"].isoformat(),
                        "order_count": day["order_count"],
                        "total_revenue": day["total_revenue"],
                        "platform_revenue": day["platform_revenue"],
                        "restaurant_revenue": day["restaurant_revenue"],
                        "exported_at": export_time,
                    }
                    for day in days
                ]
                df = pd.DataFrame(rows, columns=cls.REVENUE_COLUMNS)
                df.to_excel(str(file_path), index=False, engine="openpyxl")

                logger.info(f"Daily revenue exported to {file_path} ({len(rows)} days)")

                result["success"] = True
                result["message"] = f"{len(rows)} days exported"
                result["exported_at"] = export_time

        except Timeout:
            result["message"] = f"Lock timeout ({lock_timeout}s)"
            logger.error(f"Lock timeout for {file_path}")

        return result

    @classmethod
    def read_daily_revenue(cls) -> list[dict[str, Any]]:
        """Rows of the last export, or an empty list when none exists."""
        file_path = cls.revenue_file()
        if not file_path.exists():
            return []
        df = pd.read_excel(file_path, engine="openpyxl")
        return df.to_dict("records")
