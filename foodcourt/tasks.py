"""
Celery Tasks
Background report exports. The worker opens its own database session and
only reads; nothing here changes orders.
"""

import asyncio
import logging
import time
from typing import Any

from foodcourt.celery_worker import celery_app
from foodcourt.database import async_session_maker, engine
from foodcourt.services.excel_manager import ExcelManager
from foodcourt.services.stats import RevenueAggregator
from foodcourt.store import DocumentStore

logger = logging.getLogger(__name__)


async def collect_daily_revenue() -> list[dict[str, Any]]:
    """Run the daily revenue rollup on a dedicated session."""
    try:
        async with async_session_maker() as session:
            return await RevenueAggregator(DocumentStore(session)).daily_revenue()
    finally:
        # Pooled connections belong to this event loop only
        await engine.dispose()


@celery_app.task(
    bind=True,
    max_retries=3,
    default_retry_delay=5,
    autoretry_for=(Exception,),
    retry_backoff=True
)
def export_daily_revenue_report(self) -> dict:
    """
    Export the daily revenue report to Excel.
    This task runs asynchronously via Celery worker.

    Returns:
        dict: Result of the export operation
    """
    task_id = self.request.id
    logger.info(f"Task {task_id}: exporting daily revenue")
    start_time = time.time()

    days = asyncio.run(collect_daily_revenue())
    result = ExcelManager.export_daily_revenue(days)

    elapsed = round(time.time() - start_time, 3)
    result["task_id"] = task_id
    result["processing_time_seconds"] = elapsed

    if result["success"]:
        logger.info(f"Task {task_id}: {result['rows']} days exported in {elapsed}s")
    else:
        logger.warning(f"Task {task_id}: export failed - {result['message']}")

    return result
