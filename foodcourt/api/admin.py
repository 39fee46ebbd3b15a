"""
Admin routes: platform listings, reports and the revenue export.
"""

import logging

from fastapi import APIRouter, Depends

from foodcourt.api.deps import CallerContext, get_store, require_roles
from foodcourt.models import Role
from foodcourt.schemas import (
    ApiResponse,
    DailyRevenue,
    ExportQueued,
    OrderDetail,
    RestaurantWithOwner,
    SystemReport,
    UserResponse,
)
from foodcourt.services import OrderEngine, RestaurantDirectory, RevenueAggregator, UserDirectory
from foodcourt.store import DocumentStore
from foodcourt.tasks import export_daily_revenue_report

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"])

admin_only = require_roles(Role.ADMIN)


# =============================================================================
# LISTINGS
# =============================================================================

@router.get("/users", response_model=ApiResponse[list[UserResponse]])
async def list_users(
    caller: CallerContext = Depends(admin_only),
    store: DocumentStore = Depends(get_store),
):
    users = await UserDirectory(store).list_users()
    return ApiResponse(
        message="Users fetched successfully",
        data=[UserResponse.model_validate(u) for u in users],
    )


@router.get("/restaurants", response_model=ApiResponse[list[RestaurantWithOwner]])
async def list_restaurants(
    caller: CallerContext = Depends(admin_only),
    store: DocumentStore = Depends(get_store),
):
    restaurants = await RestaurantDirectory(store).list_all()
    return ApiResponse(
        message="Restaurants fetched successfully",
        data=[RestaurantWithOwner.model_validate(r) for r in restaurants],
    )


@router.get("/orders", response_model=ApiResponse[list[OrderDetail]])
async def list_orders(
    caller: CallerContext = Depends(admin_only),
    store: DocumentStore = Depends(get_store),
):
    orders = await OrderEngine(store).list_all()
    return ApiResponse(
        message="Orders fetched successfully",
        data=[OrderDetail.model_validate(o) for o in orders],
    )


# =============================================================================
# REPORTS
# =============================================================================

@router.get("/reports", response_model=ApiResponse[SystemReport])
async def get_reports(
    caller: CallerContext = Depends(admin_only),
    store: DocumentStore = Depends(get_store),
):
    report = await RevenueAggregator(store).system_reports()
    return ApiResponse(
        message="Reports generated successfully",
        data=SystemReport.model_validate(report, from_attributes=True),
    )


@router.get("/revenue/daily", response_model=ApiResponse[list[DailyRevenue]])
async def get_daily_revenue(
    caller: CallerContext = Depends(admin_only),
    store: DocumentStore = Depends(get_store),
):
    days = await RevenueAggregator(store).daily_revenue()
    return ApiResponse(
        message="Daily revenue fetched successfully",
        data=[DailyRevenue(**day) for day in days],
    )


@router.post("/reports/export", response_model=ApiResponse[ExportQueued])
async def export_reports(caller: CallerContext = Depends(admin_only)):
    """Queue the daily revenue workbook export on the Celery worker."""
    task = export_daily_revenue_report.delay()
    logger.info(f"Daily revenue export queued by {caller.user_id} (task {task.id})")
    return ApiResponse(message="Export queued", data=ExportQueued(task_id=task.id))
