"""
Restaurant routes: public browse, owner self-service and admin approval.
"""

from fastapi import APIRouter, Depends

from foodcourt.api.deps import CallerContext, get_caller, get_store, require_roles
from foodcourt.models import Role
from foodcourt.schemas import (
    ApiResponse,
    ApproveRequest,
    DashboardStats,
    DeactivateRequest,
    OrderWithCustomer,
    RejectRequest,
    RestaurantCreate,
    RestaurantResponse,
    RestaurantUpdate,
    RestaurantWithOwner,
    ToggleOpenRequest,
)
from foodcourt.services import OrderEngine, RestaurantDirectory, RevenueAggregator
from foodcourt.services.access import resolve_owned_restaurant
from foodcourt.store import DocumentStore

router = APIRouter(prefix="/api/restaurants", tags=["Restaurants"])

owner_only = require_roles(Role.RESTAURANT)
admin_only = require_roles(Role.ADMIN)


# =============================================================================
# BROWSE
# =============================================================================

@router.get("", response_model=ApiResponse[list[RestaurantWithOwner]])
async def list_restaurants(
    caller: CallerContext = Depends(get_caller),
    store: DocumentStore = Depends(get_store),
):
    """Approved, active restaurants for customers to browse."""
    restaurants = await RestaurantDirectory(store).list_public()
    return ApiResponse(
        message="Restaurants fetched successfully",
        data=[RestaurantWithOwner.model_validate(r) for r in restaurants],
    )


# =============================================================================
# OWNER
# =============================================================================

@router.post("", response_model=ApiResponse[RestaurantResponse])
async def create_restaurant(
    body: RestaurantCreate,
    caller: CallerContext = Depends(owner_only),
    store: DocumentStore = Depends(get_store),
):
    restaurant = await RestaurantDirectory(store).create(
        owner_id=caller.user_id,
        name=body.name,
        address=body.address,
        description=body.description,
        preparation_time=body.preparation_time,
    )
    return ApiResponse(
        message="Restaurant created successfully",
        data=RestaurantResponse.model_validate(restaurant),
    )


@router.get("/my-restaurant", response_model=ApiResponse[RestaurantResponse])
async def get_my_restaurant(
    caller: CallerContext = Depends(owner_only),
    store: DocumentStore = Depends(get_store),
):
    """Returns ``data: null`` when the owner has not created a restaurant yet."""
    restaurant = await RestaurantDirectory(store).get_mine(caller.user_id)
    if restaurant is None:
        return ApiResponse(message="No restaurant found", data=None)
    return ApiResponse(
        message="Restaurant fetched successfully",
        data=RestaurantResponse.model_validate(restaurant),
    )


@router.patch("/my-restaurant", response_model=ApiResponse[RestaurantResponse])
async def update_my_restaurant(
    body: RestaurantUpdate,
    caller: CallerContext = Depends(owner_only),
    store: DocumentStore = Depends(get_store),
):
    restaurant = await RestaurantDirectory(store).update(
        caller.user_id, body.model_dump(exclude_unset=True)
    )
    return ApiResponse(
        message="Restaurant updated successfully",
        data=RestaurantResponse.model_validate(restaurant),
    )


@router.patch("/toggle-status", response_model=ApiResponse[RestaurantResponse])
async def toggle_status(
    body: ToggleOpenRequest,
    caller: CallerContext = Depends(owner_only),
    store: DocumentStore = Depends(get_store),
):
    restaurant = await RestaurantDirectory(store).toggle_open(caller.user_id, body.is_open)
    return ApiResponse(
        message="Restaurant status updated",
        data=RestaurantResponse.model_validate(restaurant),
    )


@router.get("/orders", response_model=ApiResponse[list[OrderWithCustomer]])
async def get_restaurant_orders(
    caller: CallerContext = Depends(owner_only),
    store: DocumentStore = Depends(get_store),
):
    restaurant = await resolve_owned_restaurant(store, caller.user_id)
    orders = await OrderEngine(store).get_restaurant_orders(restaurant.id)
    return ApiResponse(
        message="Orders fetched successfully",
        data=[OrderWithCustomer.model_validate(o) for o in orders],
    )


@router.get("/dashboard", response_model=ApiResponse[DashboardStats])
async def get_dashboard(
    caller: CallerContext = Depends(owner_only),
    store: DocumentStore = Depends(get_store),
):
    restaurant = await resolve_owned_restaurant(store, caller.user_id)
    dashboard = await RevenueAggregator(store).dashboard(restaurant.id)
    return ApiResponse(
        message="Dashboard data fetched successfully",
        data=DashboardStats(**dashboard),
    )


# =============================================================================
# ADMIN
# =============================================================================

@router.get("/admin/all", response_model=ApiResponse[list[RestaurantWithOwner]])
async def list_all_restaurants(
    caller: CallerContext = Depends(admin_only),
    store: DocumentStore = Depends(get_store),
):
    restaurants = await RestaurantDirectory(store).list_all()
    return ApiResponse(
        message="All restaurants fetched",
        data=[RestaurantWithOwner.model_validate(r) for r in restaurants],
    )


@router.patch("/admin/{restaurant_id}/approve", response_model=ApiResponse[RestaurantResponse])
async def approve_restaurant(
    restaurant_id: str,
    body: ApproveRequest = ApproveRequest(),
    caller: CallerContext = Depends(admin_only),
    store: DocumentStore = Depends(get_store),
):
    restaurant = await RestaurantDirectory(store).approve(
        restaurant_id, caller.user_id, body.admin_notes
    )
    return ApiResponse(
        message="Restaurant approved successfully",
        data=RestaurantResponse.model_validate(restaurant),
    )


@router.patch("/admin/{restaurant_id}/reject", response_model=ApiResponse[RestaurantResponse])
async def reject_restaurant(
    restaurant_id: str,
    body: RejectRequest = RejectRequest(),
    caller: CallerContext = Depends(admin_only),
    store: DocumentStore = Depends(get_store),
):
    restaurant = await RestaurantDirectory(store).reject(
        restaurant_id, caller.user_id, body.reason
    )
    return ApiResponse(
        message="Restaurant rejected",
        data=RestaurantResponse.model_validate(restaurant),
    )


@router.patch("/admin/{restaurant_id}/deactivate", response_model=ApiResponse[RestaurantResponse])
async def deactivate_restaurant(
    restaurant_id: str,
    body: DeactivateRequest = DeactivateRequest(),
    caller: CallerContext = Depends(admin_only),
    store: DocumentStore = Depends(get_store),
):
    restaurant = await RestaurantDirectory(store).deactivate(restaurant_id, body.reason)
    return ApiResponse(
        message="Restaurant deactivated",
        data=RestaurantResponse.model_validate(restaurant),
    )


@router.patch("/admin/{restaurant_id}/reactivate", response_model=ApiResponse[RestaurantResponse])
async def reactivate_restaurant(
    restaurant_id: str,
    caller: CallerContext = Depends(admin_only),
    store: DocumentStore = Depends(get_store),
):
    restaurant = await RestaurantDirectory(store).reactivate(restaurant_id)
    return ApiResponse(
        message="Restaurant reactivated",
        data=RestaurantResponse.model_validate(restaurant),
    )
