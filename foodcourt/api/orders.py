"""
Order routes for customers (place, cancel, history, stats) and restaurants
(incoming orders, status updates, stats).
"""

from fastapi import APIRouter, Depends

from foodcourt.api.deps import CallerContext, get_store, require_roles
from foodcourt.models import Role
from foodcourt.schemas import (
    ApiResponse,
    OrderCreate,
    OrderResponse,
    OrderWithCustomer,
    OrderWithRestaurant,
    RestaurantStats,
    StatusUpdateRequest,
    UserStats,
)
from foodcourt.services import OrderEngine, RevenueAggregator
from foodcourt.services.access import resolve_owned_restaurant
from foodcourt.store import DocumentStore

router = APIRouter(prefix="/api/orders", tags=["Orders"])

customer_only = require_roles(Role.USER)
owner_only = require_roles(Role.RESTAURANT)


# =============================================================================
# CUSTOMER
# =============================================================================

@router.post("", response_model=ApiResponse[OrderResponse])
async def place_order(
    body: OrderCreate,
    caller: CallerContext = Depends(customer_only),
    store: DocumentStore = Depends(get_store),
):
    order = await OrderEngine(store).place(
        caller.user_id,
        body.restaurant_id,
        [line.model_dump() for line in body.items],
    )
    return ApiResponse(
        message="Order placed successfully",
        data=OrderResponse.model_validate(order),
    )


@router.get("/my-orders", response_model=ApiResponse[list[OrderWithRestaurant]])
async def get_my_orders(
    caller: CallerContext = Depends(customer_only),
    store: DocumentStore = Depends(get_store),
):
    orders = await OrderEngine(store).get_user_orders(caller.user_id)
    return ApiResponse(
        message="Orders fetched successfully",
        data=[OrderWithRestaurant.model_validate(o) for o in orders],
    )


@router.get("/user-stats", response_model=ApiResponse[UserStats])
async def get_user_stats(
    caller: CallerContext = Depends(customer_only),
    store: DocumentStore = Depends(get_store),
):
    stats = await RevenueAggregator(store).user_stats(caller.user_id)
    return ApiResponse(message="Statistics retrieved successfully", data=UserStats(**stats))


@router.patch("/{order_id}/cancel", response_model=ApiResponse[OrderResponse])
async def cancel_order(
    order_id: str,
    caller: CallerContext = Depends(customer_only),
    store: DocumentStore = Depends(get_store),
):
    order = await OrderEngine(store).cancel(caller.user_id, order_id)
    return ApiResponse(
        message="Order cancelled successfully",
        data=OrderResponse.model_validate(order),
    )


# =============================================================================
# RESTAURANT
# =============================================================================

@router.get("/restaurant-orders", response_model=ApiResponse[list[OrderWithCustomer]])
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


@router.get("/restaurant-stats", response_model=ApiResponse[RestaurantStats])
async def get_restaurant_stats(
    caller: CallerContext = Depends(owner_only),
    store: DocumentStore = Depends(get_store),
):
    restaurant = await resolve_owned_restaurant(store, caller.user_id)
    stats = await RevenueAggregator(store).restaurant_stats(restaurant.id)
    return ApiResponse(message="Statistics retrieved successfully", data=RestaurantStats(**stats))


@router.patch("/{order_id}/status", response_model=ApiResponse[OrderResponse])
async def update_order_status(
    order_id: str,
    body: StatusUpdateRequest,
    caller: CallerContext = Depends(owner_only),
    store: DocumentStore = Depends(get_store),
):
    restaurant = await resolve_owned_restaurant(store, caller.user_id)
    order = await OrderEngine(store).update_status(restaurant.id, order_id, body.status)
    return ApiResponse(
        message="Order status updated successfully",
        data=OrderResponse.model_validate(order),
    )
