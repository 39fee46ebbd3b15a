"""
Menu routes. Reading a restaurant's menu is public; every write is scoped
to the calling owner's restaurant.
"""

from fastapi import APIRouter, Depends

from foodcourt.api.deps import CallerContext, get_store, require_roles
from foodcourt.models import Role
from foodcourt.schemas import (
    ApiResponse,
    MenuItemCreate,
    MenuItemResponse,
    MenuItemUpdate,
    ToggleAvailabilityRequest,
)
from foodcourt.services import MenuCatalog
from foodcourt.store import DocumentStore

router = APIRouter(prefix="/api/menus", tags=["Menus"])

owner_only = require_roles(Role.RESTAURANT)


@router.post("", response_model=ApiResponse[MenuItemResponse])
async def add_item(
    body: MenuItemCreate,
    caller: CallerContext = Depends(owner_only),
    store: DocumentStore = Depends(get_store),
):
    item = await MenuCatalog(store).add_item(caller.user_id, body.model_dump())
    return ApiResponse(
        message="Menu item added successfully",
        data=MenuItemResponse.model_validate(item),
    )


@router.get("/my", response_model=ApiResponse[list[MenuItemResponse]])
async def get_my_menu(
    caller: CallerContext = Depends(owner_only),
    store: DocumentStore = Depends(get_store),
):
    items = await MenuCatalog(store).list_mine(caller.user_id)
    return ApiResponse(
        message="Menu fetched successfully",
        data=[MenuItemResponse.model_validate(i) for i in items],
    )


@router.get("/restaurant/{restaurant_id}", response_model=ApiResponse[list[MenuItemResponse]])
async def get_restaurant_menu(
    restaurant_id: str,
    store: DocumentStore = Depends(get_store),
):
    """Full menu including unavailable items; clients filter for display."""
    items = await MenuCatalog(store).list_for_restaurant(restaurant_id)
    return ApiResponse(
        message="Menu fetched successfully",
        data=[MenuItemResponse.model_validate(i) for i in items],
    )


@router.patch("/{item_id}", response_model=ApiResponse[MenuItemResponse])
async def update_item(
    item_id: str,
    body: MenuItemUpdate,
    caller: CallerContext = Depends(owner_only),
    store: DocumentStore = Depends(get_store),
):
    item = await MenuCatalog(store).update_item(
        caller.user_id, item_id, body.model_dump(exclude_unset=True)
    )
    return ApiResponse(
        message="Menu item updated successfully",
        data=MenuItemResponse.model_validate(item),
    )


@router.patch("/{item_id}/toggle", response_model=ApiResponse[MenuItemResponse])
async def toggle_availability(
    item_id: str,
    body: ToggleAvailabilityRequest = ToggleAvailabilityRequest(),
    caller: CallerContext = Depends(owner_only),
    store: DocumentStore = Depends(get_store),
):
    item = await MenuCatalog(store).toggle_availability(caller.user_id, item_id, body.is_available)
    return ApiResponse(
        message="Availability updated successfully",
        data=MenuItemResponse.model_validate(item),
    )


@router.delete("/{item_id}", response_model=ApiResponse[None])
async def delete_item(
    item_id: str,
    caller: CallerContext = Depends(owner_only),
    store: DocumentStore = Depends(get_store),
):
    await MenuCatalog(store).delete_item(caller.user_id, item_id)
    return ApiResponse(message="Menu item deleted successfully")
