"""
Menu Catalog

Per-restaurant menu items. Every mutation is scoped to the caller's own
restaurant: an item belonging to someone else is reported exactly like an
item that does not exist.
"""

import logging
from typing import Any, Optional

from foodcourt.core.config import get_settings
from foodcourt.core.errors import NotFoundError, PreconditionError, ValidationError
from foodcourt.models import MenuCategory, MenuItem, Restaurant
from foodcourt.services.access import get_owned_restaurant, resolve_owned_restaurant
from foodcourt.store import DocumentStore

logger = logging.getLogger(__name__)


def _parse_category(value: Any) -> MenuCategory:
    if value is None or value == "":
        return MenuCategory.OTHER
    if isinstance(value, MenuCategory):
        return value
    try:
        return MenuCategory(value)
    except ValueError:
        valid = [c.value for c in MenuCategory]
        raise ValidationError(f"Invalid category. Must be one of: {valid}")


def _check_price(price: Any) -> float:
    if price is None:
        raise ValidationError("Name and price are required")
    if price < 0:
        raise ValidationError("Price cannot be negative")
    return float(price)


class MenuCatalog:
    """Menu item management for restaurant owners, plus the public listing."""

    def __init__(self, store: DocumentStore):
        self.store = store
        self.settings = get_settings()

    async def _owned_item(self, owner_id: str, item_id: str) -> tuple[Restaurant, MenuItem]:
        restaurant = await resolve_owned_restaurant(self.store, owner_id)
        item = await self.store.find_one(MenuItem, id=item_id, restaurant_id=restaurant.id)
        if item is None:
            raise NotFoundError("Menu item not found")
        return restaurant, item

    # =========================================================================
    # LISTINGS
    # =========================================================================

    async def list_for_restaurant(self, restaurant_id: str) -> list[MenuItem]:
        """All items of a restaurant, available or not. Callers filter for display."""
        return await self.store.find(
            MenuItem,
            order_by=[MenuItem.created_at.asc()],
            restaurant_id=restaurant_id,
        )

    async def list_mine(self, owner_id: str) -> list[MenuItem]:
        restaurant = await resolve_owned_restaurant(self.store, owner_id)
        return await self.list_for_restaurant(restaurant.id)

    # =========================================================================
    # OWNER OPERATIONS
    # =========================================================================

    async def add_item(self, owner_id: str, fields: dict[str, Any]) -> MenuItem:
        """
        Add an item to the owner's restaurant.

        Raises:
            PreconditionError: The owner has not created a restaurant yet.
            ValidationError: Missing name/price, negative price, unknown category.
        """
        restaurant = await get_owned_restaurant(self.store, owner_id)
        if restaurant is None:
            raise PreconditionError("You need to create a restaurant first")

        name = (fields.get("name") or "").strip()
        if not name:
            raise ValidationError("Name and price are required")
        price = _check_price(fields.get("price"))
        category = _parse_category(fields.get("category"))

        is_veg = fields.get("is_veg")
        is_available = fields.get("is_available")

        item = await self.store.create(
            MenuItem,
            restaurant_id=restaurant.id,
            name=name,
            description=fields.get("description") or "",
            price=price,
            is_veg=True if is_veg is None else is_veg,
            category=category,
            image=fields.get("image") or self.settings.default_menu_image,
            is_available=True if is_available is None else is_available,
        )
        logger.info(f"Menu item {item.id} ({item.name}) added to restaurant {restaurant.id}")
        return item

    async def update_item(self, owner_id: str, item_id: str, fields: dict[str, Any]) -> MenuItem:
        """
        Apply the provided fields to one of the owner's items.

        Price and category are validated before anything is assigned, so a
        rejected update leaves the tracked item untouched.
        """
        _, item = await self._owned_item(owner_id, item_id)

        price = _check_price(fields["price"]) if fields.get("price") is not None else None
        category = _parse_category(fields["category"]) if fields.get("category") else None

        name = fields.get("name")
        if name and name.strip():
            item.name = name.strip()
        if fields.get("description") is not None:
            item.description = fields["description"]
        if price is not None:
            item.price = price
        if fields.get("is_veg") is not None:
            item.is_veg = fields["is_veg"]
        if category is not None:
            item.category = category
        if fields.get("image"):
            item.image = fields["image"]
        if fields.get("is_available") is not None:
            item.is_available = fields["is_available"]

        return await self.store.save(item)

    async def toggle_availability(
        self,
        owner_id: str,
        item_id: str,
        is_available: Optional[bool] = None,
    ) -> MenuItem:
        """Set availability, or flip it when no value is given."""
        _, item = await self._owned_item(owner_id, item_id)

        item.is_available = (not item.is_available) if is_available is None else is_available
        item = await self.store.save(item)
        logger.info(f"Menu item {item.id} availability -> {item.is_available}")
        return item

    async def delete_item(self, owner_id: str, item_id: str) -> MenuItem:
        restaurant = await resolve_owned_restaurant(self.store, owner_id)

        item = await self.store.find_one_and_delete(MenuItem, id=item_id, restaurant_id=restaurant.id)
        if item is None:
            raise NotFoundError("Menu item not found")

        logger.info(f"Menu item {item_id} deleted from restaurant {restaurant.id}")
        return item
