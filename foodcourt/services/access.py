"""
Ownership checks shared by every owner-scoped operation.

A RESTAURANT caller owns at most one restaurant. Operations acting "as the
restaurant" resolve it here instead of repeating the owner lookup.
"""

from typing import Optional

from foodcourt.core.errors import NotFoundError
from foodcourt.models import Restaurant
from foodcourt.store import DocumentStore


async def get_owned_restaurant(store: DocumentStore, owner_id: str) -> Optional[Restaurant]:
    """Return the caller's restaurant, or None when they have not created one."""
    return await store.find_one(Restaurant, owner_id=owner_id)


async def resolve_owned_restaurant(store: DocumentStore, owner_id: str) -> Restaurant:
    """
    Return the caller's restaurant.

    Raises:
        NotFoundError: The caller owns no restaurant.
    """
    restaurant = await get_owned_restaurant(store, owner_id)
    if restaurant is None:
        raise NotFoundError("Restaurant not found")
    return restaurant
