"""
Restaurant Directory

Restaurant records, the admin approval workflow and the owner's open/closed
switch.

Approval rules:
    - New restaurants start PENDING and closed.
    - Approving opens the restaurant; rejecting or deactivating closes it.
    - A restaurant is only ever open while APPROVED and active.
    - Rejection is scoped to the restaurant; the owner's account is untouched
      and the owner can still log in.
"""

import logging
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from foodcourt.core.config import get_settings
from foodcourt.core.errors import ConflictError, NotFoundError, PreconditionError, ValidationError
from foodcourt.models import ApprovalStatus, Restaurant
from foodcourt.services.access import get_owned_restaurant, resolve_owned_restaurant
from foodcourt.store import DocumentStore
from foodcourt.utils.time_windows import utcnow

logger = logging.getLogger(__name__)


class RestaurantDirectory:
    """Restaurant lifecycle operations for owners and admins."""

    def __init__(self, store: DocumentStore):
        self.store = store
        self.settings = get_settings()

    async def _get(self, restaurant_id: str) -> Restaurant:
        restaurant = await self.store.find_by_id(Restaurant, restaurant_id)
        if restaurant is None:
            raise NotFoundError("Restaurant not found")
        return restaurant

    # =========================================================================
    # LISTINGS
    # =========================================================================

    async def list_public(self) -> list[Restaurant]:
        """Approved, active restaurants, newest first."""
        return await self.store.find(
            Restaurant,
            order_by=[Restaurant.created_at.desc()],
            options=[selectinload(Restaurant.owner)],
            is_active=True,
            approval_status=ApprovalStatus.APPROVED,
        )

    async def list_all(self) -> list[Restaurant]:
        """Every restaurant regardless of approval, newest first (admin view)."""
        return await self.store.find(
            Restaurant,
            order_by=[Restaurant.created_at.desc()],
            options=[selectinload(Restaurant.owner)],
        )

    async def get_mine(self, owner_id: str) -> Optional[Restaurant]:
        return await get_owned_restaurant(self.store, owner_id)

    # =========================================================================
    # OWNER OPERATIONS
    # =========================================================================

    async def create(
        self,
        owner_id: str,
        name: str,
        address: str,
        description: Optional[str] = None,
        preparation_time: Optional[int] = None,
    ) -> Restaurant:
        """
        Create the owner's restaurant.

        Raises:
            ValidationError: Name or address missing.
            ConflictError: The owner already has a restaurant.
        """
        if not name or not name.strip() or not address or not address.strip():
            raise ValidationError("Name and address are required")

        existing = await get_owned_restaurant(self.store, owner_id)
        if existing is not None:
            raise ConflictError("You already have a restaurant")

        # A concurrent create for the same owner trips the unique owner_id index
        try:
            restaurant = await self.store.create(
                Restaurant,
                owner_id=owner_id,
                name=name.strip(),
                address=address.strip(),
                description=description or "",
                preparation_time=preparation_time or self.settings.default_preparation_time,
                approval_status=ApprovalStatus.PENDING,
                is_open=False,
                is_active=True,
            )
        except IntegrityError:
            raise ConflictError("You already have a restaurant")
        logger.info(f"Restaurant {restaurant.id} created by owner {owner_id} (pending approval)")
        return restaurant

    async def update(self, owner_id: str, fields: dict[str, Any]) -> Restaurant:
        """
        Update the owner's profile fields.

        Only name, description, address and preparation_time are applied;
        anything else in ``fields`` is ignored. Blank name/address and a
        non-positive preparation time leave the current value in place.
        """
        restaurant = await resolve_owned_restaurant(self.store, owner_id)

        name = fields.get("name")
        if name and name.strip():
            restaurant.name = name.strip()
        if fields.get("description") is not None:
            restaurant.description = fields["description"]
        address = fields.get("address")
        if address and address.strip():
            restaurant.address = address.strip()
        preparation_time = fields.get("preparation_time")
        if preparation_time and preparation_time > 0:
            restaurant.preparation_time = preparation_time

        return await self.store.save(restaurant)

    async def toggle_open(self, owner_id: str, is_open: bool) -> Restaurant:
        """
        Open or close the owner's restaurant.

        Raises:
            NotFoundError: Owner has no restaurant.
            PreconditionError: Not approved, or deactivated by an admin.
        """
        restaurant = await resolve_owned_restaurant(self.store, owner_id)

        if restaurant.approval_status != ApprovalStatus.APPROVED:
            raise PreconditionError("Restaurant must be approved by admin before you can open/close it")
        if is_open and not restaurant.is_active:
            raise PreconditionError("Restaurant has been deactivated by admin")

        restaurant.is_open = is_open
        restaurant = await self.store.save(restaurant)
        logger.info(f"Restaurant {restaurant.id} is now {'open' if is_open else 'closed'}")
        return restaurant

    # =========================================================================
    # ADMIN OPERATIONS
    # =========================================================================

    async def approve(self, restaurant_id: str, admin_id: str, notes: Optional[str] = None) -> Restaurant:
        restaurant = await self._get(restaurant_id)

        restaurant.approval_status = ApprovalStatus.APPROVED
        restaurant.admin_notes = notes or "Approved"
        restaurant.is_active = True
        restaurant.is_open = True
        restaurant.approved_by = admin_id
        restaurant.approved_at = utcnow()

        restaurant = await self.store.save(restaurant)
        logger.info(f"Restaurant {restaurant.id} approved by {admin_id}")
        return restaurant

    async def reject(self, restaurant_id: str, admin_id: str, reason: Optional[str]) -> Restaurant:
        """
        Reject a restaurant.

        Only the restaurant is closed and deactivated; the owner's account
        stays active so they can log in and create a new restaurant.
        """
        if not reason or not reason.strip():
            raise ValidationError("Rejection reason is required")

        restaurant = await self._get(restaurant_id)

        restaurant.approval_status = ApprovalStatus.REJECTED
        restaurant.admin_notes = reason
        restaurant.is_active = False
        restaurant.is_open = False
        restaurant.rejected_by = admin_id
        restaurant.rejected_at = utcnow()

        restaurant = await self.store.save(restaurant)
        logger.info(f"Restaurant {restaurant.id} rejected by {admin_id}")
        return restaurant

    async def deactivate(self, restaurant_id: str, reason: Optional[str] = None) -> Restaurant:
        restaurant = await self._get(restaurant_id)

        restaurant.is_active = False
        restaurant.is_open = False
        restaurant.admin_notes = reason or ""

        restaurant = await self.store.save(restaurant)
        logger.info(f"Restaurant {restaurant.id} deactivated")
        return restaurant

    async def reactivate(self, restaurant_id: str) -> Restaurant:
        restaurant = await self._get(restaurant_id)

        if restaurant.approval_status != ApprovalStatus.APPROVED:
            raise PreconditionError("Restaurant must be approved first")

        restaurant.is_active = True
        restaurant.is_open = True

        restaurant = await self.store.save(restaurant)
        logger.info(f"Restaurant {restaurant.id} reactivated")
        return restaurant
