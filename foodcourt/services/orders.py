"""
Order Engine

Order placement, cancellation, restaurant status updates and payment
marking.

Placement is all-or-nothing: the restaurant and every requested line are
validated first, and the order is written only once they all pass. Each
line stores a snapshot of the item's name and price, so later menu edits
never change a historical order.

Status updates from the restaurant are permissive: any
``OrderStatus`` value is accepted whatever the current status. Only the
customer cancel path is gated (PLACED only). Moving an order to DELIVERED
settles it as cash on delivery (``payment_status = PAID``).
"""

import logging
from typing import Any, Iterable, Union

from sqlalchemy.orm import selectinload

from foodcourt.core.errors import (
    AuthorizationError,
    NotFoundError,
    PreconditionError,
    ValidationError,
)
from foodcourt.models import MenuItem, Order, OrderStatus, PaymentStatus, Restaurant
from foodcourt.services.payment import get_payment_service
from foodcourt.store import DocumentStore

logger = logging.getLogger(__name__)


def _line_value(line: Any, key: str) -> Any:
    if isinstance(line, dict):
        return line.get(key)
    return getattr(line, key, None)


def _validate_request(restaurant_id: str, items: Iterable[Any]) -> list[Any]:
    """Shape checks that need no database access."""
    if not restaurant_id:
        raise ValidationError("Restaurant ID is required")

    lines = list(items or [])
    if not lines:
        raise ValidationError("Order must have at least one item")

    for line in lines:
        menu_item_id = _line_value(line, "menu_item_id")
        quantity = _line_value(line, "quantity")
        if not menu_item_id or quantity is None:
            raise ValidationError("Each item must have menu_item_id and quantity")
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")

    return lines


class OrderEngine:
    """Order lifecycle for customers, restaurants and admins."""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def get(self, order_id: str) -> Order:
        order = await self.store.find_by_id(Order, order_id)
        if order is None:
            raise NotFoundError("Order not found")
        return order

    # =========================================================================
    # PLACEMENT
    # =========================================================================

    async def place(self, user_id: str, restaurant_id: str, items: Iterable[Any]) -> Order:
        """
        Place an order.

        Args:
            user_id: Customer placing the order
            restaurant_id: Target restaurant
            items: Lines with ``menu_item_id`` and ``quantity`` (dicts or objects)

        Returns:
            Order: The persisted order (status PLACED, payment PENDING)

        Raises:
            ValidationError: Malformed request, or an item from another restaurant
            NotFoundError: Restaurant or a menu item does not exist
            PreconditionError: Restaurant closed, or an item unavailable
        """
        lines = _validate_request(restaurant_id, items)

        restaurant = await self.store.find_by_id(Restaurant, restaurant_id)
        if restaurant is None:
            raise NotFoundError("Restaurant not found")
        if not restaurant.is_open:
            raise PreconditionError("Restaurant is currently closed")

        total_amount = 0.0
        snapshots = []

        for line in lines:
            menu_item_id = _line_value(line, "menu_item_id")
            quantity = _line_value(line, "quantity")

            menu_item = await self.store.find_by_id(MenuItem, menu_item_id)
            if menu_item is None:
                raise NotFoundError(f"Menu item {menu_item_id} not found")
            if not menu_item.is_available:
                raise PreconditionError(f"{menu_item.name} is not available right now")
            if menu_item.restaurant_id != restaurant.id:
                raise ValidationError(f"Item {menu_item.name} doesn't belong to this restaurant")

            snapshots.append({
                "menu_item_id": menu_item.id,
                "name_snapshot": menu_item.name,
                "price_snapshot": menu_item.price,
                "quantity": quantity,
            })
            total_amount += menu_item.price * quantity

        order = await self.store.create(
            Order,
            user_id=user_id,
            restaurant_id=restaurant.id,
            items=snapshots,
            total_amount=total_amount,
            status=OrderStatus.PLACED,
            payment_status=PaymentStatus.PENDING,
        )
        logger.info(
            f"Order {order.id} placed by {user_id} at restaurant {restaurant.id} "
            f"({len(snapshots)} lines, total {total_amount:.2f})"
        )
        return order

    # =========================================================================
    # STATE MACHINE
    # =========================================================================

    async def cancel(self, user_id: str, order_id: str) -> Order:
        """Customer cancellation; only the owner, only while PLACED."""
        order = await self.get(order_id)

        if order.user_id != user_id:
            raise AuthorizationError("You can't cancel someone else's order")
        if order.status != OrderStatus.PLACED:
            raise PreconditionError("Order can only be cancelled when it's in PLACED status")

        order.status = OrderStatus.CANCELLED
        order = await self.store.save(order)
        logger.info(f"Order {order.id} cancelled by customer {user_id}")
        return order

    async def update_status(
        self,
        restaurant_id: str,
        order_id: str,
        new_status: Union[OrderStatus, str],
    ) -> Order:
        """
        Set an order's status on behalf of its restaurant.

        No source -> target edge validation is performed. DELIVERED also
        forces ``payment_status = PAID``; no other status touches payment.
        """
        try:
            new_status = OrderStatus(new_status)
        except ValueError:
            valid = [s.value for s in OrderStatus]
            raise ValidationError(f"Invalid status. Must be one of: {valid}")

        order = await self.get(order_id)

        if order.restaurant_id != restaurant_id:
            raise AuthorizationError("This order doesn't belong to your restaurant")

        previous = order.status
        order.status = new_status
        if new_status == OrderStatus.DELIVERED:
            order.payment_status = PaymentStatus.PAID

        order = await self.store.save(order)
        logger.info(f"Order {order.id} status {previous.value} -> {new_status.value}")
        return order

    # =========================================================================
    # PAYMENT
    # =========================================================================

    async def mark_paid(self, order_id: str) -> Order:
        """Settle an order through the configured payment provider."""
        order = await self.get(order_id)

        if order.payment_status == PaymentStatus.PAID:
            raise PreconditionError("Order is already paid")

        result = await get_payment_service().settle(order.id, order.total_amount)
        if not result.success:
            logger.warning(f"Payment for order {order.id} failed: {result.error_message}")
            raise PreconditionError(result.error_message or "Payment failed")

        order.payment_status = PaymentStatus.PAID
        order.payment_reference = result.reference
        order = await self.store.save(order)
        logger.info(f"Order {order.id} marked as paid ({result.reference})")
        return order

    async def payment_status(self, order_id: str) -> dict[str, Any]:
        order = await self.get(order_id)
        return {
            "order_id": order.id,
            "payment_status": order.payment_status,
            "amount": order.total_amount,
        }

    # =========================================================================
    # LISTINGS
    # =========================================================================

    async def get_user_orders(self, user_id: str) -> list[Order]:
        """Customer's orders, newest first, with the restaurant summary loaded."""
        return await self.store.find(
            Order,
            order_by=[Order.created_at.desc()],
            options=[selectinload(Order.restaurant)],
            user_id=user_id,
        )

    async def get_restaurant_orders(self, restaurant_id: str) -> list[Order]:
        """Restaurant's orders, newest first, with the customer summary loaded."""
        return await self.store.find(
            Order,
            order_by=[Order.created_at.desc()],
            options=[selectinload(Order.customer)],
            restaurant_id=restaurant_id,
        )

    async def list_all(self) -> list[Order]:
        return await self.store.find(
            Order,
            order_by=[Order.created_at.desc()],
            options=[selectinload(Order.restaurant), selectinload(Order.customer)],
        )
