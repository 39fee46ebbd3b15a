"""
SQLAlchemy Database Models

One table per entity. The only embedded data is the order's line-item
snapshot, stored as JSON on the order row so later menu edits never reach it.
"""

import enum
import uuid

from sqlalchemy import Column, String, Float, Integer, DateTime, Text, Enum, Boolean, JSON, ForeignKey
from sqlalchemy.orm import relationship, foreign

from foodcourt.database import Base
from foodcourt.utils.time_windows import utcnow


def new_id() -> str:
    return uuid.uuid4().hex


# =============================================================================
# ENUMS
# =============================================================================

class Role(str, enum.Enum):
    """Caller roles supplied by the identity context."""
    USER = "USER"
    RESTAURANT = "RESTAURANT"
    ADMIN = "ADMIN"


class ApprovalStatus(str, enum.Enum):
    """Admin gate on a restaurant, separate from the owner's account state."""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class OrderStatus(str, enum.Enum):
    """
    Order status workflow.

    Happy path: PLACED -> CONFIRMED -> PREPARING -> READY -> DELIVERED.
    Customers may only move PLACED -> CANCELLED. Restaurant status updates
    accept any member of this enum with no edge validation; that is the
    contract of ``OrderEngine.update_status``.
    """
    PLACED = "PLACED"
    CONFIRMED = "CONFIRMED"
    PREPARING = "PREPARING"
    READY = "READY"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class PaymentStatus(str, enum.Enum):
    PENDING = "PENDING"
    PAID = "PAID"


class MenuCategory(str, enum.Enum):
    APPETIZERS = "Appetizers"
    MAIN_COURSE = "Main Course"
    DESSERTS = "Desserts"
    BEVERAGES = "Beverages"
    BREADS = "Breads"
    RICE_BIRYANI = "Rice & Biryani"
    CHINESE = "Chinese"
    SOUTH_INDIAN = "South Indian"
    FAST_FOOD = "Fast Food"
    SALADS = "Salads"
    OTHER = "Other"


# =============================================================================
# MODELS
# =============================================================================

class User(Base):
    """
    Account record owned by the identity service.

    Read here for identity summaries, admin listings and report counts only;
    credentials never pass through this package.
    """
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    phone = Column(String(20), nullable=True)
    role = Column(Enum(Role), default=Role.USER, nullable=False, index=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)

    def __repr__(self):
        return f"<User {self.id} - {self.role.value}>"


class Restaurant(Base):
    """
    A restaurant and its admin approval state.

    ``is_open`` is only ever true while APPROVED and active.
    """
    __tablename__ = "restaurants"

    id = Column(String(32), primary_key=True, default=new_id)
    owner_id = Column(String(32), nullable=False, unique=True, index=True)

    # =========================================================================
    # PROFILE (owner editable)
    # =========================================================================
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    address = Column(String(500), nullable=False)
    preparation_time = Column(Integer, nullable=False, default=30)

    # =========================================================================
    # OPERATIONAL STATE
    # =========================================================================
    is_open = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)

    # =========================================================================
    # ADMIN APPROVAL
    # =========================================================================
    approval_status = Column(
        Enum(ApprovalStatus),
        default=ApprovalStatus.PENDING,
        nullable=False,
        index=True
    )
    admin_notes = Column(Text, nullable=False, default="")
    approved_by = Column(String(32), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    rejected_by = Column(String(32), nullable=True)
    rejected_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)

    owner = relationship(
        "User",
        primaryjoin=lambda: foreign(Restaurant.owner_id) == User.id,
        viewonly=True,
        lazy="raise",
    )

    def __repr__(self):
        return f"<Restaurant {self.id} - {self.name} - {self.approval_status.value}>"


class MenuItem(Base):
    __tablename__ = "menu_items"

    id = Column(String(32), primary_key=True, default=new_id)
    restaurant_id = Column(String(32), ForeignKey("restaurants.id"), nullable=False, index=True)

    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    price = Column(Float, nullable=False)
    is_veg = Column(Boolean, nullable=False, default=True)
    category = Column(Enum(MenuCategory), nullable=False, default=MenuCategory.OTHER)
    image = Column(String(500), nullable=True)
    is_available = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)

    def __repr__(self):
        return f"<MenuItem {self.id} - {self.name} - {self.price}>"


class Order(Base):
    """
    A customer order.

    ``items`` holds the frozen line snapshots:
    ``[{"menu_item_id", "name_snapshot", "price_snapshot", "quantity"}]``.
    ``total_amount`` is computed once at placement and never recomputed.
    """
    __tablename__ = "orders"

    id = Column(String(32), primary_key=True, default=new_id)
    user_id = Column(String(32), nullable=False, index=True)
    restaurant_id = Column(String(32), ForeignKey("restaurants.id"), nullable=False, index=True)

    items = Column(JSON, nullable=False)
    total_amount = Column(Float, nullable=False)

    status = Column(
        Enum(OrderStatus),
        default=OrderStatus.PLACED,
        nullable=False,
        index=True
    )
    payment_status = Column(
        Enum(PaymentStatus),
        default=PaymentStatus.PENDING,
        nullable=False
    )
    payment_reference = Column(String(100), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)

    restaurant = relationship("Restaurant", viewonly=True, lazy="raise")
    customer = relationship(
        "User",
        primaryjoin=lambda: foreign(Order.user_id) == User.id,
        viewonly=True,
        lazy="raise",
    )

    def __repr__(self):
        return f"<Order {self.id} - {self.status.value} - {self.total_amount}>"
