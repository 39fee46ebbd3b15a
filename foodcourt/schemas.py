"""
Pydantic Schemas for Request/Response Validation

Request bodies are lenient: required business fields are
Optional here so the services can reject them with their own messages.
Response models read straight from the ORM objects (``from_attributes``).

Relationships on the models refuse lazy loading, so every response shape
that embeds a summary (restaurant owner, order restaurant, order customer)
has its own model and is only used where that relationship was loaded.
"""

import datetime as dt
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from foodcourt.models import (
    ApprovalStatus,
    MenuCategory,
    OrderStatus,
    PaymentStatus,
    Role,
)

DataT = TypeVar("DataT")


# =============================================================================
# ENVELOPE
# =============================================================================

class ApiResponse(BaseModel, Generic[DataT]):
    """Envelope returned by every endpoint."""
    success: bool = True
    message: str = ""
    data: Optional[DataT] = None


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    data: Optional[Any] = None


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class RestaurantCreate(BaseModel):
    name: Optional[str] = Field(None, max_length=200, examples=["Spice Route"])
    address: Optional[str] = Field(None, max_length=500, examples=["12 Market Street"])
    description: Optional[str] = None
    preparation_time: Optional[int] = Field(None, ge=1, examples=[25])


class RestaurantUpdate(BaseModel):
    """Unknown keys are dropped; only these four fields can change."""
    name: Optional[str] = None
    address: Optional[str] = None
    description: Optional[str] = None
    preparation_time: Optional[int] = None


class ToggleOpenRequest(BaseModel):
    is_open: bool


class ApproveRequest(BaseModel):
    admin_notes: Optional[str] = None


class RejectRequest(BaseModel):
    reason: Optional[str] = None


class DeactivateRequest(BaseModel):
    reason: Optional[str] = None


class MenuItemCreate(BaseModel):
    name: Optional[str] = Field(None, max_length=200, examples=["Paneer Tikka"])
    price: Optional[float] = Field(None, examples=[8.5])
    description: Optional[str] = None
    is_veg: Optional[bool] = None
    category: Optional[str] = Field(None, examples=["Appetizers"])
    image: Optional[str] = None
    is_available: Optional[bool] = None


class MenuItemUpdate(MenuItemCreate):
    pass


class ToggleAvailabilityRequest(BaseModel):
    """Omit ``is_available`` to flip the current value."""
    is_available: Optional[bool] = None


class OrderItemRequest(BaseModel):
    menu_item_id: Optional[str] = None
    quantity: Optional[int] = None


class OrderCreate(BaseModel):
    restaurant_id: Optional[str] = None
    items: List[OrderItemRequest] = Field(default_factory=list)


class StatusUpdateRequest(BaseModel):
    status: str = Field(..., examples=["CONFIRMED"])


# =============================================================================
# RESPONSE SCHEMAS - ENTITIES
# =============================================================================

class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    phone: Optional[str] = None


class UserResponse(UserSummary):
    role: Role
    is_active: bool
    created_at: dt.datetime


class RestaurantSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    address: str


class RestaurantResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    owner_id: str
    name: str
    description: str
    address: str
    preparation_time: int
    is_open: bool
    is_active: bool
    approval_status: ApprovalStatus
    admin_notes: str
    approved_by: Optional[str] = None
    approved_at: Optional[dt.datetime] = None
    rejected_by: Optional[str] = None
    rejected_at: Optional[dt.datetime] = None
    created_at: dt.datetime
    updated_at: Optional[dt.datetime] = None


class RestaurantWithOwner(RestaurantResponse):
    owner: Optional[UserSummary] = None


class MenuItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    restaurant_id: str
    name: str
    description: str
    price: float
    is_veg: bool
    category: MenuCategory
    image: Optional[str] = None
    is_available: bool
    created_at: dt.datetime
    updated_at: Optional[dt.datetime] = None


class OrderLine(BaseModel):
    """Frozen copy of a menu item at placement time."""
    menu_item_id: str
    name_snapshot: str
    price_snapshot: float
    quantity: int


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    restaurant_id: str
    items: List[OrderLine]
    total_amount: float
    status: OrderStatus
    payment_status: PaymentStatus
    payment_reference: Optional[str] = None
    created_at: dt.datetime
    updated_at: Optional[dt.datetime] = None


class OrderWithRestaurant(OrderResponse):
    restaurant: Optional[RestaurantSummary] = None


class OrderWithCustomer(OrderResponse):
    customer: Optional[UserSummary] = None


class OrderDetail(OrderResponse):
    restaurant: Optional[RestaurantSummary] = None
    customer: Optional[UserSummary] = None


class PaymentStatusResponse(BaseModel):
    order_id: str
    payment_status: PaymentStatus
    amount: float


# =============================================================================
# RESPONSE SCHEMAS - STATISTICS
# =============================================================================

class StatusCounts(BaseModel):
    pending: int = 0
    confirmed: int = 0
    preparing: int = 0
    ready: int = 0
    delivered: int = 0
    cancelled: int = 0


class RestaurantStats(StatusCounts):
    total_orders: int
    total_revenue: float
    platform_fee: float
    restaurant_earnings: float


class UserStats(StatusCounts):
    total_orders: int
    total_spent: float
    this_month_spent: float
    this_year_spent: float
    avg_order_value: float


class DashboardStats(BaseModel):
    total_orders: int
    pending_orders: int
    today_orders: int
    total_revenue: float = Field(..., description="Sum over READY orders only")


class StatusCount(BaseModel):
    status: OrderStatus
    count: int


class TopRestaurant(BaseModel):
    restaurant_id: str
    restaurant_name: str
    order_count: int
    total_revenue: float
    platform_commission: float
    restaurant_earnings: float


class SystemReport(BaseModel):
    total_users: int
    total_restaurants: int
    total_orders: int
    total_revenue: float
    platform_revenue: float
    restaurant_revenue: float
    monthly_revenue: float
    monthly_platform_revenue: float
    avg_order_value: float
    orders_by_status: List[StatusCount]
    top_restaurants: List[TopRestaurant]
    recent_orders: List[OrderDetail]


class DailyRevenue(BaseModel):
    date: dt.date
    total_revenue: float
    order_count: int
    platform_revenue: float
    restaurant_revenue: float


class ExportQueued(BaseModel):
    task_id: str
    status: str = "queued"


# =============================================================================
# HEALTH
# =============================================================================

class HealthResponse(BaseModel):
    """Response schema for health check."""
    status: str
    database: str
    redis: str
    payment: str
    timestamp: dt.datetime
