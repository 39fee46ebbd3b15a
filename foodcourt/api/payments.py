"""
Payment routes. Settlement goes through the configured payment provider;
any authenticated caller may use them.
"""

from fastapi import APIRouter, Depends

from foodcourt.api.deps import CallerContext, get_caller, get_store
from foodcourt.schemas import ApiResponse, OrderResponse, PaymentStatusResponse
from foodcourt.services import OrderEngine
from foodcourt.store import DocumentStore

router = APIRouter(prefix="/api/payments", tags=["Payments"])


@router.post("/{order_id}/mark-paid", response_model=ApiResponse[OrderResponse])
async def mark_paid(
    order_id: str,
    caller: CallerContext = Depends(get_caller),
    store: DocumentStore = Depends(get_store),
):
    order = await OrderEngine(store).mark_paid(order_id)
    return ApiResponse(
        message="Payment marked as successful",
        data=OrderResponse.model_validate(order),
    )


@router.get("/{order_id}/status", response_model=ApiResponse[PaymentStatusResponse])
async def payment_status(
    order_id: str,
    caller: CallerContext = Depends(get_caller),
    store: DocumentStore = Depends(get_store),
):
    info = await OrderEngine(store).payment_status(order_id)
    return ApiResponse(message="Payment status fetched", data=PaymentStatusResponse(**info))
