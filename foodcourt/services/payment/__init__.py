"""
Payment Service Factory

Provides a single entry point for obtaining a payment service instance so
the rest of the application stays agnostic about the provider in use.

Usage:
    from foodcourt.services.payment import get_payment_service

    payment_service = get_payment_service()
    result = await payment_service.settle(order.id, order.total_amount)

Only the manual (cash on delivery) stub exists today; a gateway-backed
provider would be returned here for staging/production.
"""

import logging
from functools import lru_cache

from foodcourt.services.payment.base import BasePaymentService, PaymentResult
from foodcourt.services.payment.manual import ManualPaymentService

logger = logging.getLogger(__name__)


@lru_cache()
def get_payment_service() -> BasePaymentService:
    """
    Get the configured payment service instance.

    The instance is cached so every request shares one provider.
    """
    service = ManualPaymentService()
    logger.info(f"Payment Service: Using {type(service).__name__}")
    return service


def reset_payment_service() -> None:
    """
    Clear the cached payment service instance.

    Useful for testing; the next call to get_payment_service() builds a new one.
    """
    get_payment_service.cache_clear()
    logger.debug("Payment service cache cleared")


__all__ = [
    "get_payment_service",
    "reset_payment_service",
    "BasePaymentService",
    "PaymentResult",
    "ManualPaymentService",
]
