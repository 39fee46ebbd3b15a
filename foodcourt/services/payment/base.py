"""
Payment Service Abstract Base Class

Defines the interface contract for payment service implementations.
Orders are settled through whichever provider the factory returns, so the
order engine never depends on a concrete provider.

Design Pattern: Strategy Pattern
    - Allows swapping payment providers without touching the order engine
    - Facilitates testing with stub implementations
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class PaymentResult:
    """
    Standardized result from settling an order.

    Attributes:
        success: Whether the payment was recorded
        reference: Provider reference for the settlement
        amount: Amount settled
        error_message: Error description if settlement failed
        metadata: Additional data from the provider
    """
    success: bool
    reference: Optional[str] = None
    amount: Optional[float] = None
    error_message: Optional[str] = None
    metadata: Optional[dict] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "success": self.success,
            "reference": self.reference,
            "amount": self.amount,
            "error_message": self.error_message,
            "metadata": self.metadata,
        }


class BasePaymentService(ABC):
    """
    Abstract base class for payment providers.

    Example:
        >>> service = get_payment_service()
        >>> result = await service.settle(order_id="ab12", amount=20.0)
        >>> if result.success:
        ...     print(result.reference)
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the name of the payment provider (e.g. "manual")."""
        pass

    @abstractmethod
    async def settle(self, order_id: str, amount: float) -> PaymentResult:
        """
        Record payment of an order.

        Args:
            order_id: Order being paid
            amount: Order total

        Returns:
            PaymentResult: Standardized result object
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Verify the provider is usable.

        Returns:
            bool: True if the provider is operational
        """
        pass
