"""
Manual Payment Service (stub)

Records payments taken outside the system, typically cash on delivery.
No gateway is contacted; every settlement succeeds and gets a local
reference so it can be traced in the orders table.
"""

import logging
import uuid

from foodcourt.services.payment.base import BasePaymentService, PaymentResult

logger = logging.getLogger(__name__)


class ManualPaymentService(BasePaymentService):
    """Stub provider that marks orders paid without contacting a gateway."""

    @property
    def provider_name(self) -> str:
        return "manual"

    def _generate_reference(self) -> str:
        return f"cod_{uuid.uuid4().hex[:24]}"

    async def settle(self, order_id: str, amount: float) -> PaymentResult:
        if amount < 0:
            return PaymentResult(
                success=False,
                amount=amount,
                error_message="Amount cannot be negative",
            )

        reference = self._generate_reference()
        logger.info(f"Manual payment recorded for order {order_id} - {amount:.2f} ({reference})")

        return PaymentResult(
            success=True,
            reference=reference,
            amount=amount,
            metadata={"provider": self.provider_name},
        )

    async def health_check(self) -> bool:
        return True
