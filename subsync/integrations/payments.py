"""
Mocked payment gateway.

No payment processor is wired in; charges resolve immediately to the outcome
configured in `settings.payment_mock_outcome`. The call shape mirrors a real
processor client: (status_code, response dict).
"""

import logging
from uuid import uuid4

from subsync.core.config import settings

logger = logging.getLogger(__name__)

PAYMENT_OUTCOMES = ("approved", "pending", "rejected")


class MockPaymentGateway:
    def __init__(self, outcome: str | None = None):
        outcome = outcome or settings.payment_mock_outcome
        if outcome not in PAYMENT_OUTCOMES:
            raise ValueError(f"Unknown payment outcome: {outcome}")
        self.outcome = outcome
        self.charges: list[dict] = []

    def charge(self, amount: float, payment_method: str, external_reference: str) -> tuple[int, dict]:
        """
        Creates a payment and returns (status_code, json).
        """
        payment_id = f"mock_{uuid4().hex[:16]}"
        resp = {
            "id": payment_id,
            "status": self.outcome,
            "transaction_amount": round(float(amount), 2),
            "currency_id": settings.currency,
            "payment_method_id": payment_method,
            "external_reference": external_reference,
        }
        self.charges.append(resp)
        logger.info("mock payment %s %s for %s (%.2f %s)", payment_id, self.outcome, external_reference, amount, settings.currency)
        return 201, resp


def get_payment_gateway() -> MockPaymentGateway:
    return MockPaymentGateway()
