"""Configurable fake payment gateway for development and testing.

Payments are registered up front with ``register_payment`` and served back
from memory, so reconciliation can be exercised for every gateway outcome
(paid, failed, still pending, unreachable) without network access.
"""

from datetime import UTC, datetime
from uuid import uuid4

from academy.exceptions import GatewayUnavailableError, NotFoundError
from academy.gateway.port import CHANNEL_TEST, GatewayPayment, PaymentGateway


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.payments: dict[str, GatewayPayment] = {}
        self.available: bool = True
        self.calls: list[dict] = []

    def configure(self, available: bool) -> None:
        """Simulate the gateway being reachable or not."""
        self.available = available

    def register_payment(
        self,
        payment_id: str,
        amount: int,
        status: str = "PAID",
        currency: str = "KRW",
        channel: str = CHANNEL_TEST,
        order_id: str | None = None,
        method: str | None = "CARD",
        failure_reason: str | None = None,
    ) -> GatewayPayment:
        paid = status == "PAID"
        payment = GatewayPayment(
            payment_id=payment_id,
            status=status,
            amount=amount,
            currency=currency,
            channel=channel,
            method=method,
            transaction_id=f"fake_txn_{uuid4().hex[:12]}" if paid else None,
            paid_at=datetime.now(UTC) if paid else None,
            failure_reason=failure_reason,
            order_id=order_id,
            provider="fake",
            raw={"id": payment_id, "status": status, "amount": {"total": amount}, "currency": currency},
        )
        self.payments[payment_id] = payment
        return payment

    def get_payment(self, payment_id: str) -> GatewayPayment:
        self.calls.append({"method": "get_payment", "payment_id": payment_id})

        if not self.available:
            raise GatewayUnavailableError("Payment gateway timed out")

        payment = self.payments.get(payment_id)
        if payment is None:
            raise NotFoundError(f"Gateway has no payment {payment_id}")
        return payment

    def verify_webhook_signature(self, payload: str, signature: str) -> bool:  # noqa: ARG002
        return signature == "test-signature"
