"""Payment aggregate (CQRS): local mirror of the gateway's payment record.

The gateway is authoritative. A Payment is created lazily on the first
reconciliation of an order, is only ever changed by reconciliation, and is
never deleted. ``order_id`` and ``external_payment_id`` are unique, so at
most one payment can ever exist per order.

State Machine:
    READY → PAID / FAILED / CANCELLED
    FAILED → PAID        (the learner retried the charge on the gateway)
    PAID → FAILED        (the gateway reversed its confirmation)
    PAID → CANCELLED     (cancelled on the gateway side)
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Identifier, Integer, String, Text

from academy.domain import academy
from academy.exceptions import InvalidStateError
from academy.payment.events import PaymentCancelled, PaymentConfirmed, PaymentFailed


class PaymentStatus(Enum):
    READY = "READY"
    PAID = "PAID"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


_VALID_TRANSITIONS = {
    PaymentStatus.READY: {PaymentStatus.PAID, PaymentStatus.FAILED, PaymentStatus.CANCELLED},
    PaymentStatus.FAILED: {PaymentStatus.PAID},
    PaymentStatus.PAID: {PaymentStatus.FAILED, PaymentStatus.CANCELLED},
    PaymentStatus.CANCELLED: set(),  # Terminal
}


@academy.aggregate
class Payment:
    external_payment_id = String(required=True, max_length=255, unique=True)
    order_id = Identifier(required=True, unique=True)
    transaction_id = String(max_length=255)
    amount = Integer(required=True, min_value=0)
    currency = String(max_length=3, default="KRW")
    method = String(max_length=50)
    gateway_provider = String(max_length=50)
    status = String(choices=PaymentStatus, default=PaymentStatus.READY.value)
    failure_reason = String(max_length=500)
    paid_at = DateTime()
    cancelled_at = DateTime()
    raw_gateway_payload = Text()  # JSON of the last gateway record seen
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def open(cls, order_id, gateway_payment):
        """Start mirroring a gateway payment for an order."""
        now = datetime.now(UTC)
        return cls(
            external_payment_id=gateway_payment.payment_id,
            order_id=order_id,
            amount=gateway_payment.amount,
            currency=gateway_payment.currency,
            method=gateway_payment.method,
            gateway_provider=gateway_payment.provider,
            status=PaymentStatus.READY.value,
            raw_gateway_payload=json.dumps(gateway_payment.raw, default=str),
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # State transition helper
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status: PaymentStatus) -> None:
        current = PaymentStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidStateError(f"Cannot transition payment from {current.value} to {target_status.value}")

    @property
    def is_paid(self) -> bool:
        return self.status == PaymentStatus.PAID.value

    # -------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------
    def mark_paid(self, transaction_id=None, paid_at=None, raw_payload=None) -> bool:
        """Record the gateway's confirmation. Returns False if already paid."""
        if self.is_paid:
            return False
        self._assert_can_transition(PaymentStatus.PAID)

        now = datetime.now(UTC)
        self.status = PaymentStatus.PAID.value
        self.paid_at = paid_at or now
        self.failure_reason = None
        if transaction_id:
            self.transaction_id = transaction_id
        if raw_payload is not None:
            self.raw_gateway_payload = json.dumps(raw_payload, default=str)
        self.updated_at = now

        self.raise_(
            PaymentConfirmed(
                payment_id=str(self.id),
                order_id=str(self.order_id),
                external_payment_id=self.external_payment_id,
                transaction_id=self.transaction_id,
                amount=self.amount,
                paid_at=self.paid_at,
            )
        )
        return True

    def mark_failed(self, reason=None, raw_payload=None) -> None:
        if self.status == PaymentStatus.FAILED.value:
            return
        self._assert_can_transition(PaymentStatus.FAILED)

        self.status = PaymentStatus.FAILED.value
        self.failure_reason = reason or "Unknown failure"
        if raw_payload is not None:
            self.raw_gateway_payload = json.dumps(raw_payload, default=str)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            PaymentFailed(
                payment_id=str(self.id),
                order_id=str(self.order_id),
                external_payment_id=self.external_payment_id,
                reason=self.failure_reason,
            )
        )

    def mark_cancelled(self, raw_payload=None) -> None:
        if self.status == PaymentStatus.CANCELLED.value:
            return
        self._assert_can_transition(PaymentStatus.CANCELLED)

        now = datetime.now(UTC)
        self.status = PaymentStatus.CANCELLED.value
        self.cancelled_at = now
        if raw_payload is not None:
            self.raw_gateway_payload = json.dumps(raw_payload, default=str)
        self.updated_at = now

        self.raise_(
            PaymentCancelled(
                payment_id=str(self.id),
                order_id=str(self.order_id),
                external_payment_id=self.external_payment_id,
                cancelled_at=now,
            )
        )


@academy.repository(part_of=Payment)
class PaymentRepository:
    def for_order(self, order_id) -> Payment | None:
        payments = self._dao.query.filter(order_id=str(order_id)).all().items
        return payments[0] if payments else None

    def by_external_id(self, external_payment_id) -> Payment | None:
        payments = self._dao.query.filter(external_payment_id=external_payment_id).all().items
        return payments[0] if payments else None
