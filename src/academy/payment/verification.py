"""Payment verification: reconcile an order against the gateway's record.

Called by the learner's browser after the gateway checkout completes. Local
preconditions are checked first so a duplicate call never reaches the
gateway, and the unique ``order_id`` on Payment turns a concurrent duplicate
into "already processed" rather than a second payment.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from academy.config import get_settings
from academy.domain import academy
from academy.exceptions import InvalidStateError, NotFoundError, PaymentNotCompletedError
from academy.gateway import get_gateway
from academy.order.order import Order
from academy.payment.payment import Payment
from academy.payment.reconciliation import (
    GATEWAY_FAILED,
    GATEWAY_PAID,
    apply_gateway_status,
    check_against_order,
)

logger = structlog.get_logger(__name__)


@academy.command(part_of="Payment")
class VerifyPayment:
    external_payment_id = String(required=True, max_length=255)
    order_id = Identifier(required=True)
    requester_id = Identifier()  # unset for trusted internal callers


@academy.command_handler(part_of=Payment)
class VerifyPaymentHandler:
    @handle(VerifyPayment)
    def verify_payment(self, command):
        order_repo = current_domain.repository_for(Order)
        payment_repo = current_domain.repository_for(Payment)

        try:
            order = order_repo.get(command.order_id)
        except ObjectNotFoundError as exc:
            raise NotFoundError("Order not found") from exc

        if command.requester_id:
            order.ensure_owned_by(command.requester_id)

        if not order.is_awaiting_payment:
            raise InvalidStateError("Order is not awaiting payment")

        payment = payment_repo.for_order(order.id)
        if payment is not None:
            raise InvalidStateError("Payment for this order was already processed")

        gateway_payment = get_gateway().get_payment(command.external_payment_id)
        check_against_order(
            order,
            gateway_payment,
            settlement_currency=get_settings().settlement_currency,
            strict=gateway_payment.is_live,
        )

        if gateway_payment.status == GATEWAY_FAILED:
            # A failure with no local record means local and gateway state have diverged
            raise InvalidStateError("Gateway reported a failure for a payment that was never recorded")
        if gateway_payment.status != GATEWAY_PAID:
            raise PaymentNotCompletedError(f"Payment is not completed yet (gateway status {gateway_payment.status})")

        payment = Payment.open(order_id=order.id, gateway_payment=gateway_payment)
        apply_gateway_status(
            payment,
            order,
            GATEWAY_PAID,
            transaction_id=gateway_payment.transaction_id,
            paid_at=gateway_payment.paid_at,
            raw_payload=gateway_payment.raw,
        )

        try:
            payment_repo.add(payment)
        except ValidationError as exc:
            raise InvalidStateError("Payment for this order was already processed") from exc
        order_repo.add(order)

        logger.info(
            "Payment verified",
            order_id=str(order.id),
            payment_id=str(payment.id),
            external_payment_id=command.external_payment_id,
            amount=payment.amount,
            channel=gateway_payment.channel,
        )
        return str(payment.id)
