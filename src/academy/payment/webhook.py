"""Payment webhook processing: command and handler.

The gateway pushes status changes for payments we already know about. The
order-level checks ran during verification, so only the status transition is
applied here. Redelivery of a status the payment already has is a no-op.
"""

import structlog
from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from academy.domain import academy
from academy.exceptions import NotFoundError, UnsupportedStatusError
from academy.order.order import Order
from academy.payment.payment import Payment
from academy.payment.reconciliation import GATEWAY_PAID, SUPPORTED_STATUSES, apply_gateway_status

logger = structlog.get_logger(__name__)


@academy.command(part_of="Payment")
class ProcessPaymentWebhook:
    """Apply a status pushed by the payment gateway."""

    external_payment_id = String(required=True, max_length=255)
    status = String(required=True, max_length=50)  # PAID, FAILED, CANCELLED
    transaction_id = String(max_length=255)
    failure_reason = String(max_length=500)


@academy.command_handler(part_of=Payment)
class ProcessWebhookHandler:
    @handle(ProcessPaymentWebhook)
    def process_webhook(self, command):
        payment_repo = current_domain.repository_for(Payment)
        payment = payment_repo.by_external_id(command.external_payment_id)
        if payment is None:
            raise NotFoundError("Payment not found")

        status = command.status.upper()
        if status not in SUPPORTED_STATUSES:
            raise UnsupportedStatusError(f"Unsupported payment status: {command.status}")

        order_repo = current_domain.repository_for(Order)
        order = order_repo.get(payment.order_id) if status == GATEWAY_PAID else None

        order_paid = apply_gateway_status(
            payment,
            order,
            status,
            transaction_id=command.transaction_id,
            failure_reason=command.failure_reason,
        )
        payment_repo.add(payment)
        if order_paid:
            order_repo.add(order)

        logger.info(
            "Payment webhook processed",
            payment_id=str(payment.id),
            external_payment_id=command.external_payment_id,
            status=status,
            order_paid=order_paid,
        )
        return str(payment.id)
