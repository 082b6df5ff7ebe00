"""Gateway-state → local-transition mapping.

Both entry points, the learner-initiated verification and the gateway's
webhook, funnel through these two functions. Neither touches repositories or
the gateway, so the same rules apply regardless of how a result arrived.
"""

import structlog

from academy.exceptions import PaymentMismatchError, UnsupportedStatusError

logger = structlog.get_logger(__name__)

GATEWAY_PAID = "PAID"
GATEWAY_FAILED = "FAILED"
GATEWAY_CANCELLED = "CANCELLED"

SUPPORTED_STATUSES = (GATEWAY_PAID, GATEWAY_FAILED, GATEWAY_CANCELLED)


def check_against_order(order, gateway_payment, settlement_currency: str, strict: bool) -> list[str]:
    """Compare the gateway's record with the order it claims to pay for.

    In strict mode any discrepancy raises PaymentMismatchError. Otherwise the
    discrepancies are logged and returned so sandbox payments (which often
    carry placeholder amounts) still go through.
    """
    problems = []
    if gateway_payment.amount != order.total_price:
        problems.append(f"amount {gateway_payment.amount} does not match order total {order.total_price}")
    if gateway_payment.currency != settlement_currency:
        problems.append(f"currency {gateway_payment.currency} is not {settlement_currency}")
    if gateway_payment.order_id and str(gateway_payment.order_id) != str(order.id):
        problems.append(f"payment belongs to order {gateway_payment.order_id}")

    if not problems:
        return problems

    if strict:
        logger.warning(
            "Gateway payment rejected",
            order_id=str(order.id),
            external_payment_id=gateway_payment.payment_id,
            problems=problems,
        )
        raise PaymentMismatchError("Payment does not match order: " + "; ".join(problems))

    logger.warning(
        "Gateway payment mismatch ignored outside live channel",
        order_id=str(order.id),
        external_payment_id=gateway_payment.payment_id,
        channel=gateway_payment.channel,
        problems=problems,
    )
    return problems


def apply_gateway_status(
    payment,
    order,
    status: str,
    transaction_id: str | None = None,
    paid_at=None,
    failure_reason: str | None = None,
    raw_payload: dict | None = None,
) -> bool:
    """Move the local Payment (and, for PAID, its Order) to match the gateway.

    Returns True when the order transitioned to PAID in this call, which is
    the signal for enrollment provisioning.
    """
    if status == GATEWAY_PAID:
        payment.mark_paid(transaction_id=transaction_id, paid_at=paid_at, raw_payload=raw_payload)
        return order.mark_paid()

    if status == GATEWAY_FAILED:
        payment.mark_failed(reason=failure_reason, raw_payload=raw_payload)
        return False

    if status == GATEWAY_CANCELLED:
        payment.mark_cancelled(raw_payload=raw_payload)
        return False

    raise UnsupportedStatusError(f"Unsupported payment status: {status}")
