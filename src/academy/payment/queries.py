"""Read side of payments."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from academy.exceptions import NotFoundError
from academy.order.queries import get_order
from academy.payment.payment import Payment


def load_payment(payment_id: str) -> Payment:
    try:
        return current_domain.repository_for(Payment).get(payment_id)
    except ObjectNotFoundError as exc:
        raise NotFoundError("Payment not found") from exc


def get_payment_by_order(requester_id: str, order_id: str) -> Payment:
    """Return the payment for one of the requester's orders."""
    order = get_order(requester_id, order_id)
    payment = current_domain.repository_for(Payment).for_order(order.id)
    if payment is None:
        raise NotFoundError("No payment has been made for this order")
    return payment
