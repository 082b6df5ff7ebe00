"""Domain events for the Payment aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from academy.domain import academy


@academy.event(part_of="Payment")
class PaymentConfirmed:
    """The gateway reported the payment as paid."""

    __version__ = 1

    payment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    external_payment_id = String(required=True, max_length=255)
    transaction_id = String(max_length=255)
    amount = Integer(required=True)
    paid_at = DateTime(required=True)


@academy.event(part_of="Payment")
class PaymentFailed:
    __version__ = 1

    payment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    external_payment_id = String(required=True, max_length=255)
    reason = String(max_length=500)


@academy.event(part_of="Payment")
class PaymentCancelled:
    __version__ = 1

    payment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    external_payment_id = String(required=True, max_length=255)
    cancelled_at = DateTime(required=True)
