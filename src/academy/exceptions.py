"""Business errors raised by the academy domain.

Every error carries a stable ``kind`` that transports map to their own status
codes, plus a human-readable message. Field-level input problems keep using
Protean's ``ValidationError``.
"""


class AcademyError(Exception):
    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class NotFoundError(AcademyError):
    """A referenced order, payment, enrollment or course does not exist."""

    kind = "not_found"


class ForbiddenError(AcademyError):
    """The requester does not own the referenced resource."""

    kind = "forbidden"


class InvalidStateError(AcademyError):
    """The operation is illegal for the current order or payment status."""

    kind = "invalid_state"


class PaymentMismatchError(InvalidStateError):
    """The gateway's record disagrees with the local order (amount, currency, order id)."""

    kind = "payment_mismatch"


class EmptyCartError(AcademyError):
    kind = "empty_cart"


class ConflictError(AcademyError):
    kind = "conflict"


class PaymentNotCompletedError(AcademyError):
    """The gateway has not confirmed the payment yet. Retry later."""

    kind = "payment_not_completed"


class GatewayUnavailableError(AcademyError):
    """The gateway could not be reached or answered with an error. Retryable."""

    kind = "gateway_unavailable"


class UnsupportedStatusError(AcademyError):
    kind = "unsupported_status"
