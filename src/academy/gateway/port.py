"""Payment gateway port (abstract interface).

The gateway's payment record is the source of truth for whether money moved.
Adapters translate the provider's wire format into ``GatewayPayment`` so that
reconciliation never branches on provider-specific payloads.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime

CHANNEL_LIVE = "LIVE"
CHANNEL_TEST = "TEST"


@dataclass(frozen=True)
class GatewayPayment:
    """Authoritative payment record as reported by the gateway."""

    payment_id: str
    status: str
    amount: int
    currency: str
    channel: str = CHANNEL_TEST
    method: str | None = None
    transaction_id: str | None = None
    paid_at: datetime | None = None
    failure_reason: str | None = None
    order_id: str | None = None  # correlation token set at checkout
    provider: str = "portone"
    raw: dict = field(default_factory=dict, compare=False)

    @property
    def is_live(self) -> bool:
        return self.channel == CHANNEL_LIVE


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def get_payment(self, payment_id: str) -> GatewayPayment:
        """Fetch the gateway's record for one payment.

        Raises GatewayUnavailableError when the gateway cannot answer.
        """
        ...

    @abstractmethod
    def verify_webhook_signature(self, payload: str, signature: str) -> bool:
        """Verify that a webhook payload is authentically from the gateway."""
        ...
