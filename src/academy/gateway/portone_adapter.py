"""PortOne (V2 REST API) payment gateway adapter.

Only the read side is used: the browser completes the charge with PortOne's
SDK, and the server asks PortOne for the authoritative record afterward.
"""

import hashlib
import hmac
from datetime import datetime
from urllib.parse import quote

import httpx
import structlog

from academy.exceptions import GatewayUnavailableError, NotFoundError
from academy.gateway.port import CHANNEL_LIVE, CHANNEL_TEST, GatewayPayment, PaymentGateway

logger = structlog.get_logger(__name__)


def _parse_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def parse_payment(payload: dict) -> GatewayPayment:
    """Translate a PortOne payment object into a GatewayPayment."""
    channel = payload.get("channel") or {}
    method = payload.get("method") or {}
    failure = payload.get("failure") or {}
    amount = payload.get("amount") or {}

    return GatewayPayment(
        payment_id=payload["id"],
        status=payload.get("status", ""),
        amount=int(amount.get("total", 0)),
        currency=payload.get("currency", ""),
        channel=CHANNEL_LIVE if channel.get("type") == CHANNEL_LIVE else CHANNEL_TEST,
        method=method.get("type"),
        transaction_id=payload.get("transactionId"),
        paid_at=_parse_datetime(payload.get("paidAt")),
        failure_reason=failure.get("reason"),
        order_id=payload.get("customData") or None,
        provider=channel.get("pgProvider") or "portone",
        raw=payload,
    )


class PortOneGateway(PaymentGateway):
    def __init__(
        self,
        api_secret: str,
        webhook_secret: str,
        base_url: str = "https://api.portone.io",
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_secret = api_secret
        self.webhook_secret = webhook_secret
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            headers={"Authorization": f"PortOne {api_secret}"},
            transport=transport,
        )

    def get_payment(self, payment_id: str) -> GatewayPayment:
        try:
            response = self._client.get(f"/payments/{quote(payment_id, safe='')}")
        except httpx.TimeoutException as exc:
            logger.warning("PortOne request timed out", payment_id=payment_id)
            raise GatewayUnavailableError("Payment gateway timed out") from exc
        except httpx.HTTPError as exc:
            logger.warning("PortOne request failed", payment_id=payment_id, error=str(exc))
            raise GatewayUnavailableError("Payment gateway is unreachable") from exc

        if response.status_code == 404:
            raise NotFoundError(f"Gateway has no payment {payment_id}")
        if response.status_code >= 400:
            logger.warning(
                "PortOne returned an error",
                payment_id=payment_id,
                status_code=response.status_code,
            )
            raise GatewayUnavailableError(f"Payment gateway responded with {response.status_code}")

        return parse_payment(response.json())

    def verify_webhook_signature(self, payload: str, signature: str) -> bool:
        if not self.webhook_secret or not signature:
            return False
        expected = hmac.new(
            self.webhook_secret.encode("utf-8"),
            payload.encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()
        return hmac.compare_digest(expected, signature)

    def close(self) -> None:
        self._client.close()
