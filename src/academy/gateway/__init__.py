"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- FakeGateway for development and testing
- PortOneGateway when ``ACADEMY_GATEWAY=portone``
"""

from academy.config import get_settings
from academy.gateway.fake_adapter import FakeGateway
from academy.gateway.port import PaymentGateway
from academy.gateway.portone_adapter import PortOneGateway

_current_gateway: PaymentGateway | None = None


def _build_gateway() -> PaymentGateway:
    settings = get_settings()
    if settings.gateway == "portone":
        return PortOneGateway(
            api_secret=settings.portone_api_secret,
            webhook_secret=settings.portone_webhook_secret,
            base_url=settings.portone_api_base_url,
            timeout=settings.gateway_timeout_seconds,
        )
    return FakeGateway()


def get_gateway() -> PaymentGateway:
    """Return the current payment gateway, built from settings on first use."""
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = _build_gateway()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to the settings-selected gateway."""
    global _current_gateway
    _current_gateway = None
