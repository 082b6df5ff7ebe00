"""Academy domain API package."""

from academy.api.errors import register_error_handlers
from academy.api.routes import cart_router, enrollment_router, order_router, payment_router

__all__ = ["cart_router", "order_router", "payment_router", "enrollment_router", "register_error_handlers"]
