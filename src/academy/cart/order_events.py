"""Cart reacts to order placement by removing the purchased courses.

This is the final step of checkout and runs only after the order itself has
been committed, so a failure here can never lose a learner's selections.
Re-delivery is harmless: courses already gone from the cart are skipped.
"""

import json

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from academy.cart.cart import Cart
from academy.domain import academy
from academy.order.events import OrderPlaced

logger = structlog.get_logger(__name__)


@academy.event_handler(part_of=Cart, stream_category="academy::order")
class CartOrderEventHandler:
    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        repo = current_domain.repository_for(Cart)
        cart = repo.for_user(event.user_id)
        if cart is None:
            return

        removed = cart.clear_courses(json.loads(event.course_ids), order_id=str(event.order_id))
        if removed:
            repo.add(cart)

        logger.info(
            "Cart cleared after order placement",
            order_id=str(event.order_id),
            user_id=str(event.user_id),
            removed=len(removed),
        )
