"""Order cancellation by its owner, before payment."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from academy.domain import academy
from academy.exceptions import NotFoundError
from academy.order.order import Order

logger = structlog.get_logger(__name__)


@academy.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    requester_id = Identifier(required=True)


@academy.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        try:
            order = repo.get(command.order_id)
        except ObjectNotFoundError as exc:
            raise NotFoundError("Order not found") from exc

        order.ensure_owned_by(command.requester_id)
        order.cancel()
        repo.add(order)

        logger.info("Order cancelled", order_id=str(order.id))
