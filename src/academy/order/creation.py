"""Order creation: convert the learner's cart into a pending order."""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from academy.cart.cart import Cart
from academy.catalogue import get_catalogue
from academy.domain import academy
from academy.exceptions import EmptyCartError, NotFoundError
from academy.order.order import Order

logger = structlog.get_logger(__name__)


@academy.command(part_of="Order")
class CreateOrder:
    user_id = Identifier(required=True)


@academy.command_handler(part_of=Order)
class CreateOrderHandler:
    @handle(CreateOrder)
    def create_order(self, command):
        cart = current_domain.repository_for(Cart).for_user(command.user_id)
        if cart is None or not cart.lines:
            raise EmptyCartError("Cart is empty")

        catalogue = get_catalogue()
        courses = []
        for course_id in cart.course_ids:
            course = catalogue.get_course(course_id)
            if course is None:
                raise NotFoundError(f"Course {course_id} not found")
            courses.append(course)

        # The cart is cleared by CartOrderEventHandler once this order commits
        order = Order.place(user_id=command.user_id, courses=courses)
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            user_id=str(command.user_id),
            total_price=order.total_price,
            lines=len(courses),
        )
        return str(order.id)
