"""Cart management: add and remove courses."""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from academy.cart.cart import Cart
from academy.catalogue import get_catalogue
from academy.domain import academy
from academy.exceptions import NotFoundError

logger = structlog.get_logger(__name__)


@academy.command(part_of="Cart")
class AddToCart:
    user_id = Identifier(required=True)
    course_id = Identifier(required=True)


@academy.command(part_of="Cart")
class RemoveFromCart:
    user_id = Identifier(required=True)
    course_id = Identifier(required=True)


@academy.command_handler(part_of=Cart)
class CartCommandHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        if get_catalogue().get_course(command.course_id) is None:
            raise NotFoundError("Course not found")

        repo = current_domain.repository_for(Cart)
        cart = repo.for_user(command.user_id) or Cart.create(user_id=command.user_id)
        cart.add_course(command.course_id)
        repo.add(cart)

        logger.info("Course added to cart", user_id=str(command.user_id), course_id=str(command.course_id))
        return str(cart.id)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.for_user(command.user_id)
        if cart is None:
            raise NotFoundError("Course is not in the cart")

        cart.remove_course(command.course_id)
        repo.add(cart)
        return str(cart.id)
