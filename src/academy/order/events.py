"""Domain events for the Order aggregate.

Published on the ``academy::order`` stream. The cart clears itself on
OrderPlaced, and enrollments are provisioned on OrderPaid.
"""

from protean.fields import DateTime, Identifier, Integer, Text

from academy.domain import academy


@academy.event(part_of="Order")
class OrderPlaced:
    """A learner's cart was converted into a pending order."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    course_ids = Text(required=True)  # JSON array of course ids
    total_price = Integer(required=True)
    placed_at = DateTime(required=True)


@academy.event(part_of="Order")
class OrderPaid:
    """Payment for the order was confirmed by the gateway."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    course_ids = Text(required=True)  # JSON array of course ids
    total_price = Integer(required=True)
    paid_at = DateTime(required=True)


@academy.event(part_of="Order")
class OrderCancelled:
    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    cancelled_at = DateTime(required=True)
