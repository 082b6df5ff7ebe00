"""Domain events for the Cart aggregate."""

from protean.fields import DateTime, Identifier, Text

from academy.domain import academy


@academy.event(part_of="Cart")
class CourseAddedToCart:
    """A learner put a course into their cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    user_id = Identifier(required=True)
    course_id = Identifier(required=True)
    added_at = DateTime(required=True)


@academy.event(part_of="Cart")
class CourseRemovedFromCart:
    __version__ = 1

    cart_id = Identifier(required=True)
    user_id = Identifier(required=True)
    course_id = Identifier(required=True)


@academy.event(part_of="Cart")
class CartCleared:
    """Courses consumed by an order were taken out of the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    user_id = Identifier(required=True)
    course_ids = Text(required=True)  # JSON array of course ids
    order_id = Identifier()
