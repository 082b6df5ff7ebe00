"""Cart aggregate (CQRS): a learner's pending course selections.

There is exactly one cart per learner, created on the first add. A course can
sit in the cart at most once since each course is bought as a single seat.
The cart is emptied by order placement, which removes only the lines the
order actually consumed.
"""

import json
from datetime import UTC, datetime

from protean.fields import DateTime, HasMany, Identifier

from academy.cart.events import CartCleared, CourseAddedToCart, CourseRemovedFromCart
from academy.domain import academy
from academy.exceptions import ConflictError, NotFoundError


@academy.entity(part_of="Cart")
class CartLine:
    course_id = Identifier(required=True)
    added_at = DateTime()


@academy.aggregate
class Cart:
    user_id = Identifier(required=True, unique=True)
    lines = HasMany(CartLine)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, user_id):
        now = datetime.now(UTC)
        return cls(user_id=user_id, created_at=now, updated_at=now)

    @property
    def course_ids(self) -> list[str]:
        return [str(line.course_id) for line in self.lines]

    def _line_for(self, course_id):
        return next((line for line in self.lines if str(line.course_id) == str(course_id)), None)

    def has_course(self, course_id) -> bool:
        return self._line_for(course_id) is not None

    def add_course(self, course_id):
        if self.has_course(course_id):
            raise ConflictError("Course is already in the cart")

        now = datetime.now(UTC)
        self.add_lines(CartLine(course_id=course_id, added_at=now))
        self.updated_at = now

        self.raise_(
            CourseAddedToCart(
                cart_id=str(self.id),
                user_id=str(self.user_id),
                course_id=str(course_id),
                added_at=now,
            )
        )

    def remove_course(self, course_id):
        line = self._line_for(course_id)
        if line is None:
            raise NotFoundError("Course is not in the cart")

        self.remove_lines(line)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CourseRemovedFromCart(
                cart_id=str(self.id),
                user_id=str(self.user_id),
                course_id=str(course_id),
            )
        )

    def clear_courses(self, course_ids, order_id=None) -> list[str]:
        """Remove the given courses, skipping any that are already gone.

        Returns the course ids that were actually removed.
        """
        wanted = {str(course_id) for course_id in course_ids}
        consumed = [line for line in self.lines if str(line.course_id) in wanted]
        if not consumed:
            return []

        for line in consumed:
            self.remove_lines(line)
        self.updated_at = datetime.now(UTC)

        removed = [str(line.course_id) for line in consumed]
        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                user_id=str(self.user_id),
                course_ids=json.dumps(removed),
                order_id=order_id,
            )
        )
        return removed


@academy.repository(part_of=Cart)
class CartRepository:
    def for_user(self, user_id) -> Cart | None:
        """Return the learner's cart, or None if they never added anything."""
        carts = self._dao.query.filter(user_id=str(user_id)).all().items
        return carts[0] if carts else None
