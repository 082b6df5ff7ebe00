"""Order aggregate (CQRS): an immutable purchase-time snapshot of a cart.

An order's lines copy the title, slug, thumbnail and price of each course as
they were at checkout, so later catalogue edits never change what a learner
bought or what they owe. ``total_price`` is computed once from those lines
and never recomputed.

State Machine:
    PENDING → PAID       (payment confirmed by the gateway)
    PENDING → CANCELLED  (learner cancels before paying)
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String

from academy.domain import academy
from academy.exceptions import EmptyCartError, ForbiddenError, InvalidStateError
from academy.order.events import OrderCancelled, OrderPaid, OrderPlaced


class OrderStatus(Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    CANCELLED = "CANCELLED"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PAID, OrderStatus.CANCELLED},
    OrderStatus.PAID: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}


@academy.entity(part_of="Order")
class OrderLine:
    course_id = Identifier(required=True)
    course_title = String(required=True, max_length=255)
    course_slug = String(max_length=255)
    course_thumbnail = String(max_length=1000)
    price_at_purchase = Integer(required=True, min_value=0)


@academy.aggregate
class Order:
    user_id = Identifier(required=True)
    lines = HasMany(OrderLine)
    total_price = Integer(required=True, min_value=0)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_price_matches_lines(self):
        if not self.lines:
            return
        if self.total_price != sum(line.price_at_purchase for line in self.lines):
            raise ValidationError({"total_price": ["Total price must equal the sum of line prices"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, user_id, courses):
        """Snapshot the given catalogue courses into a new pending order."""
        if not courses:
            raise EmptyCartError("Cart is empty")

        now = datetime.now(UTC)
        lines = [
            OrderLine(
                course_id=course.id,
                course_title=course.title,
                course_slug=course.slug,
                course_thumbnail=course.thumbnail_url,
                price_at_purchase=course.price,
            )
            for course in courses
        ]

        order = cls(
            user_id=user_id,
            total_price=sum(line.price_at_purchase for line in lines),
            status=OrderStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        with atomic_change(order):
            order.add_lines(lines)

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                user_id=str(user_id),
                course_ids=json.dumps(order.course_ids),
                total_price=order.total_price,
                placed_at=now,
            )
        )
        return order

    @property
    def course_ids(self) -> list[str]:
        return [str(line.course_id) for line in self.lines]

    # -------------------------------------------------------------------
    # Guards
    # -------------------------------------------------------------------
    def ensure_owned_by(self, user_id) -> None:
        if str(self.user_id) != str(user_id):
            raise ForbiddenError("Order belongs to another user")

    def _assert_can_transition(self, target_status: OrderStatus, message: str) -> None:
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS[current]:
            raise InvalidStateError(message)

    @property
    def is_awaiting_payment(self) -> bool:
        return self.status == OrderStatus.PENDING.value

    # -------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------
    def mark_paid(self) -> bool:
        """Record that the gateway confirmed payment.

        Returns False without changes when the order is already paid, so a
        redelivered confirmation does not provision enrollments twice.
        """
        if self.status == OrderStatus.PAID.value:
            return False
        self._assert_can_transition(OrderStatus.PAID, "Order is not awaiting payment")

        now = datetime.now(UTC)
        self.status = OrderStatus.PAID.value
        self.updated_at = now

        self.raise_(
            OrderPaid(
                order_id=str(self.id),
                user_id=str(self.user_id),
                course_ids=json.dumps(self.course_ids),
                total_price=self.total_price,
                paid_at=now,
            )
        )
        return True

    def cancel(self) -> None:
        self._assert_can_transition(OrderStatus.CANCELLED, "Only pending orders can be cancelled")

        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.updated_at = now

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                user_id=str(self.user_id),
                cancelled_at=now,
            )
        )


@academy.repository(part_of=Order)
class OrderRepository:
    def for_user(self, user_id, status=None, offset=0, limit=10):
        """Return one page of a learner's orders, newest first, plus the total count."""
        filters = {"user_id": str(user_id)}
        if status:
            filters["status"] = status

        result = self._dao.query.filter(**filters).order_by("-created_at").offset(offset).limit(limit).all()
        return result.items, result.total
