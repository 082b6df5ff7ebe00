"""Read side of the cart: lines enriched with current course details."""

from dataclasses import dataclass
from datetime import datetime

from protean.utils.globals import current_domain

from academy.cart.cart import Cart
from academy.catalogue import get_catalogue
from academy.catalogue.port import CourseSnapshot


@dataclass(frozen=True)
class CartEntry:
    course_id: str
    added_at: datetime | None
    course: CourseSnapshot | None  # None if the course left the catalogue


def get_cart_items(user_id: str) -> list[CartEntry]:
    cart = current_domain.repository_for(Cart).for_user(user_id)
    if cart is None:
        return []

    catalogue = get_catalogue()
    return [
        CartEntry(
            course_id=str(line.course_id),
            added_at=line.added_at,
            course=catalogue.get_course(str(line.course_id)),
        )
        for line in sorted(cart.lines, key=lambda line: (line.added_at is None, line.added_at or 0))
    ]
