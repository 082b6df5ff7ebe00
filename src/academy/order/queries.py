"""Read side of orders: single lookups with ownership checks and paged listings."""

from dataclasses import dataclass

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from academy.config import get_settings
from academy.exceptions import NotFoundError
from academy.order.order import Order


@dataclass(frozen=True)
class OrderPage:
    orders: list
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return (self.total + self.page_size - 1) // self.page_size


def load_order(order_id: str) -> Order:
    try:
        return current_domain.repository_for(Order).get(order_id)
    except ObjectNotFoundError as exc:
        raise NotFoundError("Order not found") from exc


def get_order(requester_id: str, order_id: str) -> Order:
    order = load_order(order_id)
    order.ensure_owned_by(requester_id)
    return order


def list_orders(user_id: str, page: int = 1, page_size: int | None = None, status: str | None = None) -> OrderPage:
    settings = get_settings()
    page = max(page, 1)
    page_size = min(page_size or settings.default_page_size, settings.max_page_size)

    orders, total = current_domain.repository_for(Order).for_user(
        user_id,
        status=status,
        offset=(page - 1) * page_size,
        limit=page_size,
    )
    return OrderPage(orders=list(orders), total=total, page=page, page_size=page_size)
