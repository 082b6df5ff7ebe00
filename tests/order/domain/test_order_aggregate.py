"""Domain tests for the Order aggregate: placement, snapshot and state machine."""

import json

import pytest
from academy.catalogue.port import CourseSnapshot
from academy.exceptions import EmptyCartError, ForbiddenError, InvalidStateError
from academy.order.events import OrderCancelled, OrderPaid, OrderPlaced
from academy.order.order import Order, OrderStatus

PYTHON = CourseSnapshot(
    id="course-python",
    title="Python Basics",
    slug="python-basics",
    thumbnail_url="https://cdn.example.com/python.png",
    price=30000,
)
DATA = CourseSnapshot(id="course-data", title="Data Analysis", slug="data-analysis", thumbnail_url=None, price=20000)


def _place(*courses):
    order = Order.place(user_id="user-001", courses=list(courses or (PYTHON, DATA)))
    order._events.clear()
    return order


class TestOrderPlacement:
    def test_total_is_sum_of_lines(self):
        order = Order.place(user_id="user-001", courses=[PYTHON, DATA])
        assert order.total_price == 50000
        assert order.total_price == sum(line.price_at_purchase for line in order.lines)

    def test_new_order_is_pending(self):
        order = _place()
        assert order.status == OrderStatus.PENDING.value
        assert order.is_awaiting_payment
        assert order.created_at is not None

    def test_lines_snapshot_course_details(self):
        order = _place(PYTHON)
        [line] = order.lines
        assert line.course_id == "course-python"
        assert line.course_title == "Python Basics"
        assert line.course_slug == "python-basics"
        assert line.course_thumbnail == "https://cdn.example.com/python.png"
        assert line.price_at_purchase == 30000

    def test_placement_raises_event(self):
        order = Order.place(user_id="user-001", courses=[PYTHON, DATA])
        [event] = order._events
        assert isinstance(event, OrderPlaced)
        assert event.total_price == 50000
        assert json.loads(event.course_ids) == ["course-python", "course-data"]

    def test_no_courses(self):
        with pytest.raises(EmptyCartError):
            Order.place(user_id="user-001", courses=[])

    def test_free_course(self):
        free = CourseSnapshot(id="course-free", title="Intro", slug="intro", thumbnail_url=None, price=0)
        order = _place(free)
        assert order.total_price == 0


class TestOrderOwnership:
    def test_owner_passes(self):
        _place().ensure_owned_by("user-001")

    def test_other_user_is_forbidden(self):
        with pytest.raises(ForbiddenError):
            _place().ensure_owned_by("user-002")


class TestOrderPayment:
    def test_mark_paid(self):
        order = _place()
        assert order.mark_paid() is True
        assert order.status == OrderStatus.PAID.value

    def test_mark_paid_raises_event_with_courses(self):
        order = _place()
        order.mark_paid()
        [event] = order._events
        assert isinstance(event, OrderPaid)
        assert event.user_id == "user-001"
        assert json.loads(event.course_ids) == ["course-python", "course-data"]

    def test_mark_paid_twice_is_noop(self):
        order = _place()
        order.mark_paid()
        order._events.clear()
        assert order.mark_paid() is False
        assert order._events == []

    def test_cancelled_order_cannot_be_paid(self):
        order = _place()
        order.cancel()
        with pytest.raises(InvalidStateError):
            order.mark_paid()


class TestOrderCancellation:
    def test_cancel_pending(self):
        order = _place()
        order.cancel()
        assert order.status == OrderStatus.CANCELLED.value
        assert isinstance(order._events[-1], OrderCancelled)

    def test_cancel_twice(self):
        order = _place()
        order.cancel()
        with pytest.raises(InvalidStateError):
            order.cancel()

    def test_paid_order_cannot_be_cancelled(self):
        order = _place()
        order.mark_paid()
        with pytest.raises(InvalidStateError):
            order.cancel()

    def test_total_unchanged_by_transitions(self):
        order = _place()
        order.mark_paid()
        assert order.total_price == 50000
        assert len(order.lines) == 2
