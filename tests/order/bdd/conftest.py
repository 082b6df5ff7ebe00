"""Shared BDD fixtures and step definitions for checkout and payment."""

import pytest
from academy.cart.cart import Cart
from academy.cart.management import AddToCart
from academy.enrollment.enrollment import Enrollment
from academy.exceptions import AcademyError
from academy.order.creation import CreateOrder
from academy.order.order import Order
from protean import current_domain
from pytest_bdd import given, parsers, then, when

USER_ID = "user-001"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured domain errors."""
    return {"exc": None}


@pytest.fixture()
def checkout():
    """Holds the id of the order placed in the scenario."""
    return {"order_id": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('the learner has "{course_id}" in the cart'))
def course_in_cart(course_id):
    current_domain.process(AddToCart(user_id=USER_ID, course_id=course_id), asynchronous=False)


@given("the learner has checked out")
def checked_out(checkout):
    checkout["order_id"] = current_domain.process(CreateOrder(user_id=USER_ID), asynchronous=False)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when("the learner checks out")
def learner_checks_out(checkout, error):
    try:
        checkout["order_id"] = current_domain.process(CreateOrder(user_id=USER_ID), asynchronous=False)
    except AcademyError as exc:
        error["exc"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the order is {status:w}"))
def order_has_status(checkout, status):
    order = current_domain.repository_for(Order).get(checkout["order_id"])
    assert order.status == status


@then(parsers.cfparse('the learner is enrolled in "{course_id}"'))
def learner_enrolled(course_id):
    enrollment = current_domain.repository_for(Enrollment).for_user_and_course(USER_ID, course_id)
    assert enrollment is not None


@then(parsers.cfparse('the learner is not enrolled in "{course_id}"'))
def learner_not_enrolled(course_id):
    enrollment = current_domain.repository_for(Enrollment).for_user_and_course(USER_ID, course_id)
    assert enrollment is None


@then(parsers.cfparse("the learner has {count:d} enrollment"))
def enrollment_count(count):
    assert len(current_domain.repository_for(Enrollment).for_user(USER_ID)) == count


@then("the cart is empty")
def cart_is_empty():
    cart = current_domain.repository_for(Cart).for_user(USER_ID)
    assert cart is None or cart.course_ids == []
