"""Shared BDD fixtures and step definitions for enrollments."""

import pytest
from academy.enrollment.provisioning import ProvisionEnrollment
from protean import current_domain
from pytest_bdd import given, parsers

USER_ID = "user-001"


@pytest.fixture()
def error():
    """Container for captured domain errors."""
    return {"exc": None}


@given(
    parsers.cfparse('the learner is enrolled in "{course_id}" with {count:d} lectures'),
    target_fixture="enrollment_id",
)
def enrolled_learner(catalogue, course_id, count):
    assert len(catalogue.get_lecture_ids(course_id)) == count
    return current_domain.process(
        ProvisionEnrollment(user_id=USER_ID, course_id=course_id),
        asynchronous=False,
    )
