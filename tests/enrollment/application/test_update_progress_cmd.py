"""Application tests for lecture progress reporting and enrollment queries."""

import pytest
from academy.enrollment.enrollment import Enrollment
from academy.enrollment.progress import UpdateLectureProgress
from academy.enrollment.provisioning import ProvisionEnrollment
from academy.enrollment.queries import (
    get_enrollment,
    get_enrollment_by_course,
    get_lecture_progress,
    list_enrollments,
)
from academy.exceptions import ForbiddenError, NotFoundError
from protean import current_domain
from protean.exceptions import ValidationError


def _provision(user_id="user-001", course_id="course-python"):
    return current_domain.process(ProvisionEnrollment(user_id=user_id, course_id=course_id), asynchronous=False)


def _report(enrollment_id, lecture_id, watch_time=600, is_completed=True, requester_id="user-001"):
    return current_domain.process(
        UpdateLectureProgress(
            enrollment_id=enrollment_id,
            requester_id=requester_id,
            lecture_id=lecture_id,
            watch_time=watch_time,
            is_completed=is_completed,
        ),
        asynchronous=False,
    )


def _load(enrollment_id):
    return current_domain.repository_for(Enrollment).get(enrollment_id)


class TestUpdateLectureProgress:
    def test_progress_follows_completed_lectures(self):
        enrollment_id = _provision()

        _report(enrollment_id, "lec-py-1")
        assert _load(enrollment_id).progress == 25

        _report(enrollment_id, "lec-py-2")
        assert _load(enrollment_id).progress == 50

    def test_repeated_report_is_stable(self):
        enrollment_id = _provision()
        first = _report(enrollment_id, "lec-py-1")
        second = _report(enrollment_id, "lec-py-1")

        enrollment = _load(enrollment_id)
        assert first == second
        assert len(enrollment.lecture_progress) == 1
        assert enrollment.progress == 25

    def test_partial_watch_does_not_count(self):
        enrollment_id = _provision()
        _report(enrollment_id, "lec-py-1", watch_time=30, is_completed=False)

        enrollment = _load(enrollment_id)
        assert enrollment.progress == 0
        assert enrollment.progress_for("lec-py-1").watch_time == 30
        assert enrollment.last_accessed_at is not None

    def test_completing_every_lecture(self):
        enrollment_id = _provision()
        for lecture_id in ["lec-py-1", "lec-py-2", "lec-py-3", "lec-py-4"]:
            _report(enrollment_id, lecture_id)

        enrollment = _load(enrollment_id)
        assert enrollment.progress == 100
        assert enrollment.is_completed is True
        assert enrollment.completed_at is not None

    def test_completion_kept_after_course_grows(self, catalogue):
        enrollment_id = _provision(course_id="course-data")
        _report(enrollment_id, "lec-da-1")
        _report(enrollment_id, "lec-da-2")
        assert _load(enrollment_id).is_completed is True

        catalogue.set_lectures("course-data", ["lec-da-1", "lec-da-2", "lec-da-3", "lec-da-4"])
        _report(enrollment_id, "lec-da-2")

        enrollment = _load(enrollment_id)
        assert enrollment.progress == 50
        assert enrollment.is_completed is True

    def test_unknown_enrollment(self):
        with pytest.raises(NotFoundError):
            _report("missing-enrollment", "lec-py-1")

    def test_other_users_enrollment(self):
        enrollment_id = _provision()
        with pytest.raises(ForbiddenError):
            _report(enrollment_id, "lec-py-1", requester_id="user-002")
        assert _load(enrollment_id).lecture_progress == []

    def test_negative_watch_time_rejected(self):
        enrollment_id = _provision()
        with pytest.raises(ValidationError):
            _report(enrollment_id, "lec-py-1", watch_time=-1)


class TestEnrollmentQueries:
    def test_get_enrollment_checks_owner(self):
        enrollment_id = _provision()
        assert get_enrollment("user-001", enrollment_id).id == enrollment_id
        with pytest.raises(ForbiddenError):
            get_enrollment("user-002", enrollment_id)

    def test_get_missing_enrollment(self):
        with pytest.raises(NotFoundError):
            get_enrollment("user-001", "missing-enrollment")

    def test_get_by_course(self):
        enrollment_id = _provision()
        assert get_enrollment_by_course("user-001", "course-python").id == enrollment_id
        with pytest.raises(NotFoundError, match="Not enrolled"):
            get_enrollment_by_course("user-001", "course-data")

    def test_list_includes_course_details(self):
        _provision(course_id="course-python")
        _provision(course_id="course-data")

        views = list_enrollments("user-001")
        assert len(views) == 2
        titles = {view.course.title for view in views}
        assert len(titles) == 2
        assert list_enrollments("user-002") == []

    def test_lecture_progress_listing(self):
        enrollment_id = _provision()
        _report(enrollment_id, "lec-py-1")
        _report(enrollment_id, "lec-py-2", watch_time=40, is_completed=False)

        records = get_lecture_progress("user-001", enrollment_id)
        assert {r.lecture_id: r.is_completed for r in records} == {"lec-py-1": True, "lec-py-2": False}
        with pytest.raises(ForbiddenError):
            get_lecture_progress("user-002", enrollment_id)
