"""Read side of enrollments and lecture progress."""

from dataclasses import dataclass

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from academy.catalogue import get_catalogue
from academy.catalogue.port import CourseSnapshot
from academy.enrollment.enrollment import Enrollment
from academy.exceptions import NotFoundError


@dataclass(frozen=True)
class EnrollmentView:
    enrollment: Enrollment
    course: CourseSnapshot | None


def load_enrollment(enrollment_id: str) -> Enrollment:
    try:
        return current_domain.repository_for(Enrollment).get(enrollment_id)
    except ObjectNotFoundError as exc:
        raise NotFoundError("Enrollment not found") from exc


def get_enrollment(requester_id: str, enrollment_id: str) -> Enrollment:
    enrollment = load_enrollment(enrollment_id)
    enrollment.ensure_owned_by(requester_id)
    return enrollment


def get_enrollment_by_course(user_id: str, course_id: str) -> Enrollment:
    enrollment = current_domain.repository_for(Enrollment).for_user_and_course(user_id, course_id)
    if enrollment is None:
        raise NotFoundError("Not enrolled in this course")
    return enrollment


def list_enrollments(user_id: str) -> list[EnrollmentView]:
    catalogue = get_catalogue()
    return [
        EnrollmentView(enrollment=enrollment, course=catalogue.get_course(str(enrollment.course_id)))
        for enrollment in current_domain.repository_for(Enrollment).for_user(user_id)
    ]


def get_lecture_progress(requester_id: str, enrollment_id: str) -> list:
    enrollment = get_enrollment(requester_id, enrollment_id)
    return sorted(enrollment.lecture_progress, key=lambda lp: (lp.created_at is None, lp.created_at or 0))
