"""Domain events for the Enrollment aggregate."""

from protean.fields import Boolean, DateTime, Identifier, Integer

from academy.domain import academy


@academy.event(part_of="Enrollment")
class EnrollmentProvisioned:
    """A learner was granted lifetime access to a purchased course."""

    __version__ = 1

    enrollment_id = Identifier(required=True)
    user_id = Identifier(required=True)
    course_id = Identifier(required=True)
    enrolled_at = DateTime(required=True)


@academy.event(part_of="Enrollment")
class LectureProgressRecorded:
    __version__ = 1

    enrollment_id = Identifier(required=True)
    lecture_id = Identifier(required=True)
    watch_time = Integer(required=True)
    is_completed = Boolean(default=False)
    progress = Integer(required=True)


@academy.event(part_of="Enrollment")
class CourseCompleted:
    """Every lecture of the course has been completed."""

    __version__ = 1

    enrollment_id = Identifier(required=True)
    user_id = Identifier(required=True)
    course_id = Identifier(required=True)
    completed_at = DateTime(required=True)
