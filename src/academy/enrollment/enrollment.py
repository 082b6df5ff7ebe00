"""Enrollment aggregate (CQRS): a learner's access to one course.

An enrollment is provisioned exactly once per (learner, course). The pair is
stored as ``enrollment_key`` under a unique index so that concurrent or
retried provisioning collapses into a single row. Access is lifetime:
``expires_at`` stays empty.

Progress is recomputed from the full set of lecture records on every report,
never tracked incrementally. Completion is a one-way ratchet: once progress
reaches 100 the enrollment stays completed even if lectures are added to the
course later and progress drops.
"""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, HasMany, Identifier, Integer, String

from academy.domain import academy
from academy.enrollment.events import CourseCompleted, EnrollmentProvisioned, LectureProgressRecorded
from academy.exceptions import ForbiddenError

COMPLETE = 100


def enrollment_key(user_id, course_id) -> str:
    return f"{user_id}:{course_id}"


def compute_progress(completed_lecture_ids, course_lecture_ids) -> int:
    """Percentage of the course's lectures completed, floored.

    Completions for lectures no longer in the course do not count.
    """
    if not course_lecture_ids:
        return 0
    course_lectures = {str(lecture_id) for lecture_id in course_lecture_ids}
    completed = len({str(lecture_id) for lecture_id in completed_lecture_ids} & course_lectures)
    return completed * 100 // len(course_lectures)


@academy.entity(part_of="Enrollment")
class LectureProgress:
    lecture_id = Identifier(required=True)
    watch_time = Integer(default=0, min_value=0)  # seconds
    is_completed = Boolean(default=False)
    completed_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()


@academy.aggregate
class Enrollment:
    user_id = Identifier(required=True)
    course_id = Identifier(required=True)
    enrollment_key = String(required=True, max_length=255, unique=True)
    enrolled_at = DateTime(required=True)
    expires_at = DateTime()  # None means lifetime access
    last_accessed_at = DateTime()
    progress = Integer(default=0, min_value=0, max_value=100)
    is_completed = Boolean(default=False)
    completed_at = DateTime()
    lecture_progress = HasMany(LectureProgress)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def provision(cls, user_id, course_id):
        now = datetime.now(UTC)
        enrollment = cls(
            user_id=user_id,
            course_id=course_id,
            enrollment_key=enrollment_key(user_id, course_id),
            enrolled_at=now,
            expires_at=None,
            progress=0,
            is_completed=False,
            created_at=now,
            updated_at=now,
        )
        enrollment.raise_(
            EnrollmentProvisioned(
                enrollment_id=str(enrollment.id),
                user_id=str(user_id),
                course_id=str(course_id),
                enrolled_at=now,
            )
        )
        return enrollment

    def ensure_owned_by(self, user_id) -> None:
        if str(self.user_id) != str(user_id):
            raise ForbiddenError("Enrollment belongs to another user")

    def progress_for(self, lecture_id):
        return next((lp for lp in self.lecture_progress if str(lp.lecture_id) == str(lecture_id)), None)

    def record_lecture_progress(self, lecture_id, watch_time, is_completed, course_lecture_ids):
        """Upsert one lecture's watch state and recompute course progress.

        Returns the LectureProgress that was created or updated.
        """
        now = datetime.now(UTC)

        record = self.progress_for(lecture_id)
        if record is None:
            record = LectureProgress(
                lecture_id=lecture_id,
                watch_time=watch_time,
                is_completed=is_completed,
                completed_at=now if is_completed else None,
                created_at=now,
                updated_at=now,
            )
            self.add_lecture_progress(record)
        else:
            if is_completed and not record.is_completed:
                record.completed_at = now
            elif not is_completed:
                record.completed_at = None
            record.watch_time = watch_time
            record.is_completed = is_completed
            record.updated_at = now

        completed = [lp.lecture_id for lp in self.lecture_progress if lp.is_completed]
        self.progress = compute_progress(completed, course_lecture_ids)
        self.last_accessed_at = now
        self.updated_at = now

        self.raise_(
            LectureProgressRecorded(
                enrollment_id=str(self.id),
                lecture_id=str(lecture_id),
                watch_time=watch_time,
                is_completed=is_completed,
                progress=self.progress,
            )
        )

        if self.progress >= COMPLETE and not self.is_completed:
            self.is_completed = True
            self.completed_at = now
            self.raise_(
                CourseCompleted(
                    enrollment_id=str(self.id),
                    user_id=str(self.user_id),
                    course_id=str(self.course_id),
                    completed_at=now,
                )
            )

        return record


@academy.repository(part_of=Enrollment)
class EnrollmentRepository:
    def for_user_and_course(self, user_id, course_id) -> Enrollment | None:
        enrollments = self._dao.query.filter(enrollment_key=enrollment_key(user_id, course_id)).all().items
        return enrollments[0] if enrollments else None

    def for_user(self, user_id) -> list[Enrollment]:
        return self._dao.query.filter(user_id=str(user_id)).order_by("-enrolled_at").all().items
