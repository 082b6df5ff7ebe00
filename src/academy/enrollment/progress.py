"""Lecture progress reporting: command and handler."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, Identifier, Integer
from protean.utils.globals import current_domain

from academy.catalogue import get_catalogue
from academy.domain import academy
from academy.enrollment.enrollment import Enrollment
from academy.exceptions import NotFoundError

logger = structlog.get_logger(__name__)


@academy.command(part_of="Enrollment")
class UpdateLectureProgress:
    enrollment_id = Identifier(required=True)
    requester_id = Identifier(required=True)
    lecture_id = Identifier(required=True)
    watch_time = Integer(required=True, min_value=0)  # seconds
    is_completed = Boolean(default=False)


@academy.command_handler(part_of=Enrollment)
class LectureProgressHandler:
    @handle(UpdateLectureProgress)
    def update_lecture_progress(self, command):
        repo = current_domain.repository_for(Enrollment)
        try:
            enrollment = repo.get(command.enrollment_id)
        except ObjectNotFoundError as exc:
            raise NotFoundError("Enrollment not found") from exc

        enrollment.ensure_owned_by(command.requester_id)

        lecture_ids = get_catalogue().get_lecture_ids(str(enrollment.course_id))
        record = enrollment.record_lecture_progress(
            lecture_id=command.lecture_id,
            watch_time=command.watch_time,
            is_completed=bool(command.is_completed),
            course_lecture_ids=lecture_ids,
        )
        repo.add(enrollment)

        logger.info(
            "Lecture progress recorded",
            enrollment_id=str(enrollment.id),
            lecture_id=str(command.lecture_id),
            progress=enrollment.progress,
        )
        return str(record.id)
