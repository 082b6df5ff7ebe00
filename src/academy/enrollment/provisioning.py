"""Enrollment provisioning: grant course access, at most once per learner and course."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from academy.domain import academy
from academy.enrollment.enrollment import Enrollment

logger = structlog.get_logger(__name__)


@academy.command(part_of="Enrollment")
class ProvisionEnrollment:
    user_id = Identifier(required=True)
    course_id = Identifier(required=True)
    order_id = Identifier()


@academy.command_handler(part_of=Enrollment)
class ProvisionEnrollmentHandler:
    @handle(ProvisionEnrollment)
    def provision_enrollment(self, command):
        repo = current_domain.repository_for(Enrollment)

        existing = repo.for_user_and_course(command.user_id, command.course_id)
        if existing is not None:
            logger.info(
                "Enrollment already exists",
                enrollment_id=str(existing.id),
                user_id=str(command.user_id),
                course_id=str(command.course_id),
            )
            return str(existing.id)

        enrollment = Enrollment.provision(user_id=command.user_id, course_id=command.course_id)
        try:
            repo.add(enrollment)
        except ValidationError as exc:
            if "enrollment_key" not in exc.messages:
                raise
            # A concurrent provisioning of the same pair won the unique index
            existing = repo.for_user_and_course(command.user_id, command.course_id)
            if existing is None:
                raise
            return str(existing.id)

        logger.info(
            "Enrollment provisioned",
            enrollment_id=str(enrollment.id),
            user_id=str(command.user_id),
            course_id=str(command.course_id),
            order_id=str(command.order_id) if command.order_id else None,
        )
        return str(enrollment.id)
