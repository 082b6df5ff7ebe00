"""Enrollment reacts to paid orders by provisioning one enrollment per course.

Runs after the payment and order have been committed as PAID. Each course is
provisioned independently: a failure is logged and the remaining courses
still get their enrollments. Because provisioning is idempotent the whole
handler can be replayed for the order to repair a partial failure.
"""

import json

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from academy.domain import academy
from academy.enrollment.enrollment import Enrollment
from academy.enrollment.provisioning import ProvisionEnrollment
from academy.order.events import OrderPaid

logger = structlog.get_logger(__name__)


@academy.event_handler(part_of=Enrollment, stream_category="academy::order")
class EnrollmentOrderEventHandler:
    @handle(OrderPaid)
    def on_order_paid(self, event: OrderPaid) -> None:
        course_ids = json.loads(event.course_ids)
        failed = []

        for course_id in course_ids:
            try:
                current_domain.process(
                    ProvisionEnrollment(
                        user_id=str(event.user_id),
                        course_id=course_id,
                        order_id=str(event.order_id),
                    ),
                    asynchronous=False,
                )
            except Exception:
                logger.exception(
                    "Failed to provision enrollment",
                    order_id=str(event.order_id),
                    user_id=str(event.user_id),
                    course_id=course_id,
                )
                failed.append(course_id)

        logger.info(
            "Enrollments provisioned for paid order",
            order_id=str(event.order_id),
            provisioned=len(course_ids) - len(failed),
            failed=failed,
        )
