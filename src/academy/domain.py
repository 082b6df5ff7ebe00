"""Academy bounded context: course commerce and learning access.

Covers the path from a learner's cart to a paid order, reconciles payments
against the external gateway, provisions enrollments and tracks lecture
progress.
"""

from protean.domain import Domain

from academy.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

academy = Domain(name="academy")
