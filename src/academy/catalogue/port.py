"""Course catalogue port (abstract interface).

The catalogue (courses, sections, lectures) is owned by another service.
Commerce only needs a read-only view of it: the purchasable facts of a course
and the lecture ids that make up its curriculum.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class CourseSnapshot:
    """The course facts captured onto an order line at purchase time."""

    id: str
    title: str
    slug: str
    thumbnail_url: str | None
    price: int


class CourseCatalogue(ABC):
    """Abstract read-only course lookup."""

    @abstractmethod
    def get_course(self, course_id: str) -> CourseSnapshot | None:
        """Return the course, or None if it does not exist."""
        ...

    @abstractmethod
    def get_lecture_ids(self, course_id: str) -> list[str]:
        """Return the ids of every lecture currently in the course."""
        ...
