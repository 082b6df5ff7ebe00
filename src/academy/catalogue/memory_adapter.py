"""In-memory course catalogue for development and testing.

Courses are registered at runtime with ``add_course``; nothing is read from
the real catalogue service.
"""

from academy.catalogue.port import CourseCatalogue, CourseSnapshot


class InMemoryCatalogue(CourseCatalogue):
    def __init__(self) -> None:
        self._courses: dict[str, CourseSnapshot] = {}
        self._lectures: dict[str, list[str]] = {}

    def add_course(
        self,
        course_id: str,
        title: str,
        price: int,
        slug: str | None = None,
        thumbnail_url: str | None = None,
        lecture_ids: list[str] | None = None,
    ) -> CourseSnapshot:
        course = CourseSnapshot(
            id=course_id,
            title=title,
            slug=slug or title.lower().replace(" ", "-"),
            thumbnail_url=thumbnail_url,
            price=price,
        )
        self._courses[course_id] = course
        self._lectures[course_id] = list(lecture_ids or [])
        return course

    def remove_course(self, course_id: str) -> None:
        self._courses.pop(str(course_id), None)
        self._lectures.pop(str(course_id), None)

    def set_lectures(self, course_id: str, lecture_ids: list[str]) -> None:
        self._lectures[course_id] = list(lecture_ids)

    def get_course(self, course_id: str) -> CourseSnapshot | None:
        return self._courses.get(str(course_id))

    def get_lecture_ids(self, course_id: str) -> list[str]:
        return list(self._lectures.get(str(course_id), []))
