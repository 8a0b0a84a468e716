"""campuslift data sources."""

from .mock_course import (
    DEFAULT_FIXTURE_PATH,
    MockCourseService,
    load_course_fixture,
)

__all__ = [
    "DEFAULT_FIXTURE_PATH",
    "MockCourseService",
    "load_course_fixture",
]
