"""Abstract repository interface for courses and their enrollments."""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Optional

from courseqa.domain.qa.models import Course, Enrollment


class CourseRepository(ABC):

    @abstractmethod
    def insert_course(self, course: Course) -> bool:
        """Insert a new course. Returns False if its join code is already taken."""
        ...

    @abstractmethod
    def update_state(self, course: Course, expected_state: str) -> bool:
        """Write course.state only if the stored state still equals expected_state."""
        ...

    @abstractmethod
    def get_by_id(self, course_id: str) -> Optional[Course]:
        ...

    @abstractmethod
    def get_by_join_code(self, join_code: str) -> Optional[Course]:
        ...

    @abstractmethod
    def list_for_member(self, user_id: str) -> List[Course]:
        """Courses the user owns or is enrolled in, oldest first."""
        ...

    @abstractmethod
    def add_enrollment(self, enrollment: Enrollment) -> bool:
        """Returns False if the student is already enrolled."""
        ...

    @abstractmethod
    def is_enrolled(self, course_id: str, student_id: str) -> bool:
        ...
