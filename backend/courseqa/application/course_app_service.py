"""Application service — course creation, membership and the shared access check."""
from __future__ import annotations
from typing import List

from courseqa.core import config
from courseqa.core.logging import get_logger
from courseqa.domain.common.errors import ConflictError, NotFoundError
from courseqa.domain.common.result import Result
from courseqa.domain.qa.models import Actor, Course, Enrollment
from courseqa.domain.qa.policy import authorize
from courseqa.domain.qa.service import QADomainService, generate_join_code
from courseqa.persistence.interfaces.course_repository import CourseRepository

logger = get_logger(__name__)

# Attempts at drawing an unused join code before giving up
_JOIN_CODE_ATTEMPTS = 8


class CourseAppService:
    def __init__(self, repo: CourseRepository):
        self._repo = repo
        self._domain = QADomainService()

    # ------------------------------------------------------------------
    # ACCESS
    # ------------------------------------------------------------------
    def is_member(self, actor: Actor, course: Course) -> bool:
        if actor.id == course.professor_id:
            return True
        return self._repo.is_enrolled(course.id, actor.id)

    def resolve(self, actor: Actor, course_id: str, action: str) -> Result[Course]:
        """Load a course and check that the actor may perform ``action`` on it."""
        course = self._repo.get_by_id(course_id)
        if not course:
            return Result.fail(NotFoundError(f"Course '{course_id}' not found."))
        access = authorize(actor, action, course, self.is_member(actor, course))
        if not access.is_success:
            return Result.fail(access.error)
        return Result.ok(course)

    # ------------------------------------------------------------------
    # CREATE
    # ------------------------------------------------------------------
    def create_course(self, actor: Actor, data: dict) -> Result[Course]:
        access = authorize(actor, "course:create")
        if not access.is_success:
            return Result.fail(access.error)

        for _ in range(_JOIN_CODE_ATTEMPTS):
            result = self._domain.create_course(actor.id, data, generate_join_code(config.JOIN_CODE_LENGTH))
            if not result.is_success:
                return result
            if self._repo.insert_course(result.value):
                logger.info("Course %s created by %s with join code %s",
                            result.value.id, actor.id, result.value.join_code)
                return result
        return Result.fail(ConflictError("Could not allocate a unique join code. Try again."))

    # ------------------------------------------------------------------
    # READ
    # ------------------------------------------------------------------
    def get_course(self, actor: Actor, course_id: str) -> Result[Course]:
        return self.resolve(actor, course_id, "course:view")

    def list_courses(self, actor: Actor) -> List[Course]:
        return self._repo.list_for_member(actor.id)

    # ------------------------------------------------------------------
    # MEMBERSHIP
    # ------------------------------------------------------------------
    def join_course(self, actor: Actor, join_code: str) -> Result[Enrollment]:
        access = authorize(actor, "course:join")
        if not access.is_success:
            return Result.fail(access.error)

        course = self._repo.get_by_join_code((join_code or "").strip())
        if not course:
            return Result.fail(NotFoundError(f"No course uses join code '{join_code}'."))
        if course.state != "active":
            return Result.fail(ConflictError(f"Course '{course.id}' is '{course.state}' and not open for joining."))

        enrollment = self._domain.enroll(course, actor.id)
        if not self._repo.add_enrollment(enrollment):
            return Result.fail(ConflictError(f"Already enrolled in course '{course.id}'."))
        logger.info("Student %s joined course %s", actor.id, course.id)
        return Result.ok(enrollment)

    # ------------------------------------------------------------------
    # STATE TRANSITION
    # ------------------------------------------------------------------
    def change_state(self, actor: Actor, course_id: str, new_state: str) -> Result[Course]:
        resolved = self.resolve(actor, course_id, "course:manage")
        if not resolved.is_success:
            return resolved

        course = resolved.value
        previous = course.state
        result = self._domain.transition_course(course, new_state)
        if not result.is_success:
            return result
        if not self._repo.update_state(result.value, expected_state=previous):
            return Result.fail(ConflictError(f"Course '{course_id}' changed state concurrently. Refresh and retry."))
        logger.info("Course %s moved %s -> %s", course_id, previous, new_state)
        return result
