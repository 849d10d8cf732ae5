"""Application service — questions, responses and the student-facing browse view."""
from __future__ import annotations
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from courseqa.application.course_app_service import CourseAppService
from courseqa.core.logging import get_logger
from courseqa.domain.common.errors import AuthorizationError, ConflictError, NotFoundError
from courseqa.domain.common.result import Result
from courseqa.domain.qa.models import Actor, Course, Question, Response
from courseqa.domain.qa.query import browse_questions
from courseqa.domain.qa.service import QADomainService
from courseqa.persistence.interfaces.question_repository import QuestionRepository

logger = get_logger(__name__)


class QuestionAppService:
    def __init__(self, repo: QuestionRepository, courses: CourseAppService):
        self._repo = repo
        self._courses = courses
        self._domain = QADomainService()

    def _resolve_question(self, actor: Actor, question_id: str, action: str) -> Result[Tuple[Question, Course]]:
        question = self._repo.get_question(question_id)
        if not question:
            return Result.fail(NotFoundError(f"Question '{question_id}' not found."))
        course = self._courses.resolve(actor, question.course_id, action)
        if not course.is_success:
            return Result.fail(course.error)
        return Result.ok((question, course.value))

    # ------------------------------------------------------------------
    # QUESTIONS
    # ------------------------------------------------------------------
    def create_question(self, actor: Actor, course_id: str, data: dict) -> Result[Question]:
        course = self._courses.resolve(actor, course_id, "question:create")
        if not course.is_success:
            return Result.fail(course.error)

        result = self._domain.create_question(course.value, actor.id, data)
        if not result.is_success:
            return result
        self._repo.save_question(result.value)
        logger.info("Question %s asked in course %s by %s", result.value.id, course_id, actor.id)
        return result

    def get_question(self, actor: Actor, question_id: str) -> Result[Question]:
        resolved = self._resolve_question(actor, question_id, "question:browse")
        if not resolved.is_success:
            return Result.fail(resolved.error)
        return Result.ok(resolved.value[0])

    def get_question_detail(self, actor: Actor, question_id: str) -> Result[Tuple[Question, List[Response]]]:
        """
        A question with its responses. The owning professor sees every
        response; everybody else sees only the published (approved) ones.
        """
        resolved = self._resolve_question(actor, question_id, "question:browse")
        if not resolved.is_success:
            return Result.fail(resolved.error)

        question, course = resolved.value
        responses = self._repo.list_responses(question_id)
        if actor.id != course.professor_id:
            responses = [r for r in responses if r.review_status == "approved"]
        return Result.ok((question, responses))

    def browse(
        self,
        actor: Actor,
        course_id: str,
        q: Optional[str] = None,
        status: str = "all",
        sort: str = "newest",
    ) -> Result[List[Question]]:
        course = self._courses.resolve(actor, course_id, "question:browse")
        if not course.is_success:
            return Result.fail(course.error)
        return browse_questions(self._repo.list_questions(course_id), q=q, status=status, sort=sort)

    def vote(self, actor: Actor, question_id: str) -> Result[Question]:
        resolved = self._resolve_question(actor, question_id, "question:vote")
        if not resolved.is_success:
            return Result.fail(resolved.error)

        voted_at = datetime.now(timezone.utc).isoformat()
        if not self._repo.add_vote(question_id, actor.id, voted_at):
            return Result.fail(ConflictError(f"'{actor.id}' has already voted on question '{question_id}'."))
        return Result.ok(self._repo.get_question(question_id))

    # ------------------------------------------------------------------
    # RESPONSES
    # ------------------------------------------------------------------
    def create_response(
        self,
        actor: Actor,
        question_id: str,
        author_kind: str,
        body: str,
        action: str = "response:create",
    ) -> Result[Response]:
        resolved = self._resolve_question(actor, question_id, action)
        if not resolved.is_success:
            return Result.fail(resolved.error)
        if actor.role == "ai" and author_kind != "ai-generated":
            return Result.fail(AuthorizationError(
                "The generation service may only submit 'ai-generated' responses."
            ))

        question, _ = resolved.value
        result = self._domain.create_response(question, author_kind, body, author_id=actor.id)
        if not result.is_success:
            return result
        self._repo.save_response(result.value)
        logger.info("Response %s (%s) queued for question %s", result.value.id, author_kind, question_id)
        return result

    def check_can_generate(self, actor: Actor, question_id: str) -> Result[Question]:
        resolved = self._resolve_question(actor, question_id, "response:generate")
        if not resolved.is_success:
            return Result.fail(resolved.error)
        return Result.ok(resolved.value[0])
