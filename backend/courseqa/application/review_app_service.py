"""Application service — the professor-facing approval queue and its review transitions."""
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Tuple

from courseqa.application.course_app_service import CourseAppService
from courseqa.core.logging import get_logger
from courseqa.domain.common.errors import ConflictError, NotFoundError
from courseqa.domain.common.result import Result
from courseqa.domain.qa.models import Actor, Question, QueueItem, Response
from courseqa.domain.qa.query import filter_review_queue
from courseqa.domain.qa.service import QADomainService
from courseqa.persistence.interfaces.question_repository import QuestionRepository

logger = get_logger(__name__)


@dataclass
class ReviewOutcome:
    """A committed review decision with the parent question as it reads afterwards."""
    response: Response
    question: Question


class ReviewAppService:
    """
    Every decision is committed with a compare-and-set on review_status, so of
    two reviewers racing on the same pending response exactly one wins and the
    other gets a ConflictError. The parent question's status is derived from
    the committed rows; the outcome carries it re-read after the write.
    """

    def __init__(self, repo: QuestionRepository, courses: CourseAppService):
        self._repo = repo
        self._courses = courses
        self._domain = QADomainService()

    def _load(self, actor: Actor, response_id: str, action: str) -> Result[Tuple[Response, Question]]:
        response = self._repo.get_response(response_id)
        if not response:
            return Result.fail(NotFoundError(f"Response '{response_id}' not found."))
        question = self._repo.get_question(response.question_id)
        if not question:
            return Result.fail(NotFoundError(f"Question '{response.question_id}' not found."))
        course = self._courses.resolve(actor, question.course_id, action)
        if not course.is_success:
            return Result.fail(course.error)
        return Result.ok((response, question))

    def _lost_race(self, response_id: str) -> ConflictError:
        current = self._repo.get_response(response_id)
        state = current.review_status if current else "gone"
        logger.warning("Review of response %s lost a race; it is now '%s'", response_id, state)
        return ConflictError(f"Response '{response_id}' is already '{state}'. Refresh and re-decide.")

    # ------------------------------------------------------------------
    # READ
    # ------------------------------------------------------------------
    def review_queue(
        self,
        actor: Actor,
        course_id: str,
        tab: str = "pending",
        q: Optional[str] = None,
    ) -> Result[List[QueueItem]]:
        course = self._courses.resolve(actor, course_id, "review:view")
        if not course.is_success:
            return Result.fail(course.error)
        return filter_review_queue(self._repo.list_queue(course_id), tab=tab, q=q)

    def get_response(self, actor: Actor, response_id: str) -> Result[Response]:
        loaded = self._load(actor, response_id, "review:view")
        if not loaded.is_success:
            return Result.fail(loaded.error)
        return Result.ok(loaded.value[0])

    # ------------------------------------------------------------------
    # DRAFT EDIT
    # ------------------------------------------------------------------
    def update_response_content(self, actor: Actor, response_id: str, new_body: str) -> Result[Response]:
        """Revise a pending response without deciding on it. The original body stays in the audit trail."""
        loaded = self._load(actor, response_id, "review:decide")
        if not loaded.is_success:
            return Result.fail(loaded.error)

        result = self._domain.revise_content(loaded.value[0], new_body)
        if not result.is_success:
            return result
        if not self._repo.update_body(result.value, expected_status="pending"):
            return Result.fail(self._lost_race(response_id))
        return result

    # ------------------------------------------------------------------
    # DECISIONS
    # ------------------------------------------------------------------
    def approve(self, actor: Actor, response_id: str) -> Result[ReviewOutcome]:
        return self._commit(actor, response_id, lambda r: self._domain.approve(r, actor.id))

    def reject(self, actor: Actor, response_id: str) -> Result[ReviewOutcome]:
        return self._commit(actor, response_id, lambda r: self._domain.reject(r, actor.id))

    def edit_and_approve(self, actor: Actor, response_id: str, new_body: str) -> Result[ReviewOutcome]:
        return self._commit(
            actor,
            response_id,
            lambda r: self._domain.edit_and_approve(r, actor.id, new_body),
            writes_body=True,
        )

    def _commit(self, actor: Actor, response_id: str, decide, writes_body: bool = False) -> Result[ReviewOutcome]:
        loaded = self._load(actor, response_id, "review:decide")
        if not loaded.is_success:
            return Result.fail(loaded.error)

        response, question = loaded.value
        expected = response.review_status
        result = decide(response)
        if not result.is_success:
            return Result.fail(result.error)

        new_body = result.value.body if writes_body else None
        if not self._repo.commit_review(result.value, expected_status=expected, new_body=new_body):
            return Result.fail(self._lost_race(response_id))

        # Plain decisions keep whatever body is stored, which may be a newer revision
        stored = self._repo.get_response(response_id)
        logger.info(
            "Response %s %s by %s%s",
            response_id,
            stored.review_status,
            actor.id,
            " (edited)" if stored.edited else "",
        )
        return Result.ok(ReviewOutcome(
            response=stored,
            question=self._repo.get_question(question.id),
        ))
