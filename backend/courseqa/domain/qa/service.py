"""Domain service — pure business logic for courses, questions and the review lifecycle."""
from __future__ import annotations
import secrets
import string
import uuid
from datetime import datetime, timezone
from typing import Optional

from courseqa.domain.common.errors import ConflictError, ValidationError
from courseqa.domain.common.result import Result
from courseqa.domain.qa.models import Course, Enrollment, Question, Response
from courseqa.domain.qa.rules import (
    validate_author_kind,
    validate_course_content,
    validate_course_transition,
    validate_question_content,
    validate_response_body,
    validate_review_transition,
)
from courseqa.domain.qa.status import derive_question_status

_JOIN_CODE_ALPHABET = string.ascii_uppercase + string.digits


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _new_id() -> str:
    return str(uuid.uuid4())


def generate_join_code(length: int = 6) -> str:
    return "".join(secrets.choice(_JOIN_CODE_ALPHABET) for _ in range(length))


class QADomainService:
    """
    Pure domain operations — no I/O. All methods return Result[T].
    The application layer calls these and then persists via the repositories.
    """

    # ------------------------------------------------------------------
    # Courses
    # ------------------------------------------------------------------
    def create_course(self, professor_id: str, data: dict, join_code: str) -> Result[Course]:
        validation = validate_course_content(data)
        if not validation.is_success:
            return Result.fail(validation.error)

        now = _now_iso()
        course = Course(
            id=_new_id(),
            title=data["title"].strip(),
            description=(data.get("description") or "").strip(),
            professor_id=professor_id,
            join_code=join_code,
            state=data.get("state") or "active",
            created_at=now,
            updated_at=now,
        )
        return Result.ok(course)

    def transition_course(self, course: Course, new_state: str) -> Result[Course]:
        validation = validate_course_transition(course.state, new_state)
        if not validation.is_success:
            return Result.fail(validation.error)
        course.state = new_state
        course.updated_at = _now_iso()
        return Result.ok(course)

    def enroll(self, course: Course, student_id: str) -> Enrollment:
        return Enrollment(course_id=course.id, student_id=student_id, joined_at=_now_iso())

    # ------------------------------------------------------------------
    # Questions & responses
    # ------------------------------------------------------------------
    def create_question(self, course: Course, author_id: str, data: dict) -> Result[Question]:
        """Create a question in an active course. It starts with no responses."""
        validation = validate_question_content(data)
        if not validation.is_success:
            return Result.fail(validation.error)

        if course.state != "active":
            return Result.fail(ValidationError(
                f"Course '{course.id}' is '{course.state}'; questions can only be asked in active courses.",
                field="course_id",
            ))

        content = validation.value
        question = Question(
            id=_new_id(),
            course_id=course.id,
            author_id=author_id,
            title=content["title"],
            body=content["body"],
            format=content["format"],
            tags=content["tags"],
            created_at=_now_iso(),
            votes=0,
            status=derive_question_status([]),
            response_count=0,
        )
        return Result.ok(question)

    def create_response(
        self,
        question: Question,
        author_kind: str,
        body: str,
        author_id: Optional[str] = None,
    ) -> Result[Response]:
        """Every response enters the queue as pending, whoever wrote it."""
        kind = validate_author_kind(author_kind)
        if not kind.is_success:
            return Result.fail(kind.error)
        text = validate_response_body(body)
        if not text.is_success:
            return Result.fail(text.error)

        response = Response(
            id=_new_id(),
            question_id=question.id,
            author_kind=author_kind,
            author_id=author_id,
            body=text.value,
            original_body=text.value,
            review_status="pending",
            created_at=_now_iso(),
        )
        return Result.ok(response)

    def revise_content(self, response: Response, new_body: str) -> Result[Response]:
        """Replace the draft body of a pending response; the review status is untouched."""
        if response.review_status != "pending":
            return Result.fail(ConflictError(
                f"Response '{response.id}' is '{response.review_status}' and can no longer be edited."
            ))
        text = validate_response_body(new_body)
        if not text.is_success:
            return Result.fail(text.error)
        response.body = text.value
        return Result.ok(response)

    # ------------------------------------------------------------------
    # Review transitions
    # ------------------------------------------------------------------
    def approve(self, response: Response, reviewer_id: str) -> Result[Response]:
        return self._decide(response, "approved", reviewer_id)

    def reject(self, response: Response, reviewer_id: str) -> Result[Response]:
        return self._decide(response, "rejected", reviewer_id)

    def edit_and_approve(self, response: Response, reviewer_id: str, new_body: str) -> Result[Response]:
        """Pass through 'edited' and land on 'approved' with the new body published."""
        edit = validate_review_transition(response.review_status, "edited")
        if not edit.is_success:
            return Result.fail(edit.error)
        text = validate_response_body(new_body)
        if not text.is_success:
            return Result.fail(text.error)

        response.body = text.value
        response.review_status = "edited"
        return self._decide(response, "approved", reviewer_id)

    def _decide(self, response: Response, new_status: str, reviewer_id: str) -> Result[Response]:
        validation = validate_review_transition(response.review_status, new_status)
        if not validation.is_success:
            return Result.fail(validation.error)

        response.review_status = new_status
        response.reviewed_by = reviewer_id
        response.reviewed_at = _now_iso()
        return Result.ok(response)
