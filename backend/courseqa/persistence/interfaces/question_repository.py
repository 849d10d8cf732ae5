"""Abstract repository interface for the Question aggregate (questions, responses, votes)."""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Optional

from courseqa.domain.qa.models import Question, QueueItem, Response


class QuestionRepository(ABC):

    # ------------------------------------------------------------------
    # Questions
    # ------------------------------------------------------------------
    @abstractmethod
    def save_question(self, question: Question) -> None:
        """Insert a new question row. Derived fields are not stored."""
        ...

    @abstractmethod
    def get_question(self, question_id: str) -> Optional[Question]:
        """Return the question with status and response_count derived from its current responses."""
        ...

    @abstractmethod
    def list_questions(self, course_id: str) -> List[Question]:
        """All questions of a course in insertion order, derived fields populated."""
        ...

    @abstractmethod
    def add_vote(self, question_id: str, voter_id: str, voted_at: str) -> bool:
        """Record one vote and bump the counter atomically. Returns False on a repeat vote."""
        ...

    # ------------------------------------------------------------------
    # Responses
    # ------------------------------------------------------------------
    @abstractmethod
    def save_response(self, response: Response) -> None:
        """Insert a new response row."""
        ...

    @abstractmethod
    def get_response(self, response_id: str) -> Optional[Response]:
        ...

    @abstractmethod
    def list_responses(self, question_id: str) -> List[Response]:
        """Responses of one question in insertion order."""
        ...

    @abstractmethod
    def list_queue(self, course_id: str) -> List[QueueItem]:
        """Every response in a course with its parent question, in insertion order."""
        ...

    @abstractmethod
    def commit_review(self, response: Response, expected_status: str, new_body: Optional[str] = None) -> bool:
        """
        Compare-and-set the review columns (status, reviewer, timestamp).
        The body is only overwritten when new_body is given, so a revision
        committed after the caller loaded the response survives a plain
        approve or reject. Applies only if the stored review_status still
        equals expected_status; returns False when another writer got there first.
        """
        ...

    @abstractmethod
    def update_body(self, response: Response, expected_status: str) -> bool:
        """Compare-and-set the body alone, leaving review_status and original_body untouched."""
        ...
