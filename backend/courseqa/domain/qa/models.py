"""Q&A domain models — pure Python, no DB or HTTP dependencies."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Actor:
    """The authenticated caller. Identity is established upstream."""
    id: str
    role: str  # student | professor | ai
    username: Optional[str] = None


@dataclass
class Course:
    id: str
    title: str
    description: str
    professor_id: str
    join_code: str
    state: str  # draft | active | archived
    created_at: str
    updated_at: str


@dataclass
class Enrollment:
    course_id: str
    student_id: str
    joined_at: str


@dataclass
class Question:
    id: str
    course_id: str
    author_id: str
    title: str
    body: str
    format: str  # plain-text | math-markup | code
    tags: List[str] = field(default_factory=list)
    created_at: str = ""
    votes: int = 0
    # Derived from the response set on every read; never written by callers.
    status: str = "unanswered"
    response_count: int = 0


@dataclass
class Response:
    id: str
    question_id: str
    author_kind: str  # professor | ai-generated
    body: str
    original_body: str
    review_status: str  # pending | approved | rejected | edited
    created_at: str
    author_id: Optional[str] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[str] = None

    @property
    def edited(self) -> bool:
        """True when the published body no longer matches what was first submitted."""
        return self.body != self.original_body


@dataclass
class QueueItem:
    """A response in the review queue together with its parent question."""
    response: Response
    question: Question
