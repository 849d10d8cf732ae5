"""Read-only filtered and sorted views over questions and the review queue."""
from __future__ import annotations
from datetime import datetime
from typing import Iterable, List, Optional

from courseqa.domain.common.errors import ValidationError
from courseqa.domain.common.result import Result
from courseqa.domain.qa.models import Question, QueueItem
from courseqa.domain.qa.status import QUESTION_STATUSES

STATUS_FILTERS = QUESTION_STATUSES | {"all"}
SORT_ORDERS = {"newest", "oldest", "popular"}
QUEUE_TABS = {"pending", "approved", "rejected", "all"}


def _created(question: Question) -> datetime:
    return datetime.fromisoformat(question.created_at)


def _matches(question: Question, needle: str) -> bool:
    if needle in question.title.lower() or needle in question.body.lower():
        return True
    return any(needle in tag.lower() for tag in question.tags)


def browse_questions(
    questions: Iterable[Question],
    q: Optional[str] = None,
    status: str = "all",
    sort: str = "newest",
) -> Result[List[Question]]:
    """
    Search, filter by derived status and sort a set of questions.

    The search term matches case-insensitively against title, body and any
    single tag. Both filters must hold. ``newest``/``oldest`` order by the
    actual creation time; ``popular`` orders by votes, oldest first on ties.
    """
    status = status or "all"
    sort = sort or "newest"
    if status not in STATUS_FILTERS:
        return Result.fail(ValidationError(
            f"'{status}' is not a valid status filter. Must be one of {sorted(STATUS_FILTERS)}.",
            field="status",
        ))
    if sort not in SORT_ORDERS:
        return Result.fail(ValidationError(
            f"'{sort}' is not a valid sort order. Must be one of {sorted(SORT_ORDERS)}.",
            field="sort",
        ))

    needle = (q or "").strip().lower()
    selected = [
        question for question in questions
        if (not needle or _matches(question, needle))
        and (status == "all" or question.status == status)
    ]

    if sort == "newest":
        selected.sort(key=_created, reverse=True)
    elif sort == "oldest":
        selected.sort(key=_created)
    else:
        selected.sort(key=lambda question: (-question.votes, _created(question)))
    return Result.ok(selected)


def filter_review_queue(
    items: Iterable[QueueItem],
    tab: str = "pending",
    q: Optional[str] = None,
) -> Result[List[QueueItem]]:
    """Keep queue items in the given tab whose question title contains ``q``. Order is preserved."""
    tab = tab or "pending"
    if tab not in QUEUE_TABS:
        return Result.fail(ValidationError(
            f"'{tab}' is not a valid queue tab. Must be one of {sorted(QUEUE_TABS)}.",
            field="tab",
        ))

    needle = (q or "").strip().lower()
    return Result.ok([
        item for item in items
        if (tab == "all" or item.response.review_status == tab)
        and (not needle or needle in item.question.title.lower())
    ])
