"""Question status derivation."""
from __future__ import annotations
from typing import Iterable

UNANSWERED = "unanswered"
PENDING = "pending"
ANSWERED = "answered"

QUESTION_STATUSES = {UNANSWERED, PENDING, ANSWERED}


def derive_question_status(review_statuses: Iterable[str]) -> str:
    """
    Map the review statuses of a question's responses to its display status.

    An approved response wins over any number of pending ones. Rejected
    responses contribute nothing, so a question whose responses were all
    rejected reads as unanswered (its response count still tells them apart).
    """
    in_review = False
    for review_status in review_statuses:
        if review_status == "approved":
            return ANSWERED
        if review_status in ("pending", "edited"):
            in_review = True
    return PENDING if in_review else UNANSWERED
