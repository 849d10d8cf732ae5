"""Business rules for the Q&A domain — input validation and the review state machine."""
from __future__ import annotations
from typing import List, Optional

from courseqa.domain.common.errors import ConflictError, ValidationError
from courseqa.domain.common.result import Result

CONTENT_FORMATS = {"plain-text", "math-markup", "code"}
AUTHOR_KINDS = {"professor", "ai-generated"}

# Review lifecycle. "edited" is never a resting state: an edit commits
# straight to "approved" together with the new body.
REVIEW_STATUSES = {"pending", "approved", "rejected", "edited"}
ALLOWED_REVIEW_TRANSITIONS: dict[str, set[str]] = {
    "pending": {"approved", "rejected", "edited"},
    "edited": {"approved"},
}

COURSE_STATES = {"draft", "active", "archived"}
ALLOWED_COURSE_TRANSITIONS: dict[str, set[str]] = {
    "draft": {"active", "archived"},
    "active": {"archived"},
}

MAX_TAGS = 10
MAX_TITLE_LENGTH = 300


def _required_text(data: dict, field: str) -> Result[str]:
    value = (data.get(field) or "").strip()
    if not value:
        return Result.fail(ValidationError(f"'{field}' is required and cannot be empty.", field=field))
    return Result.ok(value)


def validate_review_transition(current_status: str, new_status: str) -> Result[str]:
    """
    Enforces pending → approved | rejected, and pending → edited → approved.
    Returns Result.ok(new_status) or Result.fail(ConflictError).
    """
    if new_status not in REVIEW_STATUSES:
        return Result.fail(ValidationError(
            f"'{new_status}' is not a valid review status. Must be one of {sorted(REVIEW_STATUSES)}.",
            field="review_status",
        ))

    allowed = ALLOWED_REVIEW_TRANSITIONS.get(current_status)
    if allowed is None:
        return Result.fail(ConflictError(
            f"Response is already '{current_status}'. No further transitions allowed."
        ))

    if new_status not in allowed:
        return Result.fail(ConflictError(
            f"Invalid transition: '{current_status}' → '{new_status}'. "
            f"Allowed: {sorted(allowed)}."
        ))

    return Result.ok(new_status)


def validate_course_transition(current_state: str, new_state: str) -> Result[str]:
    if new_state not in COURSE_STATES:
        return Result.fail(ValidationError(
            f"'{new_state}' is not a valid course state. Must be one of {sorted(COURSE_STATES)}.",
            field="new_state",
        ))
    if new_state not in ALLOWED_COURSE_TRANSITIONS.get(current_state, set()):
        return Result.fail(ConflictError(
            f"Invalid course transition: '{current_state}' → '{new_state}'."
        ))
    return Result.ok(new_state)


def validate_course_content(data: dict) -> Result[dict]:
    title = _required_text(data, "title")
    if not title.is_success:
        return Result.fail(title.error)
    state = data.get("state") or "active"
    if state not in ("draft", "active"):
        return Result.fail(ValidationError("A new course must start as 'draft' or 'active'.", field="state"))
    return Result.ok(data)


def normalize_tags(tags: Optional[List[str]]) -> Result[List[str]]:
    """Strip blanks and duplicates while keeping the caller's order."""
    cleaned: List[str] = []
    for tag in tags or []:
        tag = (tag or "").strip()
        if tag and tag not in cleaned:
            cleaned.append(tag)
    if len(cleaned) > MAX_TAGS:
        return Result.fail(ValidationError(f"At most {MAX_TAGS} tags are allowed.", field="tags"))
    return Result.ok(cleaned)


def validate_question_content(data: dict) -> Result[dict]:
    """Validates title, body, format and tags of a new question."""
    for field in ("title", "body"):
        check = _required_text(data, field)
        if not check.is_success:
            return Result.fail(check.error)

    if len(data["title"].strip()) > MAX_TITLE_LENGTH:
        return Result.fail(ValidationError(
            f"'title' must be at most {MAX_TITLE_LENGTH} characters.", field="title"
        ))

    fmt = data.get("format") or "plain-text"
    if fmt not in CONTENT_FORMATS:
        return Result.fail(ValidationError(
            f"'{fmt}' is not a valid content format. Must be one of {sorted(CONTENT_FORMATS)}.",
            field="format",
        ))

    tags = normalize_tags(data.get("tags"))
    if not tags.is_success:
        return Result.fail(tags.error)

    return Result.ok({
        "title": data["title"].strip(),
        "body": data["body"].strip(),
        "format": fmt,
        "tags": tags.value,
    })


def validate_response_body(body: Optional[str]) -> Result[str]:
    return _required_text({"body": body}, "body")


def validate_author_kind(author_kind: str) -> Result[str]:
    if author_kind not in AUTHOR_KINDS:
        return Result.fail(ValidationError(
            f"'{author_kind}' is not a valid author kind. Must be one of {sorted(AUTHOR_KINDS)}.",
            field="author_kind",
        ))
    return Result.ok(author_kind)
