"""Domain object → JSON dict serializers shared by the routers."""
from __future__ import annotations

from courseqa.domain.qa.models import Course, Enrollment, Question, QueueItem, Response


def serialize_course(c: Course) -> dict:
    return {
        "id": c.id,
        "title": c.title,
        "description": c.description,
        "professor_id": c.professor_id,
        "join_code": c.join_code,
        "state": c.state,
        "created_at": c.created_at,
        "updated_at": c.updated_at,
    }


def serialize_enrollment(e: Enrollment) -> dict:
    return {
        "course_id": e.course_id,
        "student_id": e.student_id,
        "joined_at": e.joined_at,
    }


def serialize_question(q: Question) -> dict:
    return {
        "id": q.id,
        "course_id": q.course_id,
        "author_id": q.author_id,
        "title": q.title,
        "body": q.body,
        "format": q.format,
        "tags": q.tags,
        "created_at": q.created_at,
        "votes": q.votes,
        "status": q.status,
        "response_count": q.response_count,
    }


def serialize_question_summary(q: Question) -> dict:
    return {
        "id": q.id,
        "title": q.title,
        "body": q.body,
        "author_id": q.author_id,
        "tags": q.tags,
        "created_at": q.created_at,
        "status": q.status,
    }


def serialize_response(r: Response) -> dict:
    return {
        "id": r.id,
        "question_id": r.question_id,
        "author_kind": r.author_kind,
        "author_id": r.author_id,
        "body": r.body,
        "original_body": r.original_body,
        "edited": r.edited,
        "review_status": r.review_status,
        "reviewed_by": r.reviewed_by,
        "reviewed_at": r.reviewed_at,
        "created_at": r.created_at,
    }


def serialize_public_response(r: Response) -> dict:
    """What students see of a published answer: no audit trail."""
    return {
        "id": r.id,
        "question_id": r.question_id,
        "author_kind": r.author_kind,
        "body": r.body,
        "review_status": r.review_status,
        "created_at": r.created_at,
    }


def serialize_queue_item(item: QueueItem) -> dict:
    data = serialize_response(item.response)
    data["question"] = serialize_question_summary(item.question)
    return data
