"""Course endpoints — creation, membership, lifecycle and the professor review queue."""
from __future__ import annotations
from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from courseqa.api.auth import get_current_actor
from courseqa.api.errors import unwrap_or_raise
from courseqa.api.serializers import serialize_course, serialize_enrollment, serialize_queue_item
from courseqa.application.course_app_service import CourseAppService
from courseqa.application.review_app_service import ReviewAppService
from courseqa.container import get_course_app_service, get_review_app_service
from courseqa.domain.qa.models import Actor

router = APIRouter(tags=["courses"])


# ------------------------------------------------------------------
# Pydantic schemas
# ------------------------------------------------------------------
class CourseBody(BaseModel):
    title: str
    description: str = ""
    state: str = "active"


class JoinBody(BaseModel):
    join_code: str


class CourseStateBody(BaseModel):
    new_state: str


# ------------------------------------------------------------------
# Health check
# ------------------------------------------------------------------
@router.get("/health")
def health():
    return {"status": "ok"}


# ------------------------------------------------------------------
# Course endpoints
# ------------------------------------------------------------------
@router.post("/courses", status_code=status.HTTP_201_CREATED)
def create_course(
    body: CourseBody,
    svc: CourseAppService = Depends(get_course_app_service),
    actor: Actor = Depends(get_current_actor),
):
    return serialize_course(unwrap_or_raise(svc.create_course(actor, body.model_dump())))


@router.get("/courses")
def list_courses(
    svc: CourseAppService = Depends(get_course_app_service),
    actor: Actor = Depends(get_current_actor),
):
    return [serialize_course(c) for c in svc.list_courses(actor)]


@router.post("/courses/join", status_code=status.HTTP_201_CREATED)
def join_course(
    body: JoinBody,
    svc: CourseAppService = Depends(get_course_app_service),
    actor: Actor = Depends(get_current_actor),
):
    return serialize_enrollment(unwrap_or_raise(svc.join_course(actor, body.join_code)))


@router.get("/courses/{course_id}")
def get_course(
    course_id: str,
    svc: CourseAppService = Depends(get_course_app_service),
    actor: Actor = Depends(get_current_actor),
):
    return serialize_course(unwrap_or_raise(svc.get_course(actor, course_id)))


@router.post("/courses/{course_id}/state")
def change_course_state(
    course_id: str,
    body: CourseStateBody,
    svc: CourseAppService = Depends(get_course_app_service),
    actor: Actor = Depends(get_current_actor),
):
    return serialize_course(unwrap_or_raise(svc.change_state(actor, course_id, body.new_state)))


# ------------------------------------------------------------------
# Review queue
# ------------------------------------------------------------------
@router.get("/courses/{course_id}/review-queue")
def review_queue(
    course_id: str,
    tab: str = "pending",
    q: Optional[str] = None,
    svc: ReviewAppService = Depends(get_review_app_service),
    actor: Actor = Depends(get_current_actor),
):
    items = unwrap_or_raise(svc.review_queue(actor, course_id, tab=tab, q=q))
    return [serialize_queue_item(item) for item in items]
