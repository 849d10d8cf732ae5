"""Question endpoints — asking, browsing, voting and submitting responses."""
from __future__ import annotations
from typing import List, Optional

from fastapi import APIRouter, Depends, Response as HttpResponse, status
from pydantic import BaseModel

from courseqa.api.auth import get_current_actor
from courseqa.api.errors import unwrap_or_raise
from courseqa.api.serializers import (
    serialize_public_response,
    serialize_question,
    serialize_response,
)
from courseqa.application.generation_app_service import GenerationAppService
from courseqa.application.question_app_service import QuestionAppService
from courseqa.container import get_generation_app_service, get_question_app_service
from courseqa.domain.qa.models import Actor

router = APIRouter(tags=["questions"])


# ------------------------------------------------------------------
# Pydantic schemas
# ------------------------------------------------------------------
class QuestionBody(BaseModel):
    course_id: str
    title: str
    body: str
    format: str = "plain-text"
    tags: List[str] = []


class ResponseBody(BaseModel):
    author_kind: str
    body: str


# ------------------------------------------------------------------
# Question endpoints
# ------------------------------------------------------------------
@router.post("/questions", status_code=status.HTTP_201_CREATED)
def create_question(
    body: QuestionBody,
    svc: QuestionAppService = Depends(get_question_app_service),
    actor: Actor = Depends(get_current_actor),
):
    data = body.model_dump()
    course_id = data.pop("course_id")
    return serialize_question(unwrap_or_raise(svc.create_question(actor, course_id, data)))


@router.get("/questions")
def browse_questions(
    course_id: str,
    q: Optional[str] = None,
    status: str = "all",
    sort: str = "newest",
    svc: QuestionAppService = Depends(get_question_app_service),
    actor: Actor = Depends(get_current_actor),
):
    questions = unwrap_or_raise(svc.browse(actor, course_id, q=q, status=status, sort=sort))
    return [serialize_question(question) for question in questions]


@router.get("/questions/{question_id}")
def get_question(
    question_id: str,
    svc: QuestionAppService = Depends(get_question_app_service),
    actor: Actor = Depends(get_current_actor),
):
    question, responses = unwrap_or_raise(svc.get_question_detail(actor, question_id))
    # Professors only reach questions in courses they own and get the audit trail.
    serialize = serialize_response if actor.role == "professor" else serialize_public_response
    data = serialize_question(question)
    data["responses"] = [serialize(r) for r in responses]
    return data


@router.post("/questions/{question_id}/vote")
def vote(
    question_id: str,
    svc: QuestionAppService = Depends(get_question_app_service),
    actor: Actor = Depends(get_current_actor),
):
    return serialize_question(unwrap_or_raise(svc.vote(actor, question_id)))


# ------------------------------------------------------------------
# Responses
# ------------------------------------------------------------------
@router.post("/questions/{question_id}/responses", status_code=status.HTTP_201_CREATED)
def create_response(
    question_id: str,
    body: ResponseBody,
    svc: QuestionAppService = Depends(get_question_app_service),
    actor: Actor = Depends(get_current_actor),
):
    return serialize_response(unwrap_or_raise(svc.create_response(actor, question_id, body.author_kind, body.body)))


@router.post("/questions/{question_id}/responses/generate", status_code=status.HTTP_201_CREATED)
async def generate_response(
    question_id: str,
    svc: GenerationAppService = Depends(get_generation_app_service),
    actor: Actor = Depends(get_current_actor),
):
    response = unwrap_or_raise(await svc.generate(actor, question_id))
    if response is None:
        # No candidate produced; nothing was queued.
        return HttpResponse(status_code=status.HTTP_204_NO_CONTENT)
    return serialize_response(response)
