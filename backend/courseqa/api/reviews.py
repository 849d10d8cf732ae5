"""Review endpoints. Each call addresses one response by id."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from courseqa.api.auth import get_current_actor
from courseqa.api.errors import unwrap_or_raise
from courseqa.api.serializers import serialize_question, serialize_response
from courseqa.application.review_app_service import ReviewAppService
from courseqa.container import get_review_app_service
from courseqa.domain.qa.models import Actor

router = APIRouter(prefix="/responses", tags=["reviews"])


class ContentBody(BaseModel):
    body: str


@router.get("/{response_id}")
def get_response(
    response_id: str,
    svc: ReviewAppService = Depends(get_review_app_service),
    actor: Actor = Depends(get_current_actor),
):
    return serialize_response(unwrap_or_raise(svc.get_response(actor, response_id)))


@router.put("/{response_id}/content")
def update_response_content(
    response_id: str,
    body: ContentBody,
    svc: ReviewAppService = Depends(get_review_app_service),
    actor: Actor = Depends(get_current_actor),
):
    return serialize_response(unwrap_or_raise(svc.update_response_content(actor, response_id, body.body)))


@router.post("/{response_id}/approve")
def approve(
    response_id: str,
    svc: ReviewAppService = Depends(get_review_app_service),
    actor: Actor = Depends(get_current_actor),
):
    outcome = unwrap_or_raise(svc.approve(actor, response_id))
    return {
        "response": serialize_response(outcome.response),
        "question": serialize_question(outcome.question),
    }


@router.post("/{response_id}/reject")
def reject(
    response_id: str,
    svc: ReviewAppService = Depends(get_review_app_service),
    actor: Actor = Depends(get_current_actor),
):
    return serialize_response(unwrap_or_raise(svc.reject(actor, response_id)).response)


@router.post("/{response_id}/edit-approve")
def edit_and_approve(
    response_id: str,
    body: ContentBody,
    svc: ReviewAppService = Depends(get_review_app_service),
    actor: Actor = Depends(get_current_actor),
):
    return serialize_response(unwrap_or_raise(svc.edit_and_approve(actor, response_id, body.body)).response)
