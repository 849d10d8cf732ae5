"""Map workflow failures onto HTTP responses."""
from __future__ import annotations

from fastapi import HTTPException, status

from courseqa.domain.common.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
    WorkflowError,
)
from courseqa.domain.common.result import Result

_STATUS_CODES = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    AuthorizationError: status.HTTP_403_FORBIDDEN,
}


def to_http_exception(error: WorkflowError) -> HTTPException:
    code = _STATUS_CODES.get(type(error), status.HTTP_400_BAD_REQUEST)
    return HTTPException(status_code=code, detail=error.to_dict())


def unwrap_or_raise(result: Result):
    if not result.is_success:
        raise to_http_exception(result.error)
    return result.value
