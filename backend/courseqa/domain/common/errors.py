"""Typed failure kinds carried by Result.fail."""
from __future__ import annotations
from typing import Optional


class WorkflowError(Exception):
    kind = "error"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> dict:
        return {"error": self.kind, "message": self.message, "field": self.field}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class ValidationError(WorkflowError):
    """Malformed or missing input. Always names the offending field."""
    kind = "validation_error"


class NotFoundError(WorkflowError):
    kind = "not_found"


class ConflictError(WorkflowError):
    """The request is well-formed but the entity is no longer in the expected state."""
    kind = "conflict"


class AuthorizationError(WorkflowError):
    kind = "authorization_error"
