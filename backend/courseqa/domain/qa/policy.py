"""Authorization policy: a single capability check over (actor, course, action)."""
from __future__ import annotations
from typing import Optional

from courseqa.domain.common.errors import AuthorizationError
from courseqa.domain.common.result import Result
from courseqa.domain.qa.models import Actor, Course

ROLES = {"student", "professor", "ai"}

# Roles that may attempt each action at all
ACTION_ROLES: dict[str, set[str]] = {
    "course:create": {"professor"},
    "course:view": {"student", "professor"},
    "course:join": {"student"},
    "course:manage": {"professor"},
    "question:create": {"student", "professor"},
    "question:browse": {"student", "professor"},
    "question:vote": {"student", "professor"},
    "response:create": {"professor", "ai"},
    "response:generate": {"professor", "ai"},
    "review:view": {"professor"},
    "review:decide": {"professor"},
}

# Actions that need nothing beyond the role
COURSELESS_ACTIONS = {"course:create", "course:join"}
# Actions only the owning professor may take
OWNER_ACTIONS = {"course:manage", "review:view", "review:decide"}


def is_allowed(actor: Actor, action: str, course: Optional[Course] = None, is_member: bool = False) -> bool:
    if actor.role not in ACTION_ROLES.get(action, set()):
        return False
    if action in COURSELESS_ACTIONS:
        return True
    if course is None:
        return False
    if actor.role == "ai":
        # The generation collaborator is a trusted service, scoped by role only.
        return True
    if action in OWNER_ACTIONS or actor.role == "professor":
        return course.professor_id == actor.id
    return is_member


def authorize(actor: Actor, action: str, course: Optional[Course] = None, is_member: bool = False) -> Result[Actor]:
    if not is_allowed(actor, action, course, is_member):
        scope = f" in course '{course.id}'" if course else ""
        return Result.fail(AuthorizationError(
            f"Role '{actor.role}' is not permitted to perform '{action}'{scope}."
        ))
    return Result.ok(actor)
