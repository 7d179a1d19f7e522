# pgl_core/iam/authz.py
"""
Single authorization point for the logbook.

    authorize(action, actor, resource) -> Decision

`actor` is the request's ActorContext (None when there is no session).
`resource` is anything exposing `owner_id` (a log entry, a StudentResource)
or None for role-level checks such as "may this role list entries at all".
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional
from uuid import UUID

from rest_framework.exceptions import NotAuthenticated, PermissionDenied

from pgl_core.iam.context import ActorContext
from pgl_core.iam.models import Role
from pgl_core.iam.services.assignments import is_supervisor_of


class Action(str, Enum):
    VIEW = "view"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    SUBMIT = "submit"
    REVIEW = "review"
    AGGREGATE = "aggregate"
    MANAGE = "manage"


ROLE_ACTIONS: dict[str, frozenset[Action]] = {
    Role.STUDENT.value: frozenset({Action.VIEW, Action.CREATE, Action.UPDATE, Action.DELETE, Action.SUBMIT}),
    Role.FACULTY.value: frozenset({Action.VIEW, Action.REVIEW, Action.AGGREGATE}),
    Role.HOD.value: frozenset({Action.VIEW, Action.REVIEW, Action.AGGREGATE, Action.MANAGE}),
}


@dataclass(frozen=True)
class StudentResource:
    """Student-level resource (progress, evaluation graph, exports)."""
    owner_id: UUID


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str = ""
    authenticated: bool = True

    def __bool__(self) -> bool:
        return self.allowed

    def enforce(self) -> None:
        if self.allowed:
            return
        if not self.authenticated:
            raise NotAuthenticated(self.reason or None)
        raise PermissionDenied(self.reason or None)


ALLOW = Decision(allowed=True)


def _deny(reason: str) -> Decision:
    return Decision(allowed=False, reason=reason)


def authorize(action: Action, actor: Optional[ActorContext], resource: Any = None) -> Decision:
    if actor is None:
        return Decision(allowed=False, reason="Authentication required.", authenticated=False)

    if action not in ROLE_ACTIONS.get(actor.role, frozenset()):
        return _deny(f"Role {actor.role} may not {action.value} here.")

    if resource is None or action == Action.MANAGE:
        return ALLOW

    owner_id = getattr(resource, "owner_id", None)
    if owner_id is None:
        return _deny("Resource has no owner.")

    if actor.is_hod:
        return ALLOW

    if actor.is_student:
        if owner_id == actor.profile_id:
            return ALLOW
        return _deny("Students may only act on their own records.")

    if actor.is_faculty:
        if is_supervisor_of(faculty_profile_id=actor.profile_id, student_profile_id=owner_id):
            return ALLOW
        return _deny("This student is not in your assigned batches.")

    return _deny("Unknown role.")
