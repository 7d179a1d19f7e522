# pgl_core/common/permissions.py

from __future__ import annotations

from rest_framework.permissions import BasePermission, SAFE_METHODS

from pgl_core.iam.authz import Action, authorize
from pgl_core.iam.context import require_actor


class BaseRolePermission(BasePermission):
    """
    Coarse gate per view action, delegated to pgl_core.iam.authz.authorize
    with no resource (role-level check). The role comes from the verified
    session token.

    Record-level checks (ownership, faculty scope) run in the services with the
    concrete entry as the resource.
    """
    message = "You do not have permission to perform this action."

    # Override in subclasses: dict of view action -> authz Action
    actions_per_view_action: dict[str, Action] = {
        "list": Action.VIEW,
        "retrieve": Action.VIEW,
    }

    def _infer_action(self, request, view) -> str | None:
        action = getattr(view, "action", None)
        if action:
            return action

        kwargs = getattr(view, "kwargs", {}) or {}
        is_detail = "pk" in kwargs or "id" in kwargs

        method = request.method.upper()
        if method in ("GET", "HEAD", "OPTIONS"):
            return "retrieve" if is_detail else "list"
        if method == "POST":
            return "create"
        if method == "PUT":
            return "update"
        if method == "PATCH":
            return "partial_update"
        if method == "DELETE":
            return "destroy"
        return None

    def has_permission(self, request, view) -> bool:
        actor = require_actor(request)

        view_action = self._infer_action(request, view)
        action = self.actions_per_view_action.get(view_action)

        if action is None and request.method in SAFE_METHODS:
            kwargs = getattr(view, "kwargs", {}) or {}
            is_detail = "pk" in kwargs or "id" in kwargs
            action = self.actions_per_view_action.get("retrieve" if is_detail else "list")

        # Unknown action => deny by default
        if action is None:
            return False

        authorize(action, actor).enforce()
        return True


class LogEntryPermission(BaseRolePermission):
    """Log CRUD is student-authored; review actions belong to faculty/HOD."""
    actions_per_view_action = {
        "list": Action.VIEW,
        "retrieve": Action.VIEW,
        "export": Action.VIEW,
        "history": Action.VIEW,
        "create": Action.CREATE,
        "initialize": Action.CREATE,
        "update": Action.UPDATE,
        "partial_update": Action.UPDATE,
        "destroy": Action.DELETE,
        "submit": Action.SUBMIT,
        "sign": Action.REVIEW,
        "reject": Action.REVIEW,
        "request_revision": Action.REVIEW,
        "bulk_sign": Action.REVIEW,
    }


class SignOffPermission(BaseRolePermission):
    actions_per_view_action = {
        "create": Action.REVIEW,
        "bulk": Action.REVIEW,
        "list": Action.VIEW,
    }


class ReviewerPermission(BaseRolePermission):
    """Aggregate review views (pending counts)."""
    actions_per_view_action = {
        "list": Action.AGGREGATE,
        "retrieve": Action.AGGREGATE,
    }


class DepartmentAdminPermission(BaseRolePermission):
    """Batches, assignments, profiles and department settings: read for reviewers, write for HOD."""
    actions_per_view_action = {
        "list": Action.AGGREGATE,
        "retrieve": Action.AGGREGATE,
        "create": Action.MANAGE,
        "update": Action.MANAGE,
        "partial_update": Action.MANAGE,
        "destroy": Action.MANAGE,
        "assign_faculty": Action.MANAGE,
        "add_students": Action.MANAGE,
    }


class TrainingRecordPermission(BaseRolePermission):
    """Read for every role (scoped in selectors); write for reviewers; sign/delete for HOD."""
    actions_per_view_action = {
        "list": Action.VIEW,
        "create": Action.REVIEW,
        "sign": Action.MANAGE,
        "bulk_sign": Action.MANAGE,
        "destroy": Action.MANAGE,
    }
