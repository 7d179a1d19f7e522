# pgl_core/logbook/selectors.py
from __future__ import annotations

from typing import Optional
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db.models import QuerySet
from rest_framework.exceptions import NotFound

from pgl_core.iam.authz import Action, StudentResource, authorize
from pgl_core.iam.context import ActorContext
from pgl_core.iam.services.assignments import supervised_student_ids
from pgl_core.logbook.models import LogEntry, Thesis
from pgl_core.logbook.registry import LogType


def scope_entries(qs: QuerySet, actor: ActorContext) -> QuerySet:
    """
    Applies the read scope: students see their own entries, faculty the
    entries of students they supervise, HOD everything.
    """
    if actor.is_student:
        return qs.filter(owner_id=actor.profile_id)
    if actor.is_faculty:
        return qs.filter(owner_id__in=supervised_student_ids(actor.profile_id))
    if actor.is_hod:
        return qs
    return qs.none()


def list_entries(
    *,
    actor: ActorContext,
    log_type: LogType,
    status: Optional[str] = None,
    category: Optional[str] = None,
    student_id: Optional[UUID] = None,
    search: Optional[str] = None,
) -> QuerySet[LogEntry]:
    qs = scope_entries(log_type.model.objects.select_related("owner__user", "signed_by__user"), actor)

    if status:
        statuses = [s.strip().upper() for s in status.split(",") if s.strip()]
        qs = qs.filter(status__in=statuses)
    if category:
        qs = qs.filter(category=category)
    if student_id:
        qs = qs.filter(owner_id=student_id)
    if search and "complete_diagnosis" in log_type.fields:
        qs = qs.filter(complete_diagnosis__icontains=search)

    return qs.order_by("owner_id", "sl_no", "created_at")


def entries_for_student(*, log_type: LogType, student_id: UUID) -> QuerySet[LogEntry]:
    return log_type.model.objects.filter(owner_id=student_id).select_related("signed_by__user").order_by("sl_no")


def get_thesis(*, actor: ActorContext, student_id: Optional[UUID] = None) -> Thesis:
    """
    Students read their own thesis; reviewers name a student in their scope.
    """
    if actor.is_student and student_id is None:
        student_id = actor.profile_id
    if student_id is None:
        raise ValidationError({"student_id": ["This field is required."]})
    authorize(Action.VIEW, actor, StudentResource(owner_id=student_id)).enforce()

    thesis = Thesis.objects.filter(owner_id=student_id).prefetch_related("semester_records").first()
    if thesis is None:
        raise NotFound("No thesis recorded yet.")
    return thesis
