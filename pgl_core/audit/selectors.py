# pgl_core/audit/selectors.py
from __future__ import annotations

from uuid import UUID

from django.db.models import Q, QuerySet

from pgl_core.audit.models import AuditEvent, DigitalSignature
from pgl_core.iam.context import ActorContext
from pgl_core.iam.services.assignments import supervised_student_ids


def list_signatures(
    *,
    actor: ActorContext,
    entity_type: str | None = None,
    student_id: UUID | None = None,
) -> QuerySet[DigitalSignature]:
    qs = DigitalSignature.objects.select_related("signer__user", "student__user")

    if actor.is_student:
        qs = qs.filter(student_id=actor.profile_id)
    elif actor.is_faculty:
        qs = qs.filter(Q(student_id__in=supervised_student_ids(actor.profile_id)) | Q(signer_id=actor.profile_id))

    if entity_type:
        qs = qs.filter(entity_type=entity_type)
    if student_id:
        qs = qs.filter(student_id=student_id)

    return qs.order_by("-signed_at")


def entity_timeline(*, entity_type: str, entity_id: UUID) -> QuerySet[AuditEvent]:
    return AuditEvent.objects.filter(entity_type=entity_type, entity_id=entity_id).order_by("occurred_at", "id")
