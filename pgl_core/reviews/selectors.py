# pgl_core/reviews/selectors.py
"""
Read-only aggregates over every registered log table.
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db.models import Count
from rest_framework.exceptions import PermissionDenied

from pgl_core.iam.authz import Action, StudentResource, authorize
from pgl_core.iam.context import ActorContext
from pgl_core.iam.models import Role, UserProfile
from pgl_core.iam.services.assignments import supervised_student_ids
from pgl_core.logbook.models import EntryStatus, ResidentEvaluation
from pgl_core.logbook.registry import all_log_types
from pgl_core.logbook.selectors import scope_entries
from pgl_core.reviews.models import TrainingMentoringRecord

SEMESTERS = range(1, 7)
NOTIFY_STATUSES = (EntryStatus.SIGNED, EntryStatus.NEEDS_REVISION, EntryStatus.REJECTED)


def _resolve_student(actor: ActorContext, student_id: Optional[UUID]) -> UUID:
    """
    Students resolve to themselves; reviewers must name a student in scope.
    """
    if actor.is_student and student_id is None:
        student_id = actor.profile_id
    if student_id is None:
        raise ValidationError({"student_id": ["This field is required."]})
    authorize(Action.VIEW, actor, StudentResource(owner_id=student_id)).enforce()
    return student_id


def pending_counts(*, actor: ActorContext, student_id: Optional[UUID] = None) -> Dict[str, int]:
    """
    SUBMITTED entries awaiting review, per entity type plus "total".
    Faculty see their supervised students only; HOD sees everyone.
    """
    if student_id is not None:
        authorize(Action.AGGREGATE, actor, StudentResource(owner_id=student_id)).enforce()
    else:
        authorize(Action.AGGREGATE, actor).enforce()

    counts: Dict[str, int] = {}
    for lt in all_log_types():
        qs = scope_entries(lt.model.objects.filter(status=EntryStatus.SUBMITTED), actor)
        if student_id is not None:
            qs = qs.filter(owner_id=student_id)
        counts[lt.entity_type] = qs.count()

    counts["total"] = sum(counts.values())
    return counts


def _one_decimal(value: float) -> float:
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def _training_point(record: Optional[TrainingMentoringRecord]) -> Optional[Dict[str, Any]]:
    if record is None:
        return None
    return {
        "scores": {f: getattr(record, f) for f in TrainingMentoringRecord.SCORE_FIELDS},
        "overall_score": record.overall_score,
        "remarks": record.remarks,
    }


def evaluation_graph(*, actor: ActorContext, student_id: Optional[UUID] = None) -> Dict[str, Any]:
    student_id = _resolve_student(actor, student_id)

    rows = (
        ResidentEvaluation.objects.filter(owner_id=student_id, status=EntryStatus.SIGNED)
        .order_by("semester", "review_no", "signed_at")
        .values("semester", "review_no", "theory_marks", "practical_marks", *ResidentEvaluation.DOMAIN_SCORE_FIELDS)
    )

    training = {
        r.semester: r
        for r in TrainingMentoringRecord.objects.filter(owner_id=student_id, status=EntryStatus.SIGNED)
    }

    by_semester: Dict[int, List[dict]] = {s: [] for s in SEMESTERS}
    for row in rows:
        if row["semester"] in by_semester:
            by_semester[row["semester"]].append(row)

    semesters = []
    for semester, reviews in by_semester.items():
        scores = [
            review[f]
            for review in reviews
            for f in ResidentEvaluation.DOMAIN_SCORE_FIELDS
            if review[f] is not None
        ]
        last = reviews[-1] if reviews else None

        domains = {}
        for f in ResidentEvaluation.DOMAIN_SCORE_FIELDS:
            values = [r[f] for r in reviews if r[f] is not None]
            if values:
                domains[f] = _one_decimal(sum(values) / len(values))

        semesters.append(
            {
                "semester": semester,
                "reviews": len(reviews),
                "average": _one_decimal(sum(scores) / len(scores)) if scores else None,
                "domains": domains,
                "theory_marks": last["theory_marks"] if last else "",
                "practical_marks": last["practical_marks"] if last else "",
                "training": _training_point(training.get(semester)),
            }
        )

    return {"student_id": str(student_id), "semesters": semesters}


def student_progress(*, actor: ActorContext, student_id: UUID) -> Dict[str, Any]:
    authorize(Action.VIEW, actor, StudentResource(owner_id=student_id)).enforce()

    per_type = {}
    total = signed = 0
    for lt in all_log_types():
        qs = lt.model.objects.filter(owner_id=student_id)
        t = qs.count()
        s = qs.filter(status=EntryStatus.SIGNED).count()
        per_type[lt.entity_type] = {
            "label": lt.label,
            "total": t,
            "signed": s,
            "pending": qs.filter(status=EntryStatus.SUBMITTED).count(),
            "rate": _one_decimal(100.0 * s / t) if t else 0.0,
        }
        total += t
        signed += s

    return {
        "student_id": str(student_id),
        "total": total,
        "signed": signed,
        "rate": _one_decimal(100.0 * signed / total) if total else 0.0,
        "log_types": per_type,
    }


def notifications(*, actor: ActorContext, limit: int = 20) -> Dict[str, Any]:
    """
    Most recent review outcomes on the student's own entries.
    An item is unseen when it was reviewed after `notifications_seen_at`.
    """
    if not actor.is_student:
        raise PermissionDenied("Only students have review notifications.")
    seen_at = UserProfile.objects.filter(id=actor.profile_id).values_list("notifications_seen_at", flat=True).first()

    items = []
    for lt in all_log_types():
        qs = lt.model.objects.filter(
            owner_id=actor.profile_id, status__in=NOTIFY_STATUSES, reviewed_at__isnull=False
        ).order_by("-reviewed_at")
        for entry in qs[:limit]:
            items.append(
                {
                    "entity_type": lt.entity_type,
                    "entity_id": str(entry.pk),
                    "label": lt.label,
                    "sl_no": entry.sl_no,
                    "status": entry.status,
                    "remark": entry.faculty_remark,
                    "reviewed_at": entry.reviewed_at,
                }
            )

    items.sort(key=lambda i: i["reviewed_at"], reverse=True)
    items = items[:limit]
    unseen = sum(1 for i in items if seen_at is None or i["reviewed_at"] > seen_at)
    return {"unseen_count": unseen, "results": items}


def training_records(
    *,
    actor: ActorContext,
    student_id: Optional[UUID] = None,
    status: Optional[str] = None,
):
    """
    Students see their own records. Reviewers see one student when named,
    otherwise every record in their scope.
    """
    qs = TrainingMentoringRecord.objects.select_related("owner__user", "evaluated_by__user", "signed_by__user")

    if actor.is_student or student_id is not None:
        qs = qs.filter(owner_id=_resolve_student(actor, student_id))
    elif actor.is_faculty:
        qs = qs.filter(owner_id__in=supervised_student_ids(actor.profile_id))
    elif not actor.is_hod:
        qs = qs.none()

    if status:
        qs = qs.filter(status=status.strip().upper())
    return qs.order_by("owner__user__username", "semester")


def department_analytics(*, actor: ActorContext) -> Dict[str, Any]:
    """
    HOD overview: volume and sign-off rate per log type, per-student totals and
    faculty workload.
    """
    authorize(Action.MANAGE, actor).enforce()

    students = list(
        UserProfile.objects.filter(role=Role.STUDENT)
        .select_related("user", "batch")
        .order_by("-batch__name", "user__first_name", "user__username")
    )
    faculty = list(UserProfile.objects.filter(role=Role.FACULTY).select_related("user").order_by("user__first_name"))

    per_type: Dict[str, Dict[str, Any]] = {}
    per_student: Dict[UUID, Dict[str, int]] = {s.id: {"total_logs": 0, "signed_logs": 0} for s in students}
    total = signed = 0
    for lt in all_log_types():
        t = lt.model.objects.count()
        s = lt.model.objects.filter(status=EntryStatus.SIGNED).count()
        per_type[lt.entity_type] = {"label": lt.label, "total": t, "signed": s}
        total += t
        signed += s

        for row in lt.model.objects.values("owner_id", "status"):
            counts = per_student.get(row["owner_id"])
            if counts is None:
                continue
            counts["total_logs"] += 1
            if row["status"] == EntryStatus.SIGNED:
                counts["signed_logs"] += 1

    signed_evaluations = {
        row["owner_id"]: row["n"]
        for row in ResidentEvaluation.objects.filter(status=EntryStatus.SIGNED)
        .values("owner_id")
        .annotate(n=Count("id"))
    }

    return {
        "total_students": len(students),
        "total_faculty": len(faculty),
        "total_logs": total,
        "signed_logs": signed,
        "sign_off_rate": _one_decimal(100.0 * signed / total) if total else 0.0,
        "log_types": per_type,
        "students": [
            {
                "id": str(s.id),
                "name": s.display_name,
                "batch": s.batch.name if s.batch_id else None,
                "current_semester": s.current_semester,
                **per_student[s.id],
                "signed_evaluations": signed_evaluations.get(s.id, 0),
            }
            for s in students
        ],
        "faculty_workload": [
            {
                "id": str(f.id),
                "name": f.display_name,
                "assigned_students": len(supervised_student_ids(f.id)),
            }
            for f in faculty
        ],
    }
