# pgl_core/reviews/services.py
from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils.timezone import now
from rest_framework.exceptions import APIException, NotFound, PermissionDenied

from pgl_core.audit.services import AuditService, SignatureService
from pgl_core.common.api.exceptions import ConflictError
from pgl_core.iam.authz import Action, StudentResource, authorize
from pgl_core.iam.context import ActorContext
from pgl_core.iam.models import Role, UserProfile
from pgl_core.logbook.models import EntryStatus
from pgl_core.logbook.registry import all_log_types, get_by_entity_type
from pgl_core.reviews.models import AutoReviewSetting, DepartmentSetting, TrainingMentoringRecord

TRAINING_ENTITY_TYPE = "training_mentoring"

logger = logging.getLogger(__name__)


def is_auto_review_enabled(entity_type: str) -> bool:
    return AutoReviewSetting.objects.filter(entity_type=entity_type, enabled=True).exists()


def auto_review_settings() -> dict[str, bool]:
    """
    Every registered log type, missing rows reported as disabled.
    """
    stored = dict(AutoReviewSetting.objects.values_list("entity_type", "enabled"))
    return {lt.entity_type: stored.get(lt.entity_type, False) for lt in all_log_types()}


class AutoReviewService:
    @staticmethod
    @transaction.atomic
    def set_enabled(*, actor: ActorContext, entity_type: str, enabled: bool) -> AutoReviewSetting:
        authorize(Action.MANAGE, actor).enforce()

        try:
            get_by_entity_type(entity_type)
        except KeyError:
            raise ValidationError({"entity_type": [f"Unknown log type: {entity_type}"]})

        setting, _ = AutoReviewSetting.objects.update_or_create(
            entity_type=entity_type,
            defaults={"enabled": enabled, "updated_by_id": actor.profile_id},
        )
        logger.info("auto_review_toggled entity_type=%s enabled=%s by=%s", entity_type, enabled, actor.profile_id)
        return setting

    @staticmethod
    @transaction.atomic
    def ensure_rows() -> int:
        """
        Creates a disabled row for every log type that has none. Returns the number created.
        """
        created = 0
        for lt in all_log_types():
            _, was_created = AutoReviewSetting.objects.get_or_create(entity_type=lt.entity_type)
            created += int(was_created)
        return created


class NotificationService:
    @staticmethod
    @transaction.atomic
    def mark_seen(*, actor: ActorContext):
        """
        Resets the student's unseen notification count.
        """
        if not actor.is_student:
            raise PermissionDenied("Only students have review notifications.")

        seen_at = now()
        UserProfile.objects.filter(id=actor.profile_id).update(notifications_seen_at=seen_at)
        return seen_at


def is_faculty_evaluation_enabled() -> bool:
    return DepartmentSetting.objects.filter(key=DepartmentSetting.EVALUATION_GRAPH_FACULTY, enabled=True).exists()


class DepartmentSettingService:
    @staticmethod
    @transaction.atomic
    def set_faculty_evaluation(*, actor: ActorContext, enabled: bool) -> DepartmentSetting:
        """
        HOD: let faculty fill training & mentoring records (evaluation graph).
        """
        authorize(Action.MANAGE, actor).enforce()

        setting, _ = DepartmentSetting.objects.update_or_create(
            key=DepartmentSetting.EVALUATION_GRAPH_FACULTY,
            defaults={"enabled": enabled, "updated_by_id": actor.profile_id},
        )
        logger.info("faculty_evaluation_toggled enabled=%s by=%s", enabled, actor.profile_id)
        return setting


def _overall(values: dict[str, Any]) -> float | None:
    scores = [values[f] for f in TrainingMentoringRecord.SCORE_FIELDS if values.get(f) is not None]
    if not scores:
        return None
    return float(Decimal(str(sum(scores) / len(scores))).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


class TrainingRecordService:
    """
    Training & mentoring records (one per student per semester).

    - Faculty write only while the HOD has enabled faculty evaluation, and only
      for students they supervise. Their records stay SUBMITTED.
    - HOD records are SIGNED on save; the HOD also signs faculty records.
    - A SIGNED record is changed by the HOD only.
    """

    @staticmethod
    def get_record(record_id) -> TrainingMentoringRecord:
        try:
            record = TrainingMentoringRecord.objects.filter(pk=record_id).first()
        except (TypeError, ValueError, ValidationError):
            record = None
        if record is None:
            raise NotFound("Training record not found.")
        return record

    @staticmethod
    def _sign(record: TrainingMentoringRecord, *, signer_profile_id, remark: str = "") -> None:
        signed_at = now()
        TrainingMentoringRecord.objects.filter(pk=record.pk).update(
            status=EntryStatus.SIGNED,
            signed_by_id=signer_profile_id,
            signed_at=signed_at,
            updated_at=signed_at,
        )
        SignatureService.record(
            entity_type=TRAINING_ENTITY_TYPE,
            entity_id=record.pk,
            student_profile_id=record.owner_id,
            signer_profile_id=signer_profile_id,
            remark=remark,
            signed_at=signed_at,
        )

    @staticmethod
    @transaction.atomic
    def save(
        *,
        actor: ActorContext,
        student_id: UUID,
        semester: int,
        values: dict[str, Any],
    ) -> tuple[TrainingMentoringRecord, bool]:
        authorize(Action.REVIEW, actor, StudentResource(owner_id=student_id)).enforce()
        if actor.is_faculty and not is_faculty_evaluation_enabled():
            raise PermissionDenied("Faculty evaluation is disabled. Only the HOD can fill evaluations.")

        if not UserProfile.objects.filter(id=student_id, role=Role.STUDENT).exists():
            raise ValidationError({"student_id": ["Unknown student."]})
        if semester not in range(1, 7):
            raise ValidationError({"semester": ["Semester must be between 1 and 6."]})

        fields = TrainingMentoringRecord.SCORE_FIELDS + ("remarks",)
        data = {f: values.get(f) for f in TrainingMentoringRecord.SCORE_FIELDS}
        data["remarks"] = (values.get("remarks") or "").strip()

        record = (
            TrainingMentoringRecord.objects.select_for_update()
            .filter(owner_id=student_id, semester=semester)
            .first()
        )
        created = record is None
        if record is not None and record.status == EntryStatus.SIGNED and not actor.is_hod:
            raise ConflictError("Signed training records can only be changed by the HOD.")

        if created:
            record = TrainingMentoringRecord(owner_id=student_id, semester=semester, status=EntryStatus.SUBMITTED)
        for f in fields:
            setattr(record, f, data[f])
        record.overall_score = _overall(data)
        record.evaluated_by_id = actor.profile_id
        record.save()

        if actor.is_hod and record.status != EntryStatus.SIGNED:
            TrainingRecordService._sign(record, signer_profile_id=actor.profile_id)
            record.refresh_from_db()

        AuditService.log(
            event_code="training_record.created" if created else "training_record.updated",
            entity_type=TRAINING_ENTITY_TYPE,
            entity_id=record.pk,
            actor_profile_id=actor.profile_id,
            metadata={"owner_id": str(student_id), "semester": semester, "status": record.status},
        )
        logger.info(
            "training_record_saved id=%s owner=%s semester=%s status=%s by=%s",
            record.pk,
            student_id,
            semester,
            record.status,
            actor.profile_id,
        )
        return record, created

    @staticmethod
    @transaction.atomic
    def sign(*, actor: ActorContext, record_id, remark: str = "") -> TrainingMentoringRecord:
        authorize(Action.MANAGE, actor).enforce()
        record = TrainingRecordService.get_record(record_id)

        if record.status == EntryStatus.SIGNED:
            raise ConflictError("Training record is already signed.")

        TrainingRecordService._sign(record, signer_profile_id=actor.profile_id, remark=(remark or "").strip())
        record.refresh_from_db()

        AuditService.log(
            event_code="training_record.signed",
            entity_type=TRAINING_ENTITY_TYPE,
            entity_id=record.pk,
            actor_profile_id=actor.profile_id,
            metadata={"owner_id": str(record.owner_id), "semester": record.semester},
        )
        return record

    @staticmethod
    def bulk_sign(*, actor: ActorContext, record_ids, remark: str = "") -> dict[str, Any]:
        """
        Best effort: each record signs in its own transaction.
        """
        authorize(Action.MANAGE, actor).enforce()

        signed: list[str] = []
        failed: list[dict[str, str]] = []
        for record_id in record_ids:
            try:
                TrainingRecordService.sign(actor=actor, record_id=record_id, remark=remark)
            except ValidationError as exc:
                failed.append({"id": str(record_id), "error": "; ".join(exc.messages)})
            except APIException as exc:
                failed.append({"id": str(record_id), "error": str(exc.detail)})
            else:
                signed.append(str(record_id))

        logger.info("training_bulk_sign_done actor=%s signed=%d failed=%d", actor.profile_id, len(signed), len(failed))
        return {"signed_count": len(signed), "signed": signed, "failed": failed}

    @staticmethod
    @transaction.atomic
    def delete(*, actor: ActorContext, record_id) -> None:
        authorize(Action.MANAGE, actor).enforce()
        record = TrainingRecordService.get_record(record_id)

        AuditService.log(
            event_code="training_record.deleted",
            entity_type=TRAINING_ENTITY_TYPE,
            entity_id=record.pk,
            actor_profile_id=actor.profile_id,
            metadata={"owner_id": str(record.owner_id), "semester": record.semester, "status": record.status},
        )
        record.delete()
