# pgl_core/logbook/services.py

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Max
from django.utils.timezone import now
from rest_framework.exceptions import APIException, NotFound

from pgl_core.audit.services import AuditService, SignatureService
from pgl_core.common.api.exceptions import ConflictError
from pgl_core.common.events import publish
from pgl_core.iam.authz import Action, StudentResource, authorize
from pgl_core.iam.context import ActorContext
from pgl_core.logbook.models import (
    EDITABLE_STATUSES,
    SUBMITTABLE_STATUSES,
    EntryStatus,
    LogEntry,
    Thesis,
    ThesisSemesterRecord,
)
from pgl_core.logbook.registry import LogType, get_by_entity_type
from pgl_core.reviews.services import is_auto_review_enabled

logger = logging.getLogger(__name__)

REQUIRED = "This field is required."
SIGNED_MSG = "Cannot edit a signed entry."
STALE_MSG = "Entry was changed by someone else; reload and try again."


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class EntryService:
    """
    Write model for every log type.

    Notes:
    - Authorization runs first, against the concrete entry, before any write.
    - Each status change is one conditional UPDATE guarded by the expected
      status. Zero rows means another writer got there first -> ConflictError.
    - Transitions are published as "logbook.entry_transition"; the audit app
      writes the timeline inside the same transaction.
    """

    # -------------------------
    # Internal helpers
    # -------------------------
    @staticmethod
    def get_entry(log_type: LogType, entry_id: UUID) -> LogEntry:
        try:
            entry = log_type.model.objects.select_related("owner").filter(pk=entry_id).first()
        except (TypeError, ValueError, ValidationError):
            # not a UUID, so no such entry
            entry = None
        if entry is None:
            raise NotFound(f"{log_type.label} entry not found.")
        return entry

    @staticmethod
    def get_for(*, actor: ActorContext, log_type: LogType, entry_id: UUID, action: Action = Action.VIEW) -> LogEntry:
        entry = EntryService.get_entry(log_type, entry_id)
        authorize(action, actor, entry).enforce()
        return entry

    @staticmethod
    def _next_sl_no(log_type: LogType, owner_id: UUID) -> int:
        current = log_type.model.objects.filter(owner_id=owner_id).aggregate(m=Max("sl_no"))["m"]
        return (current or 0) + 1

    @staticmethod
    def _check_cap(log_type: LogType, *, owner_id: UUID, category: str, exclude_id: UUID | None = None) -> None:
        cap = log_type.cap_for(category)
        if cap is None:
            return
        qs = log_type.model.objects.filter(owner_id=owner_id, category=category)
        if exclude_id is not None:
            qs = qs.exclude(pk=exclude_id)
        if qs.count() >= cap:
            raise ValidationError({"category": [f"Maximum of {cap} entries reached for this category."]})

    @staticmethod
    def _guarded_update(log_type: LogType, entry: LogEntry, *, expected: Iterable[str], **values) -> None:
        values.setdefault("updated_at", now())
        rows = log_type.model.objects.filter(pk=entry.pk, status__in=list(expected)).update(**values)
        if rows == 0:
            raise ConflictError(STALE_MSG)

    @staticmethod
    def _record_transition(
        *,
        log_type: LogType,
        entry: LogEntry,
        event_code: str,
        actor_profile_id: UUID | None,
        from_status: str | None,
        to_status: str | None,
        meta: Optional[dict] = None,
    ) -> None:
        logger.info(
            "entry_transition event=%s type=%s id=%s from=%s to=%s actor=%s",
            event_code,
            log_type.entity_type,
            entry.pk,
            from_status,
            to_status,
            actor_profile_id,
        )
        publish(
            "logbook.entry_transition",
            {
                "event_code": event_code,
                "entity_type": log_type.entity_type,
                "entity_id": str(entry.pk),
                "owner_id": str(entry.owner_id),
                "actor_profile_id": str(actor_profile_id) if actor_profile_id else None,
                "from_status": from_status,
                "to_status": to_status,
                "meta": meta or {},
            },
        )

    # -------------------------
    # Student: create / edit / delete
    # -------------------------
    @staticmethod
    @transaction.atomic
    def create(
        *,
        actor: ActorContext,
        log_type: LogType,
        data: Dict[str, Any],
        submit: bool = False,
    ) -> LogEntry:
        authorize(Action.CREATE, actor, StudentResource(owner_id=actor.profile_id)).enforce()

        values = {f: data[f] for f in log_type.fields if f in data}
        errors = log_type.run_clean(values, owner_id=actor.profile_id, instance=None)
        if errors:
            raise ValidationError(errors)

        EntryService._check_cap(log_type, owner_id=actor.profile_id, category=values.get("category") or "")

        entry = log_type.model.objects.create(
            owner_id=actor.profile_id,
            sl_no=EntryService._next_sl_no(log_type, actor.profile_id),
            status=EntryStatus.DRAFT,
            **values,
        )
        EntryService._record_transition(
            log_type=log_type,
            entry=entry,
            event_code="entry.created",
            actor_profile_id=actor.profile_id,
            from_status=None,
            to_status=EntryStatus.DRAFT,
        )

        if submit:
            return EntryService.submit(actor=actor, log_type=log_type, entry_id=entry.pk)
        return entry

    @staticmethod
    @transaction.atomic
    def update(*, actor: ActorContext, log_type: LogType, entry_id: UUID, data: Dict[str, Any]) -> LogEntry:
        """
        Owner edit while DRAFT or NEEDS_REVISION. The status is left as is;
        a NEEDS_REVISION entry goes back to review through submit().
        """
        entry = EntryService.get_for(actor=actor, log_type=log_type, entry_id=entry_id, action=Action.UPDATE)

        if entry.status == EntryStatus.SIGNED:
            raise ConflictError(SIGNED_MSG)
        if entry.status not in EDITABLE_STATUSES:
            raise ConflictError(f"Cannot edit an entry in {entry.status} status.")

        changes = {f: data[f] for f in log_type.fields if f in data}
        merged = {f: getattr(entry, f) for f in log_type.fields}
        merged.update(changes)

        errors = log_type.run_clean(merged, owner_id=entry.owner_id, instance=entry)
        if errors:
            raise ValidationError(errors)

        category = merged.get("category") or ""
        if "category" in changes and category != entry.category:
            EntryService._check_cap(log_type, owner_id=entry.owner_id, category=category, exclude_id=entry.pk)

        EntryService._guarded_update(log_type, entry, expected=EDITABLE_STATUSES, **merged)
        entry.refresh_from_db()

        EntryService._record_transition(
            log_type=log_type,
            entry=entry,
            event_code="entry.updated",
            actor_profile_id=actor.profile_id,
            from_status=entry.status,
            to_status=entry.status,
            meta={"fields": sorted(changes)},
        )
        return entry

    @staticmethod
    @transaction.atomic
    def delete(*, actor: ActorContext, log_type: LogType, entry_id: UUID) -> None:
        entry = EntryService.get_for(actor=actor, log_type=log_type, entry_id=entry_id, action=Action.DELETE)

        if entry.status != EntryStatus.DRAFT:
            raise ConflictError("Only draft entries can be deleted.")

        deleted, _ = log_type.model.objects.filter(pk=entry.pk, status=EntryStatus.DRAFT).delete()
        if deleted == 0:
            raise ConflictError("Only draft entries can be deleted.")

        EntryService._record_transition(
            log_type=log_type,
            entry=entry,
            event_code="entry.deleted",
            actor_profile_id=actor.profile_id,
            from_status=EntryStatus.DRAFT,
            to_status=None,
        )

    @staticmethod
    @transaction.atomic
    def submit(*, actor: ActorContext, log_type: LogType, entry_id: UUID) -> LogEntry:
        entry = EntryService.get_for(actor=actor, log_type=log_type, entry_id=entry_id, action=Action.SUBMIT)

        if entry.status == EntryStatus.REJECTED:
            raise ConflictError("Rejected entries cannot be resubmitted.")
        if entry.status not in SUBMITTABLE_STATUSES:
            raise ConflictError(f"Cannot submit an entry in {entry.status} status.")

        missing = {f: [REQUIRED] for f in log_type.required_on_submit if _is_blank(getattr(entry, f))}
        if missing:
            raise ValidationError(missing)

        from_status = entry.status
        EntryService._guarded_update(
            log_type,
            entry,
            expected=SUBMITTABLE_STATUSES,
            status=EntryStatus.SUBMITTED,
            submitted_at=now(),
        )
        entry.refresh_from_db()

        EntryService._record_transition(
            log_type=log_type,
            entry=entry,
            event_code="entry.submitted",
            actor_profile_id=actor.profile_id,
            from_status=from_status,
            to_status=EntryStatus.SUBMITTED,
        )

        # Evaluations need reviewer scores, so they are never auto-signed.
        if is_auto_review_enabled(log_type.entity_type) and not log_type.required_on_sign:
            return EntryService._apply_sign(
                log_type=log_type,
                entry=entry,
                signer_profile_id=None,
                remark=settings.LOGBOOK_AUTO_REVIEW_REMARK,
                review_values={},
                automatic=True,
            )
        return entry

    # -------------------------
    # Reviewer: sign / reject / request revision
    # -------------------------
    @staticmethod
    def _apply_sign(
        *,
        log_type: LogType,
        entry: LogEntry,
        signer_profile_id: UUID | None,
        remark: str,
        review_values: Dict[str, Any],
        automatic: bool,
    ) -> LogEntry:
        signed_at = now()
        EntryService._guarded_update(
            log_type,
            entry,
            expected=[EntryStatus.SUBMITTED],
            status=EntryStatus.SIGNED,
            signed_by_id=signer_profile_id,
            signed_at=signed_at,
            reviewed_at=signed_at,
            faculty_remark=remark or "",
            auto_reviewed=automatic,
            **review_values,
        )

        SignatureService.record(
            entity_type=log_type.entity_type,
            entity_id=entry.pk,
            student_profile_id=entry.owner_id,
            signer_profile_id=signer_profile_id,
            remark=remark,
            is_automatic=automatic,
            signed_at=signed_at,
        )
        entry.refresh_from_db()

        EntryService._record_transition(
            log_type=log_type,
            entry=entry,
            event_code="entry.auto_signed" if automatic else "entry.signed",
            actor_profile_id=signer_profile_id,
            from_status=EntryStatus.SUBMITTED,
            to_status=EntryStatus.SIGNED,
        )
        return entry

    @staticmethod
    @transaction.atomic
    def sign(
        *,
        actor: ActorContext,
        log_type: LogType,
        entry_id: UUID,
        remark: str = "",
        review_data: Optional[Dict[str, Any]] = None,
    ) -> LogEntry:
        entry = EntryService.get_for(actor=actor, log_type=log_type, entry_id=entry_id, action=Action.REVIEW)

        if entry.status != EntryStatus.SUBMITTED:
            raise ConflictError(f"Only submitted entries can be signed (current status: {entry.status}).")

        review_data = review_data or {}
        review_values = {f: review_data[f] for f in log_type.review_fields if f in review_data}
        missing = {f: [REQUIRED] for f in log_type.required_on_sign if _is_blank(review_values.get(f))}
        if missing:
            raise ValidationError(missing)

        return EntryService._apply_sign(
            log_type=log_type,
            entry=entry,
            signer_profile_id=actor.profile_id,
            remark=(remark or "").strip(),
            review_values=review_values,
            automatic=False,
        )

    @staticmethod
    @transaction.atomic
    def reject(
        *,
        actor: ActorContext,
        log_type: LogType,
        entry_id: UUID,
        remark: str,
        needs_revision: bool = False,
    ) -> LogEntry:
        """
        SUBMITTED -> REJECTED (final) or NEEDS_REVISION (back to the student).
        """
        remark = (remark or "").strip()
        if not remark:
            raise ValidationError({"remark": ["A remark is required when rejecting or requesting revision."]})

        entry = EntryService.get_for(actor=actor, log_type=log_type, entry_id=entry_id, action=Action.REVIEW)

        if entry.status != EntryStatus.SUBMITTED:
            raise ConflictError(f"Only submitted entries can be reviewed (current status: {entry.status}).")

        target = EntryStatus.NEEDS_REVISION if needs_revision else EntryStatus.REJECTED
        EntryService._guarded_update(
            log_type,
            entry,
            expected=[EntryStatus.SUBMITTED],
            status=target,
            faculty_remark=remark,
            reviewed_at=now(),
        )
        entry.refresh_from_db()

        EntryService._record_transition(
            log_type=log_type,
            entry=entry,
            event_code="entry.revision_requested" if needs_revision else "entry.rejected",
            actor_profile_id=actor.profile_id,
            from_status=EntryStatus.SUBMITTED,
            to_status=target,
            meta={"remark": remark},
        )
        return entry

    @staticmethod
    def request_revision(*, actor: ActorContext, log_type: LogType, entry_id: UUID, remark: str) -> LogEntry:
        return EntryService.reject(actor=actor, log_type=log_type, entry_id=entry_id, remark=remark, needs_revision=True)

    # -------------------------
    # Bulk sign (best effort)
    # -------------------------
    @staticmethod
    def _failure_message(exc: Exception) -> str:
        if isinstance(exc, ValidationError):
            return "; ".join(exc.messages)
        detail = getattr(exc, "detail", None)
        return str(detail) if detail is not None else str(exc)

    @staticmethod
    def bulk_sign_items(*, actor: ActorContext, items: List[Dict[str, Any]], remark: str = "") -> Dict[str, Any]:
        """
        items: [{"entity_type": ..., "id": ...}]. Each item is signed in its
        own transaction; a failure is reported and never undoes the others.
        """
        signed: List[Dict[str, str]] = []
        failed: List[Dict[str, str]] = []

        for item in items:
            entity_type = item["entity_type"]
            entry_id = item["id"]
            try:
                log_type = get_by_entity_type(entity_type)
                EntryService.sign(actor=actor, log_type=log_type, entry_id=entry_id, remark=remark)
            except KeyError:
                failed.append({"entity_type": entity_type, "id": str(entry_id), "error": "Unknown log type."})
            except (ValidationError, APIException) as exc:
                logger.warning(
                    "bulk_sign_failed type=%s id=%s reason=%s",
                    entity_type,
                    entry_id,
                    exc.__class__.__name__,
                )
                failed.append(
                    {"entity_type": entity_type, "id": str(entry_id), "error": EntryService._failure_message(exc)}
                )
            else:
                signed.append({"entity_type": entity_type, "id": str(entry_id)})

        logger.info("bulk_sign_done actor=%s signed=%d failed=%d", actor.profile_id, len(signed), len(failed))
        return {"signed_count": len(signed), "signed": signed, "failed": failed}

    @staticmethod
    def bulk_sign(*, actor: ActorContext, log_type: LogType, entry_ids: List[UUID], remark: str = "") -> Dict[str, Any]:
        return EntryService.bulk_sign_items(
            actor=actor,
            items=[{"entity_type": log_type.entity_type, "id": entry_id} for entry_id in entry_ids],
            remark=remark,
        )

    # -------------------------
    # Row initialisation
    # -------------------------
    @staticmethod
    @transaction.atomic
    def initialize(*, actor: ActorContext, log_type: LogType, params: Dict[str, Any]) -> List[LogEntry]:
        """
        Pre-creates empty DRAFT rows (one per case sub-type or per clinical
        skill). Rows that already exist for the student are skipped.
        """
        authorize(Action.CREATE, actor, StudentResource(owner_id=actor.profile_id)).enforce()

        if not log_type.supports_initialize:
            raise ValidationError({"detail": f"{log_type.label} entries cannot be initialised."})

        created: List[LogEntry] = []
        next_sl_no = EntryService._next_sl_no(log_type, actor.profile_id)

        for row in log_type.initial_rows(params):
            if log_type.model.objects.filter(owner_id=actor.profile_id, **row).exists():
                continue
            entry = log_type.model.objects.create(
                owner_id=actor.profile_id,
                sl_no=next_sl_no,
                status=EntryStatus.DRAFT,
                **row,
            )
            next_sl_no += 1
            created.append(entry)
            EntryService._record_transition(
                log_type=log_type,
                entry=entry,
                event_code="entry.created",
                actor_profile_id=actor.profile_id,
                from_status=None,
                to_status=EntryStatus.DRAFT,
                meta={"initialised": True},
            )

        return created


class ThesisService:
    """
    Thesis topic, chief guide and per-semester research committee. Owned and
    edited by the student; there is no sign-off.
    """

    @staticmethod
    @transaction.atomic
    def save(*, actor: ActorContext, topic: str, chief_guide: str = "") -> Thesis:
        authorize(Action.UPDATE, actor, StudentResource(owner_id=actor.profile_id)).enforce()

        topic = (topic or "").strip()
        if not topic:
            raise ValidationError({"topic": ["Thesis topic is required."]})

        thesis, created = Thesis.objects.update_or_create(
            owner_id=actor.profile_id,
            defaults={"topic": topic, "chief_guide": (chief_guide or "").strip()},
        )
        AuditService.log(
            event_code="thesis.created" if created else "thesis.updated",
            entity_type="thesis",
            entity_id=thesis.pk,
            actor_profile_id=actor.profile_id,
        )
        return thesis

    @staticmethod
    @transaction.atomic
    def save_semester(*, actor: ActorContext, semester: int, values: Dict[str, Any]) -> ThesisSemesterRecord:
        authorize(Action.UPDATE, actor, StudentResource(owner_id=actor.profile_id)).enforce()

        if semester not in range(1, 7):
            raise ValidationError({"semester": ["Semester must be between 1 and 6."]})

        thesis = Thesis.objects.filter(owner_id=actor.profile_id).first()
        if thesis is None:
            raise NotFound("Record the thesis topic first.")

        fields = ("sr_jr_member", "sr_member", "faculty_member")
        record, _ = ThesisSemesterRecord.objects.update_or_create(
            thesis=thesis,
            semester=semester,
            defaults={f: (values.get(f) or "").strip() for f in fields if f in values},
        )
        AuditService.log(
            event_code="thesis.semester_saved",
            entity_type="thesis",
            entity_id=thesis.pk,
            actor_profile_id=actor.profile_id,
            metadata={"semester": semester},
        )
        return record
