# pgl_core/audit/tests/test_append_only.py
import uuid

import pytest

from pgl_core.audit.models import AppendOnlyError, AuditEvent, DigitalSignature
from pgl_core.audit.selectors import entity_timeline
from pgl_core.audit.services import AuditService, SignatureService
from pgl_core.common.api.exceptions import ConflictError
from pgl_core.common.events import publish

pytestmark = pytest.mark.django_db


def test_audit_rows_cannot_be_changed_or_removed(student):
    AuditService.log(
        event_code="entry.created",
        entity_type="procedure",
        entity_id=uuid.uuid4(),
        actor_profile_id=student.id,
    )
    event = AuditEvent.objects.get()

    event.event_code = "entry.signed"
    with pytest.raises(AppendOnlyError):
        event.save()
    with pytest.raises(AppendOnlyError):
        event.delete()
    with pytest.raises(AppendOnlyError):
        AuditEvent.objects.filter(pk=event.pk).update(event_code="x")
    with pytest.raises(AppendOnlyError):
        AuditEvent.objects.all().delete()

    assert AuditEvent.objects.get().event_code == "entry.created"


def test_one_signature_per_entry(student, faculty, hod):
    entry_id = uuid.uuid4()
    sig = SignatureService.record(
        entity_type="procedure",
        entity_id=entry_id,
        student_profile_id=student.id,
        signer_profile_id=faculty.id,
        remark="ok",
    )

    with pytest.raises(ConflictError):
        SignatureService.record(
            entity_type="procedure",
            entity_id=entry_id,
            student_profile_id=student.id,
            signer_profile_id=hod.id,
        )

    with pytest.raises(AppendOnlyError):
        sig.delete()

    assert DigitalSignature.objects.get().signer_id == faculty.id

    # same id under another log type is a different entry
    SignatureService.record(
        entity_type="imaging",
        entity_id=entry_id,
        student_profile_id=student.id,
        signer_profile_id=None,
        is_automatic=True,
    )
    assert DigitalSignature.objects.count() == 2


def test_transition_event_is_written_to_the_timeline(student, faculty):
    entry_id = uuid.uuid4()
    publish(
        "logbook.entry_transition",
        {
            "event_code": "entry.signed",
            "entity_type": "seminar",
            "entity_id": str(entry_id),
            "actor_profile_id": str(faculty.id),
            "owner_id": str(student.id),
            "from_status": "SUBMITTED",
            "to_status": "SIGNED",
            "meta": {"remark": "good"},
        },
    )

    (event,) = entity_timeline(entity_type="seminar", entity_id=entry_id)
    assert event.actor_id == faculty.id
    assert event.metadata == {
        "from_status": "SUBMITTED",
        "to_status": "SIGNED",
        "owner_id": str(student.id),
        "remark": "good",
    }
