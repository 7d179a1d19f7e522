# pgl_core/logbook/tests/test_entry_service.py

import datetime

import pytest
from django.core.exceptions import ValidationError
from rest_framework.exceptions import PermissionDenied

from pgl_core.audit.models import DigitalSignature
from pgl_core.common.api.exceptions import ConflictError
from pgl_core.logbook.constants import CASE_CATEGORY_MAP, CLINICAL_SKILLS
from pgl_core.logbook.log_types import (
    CASE_MANAGEMENT,
    CLINICAL_SKILLS_LOG,
    EVALUATIONS,
    IMAGING,
    JOURNAL_CLUBS,
    PROCEDURES,
    ROTATION_POSTINGS,
)
from pgl_core.logbook.models import EntryStatus, ProcedureLog
from pgl_core.logbook.services import EntryService
from pgl_core.reviews.models import AutoReviewSetting

pytestmark = pytest.mark.django_db


def _procedure(actor, **overrides):
    data = {
        "category": "CENTRAL_IV_PICC",
        "date": datetime.date(2025, 2, 1),
        "patient_info": "P / 40 / F / UHID-77",
        "complete_diagnosis": "DKA",
        "skill_level": "PS",
    }
    data.update(overrides)
    return EntryService.create(actor=actor, log_type=PROCEDURES, data=data)


def test_sl_no_is_per_student_and_log_type(student_actor, other_student_actor):
    a = _procedure(student_actor)
    b = _procedure(student_actor)
    c = _procedure(other_student_actor)
    j = EntryService.create(
        actor=student_actor,
        log_type=JOURNAL_CLUBS,
        data={"date": datetime.date(2025, 1, 3), "journal_article": "NEJM 2024; early TXA in trauma"},
    )

    assert (a.sl_no, b.sl_no, c.sl_no, j.sl_no) == (1, 2, 1, 1)


def test_procedure_cap_blocks_entries_beyond_target(student_actor):
    for _ in range(5):
        _procedure(student_actor)

    with pytest.raises(ValidationError) as exc:
        _procedure(student_actor)

    assert "category" in exc.value.message_dict
    assert ProcedureLog.objects.filter(owner_id=student_actor.profile_id, category="CENTRAL_IV_PICC").count() == 5


def test_imaging_cap_applies_per_category(student_actor):
    data = {"category": "XRAY_CT_MRI_BRAIN", "date": datetime.date(2025, 2, 1), "skill_level": "O"}
    for _ in range(10):
        EntryService.create(actor=student_actor, log_type=IMAGING, data=data)

    with pytest.raises(ValidationError):
        EntryService.create(actor=student_actor, log_type=IMAGING, data=data)

    # a different category is unaffected
    EntryService.create(actor=student_actor, log_type=IMAGING, data={**data, "category": "POCUS_TRAUMA"})


def test_faculty_and_hod_cannot_create(faculty_actor, hod_actor):
    with pytest.raises(PermissionDenied):
        _procedure(faculty_actor)
    with pytest.raises(PermissionDenied):
        _procedure(hod_actor)


def test_update_of_submitted_entry_is_conflict(student_actor):
    entry = _procedure(student_actor)
    EntryService.submit(actor=student_actor, log_type=PROCEDURES, entry_id=entry.pk)

    with pytest.raises(ConflictError):
        EntryService.update(actor=student_actor, log_type=PROCEDURES, entry_id=entry.pk, data={"complete_diagnosis": "x"})


def test_rotation_elective_flag_is_derived_from_posting(student_actor):
    core = EntryService.create(
        actor=student_actor,
        log_type=ROTATION_POSTINGS,
        data={"rotation_name": "Critical Care", "start_date": datetime.date(2025, 1, 1)},
    )
    elective = EntryService.create(
        actor=student_actor,
        log_type=ROTATION_POSTINGS,
        data={"rotation_name": "Neurology", "start_date": datetime.date(2025, 3, 1)},
    )

    assert core.is_elective is False
    assert elective.is_elective is True

    with pytest.raises(ValidationError) as exc:
        EntryService.create(
            actor=student_actor,
            log_type=ROTATION_POSTINGS,
            data={
                "rotation_name": "Medicine",
                "start_date": datetime.date(2025, 5, 1),
                "end_date": datetime.date(2025, 4, 1),
            },
        )
    assert "end_date" in exc.value.message_dict


def test_case_management_sub_category_must_belong_to_category(student_actor):
    with pytest.raises(ValidationError) as exc:
        EntryService.create(
            actor=student_actor,
            log_type=CASE_MANAGEMENT,
            data={"category": "RESUSCITATION", "sub_category": "Not a resuscitation case"},
        )
    assert "sub_category" in exc.value.message_dict


def test_initialize_case_management_rows_once(student_actor):
    expected = len(CASE_CATEGORY_MAP["RESUSCITATION"].sub_categories)

    created = EntryService.initialize(actor=student_actor, log_type=CASE_MANAGEMENT, params={"category": "RESUSCITATION"})
    assert len(created) == expected
    assert {e.status for e in created} == {EntryStatus.DRAFT}
    assert [e.sl_no for e in created] == list(range(1, expected + 1))

    again = EntryService.initialize(actor=student_actor, log_type=CASE_MANAGEMENT, params={"category": "RESUSCITATION"})
    assert again == []


def test_initialize_clinical_skills_per_population(student_actor):
    adult = EntryService.initialize(actor=student_actor, log_type=CLINICAL_SKILLS_LOG, params={"population": "ADULT"})
    pediatric = EntryService.initialize(
        actor=student_actor, log_type=CLINICAL_SKILLS_LOG, params={"population": "PEDIATRIC"}
    )

    assert len(adult) == len(pediatric) == len(CLINICAL_SKILLS)
    assert {e.category for e in pediatric} == {"PEDIATRIC"}


def test_initialize_is_rejected_for_types_without_templates(student_actor):
    with pytest.raises(ValidationError):
        EntryService.initialize(actor=student_actor, log_type=PROCEDURES, params={})


def test_evaluation_sign_requires_domain_scores(student_actor, faculty_actor):
    entry = EntryService.create(
        actor=student_actor,
        log_type=EVALUATIONS,
        data={"semester": 1, "review_no": 1, "description": "First semester review"},
        submit=True,
    )

    with pytest.raises(ValidationError) as exc:
        EntryService.sign(actor=faculty_actor, log_type=EVALUATIONS, entry_id=entry.pk)
    assert "knowledge_score" in exc.value.message_dict

    scores = {
        "knowledge_score": 4,
        "clinical_skill_score": 3,
        "procedural_skill_score": 4,
        "soft_skill_score": 5,
        "research_score": 2,
        "theory_marks": "68/100",
    }
    signed = EntryService.sign(actor=faculty_actor, log_type=EVALUATIONS, entry_id=entry.pk, review_data=scores)
    assert signed.status == EntryStatus.SIGNED
    assert signed.knowledge_score == 4
    assert signed.theory_marks == "68/100"


def test_evaluation_review_number_is_unique_per_semester(student_actor):
    data = {"semester": 2, "review_no": 1, "description": "x"}
    EntryService.create(actor=student_actor, log_type=EVALUATIONS, data=data)

    with pytest.raises(ValidationError) as exc:
        EntryService.create(actor=student_actor, log_type=EVALUATIONS, data=data)
    assert "review_no" in exc.value.message_dict


def test_auto_review_signs_on_submit_without_human_signer(student_actor):
    AutoReviewSetting.objects.create(entity_type=PROCEDURES.entity_type, enabled=True)

    entry = _procedure(student_actor)
    result = EntryService.submit(actor=student_actor, log_type=PROCEDURES, entry_id=entry.pk)

    assert result.status == EntryStatus.SIGNED
    assert result.auto_reviewed is True
    assert result.signed_by_id is None
    assert result.faculty_remark == "Auto-reviewed by system"

    sig = DigitalSignature.objects.get(entity_type="procedure", entity_id=entry.pk)
    assert sig.is_automatic is True
    assert sig.signer_id is None


def test_auto_review_never_signs_evaluations(student_actor):
    AutoReviewSetting.objects.create(entity_type=EVALUATIONS.entity_type, enabled=True)

    entry = EntryService.create(
        actor=student_actor,
        log_type=EVALUATIONS,
        data={"semester": 1, "review_no": 2, "description": "x"},
        submit=True,
    )
    assert entry.status == EntryStatus.SUBMITTED


def test_stale_review_loses_the_race(student_actor, faculty_actor):
    entry = _procedure(student_actor)
    EntryService.submit(actor=student_actor, log_type=PROCEDURES, entry_id=entry.pk)

    # Another reviewer finished first, after this caller loaded the entry.
    ProcedureLog.objects.filter(pk=entry.pk).update(status=EntryStatus.REJECTED)
    entry.refresh_from_db()
    entry.status = EntryStatus.SUBMITTED

    with pytest.raises(ConflictError):
        EntryService._apply_sign(
            log_type=PROCEDURES,
            entry=entry,
            signer_profile_id=faculty_actor.profile_id,
            remark="",
            review_values={},
            automatic=False,
        )
    assert not DigitalSignature.objects.filter(entity_id=entry.pk).exists()
