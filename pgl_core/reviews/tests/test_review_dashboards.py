# pgl_core/reviews/tests/test_review_dashboards.py

import datetime

import pytest
from django.core.management import call_command
from django.utils import timezone

from pgl_core.iam.models import UserProfile
from pgl_core.logbook.log_types import EVALUATIONS, JOURNAL_CLUBS, PROCEDURES
from pgl_core.logbook.registry import all_log_types
from pgl_core.logbook.services import EntryService
from pgl_core.reviews.models import AutoReviewSetting

pytestmark = pytest.mark.django_db


def _journal_club(actor, *, submit=True):
    return EntryService.create(
        actor=actor,
        log_type=JOURNAL_CLUBS,
        data={"date": datetime.date(2025, 4, 2), "journal_article": "BMJ 2022; HFNC in ED"},
        submit=submit,
    )


def _procedure(actor):
    return EntryService.create(
        actor=actor,
        log_type=PROCEDURES,
        data={
            "category": "AIRWAY_ADULT",
            "date": datetime.date(2025, 4, 3),
            "patient_info": "K / 33 / M / UHID-9",
            "complete_diagnosis": "Burns with inhalation injury",
            "skill_level": "A",
        },
        submit=True,
    )


def _evaluation(student_actor, reviewer_actor, *, review_no, scores, theory_marks=""):
    entry = EntryService.create(
        actor=student_actor,
        log_type=EVALUATIONS,
        data={"semester": 1, "review_no": review_no, "description": f"Review {review_no}"},
        submit=True,
    )
    review = dict(
        zip(
            ("knowledge_score", "clinical_skill_score", "procedural_skill_score", "soft_skill_score", "research_score"),
            scores,
        )
    )
    review["theory_marks"] = theory_marks
    return EntryService.sign(actor=reviewer_actor, log_type=EVALUATIONS, entry_id=entry.pk, review_data=review)


# ----------------------------
# Pending counts
# ----------------------------

def test_pending_counts_follow_reviewer_scope(student_actor, other_student_actor, faculty_client, hod_client):
    _journal_club(student_actor)
    _procedure(student_actor)
    _journal_club(student_actor, submit=False)
    _journal_club(other_student_actor)

    res = faculty_client.get("/api/v1/reviews/pending-counts/")
    assert res.status_code == 200, res.data
    assert res.data["journal_club"] == 1
    assert res.data["procedure"] == 1
    assert res.data["total"] == 2
    assert set(res.data) == {lt.entity_type for lt in all_log_types()} | {"total"}

    res = hod_client.get("/api/v1/reviews/pending-counts/")
    assert res.data["journal_club"] == 2
    assert res.data["total"] == 3


def test_pending_counts_for_one_student(student, other_student, student_actor, faculty_client):
    _journal_club(student_actor)

    res = faculty_client.get("/api/v1/reviews/pending-counts/", {"student_id": str(student.id)})
    assert res.status_code == 200, res.data
    assert res.data["total"] == 1

    res = faculty_client.get("/api/v1/reviews/pending-counts/", {"student_id": str(other_student.id)})
    assert res.status_code == 403


def test_students_have_no_pending_counts(student_client):
    assert student_client.get("/api/v1/reviews/pending-counts/").status_code == 403


# ----------------------------
# Evaluation graph / progress
# ----------------------------

def test_evaluation_graph_averages_signed_reviews(student, student_actor, faculty_actor, student_client, faculty_client):
    _evaluation(student_actor, faculty_actor, review_no=1, scores=(4, 3, 4, 5, 2), theory_marks="61/100")
    _evaluation(student_actor, faculty_actor, review_no=2, scores=(5, 4, 4, 4, 3), theory_marks="72/100")
    # submitted but unsigned reviews are not plotted
    EntryService.create(
        actor=student_actor,
        log_type=EVALUATIONS,
        data={"semester": 1, "review_no": 3, "description": "pending"},
        submit=True,
    )

    res = student_client.get("/api/v1/reviews/evaluation-graph/")
    assert res.status_code == 200, res.data
    assert res.data["student_id"] == str(student.id)
    assert [s["semester"] for s in res.data["semesters"]] == [1, 2, 3, 4, 5, 6]

    first = res.data["semesters"][0]
    assert first["reviews"] == 2
    assert first["average"] == 3.8
    assert first["domains"]["knowledge_score"] == 4.5
    assert first["domains"]["research_score"] == 2.5
    assert first["theory_marks"] == "72/100"

    empty = res.data["semesters"][1]
    assert empty == {
        "semester": 2,
        "reviews": 0,
        "average": None,
        "domains": {},
        "theory_marks": "",
        "practical_marks": "",
        "training": None,
    }

    res = faculty_client.get("/api/v1/reviews/evaluation-graph/", {"student_id": str(student.id)})
    assert res.status_code == 200
    assert res.data["semesters"][0]["average"] == 3.8


def test_reviewer_must_name_a_student_for_the_graph(faculty_client, other_student):
    res = faculty_client.get("/api/v1/reviews/evaluation-graph/")
    assert res.status_code == 400, res.data
    assert "student_id" in res.data["error"]["details"]

    res = faculty_client.get("/api/v1/reviews/evaluation-graph/", {"student_id": str(other_student.id)})
    assert res.status_code == 403


def test_student_progress_rates(student, other_student, student_actor, faculty_actor, faculty_client, student_client):
    signed = _journal_club(student_actor)
    EntryService.sign(actor=faculty_actor, log_type=JOURNAL_CLUBS, entry_id=signed.pk)
    _journal_club(student_actor)
    _journal_club(student_actor, submit=False)

    res = faculty_client.get(f"/api/v1/reviews/students/{student.id}/progress/")
    assert res.status_code == 200, res.data

    jc = res.data["log_types"]["journal_club"]
    assert (jc["total"], jc["signed"], jc["pending"]) == (3, 1, 1)
    assert jc["rate"] == 33.3
    assert res.data["log_types"]["procedure"]["rate"] == 0.0
    assert (res.data["total"], res.data["signed"], res.data["rate"]) == (3, 1, 33.3)

    assert student_client.get(f"/api/v1/reviews/students/{other_student.id}/progress/").status_code == 403


# ----------------------------
# Notifications
# ----------------------------

def test_notifications_list_review_outcomes(student, student_actor, faculty_actor, student_client):
    a = _journal_club(student_actor)
    b = _procedure(student_actor)
    _journal_club(student_actor)  # still SUBMITTED, not a notification

    EntryService.sign(actor=faculty_actor, log_type=JOURNAL_CLUBS, entry_id=a.pk, remark="Good appraisal")
    EntryService.request_revision(actor=faculty_actor, log_type=PROCEDURES, entry_id=b.pk, remark="Add UHID")

    res = student_client.get("/api/v1/reviews/notifications/")
    assert res.status_code == 200, res.data
    assert res.data["unseen_count"] == 2
    by_id = {item["entity_id"]: item for item in res.data["results"]}
    assert by_id[str(a.pk)]["status"] == "SIGNED"
    assert by_id[str(a.pk)]["remark"] == "Good appraisal"
    assert by_id[str(b.pk)]["status"] == "NEEDS_REVISION"
    assert by_id[str(b.pk)]["entity_type"] == "procedure"

    res = student_client.post("/api/v1/reviews/notifications/seen/", {}, format="json")
    assert res.status_code == 200, res.data
    assert "seen_at" in res.data

    res = student_client.get("/api/v1/reviews/notifications/")
    assert res.data["unseen_count"] == 0
    assert len(res.data["results"]) == 2

    UserProfile.objects.filter(pk=student.pk).update(
        notifications_seen_at=timezone.now() - datetime.timedelta(days=1)
    )
    assert student_client.get("/api/v1/reviews/notifications/").data["unseen_count"] == 2


def test_owner_edits_do_not_renotify(student_actor, faculty_actor, student_client):
    entry = _procedure(student_actor)
    EntryService.request_revision(actor=faculty_actor, log_type=PROCEDURES, entry_id=entry.pk, remark="Add UHID")
    student_client.post("/api/v1/reviews/notifications/seen/", {}, format="json")

    res = student_client.patch(
        f"/api/v1/logs/procedures/{entry.pk}/", {"patient_info": "K / 33 / M / UHID-10"}, format="json"
    )
    assert res.status_code == 200, res.data
    assert res.data["status"] == "NEEDS_REVISION"

    res = student_client.get("/api/v1/reviews/notifications/")
    assert res.data["unseen_count"] == 0
    (item,) = res.data["results"]
    assert item["status"] == "NEEDS_REVISION"

    # a fresh review outcome is unseen again
    EntryService.submit(actor=student_actor, log_type=PROCEDURES, entry_id=entry.pk)
    EntryService.sign(actor=faculty_actor, log_type=PROCEDURES, entry_id=entry.pk)
    assert student_client.get("/api/v1/reviews/notifications/").data["unseen_count"] == 1


def test_reviewers_have_no_notifications(faculty_client):
    assert faculty_client.get("/api/v1/reviews/notifications/").status_code == 403
    assert faculty_client.post("/api/v1/reviews/notifications/seen/", {}, format="json").status_code == 403


# ----------------------------
# Auto-review settings
# ----------------------------

def test_hod_toggles_auto_review(hod_client, faculty_client, student_actor):
    res = hod_client.post(
        "/api/v1/reviews/auto-review/", {"entity_type": "journal_club", "enabled": True}, format="json"
    )
    assert res.status_code == 200, res.data
    assert res.data == {"entity_type": "journal_club", "enabled": True}

    res = faculty_client.get("/api/v1/reviews/auto-review/")
    assert res.status_code == 200, res.data
    assert res.data["journal_club"] is True
    assert res.data["procedure"] is False

    entry = _journal_club(student_actor)
    assert entry.status == "SIGNED"
    assert entry.auto_reviewed is True


def test_auto_review_toggle_is_hod_only(faculty_client, hod_client):
    res = faculty_client.post(
        "/api/v1/reviews/auto-review/", {"entity_type": "journal_club", "enabled": True}, format="json"
    )
    assert res.status_code == 403

    res = hod_client.post("/api/v1/reviews/auto-review/", {"entity_type": "journal", "enabled": True}, format="json")
    assert res.status_code == 400, res.data
    assert "entity_type" in res.data["error"]["details"]
    assert not AutoReviewSetting.objects.exists()


def test_ensure_auto_review_settings_command_is_idempotent():
    call_command("ensure_auto_review_settings")
    call_command("ensure_auto_review_settings")

    rows = AutoReviewSetting.objects.all()
    assert rows.count() == len(all_log_types())
    assert not rows.filter(enabled=True).exists()
