# pgl_core/logbook/tests/test_activity_and_skill_logs.py
import pytest

from pgl_core.logbook.constants import DIAGNOSTIC_SKILLS
from pgl_core.logbook.models import DiagnosticSkillLog, EntryStatus

pytestmark = pytest.mark.django_db

LOGS = "/api/v1/logs"


def _encounter(**overrides):
    data = {
        "date": "2025-03-04",
        "patient_info": "S. Devi / 67 / F / UHID-2201",
        "complete_diagnosis": "Post-ROSC, ventilated",
        "procedure_description": "Inter-facility transfer to cath lab",
        "performed_at_location": "ED to CCU",
        "skill_level": "PS",
        "submit": True,
    }
    data.update(overrides)
    return data


@pytest.mark.parametrize(
    "key, payload",
    [
        (
            "life-support-courses",
            {"date": "2025-02-01", "course_name": "ACLS", "conducted_at": "Skills lab", "confidence_level": "FC"},
        ),
        (
            "conferences",
            {"date": "2025-02-10", "conference_name": "EMINDIA 2025", "participation_role": "Poster presenter"},
        ),
        (
            "research-activities",
            {"date": "2025-02-12", "activity": "Sepsis bundle audit", "participation_role": "Data collection"},
        ),
        ("disaster-drills", {"date": "2025-02-14", "description": "Mass casualty drill", "role_in_activity": "Triage"}),
        ("quality-improvement", {"date": "2025-02-20", "description": "Door-to-ECG time", "role_in_activity": "Lead"}),
        ("transport-logs", _encounter()),
        ("consent-logs", _encounter(procedure_description="Consent for intubation")),
        ("bad-news-logs", _encounter(procedure_description="Breaking news of death, SPIKES")),
    ],
)
def test_submit_and_sign_each_log(student_client, faculty_client, key, payload):
    res = student_client.post(f"{LOGS}/{key}/", {**payload, "submit": True}, format="json")
    assert res.status_code == 201, res.data
    assert res.data["status"] == EntryStatus.SUBMITTED
    assert res.data["sl_no"] == 1

    res = faculty_client.post(f"{LOGS}/{key}/{res.data['id']}/sign/", {"remark": "Verified"}, format="json")
    assert res.status_code == 200, res.data
    assert res.data["status"] == EntryStatus.SIGNED
    assert res.data["reviewed_at"] is not None


@pytest.mark.parametrize(
    "key, missing",
    [
        ("life-support-courses", "course_name"),
        ("conferences", "conference_name"),
        ("research-activities", "activity"),
        ("disaster-drills", "description"),
        ("quality-improvement", "description"),
    ],
)
def test_submit_requires_the_activity_name(student_client, key, missing):
    res = student_client.post(f"{LOGS}/{key}/", {"date": "2025-02-01", "submit": True}, format="json")
    assert res.status_code == 400, res.data
    assert missing in res.data["error"]["details"]

    # drafts may stay incomplete
    res = student_client.post(f"{LOGS}/{key}/", {"date": "2025-02-01"}, format="json")
    assert res.status_code == 201, res.data
    assert res.data["status"] == EntryStatus.DRAFT


@pytest.mark.parametrize("key", ["transport-logs", "consent-logs", "bad-news-logs"])
def test_team_roles_are_not_a_skill_level_here(student_client, key):
    res = student_client.post(f"{LOGS}/{key}/", _encounter(skill_level="TM"), format="json")
    assert res.status_code == 400, res.data
    assert "skill_level" in res.data["error"]["details"]


def test_course_confidence_level_must_be_known(student_client):
    res = student_client.post(
        f"{LOGS}/life-support-courses/",
        {"date": "2025-02-01", "course_name": "PALS", "confidence_level": "VERY"},
        format="json",
    )
    assert res.status_code == 400, res.data
    assert "confidence_level" in res.data["error"]["details"]


# ----------------------------
# Diagnostic skills
# ----------------------------

def test_initialize_diagnostic_skill_rows(student_client, student):
    res = student_client.post(f"{LOGS}/diagnostic-skills/initialize/", {"category": "ABG_ANALYSIS"}, format="json")
    assert res.status_code == 201, res.data
    assert res.data["created_count"] == 10
    assert [r["skill_name"] for r in res.data["results"]] == list(DIAGNOSTIC_SKILLS["ABG_ANALYSIS"])

    res = student_client.post(f"{LOGS}/diagnostic-skills/initialize/", {"category": "ABG_ANALYSIS"}, format="json")
    assert res.status_code == 200, res.data
    assert res.data["created_count"] == 0

    res = student_client.post(f"{LOGS}/diagnostic-skills/initialize/", {"category": "ECG_ANALYSIS"}, format="json")
    assert res.data["created_count"] == 10
    assert DiagnosticSkillLog.objects.filter(owner=student).count() == 20
    # serial numbers continue across categories
    assert res.data["results"][0]["sl_no"] == 11


def test_unknown_diagnostic_category_cannot_be_initialized(student_client):
    res = student_client.post(f"{LOGS}/diagnostic-skills/initialize/", {"category": "MRI"}, format="json")
    assert res.status_code == 400, res.data
    assert "category" in res.data["error"]["details"]


def test_diagnostic_skill_must_belong_to_its_category(student_client):
    res = student_client.post(
        f"{LOGS}/diagnostic-skills/",
        {"category": "ECG_ANALYSIS", "skill_name": "Hemogram"},
        format="json",
    )
    assert res.status_code == 400, res.data
    assert "skill_name" in res.data["error"]["details"]


def test_fill_and_submit_an_initialized_row(student_client):
    res = student_client.post(f"{LOGS}/diagnostic-skills/initialize/", {"category": "OTHER_DIAGNOSTIC"}, format="json")
    row = res.data["results"][0]

    res = student_client.post(f"{LOGS}/diagnostic-skills/{row['id']}/submit/", {}, format="json")
    assert res.status_code == 400, res.data
    assert set(res.data["error"]["details"]) == {"confidence_level", "total_times_performed"}

    res = student_client.patch(
        f"{LOGS}/diagnostic-skills/{row['id']}/",
        {"representative_diagnosis": "Dengue with thrombocytopenia", "confidence_level": "SC", "total_times_performed": 6},
        format="json",
    )
    assert res.status_code == 200, res.data

    res = student_client.post(f"{LOGS}/diagnostic-skills/{row['id']}/submit/", {}, format="json")
    assert res.status_code == 200, res.data
    assert res.data["status"] == EntryStatus.SUBMITTED
