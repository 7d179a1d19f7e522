# pgl_core/reviews/tests/test_department_analytics.py
import datetime

import pytest

from pgl_core.logbook.log_types import JOURNAL_CLUBS, TRANSPORT_LOGS
from pgl_core.logbook.registry import all_log_types
from pgl_core.logbook.services import EntryService

pytestmark = pytest.mark.django_db

ANALYTICS = "/api/v1/reviews/analytics/department/"


def test_hod_sees_department_totals(student, other_student, faculty, student_actor, faculty_actor, hod_client):
    club = EntryService.create(
        actor=student_actor,
        log_type=JOURNAL_CLUBS,
        data={"date": datetime.date(2025, 5, 6), "journal_article": "NEJM 2023; balanced crystalloids"},
        submit=True,
    )
    EntryService.sign(actor=faculty_actor, log_type=JOURNAL_CLUBS, entry_id=club.pk)
    EntryService.create(
        actor=student_actor,
        log_type=TRANSPORT_LOGS,
        data={"date": datetime.date(2025, 5, 7), "patient_info": "R / 58 / M / UHID-4", "skill_level": "A"},
    )

    res = hod_client.get(ANALYTICS)
    assert res.status_code == 200, res.data
    assert (res.data["total_students"], res.data["total_faculty"]) == (2, 1)
    assert (res.data["total_logs"], res.data["signed_logs"], res.data["sign_off_rate"]) == (2, 1, 50.0)

    assert set(res.data["log_types"]) == {lt.entity_type for lt in all_log_types()}
    assert res.data["log_types"]["journal_club"] == {"label": JOURNAL_CLUBS.label, "total": 1, "signed": 1}
    assert res.data["log_types"]["transport_log"]["total"] == 1

    by_id = {s["id"]: s for s in res.data["students"]}
    assert (by_id[str(student.id)]["total_logs"], by_id[str(student.id)]["signed_logs"]) == (2, 1)
    assert by_id[str(student.id)]["batch"] == "2024-27"
    assert by_id[str(other_student.id)]["total_logs"] == 0

    (workload,) = res.data["faculty_workload"]
    assert workload["id"] == str(faculty.id)
    assert workload["assigned_students"] == 1


def test_department_analytics_is_hod_only(faculty_client, student_client):
    assert faculty_client.get(ANALYTICS).status_code == 403
    assert student_client.get(ANALYTICS).status_code == 403
