# pgl_core/iam/tests/test_department_admin.py
import pytest

from pgl_core.iam.models import Batch, FacultyBatchAssignment, FacultyStudentAssignment, Role, UserProfile
from pgl_core.tests.helpers import client_for, make_profile

pytestmark = pytest.mark.django_db


def test_hod_manages_batches(hod_client):
    res = hod_client.post(
        "/api/v1/batches/",
        {"name": "2025-28", "start_date": "2025-07-01", "current_semester": 1},
        format="json",
    )
    assert res.status_code == 201, res.data
    batch_id = res.data["id"]

    res = hod_client.patch(f"/api/v1/batches/{batch_id}/", {"current_semester": 2}, format="json")
    assert res.status_code == 200, res.data
    assert Batch.objects.get(pk=batch_id).current_semester == 2


def test_batch_end_before_start_is_rejected(hod_client):
    res = hod_client.post(
        "/api/v1/batches/",
        {"name": "bad", "start_date": "2025-07-01", "end_date": "2025-01-01"},
        format="json",
    )
    assert res.status_code == 400, res.data
    assert "end_date" in res.data["error"]["details"]


def test_faculty_reads_but_cannot_manage_batches(faculty_client, batch):
    res = faculty_client.get("/api/v1/batches/")
    assert res.status_code == 200, res.data
    assert res.data["results"][0]["student_count"] == 0

    res = faculty_client.post("/api/v1/batches/", {"name": "2025-28"}, format="json")
    assert res.status_code == 403


def test_students_have_no_department_access(student_client):
    assert student_client.get("/api/v1/batches/").status_code == 403
    assert student_client.get("/api/v1/profiles/").status_code == 403


def test_assign_faculty_and_add_students(hod_client, batch, other_student):
    new_faculty = make_profile("user_faculty_2", Role.FACULTY)

    res = hod_client.post(f"/api/v1/batches/{batch.id}/faculty/", {"faculty_id": str(new_faculty.id)}, format="json")
    assert res.status_code == 201, res.data
    assert FacultyBatchAssignment.objects.filter(faculty=new_faculty, batch=batch).exists()

    res = hod_client.post(f"/api/v1/batches/{batch.id}/students/", {"student_ids": [str(other_student.id)]}, format="json")
    assert res.status_code == 200, res.data
    assert res.data["updated"] == 1

    other_student.refresh_from_db()
    assert other_student.batch_id == batch.id
    assert other_student.current_semester == batch.current_semester


def test_student_cannot_be_assigned_as_supervisor(hod_client, batch, student):
    res = hod_client.post(f"/api/v1/batches/{batch.id}/faculty/", {"faculty_id": str(student.id)}, format="json")
    assert res.status_code == 400, res.data
    assert "faculty_id" in res.data["error"]["details"]


def test_direct_assignment_is_unique_per_semester(hod_client, faculty, other_student):
    payload = {"faculty_id": str(faculty.id), "student_id": str(other_student.id), "semester": 4}

    res = hod_client.post("/api/v1/assignments/", payload, format="json")
    assert res.status_code == 201, res.data

    res = hod_client.post("/api/v1/assignments/", payload, format="json")
    assert res.status_code == 400, res.data
    assert res.data["error"]["message"] == "Assignment already exists for this semester."


def test_hod_bans_a_profile(hod_client, student):
    res = hod_client.patch(f"/api/v1/profiles/{student.id}/", {"is_banned": True, "role": "HOD"}, format="json")
    assert res.status_code == 200, res.data

    student.refresh_from_db()
    assert student.is_banned is True
    # role belongs to the identity provider
    assert student.role == Role.STUDENT

    assert client_for(student).get("/api/v1/me/").status_code == 403
    assert UserProfile.objects.filter(is_banned=True).count() == 1


def test_faculty_profile_reads_stay_within_supervision(faculty_client, faculty, student, other_student, hod):
    res = faculty_client.get("/api/v1/profiles/")
    assert res.status_code == 200, res.data
    assert {row["id"] for row in res.data["results"]} == {str(faculty.id), str(student.id)}

    assert faculty_client.get(f"/api/v1/profiles/{student.id}/").status_code == 200
    assert faculty_client.get(f"/api/v1/profiles/{other_student.id}/").status_code == 404
    assert faculty_client.get(f"/api/v1/profiles/{hod.id}/").status_code == 404

    # a direct assignment brings the student into view
    FacultyStudentAssignment.objects.create(faculty=faculty, student=other_student, semester=4)
    assert faculty_client.get(f"/api/v1/profiles/{other_student.id}/").status_code == 200


def test_faculty_sees_only_assignments_in_their_scope(faculty_client, hod_client, faculty, student, other_student):
    other_faculty = make_profile("user_faculty_2", Role.FACULTY)
    mine = FacultyStudentAssignment.objects.create(faculty=faculty, student=student, semester=2)
    FacultyStudentAssignment.objects.create(faculty=other_faculty, student=other_student, semester=4)

    res = faculty_client.get("/api/v1/assignments/")
    assert res.status_code == 200, res.data
    assert [row["id"] for row in res.data["results"]] == [str(mine.id)]

    res = hod_client.get("/api/v1/assignments/")
    assert res.data["count"] == 2
