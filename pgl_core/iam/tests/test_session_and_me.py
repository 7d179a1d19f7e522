# pgl_core/iam/tests/test_session_and_me.py
import time

import jwt
import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import UntypedToken

from pgl_core.iam.models import Role
from pgl_core.tests.helpers import client_for, error_of, provider_token, session_token

pytestmark = pytest.mark.django_db


def test_me_requires_auth():
    res = APIClient().get("/api/v1/me/")
    assert res.status_code == 401


def test_me_for_student(student_client, student, batch):
    res = student_client.get("/api/v1/me/")
    assert res.status_code == 200, res.data

    body = res.json()
    assert body["role"] == Role.STUDENT
    assert body["user"]["subject"] == "user_student"
    assert body["user"]["name"] == "Asha Rao"
    assert body["profile"]["id"] == str(student.id)
    assert body["profile"]["batch"] == {"id": str(batch.id), "name": "2024-27"}
    assert body["supervision"] is None


def test_me_for_faculty_lists_supervision(faculty_client, batch):
    res = faculty_client.get("/api/v1/me/")
    assert res.status_code == 200, res.data

    body = res.json()
    assert body["role"] == Role.FACULTY
    assert body["supervision"]["batches"] == [
        {"id": str(batch.id), "name": "2024-27", "current_semester": 2}
    ]
    assert body["supervision"]["students"] == []


def test_token_role_wins_over_stored_role(student):
    client = client_for(student, role=Role.FACULTY)

    body = client.get("/api/v1/me/").json()
    assert body["role"] == Role.FACULTY
    assert body["profile"]["role"] == Role.STUDENT


def test_session_without_role_claim_is_forbidden(student):
    client = APIClient()
    client.force_authenticate(user=student.user, token=UntypedToken(provider_token(student.user.username)))

    res = client.get("/api/v1/me/")
    assert res.status_code == 403
    assert error_of(res)["message"] == "Session does not carry a logbook role."


def test_unknown_role_claim_is_forbidden(student):
    client = client_for(student, role="superuser")
    assert client.get("/api/v1/me/").status_code == 403


def test_banned_profile_is_forbidden(student, student_client):
    student.is_banned = True
    student.save(update_fields=["is_banned"])

    res = student_client.get("/api/v1/logs/procedures/")
    assert res.status_code == 403
    assert error_of(res)["message"] == "This account has been suspended."


def test_client_supplied_role_header_is_ignored(student_client):
    res = student_client.get("/api/v1/reviews/pending-counts/", HTTP_X_ROLE="HOD")
    assert res.status_code == 403


def test_bearer_header_authenticates(student):
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {session_token(student)}")

    res = client.get("/api/v1/me/")
    assert res.status_code == 200, res.data
    assert res.json()["role"] == Role.STUDENT


def test_session_cookie_authenticates(hod):
    client = APIClient()
    client.cookies["__session"] = session_token(hod)

    res = client.get("/api/v1/me/")
    assert res.status_code == 200, res.data
    assert res.json()["role"] == Role.HOD


def test_invalid_bearer_token_is_unauthorized():
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION="Bearer not-a-jwt")

    res = client.get("/api/v1/me/")
    assert res.status_code == 401
    assert error_of(res)["code"] == "not_authenticated"


def test_provider_token_without_type_or_jti_authenticates(student):
    raw = provider_token(student.user.username, metadata={"role": "student"}, azp="https://logbook.example.org", sid="sess_1")
    assert "token_type" not in jwt.decode(raw, options={"verify_signature": False})

    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {raw}")
    res = client.get("/api/v1/me/")
    assert res.status_code == 200, res.data
    assert res.json()["profile"]["id"] == str(student.id)

    client = APIClient()
    client.cookies["__session"] = raw
    assert client.get("/api/v1/me/").status_code == 200


def test_expired_provider_token_is_unauthorized(student):
    raw = provider_token(student.user.username, metadata={"role": "student"}, exp=int(time.time()) - 60)

    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {raw}")
    assert client.get("/api/v1/me/").status_code == 401


def test_token_signed_with_another_key_is_unauthorized(student):
    raw = jwt.encode(
        {"sub": student.user.username, "exp": int(time.time()) + 600, "metadata": {"role": "student"}},
        "some-other-signing-key-0123456789abcdef",
        algorithm="HS256",
    )
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {raw}")
    assert client.get("/api/v1/me/").status_code == 401
