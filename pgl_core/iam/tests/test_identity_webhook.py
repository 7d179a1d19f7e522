# pgl_core/iam/tests/test_identity_webhook.py

import json
import time

import pytest
from django.conf import settings
from rest_framework.test import APIClient

from pgl_core.iam.models import Role, UserProfile
from pgl_core.iam.webhooks import WebhookVerificationError, compute_signature, verify_webhook

pytestmark = pytest.mark.django_db

URL = "/api/v1/webhooks/identity/"


def _user_event(event_type="user.created", **data):
    payload = {
        "id": "user_2abcDEF",
        "email_addresses": [{"email_address": "priya@example.org"}],
        "first_name": "Priya",
        "last_name": "Shah",
        "image_url": "https://img.example.org/priya.png",
        "public_metadata": {"role": "faculty"},
    }
    payload.update(data)
    return {"type": event_type, "data": payload}


def _post(event, *, secret=None, msg_id="msg_1", timestamp=None, signature=None):
    body = json.dumps(event)
    timestamp = str(int(time.time())) if timestamp is None else timestamp
    if signature is None:
        sig = compute_signature(
            secret=secret or settings.CLERK_WEBHOOK_SECRET,
            msg_id=msg_id,
            timestamp=timestamp,
            body=body.encode(),
        )
        signature = f"v1,{sig}"
    return APIClient().post(
        URL,
        data=body,
        content_type="application/json",
        HTTP_SVIX_ID=msg_id,
        HTTP_SVIX_TIMESTAMP=timestamp,
        HTTP_SVIX_SIGNATURE=signature,
    )


def test_user_created_upserts_shadow_with_role():
    res = _post(_user_event())
    assert res.status_code == 200, res.data

    profile = UserProfile.objects.select_related("user").get(user__username="user_2abcDEF")
    assert profile.role == Role.FACULTY
    assert profile.user.email == "priya@example.org"
    assert profile.display_name == "Priya Shah"
    assert profile.is_active is True


def test_user_updated_is_idempotent_and_refreshes_fields():
    _post(_user_event())
    res = _post(_user_event("user.updated", last_name="Shah-Kapoor", public_metadata={}), msg_id="msg_2")
    assert res.status_code == 200, res.data

    profiles = UserProfile.objects.filter(user__username="user_2abcDEF")
    assert profiles.count() == 1
    profile = profiles.select_related("user").get()
    assert profile.user.last_name == "Shah-Kapoor"
    # missing role metadata falls back to student
    assert profile.role == Role.STUDENT


def test_user_without_email_is_ignored():
    res = _post(_user_event(email_addresses=[]))
    assert res.status_code == 200
    assert not UserProfile.objects.filter(user__username="user_2abcDEF").exists()


def test_user_deleted_soft_deactivates():
    _post(_user_event())
    res = _post({"type": "user.deleted", "data": {"id": "user_2abcDEF", "deleted": True}}, msg_id="msg_3")
    assert res.status_code == 200

    profile = UserProfile.objects.get(user__username="user_2abcDEF")
    assert profile.is_active is False


def test_bad_signature_is_rejected():
    res = _post(_user_event(), signature="v1,bm90LXRoZS1zaWduYXR1cmU=")
    assert res.status_code == 400
    assert res.data["error"]["code"] == "validation_error"
    assert not UserProfile.objects.exists()


def test_signature_from_another_secret_is_rejected():
    res = _post(_user_event(), secret="whsec_b3RoZXItc2VjcmV0")
    assert res.status_code == 400


def test_stale_timestamp_is_rejected():
    res = _post(_user_event(), timestamp=str(int(time.time()) - 3600))
    assert res.status_code == 400
    assert "tolerance" in res.data["error"]["message"]


def test_missing_headers_are_rejected():
    res = APIClient().post(URL, data=json.dumps(_user_event()), content_type="application/json")
    assert res.status_code == 400


def test_verify_accepts_any_matching_signature_in_header():
    body = b'{"type": "user.deleted", "data": {"id": "x"}}'
    secret = settings.CLERK_WEBHOOK_SECRET
    good = compute_signature(secret=secret, msg_id="m", timestamp="1700000000", body=body)

    event = verify_webhook(
        secret=secret,
        headers={"svix-id": "m", "svix-timestamp": "1700000000", "svix-signature": f"v1,stale v1,{good}"},
        body=body,
        now=1700000010,
    )
    assert event["type"] == "user.deleted"

    with pytest.raises(WebhookVerificationError):
        verify_webhook(
            secret=secret,
            headers={"svix-id": "m", "svix-timestamp": "not-a-number", "svix-signature": f"v1,{good}"},
            body=body,
        )
