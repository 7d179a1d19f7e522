# pgl_core/tests/helpers.py
import time

import jwt
from django.conf import settings
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import UntypedToken

from pgl_core.iam.context import ActorContext
from pgl_core.iam.models import Role, UserProfile


def make_profile(username, role=Role.STUDENT, *, batch=None, first_name="", last_name=""):
    """
    auth_user (username == identity subject) -> UserProfile
    """
    User = get_user_model()
    user = User.objects.create_user(
        username=username,
        email=f"{username}@example.org",
        first_name=first_name,
        last_name=last_name,
        password=None,
    )
    return UserProfile.objects.create(user=user, role=role, batch=batch)


def provider_token(subject, **claims):
    """
    Encoded JWT shaped like the identity provider's session token:
    sub, iat, exp and whatever custom claims are passed. No token_type, no jti.
    """
    issued = int(time.time())
    payload = {"sub": subject, "iat": issued, "exp": issued + 600, **claims}
    return jwt.encode(payload, settings.SIMPLE_JWT["SIGNING_KEY"], algorithm=settings.SIMPLE_JWT["ALGORITHM"])


def session_token(profile, role=None):
    return provider_token(profile.user.username, metadata={"role": str(role or profile.role).lower()})


def client_for(profile, role=None):
    c = APIClient()
    c.force_authenticate(user=profile.user, token=UntypedToken(session_token(profile, role)))
    return c


def actor_for(profile, role=None):
    return ActorContext(
        profile_id=profile.id,
        user_id=profile.user_id,
        subject=profile.user.username,
        role=str(role or profile.role),
    )


def error_of(res):
    """
    Every failure is wrapped in the standard envelope:
      {"error": {"code": "...", "message": "...", "details": ..., "request_id": "..."}}
    """
    assert isinstance(res.data, dict) and "error" in res.data, res.data
    return res.data["error"]
