# pgl_core/iam/context.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional
from uuid import UUID

from django.conf import settings
from rest_framework.exceptions import NotAuthenticated, PermissionDenied

from pgl_core.iam.models import Role, UserProfile

NO_ROLE_MSG = "Session does not carry a logbook role."
NO_PROFILE_MSG = "No logbook profile exists for this account yet."
BANNED_MSG = "This account has been suspended."

_CACHE_ATTR = "_logbook_actor"


@dataclass(frozen=True)
class ActorContext:
    """
    Verified identity for one request. Built from the session token only and
    passed explicitly into services.
    """
    profile_id: UUID
    user_id: int
    subject: str
    role: str  # Role value

    @property
    def is_student(self) -> bool:
        return self.role == Role.STUDENT

    @property
    def is_faculty(self) -> bool:
        return self.role == Role.FACULTY

    @property
    def is_hod(self) -> bool:
        return self.role == Role.HOD

    @property
    def is_reviewer(self) -> bool:
        return self.role in {Role.FACULTY, Role.HOD}


def _claim(claims: Any, path: str) -> Any:
    """
    Walk a dotted claim path ("metadata.role") through a token or dict.
    """
    current = claims
    for part in path.split("."):
        if current is None:
            return None
        try:
            current = current[part]
        except (KeyError, TypeError):
            return None
    return current


def role_from_claims(claims: Any) -> Optional[str]:
    if claims is None:
        return None
    raw = _claim(claims, getattr(settings, "LOGBOOK_ROLE_CLAIM", "metadata.role"))
    if not raw:
        return None
    value = str(raw).strip().upper()
    return value if value in Role.values else None


def actor_from_request(request) -> Optional[ActorContext]:
    """
    Returns the ActorContext for an authenticated request, or None when there
    is no session. Raises PermissionDenied when the session exists but cannot
    act (no role claim, unknown profile, banned or deactivated profile).
    """
    cached = getattr(request, _CACHE_ATTR, None)
    if cached is not None:
        return cached

    user = getattr(request, "user", None)
    if not user or not getattr(user, "is_authenticated", False):
        return None

    role = role_from_claims(getattr(request, "auth", None))
    if role is None:
        raise PermissionDenied(NO_ROLE_MSG)

    try:
        profile = UserProfile.objects.only("id", "is_active", "is_banned").get(user_id=user.id)
    except UserProfile.DoesNotExist:
        raise PermissionDenied(NO_PROFILE_MSG)

    if profile.is_banned or not profile.is_active:
        raise PermissionDenied(BANNED_MSG)

    actor = ActorContext(
        profile_id=profile.id,
        user_id=user.id,
        subject=user.get_username(),
        role=role,
    )
    setattr(request, _CACHE_ATTR, actor)
    return actor


def require_actor(request) -> ActorContext:
    actor = actor_from_request(request)
    if actor is None:
        raise NotAuthenticated()
    return actor
