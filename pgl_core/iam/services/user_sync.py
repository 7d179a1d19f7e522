# pgl_core/iam/services/user_sync.py
from __future__ import annotations

import logging
from typing import Any, Optional

from django.contrib.auth import get_user_model
from django.db import transaction

from pgl_core.iam.models import Role, UserProfile

logger = logging.getLogger(__name__)


def _role_from_metadata(data: dict[str, Any]) -> str:
    raw = (data.get("public_metadata") or {}).get("role")
    value = str(raw).strip().upper() if raw else ""
    return value if value in Role.values else Role.STUDENT


class UserSyncService:
    """
    Keeps the local user shadow in step with identity-provider lifecycle events.
    """

    @staticmethod
    @transaction.atomic
    def upsert_from_event(data: dict[str, Any]) -> Optional[UserProfile]:
        """
        user.created / user.updated. Users without an email address are ignored.
        """
        subject = data.get("id")
        emails = data.get("email_addresses") or []
        email = emails[0].get("email_address") if emails else None
        if not subject or not email:
            logger.info("identity_sync_skipped subject=%s reason=no_email", subject)
            return None

        User = get_user_model()
        user, created = User.objects.get_or_create(username=subject, defaults={"email": email})
        user.email = email
        user.first_name = data.get("first_name") or ""
        user.last_name = data.get("last_name") or ""
        if created:
            user.set_unusable_password()
        user.save()

        role = _role_from_metadata(data)
        profile, _ = UserProfile.objects.update_or_create(
            user=user,
            defaults={
                "role": role,
                "image_url": data.get("image_url") or "",
                "is_active": True,
            },
        )

        logger.info("identity_sync_upserted subject=%s role=%s created=%s", subject, role, created)
        return profile

    @staticmethod
    @transaction.atomic
    def deactivate_from_event(data: dict[str, Any]) -> int:
        """
        user.deleted: soft delete. Logbook records are preserved.
        """
        subject = data.get("id")
        updated = UserProfile.objects.filter(user__username=subject).update(is_active=False)
        logger.info("identity_sync_deactivated subject=%s profiles=%d", subject, updated)
        return updated

    @staticmethod
    def handle_event(event: dict[str, Any]) -> None:
        event_type = event.get("type")
        data = event.get("data") or {}

        if event_type in {"user.created", "user.updated"}:
            UserSyncService.upsert_from_event(data)
        elif event_type == "user.deleted":
            UserSyncService.deactivate_from_event(data)
        else:
            logger.debug("identity_event_ignored type=%s", event_type)
