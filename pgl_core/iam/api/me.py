# pgl_core/iam/api/me.py

from __future__ import annotations

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from pgl_core.iam.context import require_actor
from pgl_core.iam.models import UserProfile
from pgl_core.iam.services.assignments import list_faculty_scope


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        """
        Returns the caller's profile and the role verified from the session token.
        `role` is the one to trust; `profile.role` is the synced shadow value.
        """
        actor = require_actor(request)
        profile = UserProfile.objects.select_related("user", "batch").get(id=actor.profile_id)

        supervision = list_faculty_scope(actor.profile_id) if actor.is_faculty else None

        return Response(
            {
                "user": {
                    "id": request.user.id,
                    "subject": actor.subject,
                    "email": profile.user.email,
                    "name": profile.display_name,
                    "image_url": profile.image_url or None,
                },
                "role": actor.role,
                "profile": {
                    "id": str(profile.id),
                    "role": profile.role,
                    "batch": (
                        {"id": str(profile.batch_id), "name": profile.batch.name} if profile.batch_id else None
                    ),
                    "current_semester": profile.current_semester,
                },
                "supervision": supervision,
            },
            status=status.HTTP_200_OK,
        )
