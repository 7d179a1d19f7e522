# pgl_core/iam/api/webhooks.py

from __future__ import annotations

import logging

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from pgl_core.iam.services.user_sync import UserSyncService
from pgl_core.iam.webhooks import HEADER_ID, HEADER_SIGNATURE, HEADER_TIMESTAMP, WebhookVerificationError, verify_webhook

logger = logging.getLogger(__name__)


class IdentityWebhookView(APIView):
    """
    User lifecycle events from the identity provider. Authenticated by the
    webhook signature, not by a session.
    """
    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(tags=["Identity"], request=None, responses={200: dict})
    def post(self, request):
        secret = getattr(settings, "CLERK_WEBHOOK_SECRET", "")
        if not secret:
            raise ImproperlyConfigured("CLERK_WEBHOOK_SECRET is not set.")

        # Raw body must be read before request.data is touched.
        body = request.body
        headers = {
            HEADER_ID: request.headers.get(HEADER_ID),
            HEADER_TIMESTAMP: request.headers.get(HEADER_TIMESTAMP),
            HEADER_SIGNATURE: request.headers.get(HEADER_SIGNATURE),
        }

        try:
            event = verify_webhook(
                secret=secret,
                headers=headers,
                body=body,
                tolerance_seconds=settings.LOGBOOK_WEBHOOK_TOLERANCE_SECONDS,
            )
        except WebhookVerificationError as e:
            logger.warning("identity_webhook_rejected svix_id=%s reason=%s", headers[HEADER_ID], e)
            raise ValidationError({"detail": str(e)})

        UserSyncService.handle_event(event)
        return Response({"received": True}, status=status.HTTP_200_OK)
