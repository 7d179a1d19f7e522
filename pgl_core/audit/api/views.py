# pgl_core/audit/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import serializers, viewsets

from pgl_core.audit.api.serializers import DigitalSignatureSerializer
from pgl_core.audit.models import DigitalSignature
from pgl_core.audit.selectors import list_signatures
from pgl_core.common.api.pagination import paginate
from pgl_core.common.permissions import SignOffPermission
from pgl_core.iam.context import require_actor


class DigitalSignatureViewSet(viewsets.GenericViewSet):
    """
    Signatures visible to the caller: students see their own, faculty their
    students' and their own, HOD all.
    """
    permission_classes = [SignOffPermission]
    serializer_class = DigitalSignatureSerializer
    queryset = DigitalSignature.objects.none()

    @extend_schema(
        tags=["Audit"],
        responses={200: DigitalSignatureSerializer(many=True)},
        parameters=[
            OpenApiParameter(
                name="entity_type",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Filter by log type (e.g. procedure, case_management).",
            ),
            OpenApiParameter(
                name="student_id",
                type=OpenApiTypes.UUID,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Filter by student profile id.",
            ),
        ],
    )
    def list(self, request):
        actor = require_actor(request)

        student_id = request.query_params.get("student_id") or None
        if student_id:
            student_id = serializers.UUIDField().run_validation(student_id)

        qs = list_signatures(
            actor=actor,
            entity_type=request.query_params.get("entity_type") or None,
            student_id=student_id,
        )
        return paginate(request, qs, DigitalSignatureSerializer)
