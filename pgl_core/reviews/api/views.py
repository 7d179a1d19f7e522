# pgl_core/reviews/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from pgl_core.common.api.pagination import DefaultPagination
from pgl_core.common.permissions import DepartmentAdminPermission, ReviewerPermission, TrainingRecordPermission
from pgl_core.iam.context import require_actor
from pgl_core.reviews.api.serializers import (
    AutoReviewToggleSerializer,
    FacultyEvaluationToggleSerializer,
    NotificationsSerializer,
    StudentQuerySerializer,
    TrainingRecordBulkSignSerializer,
    TrainingRecordSerializer,
    TrainingRecordSignSerializer,
    TrainingRecordWriteSerializer,
)
from pgl_core.reviews.selectors import (
    department_analytics,
    evaluation_graph,
    notifications,
    pending_counts,
    student_progress,
    training_records,
)
from pgl_core.reviews.services import (
    AutoReviewService,
    DepartmentSettingService,
    NotificationService,
    TrainingRecordService,
    auto_review_settings,
    is_faculty_evaluation_enabled,
)

STUDENT_PARAM = OpenApiParameter(
    name="student_id",
    type=OpenApiTypes.UUID,
    location=OpenApiParameter.QUERY,
    required=False,
)


def _student_query(request):
    q = StudentQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    return q.validated_data.get("student_id")


@extend_schema(tags=["Reviews"])
class PendingCountsView(APIView):
    """SUBMITTED entries awaiting the caller's review, per log type."""
    permission_classes = [ReviewerPermission]

    @extend_schema(parameters=[STUDENT_PARAM], responses={200: dict})
    def get(self, request):
        actor = require_actor(request)
        counts = pending_counts(actor=actor, student_id=_student_query(request))
        return Response(counts, status=status.HTTP_200_OK)


@extend_schema(tags=["Reviews"])
class EvaluationGraphView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        parameters=[STUDENT_PARAM],
        responses={200: dict},
        description="Per-semester averages of the five evaluation domains. Students get their own graph.",
    )
    def get(self, request):
        actor = require_actor(request)
        data = evaluation_graph(actor=actor, student_id=_student_query(request))
        return Response(data, status=status.HTTP_200_OK)


@extend_schema(tags=["Reviews"])
class StudentProgressView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: dict})
    def get(self, request, student_id):
        actor = require_actor(request)
        return Response(student_progress(actor=actor, student_id=student_id), status=status.HTTP_200_OK)


@extend_schema(tags=["Reviews"])
class NotificationsView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: NotificationsSerializer})
    def get(self, request):
        actor = require_actor(request)
        return Response(NotificationsSerializer(notifications(actor=actor)).data, status=status.HTTP_200_OK)


@extend_schema(tags=["Reviews"])
class NotificationsSeenView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=None, responses={200: dict})
    def post(self, request):
        actor = require_actor(request)
        seen_at = NotificationService.mark_seen(actor=actor)
        return Response({"seen_at": seen_at.isoformat()}, status=status.HTTP_200_OK)


@extend_schema(tags=["Reviews"])
class AutoReviewView(APIView):
    """
    GET: every log type with its auto-review flag.
    POST: HOD toggles one log type.
    """
    permission_classes = [DepartmentAdminPermission]

    @extend_schema(responses={200: dict})
    def get(self, request):
        require_actor(request)
        return Response(auto_review_settings(), status=status.HTTP_200_OK)

    @extend_schema(request=AutoReviewToggleSerializer, responses={200: dict})
    def post(self, request):
        actor = require_actor(request)

        ser = AutoReviewToggleSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        setting = AutoReviewService.set_enabled(
            actor=actor,
            entity_type=ser.validated_data["entity_type"],
            enabled=ser.validated_data["enabled"],
        )
        return Response({"entity_type": setting.entity_type, "enabled": setting.enabled}, status=status.HTTP_200_OK)


@extend_schema(tags=["Reviews"])
class FacultyEvaluationAccessView(APIView):
    """
    GET: whether faculty may fill training & mentoring records.
    POST: HOD switches it on or off.
    """
    permission_classes = [DepartmentAdminPermission]

    @extend_schema(responses={200: FacultyEvaluationToggleSerializer})
    def get(self, request):
        require_actor(request)
        return Response({"enabled": is_faculty_evaluation_enabled()}, status=status.HTTP_200_OK)

    @extend_schema(request=FacultyEvaluationToggleSerializer, responses={200: FacultyEvaluationToggleSerializer})
    def post(self, request):
        actor = require_actor(request)

        ser = FacultyEvaluationToggleSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        setting = DepartmentSettingService.set_faculty_evaluation(actor=actor, enabled=ser.validated_data["enabled"])
        return Response({"enabled": setting.enabled}, status=status.HTTP_200_OK)


@extend_schema(tags=["Reviews"])
class TrainingRecordViewSet(viewsets.ViewSet):
    """
    Training & mentoring records:
      GET    /reviews/training-records/            ?student_id=&status=
      POST   /reviews/training-records/            upsert by (student_id, semester)
      POST   /reviews/training-records/{id}/sign/
      POST   /reviews/training-records/bulk-sign/
      DELETE /reviews/training-records/{id}/
    """
    permission_classes = [TrainingRecordPermission]
    lookup_value_regex = r"[0-9a-fA-F-]{32,36}"

    @extend_schema(
        parameters=[
            STUDENT_PARAM,
            OpenApiParameter(name="status", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
        ],
        responses={200: TrainingRecordSerializer(many=True)},
    )
    def list(self, request):
        actor = require_actor(request)
        qs = training_records(
            actor=actor,
            student_id=_student_query(request),
            status=request.query_params.get("status") or None,
        )

        paginator = DefaultPagination()
        page = paginator.paginate_queryset(qs, request, view=self)
        return paginator.get_paginated_response(TrainingRecordSerializer(page, many=True).data)

    @extend_schema(request=TrainingRecordWriteSerializer, responses={200: TrainingRecordSerializer})
    def create(self, request):
        actor = require_actor(request)

        ser = TrainingRecordWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = dict(ser.validated_data)

        record, created = TrainingRecordService.save(
            actor=actor,
            student_id=data.pop("student_id"),
            semester=data.pop("semester"),
            values=data,
        )
        return Response(
            TrainingRecordSerializer(record).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )

    @extend_schema(request=TrainingRecordSignSerializer, responses={200: TrainingRecordSerializer})
    @action(detail=True, methods=["post"])
    def sign(self, request, pk=None):
        actor = require_actor(request)

        ser = TrainingRecordSignSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        record = TrainingRecordService.sign(actor=actor, record_id=pk, remark=ser.validated_data["remark"])
        return Response(TrainingRecordSerializer(record).data, status=status.HTTP_200_OK)

    @extend_schema(request=TrainingRecordBulkSignSerializer, responses={200: dict})
    @action(detail=False, methods=["post"], url_path="bulk-sign")
    def bulk_sign(self, request):
        actor = require_actor(request)

        ser = TrainingRecordBulkSignSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        result = TrainingRecordService.bulk_sign(
            actor=actor,
            record_ids=ser.validated_data["ids"],
            remark=ser.validated_data["remark"],
        )
        return Response(result, status=status.HTTP_200_OK)

    def destroy(self, request, pk=None):
        actor = require_actor(request)
        TrainingRecordService.delete(actor=actor, record_id=pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(tags=["Reviews"])
class DepartmentAnalyticsView(APIView):
    """HOD only: department-wide volume, sign-off rate and faculty workload."""
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: dict})
    def get(self, request):
        actor = require_actor(request)
        return Response(department_analytics(actor=actor), status=status.HTTP_200_OK)
