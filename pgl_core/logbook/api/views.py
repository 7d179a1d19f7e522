# pgl_core/logbook/api/views.py
from __future__ import annotations

from django.http import HttpResponse
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import serializers, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from pgl_core.audit.api.serializers import AuditEventSerializer
from pgl_core.audit.selectors import entity_timeline
from pgl_core.common.api.pagination import DefaultPagination
from pgl_core.common.permissions import LogEntryPermission, SignOffPermission
from pgl_core.iam.authz import Action, StudentResource, authorize
from pgl_core.iam.context import require_actor
from pgl_core.iam.models import UserProfile
from pgl_core.logbook.api.serializers import (
    BulkSignOffSerializer,
    BulkSignSerializer,
    CreateOptionsSerializer,
    ExportQuerySerializer,
    InitializeSerializer,
    RejectSerializer,
    RevisionSerializer,
    SignOffSerializer,
    ThesisSemesterRecordSerializer,
    ThesisSerializer,
    entry_serializer_for,
    sign_serializer_for,
)
from pgl_core.logbook.exports import build_export
from pgl_core.logbook.registry import LogType, all_log_types, get_by_entity_type
from pgl_core.logbook.selectors import entries_for_student, get_thesis, list_entries
from pgl_core.logbook.services import EntryService, ThesisService

LIST_PARAMETERS = [
    OpenApiParameter(
        name="status",
        type=OpenApiTypes.STR,
        location=OpenApiParameter.QUERY,
        required=False,
        description="Comma separated statuses (DRAFT,SUBMITTED,SIGNED,REJECTED,NEEDS_REVISION).",
    ),
    OpenApiParameter(name="category", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
    OpenApiParameter(name="student_id", type=OpenApiTypes.UUID, location=OpenApiParameter.QUERY, required=False),
    OpenApiParameter(name="search", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
]


class LogEntryViewSet(viewsets.ViewSet):
    """
    Thin API layer shared by every log type:
    - selectors for reads (scoped to the caller)
    - EntryService for writes (authorization + status guards)

    Concrete classes are produced by build_log_entry_viewset().
    """
    permission_classes = [LogEntryPermission]
    lookup_value_regex = r"[0-9a-fA-F-]{32,36}"
    log_type: LogType = None  # set per subclass

    def get_serializer_class(self):
        return entry_serializer_for(self.log_type)

    def _out(self, entry, code=status.HTTP_200_OK):
        return Response(self.get_serializer_class()(entry).data, status=code)

    # ----------------------------
    # Reads
    # ----------------------------
    @extend_schema(parameters=LIST_PARAMETERS)
    def list(self, request):
        actor = require_actor(request)

        student_id = request.query_params.get("student_id") or None
        if student_id:
            student_id = serializers.UUIDField().run_validation(student_id)
            authorize(Action.VIEW, actor, StudentResource(owner_id=student_id)).enforce()

        qs = list_entries(
            actor=actor,
            log_type=self.log_type,
            status=request.query_params.get("status") or None,
            category=request.query_params.get("category") or None,
            student_id=student_id,
            search=request.query_params.get("search") or None,
        )

        paginator = DefaultPagination()
        page = paginator.paginate_queryset(qs, request, view=self)
        ser = self.get_serializer_class()(page, many=True)
        return paginator.get_paginated_response(ser.data)

    def retrieve(self, request, pk=None):
        actor = require_actor(request)
        entry = EntryService.get_for(actor=actor, log_type=self.log_type, entry_id=pk)
        return self._out(entry)

    @extend_schema(responses={200: AuditEventSerializer(many=True)})
    @action(detail=True, methods=["get"])
    def history(self, request, pk=None):
        actor = require_actor(request)
        entry = EntryService.get_for(actor=actor, log_type=self.log_type, entry_id=pk)
        events = entity_timeline(entity_type=self.log_type.entity_type, entity_id=entry.pk)
        return Response(AuditEventSerializer(events, many=True).data)

    # ----------------------------
    # Student writes
    # ----------------------------
    def create(self, request):
        actor = require_actor(request)

        ser = self.get_serializer_class()(data=request.data)
        ser.is_valid(raise_exception=True)
        opts = CreateOptionsSerializer(data={"submit": request.data.get("submit", False)})
        opts.is_valid(raise_exception=True)

        entry = EntryService.create(
            actor=actor,
            log_type=self.log_type,
            data=ser.validated_data,
            submit=opts.validated_data["submit"],
        )
        return self._out(entry, status.HTTP_201_CREATED)

    def update(self, request, pk=None):
        return self._update(request, pk, partial=False)

    def partial_update(self, request, pk=None):
        return self._update(request, pk, partial=True)

    def _update(self, request, pk, *, partial: bool):
        actor = require_actor(request)

        ser = self.get_serializer_class()(data=request.data, partial=partial)
        ser.is_valid(raise_exception=True)

        entry = EntryService.update(actor=actor, log_type=self.log_type, entry_id=pk, data=ser.validated_data)
        return self._out(entry)

    def destroy(self, request, pk=None):
        actor = require_actor(request)
        EntryService.delete(actor=actor, log_type=self.log_type, entry_id=pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=None)
    @action(detail=True, methods=["post"])
    def submit(self, request, pk=None):
        actor = require_actor(request)
        entry = EntryService.submit(actor=actor, log_type=self.log_type, entry_id=pk)
        return self._out(entry)

    @extend_schema(request=InitializeSerializer)
    @action(detail=False, methods=["post"])
    def initialize(self, request):
        actor = require_actor(request)

        ser = InitializeSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        created = EntryService.initialize(actor=actor, log_type=self.log_type, params=ser.validated_data)
        return Response(
            {
                "created_count": len(created),
                "results": self.get_serializer_class()(created, many=True).data,
            },
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )

    # ----------------------------
    # Reviewer actions
    # ----------------------------
    @action(detail=True, methods=["post"])
    def sign(self, request, pk=None):
        actor = require_actor(request)

        ser = sign_serializer_for(self.log_type)(data=request.data)
        ser.is_valid(raise_exception=True)
        data = dict(ser.validated_data)
        remark = data.pop("remark", "")

        entry = EntryService.sign(
            actor=actor,
            log_type=self.log_type,
            entry_id=pk,
            remark=remark,
            review_data=data,
        )
        return self._out(entry)

    @extend_schema(request=RejectSerializer)
    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):
        actor = require_actor(request)

        ser = RejectSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        entry = EntryService.reject(
            actor=actor,
            log_type=self.log_type,
            entry_id=pk,
            remark=ser.validated_data["remark"],
            needs_revision=ser.validated_data["needs_revision"],
        )
        return self._out(entry)

    @extend_schema(request=RevisionSerializer)
    @action(detail=True, methods=["post"], url_path="request-revision")
    def request_revision(self, request, pk=None):
        actor = require_actor(request)

        ser = RevisionSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        entry = EntryService.request_revision(
            actor=actor,
            log_type=self.log_type,
            entry_id=pk,
            remark=ser.validated_data["remark"],
        )
        return self._out(entry)

    @extend_schema(request=BulkSignSerializer, responses={200: dict})
    @action(detail=False, methods=["post"], url_path="bulk-sign")
    def bulk_sign(self, request):
        actor = require_actor(request)

        ser = BulkSignSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        result = EntryService.bulk_sign(
            actor=actor,
            log_type=self.log_type,
            entry_ids=ser.validated_data["ids"],
            remark=ser.validated_data["remark"],
        )
        return Response(result, status=status.HTTP_200_OK)

    # ----------------------------
    # Export
    # ----------------------------
    @extend_schema(
        parameters=[
            OpenApiParameter(
                name="file_format",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=False,
                enum=["csv", "xlsx", "pdf"],
            ),
            OpenApiParameter(
                name="student_id",
                type=OpenApiTypes.UUID,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Required for faculty/HOD; students always export their own entries.",
            ),
        ],
        responses={(200, "application/octet-stream"): OpenApiTypes.BINARY},
    )
    @action(detail=False, methods=["get"])
    def export(self, request):
        actor = require_actor(request)

        q = ExportQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)

        if actor.is_student:
            student_id = actor.profile_id
        else:
            student_id = q.validated_data.get("student_id")
            if student_id is None:
                raise DRFValidationError({"student_id": "This field is required."})

        authorize(Action.VIEW, actor, StudentResource(owner_id=student_id)).enforce()

        student = UserProfile.objects.select_related("user", "batch").filter(id=student_id).first()
        if student is None:
            raise DRFValidationError({"student_id": "Unknown student."})

        export = build_export(
            log_type=self.log_type,
            student=student,
            entries=entries_for_student(log_type=self.log_type, student_id=student_id),
            file_format=q.validated_data["file_format"],
        )
        response = HttpResponse(export.content, content_type=export.content_type)
        response["Content-Disposition"] = f'attachment; filename="{export.filename}"'
        return response


def build_log_entry_viewset(log_type: LogType) -> type[LogEntryViewSet]:
    name = "".join(part.title() for part in log_type.entity_type.split("_")) + "ViewSet"
    viewset = type(name, (LogEntryViewSet,), {"log_type": log_type, "__doc__": f"{log_type.label} log entries."})
    return extend_schema(tags=[f"Logbook: {log_type.label}"])(viewset)


def log_entry_viewsets() -> list[tuple[LogType, type[LogEntryViewSet]]]:
    return [(lt, build_log_entry_viewset(lt)) for lt in all_log_types()]


# ----------------------------
# Sign-off by entity type
# ----------------------------
@extend_schema(tags=["Sign-off"])
class SignOffViewSet(viewsets.ViewSet):
    """
    Review endpoint addressing entries by entity type:
      POST /sign-off/       {entity_type, entity_id, action: sign|reject|needs_revision, remark}
      POST /sign-off/bulk/  {items: [{entity_type, id}], remark}
    """
    permission_classes = [SignOffPermission]

    @extend_schema(request=SignOffSerializer, responses={200: dict})
    def create(self, request):
        actor = require_actor(request)

        ser = SignOffSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        log_type = get_by_entity_type(data["entity_type"])

        if data["action"] == "sign":
            entry = EntryService.sign(actor=actor, log_type=log_type, entry_id=data["entity_id"], remark=data["remark"])
        else:
            entry = EntryService.reject(
                actor=actor,
                log_type=log_type,
                entry_id=data["entity_id"],
                remark=data["remark"],
                needs_revision=data["action"] == "needs_revision",
            )

        return Response(
            {"entity_type": log_type.entity_type, "entity_id": str(entry.pk), "status": entry.status},
            status=status.HTTP_200_OK,
        )

    @extend_schema(request=BulkSignOffSerializer, responses={200: dict})
    @action(detail=False, methods=["post"])
    def bulk(self, request):
        actor = require_actor(request)

        ser = BulkSignOffSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        result = EntryService.bulk_sign_items(
            actor=actor,
            items=ser.validated_data["items"],
            remark=ser.validated_data["remark"],
        )
        return Response(result, status=status.HTTP_200_OK)


# ----------------------------
# Thesis
# ----------------------------
@extend_schema(tags=["Thesis"])
class ThesisView(APIView):
    """
    GET: own thesis (students) or ?student_id= (reviewers, within scope).
    PUT: student sets topic and chief guide.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(
        parameters=[OpenApiParameter(name="student_id", type=OpenApiTypes.UUID, location=OpenApiParameter.QUERY)],
        responses={200: ThesisSerializer},
    )
    def get(self, request):
        actor = require_actor(request)

        student_id = request.query_params.get("student_id") or None
        if student_id:
            student_id = serializers.UUIDField().run_validation(student_id)

        thesis = get_thesis(actor=actor, student_id=student_id)
        return Response(ThesisSerializer(thesis).data)

    @extend_schema(request=ThesisSerializer, responses={200: ThesisSerializer})
    def put(self, request):
        actor = require_actor(request)

        ser = ThesisSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        thesis = ThesisService.save(
            actor=actor,
            topic=ser.validated_data["topic"],
            chief_guide=ser.validated_data.get("chief_guide", ""),
        )
        return Response(ThesisSerializer(get_thesis(actor=actor, student_id=thesis.owner_id)).data)


@extend_schema(tags=["Thesis"])
class ThesisSemesterView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=ThesisSemesterRecordSerializer, responses={200: ThesisSemesterRecordSerializer})
    def put(self, request, semester):
        actor = require_actor(request)

        ser = ThesisSemesterRecordSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        record = ThesisService.save_semester(actor=actor, semester=semester, values=ser.validated_data)
        return Response(ThesisSemesterRecordSerializer(record).data)
