# pgl_core/iam/api/views.py
from __future__ import annotations

from django.db.models import Count, Q
from drf_spectacular.utils import extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from pgl_core.common.permissions import DepartmentAdminPermission
from pgl_core.iam.api.serializers import (
    AddStudentsSerializer,
    AssignFacultySerializer,
    BatchSerializer,
    FacultyStudentAssignmentSerializer,
    ProfileSerializer,
)
from pgl_core.iam.context import require_actor
from pgl_core.iam.models import Batch, FacultyStudentAssignment, UserProfile
from pgl_core.iam.services.assignments import AssignmentService, supervised_student_ids


@extend_schema(tags=["Department"])
class BatchViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.UpdateModelMixin,
    viewsets.GenericViewSet,
):
    """
    Batches: readable by faculty/HOD, managed by HOD.
    """
    permission_classes = [DepartmentAdminPermission]
    serializer_class = BatchSerializer
    queryset = Batch.objects.annotate(student_count=Count("students")).order_by("name")
    filterset_fields = ["is_active", "current_semester"]
    search_fields = ["name"]

    @extend_schema(request=AssignFacultySerializer, responses={201: dict})
    @action(detail=True, methods=["post"], url_path="faculty")
    def assign_faculty(self, request, pk=None):
        batch = self.get_object()
        ser = AssignFacultySerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        assignment = AssignmentService.assign_faculty_to_batch(
            batch=batch,
            faculty_profile_id=ser.validated_data["faculty_id"],
        )
        return Response(
            {"id": str(assignment.id), "batch_id": str(batch.id), "faculty_id": str(assignment.faculty_id)},
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(request=AddStudentsSerializer, responses={200: dict})
    @action(detail=True, methods=["post"], url_path="students")
    def add_students(self, request, pk=None):
        batch = self.get_object()
        ser = AddStudentsSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        moved = AssignmentService.add_students_to_batch(
            batch=batch,
            student_profile_ids=ser.validated_data["student_ids"],
        )
        return Response({"batch_id": str(batch.id), "updated": moved}, status=status.HTTP_200_OK)


@extend_schema(tags=["Department"])
class FacultyStudentAssignmentViewSet(
    mixins.ListModelMixin,
    mixins.CreateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    permission_classes = [DepartmentAdminPermission]
    serializer_class = FacultyStudentAssignmentSerializer
    queryset = FacultyStudentAssignment.objects.order_by("-created_at")
    filterset_fields = ["faculty", "student", "semester"]

    def get_queryset(self):
        qs = super().get_queryset()
        if not self.request.user.is_authenticated:
            return qs.none()
        actor = require_actor(self.request)
        if actor.is_faculty:
            # own assignments plus anything touching a student they supervise
            qs = qs.filter(Q(faculty_id=actor.profile_id) | Q(student_id__in=supervised_student_ids(actor.profile_id)))
        return qs

    def create(self, request, *args, **kwargs):
        ser = self.get_serializer(data=request.data)
        ser.is_valid(raise_exception=True)

        assignment = AssignmentService.assign_faculty_to_student(
            faculty_profile_id=ser.validated_data["faculty_id"],
            student_profile_id=ser.validated_data["student_id"],
            semester=ser.validated_data["semester"],
        )
        return Response(self.get_serializer(assignment).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Department"])
class ProfileViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    viewsets.GenericViewSet,
):
    """
    Local user shadows. HOD may ban/unban, move batch and set semester.
    """
    permission_classes = [DepartmentAdminPermission]
    serializer_class = ProfileSerializer
    queryset = UserProfile.objects.select_related("user", "batch").order_by("user__username")
    filterset_fields = ["role", "batch", "is_banned", "is_active", "current_semester"]
    search_fields = ["user__email", "user__first_name", "user__last_name"]

    def get_queryset(self):
        qs = super().get_queryset()
        if not self.request.user.is_authenticated:
            return qs.none()
        actor = require_actor(self.request)
        if actor.is_faculty:
            qs = qs.filter(Q(id=actor.profile_id) | Q(id__in=supervised_student_ids(actor.profile_id)))
        return qs
