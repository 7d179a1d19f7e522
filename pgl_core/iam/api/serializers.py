# pgl_core/iam/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from pgl_core.iam.models import Batch, FacultyStudentAssignment, UserProfile


class BatchSerializer(serializers.ModelSerializer):
    student_count = serializers.IntegerField(read_only=True, required=False)

    class Meta:
        model = Batch
        fields = [
            "id",
            "name",
            "start_date",
            "end_date",
            "description",
            "current_semester",
            "is_active",
            "student_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "student_count", "created_at", "updated_at"]

    def validate(self, attrs):
        start = attrs.get("start_date", getattr(self.instance, "start_date", None))
        end = attrs.get("end_date", getattr(self.instance, "end_date", None))
        if start and end and end < start:
            raise serializers.ValidationError({"end_date": "End date must be after start date."})
        return attrs


class AssignFacultySerializer(serializers.Serializer):
    faculty_id = serializers.UUIDField()


class AddStudentsSerializer(serializers.Serializer):
    student_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)


class ProfileSerializer(serializers.ModelSerializer):
    subject = serializers.CharField(source="user.username", read_only=True)
    email = serializers.EmailField(source="user.email", read_only=True)
    first_name = serializers.CharField(source="user.first_name", read_only=True)
    last_name = serializers.CharField(source="user.last_name", read_only=True)
    batch_name = serializers.CharField(source="batch.name", read_only=True, default=None)

    class Meta:
        model = UserProfile
        fields = [
            "id",
            "subject",
            "email",
            "first_name",
            "last_name",
            "role",
            "batch",
            "batch_name",
            "current_semester",
            "image_url",
            "is_active",
            "is_banned",
        ]
        # role is owned by the identity provider
        read_only_fields = ["id", "subject", "email", "first_name", "last_name", "role", "image_url", "is_active"]


class FacultyStudentAssignmentSerializer(serializers.ModelSerializer):
    faculty_id = serializers.UUIDField()
    student_id = serializers.UUIDField()
    semester = serializers.IntegerField(min_value=1, max_value=6, default=1)

    class Meta:
        model = FacultyStudentAssignment
        fields = ["id", "faculty_id", "student_id", "semester", "created_at"]
        read_only_fields = ["id", "created_at"]
