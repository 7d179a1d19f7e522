# pgl_core/reviews/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from pgl_core.reviews.models import TrainingMentoringRecord


class StudentQuerySerializer(serializers.Serializer):
    student_id = serializers.UUIDField(required=False)


class AutoReviewToggleSerializer(serializers.Serializer):
    entity_type = serializers.CharField(max_length=64)
    enabled = serializers.BooleanField()


class NotificationItemSerializer(serializers.Serializer):
    entity_type = serializers.CharField()
    entity_id = serializers.UUIDField()
    label = serializers.CharField()
    sl_no = serializers.IntegerField()
    status = serializers.CharField()
    remark = serializers.CharField(allow_blank=True)
    reviewed_at = serializers.DateTimeField()


class NotificationsSerializer(serializers.Serializer):
    unseen_count = serializers.IntegerField()
    results = NotificationItemSerializer(many=True)


class FacultyEvaluationToggleSerializer(serializers.Serializer):
    enabled = serializers.BooleanField()


def _score():
    return serializers.IntegerField(min_value=1, max_value=5, required=False, allow_null=True)


class TrainingRecordWriteSerializer(serializers.Serializer):
    student_id = serializers.UUIDField()
    semester = serializers.IntegerField(min_value=1, max_value=6)
    knowledge_score = _score()
    clinical_skill_score = _score()
    procedural_skill_score = _score()
    soft_skill_score = _score()
    research_score = _score()
    remarks = serializers.CharField(required=False, allow_blank=True, default="")


class TrainingRecordSerializer(serializers.ModelSerializer):
    owner_id = serializers.UUIDField(read_only=True)
    owner_name = serializers.CharField(source="owner.display_name", read_only=True)
    evaluated_by_id = serializers.UUIDField(read_only=True, allow_null=True)
    signed_by_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = TrainingMentoringRecord
        fields = [
            "id",
            "owner_id",
            "owner_name",
            "semester",
            "knowledge_score",
            "clinical_skill_score",
            "procedural_skill_score",
            "soft_skill_score",
            "research_score",
            "overall_score",
            "remarks",
            "status",
            "evaluated_by_id",
            "signed_by_id",
            "signed_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class TrainingRecordSignSerializer(serializers.Serializer):
    remark = serializers.CharField(required=False, allow_blank=True, default="")


class TrainingRecordBulkSignSerializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)
    remark = serializers.CharField(required=False, allow_blank=True, default="")
