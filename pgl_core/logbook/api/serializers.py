# pgl_core/logbook/api/serializers.py
from __future__ import annotations

from functools import lru_cache
from typing import Type

from rest_framework import serializers

from pgl_core.logbook.models import Thesis, ThesisSemesterRecord
from pgl_core.logbook.registry import LogType, all_log_types

BASE_READ_ONLY = [
    "id",
    "owner_id",
    "owner_name",
    "sl_no",
    "status",
    "faculty_remark",
    "signed_by_id",
    "signed_by_name",
    "signed_at",
    "submitted_at",
    "reviewed_at",
    "auto_reviewed",
    "created_at",
    "updated_at",
]


@lru_cache(maxsize=None)
def entry_serializer_for(log_type: LogType) -> Type[serializers.ModelSerializer]:
    """
    ModelSerializer for one log type: the student-writable fields plus the
    shared read-only review fields.
    """
    extra_read_only = list(log_type.derived_fields) + [f for f in log_type.review_fields if f not in log_type.fields]

    meta = type(
        "Meta",
        (),
        {
            "model": log_type.model,
            "fields": BASE_READ_ONLY + list(log_type.fields) + extra_read_only,
            "read_only_fields": BASE_READ_ONLY + extra_read_only,
        },
    )
    attrs = {
        "Meta": meta,
        "owner_id": serializers.UUIDField(read_only=True),
        "owner_name": serializers.CharField(source="owner.display_name", read_only=True),
        "signed_by_id": serializers.UUIDField(read_only=True, allow_null=True),
        "signed_by_name": serializers.CharField(source="signed_by.display_name", read_only=True, default=None),
    }
    name = "".join(part.title() for part in log_type.entity_type.split("_")) + "EntrySerializer"
    return type(name, (serializers.ModelSerializer,), attrs)


@lru_cache(maxsize=None)
def sign_serializer_for(log_type: LogType) -> Type[serializers.ModelSerializer]:
    """
    Sign payload: optional remark plus the reviewer-only fields of the log type.
    """
    meta = type("Meta", (), {"model": log_type.model, "fields": ["remark"] + list(log_type.review_fields)})
    attrs = {
        "Meta": meta,
        "remark": serializers.CharField(required=False, allow_blank=True, default=""),
    }
    name = "".join(part.title() for part in log_type.entity_type.split("_")) + "SignSerializer"
    return type(name, (serializers.ModelSerializer,), attrs)


class CreateOptionsSerializer(serializers.Serializer):
    submit = serializers.BooleanField(required=False, default=False)


class RejectSerializer(serializers.Serializer):
    remark = serializers.CharField(allow_blank=False, trim_whitespace=True)
    needs_revision = serializers.BooleanField(required=False, default=False)


class RevisionSerializer(serializers.Serializer):
    remark = serializers.CharField(allow_blank=False, trim_whitespace=True)


class BulkSignSerializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False, max_length=500)
    remark = serializers.CharField(required=False, allow_blank=True, default="")


class InitializeSerializer(serializers.Serializer):
    category = serializers.CharField(required=False, allow_blank=True)
    population = serializers.CharField(required=False, allow_blank=True)


class ExportQuerySerializer(serializers.Serializer):
    file_format = serializers.ChoiceField(choices=["csv", "xlsx", "pdf"], default="csv")
    student_id = serializers.UUIDField(required=False)


def _entity_type_choices():
    return sorted(lt.entity_type for lt in all_log_types())


class SignOffSerializer(serializers.Serializer):
    entity_type = serializers.CharField()
    entity_id = serializers.UUIDField()
    action = serializers.ChoiceField(choices=["sign", "reject", "needs_revision"])
    remark = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_entity_type(self, value):
        if value not in _entity_type_choices():
            raise serializers.ValidationError("Unknown log type.")
        return value

    def validate(self, attrs):
        if attrs["action"] != "sign" and not attrs.get("remark", "").strip():
            raise serializers.ValidationError({"remark": "A remark is required when rejecting or requesting revision."})
        return attrs


class SignOffItemSerializer(serializers.Serializer):
    entity_type = serializers.CharField()
    id = serializers.UUIDField()


class BulkSignOffSerializer(serializers.Serializer):
    items = SignOffItemSerializer(many=True, allow_empty=False)
    remark = serializers.CharField(required=False, allow_blank=True, default="")


class ThesisSemesterRecordSerializer(serializers.ModelSerializer):
    class Meta:
        model = ThesisSemesterRecord
        fields = ["id", "semester", "sr_jr_member", "sr_member", "faculty_member", "updated_at"]
        read_only_fields = ["id", "semester", "updated_at"]


class ThesisSerializer(serializers.ModelSerializer):
    owner_id = serializers.UUIDField(read_only=True)
    semester_records = ThesisSemesterRecordSerializer(many=True, read_only=True)

    class Meta:
        model = Thesis
        fields = ["id", "owner_id", "topic", "chief_guide", "semester_records", "created_at", "updated_at"]
        read_only_fields = ["id", "owner_id", "semester_records", "created_at", "updated_at"]
