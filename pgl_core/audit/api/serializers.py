# pgl_core/audit/api/serializers.py
from rest_framework import serializers

from pgl_core.audit.models import AuditEvent, DigitalSignature


class DigitalSignatureSerializer(serializers.ModelSerializer):
    signer_id = serializers.UUIDField(read_only=True, allow_null=True)
    signer_name = serializers.CharField(source="signer.display_name", read_only=True, default=None)
    student_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = DigitalSignature
        fields = [
            "id",
            "entity_type",
            "entity_id",
            "student_id",
            "signer_id",
            "signer_name",
            "remark",
            "is_automatic",
            "signed_at",
        ]
        read_only_fields = fields


class AuditEventSerializer(serializers.ModelSerializer):
    actor_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = AuditEvent
        fields = [
            "id",
            "event_code",
            "entity_type",
            "entity_id",
            "actor_id",
            "occurred_at",
            "metadata",
        ]
        read_only_fields = fields
