# pgl_core/audit/admin.py
from django.contrib import admin

from pgl_core.audit.models import AuditEvent, DigitalSignature


class ReadOnlyAdmin(admin.ModelAdmin):
    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(DigitalSignature)
class DigitalSignatureAdmin(ReadOnlyAdmin):
    list_display = ("entity_type", "entity_id", "student", "signer", "is_automatic", "signed_at")
    list_filter = ("entity_type", "is_automatic")
    search_fields = ("entity_id", "student__user__email", "signer__user__email")
    ordering = ("-signed_at",)


@admin.register(AuditEvent)
class AuditEventAdmin(ReadOnlyAdmin):
    list_display = ("event_code", "entity_type", "entity_id", "actor", "occurred_at")
    list_filter = ("event_code", "entity_type")
    search_fields = ("event_code", "entity_type", "entity_id")
    readonly_fields = ("occurred_at",)
    ordering = ("-occurred_at",)
