# pgl_core/audit/models.py
from django.db import models
from django.utils.timezone import now

from pgl_core.iam.models import UserProfile


class AppendOnlyError(Exception):
    """Raised on any attempt to change or remove an audit row."""


class AppendOnlyQuerySet(models.QuerySet):
    def update(self, **kwargs):
        raise AppendOnlyError(f"{self.model.__name__} rows cannot be updated.")

    def delete(self):
        raise AppendOnlyError(f"{self.model.__name__} rows cannot be deleted.")


class AppendOnlyModel(models.Model):
    objects = AppendOnlyQuerySet.as_manager()

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise AppendOnlyError(f"{self.__class__.__name__} rows cannot be updated.")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise AppendOnlyError(f"{self.__class__.__name__} rows cannot be deleted.")


class DigitalSignature(AppendOnlyModel):
    """
    One row per signed logbook entry. `signer` is null for automatic sign-off.
    """
    id = models.BigAutoField(primary_key=True)

    entity_type = models.CharField(max_length=64, db_index=True)  # e.g. "procedure"
    entity_id = models.UUIDField(db_index=True)

    signer = models.ForeignKey(
        UserProfile,
        on_delete=models.PROTECT,
        related_name="signatures",
        null=True,
        blank=True,
    )
    student = models.ForeignKey(UserProfile, on_delete=models.PROTECT, related_name="received_signatures")

    remark = models.TextField(blank=True, default="")
    is_automatic = models.BooleanField(default=False)
    signed_at = models.DateTimeField(default=now, db_index=True)

    class Meta:
        db_table = "audit_digital_signature"
        constraints = [
            models.UniqueConstraint(fields=["entity_type", "entity_id"], name="uq_signature_per_entity"),
        ]
        indexes = [
            models.Index(fields=["student", "signed_at"]),
        ]

    def __str__(self) -> str:
        return f"{self.entity_type}:{self.entity_id}"


class AuditEvent(AppendOnlyModel):
    """
    Immutable logbook timeline: create, edit, submit, sign, reject, revision, delete.
    """
    id = models.BigAutoField(primary_key=True)

    event_code = models.CharField(max_length=128, db_index=True)  # e.g. "entry.signed"
    entity_type = models.CharField(max_length=64, db_index=True)
    entity_id = models.UUIDField(db_index=True)

    actor = models.ForeignKey(
        UserProfile,
        on_delete=models.PROTECT,
        related_name="audit_events",
        null=True,
        blank=True,
    )

    occurred_at = models.DateTimeField(auto_now_add=True, db_index=True)
    metadata = models.JSONField(default=dict)

    class Meta:
        db_table = "audit_audit_event"
        indexes = [
            models.Index(fields=["entity_type", "entity_id"]),
            models.Index(fields=["event_code", "occurred_at"]),
        ]
