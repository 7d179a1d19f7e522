# pgl_core/audit/apps.py
from django.apps import AppConfig


class AuditConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "pgl_core.audit"
    label = "audit"

    def ready(self):
        from pgl_core.audit import subscribers  # noqa: F401
