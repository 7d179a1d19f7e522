# pgl_core/logbook/apps.py
from django.apps import AppConfig


class LogbookConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "pgl_core.logbook"
    label = "logbook"

    def ready(self):
        # Registers every LogType; URLs and the review aggregates read the registry
        import pgl_core.logbook.log_types  # noqa: F401
