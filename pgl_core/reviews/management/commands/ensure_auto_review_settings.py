# pgl_core/reviews/management/commands/ensure_auto_review_settings.py

from django.core.management.base import BaseCommand

from pgl_core.reviews.services import AutoReviewService


class Command(BaseCommand):
    help = "Ensure one auto-review setting row exists per log type (idempotent, all disabled by default)."

    def handle(self, *args, **options):
        created = AutoReviewService.ensure_rows()
        self.stdout.write(self.style.SUCCESS(f"Auto-review settings ensured. Newly created: {created}"))
