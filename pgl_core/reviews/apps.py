# pgl_core/reviews/apps.py
from django.apps import AppConfig


class ReviewsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "pgl_core.reviews"
    label = "reviews"
