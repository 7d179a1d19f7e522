# pgl_core/api/urls.py
from __future__ import annotations

from django.urls import path
from rest_framework.routers import DefaultRouter

from pgl_core.audit.api.views import DigitalSignatureViewSet
from pgl_core.common.views import HealthView
from pgl_core.iam.api.me import MeView
from pgl_core.iam.api.views import BatchViewSet, FacultyStudentAssignmentViewSet, ProfileViewSet
from pgl_core.iam.api.webhooks import IdentityWebhookView
from pgl_core.logbook.api.views import SignOffViewSet, ThesisSemesterView, ThesisView, log_entry_viewsets
from pgl_core.reviews.api.views import (
    AutoReviewView,
    DepartmentAnalyticsView,
    EvaluationGraphView,
    FacultyEvaluationAccessView,
    NotificationsSeenView,
    NotificationsView,
    PendingCountsView,
    StudentProgressView,
    TrainingRecordViewSet,
)

router = DefaultRouter()

# One route per registered log type: /logs/<key>/
for log_type, viewset in log_entry_viewsets():
    router.register(rf"logs/{log_type.key}", viewset, basename=f"log-{log_type.key}")

router.register(r"sign-off", SignOffViewSet, basename="sign-off")
router.register(r"signatures", DigitalSignatureViewSet, basename="signatures")
router.register(r"reviews/training-records", TrainingRecordViewSet, basename="training-records")

# Department administration
router.register(r"batches", BatchViewSet, basename="batches")
router.register(r"assignments", FacultyStudentAssignmentViewSet, basename="assignments")
router.register(r"profiles", ProfileViewSet, basename="profiles")

urlpatterns = [
    path("health/", HealthView.as_view(), name="health"),
    path("me/", MeView.as_view(), name="me"),
    path("webhooks/identity/", IdentityWebhookView.as_view(), name="identity-webhook"),

    # Thesis
    path("thesis/", ThesisView.as_view(), name="thesis"),
    path("thesis/semesters/<int:semester>/", ThesisSemesterView.as_view(), name="thesis-semester"),

    # Review dashboards
    path("reviews/pending-counts/", PendingCountsView.as_view(), name="review-pending-counts"),
    path("reviews/evaluation-graph/", EvaluationGraphView.as_view(), name="review-evaluation-graph"),
    path(
        "reviews/evaluation-graph/faculty-access/",
        FacultyEvaluationAccessView.as_view(),
        name="review-evaluation-faculty-access",
    ),
    path(
        "reviews/students/<uuid:student_id>/progress/",
        StudentProgressView.as_view(),
        name="review-student-progress",
    ),
    path("reviews/notifications/", NotificationsView.as_view(), name="review-notifications"),
    path("reviews/notifications/seen/", NotificationsSeenView.as_view(), name="review-notifications-seen"),
    path("reviews/auto-review/", AutoReviewView.as_view(), name="review-auto-review"),
    path("reviews/analytics/department/", DepartmentAnalyticsView.as_view(), name="review-department-analytics"),

    # Router URLs last (so explicit paths win if ever overlapping)
    *router.urls,
]
