# pgl_core/reviews/models.py
from django.db import models

from pgl_core.common.models import TimeStampedModel, UUIDModel
from pgl_core.iam.models import SEMESTER_VALIDATORS, UserProfile
from pgl_core.logbook.models import SCORE_VALIDATORS, EntryStatus


class AutoReviewSetting(TimeStampedModel):
    """
    HOD switch per log type: when enabled, submissions are signed by the
    system immediately.
    """
    id = models.BigAutoField(primary_key=True)
    entity_type = models.CharField(max_length=64, unique=True)
    enabled = models.BooleanField(default=False)
    updated_by = models.ForeignKey(
        UserProfile,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        db_table = "reviews_auto_review_setting"
        ordering = ["entity_type"]

    def __str__(self) -> str:
        return f"{self.entity_type}={'on' if self.enabled else 'off'}"


class DepartmentSetting(TimeStampedModel):
    """
    HOD switches that are not tied to one log type.
    """
    EVALUATION_GRAPH_FACULTY = "evaluation_graph_faculty"

    id = models.BigAutoField(primary_key=True)
    key = models.CharField(max_length=64, unique=True)
    enabled = models.BooleanField(default=False)
    updated_by = models.ForeignKey(
        UserProfile,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        db_table = "reviews_department_setting"
        ordering = ["key"]

    def __str__(self) -> str:
        return f"{self.key}={'on' if self.enabled else 'off'}"


class TrainingMentoringRecord(UUIDModel):
    """
    Reviewer-authored five-domain assessment, one per student and semester.
    These are the points of the evaluation graph. The HOD's own records are
    signed on save; faculty records wait for the HOD.
    """
    owner = models.ForeignKey(UserProfile, on_delete=models.CASCADE, related_name="training_records")
    semester = models.PositiveSmallIntegerField(validators=SEMESTER_VALIDATORS)

    knowledge_score = models.PositiveSmallIntegerField(null=True, blank=True, validators=SCORE_VALIDATORS)
    clinical_skill_score = models.PositiveSmallIntegerField(null=True, blank=True, validators=SCORE_VALIDATORS)
    procedural_skill_score = models.PositiveSmallIntegerField(null=True, blank=True, validators=SCORE_VALIDATORS)
    soft_skill_score = models.PositiveSmallIntegerField(null=True, blank=True, validators=SCORE_VALIDATORS)
    research_score = models.PositiveSmallIntegerField(null=True, blank=True, validators=SCORE_VALIDATORS)
    overall_score = models.FloatField(null=True, blank=True)
    remarks = models.TextField(blank=True, default="")

    status = models.CharField(max_length=16, choices=EntryStatus.choices, default=EntryStatus.SUBMITTED)
    evaluated_by = models.ForeignKey(
        UserProfile, on_delete=models.SET_NULL, null=True, blank=True, related_name="+"
    )
    signed_by = models.ForeignKey(UserProfile, on_delete=models.SET_NULL, null=True, blank=True, related_name="+")
    signed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "reviews_training_mentoring_record"
        ordering = ["owner", "semester"]
        constraints = [
            models.UniqueConstraint(fields=["owner", "semester"], name="uq_training_record_semester"),
        ]

    SCORE_FIELDS = (
        "knowledge_score",
        "clinical_skill_score",
        "procedural_skill_score",
        "soft_skill_score",
        "research_score",
    )
