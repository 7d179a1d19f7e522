# pgl_core/logbook/models.py
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from pgl_core.common.models import UUIDModel
from pgl_core.iam.models import SEMESTER_VALIDATORS, UserProfile
from pgl_core.logbook.constants import CompetencyLevel, ConfidenceLevel, SkillLevel


class EntryStatus(models.TextChoices):
    DRAFT = "DRAFT", "Draft"
    SUBMITTED = "SUBMITTED", "Submitted"
    SIGNED = "SIGNED", "Signed"
    REJECTED = "REJECTED", "Rejected"
    NEEDS_REVISION = "NEEDS_REVISION", "Needs Revision"


EDITABLE_STATUSES = frozenset({EntryStatus.DRAFT.value, EntryStatus.NEEDS_REVISION.value})
SUBMITTABLE_STATUSES = EDITABLE_STATUSES

SCORE_VALIDATORS = [MinValueValidator(1), MaxValueValidator(5)]


class LogEntry(UUIDModel):
    """
    Shared shape of every logbook table.

    The owner edits while the entry is DRAFT or NEEDS_REVISION; a supervising
    faculty member or the HOD moves it out of SUBMITTED exactly once.
    """
    owner = models.ForeignKey(UserProfile, on_delete=models.CASCADE, related_name="%(class)s_entries")
    sl_no = models.PositiveIntegerField(default=1)

    category = models.CharField(max_length=64, blank=True, default="", db_index=True)
    sub_category = models.CharField(max_length=255, blank=True, default="")

    status = models.CharField(
        max_length=32,
        choices=EntryStatus.choices,
        default=EntryStatus.DRAFT,
        db_index=True,
    )

    faculty_remark = models.TextField(blank=True, default="")
    signed_by = models.ForeignKey(
        UserProfile,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    signed_at = models.DateTimeField(null=True, blank=True)
    submitted_at = models.DateTimeField(null=True, blank=True)
    # last sign / reject / revision request; owner edits leave it alone
    reviewed_at = models.DateTimeField(null=True, blank=True)
    auto_reviewed = models.BooleanField(default=False)

    class Meta:
        abstract = True
        ordering = ["sl_no", "created_at"]

    @property
    def is_signed(self) -> bool:
        return self.status == EntryStatus.SIGNED

    @property
    def is_editable(self) -> bool:
        return self.status in EDITABLE_STATUSES


class PatientEncounterFields(models.Model):
    date = models.DateField(null=True, blank=True)
    patient_info = models.CharField(max_length=255, blank=True, default="")  # name / age / sex / UHID
    complete_diagnosis = models.TextField(blank=True, default="")

    class Meta:
        abstract = True


class PerformedSkillFields(models.Model):
    procedure_description = models.TextField(blank=True, default="")
    performed_at_location = models.CharField(max_length=128, blank=True, default="")
    skill_level = models.CharField(max_length=8, choices=SkillLevel.choices, blank=True, default="")

    class Meta:
        abstract = True


class CaseManagementLog(LogEntry, PatientEncounterFields):
    """category = case category code, sub_category = one of its sub-types."""
    competency_level = models.CharField(max_length=8, choices=CompetencyLevel.choices, blank=True, default="")

    class Meta(LogEntry.Meta):
        db_table = "logbook_case_management"


class ProcedureLog(LogEntry, PatientEncounterFields, PerformedSkillFields):
    class Meta(LogEntry.Meta):
        db_table = "logbook_procedure"


class ImagingLog(LogEntry, PatientEncounterFields, PerformedSkillFields):
    class Meta(LogEntry.Meta):
        db_table = "logbook_imaging"


class CasePresentation(LogEntry, PatientEncounterFields):
    """category = PatientCategory."""

    class Meta(LogEntry.Meta):
        db_table = "logbook_case_presentation"


class Seminar(LogEntry, PatientEncounterFields):
    """Seminar / evidence based discussion presented. category = PatientCategory."""

    class Meta(LogEntry.Meta):
        db_table = "logbook_seminar"


class JournalClub(LogEntry):
    date = models.DateField(null=True, blank=True)
    journal_article = models.TextField(blank=True, default="")
    type_of_study = models.CharField(max_length=128, blank=True, default="")

    class Meta(LogEntry.Meta):
        db_table = "logbook_journal_club"


class RotationPostingLog(LogEntry):
    rotation_name = models.CharField(max_length=255, blank=True, default="")
    is_elective = models.BooleanField(default=False)
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)
    total_duration = models.CharField(max_length=64, blank=True, default="")

    class Meta(LogEntry.Meta):
        db_table = "logbook_rotation_posting"


class ClinicalSkillLog(LogEntry):
    """category = SkillPopulation (ADULT / PEDIATRIC)."""
    skill_name = models.CharField(max_length=255, blank=True, default="")
    representative_diagnosis = models.TextField(blank=True, default="")
    confidence_level = models.CharField(max_length=8, choices=ConfidenceLevel.choices, blank=True, default="")
    total_times_performed = models.PositiveIntegerField(null=True, blank=True)

    class Meta(LogEntry.Meta):
        db_table = "logbook_clinical_skill"


class ResidentEvaluation(LogEntry):
    """
    Semester review. The resident describes the period; the scores and marks
    are filled by the reviewer at sign-off.
    """
    semester = models.PositiveSmallIntegerField(null=True, blank=True, validators=SEMESTER_VALIDATORS)
    review_no = models.PositiveSmallIntegerField(
        null=True, blank=True, validators=[MinValueValidator(1), MaxValueValidator(2)]
    )
    description = models.TextField(blank=True, default="")
    role_in_activity = models.CharField(max_length=255, blank=True, default="")

    knowledge_score = models.PositiveSmallIntegerField(null=True, blank=True, validators=SCORE_VALIDATORS)
    clinical_skill_score = models.PositiveSmallIntegerField(null=True, blank=True, validators=SCORE_VALIDATORS)
    procedural_skill_score = models.PositiveSmallIntegerField(null=True, blank=True, validators=SCORE_VALIDATORS)
    soft_skill_score = models.PositiveSmallIntegerField(null=True, blank=True, validators=SCORE_VALIDATORS)
    research_score = models.PositiveSmallIntegerField(null=True, blank=True, validators=SCORE_VALIDATORS)
    theory_marks = models.CharField(max_length=32, blank=True, default="")
    practical_marks = models.CharField(max_length=32, blank=True, default="")

    class Meta(LogEntry.Meta):
        db_table = "logbook_resident_evaluation"

    DOMAIN_SCORE_FIELDS = (
        "knowledge_score",
        "clinical_skill_score",
        "procedural_skill_score",
        "soft_skill_score",
        "research_score",
    )


class DiagnosticSkillLog(LogEntry):
    """category = DiagnosticCategory (ABG / ECG / other)."""
    skill_name = models.CharField(max_length=255, blank=True, default="")
    representative_diagnosis = models.TextField(blank=True, default="")
    confidence_level = models.CharField(max_length=8, choices=ConfidenceLevel.choices, blank=True, default="")
    total_times_performed = models.PositiveIntegerField(null=True, blank=True)

    class Meta(LogEntry.Meta):
        db_table = "logbook_diagnostic_skill"


# -------------------------
# Courses, conferences and research
# -------------------------
class CourseAttended(LogEntry):
    """Life support and other certified courses."""
    date = models.DateField(null=True, blank=True)
    course_name = models.CharField(max_length=255, blank=True, default="")
    conducted_at = models.CharField(max_length=255, blank=True, default="")
    confidence_level = models.CharField(max_length=8, choices=ConfidenceLevel.choices, blank=True, default="")

    class Meta(LogEntry.Meta):
        db_table = "logbook_course_attended"


class ConferenceParticipation(LogEntry):
    date = models.DateField(null=True, blank=True)
    conference_name = models.CharField(max_length=255, blank=True, default="")
    conducted_at = models.CharField(max_length=255, blank=True, default="")
    participation_role = models.CharField(max_length=255, blank=True, default="")

    class Meta(LogEntry.Meta):
        db_table = "logbook_conference_participation"


class ResearchActivity(LogEntry):
    date = models.DateField(null=True, blank=True)
    activity = models.TextField(blank=True, default="")
    conducted_at = models.CharField(max_length=255, blank=True, default="")
    participation_role = models.CharField(max_length=255, blank=True, default="")

    class Meta(LogEntry.Meta):
        db_table = "logbook_research_activity"


class DepartmentActivityFields(models.Model):
    date = models.DateField(null=True, blank=True)
    description = models.TextField(blank=True, default="")
    role_in_activity = models.CharField(max_length=255, blank=True, default="")

    class Meta:
        abstract = True


class DisasterDrill(LogEntry, DepartmentActivityFields):
    class Meta(LogEntry.Meta):
        db_table = "logbook_disaster_drill"


class QualityImprovement(LogEntry, DepartmentActivityFields):
    class Meta(LogEntry.Meta):
        db_table = "logbook_quality_improvement"


# -------------------------
# Transport, consent and breaking bad news
# -------------------------
class TransportLog(LogEntry, PatientEncounterFields, PerformedSkillFields):
    class Meta(LogEntry.Meta):
        db_table = "logbook_transport"


class ConsentLog(LogEntry, PatientEncounterFields, PerformedSkillFields):
    class Meta(LogEntry.Meta):
        db_table = "logbook_consent"


class BadNewsLog(LogEntry, PatientEncounterFields, PerformedSkillFields):
    class Meta(LogEntry.Meta):
        db_table = "logbook_bad_news"


# -------------------------
# Thesis (no review workflow)
# -------------------------
class Thesis(UUIDModel):
    owner = models.OneToOneField(UserProfile, on_delete=models.CASCADE, related_name="thesis")
    topic = models.TextField()
    chief_guide = models.CharField(max_length=255, blank=True, default="")

    class Meta:
        db_table = "logbook_thesis"

    def __str__(self) -> str:
        return f"{self.owner_id}: {self.topic[:40]}"


class ThesisSemesterRecord(UUIDModel):
    """Research committee members for one semester of the thesis."""
    thesis = models.ForeignKey(Thesis, on_delete=models.CASCADE, related_name="semester_records")
    semester = models.PositiveSmallIntegerField(validators=SEMESTER_VALIDATORS)
    sr_jr_member = models.CharField(max_length=255, blank=True, default="")
    sr_member = models.CharField(max_length=255, blank=True, default="")
    faculty_member = models.CharField(max_length=255, blank=True, default="")

    class Meta:
        db_table = "logbook_thesis_semester_record"
        ordering = ["semester"]
        constraints = [
            models.UniqueConstraint(fields=["thesis", "semester"], name="uq_thesis_semester"),
        ]


__all__ = [
    "EntryStatus",
    "LogEntry",
    "CaseManagementLog",
    "ProcedureLog",
    "ImagingLog",
    "CasePresentation",
    "Seminar",
    "JournalClub",
    "RotationPostingLog",
    "ClinicalSkillLog",
    "DiagnosticSkillLog",
    "CourseAttended",
    "ConferenceParticipation",
    "ResearchActivity",
    "DisasterDrill",
    "QualityImprovement",
    "TransportLog",
    "ConsentLog",
    "BadNewsLog",
    "ResidentEvaluation",
    "Thesis",
    "ThesisSemesterRecord",
]
