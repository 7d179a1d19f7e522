# pgl_core/logbook/log_types.py
"""
Registered log types. Imported once from LogbookConfig.ready().
"""
from __future__ import annotations

from typing import Any, Dict, List

from django.core.exceptions import ValidationError

from pgl_core.logbook.constants import (
    CASE_CATEGORY_MAP,
    CLINICAL_SKILLS,
    DIAGNOSTIC_SKILLS,
    IMAGING_CATEGORY_MAP,
    PROCEDURE_CATEGORY_MAP,
    ROTATION_POSTING_MAP,
    STANDARD_SKILL_LEVELS,
    DiagnosticCategory,
    PatientCategory,
    SkillPopulation,
    case_sub_categories,
    diagnostic_skills_for,
    skill_levels_for_procedure,
)
from pgl_core.logbook.models import (
    BadNewsLog,
    CaseManagementLog,
    CasePresentation,
    ClinicalSkillLog,
    ConferenceParticipation,
    ConsentLog,
    CourseAttended,
    DiagnosticSkillLog,
    DisasterDrill,
    ImagingLog,
    JournalClub,
    ProcedureLog,
    QualityImprovement,
    ResearchActivity,
    ResidentEvaluation,
    RotationPostingLog,
    Seminar,
    TransportLog,
)
from pgl_core.logbook.registry import LogType, register

Errors = Dict[str, List[str]]

REQUIRED = "This field is required."

PATIENT_COLUMNS = (
    ("date", "Date"),
    ("patient_info", "Patient Name / Age / Sex / UHID"),
    ("complete_diagnosis", "Complete Diagnosis"),
)
REVIEW_COLUMNS = (
    ("status", "Status"),
    ("faculty_remark", "Faculty Remark"),
    ("signed_at", "Signed At"),
)


def _require_known(values: Dict[str, Any], errors: Errors, known, message: str) -> str:
    category = values.get("category") or ""
    if not category:
        errors["category"] = [REQUIRED]
    elif category not in known:
        errors["category"] = [message]
    return category


# -------------------------
# clean hooks
# -------------------------
def clean_case_management(values, *, owner_id, instance) -> Errors:
    errors: Errors = {}
    category = _require_known(values, errors, CASE_CATEGORY_MAP, "Unknown case category.")

    sub = values.get("sub_category")
    if sub and "category" not in errors and sub not in case_sub_categories(category):
        errors["sub_category"] = ["Not a sub-category of the selected case category."]
    return errors


def clean_procedure(values, *, owner_id, instance) -> Errors:
    errors: Errors = {}
    category = _require_known(values, errors, PROCEDURE_CATEGORY_MAP, "Unknown procedure category.")

    level = values.get("skill_level")
    if level and "category" not in errors and level not in skill_levels_for_procedure(category):
        allowed = "/".join(sorted(skill_levels_for_procedure(category)))
        errors["skill_level"] = [f"Skill level must be one of {allowed} for this procedure."]
    return errors


def clean_imaging(values, *, owner_id, instance) -> Errors:
    errors: Errors = {}
    _require_known(values, errors, IMAGING_CATEGORY_MAP, "Unknown imaging category.")
    errors.update(clean_skill_level(values, owner_id=owner_id, instance=instance))
    return errors


def clean_patient_category(values, *, owner_id, instance) -> Errors:
    category = values.get("category")
    if category and category not in PatientCategory.values:
        return {"category": ["Unknown patient category."]}
    return {}


def clean_rotation(values, *, owner_id, instance) -> Errors:
    errors: Errors = {}

    name = values.get("rotation_name")
    if name:
        posting = ROTATION_POSTING_MAP.get(name)
        if posting is None:
            errors["rotation_name"] = ["Unknown rotation posting."]
        else:
            values["is_elective"] = posting.is_elective

    start, end = values.get("start_date"), values.get("end_date")
    if start and end and end < start:
        errors["end_date"] = ["End date must be after start date."]
    return errors


def clean_clinical_skill(values, *, owner_id, instance) -> Errors:
    errors: Errors = {}
    _require_known(values, errors, SkillPopulation.values, "Population must be ADULT or PEDIATRIC.")

    skill = values.get("skill_name")
    if skill and skill not in CLINICAL_SKILLS:
        errors["skill_name"] = ["Unknown clinical skill."]
    return errors


def clean_diagnostic_skill(values, *, owner_id, instance) -> Errors:
    errors: Errors = {}
    category = _require_known(values, errors, DIAGNOSTIC_SKILLS, "Unknown diagnostic category.")

    skill = values.get("skill_name")
    if skill and "category" not in errors and skill not in diagnostic_skills_for(category):
        errors["skill_name"] = ["Not a skill of the selected diagnostic category."]
    return errors


def clean_skill_level(values, *, owner_id, instance) -> Errors:
    level = values.get("skill_level")
    if level and level not in STANDARD_SKILL_LEVELS:
        return {"skill_level": ["Skill level must be one of S/O/A/PS/PI."]}
    return {}


def clean_evaluation(values, *, owner_id, instance) -> Errors:
    semester, review_no = values.get("semester"), values.get("review_no")
    if not semester or not review_no:
        return {}

    qs = ResidentEvaluation.objects.filter(owner_id=owner_id, semester=semester, review_no=review_no)
    if instance is not None:
        qs = qs.exclude(pk=instance.pk)
    if qs.exists():
        return {"review_no": [f"Review {review_no} for semester {semester} already exists."]}
    return {}


# -------------------------
# initial rows
# -------------------------
def case_management_rows(params: Dict[str, Any]) -> List[Dict[str, Any]]:
    category = params.get("category") or ""
    if category not in CASE_CATEGORY_MAP:
        raise ValidationError({"category": ["Unknown case category."]})
    return [{"category": category, "sub_category": sub} for sub in case_sub_categories(category)]


def clinical_skill_rows(params: Dict[str, Any]) -> List[Dict[str, Any]]:
    population = params.get("population") or params.get("category") or ""
    if population not in SkillPopulation.values:
        raise ValidationError({"population": ["Population must be ADULT or PEDIATRIC."]})
    return [{"category": population, "skill_name": skill} for skill in CLINICAL_SKILLS]


def diagnostic_skill_rows(params: Dict[str, Any]) -> List[Dict[str, Any]]:
    category = params.get("category") or ""
    if category not in DiagnosticCategory.values:
        raise ValidationError({"category": ["Unknown diagnostic category."]})
    return [{"category": category, "skill_name": skill} for skill in diagnostic_skills_for(category)]


def _procedure_cap(category: str):
    found = PROCEDURE_CATEGORY_MAP.get(category)
    return found.max_entries if found else None


def _imaging_cap(category: str):
    found = IMAGING_CATEGORY_MAP.get(category)
    return found.max_entries if found else None


# -------------------------
# registrations
# -------------------------
CASE_MANAGEMENT = register(
    LogType(
        key="case-management",
        entity_type="case_management",
        model=CaseManagementLog,
        label="Case Management",
        fields=("category", "sub_category", "date", "patient_info", "complete_diagnosis", "competency_level"),
        required_on_submit=("sub_category", "date", "patient_info", "complete_diagnosis", "competency_level"),
        clean=clean_case_management,
        initial_rows=case_management_rows,
        export_columns=(("category", "Category"), ("sub_category", "Case"))
        + PATIENT_COLUMNS
        + (("competency_level", "CBD/S/O/MS/MI"),)
        + REVIEW_COLUMNS,
    )
)

PROCEDURES = register(
    LogType(
        key="procedures",
        entity_type="procedure",
        model=ProcedureLog,
        label="Procedures",
        fields=(
            "category",
            "date",
            "patient_info",
            "complete_diagnosis",
            "procedure_description",
            "performed_at_location",
            "skill_level",
        ),
        required_on_submit=("date", "patient_info", "complete_diagnosis", "skill_level"),
        max_entries=_procedure_cap,
        clean=clean_procedure,
        export_columns=(("category", "Procedure"),)
        + PATIENT_COLUMNS
        + (("performed_at_location", "Location"), ("skill_level", "Skill Level"))
        + REVIEW_COLUMNS,
    )
)

IMAGING = register(
    LogType(
        key="imaging",
        entity_type="imaging",
        model=ImagingLog,
        label="Imaging",
        fields=(
            "category",
            "date",
            "patient_info",
            "complete_diagnosis",
            "procedure_description",
            "performed_at_location",
            "skill_level",
        ),
        required_on_submit=("date", "patient_info", "complete_diagnosis", "skill_level"),
        max_entries=_imaging_cap,
        clean=clean_imaging,
        export_columns=(("category", "Imaging"),)
        + PATIENT_COLUMNS
        + (("skill_level", "Skill Level"),)
        + REVIEW_COLUMNS,
    )
)

CASE_PRESENTATIONS = register(
    LogType(
        key="case-presentations",
        entity_type="case_presentation",
        model=CasePresentation,
        label="Case Presentations",
        fields=("category", "date", "patient_info", "complete_diagnosis"),
        required_on_submit=("category", "date", "patient_info", "complete_diagnosis"),
        clean=clean_patient_category,
        export_columns=PATIENT_COLUMNS + (("category", "Category"),) + REVIEW_COLUMNS,
    )
)

SEMINARS = register(
    LogType(
        key="seminars",
        entity_type="seminar",
        model=Seminar,
        label="Seminars",
        fields=("category", "date", "patient_info", "complete_diagnosis"),
        required_on_submit=("category", "date", "patient_info", "complete_diagnosis"),
        clean=clean_patient_category,
        export_columns=PATIENT_COLUMNS + (("category", "Category"),) + REVIEW_COLUMNS,
    )
)

JOURNAL_CLUBS = register(
    LogType(
        key="journal-clubs",
        entity_type="journal_club",
        model=JournalClub,
        label="Journal Clubs",
        fields=("date", "journal_article", "type_of_study"),
        required_on_submit=("date", "journal_article"),
        export_columns=(("date", "Date"), ("journal_article", "Journal Article"), ("type_of_study", "Type of Study"))
        + REVIEW_COLUMNS,
    )
)

ROTATION_POSTINGS = register(
    LogType(
        key="rotation-postings",
        entity_type="rotation_posting",
        model=RotationPostingLog,
        label="Rotation Postings",
        fields=("rotation_name", "start_date", "end_date", "total_duration"),
        derived_fields=("is_elective",),
        required_on_submit=("rotation_name", "start_date", "end_date"),
        clean=clean_rotation,
        export_columns=(
            ("rotation_name", "Rotation"),
            ("is_elective", "Elective"),
            ("start_date", "From"),
            ("end_date", "To"),
            ("total_duration", "Duration"),
        )
        + REVIEW_COLUMNS,
    )
)

CLINICAL_SKILLS_LOG = register(
    LogType(
        key="clinical-skills",
        entity_type="clinical_skill",
        model=ClinicalSkillLog,
        label="Clinical Skills",
        fields=("category", "skill_name", "representative_diagnosis", "confidence_level", "total_times_performed"),
        required_on_submit=("skill_name", "confidence_level", "total_times_performed"),
        clean=clean_clinical_skill,
        initial_rows=clinical_skill_rows,
        export_columns=(
            ("category", "Population"),
            ("skill_name", "Skill"),
            ("representative_diagnosis", "Representative Diagnosis"),
            ("confidence_level", "VC/FC/SC/NC"),
            ("total_times_performed", "Times Performed"),
        )
        + REVIEW_COLUMNS,
    )
)

EVALUATIONS = register(
    LogType(
        key="evaluations",
        entity_type="resident_evaluation",
        model=ResidentEvaluation,
        label="Resident Evaluations",
        fields=("semester", "review_no", "description", "role_in_activity"),
        required_on_submit=("semester", "review_no", "description"),
        review_fields=ResidentEvaluation.DOMAIN_SCORE_FIELDS + ("theory_marks", "practical_marks"),
        required_on_sign=ResidentEvaluation.DOMAIN_SCORE_FIELDS,
        clean=clean_evaluation,
        export_columns=(
            ("semester", "Semester"),
            ("review_no", "Review"),
            ("description", "Description"),
            ("knowledge_score", "Knowledge"),
            ("clinical_skill_score", "Clinical Skills"),
            ("procedural_skill_score", "Procedural Skills"),
            ("soft_skill_score", "Soft Skills"),
            ("research_score", "Research"),
            ("theory_marks", "Theory"),
            ("practical_marks", "Practical"),
        )
        + REVIEW_COLUMNS,
    )
)

DIAGNOSTIC_SKILLS_LOG = register(
    LogType(
        key="diagnostic-skills",
        entity_type="diagnostic_skill",
        model=DiagnosticSkillLog,
        label="Diagnostic Skills",
        fields=("category", "skill_name", "representative_diagnosis", "confidence_level", "total_times_performed"),
        required_on_submit=("skill_name", "confidence_level", "total_times_performed"),
        clean=clean_diagnostic_skill,
        initial_rows=diagnostic_skill_rows,
        export_columns=(
            ("category", "Category"),
            ("skill_name", "Skill"),
            ("representative_diagnosis", "Representative Diagnosis"),
            ("confidence_level", "VC/FC/SC/NC"),
            ("total_times_performed", "Times Performed"),
        )
        + REVIEW_COLUMNS,
    )
)

LIFE_SUPPORT_COURSES = register(
    LogType(
        key="life-support-courses",
        entity_type="course_attended",
        model=CourseAttended,
        label="Life Support Courses",
        fields=("date", "course_name", "conducted_at", "confidence_level"),
        required_on_submit=("date", "course_name"),
        export_columns=(
            ("date", "Date"),
            ("course_name", "Course"),
            ("conducted_at", "Conducted At"),
            ("confidence_level", "VC/FC/SC/NC"),
        )
        + REVIEW_COLUMNS,
    )
)

CONFERENCES = register(
    LogType(
        key="conferences",
        entity_type="conference_participation",
        model=ConferenceParticipation,
        label="Conferences",
        fields=("date", "conference_name", "conducted_at", "participation_role"),
        required_on_submit=("date", "conference_name"),
        export_columns=(
            ("date", "Date"),
            ("conference_name", "Conference"),
            ("conducted_at", "Conducted At"),
            ("participation_role", "Role"),
        )
        + REVIEW_COLUMNS,
    )
)

RESEARCH_ACTIVITIES = register(
    LogType(
        key="research-activities",
        entity_type="research_activity",
        model=ResearchActivity,
        label="Research Activities",
        fields=("date", "activity", "conducted_at", "participation_role"),
        required_on_submit=("date", "activity"),
        export_columns=(
            ("date", "Date"),
            ("activity", "Activity"),
            ("conducted_at", "Conducted At"),
            ("participation_role", "Role"),
        )
        + REVIEW_COLUMNS,
    )
)

ACTIVITY_COLUMNS = (("date", "Date"), ("description", "Description"), ("role_in_activity", "Role"))

DISASTER_DRILLS = register(
    LogType(
        key="disaster-drills",
        entity_type="disaster_drill",
        model=DisasterDrill,
        label="Disaster Drills",
        fields=("date", "description", "role_in_activity"),
        required_on_submit=("date", "description"),
        export_columns=ACTIVITY_COLUMNS + REVIEW_COLUMNS,
    )
)

QUALITY_IMPROVEMENT = register(
    LogType(
        key="quality-improvement",
        entity_type="quality_improvement",
        model=QualityImprovement,
        label="Quality Improvement",
        fields=("date", "description", "role_in_activity"),
        required_on_submit=("date", "description"),
        export_columns=ACTIVITY_COLUMNS + REVIEW_COLUMNS,
    )
)

# Transport, consent and bad news logs share one shape.
PERFORMED_SKILL_FIELDS = (
    "date",
    "patient_info",
    "complete_diagnosis",
    "procedure_description",
    "performed_at_location",
    "skill_level",
)
PERFORMED_SKILL_COLUMNS = PATIENT_COLUMNS + (
    ("procedure_description", "Description"),
    ("performed_at_location", "Location"),
    ("skill_level", "S/O/A/PS/PI"),
)

TRANSPORT_LOGS = register(
    LogType(
        key="transport-logs",
        entity_type="transport_log",
        model=TransportLog,
        label="Patient Transport",
        fields=PERFORMED_SKILL_FIELDS,
        required_on_submit=("date", "patient_info", "complete_diagnosis", "skill_level"),
        clean=clean_skill_level,
        export_columns=PERFORMED_SKILL_COLUMNS + REVIEW_COLUMNS,
    )
)

CONSENT_LOGS = register(
    LogType(
        key="consent-logs",
        entity_type="consent_log",
        model=ConsentLog,
        label="Informed Consent",
        fields=PERFORMED_SKILL_FIELDS,
        required_on_submit=("date", "patient_info", "complete_diagnosis", "skill_level"),
        clean=clean_skill_level,
        export_columns=PERFORMED_SKILL_COLUMNS + REVIEW_COLUMNS,
    )
)

BAD_NEWS_LOGS = register(
    LogType(
        key="bad-news-logs",
        entity_type="bad_news_log",
        model=BadNewsLog,
        label="Breaking Bad News",
        fields=PERFORMED_SKILL_FIELDS,
        required_on_submit=("date", "patient_info", "complete_diagnosis", "skill_level"),
        clean=clean_skill_level,
        export_columns=PERFORMED_SKILL_COLUMNS + REVIEW_COLUMNS,
    )
)
