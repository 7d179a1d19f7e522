# pgl_core/logbook/admin.py
from __future__ import annotations

from django.contrib import admin

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
    Thesis,
    ThesisSemesterRecord,
    TransportLog,
)


class LogEntryAdmin(admin.ModelAdmin):
    list_display = ("id", "owner", "sl_no", "category", "status", "signed_by", "signed_at", "created_at")
    list_filter = ("status", "auto_reviewed")
    search_fields = ("id", "owner__user__email", "owner__user__username", "category")
    readonly_fields = ("created_at", "updated_at", "signed_at", "submitted_at", "reviewed_at")
    raw_id_fields = ("owner", "signed_by")
    ordering = ("owner", "sl_no")


for model in (
    CaseManagementLog,
    ProcedureLog,
    ImagingLog,
    CasePresentation,
    Seminar,
    JournalClub,
    CourseAttended,
    ConferenceParticipation,
    ResearchActivity,
    DisasterDrill,
    QualityImprovement,
    TransportLog,
    ConsentLog,
    BadNewsLog,
):
    admin.site.register(model, LogEntryAdmin)


@admin.register(RotationPostingLog)
class RotationPostingLogAdmin(LogEntryAdmin):
    list_display = ("id", "owner", "rotation_name", "is_elective", "start_date", "end_date", "status")
    list_filter = ("status", "is_elective")


@admin.register(ClinicalSkillLog, DiagnosticSkillLog)
class SkillLogAdmin(LogEntryAdmin):
    list_display = ("id", "owner", "category", "skill_name", "confidence_level", "status")


@admin.register(ResidentEvaluation)
class ResidentEvaluationAdmin(LogEntryAdmin):
    list_display = ("id", "owner", "semester", "review_no", "status", "signed_by", "signed_at")
    list_filter = ("status", "semester")


class ThesisSemesterRecordInline(admin.TabularInline):
    model = ThesisSemesterRecord
    extra = 0


@admin.register(Thesis)
class ThesisAdmin(admin.ModelAdmin):
    list_display = ("id", "owner", "topic", "chief_guide", "updated_at")
    search_fields = ("topic", "chief_guide", "owner__user__email")
    raw_id_fields = ("owner",)
    inlines = [ThesisSemesterRecordInline]
