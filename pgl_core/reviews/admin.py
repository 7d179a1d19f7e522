# pgl_core/reviews/admin.py
from django.contrib import admin

from pgl_core.reviews.models import AutoReviewSetting, DepartmentSetting, TrainingMentoringRecord


@admin.register(AutoReviewSetting)
class AutoReviewSettingAdmin(admin.ModelAdmin):
    list_display = ("entity_type", "enabled", "updated_by", "updated_at")
    list_filter = ("enabled",)
    readonly_fields = ("created_at", "updated_at")


@admin.register(DepartmentSetting)
class DepartmentSettingAdmin(admin.ModelAdmin):
    list_display = ("key", "enabled", "updated_by", "updated_at")
    readonly_fields = ("created_at", "updated_at")


@admin.register(TrainingMentoringRecord)
class TrainingMentoringRecordAdmin(admin.ModelAdmin):
    list_display = ("id", "owner", "semester", "overall_score", "status", "evaluated_by", "signed_at")
    list_filter = ("status", "semester")
    search_fields = ("owner__user__email", "owner__user__username")
    raw_id_fields = ("owner", "evaluated_by", "signed_by")
    readonly_fields = ("created_at", "updated_at", "signed_at")
