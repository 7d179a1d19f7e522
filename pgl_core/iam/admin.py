# pgl_core/iam/admin.py
from __future__ import annotations

from django.contrib import admin

from pgl_core.iam.models import Batch, FacultyBatchAssignment, FacultyStudentAssignment, UserProfile


class FacultyBatchAssignmentInline(admin.TabularInline):
    model = FacultyBatchAssignment
    extra = 0
    autocomplete_fields = ("faculty",)


@admin.register(Batch)
class BatchAdmin(admin.ModelAdmin):
    list_display = ("name", "start_date", "end_date", "current_semester", "is_active")
    list_filter = ("is_active", "current_semester")
    search_fields = ("name",)
    inlines = [FacultyBatchAssignmentInline]
    ordering = ("-start_date", "name")


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "role", "batch", "current_semester", "is_active", "is_banned")
    list_filter = ("role", "batch", "is_active", "is_banned")
    search_fields = ("user__username", "user__email", "user__first_name", "user__last_name")
    autocomplete_fields = ("user", "batch")
    ordering = ("-created_at",)


@admin.register(FacultyStudentAssignment)
class FacultyStudentAssignmentAdmin(admin.ModelAdmin):
    list_display = ("faculty", "student", "semester", "created_at")
    list_filter = ("semester",)
    search_fields = ("faculty__user__email", "student__user__email")
    autocomplete_fields = ("faculty", "student")
