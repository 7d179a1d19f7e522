# pgl_core/iam/models.py
from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from pgl_core.common.models import UUIDModel


class Role(models.TextChoices):
    STUDENT = "STUDENT", "Student"
    FACULTY = "FACULTY", "Faculty"
    HOD = "HOD", "Head of Department"


SEMESTER_VALIDATORS = [MinValueValidator(1), MaxValueValidator(6)]


class Batch(UUIDModel):
    """
    Cohort of residents grouped by admission year.
    """
    name = models.CharField(max_length=128, unique=True)
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)
    description = models.TextField(blank=True, default="")
    current_semester = models.PositiveSmallIntegerField(default=1, validators=SEMESTER_VALIDATORS)
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        db_table = "iam_batch"
        ordering = ["-start_date", "name"]

    def __str__(self) -> str:
        return self.name


class UserProfile(UUIDModel):
    """
    Local shadow of an identity-provider user, anchored to AUTH_USER_MODEL.

    The Django username holds the provider's subject id. `role` mirrors the
    provider's public metadata for listings only; request authorization reads
    the role from the verified session token.
    """
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="logbook_profile")

    role = models.CharField(max_length=16, choices=Role.choices, default=Role.STUDENT, db_index=True)
    batch = models.ForeignKey(Batch, on_delete=models.SET_NULL, null=True, blank=True, related_name="students")
    current_semester = models.PositiveSmallIntegerField(default=1, validators=SEMESTER_VALIDATORS)
    image_url = models.URLField(max_length=512, blank=True, default="")

    is_active = models.BooleanField(default=True)
    is_banned = models.BooleanField(default=False)
    notifications_seen_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "iam_user_profile"
        indexes = [
            models.Index(fields=["role", "is_active"]),
            models.Index(fields=["batch", "role"]),
        ]

    def __str__(self) -> str:
        return f"{self.user.username} ({self.role})"

    @property
    def subject(self) -> str:
        return self.user.username

    @property
    def display_name(self) -> str:
        full = f"{self.user.first_name} {self.user.last_name}".strip()
        return full or self.user.email or self.user.username


class FacultyBatchAssignment(UUIDModel):
    """
    Faculty member supervises every student of a batch.
    """
    faculty = models.ForeignKey(UserProfile, on_delete=models.CASCADE, related_name="batch_assignments")
    batch = models.ForeignKey(Batch, on_delete=models.CASCADE, related_name="faculty_assignments")

    class Meta:
        db_table = "iam_faculty_batch_assignment"
        constraints = [
            models.UniqueConstraint(fields=["faculty", "batch"], name="uq_faculty_batch"),
        ]


class FacultyStudentAssignment(UUIDModel):
    """
    Direct faculty -> student supervision for one semester.
    """
    faculty = models.ForeignKey(UserProfile, on_delete=models.CASCADE, related_name="student_assignments")
    student = models.ForeignKey(UserProfile, on_delete=models.CASCADE, related_name="faculty_assignments")
    semester = models.PositiveSmallIntegerField(default=1, validators=SEMESTER_VALIDATORS)

    class Meta:
        db_table = "iam_faculty_student_assignment"
        constraints = [
            models.UniqueConstraint(fields=["faculty", "student", "semester"], name="uq_faculty_student_semester"),
        ]
        indexes = [
            models.Index(fields=["faculty", "student"]),
        ]
