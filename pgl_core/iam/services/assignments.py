# pgl_core/iam/services/assignments.py
from __future__ import annotations

from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q

from pgl_core.iam.models import Batch, FacultyBatchAssignment, FacultyStudentAssignment, Role, UserProfile


def supervised_student_ids(faculty_profile_id: UUID) -> set[UUID]:
    """
    Students a faculty member may review:
      faculty -> FacultyBatchAssignment -> batch -> students
      faculty -> FacultyStudentAssignment -> student
    """
    batch_ids = FacultyBatchAssignment.objects.filter(faculty_id=faculty_profile_id).values_list("batch_id", flat=True)
    direct_ids = FacultyStudentAssignment.objects.filter(faculty_id=faculty_profile_id).values_list(
        "student_id", flat=True
    )

    qs = UserProfile.objects.filter(Q(batch_id__in=batch_ids) | Q(id__in=direct_ids)).exclude(
        id=faculty_profile_id
    )
    return set(qs.values_list("id", flat=True))


def is_supervisor_of(*, faculty_profile_id: UUID, student_profile_id: UUID) -> bool:
    if FacultyStudentAssignment.objects.filter(
        faculty_id=faculty_profile_id, student_id=student_profile_id
    ).exists():
        return True

    return FacultyBatchAssignment.objects.filter(
        faculty_id=faculty_profile_id,
        batch__students__id=student_profile_id,
    ).exists()


def list_faculty_scope(faculty_profile_id: UUID) -> dict:
    """
    Batches and direct students for the /me response.
    """
    batches = (
        Batch.objects.filter(faculty_assignments__faculty_id=faculty_profile_id)
        .order_by("name")
        .values("id", "name", "current_semester")
    )
    students = (
        FacultyStudentAssignment.objects.select_related("student__user")
        .filter(faculty_id=faculty_profile_id)
        .order_by("semester")
    )
    return {
        "batches": [{"id": str(b["id"]), "name": b["name"], "current_semester": b["current_semester"]} for b in batches],
        "students": [
            {
                "id": str(a.student_id),
                "name": a.student.display_name,
                "semester": a.semester,
            }
            for a in students
        ],
    }


class AssignmentService:
    """
    HOD-driven supervision wiring. Authorization is checked by the caller.
    """

    @staticmethod
    def _get_supervisor(faculty_profile_id: UUID) -> UserProfile:
        faculty = UserProfile.objects.filter(id=faculty_profile_id).first()
        if faculty is None:
            raise ValidationError({"faculty_id": ["Unknown faculty profile."]})
        if faculty.role == Role.STUDENT:
            raise ValidationError({"faculty_id": ["A student cannot supervise other students."]})
        return faculty

    @staticmethod
    @transaction.atomic
    def assign_faculty_to_batch(*, batch: Batch, faculty_profile_id: UUID) -> FacultyBatchAssignment:
        faculty = AssignmentService._get_supervisor(faculty_profile_id)
        assignment, _ = FacultyBatchAssignment.objects.get_or_create(faculty=faculty, batch=batch)
        return assignment

    @staticmethod
    @transaction.atomic
    def assign_faculty_to_student(
        *,
        faculty_profile_id: UUID,
        student_profile_id: UUID,
        semester: int = 1,
    ) -> FacultyStudentAssignment:
        faculty = AssignmentService._get_supervisor(faculty_profile_id)
        student = UserProfile.objects.filter(id=student_profile_id, role=Role.STUDENT).first()
        if student is None:
            raise ValidationError({"student_id": ["Unknown student profile."]})

        if FacultyStudentAssignment.objects.filter(faculty=faculty, student=student, semester=semester).exists():
            raise ValidationError({"detail": "Assignment already exists for this semester."})

        return FacultyStudentAssignment.objects.create(faculty=faculty, student=student, semester=semester)

    @staticmethod
    @transaction.atomic
    def add_students_to_batch(*, batch: Batch, student_profile_ids: list[UUID]) -> int:
        return UserProfile.objects.filter(id__in=student_profile_ids, role=Role.STUDENT).update(
            batch=batch, current_semester=batch.current_semester
        )
