# pgl_core/conftest.py
import datetime

import pytest

from pgl_core.iam.models import Batch, FacultyBatchAssignment, Role
from pgl_core.tests.helpers import actor_for, client_for, make_profile


@pytest.fixture
def batch(db):
    return Batch.objects.create(name="2024-27", start_date=datetime.date(2024, 7, 1), current_semester=2)


@pytest.fixture
def other_batch(db):
    return Batch.objects.create(name="2023-26", start_date=datetime.date(2023, 7, 1), current_semester=4)


@pytest.fixture
def student(batch):
    return make_profile("user_student", batch=batch, first_name="Asha", last_name="Rao")


@pytest.fixture
def other_student(other_batch):
    return make_profile("user_other_student", batch=other_batch, first_name="Vikram", last_name="Nair")


@pytest.fixture
def faculty(batch):
    """Supervises every student of `batch`."""
    profile = make_profile("user_faculty", Role.FACULTY, first_name="Meera", last_name="Iyer")
    FacultyBatchAssignment.objects.create(faculty=profile, batch=batch)
    return profile


@pytest.fixture
def hod(db):
    return make_profile("user_hod", Role.HOD, first_name="Ravi", last_name="Menon")


@pytest.fixture
def student_client(student):
    return client_for(student)


@pytest.fixture
def other_student_client(other_student):
    return client_for(other_student)


@pytest.fixture
def faculty_client(faculty):
    return client_for(faculty)


@pytest.fixture
def hod_client(hod):
    return client_for(hod)


@pytest.fixture
def student_actor(student):
    return actor_for(student)


@pytest.fixture
def other_student_actor(other_student):
    return actor_for(other_student)


@pytest.fixture
def faculty_actor(faculty):
    return actor_for(faculty)


@pytest.fixture
def hod_actor(hod):
    return actor_for(hod)
