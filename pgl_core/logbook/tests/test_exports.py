# pgl_core/logbook/tests/test_exports.py

import csv
import datetime
import io

import pytest
from openpyxl import load_workbook

from pgl_core.logbook.log_types import SEMINARS
from pgl_core.logbook.services import EntryService

pytestmark = pytest.mark.django_db

EXPORT = "/api/v1/logs/seminars/export/"


@pytest.fixture
def seminars(student_actor):
    rows = [
        ("ADULT_TRAUMA", "Polytrauma & haemorrhagic shock <ATLS>"),
        ("PEDIATRIC_NON_TRAUMA", "Bronchiolitis"),
    ]
    return [
        EntryService.create(
            actor=student_actor,
            log_type=SEMINARS,
            data={
                "category": category,
                "date": datetime.date(2025, 1, 20),
                "patient_info": "Case based",
                "complete_diagnosis": diagnosis,
            },
        )
        for category, diagnosis in rows
    ]


def test_student_exports_own_entries_as_csv(student_client, seminars):
    res = student_client.get(EXPORT)
    assert res.status_code == 200
    assert res["Content-Type"].startswith("text/csv")
    assert 'attachment; filename="seminars-' in res["Content-Disposition"]

    rows = list(csv.reader(io.StringIO(res.content.decode("utf-8"))))
    assert rows[0][0] == "Sl. No"
    assert len(rows) == 3
    assert rows[1][3] == "Polytrauma & haemorrhagic shock <ATLS>"


def test_xlsx_export_has_header_and_rows(student_client, seminars):
    res = student_client.get(EXPORT, {"file_format": "xlsx"})
    assert res.status_code == 200
    assert res["Content-Type"] == "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

    ws = load_workbook(io.BytesIO(res.content)).active
    assert ws.title == "Seminars"
    assert ws.cell(row=1, column=1).value == "Sl. No"
    assert ws.max_row == 3


def test_pdf_export_renders(student_client, seminars):
    res = student_client.get(EXPORT, {"file_format": "pdf"})
    assert res.status_code == 200
    assert res["Content-Type"] == "application/pdf"
    assert res.content.startswith(b"%PDF")


def test_reviewer_export_needs_student_in_scope(faculty_client, hod_client, student, other_student, seminars):
    res = faculty_client.get(EXPORT)
    assert res.status_code == 400, res.data

    res = faculty_client.get(EXPORT, {"student_id": str(student.id)})
    assert res.status_code == 200

    res = faculty_client.get(EXPORT, {"student_id": str(other_student.id)})
    assert res.status_code == 403, res.data

    res = hod_client.get(EXPORT, {"student_id": str(other_student.id)})
    assert res.status_code == 200


def test_unknown_format_is_rejected(student_client):
    res = student_client.get(EXPORT, {"file_format": "docx"})
    assert res.status_code == 400, res.data
