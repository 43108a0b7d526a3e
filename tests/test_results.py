import io
from datetime import date

import pytest
from httpx import AsyncClient
from openpyxl import Workbook, load_workbook

from app.core import document_store, paths
from app.core.enums import RecordKind

XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _workbook_bytes(rows) -> bytes:
    wb = Workbook()
    ws = wb.active
    for row in rows:
        ws.append(row)
    bio = io.BytesIO()
    wb.save(bio)
    return bio.getvalue()


@pytest.mark.asyncio
async def test_upsert_and_list_results(client: AsyncClient, admin_headers, student, db_session) -> None:
    url = f"/api/v1/results/students/{student['id']}"
    first = await client.put(
        url, json={"class_name": "Mathematics", "term": "1st", "year": 2023, "grade": "B"}, headers=admin_headers
    )
    assert first.status_code == 200
    result_id = first.json()["id"]
    assert result_id.startswith("res_")

    await client.put(
        url,
        json={"id": result_id, "class_name": "Mathematics", "term": "1st", "year": 2023, "grade": "A"},
        headers=admin_headers,
    )
    await client.put(url, json={"class_name": "English", "term": "2nd", "year": 2024, "grade": "C"}, headers=admin_headers)

    listing = (await client.get(url, headers=admin_headers)).json()
    assert [(r["class_name"], r["grade"]) for r in listing] == [("English", "C"), ("Mathematics", "A")]
    assert await document_store.count_documents(db_session, paths.ACADEMIC_RESULTS) == 2
    flat = await document_store.get_document(db_session, paths.global_record(RecordKind.RESULT, result_id))
    assert flat == await document_store.get_document(
        db_session, paths.scoped_record(student["id"], RecordKind.RESULT, result_id)
    )


@pytest.mark.asyncio
async def test_invalid_grade_rejected(client: AsyncClient, admin_headers, student) -> None:
    response = await client.put(
        f"/api/v1/results/students/{student['id']}",
        json={"class_name": "Mathematics", "term": "1st", "year": 2023, "grade": "E"},
        headers=admin_headers,
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_delete_result(client: AsyncClient, admin_headers, student) -> None:
    url = f"/api/v1/results/students/{student['id']}"
    created = (
        await client.put(url, json={"class_name": "Art", "term": "3rd", "year": 2024, "grade": "A"}, headers=admin_headers)
    ).json()
    assert (await client.delete(f"{url}/{created['id']}", headers=admin_headers)).status_code == 204
    assert (await client.get(url, headers=admin_headers)).json() == []


@pytest.mark.asyncio
async def test_template_lists_class_subjects(client: AsyncClient, admin_headers, student) -> None:
    response = await client.get(f"/api/v1/results/students/{student['id']}/bulk-excel/template", headers=admin_headers)
    assert response.status_code == 200
    assert response.headers["content-type"] == XLSX

    wb = load_workbook(io.BytesIO(response.content))
    ws = wb["ResultsTemplate"]
    assert [c.value for c in ws[1]] == ["Subject", "Grade", "Term", "Year", "Comments", "Position"]
    subjects = [row[0] for row in wb["Subjects"].iter_rows(min_row=2, values_only=True)]
    assert subjects == ["Mathematics", "English"]


@pytest.mark.asyncio
async def test_bulk_upload_creates_valid_rows_and_reports_failures(client: AsyncClient, admin_headers, student) -> None:
    content = _workbook_bytes(
        [
            ["Subject", "Grade", "Term", "Year", "Comments", "Position"],
            ["Mathematics", "a", "1st", 2024, "Excellent", "1st"],
            ["English", None, None, None, None, None],
            [None, "B", "2nd", 2024, None, None],
            ["Biology", "Z", "1st", 2024, None, None],
        ]
    )
    response = await client.post(
        f"/api/v1/results/students/{student['id']}/bulk-excel",
        files={"file": ("results.xlsx", content, XLSX)},
        headers=admin_headers,
    )
    assert response.status_code == 201
    data = response.json()
    assert data["created"] == 2
    by_subject = {r["class_name"]: r for r in data["results"]}
    assert by_subject["Mathematics"]["grade"] == "A"
    assert by_subject["English"]["grade"] == "C"
    assert by_subject["English"]["term"] == "1st"
    assert by_subject["English"]["year"] == date.today().year
    assert [f["row"] for f in data["failed"]] == [4, 5]


@pytest.mark.asyncio
async def test_bulk_upload_rejects_non_excel(client: AsyncClient, admin_headers, student) -> None:
    response = await client.post(
        f"/api/v1/results/students/{student['id']}/bulk-excel",
        files={"file": ("results.csv", b"Subject,Grade\n", "text/csv")},
        headers=admin_headers,
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_bulk_upload_requires_subject_column(client: AsyncClient, admin_headers, student) -> None:
    content = _workbook_bytes([["Grade", "Term"], ["A", "1st"]])
    response = await client.post(
        f"/api/v1/results/students/{student['id']}/bulk-excel",
        files={"file": ("results.xlsx", content, XLSX)},
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert "Subject" in response.json()["detail"]
