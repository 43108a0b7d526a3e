import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_student_dashboard(client: AsyncClient, admin_headers, school_class, student, student_headers) -> None:
    await client.post(
        "/api/v1/announcements",
        json={"title": "Welcome", "content": "Term starts Monday", "target_class": "all"},
        headers=admin_headers,
    )

    response = await client.get("/api/v1/me", headers=student_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["profile"]["id"] == student["id"]
    assert data["subjects"] == ["Mathematics", "English"]
    assert [a["title"] for a in data["announcements"]] == ["Welcome"]


@pytest.mark.asyncio
async def test_student_fee_summary(client: AsyncClient, admin_headers, student, student_headers) -> None:
    url = f"/api/v1/fees/students/{student['id']}"
    await client.put(
        url,
        json={"term": "1st", "session": "2023/2024", "amount": 5000, "amount_paid": 5000, "due_date": "2023-10-01"},
        headers=admin_headers,
    )
    latest = (
        await client.put(
            url,
            json={"term": "2nd", "session": "2023/2024", "amount": 5000, "amount_paid": 2000, "due_date": "2024-01-31"},
            headers=admin_headers,
        )
    ).json()

    summary = (await client.get("/api/v1/me/fees", headers=student_headers)).json()
    assert summary["total_amount"] == 10000
    assert summary["total_paid"] == 7000
    assert summary["total_balance"] == 3000
    assert summary["current"]["id"] == latest["id"]
    assert len(summary["history"]) == 1


@pytest.mark.asyncio
async def test_student_results_grouped_by_term(client: AsyncClient, admin_headers, student, student_headers) -> None:
    url = f"/api/v1/results/students/{student['id']}"
    for subject, term, year in (("Mathematics", "1st", 2024), ("English", "1st", 2024), ("Mathematics", "3rd", 2023)):
        await client.put(
            url, json={"class_name": subject, "term": term, "year": year, "grade": "B"}, headers=admin_headers
        )

    groups = (await client.get("/api/v1/me/results", headers=student_headers)).json()
    assert [(g["year"], g["term"]) for g in groups] == [(2024, "1st"), (2023, "3rd")]
    assert [r["class_name"] for r in groups[0]["results"]] == ["English", "Mathematics"]


@pytest.mark.asyncio
async def test_student_without_records(client: AsyncClient, student_headers) -> None:
    assert (await client.get("/api/v1/me/results", headers=student_headers)).json() == []
    summary = (await client.get("/api/v1/me/fees", headers=student_headers)).json()
    assert summary["current"] is None
    assert summary["history"] == []
