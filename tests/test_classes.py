import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_create_class_drops_blank_subjects(client: AsyncClient, school_class: dict) -> None:
    assert school_class["name"] == "JSS 1"
    assert school_class["subjects"] == ["Mathematics", "English"]
    assert school_class["student_count"] == 0


@pytest.mark.asyncio
async def test_list_and_detail_include_students(client: AsyncClient, admin_headers, school_class, student) -> None:
    listing = await client.get("/api/v1/classes", headers=admin_headers)
    assert listing.status_code == 200
    assert [(c["name"], c["student_count"]) for c in listing.json()] == [("JSS 1", 1)]

    detail = await client.get(f"/api/v1/classes/{school_class['id']}", headers=admin_headers)
    assert detail.status_code == 200
    assert [s["id"] for s in detail.json()["students"]] == [student["id"]]


@pytest.mark.asyncio
async def test_update_class(client: AsyncClient, admin_headers, school_class) -> None:
    response = await client.put(
        f"/api/v1/classes/{school_class['id']}",
        json={"name": "JSS 1A", "subjects": ["Physics"]},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["name"] == "JSS 1A"
    assert response.json()["subjects"] == ["Physics"]


@pytest.mark.asyncio
async def test_delete_class_in_use_is_refused_unless_forced(
    client: AsyncClient, admin_headers, school_class, student
) -> None:
    url = f"/api/v1/classes/{school_class['id']}"
    refused = await client.delete(url, headers=admin_headers)
    assert refused.status_code == 400

    forced = await client.delete(f"{url}?force=true", headers=admin_headers)
    assert forced.status_code == 204
    assert (await client.get(url, headers=admin_headers)).status_code == 404
    # The student keeps a dangling class reference
    profile = await client.get(f"/api/v1/students/{student['id']}", headers=admin_headers)
    assert profile.json()["class_id"] == school_class["id"]
    assert profile.json()["class_name"] is None


@pytest.mark.asyncio
async def test_delete_unknown_class(client: AsyncClient, admin_headers) -> None:
    assert (await client.delete("/api/v1/classes/missing", headers=admin_headers)).status_code == 404
