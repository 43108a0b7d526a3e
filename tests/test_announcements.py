import pytest
from httpx import AsyncClient


async def _class(client: AsyncClient, headers, name: str) -> str:
    response = await client.post("/api/v1/classes", json={"name": name}, headers=headers)
    return response.json()["id"]


@pytest.mark.asyncio
async def test_broadcast_targets_every_class(client: AsyncClient, admin_headers, school_class) -> None:
    other = await _class(client, admin_headers, "JSS 2")
    response = await client.post(
        "/api/v1/announcements",
        json={"title": "Holiday", "content": "School closes Friday", "target_class": "all"},
        headers=admin_headers,
    )
    assert response.status_code == 201
    data = response.json()
    assert sorted(data["class_ids"]) == sorted([school_class["id"], other])
    assert data["is_broadcast"] is True


@pytest.mark.asyncio
async def test_unknown_target_rejected(client: AsyncClient, admin_headers, school_class) -> None:
    response = await client.post(
        "/api/v1/announcements",
        json={"title": "Hi", "content": "There", "target_class": "missing"},
        headers=admin_headers,
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_broadcast_without_classes_rejected(client: AsyncClient, admin_headers) -> None:
    response = await client.post(
        "/api/v1/announcements",
        json={"title": "Hi", "content": "There", "target_class": "all"},
        headers=admin_headers,
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_students_see_only_their_class(client: AsyncClient, admin_headers, school_class, student_headers) -> None:
    other = await _class(client, admin_headers, "JSS 2")
    await client.post(
        "/api/v1/announcements",
        json={"title": "Mine", "content": "For JSS 1", "target_class": school_class["id"]},
        headers=admin_headers,
    )
    await client.post(
        "/api/v1/announcements",
        json={"title": "Theirs", "content": "For JSS 2", "target_class": other},
        headers=admin_headers,
    )

    mine = await client.get("/api/v1/me/announcements", headers=student_headers)
    assert mine.status_code == 200
    assert [a["title"] for a in mine.json()] == ["Mine"]

    filtered = await client.get(f"/api/v1/announcements?class_id={other}", headers=admin_headers)
    assert [a["title"] for a in filtered.json()] == ["Theirs"]


@pytest.mark.asyncio
async def test_update_and_delete(client: AsyncClient, admin_headers, school_class) -> None:
    created = (
        await client.post(
            "/api/v1/announcements",
            json={"title": "Draft", "content": "Text", "target_class": school_class["id"]},
            headers=admin_headers,
        )
    ).json()

    updated = await client.put(
        f"/api/v1/announcements/{created['id']}", json={"title": "Final"}, headers=admin_headers
    )
    assert updated.status_code == 200
    assert updated.json()["title"] == "Final"
    assert updated.json()["created_at"] == created["created_at"]

    assert (await client.delete(f"/api/v1/announcements/{created['id']}", headers=admin_headers)).status_code == 204
    assert (await client.delete(f"/api/v1/announcements/{created['id']}", headers=admin_headers)).status_code == 404
    assert (
        await client.put(f"/api/v1/announcements/{created['id']}", json={"title": "X"}, headers=admin_headers)
    ).status_code == 404
