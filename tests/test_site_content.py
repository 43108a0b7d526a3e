import pytest
from httpx import AsyncClient

from app.api.v1.site_content.defaults import DEFAULT_SITE_CONTENT


@pytest.mark.asyncio
async def test_defaults_served_publicly(client: AsyncClient) -> None:
    response = await client.get("/api/v1/site-content")
    assert response.status_code == 200
    data = response.json()
    assert data["school_name"] == DEFAULT_SITE_CONTENT["schoolName"]
    assert data["hero_title"] == DEFAULT_SITE_CONTENT["heroTitle"]


@pytest.mark.asyncio
async def test_admin_update_merges_over_defaults(client: AsyncClient, admin_headers) -> None:
    response = await client.put(
        "/api/v1/site-content",
        json={"school_name": "Greenfield Academy", "hero_subtitle": ""},
        headers=admin_headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["school_name"] == "Greenfield Academy"
    # Blank values fall back to the default copy
    assert data["hero_subtitle"] == DEFAULT_SITE_CONTENT["heroSubtitle"]
    assert data["mission_title"] == DEFAULT_SITE_CONTENT["missionTitle"]
    assert data["updated_at"]

    public = await client.get("/api/v1/site-content")
    assert public.json()["school_name"] == "Greenfield Academy"


@pytest.mark.asyncio
async def test_update_requires_admin(client: AsyncClient, student_headers) -> None:
    response = await client.put("/api/v1/site-content", json={"school_name": "X"}, headers=student_headers)
    assert response.status_code == 403
