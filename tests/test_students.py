import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import services as identity
from app.core import document_store, paths
from app.core.enums import RecordKind
from app.core.exceptions import RecordStoreError


def _payload(class_id: str, email: str = "chidi@example.com") -> dict:
    return {
        "first_name": "Chidi",
        "last_name": "Eze",
        "email": email,
        "password": "StudentPass1",
        "class_id": class_id,
    }


@pytest.mark.asyncio
async def test_create_student_profile(client: AsyncClient, student: dict, school_class: dict, db_session) -> None:
    assert student["first_name"] == "Ada"
    assert student["email"] == "ada.obi@example.com"
    assert student["class_name"] == "JSS 1"
    profile = await document_store.get_document(db_session, paths.student_doc(student["id"]))
    assert profile["classId"] == school_class["id"]
    assert await identity.get_account(db_session, student["id"]) is not None


@pytest.mark.asyncio
async def test_duplicate_email_creates_nothing(client: AsyncClient, admin_headers, school_class, student, db_session) -> None:
    response = await client.post(
        "/api/v1/students",
        json=_payload(school_class["id"], email="ada.obi@example.com"),
        headers=admin_headers,
    )
    assert response.status_code == 409
    assert response.json()["detail"] == identity.EMAIL_IN_USE_MESSAGE
    assert await document_store.count_documents(db_session, paths.STUDENTS) == 1


@pytest.mark.asyncio
async def test_unknown_class_rejected(client: AsyncClient, admin_headers, db_session) -> None:
    response = await client.post("/api/v1/students", json=_payload("nope"), headers=admin_headers)
    assert response.status_code == 400
    assert await identity.get_account_by_email(db_session, "chidi@example.com") is None


@pytest.mark.asyncio
async def test_profile_write_failure_removes_new_account(
    client: AsyncClient, admin_headers, school_class, db_session: AsyncSession, monkeypatch
) -> None:
    async def failing_set(*args, **kwargs):
        raise RecordStoreError("store down")

    monkeypatch.setattr(document_store, "set_document", failing_set)
    response = await client.post("/api/v1/students", json=_payload(school_class["id"]), headers=admin_headers)
    monkeypatch.undo()

    assert response.status_code == 503
    assert await identity.get_account_by_email(db_session, "chidi@example.com") is None


@pytest.mark.asyncio
async def test_list_filter_and_update(client: AsyncClient, admin_headers, school_class, student) -> None:
    other_class = await client.post("/api/v1/classes", json={"name": "JSS 2"}, headers=admin_headers)
    other_id = other_class.json()["id"]
    await client.post("/api/v1/students", json=_payload(other_id), headers=admin_headers)

    all_students = await client.get("/api/v1/students", headers=admin_headers)
    assert all_students.json()["total"] == 2
    in_class = await client.get(f"/api/v1/students?class_id={school_class['id']}", headers=admin_headers)
    assert [s["id"] for s in in_class.json()["items"]] == [student["id"]]

    updated = await client.put(
        f"/api/v1/students/{student['id']}",
        json={"class_id": other_id, "email": "ada.new@example.com"},
        headers=admin_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["class_name"] == "JSS 2"
    assert updated.json()["email"] == "ada.new@example.com"

    login = await client.post("/api/v1/auth/login", json={"email": "ada.new@example.com", "password": "StudentPass1"})
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_get_unknown_student(client: AsyncClient, admin_headers) -> None:
    assert (await client.get("/api/v1/students/missing", headers=admin_headers)).status_code == 404


@pytest.mark.asyncio
async def test_delete_student_cascades(client: AsyncClient, admin_headers, student, db_session) -> None:
    uid = student["id"]
    fee = await client.put(
        f"/api/v1/fees/students/{uid}",
        json={"term": "1st", "session": "2023/2024", "amount": 5000, "amount_paid": 2000, "due_date": "2024-01-31"},
        headers=admin_headers,
    )
    assert fee.status_code == 200
    result = await client.put(
        f"/api/v1/results/students/{uid}",
        json={"class_name": "Mathematics", "term": "1st", "year": 2024, "grade": "A"},
        headers=admin_headers,
    )
    assert result.status_code == 200

    response = await client.delete(f"/api/v1/students/{uid}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"success": True, "error": None}

    assert not await document_store.document_exists(db_session, paths.student_doc(uid))
    for kind in RecordKind:
        assert await document_store.count_documents(db_session, paths.collection_for(kind), "studentId", uid) == 0
    assert await identity.get_account(db_session, uid) is None

    again = await client.delete(f"/api/v1/students/{uid}", headers=admin_headers)
    assert again.status_code == 200


@pytest.mark.asyncio
async def test_failed_profile_update_restores_login_email(
    client: AsyncClient, admin_headers, student, db_session: AsyncSession, monkeypatch
) -> None:
    async def failing_set(*args, **kwargs):
        raise RecordStoreError("store down")

    monkeypatch.setattr(document_store, "set_document", failing_set)
    response = await client.put(
        f"/api/v1/students/{student['id']}", json={"email": "ada.new@example.com"}, headers=admin_headers
    )
    monkeypatch.undo()

    assert response.status_code == 503
    account = await identity.get_account(db_session, student["id"])
    assert account.email == "ada.obi@example.com"
    profile = await document_store.get_document(db_session, paths.student_doc(student["id"]))
    assert profile["email"] == "ada.obi@example.com"
