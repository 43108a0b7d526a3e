import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from typing import AsyncGenerator, Dict

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.auth import services as identity
from app.auth.schemas import AccountCreate
from app.core import document_store, paths
from app.db.session import Base, get_db
from app.main import app


TEST_DATABASE_URL = "sqlite+aiosqlite://"
ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "AdminPass123"


@pytest.fixture()
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Fresh in-memory database per test; the app's get_db yields this same session."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:

        async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
            yield session

        app.dependency_overrides[get_db] = override_get_db
        yield session

    app.dependency_overrides.pop(get_db, None)
    await engine.dispose()


@pytest.fixture()
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the FastAPI app."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


async def login_headers(client: AsyncClient, email: str, password: str) -> Dict[str, str]:
    response = await client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture()
async def admin_headers(client: AsyncClient, db_session: AsyncSession) -> Dict[str, str]:
    account = await identity.create_account(
        db_session,
        AccountCreate(email=ADMIN_EMAIL, password=ADMIN_PASSWORD, display_name="Admin"),
    )
    await document_store.set_document(db_session, paths.admin_grant_doc(account.id), {"id": account.id})
    return await login_headers(client, ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture()
async def school_class(client: AsyncClient, admin_headers: Dict[str, str]) -> dict:
    response = await client.post(
        "/api/v1/classes",
        json={"name": "JSS 1", "description": "Junior secondary", "subjects": ["Mathematics", "English", " "]},
        headers=admin_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture()
async def student(client: AsyncClient, admin_headers: Dict[str, str], school_class: dict) -> dict:
    response = await client.post(
        "/api/v1/students",
        json={
            "first_name": "Ada",
            "last_name": "Obi",
            "email": "ada.obi@example.com",
            "password": "StudentPass1",
            "class_id": school_class["id"],
        },
        headers=admin_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture()
async def student_headers(client: AsyncClient, student: dict) -> Dict[str, str]:
    return await login_headers(client, "ada.obi@example.com", "StudentPass1")
