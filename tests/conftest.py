"""Pytest configuration and fixtures for the waste-management API.

Tests run against the in-memory document store. Each test gets a fresh
application whose lifespan (store init and schema seeding) is entered by
the app fixture, since ASGITransport does not run lifespan events.
"""

import os

os.environ["DATABASE_BACKEND"] = "memory"
os.environ["JWT_SECRET"] = "test-jwt-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENVIRONMENT"] = "test"
os.environ.pop("RATE_LIMIT", None)
os.environ.pop("FRONTEND_URL", None)
os.environ.pop("FRONTEND_URLS", None)

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from wastems.core.config import get_settings  # noqa: E402

get_settings.cache_clear()

from wastems.core.lifespan import create_lifespan  # noqa: E402
from wastems.core.limiter import limiter  # noqa: E402
from wastems.infrastructure.firebase import get_document_store  # noqa: E402
from wastems.infrastructure.firebase.repositories import UserRepository  # noqa: E402
from wastems.main import create_app  # noqa: E402

ADMIN_EMAIL = "admin@wastems.com"
ADMIN_PASSWORD = "admin123"


@pytest.fixture
async def app() -> FastAPI:
    """Fresh app with its lifespan entered (seeded in-memory store)."""
    get_settings.cache_clear()
    limiter.reset()
    application = create_app()
    async with create_lifespan(application):
        yield application


@pytest.fixture
async def client(app: FastAPI) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def store(app: FastAPI):
    """The in-memory document store the app is using."""
    return get_document_store()


async def login(client: AsyncClient, email: str, password: str) -> dict[str, str]:
    response = await client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def make_user(store, client: AsyncClient):
    """Factory: create an active user with role, return (user_id, auth headers)."""

    async def _make(
        role: str, *, email: str | None = None, password: str = "secret123"
    ) -> tuple[str, dict[str, str]]:
        email = email or f"{role}@example.com"
        record = await UserRepository(store).create_user(
            name=f"Test {role}",
            email=email,
            password=password,
            role=role,
            permissions=[],
        )
        return record["id"], await login(client, email, password)

    return _make


@pytest.fixture
async def admin_headers(client: AsyncClient) -> dict[str, str]:
    """Auth headers for the seeded admin account."""
    return await login(client, ADMIN_EMAIL, ADMIN_PASSWORD)
