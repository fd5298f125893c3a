"""Test fixtures — a fresh app and SQLite database per test.

Each test gets its own database file under tmp_path, so tests never see
each other's rows. The app is built through create_app() exactly as in
production, only with test Settings (cheap bcrypt, known secret).

httpx's ASGITransport does not run the lifespan, so the schema is
created here directly.
"""

import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from linkbio.config import Settings
from linkbio.db.engine import create_schema
from linkbio.main import create_app

TEST_SECRET = "test-secret-do-not-use-in-production"


@pytest.fixture()
def settings(tmp_path):
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'linkbio.db'}",
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
        create_schema=False,
    )


@pytest_asyncio.fixture()
async def app(settings):
    app = create_app(settings)
    await create_schema(app.state.engine)
    yield app
    await app.state.engine.dispose()


@pytest_asyncio.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture()
def make_user(client):
    """Register + login a user, return (user, auth headers).

    Usage: user, headers = await make_user("alice")
    """

    async def _make(username: str | None = None, password: str = "pw123456"):
        username = username or f"user{uuid.uuid4().hex[:8]}"
        r = await client.post(
            "/auth/register",
            json={
                "username": username,
                "email": f"{username}@example.com",
                "password": password,
            },
        )
        assert r.status_code == 201, r.text
        user = r.json()["user"]

        r = await client.post(
            "/auth/login",
            json={"email": user["email"], "password": password},
        )
        assert r.status_code == 200, r.text
        return user, {"Authorization": f"Bearer {r.json()['token']}"}

    return _make


@pytest.fixture()
def count_links(app):
    """Count rows in the links table, bypassing the API."""
    from sqlalchemy import func, select

    from linkbio.db.models import Link

    async def _count() -> int:
        async with app.state.session_factory() as session:
            return await session.scalar(select(func.count()).select_from(Link))

    return _count
