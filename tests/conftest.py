"""Pytest configuration and fixtures"""
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

from chatrelay.main import app
from chatrelay.core.database import build_engine, create_tables, drop_tables, get_db
from chatrelay.dependencies.llm import get_llm_client_factory
from chatrelay.services.user_service import UserService


class FakeLLMClient:
    """Stands in for LLMClient: records prompts and returns canned replies."""

    model = "fake-model"

    def __init__(self):
        self.prompts: list[list[dict]] = []
        self.reply = "Hello from the model"
        self.error: Exception | None = None

    async def chat(self, messages):
        self.prompts.append(messages)
        if self.error:
            raise self.error
        return self.reply


@pytest_asyncio.fixture
async def test_db():
    """Create in-memory test database"""
    # One shared connection so every session sees the same in-memory database
    engine = build_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)

    await create_tables(engine)

    # Create session factory
    TestSessionLocal = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async def override_get_db():
        async with TestSessionLocal() as session:
            yield session

    # Override dependency
    app.dependency_overrides[get_db] = override_get_db

    yield TestSessionLocal

    # Cleanup
    app.dependency_overrides.pop(get_db, None)
    await drop_tables(engine)
    await engine.dispose()


@pytest.fixture
def fake_llm():
    """Route every relayed message to a FakeLLMClient."""
    fake = FakeLLMClient()

    def factory(setting):
        if not setting.api_key:
            raise ValueError("No API key configured for user")
        return fake

    app.dependency_overrides[get_llm_client_factory] = lambda: factory
    yield fake
    app.dependency_overrides.pop(get_llm_client_factory, None)


@pytest_asyncio.fixture
async def session(test_db):
    async with test_db() as db:
        yield db


@pytest_asyncio.fixture
async def client(test_db):
    """Create test client"""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def admin_headers(test_db):
    """Bootstrap the admin and return headers carrying its key."""
    async with test_db() as db:
        admin_key = await UserService.ensure_admin(db)
    return {"X-API-Key": admin_key}


@pytest_asyncio.fixture
async def make_user(client, admin_headers):
    """Factory: create a user through the admin API and issue it a key."""

    async def _make_user(email: str) -> dict:
        created = await client.post("/api/v1/admin/users", json={"email": email}, headers=admin_headers)
        assert created.status_code == 201
        user = created.json()
        issued = await client.post(f"/api/v1/admin/users/{user['id']}/api-key", headers=admin_headers)
        assert issued.status_code == 201
        return {"user": user, "api_key": issued.json()["api_key"], "headers": {"X-API-Key": issued.json()["api_key"]}}

    return _make_user
