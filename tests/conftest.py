"""
Pytest configuration and fixtures
"""

import os
from datetime import datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

# Set test environment variables before importing app modules
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from fastapi.testclient import TestClient

from ai_caller.api.middleware.auth import create_access_token
from ai_caller.core.security import hash_password
from ai_caller.core.config import Settings
from ai_caller.db import Database, User, Agent, Call, UserRole, CallStatus, CallDirection
from ai_caller.main import create_app
from ai_caller.services.llm.openai_service import ResponseGenerationService

TEST_SECRET_KEY = "test-secret-key-for-signing-jwt-tokens"
OWNER_EMAIL = "alice@brightsmile.com"
OWNER_PASSWORD = "correct-horse-battery"


def make_completion(content):
    """Build a chat completion response with one choice"""
    message = SimpleNamespace(content=content, role="assistant")
    choice = SimpleNamespace(message=message, finish_reason="stop")
    return SimpleNamespace(choices=[choice])


def make_chunk(content):
    """Build one streamed chat completion chunk"""
    delta = SimpleNamespace(content=content)
    return SimpleNamespace(choices=[SimpleNamespace(delta=delta)])


class FakeStream:
    """Async iterable standing in for the provider's streaming response"""

    def __init__(self, fragments, error=None):
        self.fragments = list(fragments)
        self.error = error
        self.closed = False

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for fragment in self.fragments:
            yield make_chunk(fragment)
        if self.error is not None:
            raise self.error

    async def close(self):
        self.closed = True


@pytest.fixture
def settings():
    """Settings for tests, independent of any .env file"""
    return Settings(
        _env_file=None,
        environment="test",
        database_url="sqlite://",
        secret_key=TEST_SECRET_KEY,
        openai_api_key="test-openai-key",
        openai_model="gpt-4o-mini",
        log_level="WARNING"
    )


@pytest.fixture
def database():
    """In-memory database with all tables"""
    db = Database("sqlite://")
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def seed_data(database):
    """Two accounts, one agent, and calls owned by each account"""
    with database.session() as session:
        alice = User(
            id="user-alice",
            email=OWNER_EMAIL,
            name="Alice",
            credits_balance=20.0,
            # Low iteration count keeps the suite fast
            password_hash=hash_password(OWNER_PASSWORD, iterations=1000)
        )
        bob = User(id="user-bob", email="bob@example.com", name="Bob")
        admin = User(id="user-admin", email="admin@example.com", name="Admin", role=UserRole.ADMIN.value)
        session.add_all([alice, bob, admin])
        session.flush()

        agent = Agent(
            id="agent-front-desk",
            user_id=alice.id,
            name="Front Desk",
            system_prompt="You are a friendly receptionist for a dental clinic.",
            greeting="Hello, thanks for calling!",
            voice="rachel",
            created_at=datetime(2026, 1, 1, 9, 0, 0)
        )
        other_agent = Agent(
            id="agent-bob",
            user_id=bob.id,
            name="Sales",
            system_prompt="You sell solar panels.",
            voice="adam"
        )
        session.add_all([agent, other_agent])
        session.flush()

        session.add_all([
            Call(
                id="abc123",
                user_id=alice.id,
                agent_id=agent.id,
                status=CallStatus.COMPLETED.value,
                direction=CallDirection.INBOUND.value,
                from_number="+14155550100",
                to_number="+14155550199",
                duration_seconds=95,
                transcript=[
                    {"role": "assistant", "content": "Hello, thanks for calling!"},
                    {"role": "user", "content": "I need to book a cleaning."}
                ],
                created_at=datetime(2026, 1, 2, 10, 0, 0)
            ),
            Call(
                id="call-no-agent",
                user_id=alice.id,
                agent_id=None,
                status=CallStatus.FAILED.value,
                created_at=datetime(2026, 1, 3, 10, 0, 0)
            ),
            Call(
                id="bob-call",
                user_id=bob.id,
                agent_id=other_agent.id,
                status=CallStatus.IN_PROGRESS.value,
                created_at=datetime(2026, 1, 4, 10, 0, 0)
            ),
        ])

    return {"owner_id": "user-alice", "other_id": "user-bob", "admin_id": "user-admin"}


@pytest.fixture
def mock_openai_client():
    """Fake AsyncOpenAI client"""
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=make_completion("Test response"))
    return client


@pytest.fixture
def response_service(settings, mock_openai_client):
    return ResponseGenerationService(settings, client=mock_openai_client)


@pytest.fixture
def app(settings, database, seed_data, response_service):
    application = create_app(settings)
    application.state.database = database
    application.state.response_service = response_service
    return application


@pytest.fixture
def test_client(app):
    """Fixture for test client"""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def auth_headers(settings, seed_data):
    """Bearer token for the owning account"""
    token = create_access_token(seed_data["owner_id"], settings)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_auth_headers(settings, seed_data):
    """Bearer token for a second, unrelated account"""
    token = create_access_token(seed_data["other_id"], settings)
    return {"Authorization": f"Bearer {token}"}
