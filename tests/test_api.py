"""
Tests for API endpoints
"""

import asyncio
import time
from datetime import timedelta
from unittest.mock import patch

import httpx
import openai
import pytest

from conftest import OWNER_EMAIL, OWNER_PASSWORD, FakeStream, make_completion
from ai_caller.api.dependencies import get_response_service
from ai_caller.api.middleware.auth import create_access_token
from ai_caller.core.exceptions import ConfigurationError, StorageError

REPLY_BODY = {"turns": [{"role": "user", "content": "Can I book a cleaning for Friday?"}]}


class TestHealthEndpoints:
    """Tests for health check endpoints"""

    def test_root_endpoint(self, test_client):
        """Test root endpoint returns service info"""
        response = test_client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["service"] == "AI Caller SaaS"
        assert data["docs"] == "/docs"

    def test_health_check(self, test_client):
        """Test basic health check"""
        response = test_client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["environment"] == "test"
        assert data["checks"]["openai"] is True


class TestConfigEndpoints:
    """Tests for public configuration endpoints"""

    def test_list_voices(self, test_client):
        response = test_client.get("/config/voices")
        assert response.status_code == 200
        data = response.json()
        assert [voice["id"] for voice in data["voices"]] == ["rachel", "adam", "bella", "josh"]
        assert data["default_voice"] == "rachel"
        assert data["default_provider"] == "elevenlabs"

    def test_pricing(self, test_client):
        response = test_client.get("/config/pricing")
        assert response.status_code == 200
        data = response.json()
        assert data["per_minute"] == 0.12
        assert [p["amount"] for p in data["credit_packages"]] == [20, 100, 500]
        assert data["free_tier"] == {"test_calls": 10, "live_minutes": 0, "agents": 1}

    def test_limits(self, test_client):
        response = test_client.get("/config/limits")
        assert response.status_code == 200
        data = response.json()
        assert data["latency"] == {"max_response_latency_ms": 500, "silence_threshold_ms": 800}
        assert data["call_limits"]["max_concurrent_calls"] == 10


class TestAuthentication:
    """Tests for the authenticated request gate"""

    def test_missing_token(self, test_client):
        response = test_client.get("/calls/abc123")
        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}
        assert response.headers["www-authenticate"] == "Bearer"

    def test_invalid_token(self, test_client):
        response = test_client.get("/calls/abc123", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_expired_token(self, test_client, settings, seed_data):
        token = create_access_token(seed_data["owner_id"], settings, expires_delta=timedelta(seconds=-5))
        response = test_client.get("/calls/abc123", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_unknown_account(self, test_client, settings):
        token = create_access_token("user-deleted", settings)
        response = test_client.get("/calls/abc123", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_get_me(self, test_client, auth_headers):
        """Test the account profile never includes telephony secrets"""
        response = test_client.get("/auth/me", headers=auth_headers)
        assert response.status_code == 200
        user = response.json()["user"]
        assert user["id"] == "user-alice"
        assert user["twilio_configured"] is False
        assert "twilio_auth_token" not in user
        assert "twilio_account_sid" not in user


class TestCallEndpoints:
    """Tests for call record endpoints"""

    def test_get_call(self, test_client, auth_headers):
        """Test the owner gets the call with its agent's public fields"""
        response = test_client.get("/calls/abc123", headers=auth_headers)
        assert response.status_code == 200
        call = response.json()["call"]
        assert call["id"] == "abc123"
        assert call["status"] == "completed"
        assert call["agent"] == {"id": "agent-front-desk", "name": "Front Desk", "voice": "rachel"}
        assert "system_prompt" not in call["agent"]
        assert call["transcript"][0]["role"] == "assistant"

    def test_get_call_without_agent(self, test_client, auth_headers):
        response = test_client.get("/calls/call-no-agent", headers=auth_headers)
        assert response.status_code == 200
        call = response.json()["call"]
        assert call["agent"] is None
        assert call["transcript"] == []

    def test_get_call_not_found(self, test_client, auth_headers):
        response = test_client.get("/calls/zzz", headers=auth_headers)
        assert response.status_code == 404
        assert response.json() == {"error": "Call not found"}

    def test_get_call_other_owner(self, test_client, auth_headers, other_auth_headers):
        """Test another account's call looks exactly like a missing one"""
        foreign = test_client.get("/calls/bob-call", headers=auth_headers)
        missing = test_client.get("/calls/zzz", headers=auth_headers)

        assert foreign.status_code == missing.status_code == 404
        assert foreign.json() == missing.json()
        assert test_client.get("/calls/abc123", headers=other_auth_headers).status_code == 404

    def test_get_call_storage_failure(self, test_client, auth_headers):
        """Test storage failures become a generic 500 without internals"""
        with patch(
            "ai_caller.api.routes.calls.CallRepository.get_call",
            side_effect=StorageError("connection refused on 10.0.0.5", operation="get_call")
        ):
            response = test_client.get("/calls/abc123", headers=auth_headers)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch call"}
        assert "10.0.0.5" not in response.text

    def test_list_calls(self, test_client, auth_headers):
        response = test_client.get("/calls", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert [call["id"] for call in data["calls"]] == ["call-no-agent", "abc123"]
        assert data["total"] == 2

    def test_list_calls_filtered(self, test_client, auth_headers):
        response = test_client.get(
            "/calls", params={"agent_id": "agent-front-desk", "limit": 10}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["total"] == 1

    def test_list_calls_invalid_limit(self, test_client, auth_headers):
        response = test_client.get("/calls", params={"limit": 0}, headers=auth_headers)
        assert response.status_code == 422

    def test_list_calls_storage_failure(self, test_client, auth_headers):
        with patch(
            "ai_caller.api.routes.calls.CallRepository.list_calls",
            side_effect=StorageError("disk full", operation="list_calls")
        ):
            response = test_client.get("/calls", headers=auth_headers)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch calls"}


class TestAgentEndpoints:
    """Tests for agent endpoints"""

    def test_list_agents(self, test_client, auth_headers):
        response = test_client.get("/agents", headers=auth_headers)
        assert response.status_code == 200
        assert [agent["id"] for agent in response.json()["agents"]] == ["agent-front-desk"]

    def test_get_agent(self, test_client, auth_headers):
        response = test_client.get("/agents/agent-front-desk", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["agent"]["voice_provider"] == "elevenlabs"

    def test_get_agent_other_owner(self, test_client, auth_headers):
        response = test_client.get("/agents/agent-bob", headers=auth_headers)
        assert response.status_code == 404
        assert response.json() == {"error": "Agent not found"}


class TestReplyEndpoint:
    """Tests for reply generation on a call"""

    def test_reply(self, test_client, auth_headers, mock_openai_client):
        """Test a complete reply uses the call's agent prompt"""
        mock_openai_client.chat.completions.create.return_value = make_completion(
            "Sure, Friday at ten works."
        )

        response = test_client.post("/calls/abc123/reply", json=REPLY_BODY, headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["reply"] == "Sure, Friday at ten works."
        assert data["estimated_tokens"] == 7
        messages = mock_openai_client.chat.completions.create.call_args.kwargs["messages"]
        assert messages[0] == {
            "role": "system",
            "content": "You are a friendly receptionist for a dental clinic."
        }
        assert messages[1]["content"] == "Can I book a cleaning for Friday?"

    def test_reply_streaming(self, test_client, auth_headers, mock_openai_client):
        """Test a streamed reply relays fragments in order"""
        provider_stream = FakeStream(["Sure", ", ", "", "Friday works."])
        mock_openai_client.chat.completions.create.return_value = provider_stream

        response = test_client.post(
            "/calls/abc123/reply", json={**REPLY_BODY, "stream": True}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == "Sure, Friday works."
        assert provider_stream.closed is True

    def test_reply_streaming_open_failure(self, test_client, auth_headers, mock_openai_client):
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        mock_openai_client.chat.completions.create.side_effect = openai.APIConnectionError(request=request)

        response = test_client.post(
            "/calls/abc123/reply", json={**REPLY_BODY, "stream": True}, headers=auth_headers
        )

        assert response.status_code == 502
        assert response.json() == {"error": "Failed to generate response"}

    def test_reply_provider_failure(self, test_client, auth_headers, mock_openai_client):
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        mock_openai_client.chat.completions.create.side_effect = openai.APIConnectionError(request=request)

        response = test_client.post("/calls/abc123/reply", json=REPLY_BODY, headers=auth_headers)

        assert response.status_code == 502
        assert response.json() == {"error": "Failed to generate response"}

    def test_reply_other_owner(self, test_client, auth_headers, mock_openai_client):
        response = test_client.post("/calls/bob-call/reply", json=REPLY_BODY, headers=auth_headers)

        assert response.status_code == 404
        mock_openai_client.chat.completions.create.assert_not_called()

    def test_reply_call_without_agent(self, test_client, auth_headers):
        response = test_client.post("/calls/call-no-agent/reply", json=REPLY_BODY, headers=auth_headers)

        assert response.status_code == 404
        assert response.json() == {"error": "Agent not found"}

    def test_reply_requires_turns(self, test_client, auth_headers):
        response = test_client.post("/calls/abc123/reply", json={"turns": []}, headers=auth_headers)
        assert response.status_code == 422

    def test_reply_unconfigured(self, app, test_client, auth_headers):
        """Test replies report the missing provider key"""
        def unconfigured():
            raise ConfigurationError("Response generation is not configured", setting="openai_api_key")

        app.dependency_overrides[get_response_service] = unconfigured
        try:
            response = test_client.post("/calls/abc123/reply", json=REPLY_BODY, headers=auth_headers)
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 503
        assert response.json() == {"error": "Response generation is not configured"}


class TestAdminGate:
    """Tests for the administrator dependency"""

    @pytest.mark.asyncio
    async def test_admin_allowed(self, database, seed_data):
        from ai_caller.api.middleware.auth import require_admin
        from ai_caller.db.repository import UserRepository

        with database.session() as session:
            admin = UserRepository(session).get_user(seed_data["admin_id"])
            assert await require_admin(admin) is admin

    @pytest.mark.asyncio
    async def test_non_admin_rejected(self, database, seed_data):
        from ai_caller.api.middleware.auth import require_admin
        from ai_caller.core.exceptions import AuthorizationError
        from ai_caller.db.repository import UserRepository

        with database.session() as session:
            user = UserRepository(session).get_user(seed_data["owner_id"])
            with pytest.raises(AuthorizationError) as exc_info:
                await require_admin(user)

        assert exc_info.value.status_code == 403


@pytest.fixture
def admin_headers(settings, seed_data):
    token = create_access_token(seed_data["admin_id"], settings)
    return {"Authorization": f"Bearer {token}"}


class TestRegistrationAndLogin:
    """Tests for account registration and login"""

    def test_register(self, test_client):
        """Test registration returns a token the gate accepts"""
        response = test_client.post("/auth/register", json={
            "email": "carol@brightsmile.com",
            "password": "a-long-password",
            "name": "Carol"
        })

        assert response.status_code == 201
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["expires_in"] == 24 * 3600
        assert data["user"]["email"] == "carol@brightsmile.com"
        assert data["user"]["credits_balance"] == 0.0
        assert "password_hash" not in data["user"]

        me = test_client.get("/auth/me", headers={"Authorization": f"Bearer {data['token']}"})
        assert me.status_code == 200
        assert me.json()["user"]["id"] == data["user"]["id"]

    def test_register_duplicate_email(self, test_client):
        response = test_client.post("/auth/register", json={
            "email": OWNER_EMAIL,
            "password": "a-long-password"
        })

        assert response.status_code == 400
        assert response.json() == {"error": "User already exists"}

    def test_register_short_password(self, test_client):
        response = test_client.post("/auth/register", json={
            "email": "dave@brightsmile.com",
            "password": "short"
        })
        assert response.status_code == 422

    def test_register_invalid_email(self, test_client):
        response = test_client.post("/auth/register", json={
            "email": "not-an-email",
            "password": "a-long-password"
        })
        assert response.status_code == 422

    def test_login(self, test_client):
        response = test_client.post("/auth/login", json={"email": OWNER_EMAIL, "password": OWNER_PASSWORD})

        assert response.status_code == 200
        data = response.json()
        assert data["user"]["id"] == "user-alice"

        calls = test_client.get("/calls", headers={"Authorization": f"Bearer {data['token']}"})
        assert calls.status_code == 200

    def test_login_wrong_password(self, test_client):
        """Test a wrong password and an unknown email fail identically"""
        wrong = test_client.post("/auth/login", json={"email": OWNER_EMAIL, "password": "guess-again"})
        unknown = test_client.post(
            "/auth/login", json={"email": "nobody@brightsmile.com", "password": OWNER_PASSWORD}
        )

        assert wrong.status_code == unknown.status_code == 401
        assert wrong.json() == unknown.json() == {"error": "Invalid credentials"}

    def test_login_account_without_password(self, test_client):
        response = test_client.post("/auth/login", json={"email": "bob@example.com", "password": "anything-at-all"})
        assert response.status_code == 401


class TestAgentWriteEndpoints:
    """Tests for creating, updating and deleting agents"""

    def test_create_agent(self, test_client, auth_headers):
        response = test_client.post("/agents", json={
            "name": "After Hours",
            "system_prompt": "Take a message and promise a callback tomorrow.",
            "voice": "bella"
        }, headers=auth_headers)

        assert response.status_code == 201
        agent = response.json()["agent"]
        assert agent["name"] == "After Hours"
        assert agent["voice"] == "bella"
        assert agent["template"] is None
        assert agent["is_active"] is True

        listed = test_client.get("/agents", headers=auth_headers).json()["agents"]
        assert agent["id"] in [a["id"] for a in listed]

    def test_create_from_template(self, test_client, auth_headers):
        """Test a known template supplies prompt, greeting and voice"""
        response = test_client.post("/agents", json={
            "name": "Sales Line",
            "template": "leadQualification",
            "system_prompt": "This prompt is replaced by the template.",
            "voice": "bella"
        }, headers=auth_headers)

        assert response.status_code == 201
        agent = response.json()["agent"]
        assert agent["template"] == "leadQualification"
        assert agent["voice"] == "adam"
        assert agent["system_prompt"].startswith("You are a professional sales development representative")

    def test_create_unknown_template(self, test_client, auth_headers):
        response = test_client.post("/agents", json={
            "name": "Custom",
            "template": "doesNotExist",
            "system_prompt": "Answer questions about opening hours."
        }, headers=auth_headers)

        assert response.status_code == 201
        agent = response.json()["agent"]
        assert agent["template"] is None
        assert agent["system_prompt"] == "Answer questions about opening hours."

    def test_create_requires_prompt(self, test_client, auth_headers):
        response = test_client.post("/agents", json={"name": "Bad", "system_prompt": "short"}, headers=auth_headers)
        assert response.status_code == 422

    def test_create_requires_auth(self, test_client):
        response = test_client.post("/agents", json={"name": "X", "system_prompt": "Long enough prompt"})
        assert response.status_code == 401

    def test_create_storage_failure(self, test_client, auth_headers):
        with patch(
            "ai_caller.api.routes.agents.AgentRepository.create_agent",
            side_effect=StorageError("disk I/O error", operation="create_agent")
        ):
            response = test_client.post("/agents", json={
                "name": "After Hours",
                "system_prompt": "Take a message and promise a callback."
            }, headers=auth_headers)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to create agent"}

    def test_update_agent(self, test_client, auth_headers):
        response = test_client.patch(
            "/agents/agent-front-desk", json={"voice": "josh", "is_active": False}, headers=auth_headers
        )

        assert response.status_code == 200
        agent = response.json()["agent"]
        assert agent["voice"] == "josh"
        assert agent["is_active"] is False
        assert agent["name"] == "Front Desk"

    def test_update_ignores_null_required_fields(self, test_client, auth_headers):
        response = test_client.patch(
            "/agents/agent-front-desk", json={"name": None, "greeting": None}, headers=auth_headers
        )

        assert response.status_code == 200
        agent = response.json()["agent"]
        assert agent["name"] == "Front Desk"
        assert agent["greeting"] is None

    def test_update_other_owner(self, test_client, auth_headers, other_auth_headers):
        response = test_client.patch("/agents/agent-bob", json={"name": "Hijacked"}, headers=auth_headers)

        assert response.status_code == 404
        assert response.json() == {"error": "Agent not found"}
        bob_view = test_client.get("/agents/agent-bob", headers=other_auth_headers).json()["agent"]
        assert bob_view["name"] == "Sales"

    def test_delete_agent(self, test_client, auth_headers):
        """Test deleting an agent keeps its calls without an agent"""
        response = test_client.delete("/agents/agent-front-desk", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert test_client.get("/agents/agent-front-desk", headers=auth_headers).status_code == 404
        call = test_client.get("/calls/abc123", headers=auth_headers).json()["call"]
        assert call["agent"] is None

    def test_delete_other_owner(self, test_client, auth_headers, other_auth_headers):
        response = test_client.delete("/agents/agent-bob", headers=auth_headers)

        assert response.status_code == 404
        assert test_client.get("/agents/agent-bob", headers=other_auth_headers).status_code == 200


class TestTemplateEndpoints:
    """Tests for agent templates"""

    def test_list_templates(self, test_client):
        response = test_client.get("/templates")

        assert response.status_code == 200
        templates = response.json()["templates"]
        assert [t["id"] for t in templates] == [
            "appointmentBooking", "leadQualification", "customerSupport", "surveyCollection"
        ]
        assert templates[1]["suggested_voice"] == "adam"
        assert templates[0]["sample_questions"]


class TestAdminEndpoints:
    """Tests for administrator routes"""

    def test_list_users(self, test_client, admin_headers):
        response = test_client.get("/admin/users", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert {u["id"] for u in data["users"]} == {"user-alice", "user-bob", "user-admin"}

    def test_list_users_forbidden(self, test_client, auth_headers):
        response = test_client.get("/admin/users", headers=auth_headers)

        assert response.status_code == 403
        assert response.json() == {"error": "Forbidden"}

    def test_list_users_unauthenticated(self, test_client):
        assert test_client.get("/admin/users").status_code == 401


class TestConcurrentRequests:
    """Tests that a slow storage lookup holds up only its own request"""

    @staticmethod
    def slow_lookup(call_id, owner_id):
        time.sleep(1.0)
        return None

    async def _health_latency_during(self, app, method, path, **kwargs):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
            with patch("ai_caller.api.routes.calls.CallRepository.get_call", side_effect=self.slow_lookup):
                slow_request = asyncio.create_task(client.request(method, path, **kwargs))
                await asyncio.sleep(0.1)

                started = time.perf_counter()
                health = await client.get("/health")
                elapsed = time.perf_counter() - started

                slow_response = await slow_request

        assert health.status_code == 200
        assert slow_response.status_code == 404
        return elapsed

    @pytest.mark.asyncio
    async def test_slow_call_lookup(self, app, auth_headers):
        elapsed = await self._health_latency_during(app, "GET", "/calls/abc123", headers=auth_headers)
        assert elapsed < 0.5

    @pytest.mark.asyncio
    async def test_slow_lookup_during_reply(self, app, auth_headers):
        elapsed = await self._health_latency_during(
            app, "POST", "/calls/abc123/reply", json=REPLY_BODY, headers=auth_headers
        )
        assert elapsed < 0.5
