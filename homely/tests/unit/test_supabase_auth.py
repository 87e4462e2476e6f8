"""Unit tests for the Supabase GoTrue client using httpx.MockTransport."""

import json
import uuid

import httpx
import pytest

from homely.core.exceptions import AuthenticationError, ExternalServiceError
from homely.services.supabase_auth import (
    GENERATED_PASSWORD_LENGTH,
    SupabaseAuthClient,
    generate_password,
)

SESSION = {
    "access_token": "access-1",
    "refresh_token": "refresh-1",
    "expires_in": 3600,
    "user": {"id": "5a0f6c1e-6d6b-4d0c-9d7e-0e6e1f2b8a11", "email": "anna@example.com"},
}


class Recorder:
    """MockTransport handler that records requests and replays one response."""

    def __init__(self, status_code: int = 200, body=None, error: Exception | None = None):
        self.status_code = status_code
        self.body = body if body is not None else {}
        self.error = error
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def make_client(test_settings, handler) -> SupabaseAuthClient:
    return SupabaseAuthClient(test_settings, transport=httpx.MockTransport(handler))


def test_generated_password():
    password = generate_password()
    assert len(password) == GENERATED_PASSWORD_LENGTH
    assert generate_password() != password


class TestSessionEndpoints:
    @pytest.mark.asyncio
    async def test_password_sign_in(self, test_settings):
        recorder = Recorder(body=SESSION)
        client = make_client(test_settings, recorder)

        session = await client.sign_in_with_password("anna@example.com", "pw")

        assert session["access_token"] == "access-1"
        request = recorder.last
        assert request.url.path == "/auth/v1/token"
        assert request.url.params["grant_type"] == "password"
        assert request.headers["apikey"] == "anon-key"
        assert "authorization" not in request.headers
        assert json.loads(request.content) == {"email": "anna@example.com", "password": "pw"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [400, 401, 403])
    async def test_rejected_credentials(self, test_settings, status_code):
        client = make_client(test_settings, Recorder(status_code, {"error": "invalid_grant"}))
        with pytest.raises(AuthenticationError) as exc_info:
            await client.sign_in_with_password("anna@example.com", "wrong")
        assert exc_info.value.error_code == "INVALID_CREDENTIALS"

    @pytest.mark.asyncio
    async def test_refresh_uses_refresh_grant(self, test_settings):
        recorder = Recorder(body=SESSION)
        client = make_client(test_settings, recorder)

        await client.refresh_session("refresh-0")

        assert recorder.last.url.params["grant_type"] == "refresh_token"
        assert json.loads(recorder.last.content) == {"refresh_token": "refresh-0"}

    @pytest.mark.asyncio
    async def test_rejected_refresh_token(self, test_settings):
        client = make_client(test_settings, Recorder(400))
        with pytest.raises(AuthenticationError) as exc_info:
            await client.refresh_session("stale")
        assert exc_info.value.error_code == "INVALID_REFRESH_TOKEN"

    @pytest.mark.asyncio
    async def test_sign_out_sends_user_token(self, test_settings):
        recorder = Recorder(204)
        client = make_client(test_settings, recorder)

        assert await client.sign_out("access-1") is True
        assert recorder.last.headers["authorization"] == "Bearer access-1"

    @pytest.mark.asyncio
    async def test_sign_out_failure_is_reported(self, test_settings):
        client = make_client(test_settings, Recorder(401))
        assert await client.sign_out("access-1") is False

    @pytest.mark.asyncio
    async def test_get_user_rejected(self, test_settings):
        client = make_client(test_settings, Recorder(401))
        with pytest.raises(AuthenticationError):
            await client.get_user("expired")


class TestFailures:
    @pytest.mark.asyncio
    async def test_server_error(self, test_settings):
        client = make_client(test_settings, Recorder(503))
        with pytest.raises(ExternalServiceError) as exc_info:
            await client.sign_in_with_password("anna@example.com", "pw")
        assert exc_info.value.status_code == 502
        assert exc_info.value.details["upstream_status"] == 503

    @pytest.mark.asyncio
    async def test_unexpected_client_error(self, test_settings):
        client = make_client(test_settings, Recorder(429))
        with pytest.raises(ExternalServiceError):
            await client.refresh_session("refresh-0")

    @pytest.mark.asyncio
    async def test_connection_error(self, test_settings):
        client = make_client(test_settings, Recorder(error=httpx.ConnectError("refused")))
        with pytest.raises(ExternalServiceError) as exc_info:
            await client.get_user("token")
        assert exc_info.value.message == "Authentication service is unavailable"

    @pytest.mark.asyncio
    async def test_timeout(self, test_settings):
        client = make_client(test_settings, Recorder(error=httpx.ReadTimeout("slow")))
        with pytest.raises(ExternalServiceError) as exc_info:
            await client.sign_out("token")
        assert exc_info.value.message == "Authentication service timed out"

    @pytest.mark.asyncio
    async def test_non_object_body(self, test_settings):
        client = make_client(test_settings, Recorder(body=["not", "a", "session"]))
        with pytest.raises(ExternalServiceError):
            await client.sign_in_with_password("anna@example.com", "pw")


class TestAdminEndpoints:
    @pytest.mark.asyncio
    async def test_create_user_with_service_role(self, test_settings):
        new_id = uuid.uuid4()
        recorder = Recorder(200, {"id": str(new_id)})
        client = make_client(test_settings, recorder)

        user_id = await client.admin_create_user("jan@example.com")

        assert user_id == new_id
        request = recorder.last
        assert request.url.path == "/auth/v1/admin/users"
        assert request.headers["apikey"] == "service-role-key"
        assert request.headers["authorization"] == "Bearer service-role-key"
        body = json.loads(request.content)
        assert body["email_confirm"] is True
        assert len(body["password"]) == GENERATED_PASSWORD_LENGTH

    @pytest.mark.asyncio
    async def test_create_user_without_id(self, test_settings):
        client = make_client(test_settings, Recorder(200, {"email": "jan@example.com"}))
        with pytest.raises(ExternalServiceError):
            await client.admin_create_user("jan@example.com", "pw")

    @pytest.mark.asyncio
    async def test_create_user_rejected(self, test_settings):
        client = make_client(test_settings, Recorder(422, {"msg": "email exists"}))
        with pytest.raises(ExternalServiceError) as exc_info:
            await client.admin_create_user("jan@example.com", "pw")
        assert exc_info.value.details["upstream_status"] == 422

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("status_code", "deleted"), [(200, True), (404, True), (403, False)])
    async def test_delete_user(self, test_settings, status_code, deleted):
        recorder = Recorder(status_code)
        client = make_client(test_settings, recorder)
        user_id = uuid.uuid4()

        assert await client.admin_delete_user(user_id) is deleted
        assert recorder.last.method == "DELETE"
        assert recorder.last.url.path == f"/auth/v1/admin/users/{user_id}"
