"""Unit tests for the authenticated API client.

A small fake API served through httpx.MockTransport accepts exactly one
access token at a time and hands out a new one on refresh.
"""

import json
import uuid
from datetime import date

import httpx
import pytest

from homely.client import HomelyClient, TokenStore
from homely.client.http_client import is_auth_endpoint

BASE_URL = "http://homely.test"


class FakeApi:
    """Stateful handler emulating the token endpoints and one data endpoint."""

    def __init__(self, valid_token: str = "access-1", refresh_ok: bool = True):
        self.valid_token = valid_token
        self.refresh_ok = refresh_ok
        self.reject_after_refresh = False
        self.calls: list[tuple[str, str, str | None]] = []
        self.refreshes = 0
        self.refresh_bodies: list[dict] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        auth = request.headers.get("Authorization")
        self.calls.append((request.method, request.url.path, auth))

        if request.url.path == "/api/auth/login":
            body = json.loads(request.content)
            if body["password"] != "pw":
                return httpx.Response(401, json={"error": {"code": "INVALID_CREDENTIALS"}})
            return httpx.Response(200, json=self._session(self.valid_token))

        if request.url.path == "/api/auth/refresh":
            self.refreshes += 1
            self.refresh_bodies.append(json.loads(request.content))
            if not self.refresh_ok:
                return httpx.Response(401, json={"error": {"code": "INVALID_REFRESH_TOKEN"}})
            self.valid_token = f"access-{self.refreshes + 1}"
            return httpx.Response(200, json=self._session(self.valid_token, refresh=None))

        if request.url.path == "/api/auth/logout":
            return httpx.Response(200, json={"success": True})

        if auth != f"Bearer {self.valid_token}" or self.reject_after_refresh and self.refreshes:
            return httpx.Response(401, json={"error": {"code": "TOKEN_EXPIRED"}})
        return httpx.Response(200, json=[{"id": str(uuid.uuid4()), "name": "Dom"}])

    @staticmethod
    def _session(token: str, refresh: str | None = "refresh-1") -> dict:
        return {
            "access_token": token,
            "refresh_token": refresh,
            "expires_in": 3600,
            "user": {"id": "5a0f6c1e-6d6b-4d0c-9d7e-0e6e1f2b8a11"},
        }

    def paths(self) -> list[str]:
        return [path for _, path, _ in self.calls]


def make_client(api: FakeApi, tokens: TokenStore | None = None) -> HomelyClient:
    return HomelyClient(BASE_URL, tokens=tokens, transport=httpx.MockTransport(api))


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/api/auth/login", True),
        ("/api/auth/refresh", True),
        ("/api/auth/logout", False),
        ("/api/households/my", False),
    ],
)
def test_is_auth_endpoint(path, expected):
    assert is_auth_endpoint(path) is expected


def test_token_store_keeps_refresh_token():
    tokens = TokenStore(access_token="a", refresh_token="r")
    tokens.save_session({"access_token": "b", "refresh_token": None, "user": {"id": "x"}})
    assert (tokens.access_token, tokens.refresh_token) == ("b", "r")
    tokens.clear()
    assert not tokens.is_authenticated
    assert tokens.refresh_token is None


# =============================================================================
# Session
# =============================================================================


class TestSession:
    @pytest.mark.asyncio
    async def test_login_stores_tokens_and_authorizes_requests(self):
        api = FakeApi()
        async with make_client(api) as client:
            await client.login("anna@example.com", "pw")
            await client.my_households()

            assert client.tokens.access_token == "access-1"
            assert api.calls[-1] == ("GET", "/api/households/my", "Bearer access-1")

    @pytest.mark.asyncio
    async def test_failed_login_is_not_retried(self):
        api = FakeApi()
        tokens = TokenStore(access_token="old", refresh_token="refresh-0")
        async with make_client(api, tokens) as client:
            with pytest.raises(httpx.HTTPStatusError) as exc_info:
                await client.login("anna@example.com", "wrong")

            assert exc_info.value.response.status_code == 401
            assert api.paths() == ["/api/auth/login"]
            assert not client.tokens.is_authenticated

    @pytest.mark.asyncio
    async def test_logout_clears_tokens_even_on_error(self):
        def failing(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("down", request=request)

        tokens = TokenStore(access_token="a", refresh_token="r")
        async with HomelyClient(BASE_URL, tokens, httpx.MockTransport(failing)) as client:
            await client.logout()
            assert client.tokens.access_token is None
            assert client.tokens.refresh_token is None


# =============================================================================
# Refresh on 401
# =============================================================================


class TestRefreshOnUnauthorized:
    @pytest.mark.asyncio
    async def test_expired_token_is_refreshed_and_request_retried_once(self):
        api = FakeApi(valid_token="access-fresh")
        tokens = TokenStore(access_token="access-stale", refresh_token="refresh-0")
        async with make_client(api, tokens) as client:
            households = await client.my_households()

        assert households[0]["name"] == "Dom"
        assert api.paths() == ["/api/households/my", "/api/auth/refresh", "/api/households/my"]
        assert api.calls[-1][2] == "Bearer access-2"
        assert tokens.access_token == "access-2"
        assert tokens.refresh_token == "refresh-0"

    @pytest.mark.asyncio
    async def test_refresh_request_sends_refresh_token_only(self):
        api = FakeApi(valid_token="access-fresh")
        tokens = TokenStore(access_token="access-stale", refresh_token="refresh-0")
        async with make_client(api, tokens) as client:
            await client.my_households()

        _, _, refresh_auth = api.calls[1]
        assert refresh_auth is None
        assert api.refresh_bodies[0] == {"refresh_token": "refresh-0"}

    @pytest.mark.asyncio
    async def test_rejected_refresh_logs_out(self):
        api = FakeApi(valid_token="access-fresh", refresh_ok=False)
        tokens = TokenStore(access_token="access-stale", refresh_token="refresh-0")
        async with make_client(api, tokens) as client:
            with pytest.raises(httpx.HTTPStatusError):
                await client.my_households()

        assert api.paths() == ["/api/households/my", "/api/auth/refresh"]
        assert not tokens.is_authenticated
        assert tokens.refresh_token is None

    @pytest.mark.asyncio
    async def test_no_refresh_token_logs_out_without_refresh(self):
        api = FakeApi(valid_token="access-fresh")
        tokens = TokenStore(access_token="access-stale")
        async with make_client(api, tokens) as client:
            with pytest.raises(httpx.HTTPStatusError):
                await client.my_households()

        assert api.paths() == ["/api/households/my"]
        assert not tokens.is_authenticated

    @pytest.mark.asyncio
    async def test_second_401_is_not_retried_again(self):
        api = FakeApi(valid_token="access-fresh")
        api.reject_after_refresh = True
        tokens = TokenStore(access_token="access-stale", refresh_token="refresh-0")
        async with make_client(api, tokens) as client:
            with pytest.raises(httpx.HTTPStatusError) as exc_info:
                await client.my_households()

        assert exc_info.value.response.status_code == 401
        assert api.paths().count("/api/auth/refresh") == 1
        assert api.paths().count("/api/households/my") == 2
        assert not tokens.is_authenticated

    @pytest.mark.asyncio
    async def test_other_errors_pass_through(self):
        def not_found(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"error": {"code": "NOT_FOUND"}})

        tokens = TokenStore(access_token="a", refresh_token="r")
        async with HomelyClient(BASE_URL, tokens, httpx.MockTransport(not_found)) as client:
            with pytest.raises(httpx.HTTPStatusError) as exc_info:
                await client.household(uuid.uuid4())

        assert exc_info.value.response.status_code == 404
        assert tokens.access_token == "a"


# =============================================================================
# Request shaping
# =============================================================================


class TestRequestShaping:
    @pytest.mark.asyncio
    async def test_event_filters_drop_unset_values(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[])

        household_id = uuid.uuid4()
        async with HomelyClient(BASE_URL, transport=httpx.MockTransport(handler)) as client:
            await client.events(household_id, start_date=date(2025, 1, 1))

        params = dict(seen[0].url.params)
        assert params == {"household_id": str(household_id), "start_date": "2025-01-01"}
        assert "authorization" not in seen[0].headers

    @pytest.mark.asyncio
    async def test_postpone_body(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        async with HomelyClient(BASE_URL, transport=httpx.MockTransport(handler)) as client:
            await client.postpone_event(uuid.uuid4(), date(2025, 4, 1), "Away")

        assert json.loads(seen[0].content) == {"new_due_date": "2025-04-01", "reason": "Away"}
