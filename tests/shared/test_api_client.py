"""Tests for shared/api_client.py."""

import httpx
import pytest

from shared.api_client import APIClient, create_api_client
from shared.config import Settings
from shared.exceptions import DecodingError, InvalidResponseError, InvalidURLError, ServerError
from modules.auth.models import StartLoginRequest, StartLoginResponse, VerifyCodeResponse
from modules.auth.token_store import InMemoryTokenStore


class TestUrlResolution:
    def test_resolves_absolute_path(self, api_client):
        """Paths should resolve against the base URL."""
        assert str(api_client.resolve_url("/api/auth/login")) == "https://api.heartbridge.test/api/auth/login"

    def test_absolute_path_replaces_base_path(self, token_store):
        """A leading slash should replace any path on the base URL."""
        client = APIClient("https://host.test/v1/", token_store)
        assert str(client.resolve_url("/api/x")) == "https://host.test/api/x"

    def test_relative_path_extends_base_path(self, token_store):
        """A relative path should resolve under the base URL's directory."""
        client = APIClient("https://host.test/v1/", token_store)
        assert str(client.resolve_url("api/x")) == "https://host.test/v1/api/x"

    @pytest.mark.asyncio
    async def test_unresolvable_base_url(self, backend, token_store):
        """A base URL without scheme and host should fail with InvalidURLError."""
        client = APIClient("", token_store, transport=httpx.MockTransport(backend.handler))
        with pytest.raises(InvalidURLError):
            await client.get("/api/anything")
        assert backend.requests == []

    @pytest.mark.asyncio
    async def test_malformed_path(self, api_client, backend):
        """An unparseable path should fail before any request is sent."""
        with pytest.raises(InvalidURLError):
            await api_client.get("http://host.test:notaport/x")
        assert backend.requests == []


class TestHeaders:
    @pytest.mark.asyncio
    async def test_get_sends_accept_only(self, api_client, backend):
        """GET without a body should not send Content-Type."""
        backend.respond("GET", "/api/ping", body={"ok": True})
        await api_client.get("/api/ping")

        headers = backend.last_request.headers
        assert headers["Accept"] == "application/json"
        assert "Content-Type" not in headers
        assert "Authorization" not in headers

    @pytest.mark.asyncio
    async def test_post_sends_content_type(self, api_client, backend):
        """POST with a body should send Content-Type: application/json."""
        backend.respond("POST", "/api/ping", body={"ok": True})
        await api_client.post("/api/ping", {"value": 1})

        assert backend.last_request.headers["Content-Type"] == "application/json"
        assert backend.last_request.headers["Accept"] == "application/json"

    @pytest.mark.asyncio
    async def test_attaches_bearer_token_when_stored(self, api_client, backend, token_store):
        """Every call should carry the stored token."""
        token_store.save_token("tok123")
        backend.respond("GET", "/api/public", body={})
        backend.respond("POST", "/api/auth/start-login", body={"message": "sent"})

        await api_client.get("/api/public")
        assert backend.last_request.headers["Authorization"] == "Bearer tok123"

        await api_client.post("/api/auth/start-login", {"phone": "5551234567"})
        assert backend.last_request.headers["Authorization"] == "Bearer tok123"

    @pytest.mark.asyncio
    async def test_token_read_on_every_call(self, api_client, backend, token_store):
        """Clearing the token should drop the header from the next call."""
        backend.respond("GET", "/api/me", body={})
        token_store.save_token("tok123")
        await api_client.get("/api/me")
        token_store.clear_token()
        await api_client.get("/api/me")

        assert "Authorization" not in backend.last_request.headers


class TestBodyEncoding:
    @pytest.mark.asyncio
    async def test_model_body_is_snake_case(self, api_client, backend):
        """Model bodies should go out with snake_case keys and no null optionals."""
        backend.respond("POST", "/api/auth/start-login", body={"message": "sent"})
        request = StartLoginRequest(user_type="expert", name="Dr. Kim", phone="5551234567")

        await api_client.post("/api/auth/start-login", request, StartLoginResponse)

        assert backend.last_json() == {"user_type": "expert", "name": "Dr. Kim", "phone": "5551234567"}

    @pytest.mark.asyncio
    async def test_mapping_body_keys_converted(self, api_client, backend):
        """camelCase mapping keys should be converted to snake_case."""
        backend.respond("POST", "/api/posts", body={})
        await api_client.post("/api/posts", {"authorName": "Alex", "mediaUrl": None, "tags": ["a"]})

        assert backend.last_json() == {"author_name": "Alex", "tags": ["a"]}


class TestStatusClassification:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [200, 201, 204, 250, 299])
    async def test_2xx_is_success(self, api_client, backend, status):
        """Every status in 200-299 should be treated as success."""
        backend.respond("POST", "/api/x", status=status, body={"message": "ok"})
        response = await api_client.post("/api/x", {"a": 1}, StartLoginResponse)
        assert response.message == "ok"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [199, 300, 304, 400, 401, 404, 422, 500, 503])
    async def test_other_status_is_failure(self, api_client, backend, status):
        """Statuses outside 200-299 should raise ServerError with the server's text."""
        backend.respond("GET", "/api/x", status=status, body={"error": "nope"})
        with pytest.raises(ServerError) as exc_info:
            await api_client.get("/api/x")
        assert exc_info.value.message == "nope"
        assert exc_info.value.status_code == status

    @pytest.mark.asyncio
    async def test_server_error_without_error_body(self, api_client, backend):
        """Undecodable error bodies should produce a templated message."""
        backend.respond("GET", "/api/x", status=502, body="<html>Bad gateway</html>")
        with pytest.raises(ServerError) as exc_info:
            await api_client.get("/api/x")
        assert exc_info.value.message == "Server error (502)"

    @pytest.mark.asyncio
    async def test_server_error_with_non_string_error(self, api_client, backend):
        """An error field that is not a string should also fall back to the template."""
        backend.respond("GET", "/api/x", status=400, body={"error": {"code": 1}})
        with pytest.raises(ServerError) as exc_info:
            await api_client.get("/api/x")
        assert exc_info.value.message == "Server error (400)"

    @pytest.mark.asyncio
    async def test_transport_failure(self, api_client, backend):
        """Transport errors should surface as InvalidResponseError, without retry."""
        backend.fail_with(httpx.ConnectError("connection refused"))
        with pytest.raises(InvalidResponseError):
            await api_client.get("/api/x")
        assert len(backend.requests) == 1


class TestDecoding:
    @pytest.mark.asyncio
    async def test_decodes_snake_case_into_model(self, api_client, backend):
        """Wire snake_case should decode into the expected model."""
        backend.respond(
            "POST",
            "/api/auth/verify-code",
            body={
                "message": "ok",
                "token": "tok123",
                "user": {"name": "Alex", "child_name": "Andy", "user_type": "parent", "created_at": "2026-01-21"},
            },
        )
        response = await api_client.post("/api/auth/verify-code", {"phone": "1", "code": "0000"}, VerifyCodeResponse)

        assert response.token == "tok123"
        assert response.user.child_name == "Andy"
        assert response.user.user_type == "parent"
        assert response.user.created_at == "2026-01-21"

    @pytest.mark.asyncio
    async def test_without_model_returns_camel_case_json(self, api_client, backend):
        """Without a model the JSON should come back with camelCase keys."""
        backend.respond("GET", "/api/videos", body={"videos": [{"thumbnail_url": "u", "created_at": "t"}]})
        data = await api_client.get("/api/videos")
        assert data == {"videos": [{"thumbnailUrl": "u", "createdAt": "t"}]}

    @pytest.mark.asyncio
    async def test_empty_body_without_model(self, api_client, backend):
        """An empty success body should decode to None when no model is expected."""
        backend.respond("POST", "/api/logout", status=204)
        assert await api_client.post("/api/logout") is None

    @pytest.mark.asyncio
    async def test_shape_mismatch_raises_decoding_error(self, api_client, backend):
        """A body missing required fields should raise DecodingError."""
        backend.respond("POST", "/api/auth/verify-code", body={"message": "ok"})
        with pytest.raises(DecodingError) as exc_info:
            await api_client.post("/api/auth/verify-code", {"code": "0000"}, VerifyCodeResponse)
        assert exc_info.value.message.startswith("Failed to decode response:")

    @pytest.mark.asyncio
    async def test_invalid_json_raises_decoding_error(self, api_client, backend):
        """A non-JSON success body should raise DecodingError, not crash."""
        backend.respond("GET", "/api/x", body="not json")
        with pytest.raises(DecodingError):
            await api_client.get("/api/x", StartLoginResponse)


class TestFactory:
    def test_create_api_client_uses_settings(self):
        """The factory should point the client at the configured base URL."""
        client = create_api_client(InMemoryTokenStore(), Settings(api_base_url="https://api.example.com"))
        assert client.base_url == "https://api.example.com"
