"""Tests for ConnectClient construction and the request executor."""

import os
from unittest.mock import patch

import httpx
import pytest
from conftest import BASE_URL, CLIENT_KWARGS, Recorder, make_client

from calendar_connect import ConnectClient, ConnectError, Credentials, NetworkError
from calendar_connect.config import DEFAULT_BASE_URL


class TestClientBasics:
    """Test basic ConnectClient functionality."""

    @pytest.mark.parametrize("missing", ["client_id", "client_secret", "redirect_uri"])
    def test_requires_config(self, missing):
        """Should raise ConnectError when a required setting is empty."""
        kwargs = {**CLIENT_KWARGS, missing: ""}
        with (
            patch.dict(os.environ, {}, clear=True),
            pytest.raises(ConnectError, match="are required"),
        ):
            ConnectClient(**kwargs)

    def test_requires_config_before_network(self):
        """Should fail construction without sending anything."""
        recorder = Recorder()
        with patch.dict(os.environ, {}, clear=True), pytest.raises(ConnectError):
            ConnectClient(transport=httpx.MockTransport(recorder))
        assert recorder.requests == []

    def test_init_with_params(self):
        """Should keep explicit configuration."""
        client = ConnectClient(**CLIENT_KWARGS)
        assert client.config.client_id == "test-client-id"
        assert client.config.redirect_uri == "http://localhost/callback"
        assert client.base_url == BASE_URL

    def test_init_from_env(self):
        """Should read configuration from environment variables."""
        env = {
            "CALENDAR_CONNECT_CLIENT_ID": "env-id",
            "CALENDAR_CONNECT_CLIENT_SECRET": "env-secret",
            "CALENDAR_CONNECT_REDIRECT_URI": "https://app.test/cb",
        }
        with patch.dict(os.environ, env, clear=True):
            client = ConnectClient()
        assert client.config.client_id == "env-id"
        assert client.config.client_secret == "env-secret"
        assert client.base_url == DEFAULT_BASE_URL

    def test_base_url_trailing_slash(self):
        """Should strip a trailing slash from the base URL."""
        client = ConnectClient(**{**CLIENT_KWARGS, "base_url": "https://connect.test/api/"})
        assert client.base_url == "https://connect.test/api"

    def test_resources(self):
        """Should expose auth, calendars and events."""
        client = ConnectClient(**CLIENT_KWARGS)
        assert callable(client.calendars.list)
        assert callable(client.events.list)
        assert callable(client.auth.get_token)

    def test_set_credentials_from_dict(self):
        """Should accept a token payload dict."""
        client = ConnectClient(**CLIENT_KWARGS)
        client.set_credentials({"access_token": "abc", "token_type": "Bearer", "scope": "x"})
        assert client.get_credentials() == Credentials(access_token="abc")

    def test_no_credentials_initially(self):
        client = ConnectClient(**CLIENT_KWARGS)
        assert client.get_credentials() is None

    def test_instances_do_not_share_credentials(self):
        """Should keep credentials per instance."""
        first = ConnectClient(**CLIENT_KWARGS)
        second = ConnectClient(**CLIENT_KWARGS)
        first.set_credentials(Credentials(access_token="first"))
        assert second.get_credentials() is None

    def test_on_tokens_called_on_set(self):
        """Should notify the callback when credentials change."""
        seen = []
        client = ConnectClient(**CLIENT_KWARGS, on_tokens=seen.append)
        client.set_credentials(Credentials(access_token="abc"))
        assert seen == [Credentials(access_token="abc")]


class TestRequestHeaders:
    """Test header generation."""

    @pytest.mark.asyncio
    async def test_bearer_from_store(self, recorder):
        """Should attach the stored access token."""
        client = make_client(recorder, credentials={"access_token": "stored"})
        await client.request("GET", "/calendars")
        assert recorder.last.headers["Authorization"] == "Bearer stored"
        assert recorder.last.headers["Content-Type"] == "application/json"

    @pytest.mark.asyncio
    async def test_no_authorization_without_token(self, recorder):
        """Should not send Authorization without credentials."""
        client = make_client(recorder)
        await client.request("GET", "/calendars")
        assert "Authorization" not in recorder.last.headers

    @pytest.mark.asyncio
    async def test_access_token_override(self, recorder):
        """Should use the per-call token without touching the store."""
        client = make_client(recorder, credentials={"access_token": "stored"})

        await client.request("GET", "/calendars", access_token="override")
        assert recorder.last.headers["Authorization"] == "Bearer override"
        assert client.get_credentials().access_token == "stored"

        await client.request("GET", "/calendars")
        assert recorder.last.headers["Authorization"] == "Bearer stored"

    @pytest.mark.asyncio
    async def test_request_auth_replaces_bearer(self, recorder):
        """Should let per-request httpx auth replace the stored bearer token."""
        client = make_client(recorder, credentials={"access_token": "stored"})

        await client.executor.send("POST", "/oauth/token", auth=httpx.BasicAuth("id", "secret"))

        # base64("id:secret")
        assert recorder.last.headers["Authorization"] == "Basic aWQ6c2VjcmV0"

    @pytest.mark.asyncio
    async def test_custom_headers(self, recorder):
        """Should send configured extra headers."""
        client = make_client(recorder, headers={"X-Request-Source": "tests"})
        await client.request("GET", "/calendars")
        assert recorder.last.headers["X-Request-Source"] == "tests"

    @pytest.mark.asyncio
    async def test_url_joined_with_base(self, recorder):
        client = make_client(recorder)
        await client.request("GET", "/calendars")
        assert str(recorder.last.url) == f"{BASE_URL}/calendars"


class TestRequestResults:
    """Test response handling."""

    @pytest.mark.asyncio
    async def test_response_fields(self):
        """Should return data, status and headers."""
        client = make_client(Recorder(201, {"ok": True}, {"X-Trace": "t1"}))
        response = await client.request("POST", "/event", json={})
        assert response.data == {"ok": True}
        assert response.status == 201
        assert response.headers["x-trace"] == "t1"

    @pytest.mark.asyncio
    async def test_empty_body(self):
        """Should decode an empty body as None."""
        client = make_client(lambda request: httpx.Response(204))
        response = await client.request("DELETE", "/event")
        assert response.data is None

    @pytest.mark.asyncio
    async def test_network_error(self):
        """Should raise NetworkError with the transport's message."""

        def handler(request):
            raise httpx.ConnectError("Connection refused")

        client = make_client(handler)
        with pytest.raises(NetworkError) as exc_info:
            await client.request("GET", "/calendars")
        assert str(exc_info.value) == "Connection refused"
        assert exc_info.value.code == "NETWORK_ERROR"

    @pytest.mark.asyncio
    async def test_timeout_is_network_error(self):
        """Should treat a timeout as NetworkError."""

        def handler(request):
            raise httpx.ReadTimeout("timed out")

        client = make_client(handler)
        with pytest.raises(NetworkError, match="timed out"):
            await client.request("GET", "/calendars")

    @pytest.mark.asyncio
    async def test_error_status_raises(self):
        """Should raise the mapped error for non-2xx responses."""
        client = make_client(Recorder(404, {"message": "Calendar not found"}))
        with pytest.raises(ConnectError, match="Calendar not found") as exc_info:
            await client.request("GET", "/calendars")
        assert exc_info.value.code == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_context_manager(self, recorder):
        """Should work as an async context manager."""
        async with make_client(recorder) as client:
            await client.request("GET", "/calendars")
        assert len(recorder.requests) == 1
