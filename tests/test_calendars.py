"""Tests for the Calendars resource."""

import pytest
from conftest import Recorder, make_client

from calendar_connect import ServerError

CALENDARS = [
    {"id": "work@company.com", "title": "My Calendar", "provider": "google", "timeZone": "UTC"},
    {"id": "AAMkAGI2T", "title": "Work Calendar", "provider": "microsoft"},
    {"id": "E2857962-EE43", "title": "Personal", "provider": "apple"},
]


class TestListCalendars:
    """Test calendar listing."""

    @pytest.mark.asyncio
    async def test_list(self):
        """Should GET /calendars and return the unified list."""
        recorder = Recorder(payload=CALENDARS)
        client = make_client(recorder, credentials={"access_token": "t"})

        calendars = await client.calendars.list()

        assert calendars == CALENDARS
        assert recorder.last.method == "GET"
        assert recorder.last.url.path == "/api/calendars"

    @pytest.mark.asyncio
    async def test_access_token_override(self):
        recorder = Recorder(payload=CALENDARS)
        client = make_client(recorder)

        await client.calendars.list(access_token="per-call")

        assert recorder.last.headers["Authorization"] == "Bearer per-call"
        assert client.get_credentials() is None

    @pytest.mark.asyncio
    async def test_server_error(self):
        """Should raise ServerError with the status code."""
        client = make_client(Recorder(503, {"message": "Provider unavailable"}))
        with pytest.raises(ServerError, match="Provider unavailable") as exc_info:
            await client.calendars.list()
        assert exc_info.value.status_code == 503
