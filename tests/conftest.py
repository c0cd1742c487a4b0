"""Shared fixtures: a ConnectClient wired to an in-process fake API."""

import json
from urllib.parse import parse_qs

import httpx
import pytest

from calendar_connect import ConnectClient

BASE_URL = "https://connect.test/api"
CLIENT_KWARGS = {
    "client_id": "test-client-id",
    "client_secret": "test-client-secret",
    "redirect_uri": "http://localhost/callback",
    "base_url": BASE_URL,
}


def make_client(handler, **kwargs) -> ConnectClient:
    """Create a client whose requests are answered by ``handler``."""
    return ConnectClient(**CLIENT_KWARGS, transport=httpx.MockTransport(handler), **kwargs)


def form_body(request: httpx.Request) -> dict[str, str]:
    """Decode a form-encoded request body."""
    return {k: v[0] for k, v in parse_qs(request.content.decode()).items()}


def json_body(request: httpx.Request):
    return json.loads(request.content)


class Recorder:
    """Handler that records requests and answers with a fixed response."""

    def __init__(self, status_code: int = 200, payload=None, headers=None):
        self.status_code = status_code
        self.payload = payload if payload is not None else {}
        self.headers = headers or {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.payload, headers=self.headers)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def recorder():
    return Recorder()
