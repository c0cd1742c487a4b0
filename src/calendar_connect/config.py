"""Client configuration.

Values not passed explicitly are read from the environment:
    CALENDAR_CONNECT_CLIENT_ID      - OAuth client ID
    CALENDAR_CONNECT_CLIENT_SECRET  - OAuth client secret
    CALENDAR_CONNECT_REDIRECT_URI   - Redirect URI registered for the client
    CALENDAR_CONNECT_BASE_URL       - API base URL (optional)
    CALENDAR_CONNECT_ACCESS_TOKEN   - Access token (CLI only)
    CALENDAR_CONNECT_REFRESH_TOKEN  - Refresh token (CLI only)

A .env file can be loaded with ``load_env_file``; variables already set in
the environment take precedence.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from calendar_connect.exceptions import ConnectError

DEFAULT_BASE_URL = "https://connect.mobiscroll.com/api"
DEFAULT_TIMEOUT = 30.0

ENV_PREFIX = "CALENDAR_CONNECT_"
ENV_FILE = Path.cwd() / ".env"


@dataclass(frozen=True)
class ConnectConfig:
    """OAuth client settings for one client instance.

    Raises:
        ConnectError: If client_id, client_secret or redirect_uri is empty.
    """

    client_id: str
    client_secret: str
    redirect_uri: str
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    headers: dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if not self.client_id or not self.client_secret or not self.redirect_uri:
            raise ConnectError("Client ID, Client Secret and Redirect URI are required")

    @classmethod
    def from_env(
        cls,
        client_id: str | None = None,
        client_secret: str | None = None,
        redirect_uri: str | None = None,
        base_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        headers: dict[str, str] | None = None,
    ) -> ConnectConfig:
        """Build a config, filling missing values from the environment."""
        return cls(
            client_id=client_id or os.environ.get(f"{ENV_PREFIX}CLIENT_ID", ""),
            client_secret=client_secret or os.environ.get(f"{ENV_PREFIX}CLIENT_SECRET", ""),
            redirect_uri=redirect_uri or os.environ.get(f"{ENV_PREFIX}REDIRECT_URI", ""),
            base_url=(
                base_url or os.environ.get(f"{ENV_PREFIX}BASE_URL") or DEFAULT_BASE_URL
            ).rstrip("/"),
            timeout=timeout,
            headers=dict(headers or {}),
        )


def _parse_env_line(line: str) -> tuple[str, str] | None:
    """Split one ``KEY=value`` line, or return None for anything else.

    Accepts an optional ``export`` prefix and strips one pair of matching
    quotes from the value.
    """
    line = line.strip()
    if line.startswith("export "):
        line = line[len("export ") :].lstrip()
    if not line or line.startswith("#"):
        return None

    key, sep, value = line.partition("=")
    key = key.strip()
    if not sep or not key:
        return None

    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        value = value[1:-1]
    return key, value


def load_env_file(env_path: Path = ENV_FILE) -> dict[str, str]:
    """Copy settings from a .env file into ``os.environ``.

    Variables already present in the environment are kept.

    Args:
        env_path: Path to the .env file.

    Returns:
        The variables that were set from the file.
    """
    if not env_path.is_file():
        return {}

    pairs = filter(None, map(_parse_env_line, env_path.read_text().splitlines()))
    loaded = {key: value for key, value in pairs if key not in os.environ}
    os.environ.update(loaded)
    return loaded


def get_credential_status() -> dict:
    """Report which settings are present in the environment.

    Returns:
        Dictionary of setting name to bool, plus the base URL in use.
    """
    return {
        "env_file": ENV_FILE.exists(),
        "base_url": os.environ.get(f"{ENV_PREFIX}BASE_URL") or DEFAULT_BASE_URL,
        "client": {
            "client_id": bool(os.environ.get(f"{ENV_PREFIX}CLIENT_ID")),
            "client_secret": bool(os.environ.get(f"{ENV_PREFIX}CLIENT_SECRET")),
            "redirect_uri": bool(os.environ.get(f"{ENV_PREFIX}REDIRECT_URI")),
        },
        "tokens": {
            "access_token": bool(os.environ.get(f"{ENV_PREFIX}ACCESS_TOKEN")),
            "refresh_token": bool(os.environ.get(f"{ENV_PREFIX}REFRESH_TOKEN")),
        },
    }
