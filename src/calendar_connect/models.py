"""Data models shared across the client."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, get_args

Provider = Literal["google", "microsoft", "apple"]
UpdateMode = Literal["this", "following", "all"]
DeleteMode = Literal["this", "following", "all"]

PROVIDERS: tuple[str, ...] = get_args(Provider)
RECURRING_MODES: tuple[str, ...] = get_args(UpdateMode)


@dataclass(frozen=True)
class Credentials:
    """OAuth tokens issued by the token endpoint."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int | None = None
    refresh_token: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Credentials:
        """Build credentials from a token endpoint payload.

        Unknown keys (scope, id_token, ...) are ignored.
        """
        return cls(
            access_token=data["access_token"],
            token_type=data.get("token_type") or "Bearer",
            expires_in=data.get("expires_in"),
            refresh_token=data.get("refresh_token"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize, omitting unset optional fields."""
        data: dict[str, Any] = {
            "access_token": self.access_token,
            "token_type": self.token_type,
        }
        if self.expires_in is not None:
            data["expires_in"] = self.expires_in
        if self.refresh_token is not None:
            data["refresh_token"] = self.refresh_token
        return data

    def refreshed(self, issued: Credentials) -> Credentials:
        """Return the credentials to store after a refresh.

        Providers may omit the refresh token from a refresh response; the
        current one stays valid in that case.
        """
        return Credentials(
            access_token=issued.access_token,
            token_type=issued.token_type,
            expires_in=issued.expires_in,
            refresh_token=issued.refresh_token or self.refresh_token,
        )


@dataclass
class ApiResponse:
    """A decoded 2xx response."""

    data: Any
    status: int
    headers: dict[str, str] = field(default_factory=dict)


def check_provider(provider: str) -> None:
    """Raise ValueError for an unsupported provider name."""
    if provider not in PROVIDERS:
        raise ValueError(f"Unknown provider: {provider}. Supported providers: {list(PROVIDERS)}")


def check_mode(mode: str | None, name: str) -> None:
    """Raise ValueError for an unsupported recurring update/delete mode."""
    if mode is not None and mode not in RECURRING_MODES:
        raise ValueError(f"Unknown {name}: {mode}. Use one of: {list(RECURRING_MODES)}")
