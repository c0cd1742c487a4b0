"""In-memory credential store for a single client instance."""

from __future__ import annotations

import logging
from collections.abc import Callable

from calendar_connect.models import Credentials

logger = logging.getLogger(__name__)

TokenCallback = Callable[[Credentials], None]


class CredentialStore:
    """Holds the current access/refresh token pair.

    Credentials are replaced wholesale, never edited in place. Pass
    ``on_update`` to be told about every replacement, e.g. to persist
    refreshed tokens.

    The store is not locked; it is only touched from the event loop that
    runs the client.
    """

    def __init__(
        self,
        credentials: Credentials | None = None,
        on_update: TokenCallback | None = None,
    ):
        self._credentials = credentials
        self._on_update = on_update

    def get(self) -> Credentials | None:
        return self._credentials

    def set(self, credentials: Credentials) -> None:
        self._credentials = credentials
        logger.debug(
            f"Credentials updated (refresh token: {'yes' if credentials.refresh_token else 'no'})"
        )
        if self._on_update is not None:
            self._on_update(credentials)

    def clear(self) -> None:
        self._credentials = None

    @property
    def access_token(self) -> str | None:
        return self._credentials.access_token if self._credentials else None

    @property
    def refresh_token(self) -> str | None:
        return self._credentials.refresh_token if self._credentials else None
