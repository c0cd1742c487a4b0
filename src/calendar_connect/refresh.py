"""Token refresh coordination.

When an authenticated call comes back 401 and a refresh token is stored,
the call waits for a new access token and is replayed once with it. Any
number of calls can fail at the same time; they all share a single
refresh request:

    call A -> 401 -> refresh() starts the refresh grant
    call B -> 401 -> refresh() queues a future
    call C -> 401 -> refresh() queues a future
    refresh grant succeeds -> A, B, C replay with the new token

Everything runs on one asyncio event loop. The ``refreshing`` flag is set
before the first await, so no second caller can start another refresh.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from calendar_connect import oauth
from calendar_connect.config import ConnectConfig
from calendar_connect.credentials import CredentialStore
from calendar_connect.exceptions import AuthenticationError
from calendar_connect.http import RequestExecutor
from calendar_connect.models import ApiResponse

logger = logging.getLogger(__name__)

REFRESH_FAILED = "Failed to refresh token"


class RefreshCoordinator:
    """Runs at most one token refresh at a time and replays failed calls."""

    def __init__(
        self,
        executor: RequestExecutor,
        credentials: CredentialStore,
        config: ConnectConfig,
    ):
        self._executor = executor
        self._credentials = credentials
        self._config = config
        self._refreshing = False
        self._waiters: list[asyncio.Future[str]] = []
        self.refresh_count = 0

    @property
    def is_refreshing(self) -> bool:
        """True while a refresh grant is in flight."""
        return self._refreshing

    async def execute(
        self, method: str, path: str, *, refreshable: bool = True, **kwargs: Any
    ) -> ApiResponse:
        """Send a request, refreshing the token and replaying once on 401.

        Args:
            method: HTTP method.
            path: Path relative to the base URL.
            refreshable: False when the call carries its own access token;
                a 401 then propagates and the stored credentials are left alone.
            **kwargs: Passed to RequestExecutor.send.

        Returns:
            ApiResponse of the original call or of its replay.

        Raises:
            AuthenticationError: On 401 without a refresh token, on 401 for a
                non-refreshable call, when the refresh fails, or when the
                replay is rejected again.
            ConnectError: Any other failure, unchanged.
        """
        try:
            return await self._executor.send(method, path, **kwargs)
        except AuthenticationError as e:
            if not refreshable or e.status_code != 401 or not self._credentials.refresh_token:
                raise
            logger.debug(f"{method} {path} rejected with 401, refreshing token")

        access_token = await self.refresh()

        # Replayed once only: a second 401 propagates.
        headers = dict(kwargs.pop("headers", None) or {})
        headers["Authorization"] = f"Bearer {access_token}"
        return await self._executor.send(method, path, headers=headers, **kwargs)

    async def refresh(self) -> str:
        """Get a fresh access token, joining a refresh already in flight.

        Returns:
            The new access token.

        Raises:
            AuthenticationError: If the refresh grant fails.
        """
        if self._refreshing:
            waiter: asyncio.Future[str] = asyncio.get_running_loop().create_future()
            self._waiters.append(waiter)
            logger.debug(f"Refresh in flight, {len(self._waiters)} call(s) waiting")
            return await waiter

        self._refreshing = True
        try:
            access_token = await self._request_refresh()
        except BaseException as e:
            logger.warning(f"Token refresh failed: {e!r}")
            self._drain(None)
            if isinstance(e, Exception):
                raise AuthenticationError(REFRESH_FAILED) from e
            raise

        self._drain(access_token)
        return access_token

    async def _request_refresh(self) -> str:
        current = self._credentials.get()
        if current is None or not current.refresh_token:
            raise AuthenticationError("No refresh token available")

        issued = await oauth.request_token(
            self._executor,
            self._config,
            "refresh_token",
            refresh_token=current.refresh_token,
        )
        self._credentials.set(current.refreshed(issued))
        self.refresh_count += 1
        logger.info("Access token refreshed")
        return issued.access_token

    def _drain(self, access_token: str | None) -> None:
        """Settle every waiter in enqueue order, then return to idle.

        With no token every waiter fails with AuthenticationError.
        """
        waiters, self._waiters = self._waiters, []
        for waiter in waiters:
            if waiter.done():
                continue
            if access_token is None:
                waiter.set_exception(AuthenticationError(REFRESH_FAILED))
            else:
                waiter.set_result(access_token)
        self._refreshing = False
