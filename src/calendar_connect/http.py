"""HTTP request executor.

Sends one request with the stored bearer token attached and turns the
outcome into an ApiResponse or a ConnectError. Retries and token refresh
live in calendar_connect.refresh.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from calendar_connect.config import ConnectConfig
from calendar_connect.credentials import CredentialStore
from calendar_connect.exceptions import NetworkError, error_from_response
from calendar_connect.models import ApiResponse

logger = logging.getLogger(__name__)


class RequestExecutor:
    """Issues authenticated requests against the Calendar Connect API.

    Example:
        >>> executor = RequestExecutor(config, store)
        >>> response = await executor.send("GET", "/calendars")
        >>> response.data
    """

    def __init__(
        self,
        config: ConnectConfig,
        credentials: CredentialStore,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the executor.

        Args:
            config: Client configuration (base URL, timeout, extra headers).
            credentials: Store providing the current access token.
            transport: Optional httpx transport, e.g. httpx.MockTransport.
        """
        self._config = config
        self._credentials = credentials
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=config.timeout,
            transport=transport,
        )

    def _get_headers(self, headers: dict[str, str] | None = None) -> dict[str, str]:
        """Get headers for a request; caller headers override the defaults."""
        merged = {
            "Content-Type": "application/json",
            **self._config.headers,
        }
        access_token = self._credentials.access_token
        if access_token:
            merged["Authorization"] = f"Bearer {access_token}"
        if headers:
            merged.update(headers)
        return merged

    async def send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        data: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        auth: httpx.Auth | None = None,
    ) -> ApiResponse:
        """Make an API request.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH, DELETE).
            path: Path relative to the base URL (e.g., "/events").
            params: Query parameters.
            json: JSON body.
            data: Form body (sent url-encoded).
            headers: Extra headers; an explicit Authorization wins.
            auth: httpx auth for this request, applied over the bearer header.

        Returns:
            ApiResponse with decoded body, status and headers.

        Raises:
            NetworkError: If no response was received.
            ConnectError: The mapped subclass for any non-2xx status.
        """
        logger.debug(f"{method} {path}")
        try:
            response = await self._client.request(
                method,
                path,
                params=params,
                json=json,
                data=data,
                headers=self._get_headers(headers),
                auth=auth,
            )
        except httpx.RequestError as e:
            logger.debug(f"{method} {path} failed without a response: {e}")
            raise NetworkError(str(e)) from e

        if response.is_error:
            logger.debug(f"{method} {path} -> {response.status_code}")
            raise error_from_response(response)

        return ApiResponse(
            data=self._decode(response),
            status=response.status_code,
            headers=dict(response.headers),
        )

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()
