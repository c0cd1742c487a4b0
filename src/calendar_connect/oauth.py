"""OAuth 2.0 authorization-code flow for Calendar Connect.

The user is sent to the authorization URL, Calendar Connect redirects back
to ``redirect_uri`` with a one-time ``code``, and the code is exchanged for
tokens at the token endpoint. The same endpoint serves refresh grants.

Token endpoint calls use HTTP Basic client authentication with a
form-encoded body.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx
from authlib.oauth2.rfc6749.parameters import prepare_grant_uri

from calendar_connect.config import ConnectConfig
from calendar_connect.credentials import CredentialStore
from calendar_connect.exceptions import AuthenticationError
from calendar_connect.models import Credentials

if TYPE_CHECKING:
    from calendar_connect.http import RequestExecutor

logger = logging.getLogger(__name__)

AUTHORIZE_PATH = "/oauth/authorize"
TOKEN_PATH = "/oauth/token"


def build_authorization_url(
    config: ConnectConfig,
    user_id: str,
    state: str | None = None,
    scope: str | None = None,
) -> str:
    """Build the URL that starts the authorization flow.

    Args:
        config: Client configuration.
        user_id: Your application's identifier for the user.
        state: Opaque value echoed back to the redirect URI.
        scope: Requested scope.

    Returns:
        Authorization URL. Omitted optional values are left out of the
        query string entirely.
    """
    return prepare_grant_uri(
        f"{config.base_url}{AUTHORIZE_PATH}",
        client_id=config.client_id,
        response_type="code",
        redirect_uri=config.redirect_uri,
        scope=scope,
        state=state,
        user_id=user_id,
    )


def token_headers(config: ConnectConfig) -> dict[str, str]:
    """Headers for a token endpoint request; Basic auth is applied by httpx."""
    return {
        "Content-Type": "application/x-www-form-urlencoded",
        "CLIENT_ID": config.client_id,
    }


async def request_token(
    executor: RequestExecutor,
    config: ConnectConfig,
    grant_type: str,
    **fields: str,
) -> Credentials:
    """POST a grant to the token endpoint.

    Args:
        executor: Executor used to send the request.
        config: Client configuration.
        grant_type: "authorization_code" or "refresh_token".
        **fields: Grant-specific form fields (code, refresh_token).

    Returns:
        Credentials issued by the server.

    Raises:
        AuthenticationError: If the response carries no access token.
        ConnectError: If the request itself fails.
    """
    form = {"grant_type": grant_type, **fields, "redirect_uri": config.redirect_uri}
    response = await executor.send(
        "POST",
        TOKEN_PATH,
        data=form,
        headers=token_headers(config),
        auth=httpx.BasicAuth(config.client_id, config.client_secret),
    )

    payload = response.data
    if not isinstance(payload, dict) or not payload.get("access_token"):
        raise AuthenticationError("Token endpoint returned no access token")
    return Credentials.from_dict(payload)


async def exchange_code(
    executor: RequestExecutor,
    credentials: CredentialStore,
    config: ConnectConfig,
    code: str,
) -> Credentials:
    """Exchange an authorization code for tokens and store them.

    Returns:
        The stored credentials.
    """
    issued = await request_token(executor, config, "authorization_code", code=code)
    credentials.set(issued)
    logger.info("Authorization code exchanged for tokens")
    return issued
