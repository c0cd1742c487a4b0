"""CLI for calendar-connect.

Usage:
    calendar-connect status                          # Show configured settings
    calendar-connect auth-url --user-id ID           # Print the authorization URL
    calendar-connect token CODE                      # Exchange a code for tokens
    calendar-connect calendars                       # List calendars
    calendar-connect events [--page-size N]          # List events
    calendar-connect connections                     # Show connected accounts
    calendar-connect disconnect PROVIDER [--account] # Disconnect accounts

Client settings and tokens come from CALENDAR_CONNECT_* environment
variables or a .env file in the working directory.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys
import webbrowser
from typing import Any

from calendar_connect.config import ENV_PREFIX, get_credential_status, load_env_file
from calendar_connect.exceptions import ConnectError
from calendar_connect.models import PROVIDERS


def _make_client():
    from calendar_connect.client import ConnectClient

    credentials = None
    access_token = os.environ.get(f"{ENV_PREFIX}ACCESS_TOKEN")
    if access_token:
        credentials = {
            "access_token": access_token,
            "refresh_token": os.environ.get(f"{ENV_PREFIX}REFRESH_TOKEN"),
        }
    return ConnectClient(credentials=credentials)


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


def cmd_status() -> int:
    """Show which settings are configured."""
    status = get_credential_status()

    print("=" * 60)
    print("CALENDAR-CONNECT STATUS")
    print("=" * 60)
    print()
    print(f"Base URL: {status['base_url']}")
    print(f".env:     {'[x]' if status['env_file'] else '[ ]'}")
    print()

    print("Client:")
    for name, configured in status["client"].items():
        print(f"  {'[x]' if configured else '[ ]'} {name}")
    print()

    print("Tokens:")
    for name, configured in status["tokens"].items():
        print(f"  {'[x]' if configured else '[ ]'} {name}")
    print()

    return 0


def cmd_auth_url(user_id: str, state: str | None, scope: str | None, open_browser: bool) -> int:
    """Print the authorization URL."""
    client = _make_client()
    url = client.auth.generate_auth_url(user_id=user_id, state=state, scope=scope)
    print(url)
    if open_browser:
        webbrowser.open(url)
    return 0


async def _with_client(action) -> Any:
    async with _make_client() as client:
        return await action(client)


def _run(action) -> int:
    """Run an async client call and print its result as JSON."""
    try:
        result = asyncio.run(_with_client(action))
    except ConnectError as e:
        print(f"Error [{e.code or 'ERROR'}]: {e}", file=sys.stderr)
        return 1
    _print_json(result)
    return 0


async def _exchange(client, code: str) -> dict[str, Any]:
    credentials = await client.auth.get_token(code)
    return credentials.to_dict()


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    load_env_file()

    parser = argparse.ArgumentParser(
        prog="calendar-connect",
        description="Unified Google, Microsoft and Apple calendar access",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command")

    subparsers.add_parser("status", help="Show configured settings")

    url_parser = subparsers.add_parser("auth-url", help="Print the authorization URL")
    url_parser.add_argument("--user-id", required=True, help="Your user identifier")
    url_parser.add_argument("--state", help="State echoed back to the redirect URI")
    url_parser.add_argument("--scope", help="Requested scope")
    url_parser.add_argument("--open", action="store_true", help="Open the URL in a browser")

    token_parser = subparsers.add_parser("token", help="Exchange an authorization code")
    token_parser.add_argument("code", help="Code from the OAuth callback")

    subparsers.add_parser("calendars", help="List calendars")

    events_parser = subparsers.add_parser("events", help="List events")
    events_parser.add_argument("--page-size", type=int, help="Events per page (max 1000)")
    events_parser.add_argument("--start", help="ISO start date")
    events_parser.add_argument("--end", help="ISO end date")
    events_parser.add_argument("--paging", help="Paging token from a previous response")

    subparsers.add_parser("connections", help="Show connected accounts")

    disconnect_parser = subparsers.add_parser("disconnect", help="Disconnect provider accounts")
    disconnect_parser.add_argument("provider", choices=PROVIDERS)
    disconnect_parser.add_argument("--account", help="Account to disconnect (default: all)")

    args = parser.parse_args(argv if argv is not None else sys.argv[1:])

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "status":
        return cmd_status()

    try:
        if args.command == "auth-url":
            return cmd_auth_url(args.user_id, args.state, args.scope, args.open)
    except ConnectError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Set CALENDAR_CONNECT_CLIENT_ID, _CLIENT_SECRET and _REDIRECT_URI", file=sys.stderr)
        return 1

    if args.command == "token":
        return _run(lambda client: _exchange(client, args.code))
    if args.command == "calendars":
        return _run(lambda client: client.calendars.list())
    if args.command == "events":
        return _run(
            lambda client: client.events.list(
                page_size=args.page_size,
                start=args.start,
                end=args.end,
                paging=args.paging,
            )
        )
    if args.command == "connections":
        return _run(lambda client: client.auth.get_connection_status())
    if args.command == "disconnect":
        return _run(lambda client: client.auth.disconnect(args.provider, args.account))

    return 0


if __name__ == "__main__":
    sys.exit(main())
