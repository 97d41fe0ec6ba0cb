"""CLI entry point for the OneLogin authentication client."""

import argparse
import getpass
import sys
from pathlib import Path
from typing import Optional

from .client import Client
from .config import ConnectionProfiles, OneLoginConfig
from .context import Context
from .utils.exceptions import AuthenticationFailed, OneLoginError
from .utils.logging import setup_logging


def _load_config(args: argparse.Namespace) -> OneLoginConfig:
    """Resolve the connection config from a YAML profile or the environment."""
    profiles = ConnectionProfiles(Path(args.config))
    if args.connection or (profiles.has_config and profiles.default):
        return profiles.to_config(args.connection)
    return OneLoginConfig()


def _print_token(client: Client, ctx: Context) -> None:
    client.tokens.get_access_token(ctx)
    token = client.tokens.token
    print("Service token acquired:")
    print(f"  Account: {token.account_id}")
    print(f"  Type: {token.token_type}")
    print(f"  Created: {token.created_at.isoformat()}")
    print(f"  Expires in: {token.expires_in}s")


def _login(client: Client, username: str, ctx: Context) -> int:
    password = getpass.getpass("Password: ")
    try:
        user = client.auth.authenticate(username, password, ctx=ctx)
    except AuthenticationFailed:
        print("Authentication failed.")
        return 1

    if user is None:
        print("No user returned; the login is pending.")
        return 0

    print(f"MFA verification required for {user.username or user.email} (ID: {user.id})")
    print(f"Found {len(user.devices)} device(s):")
    for device in user.devices:
        print(f"  - {device.type} (ID: {device.id})")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="OneLogin auth - acquire service tokens and test user logins"
    )
    parser.add_argument(
        "--config",
        type=str,
        default="onelogin.yaml",
        help="Connection profiles file (default: onelogin.yaml)",
    )
    parser.add_argument(
        "--connection",
        type=str,
        default=None,
        help="Connection name from the profiles file (default: environment / .env)",
    )
    parser.add_argument(
        "--token",
        action="store_true",
        help="Acquire a service token and show its metadata",
    )
    parser.add_argument(
        "--login",
        type=str,
        metavar="USER",
        default=None,
        help="Authenticate USER (email or username); the password is prompted",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Overall deadline in seconds",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose output",
    )

    args = parser.parse_args(argv)

    try:
        config = _load_config(args)
    except OneLoginError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    log_level = "DEBUG" if args.verbose else config.log_level
    logger = setup_logging(level=log_level, log_file=config.log_file)

    try:
        client = Client(config)
        ctx = Context(timeout=args.timeout)

        if args.token:
            _print_token(client, ctx)
            return 0

        if args.login:
            return _login(client, args.login, ctx)

        # No action specified
        parser.print_help()
        return 0

    except OneLoginError as e:
        logger.error(f"OneLogin error: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
