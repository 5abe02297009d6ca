"""Issue admin credentials for the dashboard and scheduled jobs.

    python -m scripts.admin_credentials token ops@example.com --minutes 120
    python -m scripts.admin_credentials api-key
"""

from __future__ import annotations

import argparse
from datetime import timedelta

from radar.core.security import (
    create_access_token,
    generate_admin_api_key,
    hash_admin_api_key,
)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    sub = parser.add_subparsers(dest="command", required=True)

    token = sub.add_parser("token", help="Mint an admin bearer token")
    token.add_argument("subject", help="Who the token is issued to")
    token.add_argument(
        "--minutes",
        type=int,
        default=None,
        help="Lifetime in minutes (defaults to ACCESS_TOKEN_EXPIRE_MINUTES)",
    )

    sub.add_parser("api-key", help="Generate a key to add to ADMIN_API_KEYS")
    return parser.parse_args(argv)


def issue_token(subject: str, minutes: int | None = None) -> str:
    if minutes is not None and minutes < 1:
        raise ValueError("--minutes must be >= 1")
    expires = timedelta(minutes=minutes) if minutes else None
    return create_access_token(subject, is_admin=True, expires_delta=expires)


def issue_api_key() -> tuple[str, str]:
    """Return a fresh key and the fingerprint logged when it is used."""
    key = generate_admin_api_key()
    return key, hash_admin_api_key(key)[:12]


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    if args.command == "token":
        print(issue_token(args.subject, args.minutes))
        return 0

    key, fingerprint = issue_api_key()
    print(key)
    print(f"fingerprint: {fingerprint}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
