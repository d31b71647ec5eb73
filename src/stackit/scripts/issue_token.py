"""Mint a bearer token for an existing user (local development only)."""
from __future__ import annotations

import argparse
import sys
from datetime import timedelta

from stackit.core.security import create_access_token
from stackit.db.session import SessionLocal
from stackit.models import User


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Issue an access token for a user id")
    parser.add_argument("user_id", type=int)
    parser.add_argument("--minutes", type=int, default=None, help="Token lifetime override")
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        user = db.get(User, args.user_id)
    finally:
        db.close()
    if user is None:
        print(f"[issue_token] no user with id {args.user_id}", file=sys.stderr)
        return 1

    expires = timedelta(minutes=args.minutes) if args.minutes else None
    print(create_access_token(user.id, expires_delta=expires))
    return 0


if __name__ == "__main__":
    sys.exit(main())
