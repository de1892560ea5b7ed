"""
Mint an access token for the bootstrap superadmin.

The API registers the superadmin under MEDORA_SUPERADMIN_ID at start-up, so a
token signed with the shared JWT_SECRET is accepted by any running instance.
Both variables must be set (in the environment or .env); the random
per-process defaults would produce a token no server accepts.

Usage:
    python scripts/create_superadmin.py [--minutes 120]
"""
import argparse
import sys
from datetime import timedelta

from medora import config
from medora.api.auth import create_access_token
from medora.core.access import Role
from medora.utils import setup_logging


def main() -> int:
    parser = argparse.ArgumentParser(description="Issue a superadmin bearer token")
    parser.add_argument("--minutes", type=int, default=config.ACCESS_TOKEN_EXPIRE_MINUTES,
                        help="token lifetime in minutes")
    args = parser.parse_args()

    setup_logging("WARNING")  # stdout carries the output
    missing = [name for name, present in (
        ("JWT_SECRET", config.JWT_SECRET_FROM_ENV),
        ("MEDORA_SUPERADMIN_ID", config.SUPERADMIN_ID_FROM_ENV),
    ) if not present]
    if missing:
        print(f"Set {' and '.join(missing)} before minting a superadmin token.", file=sys.stderr)
        return 1

    token = create_access_token(config.SUPERADMIN_ID, Role.SUPERADMIN, timedelta(minutes=args.minutes))
    print(token)
    return 0


if __name__ == "__main__":
    sys.exit(main())
