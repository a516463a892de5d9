"""
Create an account from the command line. Run from project root:
  python -m credstore.scripts.create_user USERNAME EMAIL PASSWORD [--level N] [--verified]
Example:
  python -m credstore.scripts.create_user admin admin@example.com your-secure-password --level 10 --verified
"""
import argparse
import logging
import sys

from dotenv import load_dotenv

load_dotenv()

from credstore.core.database import SessionLocal, check_db_connected, init_db
from credstore.core.exceptions import ConflictError, ValidationError
from credstore.services.accounts import create_account


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )
    parser = argparse.ArgumentParser(description="Create a credstore account.")
    parser.add_argument("username", help="Username (lowercased and slugified)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help="Password (at least 8 characters)")
    parser.add_argument("--level", type=int, default=0, help="Access level (default 0)")
    parser.add_argument(
        "--verified",
        action="store_true",
        help="Create the account verified (no verification token)",
    )
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        if not check_db_connected(db):
            print("Database is not reachable.", file=sys.stderr)
            return 1
        init_db()
        created = create_account(
            db,
            username=args.username,
            email=args.email,
            password=args.password,
            level=args.level,
            verified=args.verified,
        )
    except (ValidationError, ConflictError) as e:
        print(f"Could not create account: {e.message}", file=sys.stderr)
        return 1
    finally:
        db.close()

    print(f"Created account {created.id} '{created.username}'.")
    if created.verification_token is not None:
        print(f"Verification token: {created.verification_token}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
