"""
Create a login account. Run from project root:
  python -m mashebi.scripts.create_account USERNAME PASSWORD ACCOUNT_NAME EMAIL [--inactive]
Example:
  python -m mashebi.scripts.create_account alice 'a-long-password' Acme alice@example.com
"""
import argparse
import logging
import sys

from sqlalchemy import func

from mashebi.core.database import SessionLocal
from mashebi.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    hash_password,
)
from mashebi.models import Account

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create a Mashebi login account (no registration UI).")
    parser.add_argument("username", help=f"Username (1-{USERNAME_MAX_LEN} chars, unique ignoring case)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("account_name", help="Account display name")
    parser.add_argument("email", help="Contact email")
    parser.add_argument("--inactive", action="store_true", help="Create the account disabled")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    username = args.username.strip()
    account_name = args.account_name.strip()
    if not username or len(username) > USERNAME_MAX_LEN:
        logger.error("Invalid username length.")
        return 1
    if not account_name:
        logger.error("Account name must be non-empty.")
        return 1
    if len(args.password) < PASSWORD_MIN_LEN or len(args.password) > PASSWORD_MAX_LEN:
        logger.error("Password must be %s-%s characters.", PASSWORD_MIN_LEN, PASSWORD_MAX_LEN)
        return 1

    db = SessionLocal()
    try:
        existing = (
            db.query(Account)
            .filter(func.lower(Account.username) == func.lower(username))
            .first()
        )
        if existing:
            logger.error("Account '%s' already exists.", existing.username)
            return 1
        account = Account(
            username=username,
            account_name=account_name,
            email=args.email.strip(),
            password_hash=hash_password(args.password),
            is_active=not args.inactive,
        )
        db.add(account)
        db.commit()
        logger.info("Created account '%s' (id=%s).", username, account.id)
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
