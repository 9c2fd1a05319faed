"""
Account administration.

Usage:
    python -m print_queue.admin <username> <password> <unit_id>
"""

import argparse
import asyncio
import logging
import sys

from print_queue.api.auth import hash_password
from print_queue.config import get_settings
from print_queue.db import UserRepository, create_engine, create_session_factory, dispose_engine
from print_queue.db.models import User
from print_queue.exceptions import PrintQueueError, ValidationError
from print_queue.observability.logging import setup_logging
from print_queue.queue.engine import validate_tenant_id

logger = logging.getLogger(__name__)


async def create_user(
    users: UserRepository,
    username: str,
    password: str,
    tenant_id: int,
) -> User:
    """
    Create a print agent account with a bcrypt-hashed password.

    Raises:
        ValidationError: If the username is taken or input is empty.
    """
    if not username or not password:
        raise ValidationError("Username and password are required")
    tenant_id = validate_tenant_id(tenant_id)
    return await users.create(username, hash_password(password), tenant_id)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create a print agent account.")
    parser.add_argument("username")
    parser.add_argument("password")
    parser.add_argument("unit_id", type=int, help="Unit (tenant) the agent prints for")
    return parser


async def run_async(argv: list[str] | None = None) -> int:
    """Parse arguments and create the account. Returns the exit code."""
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(settings)

    db_engine = create_engine(settings)
    try:
        user = await create_user(
            UserRepository(create_session_factory(db_engine)),
            args.username,
            args.password,
            args.unit_id,
        )
    except PrintQueueError as e:
        logger.error("Could not create user", extra={"username": args.username, "error": e.detail})
        return 1
    finally:
        await dispose_engine(db_engine)

    logger.info("User created", extra={"username": user.username, "tenant_id": user.tenant_id})
    return 0


def run() -> None:
    """Entry point for the create-user command."""
    sys.exit(asyncio.run(run_async()))


if __name__ == "__main__":
    run()
