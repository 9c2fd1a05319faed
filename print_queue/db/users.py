"""
User repository for print agent accounts.
"""

import logging

from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from print_queue.db.models import User
from print_queue.db.store import is_transient
from print_queue.exceptions import StoreError, ValidationError

logger = logging.getLogger(__name__)


def _store_error(operation: str, error: SQLAlchemyError) -> StoreError:
    logger.exception(
        "Store operation failed",
        extra={"operation": operation, "error": error.__class__.__name__},
    )
    return StoreError(
        f"{operation} failed: {error.__class__.__name__}",
        transient=is_transient(error),
    )


class UserRepository:
    """Repository for print agent accounts."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get_by_username(self, username: str) -> User | None:
        """
        Look up an account by username.

        Args:
            username: The login name.

        Returns:
            The User or None if not found.
        """
        stmt = select(User).where(User.username == username)
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise _store_error("get_by_username", e) from e

    async def create(self, username: str, password_hash: str, tenant_id: int) -> User:
        """
        Create an account.

        Args:
            username: Unique login name.
            password_hash: Already hashed password.
            tenant_id: The unit the account belongs to.

        Returns:
            The created User.

        Raises:
            ValidationError: If the username is taken.
        """
        stmt = (
            insert(User)
            .values(
                username=username,
                password_hash=password_hash,
                tenant_id=tenant_id,
            )
            .returning(User)
        )
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    result = await session.execute(stmt)
                    user = result.scalar_one()
        except IntegrityError as e:
            raise ValidationError(f"User '{username}' already exists") from e
        except SQLAlchemyError as e:
            raise _store_error("create_user", e) from e

        logger.info(
            "Created user",
            extra={"user_id": user.id, "tenant_id": tenant_id},
        )
        return user
