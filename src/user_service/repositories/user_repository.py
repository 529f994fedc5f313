"""
User repository: persistence for the User entity.

Every database interaction runs inside `db_error_handler`, so callers only ever see
taxonomy errors (ConflictError, DatabaseError, RepositoryError), never SQLAlchemy ones.

Write methods `flush()` but do not commit; the service decides when a unit of work
is finished and calls `commit()`.
"""

from typing import Any
from uuid import UUID
import logging
import time

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from user_service.exceptions.base import InvalidArgumentError
from user_service.exceptions.infrastructure import RepositoryError
from user_service.exceptions.mapper import db_error_handler
from user_service.models.user import User

logger = logging.getLogger(__name__)

MODEL_NAME = User.__name__
UPDATABLE_FIELDS = frozenset({"name", "email", "date_of_birth"})


class UserRepository:
    """
    Repository for User entity operations.

    Args:
        db: the async session injected per request (FastAPI dependency) or per test
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    # =================================================================================================================
    # Read Operations
    # =================================================================================================================

    async def get_by_id(self, user_id: UUID) -> User | None:
        async with db_error_handler(self.db, MODEL_NAME, "get_by_id"):
            result = await self.db.execute(select(User).where(User.id == user_id))
            user = result.scalar_one_or_none()

        logger.debug("repo.get_by_id", extra={"model": MODEL_NAME, "id": str(user_id), "found": user is not None})
        return user

    async def get_by_email(self, email: str) -> User | None:
        async with db_error_handler(self.db, MODEL_NAME, "get_by_email"):
            result = await self.db.execute(select(User).where(User.email == email))
            user = result.scalar_one_or_none()

        # email is personal data: log whether it matched, not the value
        logger.debug("repo.get_by_email", extra={"model": MODEL_NAME, "found": user is not None})
        return user

    async def get_all(self) -> list[User]:
        async with db_error_handler(self.db, MODEL_NAME, "get_all"):
            result = await self.db.execute(select(User).order_by(User.created_at, User.id))
            users = list(result.scalars().all())

        logger.debug("repo.get_all", extra={"model": MODEL_NAME, "count": len(users)})
        return users

    # =================================================================================================================
    # Write Operations
    # =================================================================================================================

    async def add(self, user: User) -> User:
        """
        Stage a new user and flush so the id and timestamps are populated.

        Raises:
            ConflictError: the email is already taken (unique constraint).
            DatabaseError: any other database failure.
        """
        start = time.perf_counter()
        async with db_error_handler(self.db, MODEL_NAME, "add"):
            self.db.add(user)
            await self.db.flush()

        logger.info(
            "repo.add.success",
            extra={
                "model": MODEL_NAME,
                "id": str(user.id),
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        return user

    async def update(self, user_id: UUID, **fields: Any) -> User:
        """
        Apply `fields` to an existing user and flush.

        Raises:
            InvalidArgumentError: a field name is not updatable.
            RepositoryError: no user with `user_id` exists.
            ConflictError / DatabaseError: as for `add`.
        """
        unknown = sorted(set(fields) - UPDATABLE_FIELDS)
        if unknown:
            logger.info("repo.update.invalid_fields", extra={"model": MODEL_NAME, "invalid_fields": unknown})
            raise InvalidArgumentError(unknown[0], f"Unknown field(s) for {MODEL_NAME}: {', '.join(unknown)}")

        user = await self.get_by_id(user_id)
        if user is None:
            raise RepositoryError(
                type(self).__name__,
                user_id,
                f"Cannot update {MODEL_NAME} with ID {user_id}: it does not exist.",
                operation="update",
                table_name=User.__tablename__,
            )

        async with db_error_handler(self.db, MODEL_NAME, "update"):
            for key, value in fields.items():
                setattr(user, key, value)
            await self.db.flush()

        logger.info(
            "repo.update.success",
            extra={"model": MODEL_NAME, "id": str(user_id), "updated_fields": sorted(fields)},
        )
        return user

    async def delete(self, user_id: UUID) -> bool:
        """
        Delete a user by id. Returns False when there was nothing to delete.
        """
        user = await self.get_by_id(user_id)
        if user is None:
            return False

        async with db_error_handler(self.db, MODEL_NAME, "delete"):
            await self.db.delete(user)
            await self.db.flush()

        logger.info("repo.delete.success", extra={"model": MODEL_NAME, "id": str(user_id)})
        return True

    async def commit(self) -> None:
        async with db_error_handler(self.db, MODEL_NAME, "commit"):
            await self.db.commit()
