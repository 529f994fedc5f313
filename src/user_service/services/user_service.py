"""
User service: business operations over the User entity.

Error contract for every public method:

- client-caused failures (DomainError subclasses and InvalidArgumentError) propagate unchanged
- anything else, database failures included, is wrapped in ServiceOperationError with the
  original exception kept as `cause` / `__cause__` for the logs
"""

from contextlib import asynccontextmanager
from datetime import date
from uuid import UUID
import logging

from user_service.exceptions.application import ServiceOperationError
from user_service.exceptions.base import (
    DomainError,
    DuplicateUserEmailError,
    InvalidArgumentError,
    MissingArgumentError,
    UserEmailNotFoundError,
    UserNotFoundError,
)
from user_service.models.user import User
from user_service.repositories.user_repository import UserRepository
from user_service.validators.user_validators import is_valid_email, normalize_email

from .user_validator import validate_user

logger = logging.getLogger(__name__)

SERVICE_NAME = "UserService"
NIL_UUID = UUID(int=0)

# Client-caused errors; never wrapped.
_PASSTHROUGH_ERRORS = (DomainError, InvalidArgumentError)


class UserService:
    def __init__(self, repository: UserRepository):
        self.repository = repository

    @asynccontextmanager
    async def _operation(self, operation: str, failure_message: str):
        try:
            yield
        except _PASSTHROUGH_ERRORS:
            raise
        except Exception as exc:
            logger.warning(
                "service.operation_failed",
                extra={"service": SERVICE_NAME, "operation": operation, "error_type": type(exc).__name__},
            )
            raise ServiceOperationError(SERVICE_NAME, operation, failure_message, exc) from exc

    @staticmethod
    def _require_id(user_id: UUID | None) -> None:
        if user_id is None or user_id == NIL_UUID:
            logger.warning("service.empty_user_id")
            raise InvalidArgumentError("id", "User ID cannot be empty.")

    async def _ensure_email_available(self, email: str) -> None:
        if await self.repository.get_by_email(email) is not None:
            logger.info("service.duplicate_email")
            raise DuplicateUserEmailError(email)

    # =================================================================================================================
    # Queries
    # =================================================================================================================

    async def get_user_by_id(self, user_id: UUID) -> User:
        """
        Raises:
            InvalidArgumentError: `user_id` is empty (nil UUID).
            UserNotFoundError: no such user.
            ServiceOperationError: the lookup itself failed.
        """
        async with self._operation("get_user_by_id", "An error occurred while retrieving the user by ID."):
            self._require_id(user_id)
            user = await self.repository.get_by_id(user_id)
            if user is None:
                raise UserNotFoundError(user_id)
            return user

    async def get_user_by_email(self, email: str) -> User:
        async with self._operation("get_user_by_email", "An error occurred while retrieving the user by email."):
            if email is None or not email.strip():
                raise MissingArgumentError("email", "Email cannot be null or empty.")
            if not is_valid_email(email):
                raise InvalidArgumentError("email", "Email format is invalid.")

            normalized = normalize_email(email)
            user = await self.repository.get_by_email(normalized)
            if user is None:
                raise UserEmailNotFoundError(normalized)
            return user

    async def get_all_users(self) -> list[User]:
        async with self._operation("get_all_users", "An error occurred while retrieving all users."):
            users = await self.repository.get_all()
            logger.debug("service.get_all_users", extra={"count": len(users)})
            return users

    # =================================================================================================================
    # Commands
    # =================================================================================================================

    async def create_user(self, name: str, email: str, date_of_birth: date | None = None) -> User:
        """
        Validate, check email uniqueness and persist a new user.

        Raises:
            DomainValidationError: one or more field rules failed.
            DuplicateUserEmailError: the email is already registered.
            ServiceOperationError: persistence failed.
        """
        async with self._operation("create_user", "An error occurred while creating the user."):
            validate_user(name, email, date_of_birth)
            normalized = normalize_email(email)
            await self._ensure_email_available(normalized)

            user = await self.repository.add(
                User(name=name.strip(), email=normalized, date_of_birth=date_of_birth)
            )
            await self.repository.commit()

            logger.info("service.user_created", extra={"user_id": str(user.id)})
            return user

    async def update_user(self, user_id: UUID, name: str, email: str, date_of_birth: date | None = None) -> User:
        """
        Replace name, email and date of birth of an existing user.

        The email uniqueness check only runs when the email actually changes.
        """
        async with self._operation("update_user", "An error occurred while updating the user."):
            self._require_id(user_id)
            validate_user(name, email, date_of_birth)

            existing = await self.repository.get_by_id(user_id)
            if existing is None:
                raise UserNotFoundError(user_id)

            normalized = normalize_email(email)
            if normalized != existing.email:
                await self._ensure_email_available(normalized)

            user = await self.repository.update(
                user_id, name=name.strip(), email=normalized, date_of_birth=date_of_birth
            )
            await self.repository.commit()

            logger.info("service.user_updated", extra={"user_id": str(user_id)})
            return user

    async def delete_user(self, user_id: UUID) -> bool:
        """
        Returns:
            True when a user was deleted, False when none existed.
        """
        async with self._operation("delete_user", "An error occurred while deleting the user."):
            self._require_id(user_id)
            deleted = await self.repository.delete(user_id)
            if deleted:
                await self.repository.commit()
                logger.info("service.user_deleted", extra={"user_id": str(user_id)})
            return deleted
