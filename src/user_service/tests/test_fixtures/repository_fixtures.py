"""Fixtures for repository, service and API tests."""

from datetime import date
import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from user_service.models.user import User
from user_service.repositories.user_repository import UserRepository
from user_service.services.user_service import UserService

# NOTE: All fixtures in this file depend on the `db_session` fixture defined in conftest.py


@pytest.fixture
async def user_repository(db_session: AsyncSession) -> UserRepository:
    return UserRepository(db_session)


@pytest.fixture
async def user_service(user_repository: UserRepository) -> UserService:
    return UserService(user_repository)


@pytest.fixture
def sample_user_data() -> dict:
    """
    Deterministic, valid payload; kept synchronous because it does not touch the DB.
    """
    return {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "date_of_birth": date(1990, 12, 10),
    }


@pytest.fixture
async def create_user(user_repository: UserRepository):
    """
    Factory that persists (and commits) users with optional overrides.

    Usage:
        user = await create_user(name="Bob")
    """
    async def _create(**overrides) -> User:
        data = {
            "name": f"User {uuid.uuid4().hex[:6]}",
            "email": f"user_{uuid.uuid4().hex[:8]}@example.com",
            "date_of_birth": None,
        }
        data.update(overrides)
        user = await user_repository.add(User(**data))
        await user_repository.commit()
        return user

    return _create


@pytest.fixture
async def created_user(create_user, sample_user_data) -> User:
    return await create_user(**sample_user_data)


@pytest.fixture
async def multiple_users(create_user) -> list[User]:
    return [await create_user(name=f"User {idx}") for idx in range(3)]
