import uuid

import pytest

from user_service.exceptions import (
    DatabaseError,
    DomainValidationError,
    DuplicateUserEmailError,
    InvalidArgumentError,
    MissingArgumentError,
    ServiceOperationError,
    UserEmailNotFoundError,
    UserNotFoundError,
)
from user_service.models.user import User
from user_service.services.user_service import UserService

NIL = uuid.UUID(int=0)


@pytest.mark.asyncio
class TestQueries:
    async def test_get_user_by_id(self, user_service: UserService, created_user: User):
        assert (await user_service.get_user_by_id(created_user.id)).id == created_user.id

    async def test_nil_id_is_rejected(self, user_service: UserService):
        with pytest.raises(InvalidArgumentError) as info:
            await user_service.get_user_by_id(NIL)

        assert info.value.param_name == "id"
        assert info.value.message == "User ID cannot be empty."

    async def test_missing_user(self, user_service: UserService):
        missing = uuid.uuid4()

        with pytest.raises(UserNotFoundError) as info:
            await user_service.get_user_by_id(missing)

        assert info.value.entity_id == str(missing)

    async def test_get_user_by_email_is_case_insensitive(self, user_service: UserService, created_user: User):
        found = await user_service.get_user_by_email("  ADA@Example.com ")
        assert found.id == created_user.id

    @pytest.mark.parametrize("email", ["", "   "])
    async def test_blank_email(self, user_service: UserService, email: str):
        with pytest.raises(MissingArgumentError) as info:
            await user_service.get_user_by_email(email)

        assert info.value.message == "Email cannot be null or empty."

    async def test_malformed_email(self, user_service: UserService):
        with pytest.raises(InvalidArgumentError) as info:
            await user_service.get_user_by_email("not-an-email")

        assert not isinstance(info.value, MissingArgumentError)
        assert info.value.message == "Email format is invalid."

    async def test_unknown_email(self, user_service: UserService):
        with pytest.raises(UserEmailNotFoundError):
            await user_service.get_user_by_email("nobody@example.com")

    async def test_get_all_users(self, user_service: UserService, multiple_users: list[User]):
        assert len(await user_service.get_all_users()) == len(multiple_users)


@pytest.mark.asyncio
class TestCommands:
    async def test_create_user(self, user_service: UserService, sample_user_data: dict):
        user = await user_service.create_user(**sample_user_data)

        assert user.id is not None
        assert user.email == "ada@example.com"

    async def test_create_normalizes_input(self, user_service: UserService):
        user = await user_service.create_user("  Ada  ", "  ADA@Example.COM ")

        assert user.name == "Ada"
        assert user.email == "ada@example.com"

    async def test_create_invalid_user(self, user_service: UserService):
        with pytest.raises(DomainValidationError) as info:
            await user_service.create_user("", "ada@example.com")

        assert "Name" in info.value.errors

    async def test_create_duplicate_email(self, user_service: UserService, created_user: User):
        with pytest.raises(DuplicateUserEmailError) as info:
            await user_service.create_user("Other", created_user.email.upper())

        assert info.value.value == created_user.email

    async def test_update_user(self, user_service: UserService, created_user: User):
        updated = await user_service.update_user(created_user.id, "Ada King", "ada.king@example.com")

        assert updated.name == "Ada King"
        assert updated.email == "ada.king@example.com"
        assert updated.date_of_birth is None

    async def test_update_keeping_same_email(self, user_service: UserService, created_user: User):
        updated = await user_service.update_user(created_user.id, "Renamed", created_user.email)
        assert updated.name == "Renamed"

    async def test_update_missing_user(self, user_service: UserService):
        with pytest.raises(UserNotFoundError):
            await user_service.update_user(uuid.uuid4(), "Ada", "ada@example.com")

    async def test_update_to_taken_email(self, user_service: UserService, create_user):
        await create_user(email="taken@example.com")
        other = await create_user(email="other@example.com")

        with pytest.raises(DuplicateUserEmailError):
            await user_service.update_user(other.id, "Other", "taken@example.com")

    async def test_delete_user(self, user_service: UserService, created_user: User):
        assert await user_service.delete_user(created_user.id) is True
        assert await user_service.delete_user(created_user.id) is False

    async def test_delete_nil_id(self, user_service: UserService):
        with pytest.raises(InvalidArgumentError):
            await user_service.delete_user(NIL)


class FailingRepository:
    """Every call fails the way an unreachable database would."""

    def __init__(self, exc: Exception):
        self.exc = exc

    async def get_by_id(self, user_id):
        raise self.exc

    async def get_all(self):
        raise self.exc


@pytest.mark.asyncio
class TestWrapping:
    async def test_database_error_is_wrapped(self):
        cause = DatabaseError("get_all", "Failed to operate on User")
        service = UserService(FailingRepository(cause))

        with pytest.raises(ServiceOperationError) as info:
            await service.get_all_users()

        assert info.value.service == "UserService"
        assert info.value.operation == "get_all_users"
        assert info.value.cause is cause
        assert info.value.__cause__ is cause

    async def test_unexpected_error_is_wrapped(self):
        service = UserService(FailingRepository(AttributeError("'NoneType' object has no attribute 'id'")))

        with pytest.raises(ServiceOperationError) as info:
            await service.get_user_by_id(uuid.uuid4())

        assert info.value.operation == "get_user_by_id"
        assert isinstance(info.value.cause, AttributeError)

    async def test_domain_errors_are_not_wrapped(self):
        service = UserService(FailingRepository(UserNotFoundError("x")))

        with pytest.raises(UserNotFoundError):
            await service.get_user_by_id(uuid.uuid4())
