from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from user_service.database.session import get_async_session
from user_service.repositories.user_repository import UserRepository
from user_service.services.user_service import UserService


def get_user_repository(db: AsyncSession = Depends(get_async_session)) -> UserRepository:
    return UserRepository(db)


def get_user_service(repository: UserRepository = Depends(get_user_repository)) -> UserService:
    return UserService(repository)
