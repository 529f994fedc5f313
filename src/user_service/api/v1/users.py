"""
User endpoints. Every failure is raised by the service and turned
into a response by GlobalExceptionMiddleware.
"""

from uuid import UUID
import logging

from fastapi import APIRouter, Depends, Request, Response, status

from user_service.api.dependencies import get_user_service
from user_service.exceptions.base import UserNotFoundError
from user_service.schemas.errors import ErrorResponse
from user_service.schemas.user import UserCreate, UserResponse, UserUpdate
from user_service.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

_ERRORS = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.get("/email/{email}", response_model=UserResponse, responses=_ERRORS)
async def get_user_by_email(email: str, service: UserService = Depends(get_user_service)):
    return await service.get_user_by_email(email)


@router.get("/{user_id}", response_model=UserResponse, responses=_ERRORS)
async def get_user_by_id(user_id: UUID, service: UserService = Depends(get_user_service)):
    return await service.get_user_by_id(user_id)


@router.get("", response_model=list[UserResponse], responses=_ERRORS)
@router.get("/", response_model=list[UserResponse], include_in_schema=False)
async def get_all_users(service: UserService = Depends(get_user_service)):
    return await service.get_all_users()


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED, responses=_ERRORS)
@router.post("/", response_model=UserResponse, status_code=status.HTTP_201_CREATED, include_in_schema=False)
async def create_user(payload: UserCreate, request: Request, response: Response,
                      service: UserService = Depends(get_user_service)):
    user = await service.create_user(payload.name, payload.email, payload.date_of_birth)
    response.headers["Location"] = f"{request.url.path.rstrip('/')}/{user.id}"
    logger.info("api.user_created", extra={"user_id": str(user.id)})
    return user


@router.put("/{user_id}", response_model=UserResponse, responses=_ERRORS)
async def update_user(user_id: UUID, payload: UserUpdate, service: UserService = Depends(get_user_service)):
    return await service.update_user(user_id, payload.name, payload.email, payload.date_of_birth)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT, responses=_ERRORS)
async def delete_user(user_id: UUID, service: UserService = Depends(get_user_service)):
    if not await service.delete_user(user_id):
        raise UserNotFoundError(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
