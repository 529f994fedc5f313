from .errors import ErrorResponse
from .user import UserCreate, UserUpdate, UserResponse

__all__ = ["ErrorResponse", "UserCreate", "UserUpdate", "UserResponse"]
