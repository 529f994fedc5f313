from .user_service import UserService
from .user_validator import validate_user

__all__ = ["UserService", "validate_user"]
