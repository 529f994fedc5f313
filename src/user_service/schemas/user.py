"""
User DTOs.

Field rules (required name, email format, date-of-birth range) are enforced by
`services.user_validator` so that they surface as a DomainValidationError with
per-field messages rather than as framework-level 422 responses. The schemas only
fix the wire shape.
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class UserCreate(BaseModel):
    name: str
    email: str
    date_of_birth: date | None = None


class UserUpdate(BaseModel):
    name: str
    email: str
    date_of_birth: date | None = None


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    date_of_birth: date | None = None
    created_at: datetime
    updated_at: datetime
