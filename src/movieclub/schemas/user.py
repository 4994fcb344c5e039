from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from src.movieclub.models.enums import UserRole, UserStatus


class UserRead(BaseModel):
    id: UUID
    username: str
    email: str
    role: UserRole
    status: UserStatus
    created_at: datetime

    model_config = {"from_attributes": True}


class UserStatusUpdate(BaseModel):
    """Admin status change. Only active and pending are accepted."""

    status: UserStatus


class UserDeleteResponse(BaseModel):
    success: bool = True
    message: str = "User deleted"
