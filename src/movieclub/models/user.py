"""User model."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint
from sqlmodel import Field, SQLModel

from src.movieclub.models.base import utc_now
from src.movieclub.models.enums import UserRole, UserStatus


class User(SQLModel, table=True):
    """A club member account. The first account ever created is the admin."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('user', 'admin')", name="ck_users_role"),
        CheckConstraint("status IN ('pending', 'active', 'inactive')", name="ck_users_status"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    username: str = Field(max_length=50, unique=True, index=True)
    email: str = Field(max_length=255, unique=True, index=True)
    hashed_password: str = Field(max_length=255)
    role: str = Field(default=UserRole.USER.value, max_length=20)
    status: str = Field(default=UserStatus.PENDING.value, max_length=20)
    created_at: datetime = Field(default_factory=utc_now)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE.value
