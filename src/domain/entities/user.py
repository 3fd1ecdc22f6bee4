"""
User Entity

Account that owns tasks and authenticates with username + password.
"""

from datetime import datetime, timezone
from typing import List
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel

from .enums import UserStatus


class User(SQLModel, table=True):
    """
    User entity.

    Business Rules:
    - Username and email are unique across all users
    - Password stored as bcrypt hash (cost factor 12)
    - Email ownership proven through a one-time code (OTP)
    - Roles are re-read on every token refresh
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    username: str = Field(unique=True, index=True, max_length=100)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    roles: List[str] = Field(
        default_factory=lambda: ["USER"], sa_column=Column(JSON)
    )
    status: UserStatus = Field(default=UserStatus.active)
    email_verified: bool = Field(default=False)

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc).replace(tzinfo=None),
        sa_column=Column(DateTime),
    )

    __table_args__ = (Index("idx_user_email_verified", "email_verified"),)
