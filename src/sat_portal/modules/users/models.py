"""
User Models

Database model for portal accounts (students and lecturers).
"""

import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, String, Text, Uuid, func
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from sat_portal.core.database import Base


class UserRole(str, Enum):
    """User roles in the portal."""

    STUDENT = "STUDENT"
    LECTURER = "LECTURER"


class User(Base):
    """
    Portal account.

    ``identifier`` is the student number (NIM) or the lecturer's staff
    number (NIP). Accounts created through Google sign-in have no password.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # Authentication fields
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    password_hash: Mapped[str | None] = mapped_column(Text, nullable=True)
    google_id: Mapped[str | None] = mapped_column(
        String(255), unique=True, index=True, nullable=True
    )

    # Profile fields
    full_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    identifier: Mapped[str | None] = mapped_column(String(50), nullable=True)

    role: Mapped[UserRole] = mapped_column(
        SAEnum(UserRole, name="user_role"),
        nullable=False,
        default=UserRole.STUDENT,
    )

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role.value})>"

    @property
    def display_name(self) -> str:
        """Full name, else the e-mail local part, else "User"."""
        if self.full_name and self.full_name.strip():
            return self.full_name.strip()
        local_part = (self.email or "").split("@", 1)[0]
        return local_part or "User"
