"""
User Repository

Database operations for portal accounts.
"""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sat_portal.modules.users.models import User, UserRole

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for user database operations."""

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        email: str,
        password_hash: str | None,
        full_name: str | None,
        role: UserRole = UserRole.STUDENT,
        identifier: str | None = None,
        google_id: str | None = None,
        is_active: bool = True,
    ) -> User:
        """
        Create a new user record.

        Args:
            db: Database session
            email: User's email address (unique)
            password_hash: Hashed password, None for OAuth-only accounts
            full_name: Display name
            role: STUDENT or LECTURER
            identifier: NIM or NIP
            google_id: Google account subject, when linked
            is_active: Whether user is active

        Returns:
            Created User instance
        """
        user = User(
            email=email,
            password_hash=password_hash,
            full_name=full_name,
            role=role,
            identifier=identifier,
            google_id=google_id,
            is_active=is_active,
        )

        db.add(user)
        await db.commit()
        await db.refresh(user)

        logger.info(f"Created user: {user.id} - {user.email} ({user.role.value})")
        return user

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: str | uuid.UUID) -> User | None:
        """
        Get a user by ID.

        Returns:
            User instance or None if not found (or the id is not a UUID)
        """
        try:
            key = user_id if isinstance(user_id, uuid.UUID) else uuid.UUID(user_id)
        except ValueError:
            return None
        return await db.get(User, key)

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> User | None:
        """Get a user by email address (case-insensitive)."""
        result = await db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_google_id(db: AsyncSession, google_id: str) -> User | None:
        """Get a user by linked Google account."""
        result = await db.execute(select(User).where(User.google_id == google_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def email_exists(db: AsyncSession, email: str) -> bool:
        """Check if an email address is already registered."""
        user = await UserRepository.get_by_email(db, email)
        return user is not None

    @staticmethod
    async def link_google_account(db: AsyncSession, user: User, google_id: str) -> User:
        """Attach a Google account to an existing user."""
        user.google_id = google_id
        await db.commit()
        await db.refresh(user)
        logger.info(f"Linked Google account to user {user.id}")
        return user
