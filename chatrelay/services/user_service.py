"""User service for business logic"""
import logging
from typing import Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status

from chatrelay.core.config import settings
from chatrelay.core.security import generate_api_key, hash_api_key
from chatrelay.models.api_key import ApiKey
from chatrelay.models.user import User
from chatrelay.services.settings_service import default_settings_row

logger = logging.getLogger(__name__)


class UserService:
    """Service for user-related operations"""

    @staticmethod
    async def create_user(session: AsyncSession, email: str, is_admin: bool = False) -> User:
        """
        Create a new user together with its defaulted API settings.

        Args:
            session: Database session
            email: Unique email address
            is_admin: Grant administrator rights

        Returns:
            User: Created user

        Raises:
            HTTPException: If the email already exists (409 Conflict)
        """
        new_user = User(email=email, is_admin=is_admin)
        new_user.api_settings = default_settings_row()

        try:
            session.add(new_user)
            await session.commit()
            await session.refresh(new_user)
        except IntegrityError as e:
            await session.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Email already exists",
            ) from e

        logger.info("Created user %s (admin=%s)", new_user.email, is_admin)
        return new_user

    @staticmethod
    async def list_users(session: AsyncSession) -> list[User]:
        stmt = select(User).order_by(User.created_at, User.email)
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def get_user(session: AsyncSession, user_id: str) -> Optional[User]:
        stmt = select(User).where(User.id == user_id)
        result = await session.execute(stmt)
        return result.scalars().first()

    @staticmethod
    async def get_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
        """
        Get user by email.

        Args:
            session: Database session
            email: Email address

        Returns:
            User: User object if found, None otherwise
        """
        stmt = select(User).where(User.email == email.strip().lower())
        result = await session.execute(stmt)
        return result.scalars().first()

    @staticmethod
    async def delete_user(session: AsyncSession, user_id: str) -> None:
        """Delete a user and, by cascade, its key, settings, chats and messages."""
        user = await UserService.get_user(session, user_id)
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        if user.is_admin:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="The admin user cannot be deleted")

        await session.delete(user)
        await session.commit()
        logger.info("Deleted user %s", user.email)

    @staticmethod
    async def ensure_admin(session: AsyncSession) -> Optional[str]:
        """
        Create the bootstrap admin on first run.

        Returns:
            str: The admin's plain API key if the admin was just created, None otherwise
        """
        stmt = select(User).where(User.is_admin == True)  # noqa: E712
        result = await session.execute(stmt)
        if result.scalars().first():
            return None

        plain_key = settings.ADMIN_API_KEY or generate_api_key()
        admin = await UserService.get_user_by_email(session, settings.ADMIN_EMAIL)
        if admin:
            # An ordinary account already uses the admin email: promote it
            admin.is_admin = True
            await session.execute(delete(ApiKey).where(ApiKey.user_id == admin.id))
            session.add(ApiKey(user_id=admin.id, key=hash_api_key(plain_key)))
        else:
            admin = User(email=settings.ADMIN_EMAIL.strip().lower(), is_admin=True)
            admin.api_settings = default_settings_row()
            admin.api_key = ApiKey(key=hash_api_key(plain_key))
            session.add(admin)
        await session.commit()

        logger.info("Bootstrapped admin user %s", admin.email)
        return plain_key
