"""Service for issuing, revoking and checking user API keys."""
import logging
from typing import Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status

from chatrelay.core.security import generate_api_key, hash_api_key, verify_api_key
from chatrelay.models.api_key import ApiKey
from chatrelay.models.user import User
from chatrelay.services.user_service import UserService

logger = logging.getLogger(__name__)


class ApiKeyService:
    @staticmethod
    async def generate_api_key(session: AsyncSession, user_id: str) -> str:
        """
        Issue a new key for a user, replacing any existing one.

        The old row is deleted before the new one is inserted, so a user never
        holds two keys. Only the digest is stored; the plain key is returned.
        """
        user = await UserService.get_user(session, user_id)
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

        plain_key = generate_api_key()
        try:
            await session.execute(delete(ApiKey).where(ApiKey.user_id == user_id))
            session.add(ApiKey(user_id=user_id, key=hash_api_key(plain_key)))
            await session.commit()
        except IntegrityError as e:
            await session.rollback()
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Failed to generate API key") from e

        logger.info("Generated API key for user %s", user.email)
        return plain_key

    @staticmethod
    async def revoke_api_key(session: AsyncSession, user_id: str) -> None:
        result = await session.execute(delete(ApiKey).where(ApiKey.user_id == user_id))
        if result.rowcount == 0:
            await session.rollback()
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="API key not found")
        await session.commit()
        logger.info("Revoked API key of user %s", user_id)

    @staticmethod
    async def revoke_by_key(session: AsyncSession, plain_key: str) -> str:
        """Revoke whichever key matches `plain_key`; returns the owner's user id."""
        stmt = select(ApiKey).where(ApiKey.key == hash_api_key(plain_key))
        result = await session.execute(stmt)
        row = result.scalars().first()
        if not row:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="API key not found")

        user_id = row.user_id
        await session.delete(row)
        await session.commit()
        logger.info("Revoked API key of user %s", user_id)
        return user_id

    @staticmethod
    async def list_api_keys(session: AsyncSession) -> list[ApiKey]:
        result = await session.execute(select(ApiKey).order_by(ApiKey.created_at))
        return list(result.scalars().all())

    @staticmethod
    async def authenticate(session: AsyncSession, plain_key: str) -> Optional[User]:
        """Return the user owning `plain_key`, or None."""
        stmt = (
            select(User, ApiKey.key)
            .join(ApiKey, ApiKey.user_id == User.id)
            .where(ApiKey.key == hash_api_key(plain_key))
        )
        result = await session.execute(stmt)
        row = result.first()
        # Digest comparison is constant-time
        if row is None or not verify_api_key(plain_key, row.key):
            return None
        return row.User
