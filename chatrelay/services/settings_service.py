"""Service for managing per-user API settings."""
import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status

from chatrelay.core.config import settings
from chatrelay.models.api_settings import ApiSettings
from chatrelay.schemas.api_settings import ApiSettingsUpdate

logger = logging.getLogger(__name__)


def default_settings_values() -> dict:
    """Provider defaults applied to every new user."""
    return {
        "api_key": "",
        "api_url": settings.DEFAULT_API_URL,
        "model": settings.DEFAULT_MODEL,
        "max_tokens": settings.DEFAULT_MAX_TOKENS,
        "temperature": settings.DEFAULT_TEMPERATURE,
    }


def default_settings_row() -> ApiSettings:
    return ApiSettings(**default_settings_values())


async def find_api_settings(db: AsyncSession, user_id: str) -> ApiSettings | None:
    stmt = select(ApiSettings).where(ApiSettings.user_id == user_id)
    result = await db.execute(stmt)
    return result.scalars().first()


async def get_api_settings(db: AsyncSession, user_id: str) -> ApiSettings:
    """Return the ApiSettings for a given user_id, raising 404 if not found."""
    setting = await find_api_settings(db, user_id)
    if not setting:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="API settings not found")
    return setting


async def update_api_settings(db: AsyncSession, user_id: str, data: ApiSettingsUpdate) -> ApiSettings:
    """Apply a partial update to the user's settings.

    A user without a settings row gets a defaulted one first, so this is an upsert.
    Returns the ApiSettings SQLAlchemy instance.
    """
    setting = await find_api_settings(db, user_id)
    if setting is None:
        setting = ApiSettings(user_id=user_id, **default_settings_values())

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in changes.items():
        setattr(setting, field, value.strip() if isinstance(value, str) else value)

    try:
        db.add(setting)
        await db.commit()
        await db.refresh(setting)
    except IntegrityError as e:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Failed to update API settings") from e

    logger.info("Updated API settings for user %s: %s", user_id, sorted(changes))
    return setting
