"""Authentication dependencies for FastAPI"""
from typing import Optional

from fastapi import Depends, HTTPException, status, Header
from sqlalchemy.ext.asyncio import AsyncSession

from chatrelay.core.database import get_db
from chatrelay.models.user import User
from chatrelay.services.api_key_service import ApiKeyService


def _extract_key(api_key: Optional[str], authorization: Optional[str]) -> Optional[str]:
    if api_key:
        return api_key.strip()
    if authorization and authorization.lower().startswith("bearer "):
        return authorization[7:].strip()
    return None


async def get_current_user(
    api_key: Optional[str] = Header(None, alias="X-API-Key"),
    authorization: Optional[str] = Header(None, alias="Authorization"),
    session: AsyncSession = Depends(get_db),
) -> User:
    """
    Dependency to resolve the caller from an API key.
    Args:
        api_key: API key from X-API-Key header
        authorization: Fallback "Bearer <key>" header
        session: Database session
    Returns:
        User: Authenticated user
    Raises:
        HTTPException: If the key is missing or unknown (401 Unauthorized)
    """
    plain_key = _extract_key(api_key, authorization)
    user = await ApiKeyService.authenticate(session, plain_key) if plain_key else None
    if user:
        return user
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid API key",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """Dependency that only lets administrators through (403 otherwise)."""
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin privileges required")
    return user
