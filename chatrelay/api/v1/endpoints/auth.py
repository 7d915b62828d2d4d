"""Login and session bootstrap endpoints"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from chatrelay.core.database import get_db
from chatrelay.dependencies.auth import get_current_user
from chatrelay.models.user import User
from chatrelay.schemas.api_settings import ApiSettingsResponse, ApiSettingsUpdate
from chatrelay.schemas.chat import ChatResponse, SessionResponse
from chatrelay.schemas.user import LoginRequest, UserResponse
from chatrelay.services.api_key_service import ApiKeyService
from chatrelay.services.chat_service import ChatService
from chatrelay.services.settings_service import find_api_settings, update_api_settings

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=UserResponse)
async def login(
    body: LoginRequest,
    session: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Check an API key and return the user it belongs to."""
    user = await ApiKeyService.authenticate(session, body.api_key.strip())
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")
    return UserResponse.model_validate(user)


@router.get("/session", response_model=SessionResponse)
async def get_session(
    authenticated_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> SessionResponse:
    """
    Bootstrap a client after login: the user, their API settings and their chats.
    A user created before settings existed gets the defaults here.
    """
    api_settings = await find_api_settings(session, authenticated_user.id)
    if api_settings is None:
        api_settings = await update_api_settings(session, authenticated_user.id, ApiSettingsUpdate())
    chats = await ChatService.list_chats(session, authenticated_user.id)
    return SessionResponse(
        user=UserResponse.model_validate(authenticated_user),
        settings=ApiSettingsResponse.model_validate(api_settings),
        chats=[ChatResponse.model_validate(chat) for chat in chats],
    )
