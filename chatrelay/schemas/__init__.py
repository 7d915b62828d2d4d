"""Pydantic schemas for request/response"""
from chatrelay.schemas.user import UserCreate, UserResponse, LoginRequest
from chatrelay.schemas.api_key import ApiKeyCreated, ApiKeyInfo, ApiKeyRevoke
from chatrelay.schemas.api_settings import ApiSettingsResponse, ApiSettingsUpdate
from chatrelay.schemas.chat import (
    ChatCreate,
    ChatUpdate,
    ChatResponse,
    MessageCreate,
    MessageResponse,
    SendMessageResponse,
    SessionResponse,
)

__all__ = [
    "UserCreate",
    "UserResponse",
    "LoginRequest",
    "ApiKeyCreated",
    "ApiKeyInfo",
    "ApiKeyRevoke",
    "ApiSettingsResponse",
    "ApiSettingsUpdate",
    "ChatCreate",
    "ChatUpdate",
    "ChatResponse",
    "MessageCreate",
    "MessageResponse",
    "SendMessageResponse",
    "SessionResponse",
]
