"""Pydantic schemas for chats and messages"""
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from chatrelay.schemas.api_settings import ApiSettingsResponse
from chatrelay.schemas.user import UserResponse


class ChatCreate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    system_prompt: Optional[str] = None


class ChatUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    system_prompt: Optional[str] = None


class ChatResponse(BaseModel):
    id: str
    title: str
    created_at: datetime
    last_message: Optional[str] = None
    system_prompt: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class MessageCreate(BaseModel):
    content: str = Field(..., min_length=1, description="User message to relay to the model")

    @field_validator("content")
    @classmethod
    def reject_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("content must not be blank")
        return value


class MessageResponse(BaseModel):
    id: str
    chat_id: str
    role: Literal["user", "assistant"]
    content: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SendMessageResponse(BaseModel):
    """Both turns of one exchange, plus the chat as it is after the exchange."""

    chat: ChatResponse
    user_message: MessageResponse
    assistant_message: MessageResponse


class SessionResponse(BaseModel):
    """Everything a client needs right after login."""

    user: UserResponse
    settings: ApiSettingsResponse
    chats: list[ChatResponse]
