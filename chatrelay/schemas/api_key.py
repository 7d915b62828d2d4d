"""Schemas for user API keys"""
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


class ApiKeyCreated(BaseModel):
    """Returned once, right after generation. The plain key is not stored."""

    user_id: str
    api_key: str


class ApiKeyInfo(BaseModel):
    id: int
    user_id: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ApiKeyRevoke(BaseModel):
    api_key: str = Field(..., min_length=1, description="Plain API key to revoke")
