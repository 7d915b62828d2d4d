"""Pydantic schemas for User-related requests and responses"""
from pydantic import BaseModel, Field, field_validator
from datetime import datetime


class UserCreate(BaseModel):
    """
    Schema for creating a new user (admin only).

    Attributes:
        email: Unique email address of the new user
    """

    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$", description="Email address")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class UserResponse(BaseModel):
    """
    Schema for user response.

    Attributes:
        id: User ID
        email: Email address
        is_admin: Whether the user is an administrator
        created_at: Timestamp of user creation

    Note:
        API keys are NOT included in response
    """

    id: str
    email: str
    is_admin: bool
    created_at: datetime

    class Config:
        from_attributes = True


class LoginRequest(BaseModel):
    """
    Schema for login with an API key.

    Attributes:
        api_key: API key issued by an administrator
    """

    api_key: str = Field(..., min_length=1, description="API key for authentication")
