"""Pydantic schemas for ApiSettings"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, model_validator

from chatrelay.core.security import key_hint


class ApiSettingsResponse(BaseModel):
    """Response schema for API settings. Note: the provider api_key is never returned."""

    id: int
    api_url: str
    model: str
    max_tokens: int
    temperature: float
    has_api_key: bool = False
    api_key_hint: Optional[str] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @model_validator(mode="before")
    @classmethod
    def mask_api_key(cls, data):
        # ORM rows carry the plain provider key; expose only whether one is set
        api_key = data.get("api_key") if isinstance(data, dict) else getattr(data, "api_key", None)
        if isinstance(data, dict):
            values = dict(data)
        else:
            values = {name: getattr(data, name, None) for name in ("id", "api_url", "model", "max_tokens", "temperature", "updated_at")}
        values["has_api_key"] = bool(api_key)
        values["api_key_hint"] = key_hint(api_key) if api_key else None
        values.pop("api_key", None)
        return values


class ApiSettingsUpdate(BaseModel):
    """Schema for partial update of API settings. All fields optional; blank url/model are rejected."""

    api_key: Optional[str] = Field(default=None, description="Provider key, e.g. an OpenRouter key.")
    api_url: Optional[str] = Field(
        default=None,
        min_length=1,
        description="Chat-completion URL or OpenAI-compatible base URL.",
        examples=["https://openrouter.ai/api/v1/chat/completions"],
    )
    model: Optional[str] = Field(default=None, min_length=1, examples=["deepseek/deepseek-r1-distill-llama-70b:free"])
    max_tokens: Optional[int] = Field(default=None, ge=1, le=200000)
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)

    model_config = {"str_strip_whitespace": True}


class ApiKeyValidation(BaseModel):
    valid: bool
