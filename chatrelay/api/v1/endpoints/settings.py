"""Endpoints to manage the caller's chat-completion API settings"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from chatrelay.core.database import get_db
from chatrelay.core.llm_client import LLMClient
from chatrelay.dependencies.auth import get_current_user
from chatrelay.models.user import User
from chatrelay.schemas.api_settings import ApiKeyValidation, ApiSettingsResponse, ApiSettingsUpdate
from chatrelay.services.settings_service import get_api_settings, update_api_settings

router = APIRouter(prefix="/settings", tags=["settings"])


PUT_DESCRIPTION = (
    "Update the authenticated user's provider settings. Only the fields sent are changed.\n\n"
    "Example:\n"
    "```json\n{\n  \"api_key\": \"sk-or-...\",\n  \"api_url\": \"https://openrouter.ai/api/v1/chat/completions\",\n"
    "  \"model\": \"deepseek/deepseek-r1-distill-llama-70b:free\",\n  \"max_tokens\": 4000,\n  \"temperature\": 0.7\n}\n```\n"
    "Notes:\n"
    "- `api_key` is never returned in responses; `has_api_key` and `api_key_hint` show whether one is set.\n"
)


@router.get("", response_model=ApiSettingsResponse, summary="Get API settings")
async def read_settings(
    authenticated_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiSettingsResponse:
    setting = await get_api_settings(db, authenticated_user.id)
    return ApiSettingsResponse.model_validate(setting)


@router.put("", response_model=ApiSettingsResponse, summary="Update API settings", description=PUT_DESCRIPTION)
async def write_settings(
    data: ApiSettingsUpdate,
    authenticated_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiSettingsResponse:
    setting = await update_api_settings(db, authenticated_user.id, data)
    return ApiSettingsResponse.model_validate(setting)


@router.post("/validate", response_model=ApiKeyValidation, summary="Check the stored provider key")
async def validate_settings_key(
    authenticated_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiKeyValidation:
    """Ask the provider whether the stored key is accepted (OpenRouter `/auth/key`)."""
    setting = await get_api_settings(db, authenticated_user.id)
    if not setting.api_key:
        return ApiKeyValidation(valid=False)
    valid = await LLMClient(setting).validate_key()
    return ApiKeyValidation(valid=valid)
