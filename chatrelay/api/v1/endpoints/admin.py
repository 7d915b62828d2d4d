"""User and API key management endpoints (admin only)"""
from fastapi import APIRouter, Depends, HTTPException, status, Path
from sqlalchemy.ext.asyncio import AsyncSession

from chatrelay.core.database import get_db
from chatrelay.dependencies.auth import require_admin
from chatrelay.models.user import User
from chatrelay.schemas.api_key import ApiKeyCreated, ApiKeyInfo, ApiKeyRevoke
from chatrelay.schemas.user import UserCreate, UserResponse
from chatrelay.services.api_key_service import ApiKeyService
from chatrelay.services.user_service import UserService

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


async def _get_non_admin_user(session: AsyncSession, user_id: str) -> User:
    user = await UserService.get_user(session, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    if user.is_admin:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="The admin API key cannot be revoked")
    return user


@router.get("/users", response_model=list[UserResponse])
async def list_users(session: AsyncSession = Depends(get_db)) -> list[UserResponse]:
    users = await UserService.list_users(session)
    return [UserResponse.model_validate(user) for user in users]


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    body: UserCreate,
    session: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Add a user. Default API settings are created with it; issue a key separately."""
    user = await UserService.create_user(session, body.email)
    return UserResponse.model_validate(user)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str = Path(..., description="ID of the user to delete"),
    session: AsyncSession = Depends(get_db),
) -> None:
    await UserService.delete_user(session, user_id)


@router.post("/users/{user_id}/api-key", response_model=ApiKeyCreated, status_code=status.HTTP_201_CREATED)
async def generate_api_key(
    user_id: str = Path(..., description="ID of the user to issue a key for"),
    session: AsyncSession = Depends(get_db),
) -> ApiKeyCreated:
    """
    Generate (or regenerate) a user's API key.
    The previous key stops working immediately. The plain key is only returned here.
    """
    plain_key = await ApiKeyService.generate_api_key(session, user_id)
    return ApiKeyCreated(user_id=user_id, api_key=plain_key)


@router.delete("/users/{user_id}/api-key", status_code=status.HTTP_204_NO_CONTENT)
async def revoke_user_api_key(
    user_id: str = Path(..., description="ID of the user whose key is revoked"),
    session: AsyncSession = Depends(get_db),
) -> None:
    await _get_non_admin_user(session, user_id)
    await ApiKeyService.revoke_api_key(session, user_id)


@router.post("/api-keys/revoke", status_code=status.HTTP_204_NO_CONTENT)
async def revoke_api_key(
    body: ApiKeyRevoke,
    session: AsyncSession = Depends(get_db),
) -> None:
    """Revoke a key by its plain value."""
    owner = await ApiKeyService.authenticate(session, body.api_key.strip())
    if not owner:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="API key not found")
    await _get_non_admin_user(session, owner.id)
    await ApiKeyService.revoke_by_key(session, body.api_key.strip())


@router.get("/api-keys", response_model=list[ApiKeyInfo])
async def list_api_keys(session: AsyncSession = Depends(get_db)) -> list[ApiKeyInfo]:
    """List which users currently hold a key. Plain keys are never stored, so none are shown."""
    keys = await ApiKeyService.list_api_keys(session)
    return [ApiKeyInfo.model_validate(key) for key in keys]
