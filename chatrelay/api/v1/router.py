"""API v1 router combining all endpoints"""
from fastapi import APIRouter

from chatrelay.api.v1.endpoints import admin, auth, chats, settings

router = APIRouter(prefix="/api/v1")

# Include all endpoint routers
router.include_router(auth.router)
router.include_router(admin.router)
router.include_router(settings.router)
router.include_router(chats.router)

__all__ = ["router"]
