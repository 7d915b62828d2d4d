"""FastAPI application main entry point"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from chatrelay.core.config import settings
from chatrelay.core.database import AsyncSessionLocal, create_tables
from chatrelay.core.logging_config import configure_logging
from chatrelay.api.v1.router import router as v1_router
from chatrelay.services.user_service import UserService

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


async def bootstrap() -> None:
    """
    Initialize the database and make sure an admin can log in.
    Runs on every start; both steps are no-ops once done.
    """
    logger.info("Creating database tables...")
    await create_tables()

    async with AsyncSessionLocal() as session:
        admin_key = await UserService.ensure_admin(session)
    if admin_key and not settings.ADMIN_API_KEY:
        # Shown once: only the digest is stored
        logger.warning("Admin API key for %s: %s", settings.ADMIN_EMAIL, admin_key)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup and shutdown events.

    Args:
        app: FastAPI application instance
    """
    # Startup
    await bootstrap()
    yield
    # Shutdown
    logger.info("Application shutting down...")


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Chat relay that stores conversations and forwards them to a chat-completion API",
    lifespan=lifespan,
)

# Include routers
app.include_router(v1_router)


@app.get("/", tags=["health"])
async def health_check() -> dict:
    """
    Health check endpoint.

    Returns:
        dict: Status and service information
    """
    return {
        "status": "ok",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "chatrelay.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
