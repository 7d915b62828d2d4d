"""Application configuration using Pydantic Settings"""
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # App Configuration
    APP_NAME: str = "ChatRelay"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database Configuration
    DATABASE_URL: str = "sqlite+aiosqlite:///./chatrelay.db"

    # Security Configuration
    SECRET_KEY: str = "change-this-to-a-random-secret-key-in-production"

    # Admin bootstrap (first run only)
    ADMIN_EMAIL: str = "admin@localhost"
    ADMIN_API_KEY: Optional[str] = None

    # Defaults applied to every new user's API settings
    DEFAULT_API_URL: str = "https://openrouter.ai/api/v1/chat/completions"
    DEFAULT_MODEL: str = "deepseek/deepseek-r1-distill-llama-70b:free"
    DEFAULT_MAX_TOKENS: int = 4000
    DEFAULT_TEMPERATURE: float = 0.7

    DEFAULT_CHAT_TITLE: str = "New Chat"
    LLM_TIMEOUT: float = 120.0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


# Global settings instance
settings = Settings()
