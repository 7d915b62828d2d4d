"""SQLAlchemy models"""
from chatrelay.models.user import User
from chatrelay.models.api_key import ApiKey
from chatrelay.models.api_settings import ApiSettings
from chatrelay.models.chat import Chat, Message

__all__ = ["User", "ApiKey", "ApiSettings", "Chat", "Message"]
