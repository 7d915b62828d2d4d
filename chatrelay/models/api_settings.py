"""ApiSettings SQLAlchemy model"""
from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from chatrelay.core.database import Base


class ApiSettings(Base):
    """
    ApiSettings model stores per-user chat-completion provider configuration.

    Fields:
    - id: int primary key
    - user_id: str foreign key to users.id (unique=True)
    - api_key: provider key sent as bearer token (empty until the user sets it)
    - api_url: chat-completion endpoint URL
    - model: model identifier understood by the provider
    - max_tokens: int
    - temperature: float
    - created_at: datetime
    - updated_at: datetime (onupdate)
    """

    __tablename__ = "api_settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)

    api_key = Column(String(512), nullable=False, default="")
    api_url = Column(String(1024), nullable=False)
    model = Column(String(256), nullable=False)
    max_tokens = Column(Integer, nullable=False)
    temperature = Column(Float, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationship back to user (one-to-one)
    user = relationship("User", back_populates="api_settings")
