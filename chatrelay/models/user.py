"""User SQLAlchemy model"""

from uuid import uuid4

from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from chatrelay.core.database import Base


class User(Base):
    """
    User model representing a person allowed to chat through the relay.

    Attributes:
        id: Primary key, random UUID string
        email: Unique email address
        is_admin: Whether the user can manage other users and their keys
        created_at: Timestamp of user creation
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    email = Column(String(255), unique=True, nullable=False, index=True)
    is_admin = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # One-to-one: at most one active API key per user
    api_key = relationship("ApiKey", back_populates="user", uselist=False, cascade="all, delete-orphan", passive_deletes=True)
    # One-to-one: provider configuration
    api_settings = relationship("ApiSettings", back_populates="user", uselist=False, cascade="all, delete-orphan", passive_deletes=True)
    # One user has many chats
    chats = relationship("Chat", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, is_admin={self.is_admin})>"
