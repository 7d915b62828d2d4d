"""Chat and Message SQLAlchemy models"""
from datetime import datetime, UTC
from uuid import uuid4

from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime, Index
from sqlalchemy.orm import relationship

from chatrelay.core.database import Base


def _utcnow() -> datetime:
    # Sub-second precision orders chats created within the same second
    return datetime.now(UTC)


class Chat(Base):
    """
    Chat model representing one conversation thread.
    Attributes:
        id: Random UUID string
        title: Display title
        user_id: Owner (foreign key to User)
        created_at: Timestamp
        last_message: Content of the most recent message, for list previews
        system_prompt: Optional instruction sent before the conversation turns
    """
    __tablename__ = "chats"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    title = Column(String(255), nullable=False)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    last_message = Column(Text, nullable=True)
    system_prompt = Column(Text, nullable=True)

    user = relationship("User", back_populates="chats")
    messages = relationship(
        "Message",
        back_populates="chat",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Message.position",
    )


class Message(Base):
    """A single user or assistant turn inside a chat. `position` is its 1-based order within the chat."""
    __tablename__ = "messages"
    __table_args__ = (Index("ix_messages_chat_position", "chat_id", "position", unique=True),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    chat_id = Column(String(36), ForeignKey("chats.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False)
    role = Column(String(16), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    chat = relationship("Chat", back_populates="messages")
