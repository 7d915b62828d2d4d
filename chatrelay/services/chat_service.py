"""Chat service: chats and messages, always scoped to the requesting user"""
import logging
from typing import Optional

from sqlalchemy import delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from fastapi import HTTPException, status

from chatrelay.core.config import settings
from chatrelay.core.llm_config import MessageRole
from chatrelay.models.chat import Chat, Message

logger = logging.getLogger(__name__)

ALLOWED_ROLES = {MessageRole.USER.value, MessageRole.ASSISTANT.value}


class ChatService:
    @staticmethod
    async def create_chat(
        session: AsyncSession,
        user_id: str,
        title: Optional[str] = None,
        system_prompt: Optional[str] = None,
    ) -> Chat:
        new_chat = Chat(
            user_id=user_id,
            title=(title or "").strip() or settings.DEFAULT_CHAT_TITLE,
            system_prompt=system_prompt or None,
        )
        session.add(new_chat)
        await session.commit()
        await session.refresh(new_chat)
        logger.debug("Created chat %s for user %s", new_chat.id, user_id)
        return new_chat

    @staticmethod
    async def list_chats(session: AsyncSession, user_id: str) -> list[Chat]:
        """Chats of the user, newest first."""
        stmt = select(Chat).where(Chat.user_id == user_id).order_by(Chat.created_at.desc())
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def get_chat(session: AsyncSession, user_id: str, chat_id: str) -> Chat:
        """
        Load a chat owned by the user.

        Raises:
            HTTPException: 404 if the chat does not exist or belongs to someone else
        """
        stmt = select(Chat).where(Chat.id == chat_id, Chat.user_id == user_id)
        result = await session.execute(stmt)
        chat = result.scalars().first()
        if not chat:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Chat not found")
        return chat

    @staticmethod
    async def update_chat(
        session: AsyncSession,
        user_id: str,
        chat_id: str,
        title: Optional[str] = None,
        system_prompt: Optional[str] = None,
    ) -> Chat:
        """Rename a chat and/or change its system prompt. An empty prompt clears it."""
        chat = await ChatService.get_chat(session, user_id, chat_id)
        if title is not None:
            chat.title = title.strip() or settings.DEFAULT_CHAT_TITLE
        if system_prompt is not None:
            chat.system_prompt = system_prompt or None
        session.add(chat)
        await session.commit()
        await session.refresh(chat)
        return chat

    @staticmethod
    async def delete_chat(session: AsyncSession, user_id: str, chat_id: str) -> None:
        chat = await ChatService.get_chat(session, user_id, chat_id)
        # Explicit delete keeps the cascade independent of the backend's FK enforcement
        await session.execute(delete(Message).where(Message.chat_id == chat.id))
        await session.delete(chat)
        await session.commit()
        logger.debug("Deleted chat %s of user %s", chat_id, user_id)

    @staticmethod
    async def add_message(
        session: AsyncSession,
        user_id: str,
        chat_id: str,
        role: str,
        content: str,
    ) -> Message:
        """Append a message and record it as the chat's last_message."""
        role = role.value if isinstance(role, MessageRole) else role
        if role not in ALLOWED_ROLES:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid role: {role}")

        chat = await ChatService.get_chat(session, user_id, chat_id)
        position = await session.scalar(
            select(func.coalesce(func.max(Message.position), 0) + 1).where(Message.chat_id == chat.id)
        )
        message = Message(chat_id=chat.id, position=position, role=role, content=content)
        chat.last_message = content
        session.add_all([message, chat])
        await session.commit()
        await session.refresh(message)
        return message

    @staticmethod
    async def get_chat_messages(session: AsyncSession, user_id: str, chat_id: str) -> list[Message]:
        """Messages of an owned chat in insertion order."""
        stmt = (
            select(Message)
            .join(Chat, Chat.id == Message.chat_id)
            .where(Message.chat_id == chat_id, Chat.user_id == user_id)
            .order_by(Message.position.asc())
        )
        result = await session.execute(stmt)
        messages = list(result.scalars().all())
        if not messages:
            # Distinguish an empty chat from one the user cannot see
            await ChatService.get_chat(session, user_id, chat_id)
        return messages
