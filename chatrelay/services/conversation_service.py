"""Relay a user's message to the configured provider and persist both turns."""
import logging
from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from chatrelay.core.config import settings
from chatrelay.core.llm_client import LLMClient, LLMError, build_llm_client
from chatrelay.core.llm_config import ChatTurn, MessageRole
from chatrelay.models.api_settings import ApiSettings
from chatrelay.models.chat import Chat, Message
from chatrelay.models.user import User
from chatrelay.services.chat_service import ChatService
from chatrelay.services.settings_service import get_api_settings

logger = logging.getLogger(__name__)

AUTO_TITLE_LENGTH = 50

LLMClientFactory = Callable[[ApiSettings], LLMClient]


def build_prompt(chat: Chat, history: list[Message], content: Optional[str] = None) -> list[dict]:
    """Assemble system prompt + prior turns (+ the new user turn) for the provider."""
    turns: list[ChatTurn] = []
    if chat.system_prompt:
        turns.append(ChatTurn(role=MessageRole.SYSTEM, content=chat.system_prompt))
    turns.extend(ChatTurn(role=m.role, content=m.content) for m in history)
    if content is not None:
        turns.append(ChatTurn(role=MessageRole.USER, content=content))
    return [turn.model_dump() for turn in turns]


def auto_title(content: str) -> str:
    title = " ".join(content.split())
    if len(title) > AUTO_TITLE_LENGTH:
        title = title[:AUTO_TITLE_LENGTH].rstrip()
    return title or settings.DEFAULT_CHAT_TITLE


async def send_message(
    db: AsyncSession,
    user: User,
    chat_id: str,
    content: str,
    client_factory: LLMClientFactory = build_llm_client,
) -> tuple[Chat, Message, Message]:
    """
    Store the user's message, ask the model, store and return its reply.

    Returns:
        tuple: (chat, user_message, assistant_message)

    Raises:
        HTTPException: 404 unknown chat, 400 no provider key, 502 provider failure
    """
    chat = await ChatService.get_chat(db, user.id, chat_id)
    api_settings = await get_api_settings(db, user.id)
    try:
        client = client_factory(api_settings)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No API key configured. Please configure /api/v1/settings first.",
        ) from e

    history = await ChatService.get_chat_messages(db, user.id, chat.id)
    prompt = build_prompt(chat, history, content)

    if not history and chat.title == settings.DEFAULT_CHAT_TITLE:
        chat = await ChatService.update_chat(db, user.id, chat.id, title=auto_title(content))
    user_message = await ChatService.add_message(db, user.id, chat.id, MessageRole.USER, content)

    try:
        reply = await client.chat(prompt)
    except LLMError as e:
        logger.warning("Provider call failed for chat %s: %s", chat.id, e)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"LLM error: {e}") from e

    assistant_message = await ChatService.add_message(db, user.id, chat.id, MessageRole.ASSISTANT, reply)
    logger.info("Relayed message in chat %s (model=%s)", chat.id, client.model)
    return chat, user_message, assistant_message
