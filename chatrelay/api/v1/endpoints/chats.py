"""Chat and message endpoints"""
from fastapi import APIRouter, Depends, status, Path
from sqlalchemy.ext.asyncio import AsyncSession

from chatrelay.core.database import get_db
from chatrelay.dependencies.auth import get_current_user
from chatrelay.dependencies.llm import get_llm_client_factory
from chatrelay.models.user import User
from chatrelay.schemas.chat import (
    ChatCreate,
    ChatResponse,
    ChatUpdate,
    MessageCreate,
    MessageResponse,
    SendMessageResponse,
)
from chatrelay.services.chat_service import ChatService
from chatrelay.services.conversation_service import LLMClientFactory, send_message

router = APIRouter(prefix="/chats", tags=["chats"])


@router.get("", response_model=list[ChatResponse])
async def list_chats(
    authenticated_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> list[ChatResponse]:
    """Chats of the caller, newest first."""
    chats = await ChatService.list_chats(session, authenticated_user.id)
    return [ChatResponse.model_validate(chat) for chat in chats]


@router.post("", response_model=ChatResponse, status_code=status.HTTP_201_CREATED)
async def create_chat(
    body: ChatCreate,
    authenticated_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> ChatResponse:
    chat = await ChatService.create_chat(session, authenticated_user.id, body.title, body.system_prompt)
    return ChatResponse.model_validate(chat)


@router.get("/{chat_id}", response_model=ChatResponse)
async def get_chat(
    chat_id: str = Path(..., description="ID of a chat owned by the caller"),
    authenticated_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> ChatResponse:
    chat = await ChatService.get_chat(session, authenticated_user.id, chat_id)
    return ChatResponse.model_validate(chat)


@router.patch("/{chat_id}", response_model=ChatResponse)
async def update_chat(
    body: ChatUpdate,
    chat_id: str = Path(..., description="ID of a chat owned by the caller"),
    authenticated_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> ChatResponse:
    """Rename a chat or change its system prompt."""
    chat = await ChatService.update_chat(session, authenticated_user.id, chat_id, body.title, body.system_prompt)
    return ChatResponse.model_validate(chat)


@router.delete("/{chat_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_chat(
    chat_id: str = Path(..., description="ID of a chat owned by the caller"),
    authenticated_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> None:
    """Delete a chat together with all of its messages."""
    await ChatService.delete_chat(session, authenticated_user.id, chat_id)


@router.get("/{chat_id}/messages", response_model=list[MessageResponse])
async def list_messages(
    chat_id: str = Path(..., description="ID of a chat owned by the caller"),
    authenticated_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> list[MessageResponse]:
    messages = await ChatService.get_chat_messages(session, authenticated_user.id, chat_id)
    return [MessageResponse.model_validate(message) for message in messages]


@router.post("/{chat_id}/messages", response_model=SendMessageResponse, status_code=status.HTTP_201_CREATED)
async def post_message(
    body: MessageCreate,
    chat_id: str = Path(..., description="ID of a chat owned by the caller"),
    authenticated_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
    client_factory: LLMClientFactory = Depends(get_llm_client_factory),
) -> SendMessageResponse:
    """
    Send a message: it is stored, relayed to the configured model together with
    the chat history, and the model's reply is stored and returned.
    """
    chat, user_message, assistant_message = await send_message(
        session, authenticated_user, chat_id, body.content, client_factory
    )
    return SendMessageResponse(
        chat=ChatResponse.model_validate(chat),
        user_message=MessageResponse.model_validate(user_message),
        assistant_message=MessageResponse.model_validate(assistant_message),
    )
