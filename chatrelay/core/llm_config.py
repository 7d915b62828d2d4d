from enum import Enum
from pydantic import BaseModel


class MessageRole(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ChatTurn(BaseModel):
    """One entry of the `messages` array sent to a chat-completion endpoint."""

    role: MessageRole
    content: str

    model_config = {"use_enum_values": True}
