from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class Message(BaseModel):
    """One message in a conversation."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    sender_id: str = Field(..., alias="senderId")
    content: str
    timestamp: str
    is_from_current_user: bool = Field(default=False, alias="isFromCurrentUser")


class Conversation(BaseModel):
    """Conversation summary shown in the inbox."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    avatar: str | None = None
    last_message: str = Field(default="", alias="lastMessage")
    last_message_time: str = Field(default="", alias="lastMessageTime")
    unread: int = 0
    role: Literal["coach", "athlete"]
