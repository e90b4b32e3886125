from coachlink.messages.schemas import Conversation, Message
from coachlink.messages.service import MessagesService

__all__ = ["Conversation", "Message", "MessagesService"]
