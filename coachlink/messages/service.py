"""Messaging service.

Messaging is disabled on the platform. The service keeps the full interface
so it can later be backed by a real transport without changing callers:

- Listing operations purge any stale cached entries and return an empty
  list, which callers treat as "feature unavailable", not "no data yet".
- send_message always returns a FeatureUnavailableError result.
- mark_as_read is an idempotent no-op.
"""

from loguru import logger

from coachlink.api.client import ApiClient
from coachlink.core.errors import FeatureUnavailableError
from coachlink.core.result import OperationResult
from coachlink.messages.schemas import Conversation, Message
from coachlink.storage.base import (
    ATHLETE_CONVERSATIONS_KEY,
    COACH_CONVERSATIONS_KEY,
    MESSAGES_KEY,
    KeyValueStore,
)
from coachlink.storage.blobs import purge_prefixes, remove_key
from coachlink.users.current import get_current_user

MESSAGE_KEY_PREFIXES = ("messages_", "conversations_", "message_")

MESSAGING_UNAVAILABLE = "Messaging feature is not yet available"


class MessagesService:
    """Conversation and message access for the current user."""

    def __init__(self, store: KeyValueStore, api: ApiClient | None = None) -> None:
        self._store = store
        # Unused until messaging is backed by the API
        self._api = api

    async def get_conversations(self) -> list[Conversation]:
        role = get_current_user(self._store).role
        key = COACH_CONVERSATIONS_KEY if role == "coach" else ATHLETE_CONVERSATIONS_KEY
        remove_key(self._store, key)
        logger.bind(role=role).debug("Messaging unavailable, cleared cached conversations")
        return []

    async def get_messages(self) -> list[Message]:
        remove_key(self._store, MESSAGES_KEY)
        return []

    async def send_message(self, content: str) -> OperationResult[Message]:
        logger.bind(content_length=len(content)).info("Rejected send_message: messaging unavailable")
        return OperationResult.failure(FeatureUnavailableError(MESSAGING_UNAVAILABLE))

    async def mark_as_read(self, conversation_id: str | None = None) -> OperationResult[None]:
        return OperationResult.success()

    def reset_all(self) -> OperationResult[int]:
        """Remove all message-related data from the local store. Never raises."""
        return purge_prefixes(self._store, MESSAGE_KEY_PREFIXES)
