"""Local key-value store interface.

Stores hold opaque string values (JSON blobs) under string keys, like a
browser's localStorage. All operations are synchronous. Implementations
raise StorageAccessError on any backend failure.
"""

from typing import Protocol, runtime_checkable

# Well-known keys
USER_KEY = "user"
TOKEN_KEY = "token"
COACH_CONVERSATIONS_KEY = "conversations_coach"
ATHLETE_CONVERSATIONS_KEY = "conversations_athlete"
MESSAGES_KEY = "messages"
NOTIFICATION_READ_STATUS_KEY = "notification_read_status"
NOTIFICATION_PENDING_READ_KEY = "notification_pending_read"


@runtime_checkable
class KeyValueStore(Protocol):
    """Synchronous string-keyed store."""

    def get_item(self, key: str) -> str | None:
        """Return the value for key, or None if absent."""
        ...

    def set_item(self, key: str, value: str) -> None:
        ...

    def remove_item(self, key: str) -> None:
        """Remove key. Removing an absent key is not an error."""
        ...

    def keys(self) -> list[str]:
        ...
