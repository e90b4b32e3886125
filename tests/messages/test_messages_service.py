"""Tests for the messaging stub service.

Messaging is disabled: listings purge stale cache entries and come back
empty, sending is rejected with FeatureUnavailableError.
"""

import json
from unittest.mock import MagicMock

import pytest

from coachlink.core.errors import FeatureUnavailableError, StorageAccessError
from coachlink.messages.schemas import Conversation
from coachlink.messages.service import MessagesService
from coachlink.storage.memory import InMemoryStore


def _stale_conversation(role: str) -> str:
    return json.dumps(
        [Conversation(id="c1", name="Old", role=role).model_dump(by_alias=True)]
    )


@pytest.mark.asyncio
async def test_get_conversations_clears_coach_cache(coach_store: InMemoryStore) -> None:
    coach_store.set_item("conversations_coach", _stale_conversation("coach"))
    coach_store.set_item("conversations_athlete", _stale_conversation("athlete"))

    conversations = await MessagesService(coach_store).get_conversations()

    assert conversations == []
    assert coach_store.get_item("conversations_coach") is None
    # Only the current role's cache is touched
    assert coach_store.get_item("conversations_athlete") is not None


@pytest.mark.asyncio
async def test_get_conversations_uses_athlete_key(athlete_store: InMemoryStore) -> None:
    athlete_store.set_item("conversations_athlete", _stale_conversation("athlete"))

    assert await MessagesService(athlete_store).get_conversations() == []
    assert athlete_store.get_item("conversations_athlete") is None


@pytest.mark.asyncio
async def test_role_defaults_to_coach_for_corrupt_user(store: InMemoryStore) -> None:
    store.set_item("user", "{not json")
    store.set_item("conversations_coach", "[]")

    await MessagesService(store).get_conversations()

    assert store.get_item("conversations_coach") is None


@pytest.mark.asyncio
async def test_get_messages_clears_cache(store: InMemoryStore) -> None:
    store.set_item("messages", "[]")

    assert await MessagesService(store).get_messages() == []
    assert store.get_item("messages") is None


@pytest.mark.asyncio
async def test_listing_survives_broken_store() -> None:
    broken = MagicMock()
    broken.get_item.side_effect = StorageAccessError("store offline")
    broken.remove_item.side_effect = StorageAccessError("store offline")

    service = MessagesService(broken)

    assert await service.get_conversations() == []
    assert await service.get_messages() == []


@pytest.mark.asyncio
async def test_send_message_is_unavailable(store: InMemoryStore) -> None:
    result = await MessagesService(store).send_message("hello coach")

    assert not result.ok
    assert isinstance(result.error, FeatureUnavailableError)
    assert result.error.message == "Messaging feature is not yet available"
    with pytest.raises(FeatureUnavailableError):
        result.unwrap()


@pytest.mark.asyncio
async def test_mark_as_read_is_idempotent_noop(store: InMemoryStore) -> None:
    service = MessagesService(store)
    store.set_item("other", "1")

    first = await service.mark_as_read("c1")
    second = await service.mark_as_read("c1")

    assert first.ok and second.ok
    assert store.keys() == ["other"]


@pytest.mark.asyncio
async def test_reset_all_purges_tracked_prefixes(coach_store: InMemoryStore) -> None:
    for key in ["messages_c1", "conversations_coach", "conversations_athlete", "message_draft", "notification_read_status"]:
        coach_store.set_item(key, "[]")
    service = MessagesService(coach_store)

    result = service.reset_all()

    assert result.ok and result.value == 4
    assert sorted(coach_store.keys()) == ["notification_read_status", "user"]
    assert await service.get_conversations() == []
    assert await service.get_messages() == []
    assert not [k for k in coach_store.keys() if k.startswith(("messages_", "conversations_", "message_"))]


def test_reset_all_on_empty_store(store: InMemoryStore) -> None:
    result = MessagesService(store).reset_all()
    assert result.ok and result.value == 0


def test_reset_all_never_raises_on_inaccessible_store() -> None:
    broken = MagicMock()
    broken.keys.side_effect = StorageAccessError("store offline")

    result = MessagesService(broken).reset_all()

    assert not result.ok
    assert isinstance(result.error, StorageAccessError)
