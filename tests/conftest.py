"""Root conftest for all tests.

Shared fixtures: an in-memory store, a stub API client and a loguru sink
that tests can assert against.
"""

import json
from collections.abc import Iterator
from unittest.mock import AsyncMock, MagicMock

import pytest
from loguru import logger

from coachlink.api.client import ApiClient
from coachlink.storage.memory import InMemoryStore


@pytest.fixture
def store() -> InMemoryStore:
    """Empty in-memory key-value store."""
    return InMemoryStore()


@pytest.fixture
def coach_store(store: InMemoryStore) -> InMemoryStore:
    """Store with a cached coach user."""
    store.set_item("user", json.dumps({"_id": "u_coach", "role": "coach"}))
    return store


@pytest.fixture
def athlete_store(store: InMemoryStore) -> InMemoryStore:
    """Store with a cached athlete user."""
    store.set_item("user", json.dumps({"id": "u_athlete", "role": "athlete"}))
    return store


@pytest.fixture
def api() -> MagicMock:
    """ApiClient stand-in whose HTTP verbs are AsyncMocks."""
    client = MagicMock(spec=ApiClient)
    client.get = AsyncMock(return_value=None)
    client.post = AsyncMock(return_value=None)
    client.patch = AsyncMock(return_value=None)
    client.delete = AsyncMock(return_value=None)
    client.request = AsyncMock(return_value=None)
    client.aclose = AsyncMock(return_value=None)
    return client


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    """Collect loguru messages emitted during the test."""
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
