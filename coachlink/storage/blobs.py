"""JSON blob helpers on top of a KeyValueStore.

These helpers never raise. Read failures (missing backend, corrupt JSON)
degrade to the caller's default; write failures come back as a failed
OperationResult. Every failure is logged.
"""

import json
from collections.abc import Iterable
from typing import Any

from loguru import logger

from coachlink.core.errors import StorageAccessError
from coachlink.core.result import OperationResult
from coachlink.storage.base import KeyValueStore


def read_json(store: KeyValueStore, key: str, default: Any = None) -> Any:
    """Read and decode the JSON blob under key.

    Returns:
        Decoded value, or default if the key is absent or unreadable
    """
    try:
        raw = store.get_item(key)
    except StorageAccessError as e:
        logger.bind(key=key, error=str(e)).warning("Failed to read from local store")
        return default

    if raw is None:
        return default

    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError) as e:
        logger.bind(key=key, error=str(e)).warning("Discarding corrupt JSON blob in local store")
        return default


def write_json(store: KeyValueStore, key: str, value: Any) -> OperationResult[None]:
    """Encode value as JSON and store it under key."""
    try:
        payload = json.dumps(value)
    except (TypeError, ValueError) as e:
        error = StorageAccessError(f"Value for '{key}' is not JSON serializable: {e}", key=key)
        logger.bind(key=key, error=str(e)).warning("Failed to serialize value for local store")
        return OperationResult.failure(error)

    try:
        store.set_item(key, payload)
    except StorageAccessError as e:
        logger.bind(key=key, error=str(e)).warning("Failed to write to local store")
        return OperationResult.failure(e)
    return OperationResult.success()


def remove_key(store: KeyValueStore, key: str) -> OperationResult[None]:
    try:
        store.remove_item(key)
    except StorageAccessError as e:
        logger.bind(key=key, error=str(e)).warning("Failed to remove key from local store")
        return OperationResult.failure(e)
    return OperationResult.success()


def purge_prefixes(store: KeyValueStore, prefixes: Iterable[str]) -> OperationResult[int]:
    """Remove every key starting with one of prefixes.

    Returns:
        Number of removed keys on success. Keys removed before a failure stay
        removed.
    """
    prefix_tuple = tuple(prefixes)
    try:
        matching = [key for key in store.keys() if key.startswith(prefix_tuple)]
        for key in matching:
            store.remove_item(key)
    except StorageAccessError as e:
        logger.bind(prefixes=list(prefix_tuple), error=str(e)).warning("Failed to purge local store")
        return OperationResult.failure(e)

    logger.bind(prefixes=list(prefix_tuple), removed=len(matching)).debug("Purged local store keys")
    return OperationResult.success(len(matching))
