"""Local persistent key-value stores and JSON blob helpers."""

from coachlink.storage.base import KeyValueStore
from coachlink.storage.blobs import purge_prefixes, read_json, remove_key, write_json
from coachlink.storage.file_store import JsonFileStore
from coachlink.storage.memory import InMemoryStore
from coachlink.storage.redis_store import RedisStore

__all__ = [
    "InMemoryStore",
    "JsonFileStore",
    "KeyValueStore",
    "RedisStore",
    "purge_prefixes",
    "read_json",
    "remove_key",
    "write_json",
]
