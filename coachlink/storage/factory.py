from loguru import logger

from coachlink.config.settings import Settings
from coachlink.storage.base import KeyValueStore
from coachlink.storage.file_store import JsonFileStore
from coachlink.storage.memory import InMemoryStore
from coachlink.storage.redis_store import RedisStore


def build_store(settings: Settings) -> KeyValueStore:
    """Build the key-value store selected by STORAGE_BACKEND."""
    if settings.storage_backend == "file":
        logger.info(f"Using JSON file store at {settings.storage_path}")
        return JsonFileStore(settings.storage_path)
    if settings.storage_backend == "redis":
        logger.info("Using Redis store", namespace=settings.storage_namespace)
        return RedisStore(redis_url=settings.redis_url, namespace=settings.storage_namespace)
    logger.info("Using in-memory store (contents are lost on exit)")
    return InMemoryStore()
