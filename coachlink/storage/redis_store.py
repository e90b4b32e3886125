"""Redis-backed key-value store.

Keys are written as <namespace><key> so several clients can share one
Redis database. keys() only reports keys inside the namespace, with the
namespace stripped.
"""

import redis
from loguru import logger

from coachlink.core.errors import StorageAccessError


def _get_redis_client(redis_url: str) -> redis.Redis:
    """Get Redis client instance.

    Returns:
        Redis client with string decoding enabled
    """
    return redis.from_url(redis_url, decode_responses=True)


class RedisStore:
    """Key-value store on top of a synchronous Redis client."""

    def __init__(
        self,
        client: redis.Redis | None = None,
        *,
        redis_url: str = "redis://localhost:6379/0",
        namespace: str = "",
    ) -> None:
        self._client = client if client is not None else _get_redis_client(redis_url)
        self.namespace = namespace

    def _key(self, key: str) -> str:
        return f"{self.namespace}{key}"

    def get_item(self, key: str) -> str | None:
        try:
            value = self._client.get(self._key(key))
        except redis.RedisError as e:
            raise StorageAccessError(f"Redis GET failed: {e}", key=key) from e
        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return str(value)

    def set_item(self, key: str, value: str) -> None:
        try:
            self._client.set(self._key(key), value)
        except redis.RedisError as e:
            raise StorageAccessError(f"Redis SET failed: {e}", key=key) from e

    def remove_item(self, key: str) -> None:
        try:
            self._client.delete(self._key(key))
        except redis.RedisError as e:
            raise StorageAccessError(f"Redis DEL failed: {e}", key=key) from e

    def keys(self) -> list[str]:
        try:
            raw_keys = list(self._client.scan_iter(match=f"{self.namespace}*"))
        except redis.RedisError as e:
            raise StorageAccessError(f"Redis SCAN failed: {e}") from e

        prefix_len = len(self.namespace)
        keys: list[str] = []
        for raw in raw_keys:
            key = raw.decode("utf-8") if isinstance(raw, bytes) else str(raw)
            keys.append(key[prefix_len:])
        logger.debug("Redis keys scanned", namespace=self.namespace, count=len(keys))
        return keys
