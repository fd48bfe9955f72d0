import functools
import logging
from typing import Any, Type, TypeVar

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_json
from redis import asyncio as aioredis
from redis.exceptions import RedisError

from app.core.exceptions import CacheDeserializationError, CacheError, CacheMiss

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 15 * 60


@functools.lru_cache(maxsize=32)
def _adapter(type_: Any) -> TypeAdapter:
    return TypeAdapter(type_)


class CacheService:
    """
    Typed JSON cache on top of Redis.

    Values are serialized with pydantic and stored with a fixed TTL. Reads
    validate the payload against the requested type, so callers always get
    back the same shape they stored. Every failure raises a CacheError
    subclass; callers are expected to treat those as a miss.
    """

    def __init__(self, client: aioredis.Redis, ttl: int = DEFAULT_TTL_SECONDS):
        self._client = client
        self.ttl = ttl

    async def set(self, key: str, value: Any) -> None:
        """Store `value` under `key` with the configured TTL."""
        try:
            payload = to_json(value)
        except (PydanticSerializationError, TypeError, ValueError) as e:
            raise CacheError(f"failed to serialize value for key {key}") from e

        try:
            await self._client.set(key, payload, ex=self.ttl)
        except (RedisError, OSError) as e:
            raise CacheError(f"failed to set key {key}") from e

    async def get(self, key: str, type_: Type[T]) -> T:
        """
        Fetch and decode `key` as `type_`.

        Raises CacheMiss if the key is absent or expired and
        CacheDeserializationError if the payload does not fit `type_`.
        """
        try:
            data = await self._client.get(key)
        except UnicodeDecodeError as e:
            # The client decodes replies; a non-UTF-8 payload fails there
            raise CacheDeserializationError(
                f"cached value for key {key} is not valid UTF-8"
            ) from e
        except (RedisError, OSError) as e:
            raise CacheError(f"failed to get key {key}") from e

        if data is None:
            raise CacheMiss(key)

        try:
            return _adapter(type_).validate_json(data)
        except ValidationError as e:
            raise CacheDeserializationError(
                f"cached value for key {key} is not a valid {type_}"
            ) from e

    async def delete(self, *keys: str) -> None:
        """Remove `keys`. Absent keys are ignored."""
        if not keys:
            return
        try:
            await self._client.delete(*keys)
        except (RedisError, OSError) as e:
            raise CacheError(f"failed to delete keys {keys}") from e

    async def delete_pattern(self, pattern: str) -> int:
        """
        Remove every key matching the glob `pattern`.

        This walks the whole keyspace with SCAN, so its cost grows with the
        total number of keys, not with the number of matches.
        """
        try:
            keys = [key async for key in self._client.scan_iter(match=pattern)]
            if keys:
                await self._client.delete(*keys)
        except (RedisError, OSError) as e:
            raise CacheError(f"failed to delete keys matching {pattern}") from e

        logger.debug(
            "Cache keys invalidated", extra={"pattern": pattern, "count": len(keys)}
        )
        return len(keys)
