"""Session storage for cart contents.

A session store is a small async key-value contract. The cart keeps one key
per instance (``cart.<instance>``) holding the list of stored items.
"""
import json
from typing import Any, Optional, Protocol

from shopping_cart.db import RedisKeys, TTL
from shopping_cart.logging import get_logger, sanitize_string_for_logging

logger = get_logger(__name__)


class SessionStore(Protocol):
    """Key-value session the cart reads from and writes back to."""

    async def get(self, key: str) -> Optional[Any]:
        ...

    async def set(self, key: str, value: Any) -> None:
        ...

    async def has(self, key: str) -> bool:
        ...

    async def remove(self, key: str) -> None:
        ...


class MemorySessionStore:
    """Dict-backed session. Values are JSON round-tripped like the Redis store."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    async def get(self, key: str) -> Optional[Any]:
        raw = self._data.get(key)
        return None if raw is None else json.loads(raw)

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    async def has(self, key: str) -> bool:
        return key in self._data

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class RedisSessionStore:
    """Session values kept in Upstash Redis under ``session:<session_id>:<key>``."""

    def __init__(self, redis, session_id: str, ttl: int = TTL.CART) -> None:
        self.redis = redis
        self.session_id = session_id
        self.ttl = ttl

    def _key(self, key: str) -> str:
        return RedisKeys.session_key(self.session_id, key)

    async def get(self, key: str) -> Optional[Any]:
        data = await self.redis.get(self._key(key))
        if data is None:
            return None
        try:
            return json.loads(data)
        except (json.JSONDecodeError, TypeError) as e:
            # Corrupted data - clear it so the cart starts empty
            logger.warning(f"Corrupted session value for {sanitize_string_for_logging(key)}: {e}")
            await self.redis.delete(self._key(key))
            return None

    async def set(self, key: str, value: Any) -> None:
        await self.redis.set(self._key(key), json.dumps(value), ex=self.ttl)

    async def has(self, key: str) -> bool:
        return bool(await self.redis.exists(self._key(key)))

    async def remove(self, key: str) -> None:
        await self.redis.delete(self._key(key))
