from __future__ import annotations

from typing import Any

from redis import RedisError
from redis.asyncio import Redis

from json_store import decode_json, encode_json

from .errors import StoreUnavailableError
from .interfaces import ObjectStore

_GLOB_SPECIALS = "\\*?[]"


def _glob_escape(text: str) -> str:
    return "".join(f"\\{ch}" if ch in _GLOB_SPECIALS else ch for ch in text)


class RedisObjectStore(ObjectStore):
    """
    Direct key/value backend (Redis, or Vercel KV through its Redis URL).

    Values are stored as JSON strings under the key itself. Listing uses
    SCAN with a MATCH pattern rather than KEYS so large keyspaces don't block
    the server.
    """

    name = "redis"

    def __init__(self, url: str | None = None, *, client: Redis | None = None, timeout: float = 10.0):
        if client is None:
            if not url:
                raise ValueError("a Redis URL (KV_URL or REDIS_URL) is required for the redis backend")
            client = Redis.from_url(
                url,
                decode_responses=True,
                socket_timeout=timeout,
                socket_connect_timeout=timeout,
            )
        self._client = client

    async def get(self, key: str) -> Any | None:
        try:
            raw = await self._client.get(key)
            return decode_json(raw)
        except (RedisError, ValueError) as e:
            raise StoreUnavailableError("get", key, e) from e

    async def put(self, key: str, value: Any) -> None:
        try:
            await self._client.set(key, encode_json(value))
        except (RedisError, TypeError, ValueError) as e:
            raise StoreUnavailableError("put", key, e) from e

    async def delete(self, key: str) -> None:
        try:
            await self._client.delete(key)
        except RedisError as e:
            raise StoreUnavailableError("delete", key, e) from e

    async def list_keys(self, prefix: str) -> list[str]:
        keys: set[str] = set()
        try:
            async for key in self._client.scan_iter(match=f"{_glob_escape(prefix)}*"):
                keys.add(key.decode("utf-8") if isinstance(key, bytes) else str(key))
        except RedisError as e:
            raise StoreUnavailableError("list", prefix, e) from e
        return sorted(k for k in keys if k.startswith(prefix))

    async def close(self) -> None:
        await self._client.aclose()
