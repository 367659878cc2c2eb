from __future__ import annotations

import asyncio
import fnmatch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from persistence import SnapshotManager
from persistence.errors import StoreUnavailableError
from persistence.redis_store import RedisObjectStore


class FakeRedis:
    """In-memory stand-in for redis.asyncio.Redis with decode_responses=True."""

    def __init__(self):
        self.data: dict[str, str] = {}
        self.down = False
        self.closed = False
        self.patterns: list[str] = []

    def _check(self):
        if self.down:
            raise RedisConnectionError("connection refused")

    async def get(self, key):
        self._check()
        return self.data.get(key)

    async def set(self, key, value):
        self._check()
        assert isinstance(value, str)
        self.data[key] = value
        return True

    async def delete(self, *keys):
        self._check()
        return sum(1 for k in keys if self.data.pop(k, None) is not None)

    async def scan_iter(self, match=None):
        self._check()
        self.patterns.append(match)
        for key in list(self.data):
            if match is None or fnmatch.fnmatchcase(key, match.replace("\\", "")):
                yield key

    async def aclose(self):
        self.closed = True


@pytest.fixture
def fake() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def redis_store(fake) -> RedisObjectStore:
    return RedisObjectStore(client=fake)


def test_requires_url_without_client():
    with pytest.raises(ValueError):
        RedisObjectStore("")


def test_values_are_stored_as_json(redis_store, fake):
    async def _run():
        await redis_store.put("funnel_data", {"tiles": [{"id": 1}], "table": []})
        assert fake.data["funnel_data"] == '{"tiles":[{"id":1}],"table":[]}'
        assert await redis_store.get("funnel_data") == {"tiles": [{"id": 1}], "table": []}
        assert await redis_store.get("missing") is None

    asyncio.run(_run())


def test_list_keys_uses_prefix_scan(redis_store, fake):
    async def _run():
        fake.data.update(
            {
                "funnel_backup_2025-01-02-00-00-00": "{}",
                "funnel_backup_2025-01-01-00-00-00": "{}",
                "funnel_data": "{}",
                "other": "{}",
            }
        )
        assert await redis_store.list_keys("funnel_backup_") == [
            "funnel_backup_2025-01-01-00-00-00",
            "funnel_backup_2025-01-02-00-00-00",
        ]
        assert fake.patterns == ["funnel_backup_*"]

        await redis_store.delete("funnel_backup_2025-01-01-00-00-00")
        assert await redis_store.list_keys("funnel_backup_") == ["funnel_backup_2025-01-02-00-00-00"]

    asyncio.run(_run())


def test_glob_characters_in_prefix_are_escaped(redis_store, fake):
    asyncio.run(redis_store.list_keys("backup[1]*"))
    assert fake.patterns == ["backup\\[1\\]\\**"]


def test_connection_errors_become_store_errors(redis_store, fake):
    fake.down = True
    for call in (redis_store.get("k"), redis_store.put("k", {}), redis_store.delete("k"), redis_store.list_keys("p")):
        with pytest.raises(StoreUnavailableError):
            asyncio.run(call)


def test_corrupt_value_becomes_store_error(redis_store, fake):
    fake.data["funnel_data"] = "{oops"
    with pytest.raises(StoreUnavailableError):
        asyncio.run(redis_store.get("funnel_data"))


def test_snapshot_manager_over_redis(redis_store, fake, clock):
    async def _run():
        mgr = SnapshotManager(redis_store, max_backups=1, clock=clock)
        await mgr.import_document({"tiles": ["a"], "table": []})
        clock.tick(1)
        await mgr.save({"tiles": ["b"], "table": []})
        clock.tick(1)
        await mgr.save({"tiles": ["c"], "table": []})

        (entry,) = await mgr.list_backups()
        assert entry.date == "2025-01-01-12-00-02"
        assert await mgr.restore(entry.key) == {"tiles": ["b"], "table": []}
        await redis_store.close()
        assert fake.closed

    asyncio.run(_run())
