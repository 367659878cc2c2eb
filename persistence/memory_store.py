from __future__ import annotations

import copy
from typing import Any

from .interfaces import ObjectStore


class MemoryObjectStore(ObjectStore):
    """
    Process-local store. Values are deep-copied in and out so callers can't
    mutate what is stored.
    """

    name = "memory"

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    async def get(self, key: str) -> Any | None:
        value = self._data.get(key)
        return copy.deepcopy(value)

    async def put(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def list_keys(self, prefix: str) -> list[str]:
        return sorted(k for k in self._data if k.startswith(prefix))

    async def close(self) -> None:
        return None
