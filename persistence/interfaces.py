from __future__ import annotations

from typing import Any, Protocol


class ObjectStore(Protocol):
    """
    Minimal object-store interface: JSON values persisted under string keys.

    Keys are logical. Backends that need a suffix or an indirection (e.g. a
    pathname -> URL lookup) hide it behind these four calls. Each call is
    expected to be atomic on its own; nothing here spans several calls.
    Failures are raised as StoreUnavailableError.
    """

    name: str

    async def get(self, key: str) -> Any | None:
        """Return the stored value, or None when the key is absent."""
        ...

    async def put(self, key: str, value: Any) -> None:
        """Create or overwrite the value under key."""
        ...

    async def delete(self, key: str) -> None:
        """Remove key. Deleting an absent key is not an error."""
        ...

    async def list_keys(self, prefix: str) -> list[str]:
        """Return every key starting with prefix, sorted ascending."""
        ...

    async def close(self) -> None:
        ...
