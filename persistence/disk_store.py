from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from json_store import atomic_write_json, read_json

from .errors import StoreUnavailableError
from .interfaces import ObjectStore
from .locks import GLOBAL_PATH_LOCKS
from .paths import ensure_dir, key_filename

_SUFFIX = ".json"


class DiskObjectStore(ObjectStore):
    """
    Stores each key as its own JSON file in a flat directory:

    - data/funnel_data.json
    - data/funnel_backup_2025-01-01-12-00-00.json

    Writes are atomic (temp file + replace). File I/O runs in a worker
    thread to keep the event loop free.
    """

    name = "disk"

    def __init__(self, directory: Path):
        self._dir = ensure_dir(Path(directory))

    @property
    def directory(self) -> Path:
        return self._dir

    def _path(self, key: str) -> Path:
        return self._dir / key_filename(key)

    def _get_sync(self, key: str) -> Any | None:
        path = self._path(key)
        with GLOBAL_PATH_LOCKS.lock_for(path):
            return read_json(path)

    def _put_sync(self, key: str, value: Any) -> None:
        path = self._path(key)
        with GLOBAL_PATH_LOCKS.lock_for(path):
            atomic_write_json(path, value)

    def _delete_sync(self, key: str) -> None:
        path = self._path(key)
        with GLOBAL_PATH_LOCKS.lock_for(path):
            path.unlink(missing_ok=True)

    def _list_sync(self, prefix: str) -> list[str]:
        keys = [p.name[: -len(_SUFFIX)] for p in self._dir.glob(f"*{_SUFFIX}") if p.is_file()]
        return sorted(k for k in keys if k.startswith(prefix))

    async def get(self, key: str) -> Any | None:
        try:
            return await asyncio.to_thread(self._get_sync, key)
        except (OSError, ValueError) as e:
            raise StoreUnavailableError("get", key, e) from e

    async def put(self, key: str, value: Any) -> None:
        try:
            await asyncio.to_thread(self._put_sync, key, value)
        except (OSError, ValueError, TypeError) as e:
            raise StoreUnavailableError("put", key, e) from e

    async def delete(self, key: str) -> None:
        try:
            await asyncio.to_thread(self._delete_sync, key)
        except (OSError, ValueError) as e:
            raise StoreUnavailableError("delete", key, e) from e

    async def list_keys(self, prefix: str) -> list[str]:
        try:
            return await asyncio.to_thread(self._list_sync, prefix)
        except OSError as e:
            raise StoreUnavailableError("list", prefix, e) from e

    async def close(self) -> None:
        return None
