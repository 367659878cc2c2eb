from __future__ import annotations

from pathlib import Path

from settings import Settings

from .interfaces import ObjectStore


def build_object_store(settings: Settings) -> ObjectStore:
    backend = settings.store_backend
    if backend == "memory":
        from .memory_store import MemoryObjectStore

        return MemoryObjectStore()
    if backend == "disk":
        from .disk_store import DiskObjectStore

        return DiskObjectStore(Path(settings.data_dir))
    if backend == "redis":
        from .redis_store import RedisObjectStore

        return RedisObjectStore(settings.redis_url, timeout=settings.store_timeout_seconds)
    if backend == "blob":
        from .blob_store import BlobObjectStore

        return BlobObjectStore(
            settings.blob_token,
            api_url=settings.blob_api_url,
            timeout=settings.store_timeout_seconds,
        )
    raise ValueError(f"unknown store backend: {backend!r}")
