from __future__ import annotations

from .documents import BackupEntry, BackupStamp, FunnelDocument, WriteResult
from .errors import BackupNotFoundError, FunnelStoreError, MissingParameterError, StoreUnavailableError
from .factory import build_object_store
from .interfaces import ObjectStore
from .memory_store import MemoryObjectStore
from .snapshots import SnapshotManager

__all__ = [
    "BackupEntry",
    "BackupStamp",
    "FunnelDocument",
    "WriteResult",
    "FunnelStoreError",
    "StoreUnavailableError",
    "MissingParameterError",
    "BackupNotFoundError",
    "ObjectStore",
    "MemoryObjectStore",
    "build_object_store",
    "SnapshotManager",
]
