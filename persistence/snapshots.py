from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable

from .documents import BackupEntry, BackupStamp, FunnelDocument, WriteResult, has_content, iso_timestamp
from .errors import BackupNotFoundError, MissingParameterError
from .interfaces import ObjectStore

logger = logging.getLogger(__name__)

DEFAULT_DATA_KEY = "funnel_data"
DEFAULT_BACKUP_PREFIX = "funnel_backup_"
DEFAULT_MAX_BACKUPS = 10


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SnapshotManager:
    """
    Owns the current funnel document and its rolling backups.

    Layout in the object store:
      <data_key>                      current document
      <backup_prefix><BackupStamp>    one historical document per save

    save() is read -> backup -> prune -> commit with no lock or compare-and-swap
    between the steps. Concurrent saves can lose an update or leave
    max_backups + 1 backups until the next save prunes; callers that need
    serialized writes coordinate outside this class.
    """

    def __init__(
        self,
        store: ObjectStore,
        *,
        data_key: str = DEFAULT_DATA_KEY,
        backup_prefix: str = DEFAULT_BACKUP_PREFIX,
        max_backups: int = DEFAULT_MAX_BACKUPS,
        clock: Callable[[], datetime] = _utcnow,
    ):
        if max_backups < 1:
            raise ValueError("max_backups must be >= 1")
        if not backup_prefix or data_key.startswith(backup_prefix):
            raise ValueError("data_key must not live under backup_prefix")
        self._store = store
        self._data_key = data_key
        self._backup_prefix = backup_prefix
        self._max_backups = max_backups
        self._clock = clock

    @property
    def store(self) -> ObjectStore:
        return self._store

    @property
    def max_backups(self) -> int:
        return self._max_backups

    async def read_current(self) -> Any:
        """Current document, or the empty document when missing or unreadable."""
        try:
            doc = await self._store.get(self._data_key)
        except Exception as e:
            logger.warning("READ CURRENT: failed to read %r, serving empty document: %r", self._data_key, e)
            return FunnelDocument.empty()
        if not isinstance(doc, dict):
            if doc is not None:
                logger.warning("READ CURRENT: %r holds %s, serving empty document", self._data_key, type(doc).__name__)
            return FunnelDocument.empty()
        return doc

    async def list_backups(self) -> list[BackupEntry]:
        keys = await self._store.list_keys(self._backup_prefix)
        stamps = sorted(
            ((BackupStamp.from_key(k, self._backup_prefix), k) for k in keys),
            reverse=True,
        )
        return [BackupEntry(key=key, date=str(stamp)) for stamp, key in stamps]

    async def restore(self, key: str | None) -> Any:
        """Return a backup's stored value as-is. Does not touch the current document."""
        if not key or not key.strip():
            raise MissingParameterError("key", "Missing backup key")
        # Only keys under the backup prefix are restorable, never the live slot.
        if not key.startswith(self._backup_prefix):
            raise BackupNotFoundError(key)
        doc = await self._store.get(key)
        if doc is None:
            raise BackupNotFoundError(key)
        return doc

    async def save(self, document: Any) -> WriteResult:
        try:
            existing = await self._store.get(self._data_key)
        except Exception as e:
            logger.warning("SAVE: could not read current document, skipping backup: %r", e)
            existing = None

        if has_content(existing):
            backup_key = BackupStamp.from_datetime(self._clock()).key(self._backup_prefix)
            await self._store.put(backup_key, existing)
            logger.info("SAVE: backed up current document to %s", backup_key)

        await self.prune()
        return await self._commit(document)

    async def import_document(self, document: Any) -> WriteResult:
        """Overwrite the current document without backup or pruning."""
        return await self._commit(document)

    async def prune(self) -> list[str]:
        """Delete the oldest backups beyond max_backups. Returns the deleted keys."""
        keys = await self._store.list_keys(self._backup_prefix)
        excess = len(keys) - self._max_backups
        if excess <= 0:
            return []
        ordered = sorted(keys, key=lambda k: BackupStamp.from_key(k, self._backup_prefix))
        doomed = ordered[:excess]
        for key in doomed:
            await self._store.delete(key)
        logger.info("PRUNE: removed %d old backup(s): %s", len(doomed), ", ".join(doomed))
        return doomed

    async def _commit(self, document: Any) -> WriteResult:
        await self._store.put(self._data_key, document)
        return WriteResult(success=True, timestamp=iso_timestamp(self._clock()))
