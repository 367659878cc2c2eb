from __future__ import annotations


class FunnelStoreError(Exception):
    """Base class for errors raised by the persistence layer."""


class StoreUnavailableError(FunnelStoreError):
    """An object store call failed (network, filesystem, undecodable value)."""

    def __init__(self, operation: str, key: str, cause: BaseException | None = None):
        self.operation = operation
        self.key = key
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"{operation} {key!r} failed{detail}")


class MissingParameterError(FunnelStoreError):
    def __init__(self, name: str, message: str | None = None):
        self.name = name
        super().__init__(message or f"Missing {name}")


class BackupNotFoundError(FunnelStoreError):
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Backup not found: {key}")
