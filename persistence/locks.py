from __future__ import annotations

import threading
from pathlib import Path


class PathLockRegistry:
    """
    One lock per resolved file path, so a single get/put/delete on a key is
    atomic within the process. Multi-call sequences are not covered.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def lock_for(self, path: Path) -> threading.Lock:
        key = str(path.resolve())
        with self._guard:
            return self._locks.setdefault(key, threading.Lock())


GLOBAL_PATH_LOCKS = PathLockRegistry()
