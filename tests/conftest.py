from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
import sys


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
# This avoids ModuleNotFoundError for imports like `import persistence...` under pytest import modes
# that don't automatically prepend the cwd/rootdir to sys.path.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

ADMIN_PASSWORD = "s3cret"


class FakeClock:
    """Deterministic UTC clock; advance with tick()."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def tick(self, seconds: float = 1) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def sandbox_project(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """
    Redirect persistence paths to a temp project directory so tests never touch real ./data.
    """
    import persistence.paths as paths

    monkeypatch.setattr(paths, "project_root", lambda: tmp_path)
    monkeypatch.setattr(paths, "data_dir", lambda: tmp_path / "data")
    return tmp_path


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store():
    from persistence import MemoryObjectStore

    return MemoryObjectStore()


@pytest.fixture
def manager(store, clock):
    from persistence import SnapshotManager

    return SnapshotManager(store, max_backups=3, clock=clock)


@pytest.fixture
def make_settings(sandbox_project: Path):
    from settings import Settings

    def _make(**overrides):
        values = dict(
            admin_password=ADMIN_PASSWORD,
            store_backend="memory",
            data_dir=str(sandbox_project / "data"),
            redis_url="",
            blob_token="",
            blob_api_url="https://blob.vercel-storage.com",
            store_timeout_seconds=5.0,
            data_key="funnel_data",
            backup_prefix="funnel_backup_",
            max_backups=10,
            log_level="INFO",
            debug_log_requests=True,
        )
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {ADMIN_PASSWORD}"}
