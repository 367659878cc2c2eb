from __future__ import annotations

from pathlib import Path


def project_root() -> Path:
    # persistence/paths.py -> persistence -> project root
    return Path(__file__).resolve().parents[1]


def data_dir() -> Path:
    return project_root() / "data"


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def key_filename(key: str) -> str:
    # Keys become flat file names; no directories, no traversal.
    safe = key.strip().replace("/", "_").replace("\\", "_")
    if not safe or safe in (".", ".."):
        raise ValueError(f"invalid store key: {key!r}")
    return f"{safe}.json"
