from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def encode_json(payload: Any) -> str:
    """Compact JSON text used for values sent to remote stores."""
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def decode_json(raw: str | bytes | None) -> Any | None:
    """
    Decode a stored JSON value.

    Returns None for missing or blank values; raises ValueError on invalid JSON.
    """
    if raw is None:
        return None
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8")
    if not raw.strip():
        return None
    return json.loads(raw)


def read_json(path: Path) -> Any | None:
    """
    Read JSON from disk.

    Returns None for missing or empty files. Invalid JSON raises ValueError.
    """
    if not path.exists():
        return None
    return decode_json(path.read_text(encoding="utf-8"))


def atomic_write_json(path: Path, payload: Any, *, indent: int = 2, sort_keys: bool = False) -> None:
    """
    Atomically write JSON to disk by writing to a temp file then replacing.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=indent, sort_keys=sort_keys, ensure_ascii=False)
        f.write("\n")
    tmp_path.replace(path)
