from __future__ import annotations

import os
from dataclasses import dataclass

BACKENDS = ("memory", "disk", "redis", "blob")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int, *, minimum: int = 0) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


def _env_backend() -> str:
    raw = (os.getenv("STORE_BACKEND") or "memory").strip().lower()
    # Vercel calls its Redis offering "KV".
    if raw == "kv":
        raw = "redis"
    if raw not in BACKENDS:
        raise ValueError(f"STORE_BACKEND must be one of {', '.join(BACKENDS)} (or kv), got {raw!r}")
    return raw


@dataclass(frozen=True)
class Settings:
    # Auth
    admin_password: str

    # Storage
    store_backend: str
    data_dir: str
    redis_url: str
    blob_token: str
    blob_api_url: str
    store_timeout_seconds: float

    # Document layout
    data_key: str
    backup_prefix: str
    max_backups: int

    # Logging
    log_level: str
    debug_log_requests: bool


def get_settings() -> Settings:
    from persistence.paths import data_dir

    # NOTE: an empty password rejects every admin call
    admin_password = os.getenv("ADMIN_PASSWORD", "")

    store_backend = _env_backend()
    data_dir_setting = os.getenv("DATA_DIR", "").strip() or str(data_dir())
    redis_url = (os.getenv("KV_URL") or os.getenv("REDIS_URL") or "").strip()
    blob_token = os.getenv("BLOB_READ_WRITE_TOKEN", "").strip()
    blob_api_url = (os.getenv("BLOB_API_URL", "https://blob.vercel-storage.com")).rstrip("/")
    store_timeout_seconds = float(_env_int("STORE_TIMEOUT_SECONDS", 10, minimum=1))

    data_key = os.getenv("DATA_KEY", "funnel_data")
    backup_prefix = os.getenv("BACKUP_PREFIX", "funnel_backup_")
    max_backups = _env_int("MAX_BACKUPS", 10, minimum=1)

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
    debug_log_requests = _env_bool("DEBUG_LOG_REQUESTS", False)

    return Settings(
        admin_password=admin_password,
        store_backend=store_backend,
        data_dir=data_dir_setting,
        redis_url=redis_url,
        blob_token=blob_token,
        blob_api_url=blob_api_url,
        store_timeout_seconds=store_timeout_seconds,
        data_key=data_key,
        backup_prefix=backup_prefix,
        max_backups=max_backups,
        log_level=log_level,
        debug_log_requests=debug_log_requests,
    )
