from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class FunnelDocument(BaseModel):
    """
    Shape of the stored funnel dataset:
      { "tiles": [...], "table": [...] }

    Records are opaque and unknown top-level fields are kept.
    """

    model_config = ConfigDict(extra="allow")

    tiles: list[Any] = Field(default_factory=list)
    table: list[Any] = Field(default_factory=list)

    @classmethod
    def empty(cls) -> dict[str, Any]:
        return cls().model_dump(mode="json")


def has_content(doc: Any) -> bool:
    """True when doc has at least one entry in tiles or table."""
    if not isinstance(doc, dict):
        return False
    for field in ("tiles", "table"):
        items = doc.get(field)
        if isinstance(items, list) and items:
            return True
    return False


@dataclass(frozen=True, order=True)
class BackupStamp:
    """
    Second-resolution UTC instant rendered as YYYY-MM-DD-HH-MM-SS.

    Comparison goes through the text, which sorts chronologically. Two backups taken in the same second share a stamp.
    """

    text: str

    @classmethod
    def from_datetime(cls, moment: datetime) -> "BackupStamp":
        if moment.tzinfo is not None:
            moment = moment.astimezone(timezone.utc)
        iso = moment.replace(microsecond=0, tzinfo=None).isoformat(timespec="seconds")
        return cls(iso.replace("T", "-").replace(":", "-"))

    @classmethod
    def from_key(cls, key: str, prefix: str) -> "BackupStamp":
        return cls(key[len(prefix):] if key.startswith(prefix) else key)

    def key(self, prefix: str) -> str:
        return f"{prefix}{self.text}"

    def __str__(self) -> str:
        return self.text


class BackupEntry(BaseModel):
    key: str
    date: str


class WriteResult(BaseModel):
    success: bool = True
    timestamp: str


def iso_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a Z suffix."""
    moment = moment.astimezone(timezone.utc) if moment.tzinfo else moment.replace(tzinfo=timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
