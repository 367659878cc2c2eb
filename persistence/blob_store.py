"""Vercel Blob backed object store.

Blobs are addressed by URL, not by name, so every read and delete first
resolves the pathname through the list endpoint:

    <key>.json  --list?prefix=-->  https://<store>.public.blob.vercel-storage.com/<key>.json

Writes go straight to PUT /<pathname> with random suffixes disabled, so the
pathname of a key never changes and an overwrite replaces the blob.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from json_store import decode_json, encode_json

from .errors import StoreUnavailableError
from .interfaces import ObjectStore

logger = logging.getLogger(__name__)

API_VERSION = "7"
SUFFIX = ".json"
LIST_PAGE_SIZE = 1000


class BlobObjectStore(ObjectStore):
    name = "blob"

    def __init__(
        self,
        token: str,
        *,
        api_url: str = "https://blob.vercel-storage.com",
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        if not token:
            raise ValueError("BLOB_READ_WRITE_TOKEN is required for the blob backend")
        self._api_url = api_url.rstrip("/")
        self._headers = {
            "authorization": f"Bearer {token}",
            "x-api-version": API_VERSION,
        }
        self._client = client or httpx.AsyncClient(timeout=timeout)

    # ------------------------------------------------------------------
    # ObjectStore
    # ------------------------------------------------------------------

    async def get(self, key: str) -> Any | None:
        try:
            url = await self._resolve_url(key)
            if url is None:
                return None
            resp = await self._client.get(url, headers={"cache-control": "no-cache"})
            if resp.status_code == 404:
                return None
            resp.raise_for_status()
            return decode_json(resp.content)
        except (httpx.HTTPError, ValueError) as e:
            raise StoreUnavailableError("get", key, e) from e

    async def put(self, key: str, value: Any) -> None:
        try:
            body = encode_json(value).encode("utf-8")
            resp = await self._client.put(
                f"{self._api_url}/{self._pathname(key)}",
                content=body,
                headers={
                    **self._headers,
                    "x-content-type": "application/json",
                    "x-add-random-suffix": "0",
                    "x-allow-overwrite": "1",
                    "x-cache-control-max-age": "0",
                },
            )
            resp.raise_for_status()
        except (httpx.HTTPError, TypeError, ValueError) as e:
            raise StoreUnavailableError("put", key, e) from e

    async def delete(self, key: str) -> None:
        try:
            url = await self._resolve_url(key)
            if url is None:
                return
            resp = await self._client.post(
                f"{self._api_url}/delete",
                json={"urls": [url]},
                headers=self._headers,
            )
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise StoreUnavailableError("delete", key, e) from e

    async def list_keys(self, prefix: str) -> list[str]:
        try:
            blobs = await self._list_blobs(prefix)
        except (httpx.HTTPError, ValueError) as e:
            raise StoreUnavailableError("list", prefix, e) from e
        keys = set()
        for blob in blobs:
            pathname = blob.get("pathname")
            if isinstance(pathname, str) and pathname.endswith(SUFFIX):
                keys.add(pathname[: -len(SUFFIX)])
        return sorted(k for k in keys if k.startswith(prefix))

    async def close(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _pathname(key: str) -> str:
        return f"{key}{SUFFIX}"

    async def _resolve_url(self, key: str) -> str | None:
        """Pathname -> blob URL, or None when no blob has exactly that pathname."""
        pathname = self._pathname(key)
        for blob in await self._list_blobs(pathname):
            if blob.get("pathname") == pathname and isinstance(blob.get("url"), str):
                return blob["url"]
        return None

    async def _list_blobs(self, prefix: str) -> list[dict[str, Any]]:
        blobs: list[dict[str, Any]] = []
        cursor: str | None = None
        while True:
            params: dict[str, Any] = {"prefix": prefix, "limit": LIST_PAGE_SIZE}
            if cursor:
                params["cursor"] = cursor
            resp = await self._client.get(self._api_url, params=params, headers=self._headers)
            resp.raise_for_status()
            payload = resp.json()
            if not isinstance(payload, dict):
                raise ValueError(f"unexpected blob list response: {payload!r}")
            page = payload.get("blobs")
            if isinstance(page, list):
                blobs.extend(b for b in page if isinstance(b, dict))
            cursor = payload.get("cursor")
            if not payload.get("hasMore") or not cursor:
                break
        logger.debug("BLOB LIST: prefix=%r -> %d blob(s)", prefix, len(blobs))
        return blobs
