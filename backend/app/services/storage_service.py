"""Supabase Storage client for a single bucket."""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Callable
from urllib.parse import quote

from app.config import settings
from app.services.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

UPLOAD_CHUNK_SIZE = 64 * 1024  # 64 KB

ProgressCallback = Callable[[int, int], None]


class StorageBucket(SupabaseClient):
    """list / upload / remove / public URL on ``/storage/v1`` for one bucket."""

    def __init__(self, bucket: str | None = None, **kwargs: Any):
        super().__init__(**kwargs)
        self.bucket = bucket or settings.storage_bucket

    async def list(
        self,
        prefix: str = "",
        access_token: str | None = None,
        page_size: int | None = None,
    ) -> list[dict[str, Any]]:
        """Return every object entry under ``prefix``, following pagination."""
        limit = page_size or settings.storage_list_page_size
        entries: list[dict[str, Any]] = []
        offset = 0
        while True:
            resp = await self._request(
                "POST",
                f"/storage/v1/object/list/{self.bucket}",
                access_token=access_token,
                json={
                    "prefix": prefix,
                    "limit": limit,
                    "offset": offset,
                    "sortBy": {"column": "name", "order": "asc"},
                },
            )
            page = resp.json() or []
            entries.extend(page)
            if len(page) < limit:
                break
            offset += limit
        return entries

    async def upload(
        self,
        key: str,
        data: bytes,
        content_type: str = "application/octet-stream",
        cache_control: str | None = None,
        upsert: bool = True,
        on_progress: ProgressCallback | None = None,
        access_token: str | None = None,
    ) -> dict[str, Any]:
        """Upload ``data`` under ``key``, reporting ``(loaded, total)`` per chunk."""
        total = len(data)

        async def _body() -> AsyncIterator[bytes]:
            loaded = 0
            for start in range(0, total, UPLOAD_CHUNK_SIZE):
                chunk = data[start:start + UPLOAD_CHUNK_SIZE]
                yield chunk
                loaded += len(chunk)
                if on_progress:
                    on_progress(loaded, total)

        resp = await self._request(
            "POST",
            f"/storage/v1/object/{self.bucket}/{quote(key)}",
            access_token=access_token,
            headers={
                "Content-Type": content_type,
                "Content-Length": str(total),
                "Cache-Control": f"max-age={cache_control or settings.storage_cache_control}",
                "x-upsert": "true" if upsert else "false",
            },
            content=_body(),
        )
        logger.info("Uploaded %s to bucket %s (%d bytes)", key, self.bucket, total)
        return self._json(resp) or {}

    async def remove(self, keys: list[str], access_token: str | None = None) -> list[dict[str, Any]]:
        resp = await self._request(
            "DELETE",
            f"/storage/v1/object/{self.bucket}",
            access_token=access_token,
            json={"prefixes": keys},
        )
        return self._json(resp) or []

    def get_public_url(self, key: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{self.bucket}/{quote(key)}"
