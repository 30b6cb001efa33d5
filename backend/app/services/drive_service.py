"""Drive flow: list, upload and delete objects of the storage bucket.

A ``DriveView`` holds the file list for one request. Every failure is
logged and turned into ``view.error``; nothing is retried.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable

from app.config import settings
from app.schemas.files import FileItem
from app.services.storage_service import StorageBucket
from app.services.supabase_client import SupabaseError
from app.utils.filenames import sanitize_filename
from app.utils.storage import format_file_size

logger = logging.getLogger(__name__)


class DriveView:
    """Local view of the bucket contents."""

    def __init__(
        self,
        bucket: StorageBucket,
        access_token: str | None = None,
        on_progress: Callable[[int], None] | None = None,
    ):
        self._bucket = bucket
        self._token = access_token
        self._on_progress = on_progress
        self.files: list[FileItem] = []
        self.error: str | None = None
        self.uploading = False
        self.upload_progress = 0

    def _to_item(self, entry: dict[str, Any]) -> FileItem:
        name = entry["name"]
        size = int((entry.get("metadata") or {}).get("size") or 0)
        return FileItem(
            id=entry.get("id") or name,
            name=name,
            size=size,
            url=self._bucket.get_public_url(name),
            created_at=entry.get("created_at") or datetime.now(timezone.utc),
            size_display=format_file_size(size),
        )

    async def refresh(self) -> list[FileItem]:
        """Replace the local list with the bucket's current contents."""
        try:
            entries = await self._bucket.list(access_token=self._token)
            self.files = [self._to_item(entry) for entry in entries]
        except SupabaseError as exc:
            self.files = []
            self.error = f"Failed to fetch file list: {exc.message}"
            logger.error("Error fetching files: %s", exc)
        return self.files

    def _set_progress(self, loaded: int, total: int) -> None:
        self.upload_progress = round(loaded / total * 100) if total else 100
        if self._on_progress:
            self._on_progress(self.upload_progress)

    async def upload(
        self,
        filename: str,
        data: bytes,
        content_type: str | None = None,
    ) -> str | None:
        """Upload under the sanitized name, then re-list. Returns the key used."""
        self.uploading = True
        self._set_progress(0, 1)
        key = sanitize_filename(filename, max_length=settings.filename_max_length)
        try:
            if len(data) > settings.max_upload_bytes:
                raise SupabaseError(
                    f"File exceeds the {settings.max_upload_mb} MB upload limit", status_code=413
                )
            await self._bucket.upload(
                key,
                data,
                content_type=content_type or "application/octet-stream",
                cache_control=settings.storage_cache_control,
                upsert=True,
                on_progress=self._set_progress,
                access_token=self._token,
            )
        except SupabaseError as exc:
            self.error = f"File upload failed: {exc.message}"
            logger.error("Error uploading file %r: %s", filename, exc)
            return None
        finally:
            self.uploading = False
            self.upload_progress = 0

        await self.refresh()
        return key

    async def delete(self, name: str) -> bool:
        """Remove an object; drop it from the local list only on success."""
        try:
            await self._bucket.remove([name], access_token=self._token)
        except SupabaseError as exc:
            self.error = f"File delete failed: {exc.message}"
            logger.error("Error deleting file %r: %s", name, exc)
            return False
        self.files = [f for f in self.files if f.name != name]
        return True
