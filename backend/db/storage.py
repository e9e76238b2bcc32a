"""Blob storage access for uploaded files (Firebase Cloud Storage)."""

import asyncio
import logging
import time
from typing import Any

from firebase_admin import storage
from google.api_core.exceptions import GoogleAPIError

from config import get_settings
from db.firebase import get_firebase_app

logger = logging.getLogger(__name__)


class StorageDownloadError(Exception):
    """Raised when an uploaded file cannot be fetched from storage."""


class BlobStorage:
    """Reads uploaded files from the documents bucket."""

    def __init__(self, bucket_name: str | None = None) -> None:
        app = get_firebase_app()
        self.bucket_name = bucket_name or get_settings().firebase_storage_bucket
        self._bucket = storage.bucket(self.bucket_name, app=app)

    async def download(self, path: str) -> bytes:
        """Download a file's bytes.

        Raises:
            StorageDownloadError: If the file is missing or the request fails.
        """
        try:
            blob = self._bucket.blob(path)
            data = await asyncio.to_thread(blob.download_as_bytes)
            logger.debug("Downloaded %s (%d bytes)", path, len(data))
            return data

        except GoogleAPIError as e:
            logger.error("Download of %s failed: %s", path, e)
            raise StorageDownloadError(f"Failed to download file: {e}") from e

    async def health_check(self) -> dict[str, Any]:
        """Check the bucket is reachable."""
        start = time.time()
        try:
            exists = await asyncio.to_thread(self._bucket.exists)
            if not exists:
                return {
                    "status": "unhealthy",
                    "error": f"Bucket {self.bucket_name} not found",
                }

            latency = (time.time() - start) * 1000
            return {"status": "healthy", "latency_ms": round(latency, 2)}
        except Exception as e:
            return {"status": "unhealthy", "error": str(e)}
