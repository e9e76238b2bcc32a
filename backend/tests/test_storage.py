"""Tests for the Cloud Storage wrapper."""

from unittest.mock import MagicMock

import pytest
from google.api_core.exceptions import NotFound
from google.auth.exceptions import RefreshError

from db.storage import BlobStorage, StorageDownloadError


class TestBlobStorage:
    """Tests for BlobStorage with a stubbed bucket."""

    def setup_method(self):
        """Build a BlobStorage around a fake bucket without a Firebase app."""
        self.bucket = MagicMock()
        self.storage = BlobStorage.__new__(BlobStorage)
        self.storage.bucket_name = "test-bucket"
        self.storage._bucket = self.bucket

    @pytest.mark.asyncio
    async def test_download(self):
        self.bucket.blob.return_value.download_as_bytes.return_value = b"data"

        assert await self.storage.download("user-1/notes.txt") == b"data"
        self.bucket.blob.assert_called_once_with("user-1/notes.txt")

    @pytest.mark.asyncio
    async def test_download_missing_file(self):
        self.bucket.blob.return_value.download_as_bytes.side_effect = NotFound(
            "no such object"
        )

        with pytest.raises(StorageDownloadError, match="Failed to download file"):
            await self.storage.download("user-1/missing.txt")

    @pytest.mark.asyncio
    async def test_health_check_healthy(self):
        self.bucket.exists.return_value = True

        health = await self.storage.health_check()

        assert health["status"] == "healthy"
        assert "latency_ms" in health

    @pytest.mark.asyncio
    async def test_health_check_missing_bucket(self):
        self.bucket.exists.return_value = False

        health = await self.storage.health_check()

        assert health == {
            "status": "unhealthy",
            "error": "Bucket test-bucket not found",
        }

    @pytest.mark.asyncio
    async def test_health_check_credential_failure_is_unhealthy(self):
        self.bucket.exists.side_effect = RefreshError("token expired")

        health = await self.storage.health_check()

        assert health["status"] == "unhealthy"
        assert "token expired" in health["error"]
