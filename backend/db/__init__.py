"""Persistence collaborators: Firestore records and Cloud Storage blobs."""

from db.firestore import FirestoreService
from db.storage import BlobStorage, StorageDownloadError

__all__ = [
    "BlobStorage",
    "FirestoreService",
    "StorageDownloadError",
]
