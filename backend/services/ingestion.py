"""Document ingestion: download, extract, store, chunk.

Lifecycle of a document record:
    uploaded -> processing -> processed | processing_failed

Failure handling:
- Missing document or failed download aborts before any record is touched.
- Failure while storing extracted text marks the record failed, clears text
  and chunks of any earlier run, and is reported as a soft failure so the
  upload itself stands.
- Reprocessing replaces the previous chunks, so ordinals always run 0..n-1.
- Failure while storing chunks is logged and ignored; the document content
  alone is enough for relevance matching.
"""

import logging
from datetime import UTC, datetime

from db import BlobStorage, FirestoreService
from db.models import DocumentChunk, ProcessingMetadata
from services.chunker import Chunker
from services.document import DocumentExtractor
from services.types import IngestionResult, ProcessRequest

logger = logging.getLogger(__name__)

SOFT_FAILURE_MESSAGE = "Text extraction failed"


class DocumentNotFoundError(Exception):
    """Raised when a document does not exist for the requesting user."""


def count_words(text: str) -> int:
    """Whitespace-delimited token count."""
    return len(text.split())


class IngestionService:
    """Turns an uploaded file into stored text and chunks."""

    def __init__(
        self,
        firestore: FirestoreService,
        storage: BlobStorage,
        extractor: DocumentExtractor,
        chunker: Chunker,
    ) -> None:
        self.firestore = firestore
        self.storage = storage
        self.extractor = extractor
        self.chunker = chunker

    async def process(
        self,
        request: ProcessRequest,
        user_id: str,
        request_id: str | None = None,
    ) -> IngestionResult:
        """Process one uploaded document.

        Raises:
            DocumentNotFoundError: If the document is not the user's.
            StorageDownloadError: If the file cannot be downloaded.
        """
        logger.info(
            "[%s] Processing document: %s (%s)",
            request_id,
            request.file_name,
            request.file_type,
        )

        document = await self.firestore.get_document(request.document_id, user_id)
        if document is None:
            raise DocumentNotFoundError(f"Document {request.document_id} not found")

        data = await self.storage.download(request.file_path)

        try:
            result = await self.extractor.extract(
                data, request.file_type, request.file_name
            )
            text = result.text
            logger.info("[%s] Extracted text length: %d", request_id, len(text))

            await self.firestore.save_document_content(
                request.document_id,
                text,
                ProcessingMetadata(
                    processed=True,
                    processed_at=datetime.now(UTC),
                    word_count=count_words(text),
                ),
            )

        except Exception as e:
            logger.exception("[%s] Text extraction error", request_id)
            await self._mark_failed(request.document_id, str(e), request_id)
            return IngestionResult(
                success=False,
                document_id=request.document_id,
                error=SOFT_FAILURE_MESSAGE,
                details=str(e),
            )

        chunks = self.chunker.chunk_text(text)
        await self._store_chunks(request.document_id, chunks, request_id)

        logger.info(
            "[%s] Document processed successfully: %s (%d chunks)",
            request_id,
            request.document_id,
            len(chunks),
        )
        return IngestionResult(
            success=True,
            document_id=request.document_id,
            extracted_length=len(text),
            chunks_created=len(chunks),
        )

    async def _store_chunks(
        self, document_id: str, chunks: list[str], request_id: str | None
    ) -> None:
        """Replace the document's chunks with this run's chunks."""
        records = [
            DocumentChunk(
                document_id=document_id,
                content=chunk,
                chunk_index=index,
                chunk_size=len(chunk),
            )
            for index, chunk in enumerate(chunks)
        ]

        try:
            deleted = await self.firestore.delete_chunks(document_id)
            if deleted:
                logger.info(
                    "[%s] Replaced %d chunks from an earlier run", request_id, deleted
                )
            await self.firestore.insert_chunks(records)
        except Exception as e:
            logger.warning("[%s] Failed to create chunks: %s", request_id, e)

    async def _mark_failed(
        self, document_id: str, error: str, request_id: str | None
    ) -> None:
        """Record a processing failure and drop text and chunks of earlier runs."""
        try:
            await self.firestore.save_processing_failure(
                document_id,
                ProcessingMetadata(
                    processed=False,
                    processing_error=error,
                    processed_at=datetime.now(UTC),
                ),
            )
            await self.firestore.delete_chunks(document_id)
        except Exception as e:
            logger.error(
                "[%s] Could not record processing failure for %s: %s",
                request_id,
                document_id,
                e,
            )
