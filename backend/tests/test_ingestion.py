"""Tests for the ingestion orchestrator."""

import pytest

from db import StorageDownloadError
from services.chunker import Chunker
from services.document import PPTX, DocumentExtractor
from services.ingestion import (
    SOFT_FAILURE_MESSAGE,
    DocumentNotFoundError,
    IngestionService,
    count_words,
)
from services.types import ProcessRequest


def make_request(document, file_type="text/plain"):
    return ProcessRequest(
        document_id=document.id,
        file_path=document.file_path,
        file_name=document.title,
        file_type=file_type,
    )


class TestIngestionService:
    """Tests for IngestionService."""

    @pytest.fixture(autouse=True)
    def _service(self, firestore, mock_storage):
        self.firestore = firestore
        self.storage = mock_storage
        self.service = IngestionService(
            firestore=firestore,
            storage=mock_storage,
            extractor=DocumentExtractor(),
            chunker=Chunker(chunk_size=15),
        )
        self.document = firestore.add_document("user-1", "notes.txt")

    @pytest.mark.asyncio
    async def test_plain_text_processed(self):
        result = await self.service.process(make_request(self.document), "user-1")

        assert result.success
        assert result.extracted_length == len("Hello world. This is a test.")
        assert result.chunks_created == 2

        stored = self.firestore.documents[self.document.id]
        assert stored.content == "Hello world. This is a test."
        assert stored.metadata.processed is True
        assert stored.metadata.processing_error is None
        assert stored.metadata.processed_at is not None
        assert stored.metadata.word_count == 6
        self.storage.download.assert_awaited_once_with(self.document.file_path)

    @pytest.mark.asyncio
    async def test_chunks_stored_with_contiguous_ordinals(self):
        await self.service.process(make_request(self.document), "user-1")

        chunks = await self.firestore.get_chunks(self.document.id)
        assert [c.content for c in chunks] == ["Hello world", "This is a test"]
        assert [c.chunk_index for c in chunks] == [0, 1]
        assert [c.chunk_size for c in chunks] == [11, 14]

    @pytest.mark.asyncio
    async def test_pptx_stores_guidance_and_chunks(self):
        self.storage.download.return_value = b"\x00" * 2048
        self.service.chunker = Chunker(chunk_size=1000)

        result = await self.service.process(
            make_request(self.document, file_type=PPTX), "user-1"
        )

        stored = self.firestore.documents[self.document.id]
        assert result.success
        assert stored.content.startswith("PowerPoint file: PPTX (2KB)")
        assert stored.metadata.processed is True
        assert result.chunks_created > 0
        assert len(self.firestore.chunks[self.document.id]) == result.chunks_created

    @pytest.mark.asyncio
    async def test_unsupported_type_still_processed(self):
        result = await self.service.process(
            make_request(self.document, file_type="application/zip"), "user-1"
        )

        stored = self.firestore.documents[self.document.id]
        assert result.success
        assert stored.content == "Unsupported file type: application/zip"

    @pytest.mark.asyncio
    async def test_download_failure_leaves_document_untouched(self):
        self.storage.download.side_effect = StorageDownloadError("Failed to download")
        before = self.firestore.documents[self.document.id]

        with pytest.raises(StorageDownloadError):
            await self.service.process(make_request(self.document), "user-1")

        assert self.firestore.documents[self.document.id] == before
        assert self.firestore.chunks[self.document.id] == []

    @pytest.mark.asyncio
    async def test_other_users_document_not_found(self):
        with pytest.raises(DocumentNotFoundError):
            await self.service.process(make_request(self.document), "user-2")

        self.storage.download.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_save_failure_is_soft(self):
        self.firestore.fail_content_saves = True

        result = await self.service.process(make_request(self.document), "user-1")

        assert result.success is False
        assert result.error == SOFT_FAILURE_MESSAGE
        assert result.details == "firestore unavailable"

        stored = self.firestore.documents[self.document.id]
        assert stored.content is None
        assert stored.metadata.processed is False
        assert stored.metadata.processing_error == "firestore unavailable"
        assert stored.metadata.status == "processing_failed"

    @pytest.mark.asyncio
    async def test_chunk_insert_failure_swallowed(self):
        self.firestore.fail_chunk_inserts = True

        result = await self.service.process(make_request(self.document), "user-1")

        assert result.success
        assert result.chunks_created == 2
        assert self.firestore.documents[self.document.id].metadata.processed is True

    @pytest.mark.asyncio
    async def test_reprocessing_replaces_chunks(self):
        request = make_request(self.document)
        await self.service.process(request, "user-1")

        self.storage.download.return_value = b"One. Two. Three."
        self.service.chunker = Chunker(chunk_size=5)
        result = await self.service.process(request, "user-1")

        chunks = await self.firestore.get_chunks(self.document.id)
        assert [c.content for c in chunks] == ["One", "Two", "Three"]
        assert [c.chunk_index for c in chunks] == [0, 1, 2]
        assert result.chunks_created == 3

    @pytest.mark.asyncio
    async def test_reprocessing_same_file_keeps_ordinals_contiguous(self):
        request = make_request(self.document)

        await self.service.process(request, "user-1")
        await self.service.process(request, "user-1")

        chunks = await self.firestore.get_chunks(self.document.id)
        assert [c.chunk_index for c in chunks] == [0, 1]

    @pytest.mark.asyncio
    async def test_failed_reprocess_clears_earlier_content(self):
        request = make_request(self.document)
        await self.service.process(request, "user-1")
        assert self.firestore.documents[self.document.id].content is not None

        self.firestore.fail_content_saves = True
        result = await self.service.process(request, "user-1")

        stored = self.firestore.documents[self.document.id]
        assert result.success is False
        assert stored.metadata.processed is False
        assert stored.metadata.processing_error == "firestore unavailable"
        assert stored.content is None
        assert self.firestore.chunks[self.document.id] == []

    @pytest.mark.asyncio
    async def test_empty_text_creates_no_chunks(self):
        self.storage.download.return_value = b"   "

        result = await self.service.process(make_request(self.document), "user-1")

        assert result.success
        assert result.chunks_created == 0
        assert self.firestore.documents[self.document.id].metadata.word_count == 0


def test_count_words():
    assert count_words("  one two\n\nthree\t") == 3
    assert count_words("") == 0
