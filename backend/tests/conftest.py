"""Pytest configuration and fixtures for StudyDesk tests."""

import io
import os
import sys

# Set required env vars BEFORE any imports that might trigger Settings
os.environ.setdefault("ANTHROPIC_API_KEY", "test-anthropic-key")
os.environ.setdefault(
    "FIREBASE_CREDENTIALS", '{"type":"service_account","project_id":"test"}'
)
os.environ.setdefault("FIREBASE_STORAGE_BUCKET", "test-bucket.appspot.com")

# Add backend to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import uuid
from collections import defaultdict
from datetime import UTC, datetime, timedelta
from itertools import count
from unittest.mock import AsyncMock

import fitz
import pytest
from docx import Document as DocxDocument

from config import get_settings
from db.models import (
    Conversation,
    Document,
    DocumentChunk,
    Message,
    ProcessingMetadata,
)
from llm import BaseLLMService


class InMemoryFirestore:
    """In-memory implementation of the FirestoreService contract."""

    def __init__(self) -> None:
        self.documents: dict[str, Document] = {}
        self.chunks: dict[str, list[DocumentChunk]] = defaultdict(list)
        self.conversations: dict[str, Conversation] = {}
        self.messages: dict[str, list[Message]] = defaultdict(list)
        self.fail_chunk_inserts = False
        self.fail_content_saves = False
        self._ticks = count()
        self._epoch = datetime(2024, 1, 1, tzinfo=UTC)

    def _now(self) -> datetime:
        # Strictly increasing so ordering never ties
        return self._epoch + timedelta(seconds=next(self._ticks))

    # --- test helpers ---

    def add_document(
        self,
        user_id: str,
        title: str,
        content: str | None = None,
        file_type: str = "text/plain",
    ) -> Document:
        now = self._now()
        document = Document(
            id=str(uuid.uuid4()),
            user_id=user_id,
            title=title,
            file_type=file_type,
            file_size=len(content or ""),
            file_path=f"{user_id}/{title}",
            content=content,
            metadata=ProcessingMetadata(
                processed=content is not None,
                processed_at=now if content is not None else None,
            ),
            created_at=now,
            updated_at=now,
        )
        self.documents[document.id] = document
        return document

    # --- documents ---

    async def get_document(self, document_id: str, user_id: str) -> Document | None:
        document = self.documents.get(document_id)
        if document is None or document.user_id != user_id:
            return None
        return document

    async def list_documents(
        self, user_id: str, limit: int | None = None, processed_only: bool = False
    ) -> list[Document]:
        documents = [d for d in self.documents.values() if d.user_id == user_id]
        if processed_only:
            documents = [
                d for d in documents if d.metadata.processed and d.content is not None
            ]
        documents.sort(key=lambda d: d.updated_at, reverse=True)
        return documents[:limit] if limit else documents

    async def save_document_content(
        self, document_id: str, content: str, metadata: ProcessingMetadata
    ) -> None:
        if self.fail_content_saves:
            raise RuntimeError("firestore unavailable")
        self.documents[document_id] = self.documents[document_id].model_copy(
            update={"content": content, "metadata": metadata, "updated_at": self._now()}
        )

    async def save_processing_failure(
        self, document_id: str, metadata: ProcessingMetadata
    ) -> None:
        self.documents[document_id] = self.documents[document_id].model_copy(
            update={"content": None, "metadata": metadata, "updated_at": self._now()}
        )

    # --- chunks ---

    async def delete_chunks(self, document_id: str) -> int:
        return len(self.chunks.pop(document_id, []))

    async def insert_chunks(self, chunks: list[DocumentChunk]) -> int:
        if self.fail_chunk_inserts:
            raise RuntimeError("batch write failed")
        for chunk in chunks:
            self.chunks[chunk.document_id].append(
                chunk.model_copy(
                    update={"id": str(uuid.uuid4()), "created_at": self._now()}
                )
            )
        return len(chunks)

    async def get_chunks(self, document_id: str) -> list[DocumentChunk]:
        return sorted(self.chunks[document_id], key=lambda c: c.chunk_index)

    # --- conversations ---

    async def create_conversation(self, user_id: str, title: str) -> Conversation:
        now = self._now()
        conversation = Conversation(
            id=str(uuid.uuid4()),
            user_id=user_id,
            title=title,
            created_at=now,
            updated_at=now,
        )
        self.conversations[conversation.id] = conversation
        return conversation

    async def get_conversation(
        self, conversation_id: str, user_id: str
    ) -> Conversation | None:
        conversation = self.conversations.get(conversation_id)
        if conversation is None or conversation.user_id != user_id:
            return None
        return conversation

    async def list_conversations(
        self, user_id: str, limit: int = 50
    ) -> list[Conversation]:
        conversations = [c for c in self.conversations.values() if c.user_id == user_id]
        conversations.sort(key=lambda c: c.updated_at, reverse=True)
        return conversations[:limit]

    async def touch_conversation(self, conversation_id: str) -> None:
        self.conversations[conversation_id] = self.conversations[
            conversation_id
        ].model_copy(update={"updated_at": self._now()})

    async def delete_conversation(self, conversation_id: str, user_id: str) -> bool:
        if await self.get_conversation(conversation_id, user_id) is None:
            return False
        del self.conversations[conversation_id]
        self.messages.pop(conversation_id, None)
        return True

    # --- messages ---

    async def add_message(self, message: Message) -> Message:
        stored = message.model_copy(
            update={"id": str(uuid.uuid4()), "created_at": self._now()}
        )
        self.messages[message.conversation_id].append(stored)
        return stored

    async def get_messages(
        self, conversation_id: str, limit: int | None = None
    ) -> list[Message]:
        messages = sorted(self.messages[conversation_id], key=lambda m: m.created_at)
        return messages[-limit:] if limit else messages

    async def health_check(self) -> dict:
        return {"status": "healthy", "latency_ms": 0.1}


@pytest.fixture
def settings():
    """Real settings built from the test environment."""
    return get_settings()


@pytest.fixture
def firestore():
    """In-memory Firestore stand-in."""
    return InMemoryFirestore()


@pytest.fixture
def mock_storage():
    """Mock blob storage returning a small text file."""
    storage = AsyncMock()
    storage.download.return_value = b"Hello world. This is a test."
    storage.health_check.return_value = {"status": "healthy", "latency_ms": 0.2}
    return storage


@pytest.fixture
def mock_llm():
    """Mock completion backend."""
    llm = AsyncMock(spec=BaseLLMService)
    llm.generate.return_value = "Photosynthesis turns light into chemical energy."
    return llm


@pytest.fixture
def pdf_bytes():
    """Two-page PDF with one line of text per page."""
    doc = fitz.open()
    for line in ("Photosynthesis happens in chloroplasts", "Light reactions come first"):
        page = doc.new_page()
        page.insert_text((72, 72), line)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def blank_pdf_bytes():
    """PDF with a single empty page."""
    doc = fitz.open()
    doc.new_page()
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def docx_bytes():
    """Word document with two paragraphs and a table."""
    doc = DocxDocument()
    doc.add_paragraph("Cell biology basics.")
    doc.add_paragraph("Mitochondria produce energy.")
    table = doc.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "Organelle"
    table.rows[0].cells[1].text = "Function"
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def empty_docx_bytes():
    """Word document without any text."""
    buffer = io.BytesIO()
    DocxDocument().save(buffer)
    return buffer.getvalue()
