"""Firestore document schemas.

These represent the structure of records stored in Firestore,
not API request/response schemas.

Collections:
- `documents/{document_id}` - uploaded files and their extracted text
- `documents/{document_id}/chunks/{chunk_id}` - bounded slices of its text
- `conversations/{conversation_id}` - chat threads owned by a user
- `conversations/{conversation_id}/messages/{message_id}` - append-only turns
"""

from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, Field

# --- Documents ---


class UploadMetadata(BaseModel):
    """Keys written by the uploading client."""

    original_name: str | None = None
    storage_path: str | None = None


class ProcessingMetadata(BaseModel):
    """Keys written once text extraction has been attempted."""

    processed: bool = Field(default=False, description="Text extraction succeeded")
    processed_at: datetime | None = Field(None, description="When extraction ran")
    word_count: int | None = Field(None, description="Whitespace token count")
    processing_error: str | None = Field(
        None, description="Failure reason when processing failed"
    )

    @property
    def status(self) -> str:
        """Lifecycle state: uploaded, processed or processing_failed."""
        if self.processed:
            return "processed"
        if self.processing_error is not None:
            return "processing_failed"
        return "uploaded"


class Document(BaseModel):
    """Uploaded document record."""

    id: str
    user_id: str
    title: str = Field(..., description="Original filename")
    file_name: str | None = Field(None, description="Name of the stored blob")
    file_type: str = Field(..., description="Declared MIME type")
    file_size: int = Field(default=0, description="Size in bytes")
    file_path: str | None = Field(None, description="Path in blob storage")
    content: str | None = Field(None, description="Extracted text")
    metadata: ProcessingMetadata = Field(default_factory=ProcessingMetadata)
    upload: UploadMetadata = Field(default_factory=UploadMetadata)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class DocumentChunk(BaseModel):
    """A bounded slice of a document's extracted text."""

    id: str | None = None
    document_id: str
    content: str
    chunk_index: int = Field(..., ge=0)
    chunk_size: int = Field(..., ge=0)
    created_at: datetime | None = None


# --- Conversations ---


class Conversation(BaseModel):
    """Chat thread owned by a user."""

    id: str
    user_id: str
    title: str = "New Chat"
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AttachedFile(BaseModel):
    """File reference sent along with a user turn."""

    id: str | None = None
    name: str
    type: str | None = None
    size: int | None = None
    path: str | None = None


class SourceCitation(BaseModel):
    """Document that informed an assistant answer."""

    document_id: str
    document_title: str
    page: int | None = None
    relevance_score: float = 1.0


class UserMessageMetadata(BaseModel):
    """Metadata of a user turn."""

    type: Literal["user"] = "user"
    files: list[AttachedFile] = Field(default_factory=list)


class AssistantMessageMetadata(BaseModel):
    """Metadata of an assistant turn."""

    type: Literal["assistant"] = "assistant"
    sources: list[SourceCitation] = Field(default_factory=list)
    has_document_context: bool = False


MessageMetadata = Annotated[
    UserMessageMetadata | AssistantMessageMetadata,
    Field(discriminator="type"),
]


class Message(BaseModel):
    """Chat message record. Never edited once written."""

    id: str | None = None
    conversation_id: str
    role: Literal["user", "assistant"]
    content: str
    metadata: MessageMetadata
    created_at: datetime | None = None
