"""Shared types and dataclasses for services.

Provides typed alternatives to dict[str, Any] for better type safety.
"""

from dataclasses import dataclass, field

from db.models import AttachedFile, Document, SourceCitation


@dataclass
class ExtractionResult:
    """Text produced by a format extractor.

    A degraded result carries placeholder text (guidance, failure description)
    rather than document content. Only `text` is persisted.
    """

    text: str
    degraded: bool = False
    reason: str | None = None


@dataclass
class ProcessRequest:
    """Ingestion request for an uploaded document."""

    document_id: str
    file_path: str
    file_name: str
    file_type: str


@dataclass
class IngestionResult:
    """Outcome of processing one document."""

    success: bool
    document_id: str
    extracted_length: int = 0
    chunks_created: int = 0
    error: str | None = None
    details: str | None = None


@dataclass
class RelevanceSelection:
    """Documents chosen as prompt context for one question."""

    documents: list[Document] = field(default_factory=list)
    sources: list[SourceCitation] = field(default_factory=list)

    @property
    def has_context(self) -> bool:
        return bool(self.documents)

    def build_context(self, excerpt_chars: int) -> str:
        """Render selected documents as prompt excerpts.

        Each document contributes its first `excerpt_chars` characters.
        """
        return "\n\n---\n\n".join(
            f"Document: {doc.title}\nContent: {(doc.content or '')[:excerpt_chars]}..."
            for doc in self.documents
        )


@dataclass
class ChatTurn:
    """A user message to answer."""

    message: str
    conversation_id: str | None = None
    files: list[AttachedFile] = field(default_factory=list)


@dataclass
class ChatResult:
    """Assistant answer and the context that informed it."""

    response: str
    conversation_id: str
    sources: list[SourceCitation] = field(default_factory=list)
    has_document_context: bool = False
