"""Services module for the ingestion and chat pipeline.

Contains:
- Text extraction per MIME type
- Sentence-aware chunking
- Keyword relevance selection
- Ingestion orchestration
- Chat orchestration

Note: Service instances are managed via dependencies.py using FastAPI DI.
"""

from services.chat import ChatService, ConversationNotFoundError
from services.chunker import Chunker, chunk_text
from services.document import DocumentExtractor
from services.ingestion import DocumentNotFoundError, IngestionService
from services.relevance import RelevanceSelector
from services.types import (
    ChatResult,
    ChatTurn,
    ExtractionResult,
    IngestionResult,
    ProcessRequest,
    RelevanceSelection,
)

__all__ = [
    # Core services
    "ChatService",
    "IngestionService",
    "RelevanceSelector",
    # Document services
    "Chunker",
    "chunk_text",
    "DocumentExtractor",
    # Errors
    "ConversationNotFoundError",
    "DocumentNotFoundError",
    # Types
    "ChatResult",
    "ChatTurn",
    "ExtractionResult",
    "IngestionResult",
    "ProcessRequest",
    "RelevanceSelection",
]
