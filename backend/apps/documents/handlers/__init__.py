"""Document handlers."""

from apps.documents.handlers.get_document import get_document
from apps.documents.handlers.list_documents import list_documents
from apps.documents.handlers.process_document import process_document

__all__ = [
    "process_document",
    "list_documents",
    "get_document",
]
