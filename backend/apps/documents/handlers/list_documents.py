"""GET /documents - List the caller's documents with processing status."""

import logging
from datetime import datetime

from fastapi import Depends, Query
from pydantic import BaseModel, Field

from db import FirestoreService
from db.models import Document
from dependencies import get_current_user_id, get_firestore_service

logger = logging.getLogger(__name__)


# --- Response Schemas ---


class DocumentInfo(BaseModel):
    """Document summary without its extracted text."""

    id: str
    title: str
    file_type: str
    file_size: int
    status: str = Field(..., description="uploaded, processed or processing_failed")
    word_count: int | None = None
    processing_error: str | None = Field(
        None, description="Why processing failed, if it did"
    )
    processed_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_document(cls, document: Document) -> "DocumentInfo":
        return cls(
            id=document.id,
            title=document.title,
            file_type=document.file_type,
            file_size=document.file_size,
            status=document.metadata.status,
            word_count=document.metadata.word_count,
            processing_error=document.metadata.processing_error,
            processed_at=document.metadata.processed_at,
            updated_at=document.updated_at,
        )


class DocumentListResponse(BaseModel):
    """Response for listing documents."""

    documents: list[DocumentInfo]
    total_count: int


# --- Handler ---


async def list_documents(
    limit: int = Query(default=50, ge=1, le=200),
    user_id: str = Depends(get_current_user_id),
    firestore: FirestoreService = Depends(get_firestore_service),
) -> DocumentListResponse:
    """List documents, most recently updated first."""
    documents = await firestore.list_documents(user_id, limit=limit)

    return DocumentListResponse(
        documents=[DocumentInfo.from_document(d) for d in documents],
        total_count=len(documents),
    )
