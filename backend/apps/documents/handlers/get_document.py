"""GET /documents/{document_id} - One document with its processing note."""

from fastapi import Depends, HTTPException
from pydantic import BaseModel

from apps.documents.handlers.list_documents import DocumentInfo
from db import FirestoreService
from dependencies import get_current_user_id, get_firestore_service
from responses import ResponseCode, error_dict


class DocumentDetail(DocumentInfo):
    """Document summary plus extracted text and chunk count."""

    content: str | None = None
    chunk_count: int = 0


class DocumentDetailResponse(BaseModel):
    document: DocumentDetail


async def get_document(
    document_id: str,
    user_id: str = Depends(get_current_user_id),
    firestore: FirestoreService = Depends(get_firestore_service),
) -> DocumentDetailResponse:
    document = await firestore.get_document(document_id, user_id)
    if document is None:
        raise HTTPException(
            status_code=404, detail=error_dict(ResponseCode.DOCUMENT_NOT_FOUND)
        )

    chunks = await firestore.get_chunks(document_id)
    info = DocumentInfo.from_document(document)

    return DocumentDetailResponse(
        document=DocumentDetail(
            **info.model_dump(), content=document.content, chunk_count=len(chunks)
        )
    )
