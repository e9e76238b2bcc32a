"""POST /documents/process - Extract, store and chunk an uploaded document."""

import logging

from fastapi import Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from db import StorageDownloadError
from dependencies import get_current_user_id, get_ingestion_service
from responses import ResponseCode, error_response, get_http_status
from services import DocumentNotFoundError, IngestionService, ProcessRequest

logger = logging.getLogger(__name__)


# --- Request/Response Schemas (API-specific) ---


class ProcessDocumentRequest(BaseModel):
    """Request body sent once the file is in blob storage."""

    model_config = ConfigDict(populate_by_name=True)

    document_id: str = Field(..., min_length=1, alias="documentId")
    file_path: str = Field(..., min_length=1, alias="filePath")
    file_name: str = Field(..., alias="fileName")
    file_type: str = Field(..., alias="fileType")


class ProcessDocumentResponse(BaseModel):
    """Outcome of processing; `success: false` still means the upload stands."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    document_id: str | None = Field(None, alias="documentId")
    extracted_length: int | None = Field(None, alias="extractedLength")
    chunks_created: int | None = Field(None, alias="chunksCreated")
    error: str | None = None
    details: str | None = None


# --- Error mapping ---

PROCESS_ERROR_MAP = {
    DocumentNotFoundError: ResponseCode.DOCUMENT_NOT_FOUND,
    StorageDownloadError: ResponseCode.STORAGE_ERROR,
}


# --- Handler ---


async def process_document(
    body: ProcessDocumentRequest,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    ingestion_service: IngestionService = Depends(get_ingestion_service),
) -> JSONResponse:
    """Process an uploaded document.

    Flow:
    1. Check the document belongs to the caller
    2. Download the file from storage
    3. Extract text for its MIME type
    4. Store text and processing metadata
    5. Chunk and store chunks
    """
    request_id = getattr(request.state, "request_id", None)

    try:
        result = await ingestion_service.process(
            ProcessRequest(
                document_id=body.document_id,
                file_path=body.file_path,
                file_name=body.file_name,
                file_type=body.file_type,
            ),
            user_id,
            request_id,
        )

    except tuple(PROCESS_ERROR_MAP.keys()) as e:
        code = PROCESS_ERROR_MAP[type(e)]
        log_fn = logger.warning if code.value.startswith("1") else logger.error
        log_fn("[%s] %s: %s", request_id, type(e).__name__, e)
        return error_response(code, str(e), request_id)

    if result.success:
        response = ProcessDocumentResponse(
            success=True,
            document_id=result.document_id,
            extracted_length=result.extracted_length,
            chunks_created=result.chunks_created,
        )
        code = ResponseCode.DOCUMENT_PROCESSED
    else:
        response = ProcessDocumentResponse(
            success=False, error=result.error, details=result.details
        )
        code = ResponseCode.PROCESSING_FAILED

    return JSONResponse(
        content=response.model_dump(by_alias=True, exclude_none=True),
        status_code=get_http_status(code),
    )
