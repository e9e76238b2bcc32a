"""Standardized error responses for API endpoints.

Success bodies are endpoint-specific; every failure body carries an `error`
message plus a structured code and the request id.
"""

from enum import Enum
from typing import Any

from fastapi.responses import JSONResponse


class ResponseCode(str, Enum):
    """Response codes for API responses.

    Ranges: 0xxx=Success, 1xxx=Client Error, 2xxx=Server Error, 3xxx=External Service
    """

    # Success codes
    SUCCESS = "0000"
    DOCUMENT_PROCESSED = "0001"
    PROCESSING_FAILED = "0002"
    CONVERSATION_DELETED = "0003"

    # Client errors
    VALIDATION_ERROR = "1000"
    UNAUTHORIZED = "1001"
    DOCUMENT_NOT_FOUND = "1003"
    CONVERSATION_NOT_FOUND = "1004"
    NOT_FOUND = "1005"

    # Server errors
    INTERNAL_ERROR = "2000"
    STORAGE_ERROR = "2001"

    # External service errors
    LLM_ERROR = "3000"


# Response messages mapped to codes
RESPONSE_MESSAGES: dict[ResponseCode, str] = {
    ResponseCode.SUCCESS: "Operation completed successfully",
    ResponseCode.DOCUMENT_PROCESSED: "Document processed successfully",
    ResponseCode.PROCESSING_FAILED: "Text extraction failed",
    ResponseCode.CONVERSATION_DELETED: "Conversation deleted successfully",
    ResponseCode.VALIDATION_ERROR: "Request validation failed",
    ResponseCode.UNAUTHORIZED: "Authentication required",
    ResponseCode.DOCUMENT_NOT_FOUND: "Document not found",
    ResponseCode.CONVERSATION_NOT_FOUND: "Conversation not found",
    ResponseCode.NOT_FOUND: "Resource not found",
    ResponseCode.INTERNAL_ERROR: "An unexpected error occurred",
    ResponseCode.STORAGE_ERROR: "Failed to download file",
    ResponseCode.LLM_ERROR: "Failed to generate a response",
}

# HTTP status codes for each response code
HTTP_STATUS_MAP: dict[ResponseCode, int] = {
    ResponseCode.SUCCESS: 200,
    ResponseCode.DOCUMENT_PROCESSED: 200,
    ResponseCode.PROCESSING_FAILED: 200,  # Don't fail the upload
    ResponseCode.CONVERSATION_DELETED: 200,
    ResponseCode.VALIDATION_ERROR: 422,
    ResponseCode.UNAUTHORIZED: 401,
    ResponseCode.DOCUMENT_NOT_FOUND: 404,
    ResponseCode.CONVERSATION_NOT_FOUND: 404,
    ResponseCode.NOT_FOUND: 404,
    ResponseCode.INTERNAL_ERROR: 500,
    ResponseCode.STORAGE_ERROR: 500,
    ResponseCode.LLM_ERROR: 500,
}


def get_message(code: ResponseCode) -> str:
    """Get the message for a response code."""
    return RESPONSE_MESSAGES.get(code, "Unknown error")


def get_http_status(code: ResponseCode) -> int:
    """Get HTTP status code for a response code."""
    return HTTP_STATUS_MAP.get(code, 500)


def error_dict(
    code: ResponseCode,
    custom_message: str | None = None,
    error_details: dict[str, Any] | None = None,
    request_id: str | None = None,
) -> dict[str, Any]:
    """Build a standardized error response dictionary."""
    body: dict[str, Any] = {
        "error": custom_message or get_message(code),
        "code": code.value,
        "request_id": request_id,
    }
    if error_details:
        body["error_details"] = error_details
    return body


def error_response(
    code: ResponseCode,
    custom_message: str | None = None,
    request_id: str | None = None,
) -> JSONResponse:
    """Create a JSONResponse with error format."""
    return JSONResponse(
        content=error_dict(code, custom_message, request_id=request_id),
        status_code=get_http_status(code),
    )
